"""
URL normalization and reachability probing.
"""
import logging
import re
from urllib.parse import urlparse

import httpx

from speedaudit.config import settings
from speedaudit.core.exceptions import InvalidUrlError, UnreachableError

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def normalize_url(raw_url: str) -> str:
    """
    Normalize a user-supplied URL.

    Adds ``https://`` when no scheme is given and rejects anything that is not
    an http(s) URL with a host.
    """
    url = (raw_url or "").strip()
    if not url:
        raise InvalidUrlError(raw_url, "URL cannot be empty")

    if not _SCHEME_RE.match(url):
        url = f"https://{url}"

    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        parsed.port  # raises ValueError on a malformed port
    except ValueError as e:
        raise InvalidUrlError(raw_url, f"URL parsing error: {e}") from e

    if parsed.scheme not in ("http", "https"):
        raise InvalidUrlError(raw_url, f"Invalid URL scheme: {parsed.scheme} (must be http or https)")
    if not hostname or any(c.isspace() for c in parsed.netloc):
        raise InvalidUrlError(raw_url, "Invalid URL format: missing domain")

    return url


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` for a URL."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


async def probe(
    url: str,
    timeout_seconds: float | None = None,
    client: httpx.AsyncClient | None = None,
) -> int | None:
    """
    Send a HEAD request and return the final status code.

    Returns None when the host cannot be reached (DNS failure, refused
    connection, timeout).
    """
    timeout = timeout_seconds if timeout_seconds is not None else settings.REACHABILITY_TIMEOUT_SECONDS
    try:
        if client is not None:
            response = await client.head(url, timeout=timeout, follow_redirects=True)
        else:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own_client:
                response = await own_client.head(url)
        return response.status_code
    except httpx.HTTPError as e:
        logger.debug(f"[PROBE] {url} unreachable: {e!r}")
        return None


async def check_reachable(
    url: str,
    timeout_seconds: float | None = None,
    client: httpx.AsyncClient | None = None,
) -> int:
    """Raise UnreachableError unless the site answers with a status below 400."""
    status_code = await probe(url, timeout_seconds=timeout_seconds, client=client)
    if status_code is None or status_code >= 400:
        raise UnreachableError(url, status_code)
    logger.info(f"[PROBE] {url} reachable (HTTP {status_code})")
    return status_code
