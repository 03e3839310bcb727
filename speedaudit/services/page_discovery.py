"""
Page discovery.

Finds the homepage plus at most one high-value ("money") page per category by
probing a fixed table of well-known paths.
"""
import asyncio
import logging

import httpx

from speedaudit.config import settings
from speedaudit.models.audit import CandidatePage, PageCategory
from speedaudit.services.reachability import origin_of

logger = logging.getLogger(__name__)

# Probed in this order; the first path answering HTTP 200 wins its category.
PAGE_PATTERNS: tuple[tuple[PageCategory, tuple[str, ...]], ...] = (
    (PageCategory.SAAS, ("/pricing", "/plans", "/demo", "/signup", "/sign-up", "/register", "/get-started")),
    (PageCategory.ECOMMERCE, ("/products", "/shop", "/store", "/cart", "/checkout")),
    (PageCategory.BOOKING, ("/book", "/booking", "/schedule", "/appointment", "/reserve")),
    (PageCategory.CONTACT, ("/contact", "/contact-us", "/get-in-touch")),
)

HOMEPAGE_LABEL = "Homepage"


def label_for_path(path: str) -> str:
    """``/contact-us`` -> ``Contact us``."""
    text = path.lstrip("/").replace("-", " ")
    return text[:1].upper() + text[1:]


class PageDiscovery:
    """Discovers candidate pages for a site."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout_seconds: float | None = None,
        concurrent: bool | None = None,
        patterns: tuple[tuple[PageCategory, tuple[str, ...]], ...] = PAGE_PATTERNS,
    ):
        self.client = client
        self.timeout = timeout_seconds if timeout_seconds is not None else settings.DISCOVERY_TIMEOUT_SECONDS
        self.concurrent = settings.DISCOVERY_CONCURRENT if concurrent is None else concurrent
        self.patterns = patterns

    async def discover(self, base_url: str) -> list[CandidatePage]:
        """
        Discover candidate pages for ``base_url``.

        Args:
            base_url: Normalized site URL; it is emitted as the homepage.

        Returns:
            Homepage first, then one page per matched category in table order.
        """
        origin = origin_of(base_url)
        discovered = [CandidatePage(url=base_url, category=PageCategory.HOMEPAGE, label=HOMEPAGE_LABEL)]

        if self.concurrent:
            # gather() keeps results indexed by category, not by completion
            matches = await asyncio.gather(
                *(self._first_match(origin, category, paths) for category, paths in self.patterns)
            )
        else:
            matches = []
            for category, paths in self.patterns:
                matches.append(await self._first_match(origin, category, paths))

        discovered.extend(page for page in matches if page is not None)

        logger.info(
            f"[DISCOVERY] {base_url}: {len(discovered)} pages "
            f"({', '.join(p.category.value for p in discovered)})"
        )
        return discovered

    async def _first_match(
        self,
        origin: str,
        category: PageCategory,
        paths: tuple[str, ...],
    ) -> CandidatePage | None:
        for path in paths:
            url = f"{origin}{path}"
            if await self._exists(url):
                logger.debug(f"[DISCOVERY] {category.value} -> {url}")
                return CandidatePage(url=url, category=category, label=label_for_path(path))
        return None

    async def _exists(self, url: str) -> bool:
        try:
            response = await self.client.head(url, timeout=self.timeout, follow_redirects=True)
        except httpx.HTTPError as e:
            logger.debug(f"[DISCOVERY] Skipping {url}: {e!r}")
            return False
        return response.status_code == 200


async def discover_money_pages(base_url: str, client: httpx.AsyncClient | None = None) -> list[CandidatePage]:
    """Convenience wrapper that manages its own HTTP client when none is given."""
    if client is not None:
        return await PageDiscovery(client).discover(base_url)
    async with httpx.AsyncClient(follow_redirects=True) as own_client:
        return await PageDiscovery(own_client).discover(base_url)
