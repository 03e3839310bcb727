"""
Reduces the network events of one page load to a PageMetrics record.
"""
from typing import Iterable
from urllib.parse import urlparse

from speedaudit.models.audit import LargestResource, NetworkEvent, PageMetrics, ResourceType


_DEFAULT_PORTS = {"http": 80, "https": 443}


def _host(url: str) -> str | None:
    """Lowercased ``host[:port]`` with the scheme's default port dropped."""
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        port = parsed.port
    except ValueError:
        return None
    if not hostname:
        return None
    if port is None or port == _DEFAULT_PORTS.get(parsed.scheme):
        return hostname
    return f"{hostname}:{port}"


def is_third_party(event_url: str, page_host: str) -> bool:
    """Malformed or host-less URLs count as same-host."""
    host = _host(event_url)
    return host is not None and host != page_host.lower()


def find_largest_resource(events: Iterable[NetworkEvent]) -> LargestResource | None:
    """Largest sized event; the first one observed wins ties."""
    largest: NetworkEvent | None = None
    for event in events:
        if event.byte_size is None:
            continue
        if largest is None or event.byte_size > largest.byte_size:
            largest = event
    if largest is None:
        return None
    return LargestResource(resource_type=largest.resource_type, byte_size=largest.byte_size)


def extract_metrics(
    url: str,
    events: Iterable[NetworkEvent],
    elapsed_seconds: float,
    has_unoptimized_forms: bool = False,
) -> PageMetrics:
    """
    Build the metric record for one page load.

    Args:
        url: The audited page URL (its host decides what is third-party)
        events: Network events in the order they were observed
        elapsed_seconds: Navigation start to end of the settle window
        has_unoptimized_forms: Result of the DOM form probe

    Returns:
        PageMetrics
    """
    events = list(events)
    page_host = _host(url) or ""

    scripts = [e for e in events if e.resource_type == ResourceType.SCRIPT]

    return PageMetrics(
        url=url,
        load_time_seconds=max(0.0, float(elapsed_seconds)),
        total_requests=len(events),
        image_count=sum(1 for e in events if e.resource_type == ResourceType.IMAGE),
        script_count=len(scripts),
        stylesheet_count=sum(1 for e in events if e.resource_type == ResourceType.STYLESHEET),
        third_party_script_count=sum(1 for e in scripts if is_third_party(e.url, page_host)),
        largest_resource=find_largest_resource(events),
        total_bytes=sum(e.byte_size or 0 for e in events),
        has_unoptimized_forms=has_unoptimized_forms,
    )
