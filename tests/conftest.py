"""
Pytest configuration and fixtures for SpeedAudit tests.
"""
from typing import AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from speedaudit.core.exceptions import PageLoadFailedError
from speedaudit.models.audit import NetworkEvent, PageMetrics, ResourceType
from speedaudit.services.page_driver import PageLoadResult


# ============================================================================
# Fakes
# ============================================================================

class FakePageDriver:
    """
    In-memory page driver.

    ``results`` maps URL -> PageLoadResult; URLs in ``failures`` raise
    PageLoadFailedError; anything else loads instantly with no events.
    """

    def __init__(
        self,
        results: dict[str, PageLoadResult] | None = None,
        failures: set[str] | None = None,
    ):
        self.results = results or {}
        self.failures = failures or set()
        self.loaded: list[str] = []
        self.entered = 0
        self.exited = 0

    async def __aenter__(self):
        self.entered += 1
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.exited += 1

    async def load(self, url: str) -> PageLoadResult:
        self.loaded.append(url)
        if url in self.failures:
            raise PageLoadFailedError(url, "net::ERR_NAME_NOT_RESOLVED")
        return self.results.get(url, PageLoadResult(events=(), elapsed_seconds=1.0, has_unoptimized_forms=False))


def make_client_factory(
    statuses: dict[str, int],
    errors: set[str] | None = None,
    requested: list[str] | None = None,
) -> Callable[[], httpx.AsyncClient]:
    """
    Build an httpx client factory backed by MockTransport.

    Keys are URL paths ("/", "/pricing"). Paths in ``statuses`` answer with
    that status, paths in ``errors`` raise a connection error, everything else
    answers 404. Requested paths are appended to ``requested`` when given.
    """
    errors = errors or set()

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path or "/"
        if requested is not None:
            requested.append(path)
        if path in errors:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(statuses.get(path, 404))

    def factory() -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)

    return factory


@pytest.fixture
def fake_driver() -> FakePageDriver:
    return FakePageDriver()


@pytest.fixture
def client_factory_builder():
    return make_client_factory


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def sample_events() -> list[NetworkEvent]:
    """Network events for a small page on example.com."""
    return [
        NetworkEvent(url="https://example.com/", resource_type=ResourceType.DOCUMENT, status_code=200, byte_size=30_000),
        NetworkEvent(url="https://example.com/app.css", resource_type=ResourceType.STYLESHEET, status_code=200, byte_size=12_000),
        NetworkEvent(url="https://example.com/app.js", resource_type=ResourceType.SCRIPT, status_code=200, byte_size=250_000),
        NetworkEvent(url="https://www.googletagmanager.com/gtm.js", resource_type=ResourceType.SCRIPT, status_code=200, byte_size=90_000),
        NetworkEvent(url="https://cdn.example.net/lib.js", resource_type=ResourceType.SCRIPT, status_code=200),
        NetworkEvent(url="https://example.com/hero.jpg", resource_type=ResourceType.IMAGE, status_code=200, byte_size=250_000),
        NetworkEvent(url="https://example.com/logo.png", resource_type=ResourceType.IMAGE, status_code=200, byte_size=4_000),
        NetworkEvent(url="https://example.com/api/me", resource_type=ResourceType.XHR, method="POST", status_code=401),
    ]


@pytest.fixture
def clean_metrics() -> PageMetrics:
    """Metrics that trigger no rule besides the fallback."""
    return PageMetrics(
        url="https://example.com",
        load_time_seconds=1.5,
        total_requests=40,
        image_count=5,
        script_count=6,
        stylesheet_count=2,
        third_party_script_count=2,
        largest_resource=None,
        total_bytes=800_000,
        has_unoptimized_forms=False,
    )


# ============================================================================
# FastAPI App Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def app() -> FastAPI:
    """Create test FastAPI application."""
    from speedaudit.main import app as main_app

    yield main_app

    main_app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def driver_builder():
    return FakePageDriver
