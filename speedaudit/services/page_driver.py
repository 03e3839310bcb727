"""
SpeedAudit Page Driver

Loads pages in a headless browser under a mobile device profile using
Playwright, and reports the network activity observed during load.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Protocol

from bs4 import BeautifulSoup
from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Request,
    Response,
    TimeoutError as PlaywrightTimeout,
    async_playwright,
)

from speedaudit.config import settings
from speedaudit.core.exceptions import PageLoadFailedError
from speedaudit.models.audit import NetworkEvent, ResourceType

logger = logging.getLogger(__name__)

FORM_INPUT_TYPES = ("text", "email", "tel")
MAX_UNOPTIMIZED_INPUTS = 2


@dataclass(frozen=True)
class DeviceProfile:
    """Viewport and user agent applied to every page load in a run."""
    name: str
    viewport_width: int
    viewport_height: int
    user_agent: str
    device_scale_factor: float = 1.0
    is_mobile: bool = True
    has_touch: bool = True

    @classmethod
    def from_descriptor(cls, name: str, descriptor: dict[str, Any]) -> DeviceProfile:
        """Build a profile from a Playwright device descriptor."""
        viewport = descriptor.get("viewport") or {}
        return cls(
            name=name,
            viewport_width=viewport.get("width", 390),
            viewport_height=viewport.get("height", 844),
            user_agent=descriptor.get("user_agent", ""),
            device_scale_factor=descriptor.get("device_scale_factor", 1.0),
            is_mobile=descriptor.get("is_mobile", True),
            has_touch=descriptor.get("has_touch", True),
        )

    def context_options(self) -> dict[str, Any]:
        return {
            "viewport": {"width": self.viewport_width, "height": self.viewport_height},
            "user_agent": self.user_agent,
            "device_scale_factor": self.device_scale_factor,
            "is_mobile": self.is_mobile,
            "has_touch": self.has_touch,
        }


@dataclass(frozen=True)
class PageLoadResult:
    """Everything the driver observed while loading one page."""
    events: tuple[NetworkEvent, ...]
    elapsed_seconds: float
    has_unoptimized_forms: bool


@dataclass
class DriverConfig:
    """Configuration for page driving."""
    navigation_timeout_ms: int = 30000
    settle_ms: int = 3000
    wait_until: str = "domcontentloaded"
    device_name: str = "iPhone 12"
    browser_type: str = "chromium"
    headless: bool = True
    browser_args: tuple[str, ...] = ()

    @classmethod
    def from_settings(cls) -> DriverConfig:
        return cls(
            navigation_timeout_ms=settings.NAVIGATION_TIMEOUT_MS,
            settle_ms=settings.SETTLE_MS,
            device_name=settings.DEVICE_NAME,
            browser_type=settings.BROWSER_TYPE,
            headless=settings.BROWSER_HEADLESS,
            browser_args=tuple(settings.browser_args_list),
        )


class PageDriver(Protocol):
    async def load(self, url: str) -> PageLoadResult:
        ...


def parse_content_length(value: str | None) -> int | None:
    """Byte size from a content-length header; None when absent or invalid."""
    if value is None:
        return None
    try:
        size = int(value.strip())
    except ValueError:
        return None
    return size if size >= 0 else None


def has_unoptimized_forms(html: str) -> bool:
    """
    True when the page has a form and more than two text/email/tel inputs
    have no autocomplete attribute or have it switched off.
    """
    soup = BeautifulSoup(html, "lxml")
    if soup.find("form") is None:
        return False

    unoptimized = 0
    for field in soup.find_all("input"):
        if (field.get("type") or "").lower() not in FORM_INPUT_TYPES:
            continue
        autocomplete = (field.get("autocomplete") or "").strip().lower()
        if not autocomplete or autocomplete == "off":
            unoptimized += 1
    return unoptimized > MAX_UNOPTIMIZED_INPUTS


class NetworkRecorder:
    """Collects request/response events for one page and freezes them on demand."""

    def __init__(self):
        self._records: list[dict[str, Any]] = []
        self._index: dict[Request, int] = {}

    def on_request(self, request: Request) -> None:
        self._index[request] = len(self._records)
        self._records.append({
            "url": request.url,
            "resource_type": ResourceType.from_playwright(request.resource_type),
            "method": request.method,
        })

    def on_response(self, response: Response) -> None:
        index = self._index.get(response.request)
        if index is None:
            return
        record = self._records[index]
        record["status_code"] = response.status
        record["byte_size"] = parse_content_length(response.headers.get("content-length"))

    def freeze(self) -> tuple[NetworkEvent, ...]:
        return tuple(NetworkEvent(**record) for record in self._records)


class MobilePageDriver:
    """
    Headless browser driver for mobile page loads.

    One browser is launched per run and reused; every page gets its own
    isolated browser context, closed before ``load`` returns.
    """

    def __init__(self, config: DriverConfig | None = None):
        self.config = config or DriverConfig.from_settings()
        self.device: DeviceProfile | None = None
        self._browser: Browser | None = None
        self._playwright = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()

    async def start(self):
        """Start the browser instance."""
        if self._browser is not None:
            return

        logger.info(f"[DRIVER] Starting Playwright {self.config.browser_type} browser")
        self._playwright = await async_playwright().start()

        descriptor = self._playwright.devices[self.config.device_name]
        self.device = DeviceProfile.from_descriptor(self.config.device_name, descriptor)

        browser_launcher = getattr(self._playwright, self.config.browser_type)
        self._browser = await browser_launcher.launch(
            headless=self.config.headless,
            args=list(self.config.browser_args),
        )
        logger.info(f"[DRIVER] Browser started, emulating {self.device.name}")

    async def stop(self):
        """Stop the browser instance."""
        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.info("[DRIVER] Browser stopped")

    async def load(self, url: str) -> PageLoadResult:
        """
        Load a single page under the mobile profile.

        Args:
            url: URL to load

        Returns:
            PageLoadResult with the network events, elapsed time and form signal

        Raises:
            PageLoadFailedError: navigation timed out or failed
        """
        if not self._browser:
            await self.start()

        context: BrowserContext | None = None
        recorder = NetworkRecorder()

        try:
            context = await self._browser.new_context(**self.device.context_options())
            page = await context.new_page()
            page.on("request", recorder.on_request)
            page.on("response", recorder.on_response)

            start = time.monotonic()
            try:
                await page.goto(
                    url,
                    wait_until=self.config.wait_until,
                    timeout=self.config.navigation_timeout_ms,
                )
            except PlaywrightTimeout as e:
                raise PageLoadFailedError(
                    url, f"navigation timed out after {self.config.navigation_timeout_ms}ms"
                ) from e
            except PlaywrightError as e:
                raise PageLoadFailedError(url, e.message) from e

            # Let deferred resources arrive
            if self.config.settle_ms > 0:
                await page.wait_for_timeout(self.config.settle_ms)

            elapsed = time.monotonic() - start
            forms_flag = await self._probe_forms(page)

            events = recorder.freeze()
            logger.info(f"[DRIVER] Loaded {url} in {elapsed:.2f}s ({len(events)} requests)")
            return PageLoadResult(
                events=events,
                elapsed_seconds=elapsed,
                has_unoptimized_forms=forms_flag,
            )

        except PlaywrightError as e:
            raise PageLoadFailedError(url, e.message) from e

        finally:
            if context:
                await self._close_context(context, url)

    async def _close_context(self, context: BrowserContext, url: str) -> None:
        try:
            await context.close()
        except PlaywrightError as e:
            logger.debug(f"[DRIVER] Context close failed for {url}: {e}")

    async def _probe_forms(self, page) -> bool:
        try:
            html = await page.content()
        except PlaywrightError as e:
            logger.debug(f"[DRIVER] Form probe failed for {page.url}: {e}")
            return False
        return has_unoptimized_forms(html)
