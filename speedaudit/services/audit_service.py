"""
Audit orchestration: validate -> discover -> drive each page -> score.
"""
import logging
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Callable

import httpx

from speedaudit.config import Settings, settings as default_settings
from speedaudit.core.exceptions import AuditError, NoPagesSucceededError, PageLoadFailedError
from speedaudit.models.audit import AuditReport, CandidatePage, PageAudit
from speedaudit.services.findings_engine import generate_findings
from speedaudit.services.metrics import extract_metrics
from speedaudit.services.page_discovery import PageDiscovery
from speedaudit.services.page_driver import MobilePageDriver, PageDriver
from speedaudit.services.reachability import check_reachable, normalize_url
from speedaudit.services.scoring import average_load_time, calculate_score, get_recommendation

logger = logging.getLogger(__name__)


class AuditStage(str, PyEnum):
    VALIDATING = "validating"
    DISCOVERING = "discovering"
    DRIVING = "driving"
    SCORING = "scoring"
    DONE = "done"
    FAILED = "failed"


DriverFactory = Callable[[], AbstractAsyncContextManager]
ClientFactory = Callable[[], httpx.AsyncClient]


class AuditService:
    """Runs one mobile performance audit per ``run_audit`` call."""

    def __init__(
        self,
        driver_factory: DriverFactory | None = None,
        client_factory: ClientFactory | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or default_settings
        self.driver_factory = driver_factory or MobilePageDriver
        self.client_factory = client_factory or (lambda: httpx.AsyncClient(follow_redirects=True))
        self.stage: AuditStage | None = None

    def _enter(self, stage: AuditStage, detail: str = "") -> None:
        self.stage = stage
        logger.debug(f"[AUDIT] -> {stage.value}{f' ({detail})' if detail else ''}")

    async def run_audit(self, raw_url: str) -> AuditReport:
        """
        Audit a site.

        Args:
            raw_url: URL as supplied by the caller; https is assumed without a scheme

        Returns:
            AuditReport covering every page that loaded

        Raises:
            InvalidUrlError: the URL is malformed
            UnreachableError: the site failed the reachability probe
            NoPagesSucceededError: every discovered page failed to load
        """
        try:
            return await self._run(raw_url)
        except AuditError as e:
            self._enter(AuditStage.FAILED, e.code)
            logger.error(f"[AUDIT] Audit failed for {raw_url}: {e.message}")
            raise

    async def _run(self, raw_url: str) -> AuditReport:
        self._enter(AuditStage.VALIDATING, raw_url)
        base_url = normalize_url(raw_url)
        logger.info(f"[AUDIT] Starting audit for {base_url}")

        async with self.client_factory() as client:
            await check_reachable(
                base_url,
                timeout_seconds=self.settings.REACHABILITY_TIMEOUT_SECONDS,
                client=client,
            )

            self._enter(AuditStage.DISCOVERING)
            discovery = PageDiscovery(
                client,
                timeout_seconds=self.settings.DISCOVERY_TIMEOUT_SECONDS,
                concurrent=self.settings.DISCOVERY_CONCURRENT,
            )
            pages = await discovery.discover(base_url)

        audits: list[PageAudit] = []
        failed: list[str] = []

        async with self.driver_factory() as driver:
            for index, page in enumerate(pages):
                self._enter(AuditStage.DRIVING, f"{index + 1}/{len(pages)} {page.url}")
                try:
                    audits.append(await self.audit_page(driver, page))
                except PageLoadFailedError as e:
                    logger.warning(f"[AUDIT] Failed to audit {page.url}: {e.reason}")
                    failed.append(page.url)

        self._enter(AuditStage.SCORING)
        if not audits:
            raise NoPagesSucceededError(base_url, attempted=len(pages))

        average = average_load_time(audits, base_url)
        score = calculate_score(average)

        report = AuditReport(
            base_url=base_url,
            timestamp=datetime.now(timezone.utc),
            score=score,
            average_load_time_seconds=average,
            page_audits=tuple(audits),
            recommendation=get_recommendation(score),
            failed_pages=tuple(failed),
        )
        self._enter(AuditStage.DONE)
        logger.info(
            f"[AUDIT] Completed {base_url}: score={score}, avg={average:.2f}s, "
            f"{report.pages_audited} audited, {len(failed)} failed"
        )
        return report

    async def audit_page(self, driver: PageDriver, page: CandidatePage) -> PageAudit:
        """Load one page, extract its metrics and evaluate the rules."""
        result = await driver.load(page.url)
        metrics = extract_metrics(
            page.url,
            result.events,
            result.elapsed_seconds,
            result.has_unoptimized_forms,
        )
        findings, fixes = generate_findings(metrics)
        return PageAudit(
            page=page,
            metrics=metrics,
            findings=tuple(findings),
            fixes=tuple(fixes),
        )


async def run_audit(raw_url: str) -> AuditReport:
    """Run an audit with the default browser driver and HTTP client."""
    return await AuditService().run_audit(raw_url)
