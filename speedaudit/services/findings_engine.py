"""
SpeedAudit Findings Engine

Maps page metrics to findings (issues) and fixes (recommendations) using a
fixed, ordered rule table:

1. Load time (tiered)
2. Largest resource size
3. Request count (tiered)
4. Total page weight
5. Third-party scripts (tiered)
6. Form autocomplete
7. Image count
8. Fallback when nothing else fired
"""
from dataclasses import dataclass
from typing import Callable, Iterable

from speedaudit.models.audit import (
    Difficulty,
    Finding,
    FindingCategory,
    Fix,
    Impact,
    PageMetrics,
    ResourceType,
)

SLOW_LOAD_SECONDS = 4.0
MODERATE_LOAD_SECONDS = 2.5
LARGE_RESOURCE_BYTES = 1_000_000
HEAVY_REQUEST_COUNT = 100
MODERATE_REQUEST_COUNT = 50
HEAVY_PAGE_BYTES = 5_000_000
HEAVY_THIRD_PARTY = 8
MODERATE_THIRD_PARTY = 5
IMAGE_COUNT_LIMIT = 30


def _mb(byte_size: int) -> str:
    return f"{byte_size / 1_000_000:.1f}MB"


@dataclass(frozen=True)
class Tier:
    predicate: Callable[[PageMetrics], bool]
    finding: Callable[[PageMetrics], Finding]
    fix: Callable[[PageMetrics], Fix | None] | None = None


@dataclass(frozen=True)
class FindingRule:
    """A rule fires at most one of its tiers: the first whose predicate holds."""
    key: str
    tiers: tuple[Tier, ...]

    def evaluate(self, metrics: PageMetrics) -> tuple[Finding, Fix | None] | None:
        for tier in self.tiers:
            if tier.predicate(metrics):
                fix = tier.fix(metrics) if tier.fix else None
                return tier.finding(metrics), fix
        return None


# =========================================================================
# Rule 1: Load time
# =========================================================================
def _slow_load_finding(m: PageMetrics) -> Finding:
    return Finding(
        issue="Page takes too long to load on mobile",
        impact=Impact.CRITICAL,
        category=FindingCategory.PERFORMANCE,
        metric=f"{m.load_time_seconds:.1f}s",
        threshold=f">{SLOW_LOAD_SECONDS:g}s",
    )


def _slow_load_fix(m: PageMetrics) -> Fix:
    return Fix(
        action="Prioritize critical resources",
        detail="Preload above-the-fold assets, inline critical CSS and defer everything else until after first render",
        difficulty=Difficulty.MEDIUM,
        priority=1,
    )


def _moderate_load_finding(m: PageMetrics) -> Finding:
    return Finding(
        issue="Page load time is above the recommended mobile target",
        impact=Impact.HIGH,
        category=FindingCategory.PERFORMANCE,
        metric=f"{m.load_time_seconds:.1f}s",
        threshold=f">{MODERATE_LOAD_SECONDS:g}s",
    )


# =========================================================================
# Rule 2: Largest resource
# =========================================================================
def _large_resource_finding(m: PageMetrics) -> Finding:
    resource_type = m.largest_resource.resource_type
    if resource_type == ResourceType.IMAGE:
        issue = "Large image slows down mobile loading"
    elif resource_type == ResourceType.SCRIPT:
        issue = "Heavy JavaScript bundle delays page rendering"
    else:
        issue = f"Oversized {resource_type.value} resource slows down mobile loading"
    return Finding(
        issue=issue,
        impact=Impact.HIGH,
        category=FindingCategory.RESOURCES,
        metric=_mb(m.largest_resource.byte_size),
        threshold=f">{_mb(LARGE_RESOURCE_BYTES)}",
    )


def _large_resource_fix(m: PageMetrics) -> Fix | None:
    resource_type = m.largest_resource.resource_type
    if resource_type == ResourceType.IMAGE:
        return Fix(
            action="Optimize and resize large images",
            detail="Compress images, serve modern formats (WebP/AVIF) at responsive sizes and lazy-load below-the-fold images",
            difficulty=Difficulty.EASY,
            priority=1,
        )
    if resource_type == ResourceType.SCRIPT:
        return Fix(
            action="Split and defer non-critical JavaScript",
            detail="Use code splitting so each page only ships the code it needs, and load the rest with async/defer",
            difficulty=Difficulty.MEDIUM,
            priority=2,
        )
    return None


# =========================================================================
# Rule 3: Request count
# =========================================================================
def _heavy_requests_finding(m: PageMetrics) -> Finding:
    return Finding(
        issue="Too many resources loading before page appears",
        impact=Impact.HIGH,
        category=FindingCategory.RESOURCES,
        metric=f"{m.total_requests} requests",
        threshold=f">{HEAVY_REQUEST_COUNT} requests",
    )


def _heavy_requests_fix(m: PageMetrics) -> Fix:
    return Fix(
        action="Implement resource bundling and lazy loading",
        detail="Combine files and load non-critical resources after initial render",
        difficulty=Difficulty.MEDIUM,
        priority=2,
    )


def _moderate_requests_finding(m: PageMetrics) -> Finding:
    return Finding(
        issue="High number of network requests",
        impact=Impact.MEDIUM,
        category=FindingCategory.RESOURCES,
        metric=f"{m.total_requests} requests",
        threshold=f">{MODERATE_REQUEST_COUNT} requests",
    )


# =========================================================================
# Rule 4: Total page weight
# =========================================================================
def _page_weight_finding(m: PageMetrics) -> Finding:
    return Finding(
        issue="Total page weight is too heavy for mobile connections",
        impact=Impact.HIGH,
        category=FindingCategory.RESOURCES,
        metric=_mb(m.total_bytes),
        threshold=f">{_mb(HEAVY_PAGE_BYTES)}",
    )


def _page_weight_fix(m: PageMetrics) -> Fix:
    return Fix(
        action="Reduce total page weight",
        detail="Remove unused CSS/JS, compress text assets and trim media that is not needed on mobile",
        difficulty=Difficulty.MEDIUM,
        priority=2,
    )


# =========================================================================
# Rule 5: Third-party scripts
# =========================================================================
def _heavy_third_party_finding(m: PageMetrics) -> Finding:
    return Finding(
        issue="Excessive third-party scripts blocking page load",
        impact=Impact.HIGH,
        category=FindingCategory.THIRD_PARTY,
        metric=f"{m.third_party_script_count} scripts",
        threshold=f">{HEAVY_THIRD_PARTY} scripts",
    )


def _heavy_third_party_fix(m: PageMetrics) -> Fix:
    return Fix(
        action="Audit and reduce third-party scripts",
        detail="Remove tags that are no longer used and consolidate analytics and tracking through a single loader",
        difficulty=Difficulty.MEDIUM,
        priority=2,
    )


def _moderate_third_party_finding(m: PageMetrics) -> Finding:
    return Finding(
        issue="Multiple third-party scripts blocking page load",
        impact=Impact.MEDIUM,
        category=FindingCategory.THIRD_PARTY,
        metric=f"{m.third_party_script_count} scripts",
        threshold=f">{MODERATE_THIRD_PARTY} scripts",
    )


def _moderate_third_party_fix(m: PageMetrics) -> Fix:
    return Fix(
        action="Defer non-critical third-party scripts",
        detail="Load analytics and tracking scripts after page is interactive",
        difficulty=Difficulty.EASY,
        priority=3,
    )


# =========================================================================
# Rule 6: Forms
# =========================================================================
def _forms_finding(m: PageMetrics) -> Finding:
    return Finding(
        issue="Form fields lack mobile optimization",
        impact=Impact.MEDIUM,
        category=FindingCategory.USABILITY,
        metric="inputs without autocomplete",
        threshold=">2 inputs",
    )


def _forms_fix(m: PageMetrics) -> Fix:
    return Fix(
        action="Add autocomplete attributes to form fields",
        detail="Enable autofill for better mobile user experience",
        difficulty=Difficulty.EASY,
        priority=3,
    )


# =========================================================================
# Rule 7: Image count
# =========================================================================
def _image_count_finding(m: PageMetrics) -> Finding:
    return Finding(
        issue="High number of image requests",
        impact=Impact.MEDIUM,
        category=FindingCategory.RESOURCES,
        metric=f"{m.image_count} images",
        threshold=f">{IMAGE_COUNT_LIMIT} images",
    )


def _image_count_fix(m: PageMetrics) -> Fix:
    return Fix(
        action="Lazy-load and optimize images",
        detail="Load images as the user scrolls and serve appropriately sized, compressed files",
        difficulty=Difficulty.EASY,
        priority=3,
    )


# =========================================================================
# Fallback
# =========================================================================
FALLBACK_FINDING = Finding(
    issue="No major issues detected; general optimization opportunities remain",
    impact=Impact.LOW,
    category=FindingCategory.GENERAL,
    metric="all checks passed",
    threshold="n/a",
)

FALLBACK_FIX = Fix(
    action="Set up performance monitoring",
    detail="Track Core Web Vitals and set performance budgets so regressions are caught early",
    difficulty=Difficulty.MEDIUM,
    priority=1,
)


RULES: tuple[FindingRule, ...] = (
    FindingRule("load_time", (
        Tier(lambda m: m.load_time_seconds > SLOW_LOAD_SECONDS, _slow_load_finding, _slow_load_fix),
        Tier(lambda m: m.load_time_seconds > MODERATE_LOAD_SECONDS, _moderate_load_finding),
    )),
    FindingRule("largest_resource", (
        Tier(
            lambda m: m.largest_resource is not None and m.largest_resource.byte_size > LARGE_RESOURCE_BYTES,
            _large_resource_finding,
            _large_resource_fix,
        ),
    )),
    FindingRule("request_count", (
        Tier(lambda m: m.total_requests > HEAVY_REQUEST_COUNT, _heavy_requests_finding, _heavy_requests_fix),
        Tier(lambda m: m.total_requests > MODERATE_REQUEST_COUNT, _moderate_requests_finding),
    )),
    FindingRule("page_weight", (
        Tier(lambda m: m.total_bytes > HEAVY_PAGE_BYTES, _page_weight_finding, _page_weight_fix),
    )),
    FindingRule("third_party_scripts", (
        Tier(lambda m: m.third_party_script_count > HEAVY_THIRD_PARTY, _heavy_third_party_finding, _heavy_third_party_fix),
        Tier(lambda m: m.third_party_script_count > MODERATE_THIRD_PARTY, _moderate_third_party_finding, _moderate_third_party_fix),
    )),
    FindingRule("forms", (
        Tier(lambda m: m.has_unoptimized_forms, _forms_finding, _forms_fix),
    )),
    FindingRule("image_count", (
        Tier(lambda m: m.image_count > IMAGE_COUNT_LIMIT, _image_count_finding, _image_count_fix),
    )),
)


def sort_fixes(fixes: Iterable[Fix]) -> list[Fix]:
    """Ascending priority; fixes without a priority go last. Stable on ties."""
    return sorted(fixes, key=lambda f: (f.priority is None, f.priority or 0))


def generate_findings(
    metrics: PageMetrics,
    rules: tuple[FindingRule, ...] = RULES,
) -> tuple[list[Finding], list[Fix]]:
    """
    Evaluate every rule against the metrics.

    Returns:
        Tuple of (findings in rule order, fixes sorted by priority)
    """
    findings: list[Finding] = []
    fixes: list[Fix] = []

    for rule in rules:
        result = rule.evaluate(metrics)
        if result is None:
            continue
        finding, fix = result
        findings.append(finding)
        if fix is not None:
            fixes.append(fix)

    if not findings:
        findings.append(FALLBACK_FINDING)
        fixes.append(FALLBACK_FIX)

    return findings, sort_fixes(fixes)
