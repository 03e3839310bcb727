"""
Audit data model: candidate pages, network events, metrics, findings and reports.
"""
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum as PyEnum


class PageCategory(str, PyEnum):
    HOMEPAGE = "homepage"
    SAAS = "saas"
    ECOMMERCE = "ecommerce"
    BOOKING = "booking"
    CONTACT = "contact"


class ResourceType(str, PyEnum):
    IMAGE = "image"
    SCRIPT = "script"
    STYLESHEET = "stylesheet"
    DOCUMENT = "document"
    FONT = "font"
    XHR = "xhr"
    OTHER = "other"

    @classmethod
    def from_playwright(cls, resource_type: str) -> "ResourceType":
        """Map a Playwright ``request.resource_type`` onto our resource types."""
        if resource_type == "fetch":
            return cls.XHR
        try:
            return cls(resource_type)
        except ValueError:
            return cls.OTHER


class Impact(str, PyEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class FindingCategory(str, PyEnum):
    PERFORMANCE = "performance"
    RESOURCES = "resources"
    THIRD_PARTY = "third-party"
    USABILITY = "usability"
    GENERAL = "general"
    MONITORING = "monitoring"


class Difficulty(str, PyEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class CandidatePage:
    url: str
    category: PageCategory
    label: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class NetworkEvent:
    """One request observed while a page was loading."""
    url: str
    resource_type: ResourceType
    method: str = "GET"
    status_code: int | None = None
    byte_size: int | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class LargestResource:
    resource_type: ResourceType
    byte_size: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PageMetrics:
    url: str
    load_time_seconds: float
    total_requests: int = 0
    image_count: int = 0
    script_count: int = 0
    stylesheet_count: int = 0
    third_party_script_count: int = 0
    largest_resource: LargestResource | None = None
    total_bytes: int = 0
    has_unoptimized_forms: bool = False

    @property
    def largest_resource_display(self) -> str:
        if self.largest_resource is None:
            return "N/A"
        return f"{self.largest_resource.byte_size / 1024 / 1024:.1f}MB"

    def to_dict(self) -> dict:
        data = asdict(self)
        data["largest_resource_display"] = self.largest_resource_display
        return data


@dataclass(frozen=True)
class Finding:
    issue: str
    impact: Impact
    category: FindingCategory
    metric: str
    threshold: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Fix:
    action: str
    detail: str
    difficulty: Difficulty
    priority: int | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PageAudit:
    page: CandidatePage
    metrics: PageMetrics
    findings: tuple[Finding, ...]
    fixes: tuple[Fix, ...]

    def to_dict(self) -> dict:
        return {
            "page": self.page.to_dict(),
            "metrics": self.metrics.to_dict(),
            "findings": [f.to_dict() for f in self.findings],
            "fixes": [f.to_dict() for f in self.fixes],
        }


@dataclass(frozen=True)
class AuditReport:
    base_url: str
    timestamp: datetime
    score: int
    average_load_time_seconds: float
    page_audits: tuple[PageAudit, ...]
    recommendation: str
    # URLs that were discovered but could not be loaded
    failed_pages: tuple[str, ...] = field(default_factory=tuple)

    @property
    def pages_audited(self) -> int:
        return len(self.page_audits)

    def to_dict(self) -> dict:
        return {
            "base_url": self.base_url,
            "timestamp": self.timestamp.isoformat(),
            "score": self.score,
            "average_load_time_seconds": self.average_load_time_seconds,
            "pages_audited": self.pages_audited,
            "page_audits": [a.to_dict() for a in self.page_audits],
            "recommendation": self.recommendation,
            "failed_pages": list(self.failed_pages),
        }
