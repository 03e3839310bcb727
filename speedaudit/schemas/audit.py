"""
Audit request/response schemas.
"""
from datetime import datetime

from pydantic import Field

from speedaudit.models.audit import (
    Difficulty,
    FindingCategory,
    Impact,
    PageCategory,
    ResourceType,
)
from speedaudit.schemas.common import BaseSchema


class AuditRequest(BaseSchema):
    """Request to audit a website."""

    url: str = Field(
        ...,
        min_length=1,
        description="Website URL to audit; https:// is assumed when no scheme is given",
        examples=["https://example.com"],
    )


class CandidatePageResponse(BaseSchema):
    url: str
    category: PageCategory
    label: str


class LargestResourceResponse(BaseSchema):
    resource_type: ResourceType
    byte_size: int


class PageMetricsResponse(BaseSchema):
    url: str
    load_time_seconds: float
    total_requests: int
    image_count: int
    script_count: int
    stylesheet_count: int
    third_party_script_count: int
    largest_resource: LargestResourceResponse | None
    largest_resource_display: str
    total_bytes: int
    has_unoptimized_forms: bool


class FindingResponse(BaseSchema):
    issue: str
    impact: Impact
    category: FindingCategory
    metric: str
    threshold: str


class FixResponse(BaseSchema):
    action: str
    detail: str
    difficulty: Difficulty
    priority: int | None


class PageAuditResponse(BaseSchema):
    page: CandidatePageResponse
    metrics: PageMetricsResponse
    findings: list[FindingResponse]
    fixes: list[FixResponse]


class AuditReportResponse(BaseSchema):
    """Mobile performance audit report."""

    base_url: str
    timestamp: datetime
    score: int = Field(..., ge=0, le=100)
    average_load_time_seconds: float
    pages_audited: int
    page_audits: list[PageAuditResponse]
    recommendation: str
    failed_pages: list[str] = Field(default_factory=list)
