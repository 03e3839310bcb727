"""
Pydantic schemas for API request/response validation.
"""
from speedaudit.schemas.common import BaseSchema, ErrorResponse, HealthResponse
from speedaudit.schemas.audit import (
    AuditRequest,
    AuditReportResponse,
    CandidatePageResponse,
    FindingResponse,
    FixResponse,
    LargestResourceResponse,
    PageAuditResponse,
    PageMetricsResponse,
)

__all__ = [
    "BaseSchema",
    "ErrorResponse",
    "HealthResponse",
    "AuditRequest",
    "AuditReportResponse",
    "CandidatePageResponse",
    "FindingResponse",
    "FixResponse",
    "LargestResourceResponse",
    "PageAuditResponse",
    "PageMetricsResponse",
]
