from speedaudit.models.audit import (
    AuditReport,
    CandidatePage,
    Difficulty,
    Finding,
    FindingCategory,
    Fix,
    Impact,
    LargestResource,
    NetworkEvent,
    PageAudit,
    PageCategory,
    PageMetrics,
    ResourceType,
)

__all__ = [
    "AuditReport",
    "CandidatePage",
    "Difficulty",
    "Finding",
    "FindingCategory",
    "Fix",
    "Impact",
    "LargestResource",
    "NetworkEvent",
    "PageAudit",
    "PageCategory",
    "PageMetrics",
    "ResourceType",
]
