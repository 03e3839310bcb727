"""
Core utilities for SpeedAudit.
"""
from speedaudit.core.exceptions import (
    AuditError,
    InvalidUrlError,
    UnreachableError,
    PageLoadFailedError,
    NoPagesSucceededError,
    AuditHTTPError,
    BadRequestError,
    UnprocessableError,
    BadGatewayError,
)

__all__ = [
    "AuditError",
    "InvalidUrlError",
    "UnreachableError",
    "PageLoadFailedError",
    "NoPagesSucceededError",
    "AuditHTTPError",
    "BadRequestError",
    "UnprocessableError",
    "BadGatewayError",
]
