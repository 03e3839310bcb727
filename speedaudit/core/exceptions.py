"""
Exceptions for SpeedAudit.

Domain errors are raised by the audit pipeline; HTTP errors are raised by the
API layer when translating them.
"""
from fastapi import HTTPException, status


class AuditError(Exception):
    """Base class for audit pipeline errors."""

    code = "audit_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidUrlError(AuditError):
    """The URL supplied by the caller cannot be audited."""

    code = "invalid_url"

    def __init__(self, url: str, reason: str = "Invalid URL provided"):
        super().__init__(f"{reason}: {url!r}")
        self.url = url
        self.reason = reason


class UnreachableError(AuditError):
    """The site did not answer the reachability probe."""

    code = "unreachable"

    def __init__(self, url: str, status_code: int | None = None):
        if status_code is None:
            message = f"Site is not accessible: {url}"
        else:
            message = f"Site returned an error (HTTP {status_code}): {url}"
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class PageLoadFailedError(AuditError):
    """A single page could not be loaded by the page driver."""

    code = "page_load_failed"

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to load page {url}: {reason}")
        self.url = url
        self.reason = reason


class NoPagesSucceededError(AuditError):
    """Every discovered page failed to load, so no score can be computed."""

    code = "no_pages_succeeded"

    def __init__(self, base_url: str, attempted: int = 0):
        super().__init__(
            f"No pages could be audited for {base_url} ({attempted} attempted)"
        )
        self.base_url = base_url
        self.attempted = attempted


class AuditHTTPError(HTTPException):
    """HTTP error carrying the machine-readable code of the audit error behind it."""

    def __init__(self, status_code: int, detail: str, code: str | None = None):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code


class BadRequestError(AuditHTTPError):
    """Bad request exception."""

    def __init__(self, detail: str, code: str | None = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            code=code,
        )


class UnprocessableError(AuditHTTPError):
    """The request was well-formed but the target cannot be processed."""

    def __init__(self, detail: str, code: str | None = None):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            code=code,
        )


class BadGatewayError(AuditHTTPError):
    """The upstream site failed while being audited."""

    def __init__(self, detail: str, code: str | None = None):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
            code=code,
        )
