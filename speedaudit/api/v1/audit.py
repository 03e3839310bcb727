"""
Audit API endpoint.

URL in -> discovery + mobile page loads -> scored findings report.
"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from speedaudit.core.exceptions import (
    BadGatewayError,
    BadRequestError,
    InvalidUrlError,
    NoPagesSucceededError,
    UnprocessableError,
    UnreachableError,
)
from speedaudit.schemas.audit import AuditReportResponse, AuditRequest
from speedaudit.schemas.common import ErrorResponse
from speedaudit.services.audit_service import AuditService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/audit", tags=["Audit"])


def get_audit_service() -> AuditService:
    return AuditService()


@router.post(
    "",
    response_model=AuditReportResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL"},
        422: {"model": ErrorResponse, "description": "Site unreachable"},
        502: {"model": ErrorResponse, "description": "No page could be loaded"},
    },
    summary="Audit a website",
    description="""
    Run a mobile performance audit of a website.

    1. Check that the site is reachable
    2. Discover the homepage plus up to one pricing, shop, booking and contact page
    3. Load each page under a mobile device profile
    4. Turn the measured metrics into findings, fixes and an overall score

    Blocks until the audit completes (roughly 35 seconds per page at worst).
    """,
)
async def audit_website(
    request: AuditRequest,
    service: Annotated[AuditService, Depends(get_audit_service)],
) -> AuditReportResponse:
    """Run a synchronous audit."""
    logger.info(f"[AUDIT] Audit requested for {request.url}")

    try:
        report = await service.run_audit(request.url)
    except InvalidUrlError as e:
        raise BadRequestError(e.message, e.code)
    except UnreachableError as e:
        raise UnprocessableError(e.message, e.code)
    except NoPagesSucceededError as e:
        raise BadGatewayError(e.message, e.code)

    return AuditReportResponse.model_validate(report)
