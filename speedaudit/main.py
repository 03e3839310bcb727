"""
FastAPI application entry point for SpeedAudit.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from speedaudit.api.v1.router import api_router
from speedaudit.config import settings
from speedaudit.core.exceptions import AuditHTTPError
from speedaudit.schemas.common import ErrorResponse, HealthResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.exception_handler(AuditHTTPError)
async def audit_http_error_handler(request: Request, exc: AuditHTTPError) -> JSONResponse:
    """Return audit errors as ErrorResponse bodies."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(detail=exc.detail, code=exc.code).model_dump(),
        headers=exc.headers,
    )


def _health() -> HealthResponse:
    return HealthResponse(status="healthy", service=settings.PROJECT_NAME, version=settings.VERSION)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return _health()


@app.get(f"{settings.API_V1_STR}/health", response_model=HealthResponse)
async def api_health_check():
    """API health check endpoint."""
    return _health()
