"""
Integration tests for the Audit API endpoint.

The audit service is swapped for one backed by the fake page driver and a
MockTransport HTTP client, so no browser or network is needed.
"""
import pytest
from fastapi import status

from speedaudit.api.v1.audit import get_audit_service
from speedaudit.config import Settings
from speedaudit.models.audit import NetworkEvent, ResourceType
from speedaudit.services.audit_service import AuditService
from speedaudit.services.page_driver import PageLoadResult


@pytest.fixture
def override_service(app, driver_builder, client_factory_builder):
    """Install an AuditService built from fakes; returns the driver used."""

    def install(statuses, results=None, failures=None, errors=None):
        driver = driver_builder(results=results, failures=failures)
        service = AuditService(
            driver_factory=lambda: driver,
            client_factory=client_factory_builder(statuses, errors=errors),
            settings=Settings(DISCOVERY_CONCURRENT=False),
        )
        app.dependency_overrides[get_audit_service] = lambda: service
        return driver

    return install


class TestHealth:
    """Test health endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, async_client):
        response = await async_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "SpeedAudit"

    @pytest.mark.asyncio
    async def test_api_health(self, async_client):
        response = await async_client.get("/api/v1/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "healthy"


class TestAuditAPI:
    """Test POST /api/v1/audit."""

    @pytest.mark.asyncio
    async def test_successful_audit(self, async_client, override_service):
        override_service(
            {"/": 200, "/pricing": 200},
            results={
                "https://example.com": PageLoadResult(
                    events=(
                        NetworkEvent(
                            url="https://example.com/hero.jpg",
                            resource_type=ResourceType.IMAGE,
                            status_code=200,
                            byte_size=2_516_582,
                        ),
                    ),
                    elapsed_seconds=1.5,
                    has_unoptimized_forms=False,
                ),
            },
        )

        response = await async_client.post("/api/v1/audit", json={"url": "example.com"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["base_url"] == "https://example.com"
        assert data["score"] == 90
        assert data["pages_audited"] == 2
        assert data["failed_pages"] == []
        assert data["recommendation"] == "Good performance, minor optimizations recommended"

        homepage = data["page_audits"][0]
        assert homepage["page"]["category"] == "homepage"
        assert homepage["metrics"]["largest_resource"] == {"resource_type": "image", "byte_size": 2_516_582}
        assert homepage["metrics"]["largest_resource_display"] == "2.4MB"
        assert homepage["fixes"][0]["priority"] == 1
        assert data["page_audits"][1]["page"]["url"] == "https://example.com/pricing"

    @pytest.mark.asyncio
    async def test_partial_failure_reported(self, async_client, override_service):
        override_service(
            {"/": 200, "/contact": 200},
            failures={"https://example.com/contact"},
        )

        response = await async_client.post("/api/v1/audit", json={"url": "https://example.com"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["pages_audited"] == 1
        assert data["failed_pages"] == ["https://example.com/contact"]

    @pytest.mark.asyncio
    async def test_invalid_url(self, async_client, override_service):
        driver = override_service({"/": 200})

        response = await async_client.post("/api/v1/audit", json={"url": "ftp://example.com"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["code"] == "invalid_url"
        assert driver.loaded == []

    @pytest.mark.asyncio
    async def test_unreachable_site(self, async_client, override_service):
        override_service({}, errors={"/"})

        response = await async_client.post("/api/v1/audit", json={"url": "https://example.com"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "not accessible" in response.json()["detail"]
        assert response.json()["code"] == "unreachable"

    @pytest.mark.asyncio
    async def test_no_pages_succeeded(self, async_client, override_service):
        override_service({"/": 200}, failures={"https://example.com"})

        response = await async_client.post("/api/v1/audit", json={"url": "https://example.com"})

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.json() == {
            "detail": "No pages could be audited for https://example.com (1 attempted)",
            "code": "no_pages_succeeded",
        }

    @pytest.mark.asyncio
    async def test_schema_validation(self, async_client, override_service):
        override_service({"/": 200})

        missing = await async_client.post("/api/v1/audit", json={})
        empty = await async_client.post("/api/v1/audit", json={"url": ""})

        assert missing.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert empty.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
