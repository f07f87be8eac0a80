import pytest

from manifestpro.dependencies import get_provider_router
from manifestpro.main import app


@pytest.mark.asyncio
async def test_health_endpoint_returns_200(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_health_endpoint_has_required_fields(client):
    response = await client.get("/api/v1/health")
    data = response.json()
    assert data["status"] in ("healthy", "degraded")
    assert set(data["providers"]) == {"groq", "gemini", "deepseek", "claude"}
    assert "timestamp" in data
    assert "environment" in data
    assert data["version"] == "0.1.0"


@pytest.mark.asyncio
async def test_provider_check_reports_each_provider(client):
    class StubRouter:
        async def check_connections(self):
            return {"groq": True, "gemini": False, "deepseek": False, "claude": False}

    app.dependency_overrides[get_provider_router] = lambda: StubRouter()

    response = await client.get("/api/v1/health/providers")

    assert response.status_code == 200
    assert response.json()["providers"]["groq"] is True


@pytest.mark.asyncio
async def test_request_id_header_echoed(client):
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


@pytest.mark.asyncio
async def test_request_id_generated(client):
    response = await client.get("/api/v1/health")
    assert len(response.headers["X-Request-ID"]) == 8
