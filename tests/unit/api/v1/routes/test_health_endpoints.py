import pytest
from httpx import AsyncClient
from unittest.mock import AsyncMock


@pytest.mark.asyncio
class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        """Test health check endpoint."""
        response = await client.get("/api/health/")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "creditboard-api"}

    async def test_billing_health_check(self, client: AsyncClient):
        """Test billing provider health endpoint."""
        response = await client.get("/api/health/billing")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["billing_provider"] == "local"

    async def test_billing_health_check_failure(
        self, client: AsyncClient, billing_provider
    ):
        billing_provider.health_check = AsyncMock(side_effect=RuntimeError("down"))
        response = await client.get("/api/health/billing")
        assert response.json()["status"] == "unhealthy"

    async def test_healthz(self, client: AsyncClient):
        response = await client.get("/healthz")
        assert response.json() == {"status": "ok"}
