"""
Unit tests for billing API routes.

Tests API endpoints against the in-memory billing provider.
"""

import pytest
from unittest.mock import AsyncMock

from common.core.exceptions import UpstreamError


@pytest.mark.asyncio
class TestBillingRoutes:
    """Tests for billing API routes."""

    async def test_get_billing(self, client):
        """Test GET /api/billing."""
        response = await client.get("/api/billing")

        assert response.status_code == 200
        data = response.json()
        assert data["customer"]["externalId"] == "user_123"
        assert data["customer"]["email"] == "ada@example.com"
        assert len(data["currentSubscriptions"]) == 1
        assert data["pricingModel"]["usageMeters"][0]["slug"] == "fast_generations"

    async def test_get_billing_requires_session(self, anonymous_client):
        response = await anonymous_client.get("/api/billing")

        assert response.status_code == 401
        assert response.json() == {"error": "User not authenticated"}

    async def test_get_dashboard(self, client):
        """Test GET /api/billing/dashboard."""
        response = await client.get("/api/billing/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["planName"] == "Free"
        assert data["isDefaultPlan"] is True
        assert data["usageMeters"][0] == {
            "slug": "fast_generations",
            "name": "Fast Generations",
            "remaining": 10,
            "total": 10,
            "progressPercent": 100.0,
            "hasAccess": True,
        }

    async def test_create_checkout_session_by_slug(self, client):
        """Test POST /api/billing/checkout-sessions with a price slug."""
        response = await client.post(
            "/api/billing/checkout-sessions",
            json={
                "priceSlug": "pro_monthly",
                "successUrl": "http://localhost:3000/success",
                "cancelUrl": "http://localhost:3000/pricing",
            },
        )

        assert response.status_code == 200
        assert response.json()["url"] == "http://localhost:3000/success"

        dashboard = (await client.get("/api/billing/dashboard")).json()
        assert dashboard["planName"] == "Pro"
        assert dashboard["isDefaultPlan"] is False

    async def test_create_checkout_session_top_up_by_id(self, client):
        response = await client.post(
            "/api/billing/checkout-sessions",
            json={
                "priceId": "price_hd_video_minute_top_up",
                "successUrl": "http://localhost:3000/success",
                "cancelUrl": "http://localhost:3000/pricing",
                "quantity": 2,
            },
        )

        assert response.status_code == 200
        billing = (await client.get("/api/billing")).json()
        assert billing["purchases"][0]["quantity"] == 2

    async def test_create_checkout_session_unknown_slug(self, client):
        response = await client.post(
            "/api/billing/checkout-sessions",
            json={
                "priceSlug": "enterprise",
                "successUrl": "http://localhost:3000/success",
                "cancelUrl": "http://localhost:3000/pricing",
            },
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Price not found: enterprise"}

    async def test_create_checkout_session_requires_price(self, client):
        response = await client.post(
            "/api/billing/checkout-sessions",
            json={
                "successUrl": "http://localhost:3000/success",
                "cancelUrl": "http://localhost:3000/pricing",
            },
        )

        assert response.status_code == 400

    async def test_cancel_and_uncancel_subscription(self, client):
        dashboard = (await client.get("/api/billing/dashboard")).json()
        subscription_id = dashboard["subscriptionId"]

        cancel = await client.post(
            f"/api/billing/subscriptions/{subscription_id}/cancel"
        )
        assert cancel.status_code == 200
        assert cancel.json()["subscription"]["status"] == "cancellation_scheduled"

        uncancel = await client.post(
            f"/api/billing/subscriptions/{subscription_id}/uncancel"
        )
        assert uncancel.status_code == 200
        assert uncancel.json()["subscription"]["status"] == "active"

    async def test_cancel_unknown_subscription(self, client):
        await client.get("/api/billing")
        response = await client.post("/api/billing/subscriptions/sub_other/cancel")

        assert response.status_code == 404

    async def test_unknown_route_uses_error_shape(self, client):
        response = await client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert "error" in response.json()


@pytest.mark.asyncio
class TestBillingRouteUpstreamErrors:
    @pytest.fixture
    def billing_provider(self):
        provider = AsyncMock()
        provider.get_billing = AsyncMock(
            side_effect=UpstreamError("Flowglad GET failed", upstream_status=503)
        )
        return provider

    async def test_upstream_error_returns_500(self, client):
        response = await client.get("/api/billing")

        assert response.status_code == 500
        assert response.json() == {"error": "Flowglad GET failed"}
