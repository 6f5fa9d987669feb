"""
Unit tests for UsageClient.

Runs against the app through ASGITransport, or a MockTransport to simulate
backend failures.
"""

import asyncio
import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport

from api.main import app
from common.core.exceptions import UpstreamError
from packages.billing.client.usage_client import (
    SubmissionInProgressError,
    UsageClient,
    UsageRequestError,
    balances_from_snapshot,
)
from packages.billing.models.domain.billing import BillingSnapshot

BILLING_BODY = {
    "customer": {"id": "cust_1"},
    "currentSubscriptions": [
        {
            "id": "sub_1",
            "experimental": {
                "usageMeterBalances": [
                    {"usageMeterId": "um_1", "slug": "fast_generations", "availableBalance": 10}
                ]
            },
        }
    ],
    "pricingModel": {"usageMeters": [{"id": "um_1", "slug": "fast_generations"}]},
}


def test_balances_from_snapshot():
    snapshot = BillingSnapshot.model_validate(
        {
            **BILLING_BODY,
            "pricingModel": {
                "usageMeters": [
                    {"id": "um_1", "slug": "fast_generations"},
                    {"id": "um_2", "slug": "hd_video_minutes"},
                ]
            },
        }
    )
    assert balances_from_snapshot(snapshot) == {
        "fast_generations": 10,
        "hd_video_minutes": None,
    }


@pytest.mark.asyncio
class TestUsageClientAgainstApp:
    @pytest_asyncio.fixture
    async def usage_client(self, client):
        # `client` installs the dependency overrides on the app
        async with UsageClient(
            "http://test", transport=ASGITransport(app=app)
        ) as usage_client:
            yield usage_client

    async def test_generate_reconciles_with_server_balance(self, usage_client):
        await usage_client.load_billing()
        assert usage_client.available("fast_generations") == 10

        event = await usage_client.generate("fast_generations", 3)

        assert event.amount == 3
        assert usage_client.available("fast_generations") == 7
        assert usage_client.ledger.pending_total("fast_generations") == 0

    async def test_rejected_usage_is_not_recorded(self, usage_client):
        await usage_client.load_billing()

        with pytest.raises(UsageRequestError) as exc_info:
            await usage_client.generate("slow_generations", 1)

        assert exc_info.value.status_code == 404
        assert usage_client.ledger.pending_total("slow_generations") == 0
        assert not usage_client.is_submitting("slow_generations")


@pytest.mark.asyncio
class TestUsageClientReconciliation:
    async def test_failed_reload_keeps_pending_usage(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(
                    200, json={"success": True, "usageEvent": {"id": "ue_1", "amount": 2}}
                )
            return httpx.Response(500, json={"error": "billing unavailable"})

        async with UsageClient(
            "http://test", transport=httpx.MockTransport(handler)
        ) as usage_client:
            usage_client.ledger.reconcile({"fast_generations": 10})

            await usage_client.generate("fast_generations", 2)

            assert usage_client.available("fast_generations") == 8
            assert usage_client.ledger.pending_total("fast_generations") == 2

    async def test_concurrent_submission_for_same_meter_rejected(self):
        release = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                await release.wait()
                return httpx.Response(
                    200, json={"success": True, "usageEvent": {"id": "ue_1", "amount": 1}}
                )
            return httpx.Response(200, json=BILLING_BODY)

        async with UsageClient(
            "http://test", transport=httpx.MockTransport(handler)
        ) as usage_client:
            first = asyncio.create_task(usage_client.generate("fast_generations", 1))
            await asyncio.sleep(0)
            assert usage_client.is_submitting("fast_generations")

            with pytest.raises(SubmissionInProgressError):
                await usage_client.generate("fast_generations", 1)

            release.set()
            await first

            assert not usage_client.is_submitting("fast_generations")
            assert usage_client.available("fast_generations") == 10

    @pytest.mark.parametrize(
        "billing_response",
        [
            httpx.Response(200, text="<html>gateway</html>"),
            httpx.Response(200, json=["not", "a", "snapshot"]),
        ],
    )
    async def test_unreadable_reload_keeps_pending_usage(self, billing_response):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(
                    200, json={"success": True, "usageEvent": {"id": "ue_1", "amount": 2}}
                )
            return billing_response

        async with UsageClient(
            "http://test", transport=httpx.MockTransport(handler)
        ) as usage_client:
            usage_client.ledger.reconcile({"fast_generations": 10})

            event = await usage_client.generate("fast_generations", 2)

            assert event.id == "ue_1"
            assert usage_client.available("fast_generations") == 8
            assert usage_client.ledger.pending_total("fast_generations") == 2

    async def test_unreadable_reload_raises_upstream_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway</html>")

        async with UsageClient(
            "http://test", transport=httpx.MockTransport(handler)
        ) as usage_client:
            with pytest.raises(UpstreamError):
                await usage_client.load_billing()

    async def test_stale_reload_is_not_applied(self):
        first_started = asyncio.Event()
        release_first = asyncio.Event()
        calls = []

        def body_with_balance(balance):
            subscription = BILLING_BODY["currentSubscriptions"][0]
            meter_balance = subscription["experimental"]["usageMeterBalances"][0]
            return {
                **BILLING_BODY,
                "currentSubscriptions": [
                    {
                        **subscription,
                        "experimental": {
                            "usageMeterBalances": [
                                {**meter_balance, "availableBalance": balance}
                            ]
                        },
                    }
                ],
            }

        async def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                first_started.set()
                await release_first.wait()
                return httpx.Response(200, json=body_with_balance(10))
            return httpx.Response(200, json=body_with_balance(4))

        async with UsageClient(
            "http://test", transport=httpx.MockTransport(handler)
        ) as usage_client:
            older = asyncio.create_task(usage_client.load_billing())
            await first_started.wait()

            await usage_client.load_billing()
            assert usage_client.available("fast_generations") == 4

            release_first.set()
            await older

            assert usage_client.available("fast_generations") == 4
