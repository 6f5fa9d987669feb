"""
Flowglad implementation of the billing provider.

Talks to the Flowglad REST API with the merchant secret key. Customers are
keyed by the auth user id (Flowglad "external id") and created on first
billing fetch.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote
import httpx
from pydantic import ValidationError

from common.core.config import settings
from common.core.exceptions import UpstreamError
from common.core.otel_axiom_exporter import trace_span, get_logger, inject_trace_context
from packages.billing.models.domain.billing import BillingSnapshot, Subscription
from packages.billing.models.domain.checkout import CheckoutSession
from packages.billing.models.domain.enums import CancellationTiming
from packages.billing.models.domain.pricing import ExternalId
from packages.billing.models.domain.usage import UsageEvent, UsageEventCreateModel
from packages.billing.providers.billing.interface import (
    BillingProviderInterface,
    CustomerDetailsResolver,
)

logger = get_logger(__name__)



class FlowgladBillingProvider(BillingProviderInterface):
    """Flowglad-based billing implementation."""

    def __init__(
        self,
        customer_details_resolver: Optional[CustomerDetailsResolver] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            customer_details_resolver: Supplies email/name when a customer has
                to be created; without it, unknown customers are reported as
                missing instead
            transport: Optional httpx transport (tests)
        """
        self.base_url = settings.flowglad_base_url.rstrip("/")
        self.secret_key = settings.flowglad_secret_key
        self.timeout = settings.flowglad_request_timeout_seconds
        self.customer_details_resolver = customer_details_resolver
        self._transport = transport

    async def _request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        headers = {
            "Authorization": self.secret_key,
            "Content-Type": "application/json",
            **inject_trace_context(),
        }
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, json=json)
                response.raise_for_status()
                return response.json() if response.content else {}
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            raise UpstreamError(
                f"Flowglad {method} {path} failed with status {status_code}: "
                f"{_error_message(e.response)}",
                upstream_status=status_code,
            )
        except httpx.HTTPError as e:
            logger.error(f"Flowglad {method} {path} failed: {e}")
            raise UpstreamError(f"Flowglad {method} {path} failed: {e}")

    @trace_span
    async def get_billing(self, customer_external_id: str) -> BillingSnapshot:
        """Fetch billing, creating the customer on first access."""
        path = f"/customers/{quote(customer_external_id, safe='')}/billing"
        try:
            payload = await self._request("GET", path)
        except UpstreamError as e:
            if e.upstream_status != 404:
                raise
            if self.customer_details_resolver is None:
                logger.info(
                    "Flowglad customer not found",
                    extra={"customer_external_id": customer_external_id},
                )
                return BillingSnapshot()
            await self._create_customer(customer_external_id)
            payload = await self._request("GET", path)

        return _parse_billing(payload)

    @trace_span
    async def _create_customer(self, customer_external_id: str) -> None:
        details = await self.customer_details_resolver(customer_external_id)
        await self._request(
            "POST",
            "/customers",
            json={
                "customer": {
                    "externalId": customer_external_id,
                    "email": details.email,
                    "name": details.name,
                }
            },
        )
        logger.info(
            "Created Flowglad customer",
            extra={"customer_external_id": customer_external_id},
        )

    @trace_span
    async def create_usage_event(
        self, customer_external_id: str, usage_event: UsageEventCreateModel
    ) -> UsageEvent:
        payload = await self._request(
            "POST",
            "/usage-events",
            json={"usageEvent": usage_event.model_dump(by_alias=True, mode="json")},
        )
        event = UsageEvent.model_validate(payload.get("usageEvent") or payload)
        logger.info(
            "Recorded Flowglad usage event",
            extra={
                "customer_external_id": customer_external_id,
                "transaction_id": usage_event.transaction_id,
                "price_slug": usage_event.price_slug,
                "amount": usage_event.amount,
            },
        )
        return event

    @trace_span
    async def create_checkout_session(
        self,
        customer_external_id: str,
        price_id: ExternalId,
        success_url: str,
        cancel_url: str,
        quantity: int = 1,
    ) -> CheckoutSession:
        payload = await self._request(
            "POST",
            "/checkout-sessions",
            json={
                "checkoutSession": {
                    "customerExternalId": customer_external_id,
                    "priceId": price_id,
                    "successUrl": success_url,
                    "cancelUrl": cancel_url,
                    "quantity": quantity,
                    "type": "product",
                }
            },
        )
        session = CheckoutSession.model_validate(payload.get("checkoutSession") or {})
        if not session.url:
            session.url = payload.get("url")
        return session

    @trace_span
    async def cancel_subscription(
        self,
        customer_external_id: str,
        subscription_id: ExternalId,
        timing: CancellationTiming = CancellationTiming.AT_END_OF_CURRENT_BILLING_PERIOD,
    ) -> Subscription:
        payload = await self._request(
            "POST",
            f"/subscriptions/{quote(str(subscription_id), safe='')}/cancel",
            json={"cancellation": {"timing": timing.value}},
        )
        return Subscription.model_validate(payload.get("subscription") or payload)

    @trace_span
    async def uncancel_subscription(
        self, customer_external_id: str, subscription_id: ExternalId
    ) -> Subscription:
        payload = await self._request(
            "POST",
            f"/subscriptions/{quote(str(subscription_id), safe='')}/uncancel",
            json={},
        )
        return Subscription.model_validate(payload.get("subscription") or payload)

    async def health_check(self) -> bool:
        if not self.secret_key:
            return False
        try:
            await self._request("GET", "/pricing-models/default")
            return True
        except UpstreamError as e:
            logger.warning(f"Flowglad health check failed: {e}")
            return False


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("error") or body.get("message") or body)
    return str(body)


def _parse_billing(payload: Dict[str, Any]) -> BillingSnapshot:
    data = dict(payload)
    # Older API versions serve the pricing model as "catalog"
    if not data.get("pricingModel") and data.get("catalog"):
        data["pricingModel"] = data["catalog"]
    try:
        return BillingSnapshot.model_validate(data)
    except ValidationError as e:
        raise UpstreamError(f"Malformed Flowglad billing payload: {e}")
