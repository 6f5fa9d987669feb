"""
Async client for the usage-event and billing endpoints.

Keeps an optimistic view of the signed-in customer's balances: accepted
usage is subtracted locally at once and reconciled against the next
successful billing reload.
"""

from typing import Dict, Mapping, Optional, Set, Union
import httpx

from pydantic import ValidationError

from common.core.exceptions import AppException, UpstreamError
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.models.domain.billing import BillingSnapshot
from packages.billing.models.domain.ledger import PendingUsageLedger
from packages.billing.models.domain.usage import UsageEvent
from packages.billing.services.usage_event_service import generate_transaction_id
from packages.billing.utils.pricing_helpers import find_usage_meter_balance

logger = get_logger(__name__)

Number = Union[int, float]


class SubmissionInProgressError(AppException):
    """A usage submission for the same meter has not completed yet."""

    status_code = 409


class UsageRequestError(AppException):
    """The backend rejected a request."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


def balances_from_snapshot(snapshot: BillingSnapshot) -> Dict[str, Optional[Number]]:
    """Available balance per usage meter slug of the current subscription."""
    balances: Dict[str, Optional[Number]] = {}
    pricing_model = snapshot.pricing_model
    subscription = snapshot.current_subscription
    if pricing_model is None:
        return balances
    for meter in pricing_model.usage_meters or []:
        if not meter.slug or meter.slug in balances:
            continue
        balance = find_usage_meter_balance(meter.slug, subscription, pricing_model)
        balances[meter.slug] = balance.available_balance if balance else None
    return balances


class UsageClient:
    """Client for recording usage with an optimistic local balance."""

    def __init__(
        self,
        base_url: str,
        headers: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 15.0,
    ):
        """
        Args:
            base_url: Backend origin, e.g. http://localhost:8000
            headers: Session headers (cookie or authorization) sent on every call
            transport: Optional httpx transport (tests)
            timeout: Request timeout in seconds
        """
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=dict(headers or {}),
            transport=transport,
            timeout=timeout,
        )
        self.ledger = PendingUsageLedger()
        self.snapshot: Optional[BillingSnapshot] = None
        self._in_flight: Set[str] = set()
        # Reloads may overlap; only the most recently started one is applied
        self._reload_seq = 0
        self._applied_reload_seq = 0

    async def __aenter__(self) -> "UsageClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def available(self, usage_meter_slug: str) -> Optional[Number]:
        """Balance to display: authoritative minus pending usage, floored at 0."""
        return self.ledger.available(usage_meter_slug)

    def is_submitting(self, usage_meter_slug: str) -> bool:
        return usage_meter_slug in self._in_flight

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise UpstreamError(f"{method} {path} failed: {e}")
        if response.status_code >= 400:
            try:
                message = response.json().get("error", response.text)
            except (ValueError, AttributeError):
                message = response.text
            raise UsageRequestError(message, response.status_code)
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(f"{method} {path} returned a non-JSON body: {e}")
        if not isinstance(payload, dict):
            raise UpstreamError(f"{method} {path} returned an unexpected body")
        return payload

    @trace_span
    async def load_billing(self) -> BillingSnapshot:
        """
        Reload billing and adopt it as the authoritative balance.

        A reload that completes after a later-started one has been applied is
        returned but not adopted.

        Raises:
            UpstreamError: If the backend is unreachable or the body is malformed
            UsageRequestError: If the backend rejects the request
        """
        self._reload_seq += 1
        seq = self._reload_seq
        payload = await self._request("GET", "/api/billing")
        try:
            snapshot = BillingSnapshot.model_validate(payload)
        except ValidationError as e:
            raise UpstreamError(f"Malformed billing snapshot: {e}")

        if seq < self._applied_reload_seq:
            logger.info("Ignoring stale billing reload", extra={"reload_seq": seq})
            return snapshot
        self._applied_reload_seq = seq
        self.snapshot = snapshot
        self.ledger.reconcile(balances_from_snapshot(snapshot))
        return snapshot

    @trace_span
    async def generate(self, usage_meter_slug: str, amount: int = 1) -> UsageEvent:
        """
        Record usage on a meter, then reload billing.

        The usage is subtracted from the displayed balance as soon as the
        backend accepts it. A failed reload keeps the local estimate.

        Raises:
            SubmissionInProgressError: If a submission for the meter is pending
            UsageRequestError: If the backend rejects the usage event
        """
        if usage_meter_slug in self._in_flight:
            raise SubmissionInProgressError(
                f"A usage event for {usage_meter_slug} is already being submitted"
            )

        self._in_flight.add(usage_meter_slug)
        try:
            payload = await self._request(
                "POST",
                "/api/usage-events",
                json={
                    "usageMeterSlug": usage_meter_slug,
                    "amount": amount,
                    "transactionId": generate_transaction_id(),
                },
            )
            self.ledger.record(usage_meter_slug, amount)
            event = UsageEvent.model_validate(payload.get("usageEvent") or {})

            try:
                await self.load_billing()
            except AppException as e:
                logger.warning(
                    f"Billing reload failed, keeping pending usage: {e.message}"
                )
            return event
        finally:
            self._in_flight.discard(usage_meter_slug)
