"""
Service for managing subscriptions.
"""

from common.core.exceptions import NotFoundError
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.models.domain.billing import Subscription
from packages.billing.models.domain.enums import CancellationTiming
from packages.billing.models.domain.pricing import ExternalId
from packages.billing.providers.billing.interface import BillingProviderInterface
from packages.billing.services.billing_service import fetch_billing_snapshot

logger = get_logger(__name__)


class SubscriptionService:
    """Service for subscription cancellation."""

    def __init__(self, billing: BillingProviderInterface):
        self.billing = billing

    async def _ensure_current(
        self, customer_external_id: str, subscription_id: ExternalId
    ) -> Subscription:
        snapshot = await fetch_billing_snapshot(self.billing, customer_external_id)
        for subscription in snapshot.current_subscriptions:
            if subscription.id is not None and str(subscription.id) == str(subscription_id):
                return subscription
        raise NotFoundError(f"Subscription {subscription_id} not found")

    @trace_span
    async def cancel_subscription(
        self,
        customer_external_id: str,
        subscription_id: ExternalId,
        timing: CancellationTiming = CancellationTiming.AT_END_OF_CURRENT_BILLING_PERIOD,
    ) -> Subscription:
        """
        Cancel one of the customer's current subscriptions.

        Raises:
            NotFoundError: If the subscription is not current for the customer
        """
        subscription = await self._ensure_current(customer_external_id, subscription_id)
        logger.info(
            f"Cancelling subscription {subscription.id} ({timing.value})",
            extra={"customer_external_id": customer_external_id},
        )
        return await self.billing.cancel_subscription(
            customer_external_id, subscription.id, timing
        )

    @trace_span
    async def uncancel_subscription(
        self, customer_external_id: str, subscription_id: ExternalId
    ) -> Subscription:
        """Withdraw a scheduled cancellation."""
        subscription = await self._ensure_current(customer_external_id, subscription_id)
        logger.info(
            f"Reverting cancellation of subscription {subscription.id}",
            extra={"customer_external_id": customer_external_id},
        )
        return await self.billing.uncancel_subscription(
            customer_external_id, subscription.id
        )
