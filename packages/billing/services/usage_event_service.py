"""
Service for recording usage events against a customer's subscription.
"""

import secrets
import string
import time

from common.core.exceptions import (
    AppException,
    ConfigurationError,
    NotFoundError,
    UpstreamError,
)
from common.core.otel_axiom_exporter import trace_span, get_logger, log_span_event
from packages.billing.models.domain.usage import UsageEvent, UsageEventCreateModel
from packages.billing.models.schemas.billing import CreateUsageEventRequest
from packages.billing.providers.billing.interface import BillingProviderInterface
from packages.billing.services.billing_service import fetch_billing_snapshot
from packages.billing.utils.pricing_helpers import find_usage_price_by_meter_slug

logger = get_logger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def generate_transaction_id() -> str:
    """Idempotency key of the form usage_<epoch millis>_<random base36>."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"usage_{int(time.time() * 1000)}_{suffix}"


class UsageEventService:
    """Service for usage event submission."""

    def __init__(self, billing: BillingProviderInterface):
        self.billing = billing

    @trace_span
    async def create_usage_event(
        self, customer_external_id: str, request: CreateUsageEventRequest
    ) -> UsageEvent:
        """
        Record consumption of a usage meter on the current subscription.

        Args:
            customer_external_id: Auth user id of the customer
            request: Validated usage event request

        Returns:
            The usage event as recorded by the billing platform

        Raises:
            NotFoundError: No customer, no current subscription, or the meter
                has no usage price
            ConfigurationError: The meter's usage price has no slug
            UpstreamError: The billing platform call failed
        """
        meter_slug = request.usage_meter_slug
        snapshot = await fetch_billing_snapshot(self.billing, customer_external_id)

        # At most one current subscription unless the platform allows several
        subscription = snapshot.current_subscription
        if subscription is None or subscription.id is None:
            raise NotFoundError("No active subscription found")

        price = find_usage_price_by_meter_slug(meter_slug, snapshot.pricing_model)
        if price is None:
            raise NotFoundError(f"Usage price not found for meter: {meter_slug}")
        if not price.slug:
            raise ConfigurationError(
                f"Usage price for meter {meter_slug} has no slug"
            )

        transaction_id = request.transaction_id or generate_transaction_id()
        usage_event = UsageEventCreateModel(
            subscription_id=subscription.id,
            price_slug=price.slug,
            amount=request.amount,
            transaction_id=transaction_id,
        )

        try:
            event = await self.billing.create_usage_event(
                customer_external_id, usage_event
            )
        except UpstreamError:
            raise
        except AppException as e:
            raise UpstreamError(e.message)
        except Exception as e:
            logger.error(f"Failed to record usage event {transaction_id}: {e}")
            raise UpstreamError(str(e) or "Failed to create usage event")

        log_span_event(
            f"Recorded {request.amount} {meter_slug} for {customer_external_id}",
            {
                "customer_external_id": customer_external_id,
                "usage_meter_slug": meter_slug,
                "amount": request.amount,
                "transaction_id": transaction_id,
            },
        )
        return event
