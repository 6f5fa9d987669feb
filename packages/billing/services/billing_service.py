"""
Service for reading a customer's billing state.
"""

from typing import List, Optional

from common.core.config import settings
from common.core.exceptions import AppException, NotFoundError, UpstreamError
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.models.domain.billing import BillingSnapshot
from packages.billing.models.schemas.billing import (
    BillingDashboardResponse,
    FeatureAccessSummary,
    UsageMeterSummary,
)
from packages.billing.providers.billing.interface import BillingProviderInterface
from packages.billing.utils.pricing_helpers import (
    find_usage_meter_balance,
    find_usage_meter_by_slug,
    has_feature_access,
    is_default_plan_by_slug,
)
from packages.billing.utils.usage_totals import get_usage_total_calculator

logger = get_logger(__name__)


async def fetch_billing_snapshot(
    billing: BillingProviderInterface, customer_external_id: str
) -> BillingSnapshot:
    """
    Fetch a billing snapshot, surfacing collaborator failures as UpstreamError.

    Raises:
        NotFoundError: If the billing platform has no customer record
        UpstreamError: If the billing platform call fails
    """
    try:
        snapshot = await billing.get_billing(customer_external_id)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Billing fetch failed for {customer_external_id}: {e}")
        raise UpstreamError(str(e) or "Failed to load billing")

    if snapshot.customer is None:
        raise NotFoundError("Customer not found")
    return snapshot


def _subscription_price_slug(snapshot: BillingSnapshot) -> Optional[str]:
    subscription = snapshot.current_subscription
    if subscription is None or subscription.price_id is None:
        return None
    for product in (snapshot.pricing_model.products if snapshot.pricing_model else None) or []:
        for price in product.prices or []:
            if price.id is not None and str(price.id) == str(subscription.price_id):
                return price.slug
    return None


def progress_percent(remaining: float, total: float) -> float:
    """Share of the period's credits still available, capped at 100."""
    if total <= 0:
        return 0.0
    return min(remaining / total * 100, 100.0)


class BillingService:
    """Service for billing snapshots and the dashboard view."""

    def __init__(self, billing: BillingProviderInterface):
        self.billing = billing

    @trace_span
    async def get_billing(self, customer_external_id: str) -> BillingSnapshot:
        return await fetch_billing_snapshot(self.billing, customer_external_id)

    @trace_span
    async def get_dashboard(
        self, customer_external_id: str
    ) -> BillingDashboardResponse:
        """
        Build the dashboard view: plan, remaining credits per configured
        meter and access to configured features.
        """
        snapshot = await fetch_billing_snapshot(self.billing, customer_external_id)
        subscription = snapshot.current_subscription
        pricing_model = snapshot.pricing_model
        usage_total = get_usage_total_calculator()

        price_slug = _subscription_price_slug(snapshot)

        meters: List[UsageMeterSummary] = []
        for slug in settings.dashboard_usage_meter_slugs:
            meter = find_usage_meter_by_slug(slug, pricing_model)
            balance = find_usage_meter_balance(slug, subscription, pricing_model)
            remaining = (
                balance.available_balance
                if balance is not None and balance.available_balance is not None
                else 0
            )
            remaining = max(0, remaining)
            total = usage_total(slug, snapshot)
            meters.append(
                UsageMeterSummary(
                    slug=slug,
                    name=meter.name if meter is not None else None,
                    remaining=remaining,
                    total=total,
                    progress_percent=progress_percent(remaining, total),
                    has_access=balance is not None,
                )
            )

        features = [
            FeatureAccessSummary(slug=slug, has_access=has_feature_access(slug, subscription))
            for slug in settings.dashboard_feature_slugs
        ]

        return BillingDashboardResponse(
            plan_name=subscription.name if subscription is not None else None,
            price_slug=price_slug,
            subscription_id=subscription.id if subscription is not None else None,
            subscription_status=subscription.status if subscription is not None else None,
            is_default_plan=is_default_plan_by_slug(pricing_model, price_slug),
            cancel_scheduled_at=(
                subscription.cancel_scheduled_at if subscription is not None else None
            ),
            usage_meters=meters,
            features=features,
        )
