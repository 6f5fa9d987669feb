"""
Per-period credit totals of usage meters.

Two policies exist and are kept apart because they read different entities:

- feature items: credits granted by the subscription's usage_credit_grant items
- purchases: a fixed number of credits per paid top-up purchase

Both are fail-open: a catalog shape change must never break the dashboard,
so any unexpected data yields a total of 0.
"""

from typing import Any, Callable, Dict, Iterable, Optional, Union

from common.core.config import settings
from common.core.constants import UsageTotalStrategy
from common.core.otel_axiom_exporter import get_logger
from packages.billing.models.domain.billing import BillingSnapshot, Purchase
from packages.billing.models.domain.enums import FeatureItemType, PurchaseStatus
from packages.billing.utils.pricing_helpers import (
    coerce_pricing_model,
    coerce_subscription,
)

logger = get_logger(__name__)

Number = Union[int, float]
UsageTotalCalculator = Callable[[str, BillingSnapshot], Number]


def compute_usage_total(
    usage_meter_slug: str, subscription: Any, pricing_model: Any
) -> Number:
    """
    Sum the credits granted to a subscription for one usage meter.

    This is the entitlement for the billing period, not the remaining balance.

    Args:
        usage_meter_slug: Slug of the meter to total
        subscription: Current subscription (model or raw dict)
        pricing_model: Pricing model the meter ids resolve against

    Returns:
        Total granted credits, 0 when anything needed is missing
    """
    try:
        current = coerce_subscription(subscription)
        model = coerce_pricing_model(pricing_model)
        if current is None or model is None or model.usage_meters is None:
            return 0

        experimental = current.experimental
        feature_items = (experimental.feature_items if experimental else None) or []
        if not feature_items:
            return 0

        slug_by_meter_id: Dict[str, Optional[str]] = {
            str(meter.id): meter.slug for meter in model.usage_meters
        }

        total: Number = 0
        for item in feature_items:
            if item.type != FeatureItemType.USAGE_CREDIT_GRANT:
                continue
            if slug_by_meter_id.get(str(item.usage_meter_id)) != usage_meter_slug:
                continue
            total += item.amount if item.amount is not None else 0

        return total
    except Exception as e:
        logger.warning(f"Failed to compute usage total for {usage_meter_slug}: {e}")
        return 0


def compute_message_usage_total(
    purchases: Optional[Iterable[Any]],
    pricing_model: Any,
    top_up_price_id: Optional[str] = None,
    credits_per_purchase: Optional[int] = None,
) -> Number:
    """
    Sum the credits bought through paid top-up purchases.

    Args:
        purchases: The customer's purchases (models or raw dicts)
        pricing_model: Pricing model; no usage meters means no credits
        top_up_price_id: Price id of the top-up (defaults to CREDIT_TOPUP_PRICE_ID)
        credits_per_purchase: Credits per purchased unit (defaults to CREDITS_PER_TOPUP)

    Returns:
        quantity * credits_per_purchase over paid top-up purchases, or 0
    """
    try:
        model = coerce_pricing_model(pricing_model)
        if model is None or model.usage_meters is None or not purchases:
            return 0

        price_id = top_up_price_id if top_up_price_id is not None else settings.credit_topup_price_id
        per_unit = (
            credits_per_purchase
            if credits_per_purchase is not None
            else settings.credits_per_topup
        )

        total: Number = 0
        for raw in purchases:
            purchase = raw if isinstance(raw, Purchase) else Purchase.model_validate(raw)
            if str(purchase.price_id) != str(price_id):
                continue
            if purchase.status != PurchaseStatus.PAID:
                continue
            total += (purchase.quantity or 0) * per_unit

        return total
    except Exception as e:
        logger.warning(f"Failed to compute top-up usage total: {e}")
        return 0


def _feature_item_total(usage_meter_slug: str, snapshot: BillingSnapshot) -> Number:
    return compute_usage_total(
        usage_meter_slug, snapshot.current_subscription, snapshot.pricing_model
    )


def _purchase_total(usage_meter_slug: str, snapshot: BillingSnapshot) -> Number:
    # Top-ups grant credits on the single message meter regardless of slug.
    return compute_message_usage_total(snapshot.purchases, snapshot.pricing_model)


def get_usage_total_calculator(
    strategy: Optional[UsageTotalStrategy] = None,
) -> UsageTotalCalculator:
    """
    Get the usage-total policy configured for this deployment.

    Args:
        strategy: Override for USAGE_TOTAL_STRATEGY

    Returns:
        Callable of (usage_meter_slug, snapshot) -> total credits
    """
    strategy = strategy or settings.usage_total_strategy
    if strategy == UsageTotalStrategy.PURCHASES:
        return _purchase_total
    return _feature_item_total
