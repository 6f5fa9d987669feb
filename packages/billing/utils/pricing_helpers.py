"""
Lookups over a pricing-model snapshot.

All functions accept parsed models, raw JSON dicts or None, and never raise:
a feature that is not offered is an everyday case, so absence is reported as
None/False.
"""

from typing import Any, Dict, Optional, Type, TypeVar
from pydantic import BaseModel, ValidationError

from common.core.otel_axiom_exporter import get_logger
from packages.billing.models.domain.billing import Subscription, UsageMeterBalance
from packages.billing.models.domain.enums import PriceType
from packages.billing.models.domain.pricing import (
    ExternalId,
    Price,
    PricingModel,
    UsageMeter,
)

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _coerce(value: Any, model_type: Type[ModelT]) -> Optional[ModelT]:
    if value is None or isinstance(value, model_type):
        return value
    try:
        return model_type.model_validate(value)
    except ValidationError as e:
        logger.debug(f"Ignoring malformed {model_type.__name__}: {e}")
        return None


def coerce_pricing_model(value: Any) -> Optional[PricingModel]:
    return _coerce(value, PricingModel)


def coerce_subscription(value: Any) -> Optional[Subscription]:
    return _coerce(value, Subscription)


def find_usage_meter_by_slug(
    usage_meter_slug: str, pricing_model: Any
) -> Optional[UsageMeter]:
    """
    Find a usage meter by its slug (exact, case-sensitive).

    Returns:
        The first matching meter, or None if the model has no usage meters
        or none matches
    """
    model = coerce_pricing_model(pricing_model)
    if model is None or model.usage_meters is None:
        return None

    for meter in model.usage_meters:
        if meter.slug == usage_meter_slug:
            return meter
    return None


def _meter_ids_by_slug(model: PricingModel) -> Dict[str, ExternalId]:
    # Duplicate slugs are a catalog integrity problem; the first one wins.
    meter_ids: Dict[str, ExternalId] = {}
    for meter in model.usage_meters or []:
        if meter.slug is not None and meter.slug not in meter_ids:
            meter_ids[meter.slug] = meter.id
    return meter_ids


def find_usage_price_by_meter_slug(
    usage_meter_slug: str, pricing_model: Any
) -> Optional[Price]:
    """
    Find the usage price attached to a usage meter.

    Prices are scanned in product order, then price order within a product;
    the first usage price on the meter wins.

    Returns:
        The usage price, or None if the model lacks products or usage meters,
        the slug is unknown, or no usage price references the meter
    """
    model = coerce_pricing_model(pricing_model)
    if model is None or model.products is None or model.usage_meters is None:
        return None

    usage_meter_id = _meter_ids_by_slug(model).get(usage_meter_slug)
    if usage_meter_id is None:
        return None

    for product in model.products:
        for price in product.prices or []:
            if price.type == PriceType.USAGE and price.usage_meter_id == usage_meter_id:
                return price
    return None


def find_price_by_slug(price_slug: Optional[str], pricing_model: Any) -> Optional[Price]:
    """Find any price (usage, subscription or single payment) by its slug."""
    model = coerce_pricing_model(pricing_model)
    if model is None or model.products is None or not price_slug:
        return None

    for product in model.products:
        for price in product.prices or []:
            if price.slug == price_slug:
                return price
    return None


def is_default_plan_by_slug(pricing_model: Any, price_slug: Optional[str]) -> bool:
    """
    Check whether a price belongs to the default (free) product.

    Unknown prices are reported as not default.
    """
    model = coerce_pricing_model(pricing_model)
    if model is None or model.products is None or not price_slug:
        return False

    for product in model.products:
        if any(price.slug == price_slug for price in product.prices or []):
            return product.default is True
    return False


def find_usage_meter_balance(
    usage_meter_slug: str, subscription: Any, pricing_model: Any = None
) -> Optional[UsageMeterBalance]:
    """
    Find the live balance of a usage meter on a subscription.

    Balances are matched by slug, falling back to the meter id resolved
    through the pricing model for balances that carry no slug.
    """
    current = coerce_subscription(subscription)
    if current is None or current.experimental is None:
        return None

    balances = current.experimental.usage_meter_balances or []
    for balance in balances:
        if balance.slug == usage_meter_slug:
            return balance

    meter = find_usage_meter_by_slug(usage_meter_slug, pricing_model)
    if meter is None or meter.id is None:
        return None
    for balance in balances:
        if balance.slug is None and str(balance.usage_meter_id) == str(meter.id):
            return balance
    return None


def has_feature_access(feature_slug: str, subscription: Any) -> bool:
    """Check whether any feature item on the subscription carries the slug."""
    current = coerce_subscription(subscription)
    if current is None or current.experimental is None:
        return False

    return any(
        item.slug == feature_slug
        for item in current.experimental.feature_items or []
    )
