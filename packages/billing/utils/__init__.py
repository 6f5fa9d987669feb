"""Pure helpers over billing snapshots."""

from packages.billing.utils.pricing_helpers import (
    find_price_by_slug,
    find_usage_meter_balance,
    find_usage_meter_by_slug,
    find_usage_price_by_meter_slug,
    has_feature_access,
    is_default_plan_by_slug,
)
from packages.billing.utils.usage_totals import (
    compute_message_usage_total,
    compute_usage_total,
    get_usage_total_calculator,
)

__all__ = [
    "find_price_by_slug",
    "find_usage_meter_balance",
    "find_usage_meter_by_slug",
    "find_usage_price_by_meter_slug",
    "has_feature_access",
    "is_default_plan_by_slug",
    "compute_message_usage_total",
    "compute_usage_total",
    "get_usage_total_calculator",
]
