"""
Billing enums - the values the billing platform uses for prices, feature
items, purchases and subscriptions.
"""

from enum import Enum


class PriceType(str, Enum):
    """Kind of price attached to a product."""

    USAGE = "usage"  # Charged per unit recorded against a usage meter
    SUBSCRIPTION = "subscription"
    SINGLE_PAYMENT = "single_payment"  # One-time purchase, e.g. credit top-ups


class FeatureItemType(str, Enum):
    """Kind of entitlement granted by a subscription feature item."""

    USAGE_CREDIT_GRANT = "usage_credit_grant"  # Grants credits on a usage meter
    TOGGLE = "toggle"  # Boolean feature access


class PurchaseStatus(str, Enum):
    """Payment state of a one-time purchase."""

    OPEN = "open"
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class SubscriptionStatus(str, Enum):
    """Subscription status lifecycle."""

    TRIALING = "trialing"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELLATION_SCHEDULED = "cancellation_scheduled"
    CANCELED = "canceled"


class CancellationTiming(str, Enum):
    """When a requested cancellation takes effect."""

    AT_END_OF_CURRENT_BILLING_PERIOD = "at_end_of_current_billing_period"
    IMMEDIATELY = "immediately"
