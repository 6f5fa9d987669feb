"""Domain models for billing."""

from packages.billing.models.domain.enums import (
    PriceType,
    FeatureItemType,
    PurchaseStatus,
    SubscriptionStatus,
    CancellationTiming,
)
from packages.billing.models.domain.pricing import (
    UsageMeter,
    Price,
    Feature,
    Product,
    PricingModel,
)
from packages.billing.models.domain.billing import (
    FeatureItem,
    UsageMeterBalance,
    SubscriptionExperimental,
    Subscription,
    Purchase,
    Customer,
    BillingSnapshot,
)
from packages.billing.models.domain.usage import UsageEvent, UsageEventCreateModel
from packages.billing.models.domain.checkout import CheckoutSession
from packages.billing.models.domain.ledger import PendingUsageLedger

__all__ = [
    # Enums
    "PriceType",
    "FeatureItemType",
    "PurchaseStatus",
    "SubscriptionStatus",
    "CancellationTiming",
    # Pricing model
    "UsageMeter",
    "Price",
    "Feature",
    "Product",
    "PricingModel",
    # Billing snapshot
    "FeatureItem",
    "UsageMeterBalance",
    "SubscriptionExperimental",
    "Subscription",
    "Purchase",
    "Customer",
    "BillingSnapshot",
    # Usage
    "UsageEvent",
    "UsageEventCreateModel",
    "PendingUsageLedger",
    # Checkout
    "CheckoutSession",
]
