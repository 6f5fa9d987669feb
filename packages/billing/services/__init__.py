"""Billing services."""

from packages.billing.services.billing_service import BillingService
from packages.billing.services.checkout_service import CheckoutService
from packages.billing.services.subscription_service import SubscriptionService
from packages.billing.services.usage_event_service import UsageEventService

__all__ = [
    "BillingService",
    "CheckoutService",
    "SubscriptionService",
    "UsageEventService",
]
