"""FastAPI dependencies for billing routes."""

from fastapi import Depends

from packages.billing.providers.billing.factory import get_billing_provider
from packages.billing.providers.billing.interface import BillingProviderInterface
from packages.billing.services.billing_service import BillingService
from packages.billing.services.checkout_service import CheckoutService
from packages.billing.services.subscription_service import SubscriptionService
from packages.billing.services.usage_event_service import UsageEventService


def get_billing_provider_dependency() -> BillingProviderInterface:
    """Get the configured billing provider."""
    return get_billing_provider()


def get_billing_service(
    billing: BillingProviderInterface = Depends(get_billing_provider_dependency),
) -> BillingService:
    return BillingService(billing)


def get_checkout_service(
    billing: BillingProviderInterface = Depends(get_billing_provider_dependency),
) -> CheckoutService:
    return CheckoutService(billing)


def get_subscription_service(
    billing: BillingProviderInterface = Depends(get_billing_provider_dependency),
) -> SubscriptionService:
    return SubscriptionService(billing)


def get_usage_event_service(
    billing: BillingProviderInterface = Depends(get_billing_provider_dependency),
) -> UsageEventService:
    return UsageEventService(billing)
