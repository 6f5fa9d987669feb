"""
Factory for getting the billing provider instance.
"""

from typing import Optional

from common.core.config import settings
from common.core.constants import BillingProviderType
from common.core.exceptions import ConfigurationError
from packages.auth.services.customer_details_service import CustomerDetailsService
from packages.billing.providers.billing.interface import BillingProviderInterface
from packages.billing.providers.billing.flowglad_billing import FlowgladBillingProvider
from packages.billing.providers.billing.local_billing import LocalBillingProvider

# The local provider keeps customer state in memory, so one instance is shared
_billing_provider: Optional[BillingProviderInterface] = None


def _create_billing_provider(
    provider_type: BillingProviderType,
) -> BillingProviderInterface:
    resolver = CustomerDetailsService().get_customer_details
    if provider_type == BillingProviderType.FLOWGLAD:
        if not settings.flowglad_secret_key:
            raise ConfigurationError(
                "FLOWGLAD_SECRET_KEY must be set when BILLING_PROVIDER=flowglad"
            )
        return FlowgladBillingProvider(customer_details_resolver=resolver)
    if provider_type == BillingProviderType.LOCAL:
        return LocalBillingProvider(customer_details_resolver=resolver)
    raise ConfigurationError(f"Unsupported billing provider: {provider_type}")


def get_billing_provider() -> BillingProviderInterface:
    """
    Get billing provider instance.

    Selected by BILLING_PROVIDER: the Flowglad platform, or the in-memory
    local provider for development and tests.

    Returns:
        BillingProviderInterface: Configured billing provider
    """
    global _billing_provider
    if _billing_provider is None:
        _billing_provider = _create_billing_provider(settings.billing_provider)
    return _billing_provider


def reset_billing_provider() -> None:
    """Drop the shared instance (tests, settings reload)."""
    global _billing_provider
    _billing_provider = None
