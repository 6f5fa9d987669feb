"""Billing providers - hosted billing platform integrations."""

from packages.billing.providers.billing.interface import (
    BillingProviderInterface,
    CustomerDetailsResolver,
)
from packages.billing.providers.billing.factory import (
    get_billing_provider,
    reset_billing_provider,
)

__all__ = [
    "BillingProviderInterface",
    "CustomerDetailsResolver",
    "get_billing_provider",
    "reset_billing_provider",
]
