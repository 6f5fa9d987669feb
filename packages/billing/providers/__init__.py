"""Billing providers - abstracted external platform integrations."""

from packages.billing.providers.billing.factory import get_billing_provider

__all__ = [
    "get_billing_provider",
]
