"""
Domain models for hosted checkout sessions.
"""

from typing import Optional

from packages.billing.models.domain.pricing import BillingModel, ExternalId


class CheckoutSession(BillingModel):
    """Checkout session hosted by the billing platform."""

    id: Optional[ExternalId] = None
    url: Optional[str] = None
    status: Optional[str] = None
    price_id: Optional[ExternalId] = None
    quantity: Optional[int] = None
    success_url: Optional[str] = None
    cancel_url: Optional[str] = None
