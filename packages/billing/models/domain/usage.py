"""
Domain models for usage events.
"""

from datetime import datetime
from typing import Optional
from pydantic import Field

from packages.billing.models.domain.pricing import BillingModel, ExternalId


class UsageEvent(BillingModel):
    """Usage event as recorded by the billing platform."""

    id: Optional[ExternalId] = None
    subscription_id: Optional[ExternalId] = None
    customer_id: Optional[ExternalId] = None
    usage_meter_id: Optional[ExternalId] = None
    price_id: Optional[ExternalId] = None
    price_slug: Optional[str] = None
    amount: Optional[int] = None
    transaction_id: Optional[str] = None
    usage_date: Optional[datetime] = None


class UsageEventCreateModel(BillingModel):
    """Payload forwarded to the billing platform to record consumption."""

    subscription_id: ExternalId
    price_slug: str
    amount: int = Field(gt=0)
    # Idempotency key: a retried transaction must not be counted twice
    transaction_id: str
