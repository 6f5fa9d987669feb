"""
API schemas for billing operations.

Request and response models for billing endpoints. Bodies are camelCase on
the wire.
"""

from datetime import datetime
from typing import Any, List, Optional, Union
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from packages.billing.models.domain.billing import Subscription
from packages.billing.models.domain.enums import CancellationTiming
from packages.billing.models.domain.pricing import ExternalId
from packages.billing.models.domain.usage import UsageEvent


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Usage Event Schemas
# ============================================================================


class CreateUsageEventRequest(CamelModel):
    """Request to record consumption against a usage meter."""

    usage_meter_slug: str = Field(..., min_length=1)
    # JSON numbers only: 1.0 is the integer 1, while 1.5, "1" and booleans are rejected
    amount: int = Field(..., gt=0, strict=True)
    transaction_id: Optional[str] = Field(
        default=None,
        description="Idempotency key. Generated when omitted.",
    )

    @field_validator("amount", mode="before")
    @classmethod
    def integral_number(cls, value: Any) -> Any:
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


class CreateUsageEventResponse(CamelModel):
    """Acknowledged usage event."""

    success: bool = True
    usage_event: UsageEvent


# ============================================================================
# Checkout Schemas
# ============================================================================


class CheckoutSessionRequest(CamelModel):
    """Request to create a checkout session for a price."""

    price_slug: Optional[str] = None
    price_id: Optional[ExternalId] = None
    success_url: HttpUrl
    cancel_url: HttpUrl
    quantity: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def require_price(self) -> "CheckoutSessionRequest":
        if not self.price_slug and self.price_id is None:
            raise ValueError("Either priceSlug or priceId is required")
        return self


class CheckoutSessionResponse(CamelModel):
    """Response with checkout URL."""

    id: Optional[ExternalId] = None
    url: Optional[str] = Field(None, description="Hosted checkout URL")


# ============================================================================
# Subscription Schemas
# ============================================================================


class CancelSubscriptionRequest(CamelModel):
    """Request to cancel the current subscription."""

    timing: CancellationTiming = CancellationTiming.AT_END_OF_CURRENT_BILLING_PERIOD


class SubscriptionResponse(CamelModel):
    """Subscription after a cancel or uncancel."""

    subscription: Subscription


# ============================================================================
# Dashboard Schemas
# ============================================================================


class UsageMeterSummary(CamelModel):
    """Remaining credits on one usage meter for the current period."""

    slug: str
    name: Optional[str] = None
    remaining: Union[int, float] = 0
    total: Union[int, float] = 0
    progress_percent: float = 0
    has_access: bool = False


class FeatureAccessSummary(CamelModel):
    slug: str
    has_access: bool


class BillingDashboardResponse(CamelModel):
    """Dashboard view of the current plan, credit meters and features."""

    plan_name: Optional[str] = None
    price_slug: Optional[str] = None
    subscription_id: Optional[ExternalId] = None
    subscription_status: Optional[str] = None
    is_default_plan: bool = False
    cancel_scheduled_at: Optional[datetime] = None
    usage_meters: List[UsageMeterSummary] = []
    features: List[FeatureAccessSummary] = []
