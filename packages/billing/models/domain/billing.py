"""
Customer billing snapshot: customer, current subscriptions, purchases and the
pricing model they were sold from.
"""

from datetime import datetime
from typing import Any, List, Optional, Union
from pydantic import field_validator

from packages.billing.models.domain.pricing import (
    BillingModel,
    ExternalId,
    PricingModel,
)


def _numeric_or_none(value: Any) -> Any:
    # bool is an int subclass but never a credit amount
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


class FeatureItem(BillingModel):
    """Entitlement granted to a subscription for the current billing period."""

    type: Optional[str] = None
    slug: Optional[str] = None
    name: Optional[str] = None
    usage_meter_id: Optional[ExternalId] = None
    # Credits granted per period (usage_credit_grant items only)
    amount: Optional[Union[int, float]] = None

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any) -> Any:
        return _numeric_or_none(value)


class UsageMeterBalance(BillingModel):
    usage_meter_id: Optional[ExternalId] = None
    slug: Optional[str] = None
    name: Optional[str] = None
    # May go negative when the platform does not clamp
    available_balance: Optional[Union[int, float]] = None

    @field_validator("available_balance", mode="before")
    @classmethod
    def coerce_balance(cls, value: Any) -> Any:
        return _numeric_or_none(value)


class SubscriptionExperimental(BillingModel):
    feature_items: Optional[List[FeatureItem]] = None
    usage_meter_balances: Optional[List[UsageMeterBalance]] = None


class Subscription(BillingModel):
    id: Optional[ExternalId] = None
    name: Optional[str] = None
    status: Optional[str] = None
    price_id: Optional[ExternalId] = None
    current: Optional[bool] = None
    current_billing_period_start: Optional[datetime] = None
    current_billing_period_end: Optional[datetime] = None
    cancel_scheduled_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None
    experimental: Optional[SubscriptionExperimental] = None


class Purchase(BillingModel):
    id: Optional[ExternalId] = None
    price_id: Optional[ExternalId] = None
    quantity: Optional[int] = None
    status: Optional[str] = None


class Customer(BillingModel):
    id: Optional[ExternalId] = None
    external_id: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None


class BillingSnapshot(BillingModel):
    """Result of a customer billing fetch."""

    customer: Optional[Customer] = None
    current_subscriptions: List[Subscription] = []
    pricing_model: Optional[PricingModel] = None
    purchases: List[Purchase] = []

    @field_validator("current_subscriptions", "purchases", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def current_subscription(self) -> Optional[Subscription]:
        """
        The active subscription.

        Customers hold at most one current subscription unless multiple
        subscriptions are enabled on the billing platform, so the first wins.
        """
        return self.current_subscriptions[0] if self.current_subscriptions else None
