"""
Interface for billing providers.

Abstracts the hosted billing platform: catalog and customer snapshots,
usage recording, checkout sessions and subscription cancellation.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from packages.auth.models.domain.customer_details import CustomerDetails
from packages.billing.models.domain.billing import BillingSnapshot, Subscription
from packages.billing.models.domain.checkout import CheckoutSession
from packages.billing.models.domain.enums import CancellationTiming
from packages.billing.models.domain.pricing import ExternalId
from packages.billing.models.domain.usage import UsageEvent, UsageEventCreateModel

CustomerDetailsResolver = Callable[[str], Awaitable[CustomerDetails]]


class BillingProviderInterface(ABC):
    """Abstract interface for billing providers."""

    @abstractmethod
    async def get_billing(self, customer_external_id: str) -> BillingSnapshot:
        """
        Get the customer's billing snapshot.

        Args:
            customer_external_id: Auth user id the customer is keyed by

        Returns:
            Snapshot with customer, current subscriptions, pricing model and
            purchases. `customer` is None when no customer record exists.
        """
        pass

    @abstractmethod
    async def create_usage_event(
        self, customer_external_id: str, usage_event: UsageEventCreateModel
    ) -> UsageEvent:
        """
        Record consumption against a subscription.

        Implementations must treat `transaction_id` as an idempotency key:
        repeating a transaction returns the first recorded event and is not
        counted twice.

        Args:
            customer_external_id: Auth user id the customer is keyed by
            usage_event: Subscription, price slug, amount and transaction id

        Returns:
            The recorded usage event
        """
        pass

    @abstractmethod
    async def create_checkout_session(
        self,
        customer_external_id: str,
        price_id: ExternalId,
        success_url: str,
        cancel_url: str,
        quantity: int = 1,
    ) -> CheckoutSession:
        """
        Create a hosted checkout session for a price.

        Returns:
            Checkout session including the URL to redirect the customer to
        """
        pass

    @abstractmethod
    async def cancel_subscription(
        self,
        customer_external_id: str,
        subscription_id: ExternalId,
        timing: CancellationTiming = CancellationTiming.AT_END_OF_CURRENT_BILLING_PERIOD,
    ) -> Subscription:
        """
        Cancel a subscription now or at the end of the billing period.

        Returns:
            The updated subscription
        """
        pass

    @abstractmethod
    async def uncancel_subscription(
        self, customer_external_id: str, subscription_id: ExternalId
    ) -> Subscription:
        """
        Revoke a scheduled cancellation.

        Returns:
            The updated subscription
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the billing backend is available and healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass
