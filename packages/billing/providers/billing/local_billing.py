"""
In-process billing provider.

Used for local development and integration tests when no billing platform is
configured. Customer state lives in memory and is lost on restart. Checkout
sessions complete immediately.
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from common.core.config import settings
from common.core.exceptions import ConfigurationError, NotFoundError
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.models.domain.billing import (
    BillingSnapshot,
    Customer,
    FeatureItem,
    Purchase,
    Subscription,
    SubscriptionExperimental,
    UsageMeterBalance,
)
from packages.billing.models.domain.checkout import CheckoutSession
from packages.billing.models.domain.enums import (
    CancellationTiming,
    FeatureItemType,
    PriceType,
    PurchaseStatus,
    SubscriptionStatus,
)
from packages.billing.models.domain.pricing import (
    ExternalId,
    Price,
    PricingModel,
    Product,
)
from packages.billing.models.domain.usage import UsageEvent, UsageEventCreateModel
from packages.billing.providers.billing.interface import (
    BillingProviderInterface,
    CustomerDetailsResolver,
)
from packages.billing.providers.billing.local_catalog import load_pricing_model

logger = get_logger(__name__)

BILLING_PERIOD = timedelta(days=30)


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


class _CustomerAccount:
    """Mutable billing state of one customer."""

    def __init__(self, customer: Customer):
        self.customer = customer
        self.subscription: Optional[Subscription] = None
        self.product: Optional[Product] = None
        # Keyed by str(usage meter id)
        self.balances: Dict[str, int] = {}
        self.purchases: List[Purchase] = []
        # Keyed by transaction id
        self.usage_events: Dict[str, UsageEvent] = {}


class LocalBillingProvider(BillingProviderInterface):
    """In-memory billing implementation."""

    def __init__(
        self,
        pricing_model: Optional[PricingModel] = None,
        customer_details_resolver: Optional[CustomerDetailsResolver] = None,
    ):
        self.pricing_model = pricing_model or load_pricing_model(
            settings.local_pricing_model_path
        )
        self.customer_details_resolver = customer_details_resolver
        self._accounts: Dict[str, _CustomerAccount] = {}
        self._lock = asyncio.Lock()

    # -- catalog lookups --------------------------------------------------

    def _default_product(self) -> Optional[Product]:
        for product in self.pricing_model.products or []:
            if product.default is True:
                return product
        return None

    def _find_price(self, price_id: ExternalId) -> Optional[tuple[Product, Price]]:
        for product in self.pricing_model.products or []:
            for price in product.prices or []:
                if str(price.id) == str(price_id):
                    return product, price
        return None

    def _find_usage_price(self, price_slug: str) -> Optional[Price]:
        for product in self.pricing_model.products or []:
            for price in product.prices or []:
                if price.slug == price_slug and price.type == PriceType.USAGE:
                    return price
        return None

    @staticmethod
    def _credit_grants(product: Product) -> Dict[str, int]:
        grants: Dict[str, int] = {}
        for feature in product.features or []:
            if feature.type != FeatureItemType.USAGE_CREDIT_GRANT:
                continue
            if feature.usage_meter_id is None or feature.amount is None:
                continue
            key = str(feature.usage_meter_id)
            grants[key] = grants.get(key, 0) + int(feature.amount)
        return grants

    # -- account state ----------------------------------------------------

    async def _get_account(self, customer_external_id: str) -> _CustomerAccount:
        account = self._accounts.get(customer_external_id)
        if account is not None:
            return account

        email = name = None
        if self.customer_details_resolver is not None:
            details = await self.customer_details_resolver(customer_external_id)
            email, name = details.email, details.name

        account = _CustomerAccount(
            Customer(
                id=_new_id("cust"),
                external_id=customer_external_id,
                email=email,
                name=name,
            )
        )
        default_product = self._default_product()
        if default_product is not None:
            self._subscribe(account, default_product)
        self._accounts[customer_external_id] = account

        logger.info(
            "Created local billing customer",
            extra={"customer_external_id": customer_external_id},
        )
        return account

    def _subscribe(self, account: _CustomerAccount, product: Product) -> None:
        """Start a new billing period on a product, resetting its credit grants."""
        subscription_price = next(
            (p for p in product.prices or [] if p.type == PriceType.SUBSCRIPTION),
            None,
        )
        now = datetime.now(timezone.utc)
        account.product = product
        account.subscription = Subscription(
            id=_new_id("sub"),
            name=product.name,
            status=SubscriptionStatus.ACTIVE.value,
            price_id=subscription_price.id if subscription_price else None,
            current=True,
            current_billing_period_start=now,
            current_billing_period_end=now + BILLING_PERIOD,
        )
        for meter_id, amount in self._credit_grants(product).items():
            account.balances[meter_id] = amount

    def _snapshot(self, account: _CustomerAccount) -> BillingSnapshot:
        current_subscriptions: List[Subscription] = []
        subscription = account.subscription
        if subscription is not None and subscription.current:
            feature_items = [
                FeatureItem(
                    type=feature.type,
                    slug=feature.slug,
                    name=feature.name,
                    usage_meter_id=feature.usage_meter_id,
                    amount=feature.amount,
                )
                for feature in (account.product.features if account.product else None) or []
            ]
            balances = [
                UsageMeterBalance(
                    usage_meter_id=meter.id,
                    slug=meter.slug,
                    name=meter.name,
                    available_balance=account.balances.get(str(meter.id), 0),
                )
                for meter in self.pricing_model.usage_meters or []
            ]
            current_subscriptions.append(
                subscription.model_copy(
                    update={
                        "experimental": SubscriptionExperimental(
                            feature_items=feature_items,
                            usage_meter_balances=balances,
                        )
                    }
                )
            )

        return BillingSnapshot(
            customer=account.customer,
            current_subscriptions=current_subscriptions,
            pricing_model=self.pricing_model,
            purchases=list(account.purchases),
        )

    def _current_subscription(
        self, account: _CustomerAccount, subscription_id: ExternalId
    ) -> Subscription:
        subscription = account.subscription
        if (
            subscription is None
            or not subscription.current
            or str(subscription.id) != str(subscription_id)
        ):
            raise NotFoundError(f"Subscription {subscription_id} not found")
        return subscription

    # -- provider interface -----------------------------------------------

    @trace_span
    async def get_billing(self, customer_external_id: str) -> BillingSnapshot:
        async with self._lock:
            account = await self._get_account(customer_external_id)
            return self._snapshot(account)

    @trace_span
    async def create_usage_event(
        self, customer_external_id: str, usage_event: UsageEventCreateModel
    ) -> UsageEvent:
        async with self._lock:
            account = await self._get_account(customer_external_id)

            existing = account.usage_events.get(usage_event.transaction_id)
            if existing is not None:
                logger.info(
                    "Duplicate usage event transaction, returning recorded event",
                    extra={"transaction_id": usage_event.transaction_id},
                )
                return existing

            self._current_subscription(account, usage_event.subscription_id)
            price = self._find_usage_price(usage_event.price_slug)
            if price is None:
                raise NotFoundError(f"Usage price {usage_event.price_slug} not found")

            meter_key = str(price.usage_meter_id)
            # Balances may go negative; clamping is a display concern
            account.balances[meter_key] = (
                account.balances.get(meter_key, 0) - usage_event.amount
            )

            event = UsageEvent(
                id=_new_id("ue"),
                subscription_id=usage_event.subscription_id,
                customer_id=account.customer.id,
                usage_meter_id=price.usage_meter_id,
                price_id=price.id,
                price_slug=price.slug,
                amount=usage_event.amount,
                transaction_id=usage_event.transaction_id,
                usage_date=datetime.now(timezone.utc),
            )
            account.usage_events[usage_event.transaction_id] = event

        logger.info(
            "Recorded local usage event",
            extra={
                "customer_external_id": customer_external_id,
                "transaction_id": usage_event.transaction_id,
                "price_slug": usage_event.price_slug,
                "amount": usage_event.amount,
            },
        )
        return event

    @trace_span
    async def create_checkout_session(
        self,
        customer_external_id: str,
        price_id: ExternalId,
        success_url: str,
        cancel_url: str,
        quantity: int = 1,
    ) -> CheckoutSession:
        async with self._lock:
            account = await self._get_account(customer_external_id)

            found = self._find_price(price_id)
            if found is None:
                raise NotFoundError(f"Price {price_id} not found")
            product, price = found

            if price.type == PriceType.SUBSCRIPTION:
                self._subscribe(account, product)
            elif price.type == PriceType.SINGLE_PAYMENT:
                account.purchases.append(
                    Purchase(
                        id=_new_id("pur"),
                        price_id=price.id,
                        quantity=quantity,
                        status=PurchaseStatus.PAID.value,
                    )
                )
                for meter_id, amount in self._credit_grants(product).items():
                    account.balances[meter_id] = (
                        account.balances.get(meter_id, 0) + amount * quantity
                    )
            else:
                raise ConfigurationError(
                    f"Price {price_id} of type {price.type} cannot be checked out"
                )

        logger.info(
            "Completed local checkout",
            extra={
                "customer_external_id": customer_external_id,
                "price_id": str(price_id),
                "quantity": quantity,
            },
        )
        return CheckoutSession(
            id=_new_id("chckt"),
            url=success_url,
            status="succeeded",
            price_id=price.id,
            quantity=quantity,
            success_url=success_url,
            cancel_url=cancel_url,
        )

    @trace_span
    async def cancel_subscription(
        self,
        customer_external_id: str,
        subscription_id: ExternalId,
        timing: CancellationTiming = CancellationTiming.AT_END_OF_CURRENT_BILLING_PERIOD,
    ) -> Subscription:
        async with self._lock:
            account = await self._get_account(customer_external_id)
            subscription = self._current_subscription(account, subscription_id)
            now = datetime.now(timezone.utc)

            if timing == CancellationTiming.IMMEDIATELY:
                subscription.status = SubscriptionStatus.CANCELED.value
                subscription.canceled_at = now
                subscription.current = False
            else:
                subscription.status = SubscriptionStatus.CANCELLATION_SCHEDULED.value
                subscription.cancel_scheduled_at = (
                    subscription.current_billing_period_end or now
                )
            return subscription.model_copy()

    @trace_span
    async def uncancel_subscription(
        self, customer_external_id: str, subscription_id: ExternalId
    ) -> Subscription:
        async with self._lock:
            account = await self._get_account(customer_external_id)
            subscription = self._current_subscription(account, subscription_id)
            if subscription.status == SubscriptionStatus.CANCELLATION_SCHEDULED:
                subscription.status = SubscriptionStatus.ACTIVE.value
                subscription.cancel_scheduled_at = None
            return subscription.model_copy()

    async def health_check(self) -> bool:
        """Always healthy since there's no external dependency."""
        return True
