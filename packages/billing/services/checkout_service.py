"""
Service for hosted checkout sessions (plan purchases and credit top-ups).
"""

from common.core.exceptions import NotFoundError
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.models.domain.checkout import CheckoutSession
from packages.billing.models.schemas.billing import CheckoutSessionRequest
from packages.billing.providers.billing.interface import BillingProviderInterface
from packages.billing.services.billing_service import fetch_billing_snapshot
from packages.billing.utils.pricing_helpers import find_price_by_slug

logger = get_logger(__name__)


class CheckoutService:
    """Service for creating checkout sessions."""

    def __init__(self, billing: BillingProviderInterface):
        self.billing = billing

    @trace_span
    async def create_checkout_session(
        self, customer_external_id: str, request: CheckoutSessionRequest
    ) -> CheckoutSession:
        """
        Create a checkout session for a price given by id or slug.

        Raises:
            NotFoundError: If the price slug is not in the pricing model
        """
        price_id = request.price_id
        if price_id is None:
            snapshot = await fetch_billing_snapshot(self.billing, customer_external_id)
            price = find_price_by_slug(request.price_slug, snapshot.pricing_model)
            if price is None or price.id is None:
                raise NotFoundError(f"Price not found: {request.price_slug}")
            price_id = price.id

        logger.info(
            f"Creating checkout session for {customer_external_id}",
            extra={"price_id": str(price_id), "quantity": request.quantity},
        )
        return await self.billing.create_checkout_session(
            customer_external_id,
            price_id,
            success_url=str(request.success_url),
            cancel_url=str(request.cancel_url),
            quantity=request.quantity,
        )
