"""
Billing API routes.

Protected endpoints for the billing snapshot, dashboard, checkout and
subscription cancellation.
"""

from typing import Optional
from fastapi import APIRouter, Body, Depends

from packages.auth.dependencies import get_current_user
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.billing.models.domain.billing import BillingSnapshot
from packages.billing.models.schemas.billing import (
    BillingDashboardResponse,
    CancelSubscriptionRequest,
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    SubscriptionResponse,
)
from packages.billing.routes.dependencies import (
    get_billing_service,
    get_checkout_service,
    get_subscription_service,
)
from packages.billing.services.billing_service import BillingService
from packages.billing.services.checkout_service import CheckoutService
from packages.billing.services.subscription_service import SubscriptionService

router = APIRouter()


@router.get("", response_model=BillingSnapshot)
async def get_billing(
    current_user: AuthenticatedUser = Depends(get_current_user),
    billing_service: BillingService = Depends(get_billing_service),
):
    """Get the customer's billing snapshot."""
    return await billing_service.get_billing(current_user.user_id)


@router.get("/dashboard", response_model=BillingDashboardResponse)
async def get_dashboard(
    current_user: AuthenticatedUser = Depends(get_current_user),
    billing_service: BillingService = Depends(get_billing_service),
):
    """Get plan, remaining credits and feature access for the dashboard."""
    return await billing_service.get_dashboard(current_user.user_id)


@router.post("/checkout-sessions", response_model=CheckoutSessionResponse)
async def create_checkout_session(
    body: CheckoutSessionRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    checkout_service: CheckoutService = Depends(get_checkout_service),
):
    """Create a hosted checkout session for a plan or a credit top-up."""
    session = await checkout_service.create_checkout_session(
        current_user.user_id, body
    )
    return CheckoutSessionResponse(id=session.id, url=session.url)


@router.post(
    "/subscriptions/{subscription_id}/cancel", response_model=SubscriptionResponse
)
async def cancel_subscription(
    subscription_id: str,
    body: Optional[CancelSubscriptionRequest] = Body(default=None),
    current_user: AuthenticatedUser = Depends(get_current_user),
    subscription_service: SubscriptionService = Depends(get_subscription_service),
):
    """Cancel a subscription, by default at the end of the billing period."""
    timing = (body or CancelSubscriptionRequest()).timing
    subscription = await subscription_service.cancel_subscription(
        current_user.user_id, subscription_id, timing
    )
    return SubscriptionResponse(subscription=subscription)


@router.post(
    "/subscriptions/{subscription_id}/uncancel", response_model=SubscriptionResponse
)
async def uncancel_subscription(
    subscription_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    subscription_service: SubscriptionService = Depends(get_subscription_service),
):
    """Withdraw a scheduled cancellation."""
    subscription = await subscription_service.uncancel_subscription(
        current_user.user_id, subscription_id
    )
    return SubscriptionResponse(subscription=subscription)
