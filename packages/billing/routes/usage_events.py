"""
Usage event routes.

Records consumption of a usage meter for the signed-in customer.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Request

from common.core.config import settings
from common.core.exceptions import AuthenticationError
from common.providers.rate_limiter.limiter import limiter
from packages.auth.dependencies import get_optional_user
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.billing.models.schemas.billing import (
    CreateUsageEventRequest,
    CreateUsageEventResponse,
)
from packages.billing.routes.dependencies import get_usage_event_service
from packages.billing.services.usage_event_service import UsageEventService

router = APIRouter()


@router.post("/usage-events", response_model=CreateUsageEventResponse)
@limiter.limit(settings.usage_events_rate_limit)
async def create_usage_event(
    request: Request,
    body: CreateUsageEventRequest,
    current_user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    usage_event_service: UsageEventService = Depends(get_usage_event_service),
):
    """
    Record usage against the current subscription.

    The body is validated before the session is checked, so malformed
    requests get 400 whether or not they are signed in.
    """
    if current_user is None:
        raise AuthenticationError("Unauthorized")

    usage_event = await usage_event_service.create_usage_event(
        current_user.user_id, body
    )
    return CreateUsageEventResponse(success=True, usage_event=usage_event)
