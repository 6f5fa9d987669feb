from typing import Optional
from fastapi import Depends, Request

from common.core.exceptions import AuthenticationError
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.auth.providers.factory import get_session_provider
from packages.auth.providers.interface import SessionProviderInterface
from packages.auth.services.customer_details_service import CustomerDetailsService

logger = get_logger(__name__)


def get_session_provider_dependency() -> SessionProviderInterface:
    """Get the configured session provider."""
    return get_session_provider()


def get_customer_details_service() -> CustomerDetailsService:
    """Get CustomerDetailsService instance."""
    return CustomerDetailsService()


@trace_span
async def get_optional_user(
    request: Request,
    session_provider: SessionProviderInterface = Depends(
        get_session_provider_dependency
    ),
    customer_details_service: CustomerDetailsService = Depends(
        get_customer_details_service
    ),
) -> Optional[AuthenticatedUser]:
    """Get the session user, or None when the request carries no session."""
    session = await session_provider.get_session(request.headers)
    if session is None:
        return None

    user = AuthenticatedUser(
        user_id=session.user.id,
        email=session.user.email,
        name=session.user.name,
    )
    await customer_details_service.remember(user)
    return user


@trace_span
async def get_current_user(
    current_user: Optional[AuthenticatedUser] = Depends(get_optional_user),
) -> AuthenticatedUser:
    """Get current authenticated user; 401 without a session."""
    if current_user is None:
        raise AuthenticationError("User not authenticated")
    logger.info(f"Authenticated user_id={current_user.user_id}")
    return current_user
