from typing import Optional

from common.core.config import settings
from common.core.otel_axiom_exporter import trace_span, get_logger
from common.providers.caching import get_cache_provider
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.auth.models.domain.customer_details import CustomerDetails

logger = get_logger(__name__)


def customer_details_cache_key(external_id: str) -> str:
    return f"customer_details:{external_id}"


class CustomerDetailsService:
    """Resolves billing customer details for an auth user id.

    Details are captured from authenticated sessions and kept in the cache
    provider with a TTL, so lookups by external id never depend on
    process-local state surviving.
    """

    def __init__(self):
        self.cache = get_cache_provider()
        self.ttl = settings.customer_details_cache_ttl_seconds

    @trace_span
    async def remember(self, user: AuthenticatedUser) -> None:
        """Store the details carried by a freshly resolved session."""
        if not user.email:
            return
        details = CustomerDetails(email=user.email, name=user.name or "")
        await self.cache.set(
            customer_details_cache_key(user.user_id),
            details.model_dump(mode="json"),
            self.ttl,
        )

    @trace_span
    async def get_customer_details(self, external_id: str) -> CustomerDetails:
        """Get details for an external id, falling back to placeholders."""
        cached: Optional[dict] = None
        try:
            cached = await self.cache.get(customer_details_cache_key(external_id))
        except Exception as e:
            logger.warning(f"Customer details cache lookup failed: {e}")

        if cached:
            return CustomerDetails.model_validate(cached)

        logger.info(
            "No cached customer details, using fallback",
            extra={"external_id": external_id},
        )
        return CustomerDetails.fallback(external_id)
