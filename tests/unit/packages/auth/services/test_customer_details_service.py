import pytest

from common.providers.caching import get_cache_provider
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.auth.services.customer_details_service import (
    CustomerDetailsService,
    customer_details_cache_key,
)


@pytest.mark.asyncio
class TestCustomerDetailsService:
    async def test_remembered_details_are_returned(self):
        service = CustomerDetailsService()
        await service.remember(
            AuthenticatedUser(user_id="user_1", email="ada@example.com", name="Ada")
        )

        details = await service.get_customer_details("user_1")

        assert details.email == "ada@example.com"
        assert details.name == "Ada"

    async def test_unknown_user_gets_fallback(self):
        details = await CustomerDetailsService().get_customer_details("user_9")

        assert details.email == "user_user_9@example.com"
        assert details.name == "User"

    async def test_user_without_email_not_cached(self):
        service = CustomerDetailsService()
        await service.remember(AuthenticatedUser(user_id="user_2"))

        assert await get_cache_provider().get(customer_details_cache_key("user_2")) is None

    async def test_missing_name_cached_as_empty(self):
        service = CustomerDetailsService()
        await service.remember(AuthenticatedUser(user_id="user_3", email="x@example.com"))

        details = await service.get_customer_details("user_3")
        assert details.name == ""

    async def test_expired_entry_falls_back(self):
        service = CustomerDetailsService()
        service.ttl = 0
        await service.remember(
            AuthenticatedUser(user_id="user_4", email="gone@example.com", name="Gone")
        )

        details = await service.get_customer_details("user_4")
        assert details.email == "user_user_4@example.com"
