# Shared pytest configuration and fixtures for all test types
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from slowapi import Limiter
from slowapi.util import get_remote_address
from unittest.mock import AsyncMock, patch

# Create test limiter with no limits and in-memory storage
test_limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],
    storage_uri="memory://",
    enabled=False,
)

# Patch the limiter before importing the app so decorators use test limiter
with patch("common.providers.rate_limiter.limiter.limiter", test_limiter):
    from api.main import app

import common.providers.caching.factory as cache_factory
from packages.auth.dependencies import get_session_provider_dependency
from packages.auth.providers.factory import SessionProviderFactory
from packages.auth.providers.models import Session, SessionUser
from packages.auth.services.customer_details_service import CustomerDetailsService
from packages.billing.providers.billing.local_billing import LocalBillingProvider
from packages.billing.providers.billing.local_catalog import load_pricing_model
from packages.billing.routes.dependencies import get_billing_provider_dependency

TEST_USER_ID = "user_123"


@pytest.fixture(autouse=True)
def reset_singletons():
    """Give every test a fresh in-memory cache and session provider."""
    cache_factory._cache_provider = None
    SessionProviderFactory.clear_cache()
    yield
    cache_factory._cache_provider = None
    SessionProviderFactory.clear_cache()


@pytest.fixture
def test_session():
    """Better Auth session for the signed-in test user."""
    return Session(
        user=SessionUser(id=TEST_USER_ID, email="ada@example.com", name="Ada")
    )


@pytest.fixture
def mock_session_provider(test_session):
    """Session provider that resolves every request to the test user."""
    provider = AsyncMock()
    provider.get_session = AsyncMock(return_value=test_session)
    return provider


@pytest.fixture
def local_billing_provider():
    """In-memory billing provider on the default catalog."""
    return LocalBillingProvider(
        pricing_model=load_pricing_model(),
        customer_details_resolver=CustomerDetailsService().get_customer_details,
    )


@pytest.fixture
def billing_provider(local_billing_provider):
    """Billing provider used by the app; override to swap in a mock."""
    return local_billing_provider


@pytest_asyncio.fixture
async def client(mock_session_provider, billing_provider):
    """Create a test client with the session and billing collaborators overridden."""
    app.dependency_overrides[get_session_provider_dependency] = (
        lambda: mock_session_provider
    )
    app.dependency_overrides[get_billing_provider_dependency] = (
        lambda: billing_provider
    )

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def anonymous_client(mock_session_provider, billing_provider):
    """Create a test client whose requests carry no session."""
    mock_session_provider.get_session = AsyncMock(return_value=None)
    app.dependency_overrides[get_session_provider_dependency] = (
        lambda: mock_session_provider
    )
    app.dependency_overrides[get_billing_provider_dependency] = (
        lambda: billing_provider
    )

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
