import pytest
from unittest.mock import patch
from testcontainers.redis import RedisContainer

from common.core.config import settings
from common.core.constants import CacheBackend
from common.providers.caching import (
    MemoryCache,
    PassthroughCache,
    RedisCache,
    get_cache_provider,
)
import common.providers.caching.factory as cache_factory


@pytest.mark.asyncio
class TestMemoryCache:
    async def test_set_get_delete(self):
        cache = MemoryCache()
        await cache.set("key", {"email": "ada@example.com"}, ttl=60)

        assert await cache.get("key") == {"email": "ada@example.com"}
        assert await cache.delete("key") is True
        assert await cache.get("key") is None
        assert await cache.delete("key") is False

    async def test_expired_entries_are_misses(self):
        cache = MemoryCache()
        await cache.set("fresh", "value", ttl=60)
        await cache.set("stale", "value", ttl=0)

        assert await cache.get("fresh") == "value"
        assert await cache.get("stale") is None

    async def test_capacity_evicts_soonest_expiring(self):
        cache = MemoryCache(max_entries=2)
        await cache.set("short", 1, ttl=10)
        await cache.set("long", 2, ttl=1000)
        await cache.set("new", 3, ttl=500)

        assert await cache.get("short") is None
        assert await cache.get("long") == 2
        assert await cache.get("new") == 3

    async def test_clear(self):
        cache = MemoryCache()
        await cache.set("a", 1, ttl=60)
        await cache.clear()
        assert await cache.get("a") is None


@pytest.mark.asyncio
class TestPassthroughCache:
    async def test_never_stores(self):
        cache = PassthroughCache()
        assert await cache.set("key", "value", ttl=60) is True
        assert await cache.get("key") is None


class TestCacheFactory:
    def test_memory_is_default(self):
        with patch.object(settings, "cache_backend", CacheBackend.MEMORY):
            assert isinstance(get_cache_provider(), MemoryCache)

    def test_passthrough_backend(self):
        with patch.object(settings, "cache_backend", CacheBackend.PASSTHROUGH):
            assert isinstance(get_cache_provider(), PassthroughCache)

    def test_provider_is_shared(self):
        assert get_cache_provider() is get_cache_provider()


class TestRedisCache:
    @pytest.fixture(autouse=True)
    def setup_redis(self):
        """Set up Redis container for all tests in this class."""
        with RedisContainer() as redis:
            with patch.object(settings, "redis_host", redis.get_container_host_ip()):
                with patch.object(settings, "redis_port", int(redis.get_exposed_port(6379))):
                    with patch.object(settings, "redis_password", None):
                        with patch.object(settings, "cache_backend", CacheBackend.REDIS):
                            with patch.object(cache_factory, "_cache_provider", None):
                                yield

    @pytest.mark.asyncio
    async def test_round_trip_with_ttl(self):
        cache = get_cache_provider()
        assert isinstance(cache, RedisCache)

        await cache.set("customer_details:user_1", {"email": "ada@example.com", "name": "Ada"}, ttl=60)
        assert await cache.get("customer_details:user_1") == {
            "email": "ada@example.com",
            "name": "Ada",
        }

        ttl = await cache._get_client().ttl("creditboard:customer_details:user_1")
        assert 0 < ttl <= 60

        await cache.clear()
        assert await cache.get("customer_details:user_1") is None
        await cache.disconnect()
