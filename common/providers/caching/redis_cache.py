import json
from typing import Any, Optional
import redis.asyncio as redis

from common.core.config import settings
from .interface import CacheInterface
from common.core.otel_axiom_exporter import get_logger, trace_span

logger = get_logger(__name__)


class RedisCache(CacheInterface):
    """Redis-backed cache shared by every API instance.

    Cache failures are logged and reported as misses so callers fall back to
    the source of truth.
    """

    def __init__(self, key_prefix: str = "creditboard:"):
        self.key_prefix = key_prefix
        self._client: Optional[redis.Redis] = None

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis(
                host=settings.redis_host,
                port=settings.redis_port,
                password=settings.redis_password,
                db=settings.redis_db,
                decode_responses=True,
            )
        return self._client

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Redis cache provider disconnected")

    @trace_span
    async def get(self, key: str) -> Optional[Any]:
        try:
            value = await self._get_client().get(self.key_prefix + key)
            if value is None:
                return None
            return json.loads(value)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to deserialize cached value for key {key}: {e}")
            return None
        except redis.RedisError as e:
            logger.error(f"Error getting cache key {key}: {e}")
            return None

    @trace_span
    async def set(self, key: str, value: Any, ttl: int) -> bool:
        try:
            serialized_value = json.dumps(value, default=str)
            return bool(
                await self._get_client().setex(self.key_prefix + key, ttl, serialized_value)
            )
        except redis.RedisError as e:
            logger.error(f"Error setting cache key {key}: {e}")
            return False

    @trace_span
    async def delete(self, key: str) -> bool:
        try:
            return bool(await self._get_client().delete(self.key_prefix + key))
        except redis.RedisError as e:
            logger.error(f"Error deleting cache key {key}: {e}")
            return False

    @trace_span
    async def clear(self) -> bool:
        try:
            client = self._get_client()
            keys = [key async for key in client.scan_iter(match=f"{self.key_prefix}*")]
            if keys:
                await client.delete(*keys)
            logger.info(f"Cleared {len(keys)} cache keys")
            return True
        except redis.RedisError as e:
            logger.error(f"Error clearing cache: {e}")
            return False
