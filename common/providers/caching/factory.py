from typing import Optional

from common.core.config import settings
from common.core.constants import CacheBackend
from common.core.otel_axiom_exporter import get_logger

from .interface import CacheInterface
from .memory_cache import MemoryCache
from .passthrough_cache import PassthroughCache
from .redis_cache import RedisCache

logger = get_logger(__name__)

# Global instance
_cache_provider: Optional[CacheInterface] = None


def get_cache_provider() -> CacheInterface:
    """
    Get the configured cache provider.

    Returns:
        CacheInterface: The cache provider instance selected by CACHE_BACKEND
    """
    global _cache_provider

    if _cache_provider is None:
        if settings.cache_backend == CacheBackend.REDIS:
            _cache_provider = RedisCache()
        elif settings.cache_backend == CacheBackend.PASSTHROUGH:
            _cache_provider = PassthroughCache()
        else:
            _cache_provider = MemoryCache()
        logger.info(f"Initialized {settings.cache_backend.value} cache provider")

    return _cache_provider
