import time
from typing import Any, Optional, Dict
from dataclasses import dataclass

from .interface import CacheInterface
from common.core.otel_axiom_exporter import get_logger

logger = get_logger(__name__)


@dataclass
class CacheEntry:
    """Represents a cached entry with expiration."""

    value: Any
    expires_at: float

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Check if this entry has expired."""
        return (now if now is not None else time.monotonic()) >= self.expires_at


class MemoryCache(CacheInterface):
    """Per-process cache with TTL expiry and a bounded number of entries."""

    def __init__(self, max_entries: int = 10_000):
        self._cache: Dict[str, CacheEntry] = {}
        self.max_entries = max_entries
        logger.info("Memory cache provider initialized")

    def _evict(self) -> None:
        """Drop expired entries, then the soonest-expiring ones over capacity."""
        now = time.monotonic()
        for key in [k for k, entry in self._cache.items() if entry.is_expired(now)]:
            del self._cache[key]

        overflow = len(self._cache) - self.max_entries
        if overflow >= 0:
            by_expiry = sorted(self._cache, key=lambda k: self._cache[k].expires_at)
            for key in by_expiry[: overflow + 1]:
                del self._cache[key]
            logger.debug(f"Evicted {overflow + 1} cache entries over capacity")

    async def get(self, key: str) -> Optional[Any]:
        entry = self._cache.get(key)
        if entry is None:
            return None

        if entry.is_expired():
            del self._cache[key]
            return None

        return entry.value

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        if key not in self._cache and len(self._cache) >= self.max_entries:
            self._evict()

        self._cache[key] = CacheEntry(value=value, expires_at=time.monotonic() + ttl)
        logger.debug(f"Cached key {key} with TTL {ttl}")
        return True

    async def delete(self, key: str) -> bool:
        return self._cache.pop(key, None) is not None

    async def clear(self) -> bool:
        self._cache.clear()
        logger.info("Cleared all cache data")
        return True
