"""
ArbiScan — Price Cache Layer
In-memory key/value cache with per-entry TTL that shields upstream APIs
from redundant calls. Expired entries are evicted lazily on access.
"""
import threading
import time
from typing import Any, Callable, Dict, NamedTuple, Optional

from cachetools import TLRUCache

from arbiscan.utils.logger import get_logger

logger = get_logger("price_cache")


class CacheEntry(NamedTuple):
    value: Any
    ttl: float


def _time_to_use(key: str, entry: CacheEntry, now: float) -> float:
    return now + entry.ttl


class PriceCache:
    """Thread-safe in-memory cache for normalized market data."""

    def __init__(
        self,
        ttl: float = 60,
        maxsize: int = 10_000,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = ttl
        self._entries: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_time_to_use, timer=timer)
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss or expired entry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store or overwrite a value; ttl defaults to the cache-wide TTL."""
        with self._lock:
            self._entries[key] = CacheEntry(value, ttl if ttl is not None else self.default_ttl)

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def clear(self) -> None:
        """Clear all entries."""
        with self._lock:
            self._entries.clear()
        logger.info("cache_cleared")

    @property
    def stats(self) -> Dict[str, Any]:
        """Return cache statistics."""
        with self._lock:
            self._entries.expire()
            return {
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "ttl_seconds": self.default_ttl,
            }
