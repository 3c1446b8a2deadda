"""TTL-based in-process cache for read-through lookups.

Entries carry their own expiry so callers can mix TTLs in one cache
(e.g. single items vs. the aggregate item listing). Expired entries are
dropped lazily on read and by an optional periodic sweep.
"""

import time
from typing import Any, Callable, Dict, List, Optional, Tuple

import structlog

logger = structlog.get_logger(__name__)


class CacheMetrics:
    """Counters for cache operations."""

    def __init__(self):
        """Initialize metrics."""
        self.hits = 0
        self.misses = 0
        self.sets = 0
        self.expirations = 0
        self.invalidations = 0
        self.evictions = 0

    def reset(self):
        """Reset all metrics."""
        self.hits = 0
        self.misses = 0
        self.sets = 0
        self.expirations = 0
        self.invalidations = 0
        self.evictions = 0

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        lookups = self.hits + self.misses
        return {
            "hits": self.hits,
            "misses": self.misses,
            "sets": self.sets,
            "expirations": self.expirations,
            "invalidations": self.invalidations,
            "evictions": self.evictions,
            "hit_rate": self.hits / lookups if lookups > 0 else 0.0
        }


class TTLCache:
    """
    Key-value cache with per-entry time-to-live.

    Each entry stores ``(value, expires_at, access_seq)``. An entry whose
    expiry has passed is never returned, whether or not a sweep has run.
    When the cache holds ``max_keys`` entries, inserting a new key purges
    expired entries first and then evicts the least recently used one.
    """

    def __init__(
        self,
        name: str = "cache",
        default_ttl: float = 300,
        max_keys: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize cache with default TTL and size limit.

        Args:
            name: Cache name used in logs and metrics
            default_ttl: TTL in seconds applied when ``set`` gets none
            max_keys: Maximum number of cached keys
            clock: Monotonic time source in seconds
        """
        if default_ttl < 0:
            raise ValueError("default_ttl must be >= 0")
        if max_keys <= 0:
            raise ValueError("max_keys must be > 0")

        self.name = name
        self._entries: Dict[str, Tuple[Any, float, int]] = {}
        self._default_ttl = default_ttl
        self._max_keys = max_keys
        self._clock = clock
        self._access_counter = 0
        self.metrics = CacheMetrics()

        logger.info(
            "cache_initialized",
            cache=name,
            default_ttl=default_ttl,
            max_keys=max_keys
        )

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    @property
    def max_keys(self) -> int:
        return self._max_keys

    def get(self, key: str) -> Optional[Any]:
        """
        Get cached value if present and not expired.

        Args:
            key: Cache key

        Returns:
            Cached value, or None if not found or expired
        """
        entry = self._entries.get(key)
        if entry is not None:
            value, expires_at, _ = entry

            if self._clock() < expires_at:
                self._access_counter += 1
                self._entries[key] = (value, expires_at, self._access_counter)
                self.metrics.hits += 1
                logger.debug("cache_hit", cache=self.name, key=key)
                return value

            del self._entries[key]
            self.metrics.expirations += 1
            logger.debug("cache_expired", cache=self.name, key=key)

        self.metrics.misses += 1
        logger.debug("cache_miss", cache=self.name, key=key)
        return None

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """
        Cache a value. Overwriting a key resets its expiry.

        Args:
            key: Cache key
            value: Value to cache
            ttl: TTL in seconds (default TTL when omitted)
        """
        if ttl is None:
            ttl = self._default_ttl
        if ttl < 0:
            raise ValueError("ttl must be >= 0")

        if key not in self._entries and len(self._entries) >= self._max_keys:
            self.purge_expired()
            if len(self._entries) >= self._max_keys:
                self._evict_lru()

        self._access_counter += 1
        self._entries[key] = (value, self._clock() + ttl, self._access_counter)
        self.metrics.sets += 1

        logger.debug(
            "cache_set",
            cache=self.name,
            key=key,
            ttl=ttl,
            cache_size=len(self._entries)
        )

    def _evict_lru(self):
        """Evict the least recently used entry."""
        if not self._entries:
            return

        lru_key = min(self._entries.items(), key=lambda x: x[1][2])[0]

        del self._entries[lru_key]
        self.metrics.evictions += 1

        logger.info(
            "cache_evicted_lru",
            cache=self.name,
            key=lru_key,
            cache_size=len(self._entries)
        )

    def delete(self, key: str) -> bool:
        """
        Invalidate a cached key.

        Args:
            key: Cache key

        Returns:
            True if an entry was removed
        """
        if key in self._entries:
            del self._entries[key]
            self.metrics.invalidations += 1
            logger.debug("cache_invalidated", cache=self.name, key=key)
            return True
        return False

    def clear(self) -> int:
        """Remove every entry and return how many were dropped."""
        count = len(self._entries)
        self._entries.clear()
        self.metrics.invalidations += count
        logger.info("cache_cleared", cache=self.name, entries_removed=count)
        return count

    def purge_expired(self) -> int:
        """
        Drop every expired entry.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [key for key, (_, expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        self.metrics.expirations += len(expired)

        if expired:
            logger.debug("cache_purged", cache=self.name, entries_removed=len(expired))
        return len(expired)

    def keys(self) -> List[str]:
        """Keys of entries that have not expired."""
        now = self._clock()
        return [key for key, (_, expires_at, _) in self._entries.items() if now < expires_at]

    def ttl_remaining(self, key: str) -> Optional[float]:
        """
        Seconds until a key expires.

        Returns:
            Remaining TTL, or None if not cached or already expired
        """
        entry = self._entries.get(key)
        if entry is None:
            return None
        remaining = entry[1] - self._clock()
        return remaining if remaining > 0 else None

    def __contains__(self, key: str) -> bool:
        return self.ttl_remaining(key) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with metrics and current state
        """
        return {
            "name": self.name,
            "metrics": self.metrics.to_dict(),
            "size": len(self._entries),
            "max_keys": self._max_keys,
            "default_ttl": self._default_ttl,
            "utilization": len(self._entries) / self._max_keys
        }

    def reset_metrics(self):
        """Reset cache metrics."""
        self.metrics.reset()
        logger.info("cache_metrics_reset", cache=self.name)
