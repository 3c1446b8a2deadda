"""In-process caching for read-through lookups."""

from api.src.cache.ttl_cache import CacheMetrics, TTLCache

__all__ = ["CacheMetrics", "TTLCache"]
