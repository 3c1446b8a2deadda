"""
Unit tests for the TTL cache.

Tests cover:
- Hits and misses
- Per-entry expiry with an injected clock
- Overwrites resetting expiry
- Size bound with expired-first then LRU eviction
- Invalidation (delete, clear, purge)
- Statistics
"""

import pytest

from api.src.cache import TTLCache


class TestCacheBasics:
    """Tests for get/set without expiry involved."""

    def test_get_missing_key_returns_none(self, clock):
        """Test unknown keys miss."""
        cache = TTLCache(default_ttl=60, clock=clock)

        assert cache.get("missing") is None
        assert cache.metrics.misses == 1

    def test_set_then_get_returns_value(self, clock):
        """Test a fresh entry is served."""
        cache = TTLCache(default_ttl=60, clock=clock)
        cache.set("user:a@example.com", {"id": "1"})

        assert cache.get("user:a@example.com") == {"id": "1"}
        assert cache.metrics.hits == 1
        assert cache.metrics.sets == 1

    def test_contains_and_len(self, clock):
        """Test membership reflects live entries."""
        cache = TTLCache(default_ttl=60, clock=clock)
        cache.set("a", 1)

        assert "a" in cache
        assert "b" not in cache
        assert len(cache) == 1

    def test_invalid_construction(self):
        """Test negative TTL and non-positive capacity are rejected."""
        with pytest.raises(ValueError):
            TTLCache(default_ttl=-1)
        with pytest.raises(ValueError):
            TTLCache(max_keys=0)

    def test_negative_ttl_on_set_rejected(self, clock):
        """Test set refuses a negative TTL."""
        cache = TTLCache(clock=clock)

        with pytest.raises(ValueError):
            cache.set("a", 1, ttl=-5)


class TestCacheExpiry:
    """Tests for TTL handling."""

    def test_entry_expires_after_ttl(self, clock):
        """Test an entry is not returned once its TTL has elapsed."""
        cache = TTLCache(default_ttl=10, clock=clock)
        cache.set("a", 1)

        clock.advance(9.9)
        assert cache.get("a") == 1

        clock.advance(0.1)
        assert cache.get("a") is None
        assert cache.metrics.expirations == 1
        assert len(cache) == 0

    def test_zero_ttl_never_served(self, clock):
        """Test a zero TTL entry misses immediately."""
        cache = TTLCache(default_ttl=60, clock=clock)
        cache.set("a", 1, ttl=0)

        assert cache.get("a") is None

    def test_per_entry_ttl_overrides_default(self, clock):
        """Test entries keep their own TTL."""
        cache = TTLCache(default_ttl=600, clock=clock)
        cache.set("short", 1, ttl=5)
        cache.set("long", 2)

        clock.advance(6)

        assert cache.get("short") is None
        assert cache.get("long") == 2

    def test_overwrite_resets_expiry(self, clock):
        """Test setting an existing key gives it a fresh TTL."""
        cache = TTLCache(default_ttl=10, clock=clock)
        cache.set("a", 1)
        clock.advance(8)
        cache.set("a", 2)
        clock.advance(8)

        assert cache.get("a") == 2
        assert cache.ttl_remaining("a") == pytest.approx(2)

    def test_keys_excludes_expired_entries(self, clock):
        """Test keys() lists only live entries."""
        cache = TTLCache(default_ttl=10, clock=clock)
        cache.set("a", 1, ttl=1)
        cache.set("b", 2)
        clock.advance(2)

        assert cache.keys() == ["b"]
        assert "a" not in cache
        assert cache.ttl_remaining("a") is None

    def test_purge_expired(self, clock):
        """Test purge drops only expired entries."""
        cache = TTLCache(default_ttl=10, clock=clock)
        cache.set("a", 1, ttl=1)
        cache.set("b", 2, ttl=1)
        cache.set("c", 3)
        clock.advance(5)

        assert cache.purge_expired() == 2
        assert len(cache) == 1
        assert cache.metrics.expirations == 2


class TestCacheEviction:
    """Tests for the size bound."""

    def test_evicts_least_recently_used(self, clock):
        """Test the entry read least recently goes first."""
        cache = TTLCache(default_ttl=60, max_keys=2, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")

        cache.set("c", 3)

        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache
        assert cache.metrics.evictions == 1

    def test_expired_entries_purged_before_lru(self, clock):
        """Test a full cache reclaims expired slots before evicting live ones."""
        cache = TTLCache(default_ttl=60, max_keys=2, clock=clock)
        cache.set("stale", 1, ttl=1)
        cache.set("live", 2)
        clock.advance(2)

        cache.set("new", 3)

        assert cache.get("live") == 2
        assert cache.get("new") == 3
        assert cache.metrics.evictions == 0

    def test_overwrite_at_capacity_does_not_evict(self, clock):
        """Test replacing an existing key keeps the other entries."""
        cache = TTLCache(default_ttl=60, max_keys=2, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 10)

        assert len(cache) == 2
        assert cache.get("b") == 2


class TestCacheInvalidation:
    """Tests for delete and clear."""

    def test_delete_existing_key(self, clock):
        """Test delete removes the entry and reports it."""
        cache = TTLCache(clock=clock)
        cache.set("a", 1)

        assert cache.delete("a") is True
        assert cache.get("a") is None
        assert cache.metrics.invalidations == 1

    def test_delete_missing_key(self, clock):
        """Test deleting an unknown key is a no-op."""
        cache = TTLCache(clock=clock)

        assert cache.delete("missing") is False

    def test_clear_returns_count(self, clock):
        """Test clear empties the cache."""
        cache = TTLCache(clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.clear() == 2
        assert len(cache) == 0


class TestCacheStatistics:
    """Tests for statistics reporting."""

    def test_statistics_include_hit_rate(self, clock):
        """Test statistics reflect operations."""
        cache = TTLCache(name="items", default_ttl=60, max_keys=4, clock=clock)
        cache.set("a", 1)
        cache.get("a")
        cache.get("b")

        stats = cache.get_statistics()

        assert stats["name"] == "items"
        assert stats["size"] == 1
        assert stats["utilization"] == 0.25
        assert stats["metrics"]["hits"] == 1
        assert stats["metrics"]["misses"] == 1
        assert stats["metrics"]["hit_rate"] == 0.5

    def test_reset_metrics(self, clock):
        """Test counters reset without touching entries."""
        cache = TTLCache(clock=clock)
        cache.set("a", 1)
        cache.get("a")

        cache.reset_metrics()

        assert cache.metrics.to_dict()["hits"] == 0
        assert cache.get("a") == 1
