"""Tests for response cache TTL expiry and bounded size."""

from __future__ import annotations

from codemind.cache.key_strategy import compute_cache_key
from codemind.cache.memory import ResponseCache
from codemind.core.config import CacheConfig
from codemind.models import GatewayStats
from tests.fakes.fake_clock import FakeClock


def _cache(clock: FakeClock, stats: GatewayStats | None = None, **overrides: object) -> ResponseCache:
    return ResponseCache(CacheConfig(**overrides), stats if stats is not None else GatewayStats(), clock)


class TestLookupAndStore:
    def test_store_then_hit(self, clock: FakeClock) -> None:
        stats = GatewayStats()
        cache = _cache(clock, stats)
        cache.store("/ai/chat", {"q": 1}, {"answer": "42"})
        assert cache.lookup("/ai/chat", {"q": 1}) == {"answer": "42"}
        assert stats.cache_hits == 1
        assert stats.cache_misses == 0

    def test_miss_counts(self, clock: FakeClock) -> None:
        stats = GatewayStats()
        cache = _cache(clock, stats)
        assert cache.lookup("/ai/chat", {"q": 1}) is None
        assert stats.cache_misses == 1

    def test_none_response_not_cached(self, clock: FakeClock) -> None:
        cache = _cache(clock)
        cache.store("/a", {}, None)
        assert len(cache) == 0

    def test_disabled_cache_never_stores_and_counts_misses(self, clock: FakeClock) -> None:
        stats = GatewayStats()
        cache = _cache(clock, stats, enabled=False)
        cache.store("/a", {}, {"v": 1})
        assert cache.lookup("/a", {}) is None
        assert len(cache) == 0
        assert stats.cache_misses == 1
        assert cache.enabled is False

    def test_restore_replaces_value(self, clock: FakeClock) -> None:
        cache = _cache(clock)
        cache.store("/a", {}, {"v": 1})
        cache.store("/a", {}, {"v": 2})
        assert len(cache) == 1
        assert cache.lookup("/a", {}) == {"v": 2}

    def test_contains_uses_request_key(self, clock: FakeClock) -> None:
        cache = _cache(clock)
        cache.store("/a", {"x": 1}, {"v": 1})
        assert compute_cache_key("/a", {"x": 1}) in cache


class TestTtl:
    def test_live_just_before_ttl(self, clock: FakeClock) -> None:
        cache = _cache(clock, ttl_seconds=300)
        cache.store("/a", {}, {"v": 1})
        clock.advance(299.999)
        assert cache.lookup("/a", {}) == {"v": 1}

    def test_expired_at_ttl(self, clock: FakeClock) -> None:
        stats = GatewayStats()
        cache = _cache(clock, stats, ttl_seconds=300)
        cache.store("/a", {}, {"v": 1})
        clock.advance(300)
        assert cache.lookup("/a", {}) is None
        assert stats.cache_misses == 1

    def test_expired_entry_removed_on_discovery(self, clock: FakeClock) -> None:
        cache = _cache(clock, ttl_seconds=10)
        cache.store("/a", {}, {"v": 1})
        clock.advance(11)
        assert len(cache) == 1
        cache.lookup("/a", {})
        assert len(cache) == 0


class TestBound:
    def test_first_stored_is_evicted(self, clock: FakeClock) -> None:
        cache = _cache(clock, max_entries=2)
        cache.store("/a", {}, {"v": "a"})
        cache.store("/b", {}, {"v": "b"})
        cache.store("/c", {}, {"v": "c"})
        assert len(cache) == 2
        assert cache.lookup("/a", {}) is None
        assert cache.lookup("/b", {}) == {"v": "b"}
        assert cache.lookup("/c", {}) == {"v": "c"}

    def test_oldest_store_time_evicted(self, clock: FakeClock) -> None:
        cache = _cache(clock, max_entries=2)
        cache.store("/a", {}, {"v": "a"})
        clock.advance(1)
        cache.store("/b", {}, {"v": "b"})
        clock.advance(1)
        cache.store("/a", {}, {"v": "a2"})  # refreshes /a
        clock.advance(1)
        cache.store("/c", {}, {"v": "c"})
        assert cache.lookup("/b", {}) is None
        assert cache.lookup("/a", {}) == {"v": "a2"}

    def test_never_exceeds_max_entries(self, clock: FakeClock) -> None:
        cache = _cache(clock, max_entries=5)
        for i in range(50):
            cache.store(f"/e{i % 13}", {"i": i}, {"v": i})
            if i % 3 == 0:
                clock.advance(0.5)
            assert len(cache) <= 5


class TestClear:
    def test_clear_drops_entries_and_resets_counters(self, clock: FakeClock) -> None:
        stats = GatewayStats(total_calls=7, errors=2)
        cache = _cache(clock, stats)
        cache.store("/a", {}, {"v": 1})
        cache.lookup("/a", {})
        cache.lookup("/b", {})
        cache.clear()
        assert len(cache) == 0
        assert stats.cache_hits == 0
        assert stats.cache_misses == 0
        assert stats.total_calls == 7
        assert stats.errors == 2
