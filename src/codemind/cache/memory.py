"""In-memory response cache with TTL expiry and bounded size."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from codemind.cache.key_strategy import compute_cache_key
from codemind.core.config import CacheConfig
from codemind.models import CacheEntry, GatewayStats

log = logging.getLogger(__name__)


class ResponseCache:
    """Dict-backed cache of backend responses keyed by request identity.

    Expired entries are dropped lazily when a lookup finds them. When the
    cache is full, ``store`` evicts the entry with the oldest ``stored_at``;
    ties go to the earliest inserted entry. This is store-time eviction, not
    access-order LRU: reuse comes from repeated identical requests.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        stats: GatewayStats | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or CacheConfig()
        self._stats = stats if stats is not None else GatewayStats()
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def lookup(self, endpoint: str, body: Any) -> Any | None:
        """Return the cached response for this request, or None on a miss."""
        if not self._config.enabled:
            self._stats.cache_misses += 1
            return None

        key = compute_cache_key(endpoint, body)
        entry = self._entries.get(key)
        if entry is None:
            self._stats.cache_misses += 1
            return None

        if entry.age(self._clock()) >= self._config.ttl_seconds:
            del self._entries[key]
            self._stats.cache_misses += 1
            log.debug("Cache entry expired for %s", endpoint)
            return None

        self._stats.cache_hits += 1
        log.debug("Cache hit for %s", endpoint)
        return entry.response

    def store(self, endpoint: str, body: Any, response: Any) -> None:
        """Cache a successful response. None responses are not cached."""
        if not self._config.enabled or response is None:
            return

        key = compute_cache_key(endpoint, body)
        if key in self._entries:
            # Re-insert so insertion order keeps tracking store time.
            del self._entries[key]
        elif len(self._entries) >= self._config.max_entries:
            self._evict_oldest()

        self._entries[key] = CacheEntry(key=key, response=response, stored_at=self._clock())

    def _evict_oldest(self) -> None:
        # min() keeps the first of equal timestamps, i.e. the earliest inserted.
        oldest = min(self._entries.values(), key=lambda entry: entry.stored_at)
        del self._entries[oldest.key]
        log.debug("Evicted cache entry %s", oldest.key[:12])

    def clear(self) -> None:
        """Drop all entries and reset hit/miss counters."""
        self._entries.clear()
        self._stats.reset_cache_counters()
