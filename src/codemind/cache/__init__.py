"""Response caching: key derivation + in-memory TTL cache."""

from __future__ import annotations

from codemind.cache.key_strategy import canonical_json, compute_cache_key
from codemind.cache.memory import ResponseCache

__all__ = ["ResponseCache", "canonical_json", "compute_cache_key"]
