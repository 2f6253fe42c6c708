"""Data models shared across the gateway modules."""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Iterator

from codemind.exceptions import GatewayError


@dataclasses.dataclass(frozen=True)
class GatewayResult:
    """Outcome of a gateway operation: a value XOR an error.

    Unpacks like the ``(result, error)`` pair callers expect::

        value, error = await gateway.analyze_code(code, "python")
    """

    value: Any = None
    error: GatewayError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def reason(self) -> str | None:
        """Human-readable failure reason, or None on success."""
        return str(self.error) if self.error is not None else None

    def __iter__(self) -> Iterator[Any]:
        yield self.value
        yield self.error


@dataclasses.dataclass(frozen=True)
class ProcessResult:
    """Completed external process invocation."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False


@dataclasses.dataclass
class CacheEntry:
    """A cached backend response keyed by request identity."""

    key: str
    response: Any
    stored_at: float

    def age(self, now: float) -> float:
        return now - self.stored_at


@dataclasses.dataclass
class QueueItem:
    """A request deferred by the backpressure queue until admission."""

    resume: Callable[[], None]
    enqueued_at: float
    retry_count: int = 0


@dataclasses.dataclass(frozen=True)
class HealthStatus:
    available: bool
    checked_at: float
    reason: str | None = None

    def age(self, now: float) -> float:
        return now - self.checked_at


@dataclasses.dataclass
class GatewayStats:
    """Process-wide observability counters. Never consulted for correctness."""

    total_calls: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    queue_enqueued: int = 0
    errors: int = 0

    @property
    def cache_hit_rate(self) -> float:
        """Hit rate as a percentage of cache lookups."""
        lookups = self.cache_hits + self.cache_misses
        if lookups == 0:
            return 0.0
        return (self.cache_hits / lookups) * 100

    def reset_cache_counters(self) -> None:
        self.cache_hits = 0
        self.cache_misses = 0

    def as_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        data["cache_hit_rate"] = self.cache_hit_rate
        return data
