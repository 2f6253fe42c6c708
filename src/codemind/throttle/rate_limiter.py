"""Sliding-window admission control for backend requests."""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import Callable

from codemind.core.config import RateLimitConfig

log = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Admits at most ``max_requests_per_window`` requests per trailing window.

    Timestamps older than ``window_seconds`` are pruned on every check, so the
    count always reflects the trailing window ending now. ``burst_size`` is
    carried in configuration but not consulted here.
    """

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or RateLimitConfig()
        self._clock = clock
        self._timestamps: deque[float] = deque()

    @property
    def limit(self) -> int:
        return self._config.max_requests_per_window

    def _prune(self, now: float) -> None:
        cutoff = now - self._config.window_seconds
        while self._timestamps and self._timestamps[0] <= cutoff:
            self._timestamps.popleft()

    def try_admit(self) -> bool:
        """Record and admit one request if the window has room."""
        now = self._clock()
        self._prune(now)
        if len(self._timestamps) >= self._config.max_requests_per_window:
            log.debug("Rate limit reached (%d in %ds window)", len(self._timestamps), self._config.window_seconds)
            return False
        self._timestamps.append(now)
        return True

    def in_window(self) -> int:
        """Number of admissions in the trailing window."""
        self._prune(self._clock())
        return len(self._timestamps)

    def reset_in(self) -> float:
        """Seconds until the oldest admission leaves the window (0 if room now)."""
        now = self._clock()
        self._prune(now)
        if len(self._timestamps) < self._config.max_requests_per_window:
            return 0.0
        return max(0.0, self._timestamps[0] + self._config.window_seconds - now)
