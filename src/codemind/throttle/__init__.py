"""Admission control: sliding-window limiter and backpressure queue."""

from __future__ import annotations

from codemind.throttle.backpressure import BackpressureQueue
from codemind.throttle.rate_limiter import SlidingWindowRateLimiter

__all__ = ["BackpressureQueue", "SlidingWindowRateLimiter"]
