"""Bounded FIFO of rate-limited requests, drained with exponential backoff."""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import Callable

from codemind.core.config import QueueConfig
from codemind.exceptions import QueueFullError
from codemind.models import GatewayStats, QueueItem
from codemind.protocols import IScheduler
from codemind.throttle.rate_limiter import SlidingWindowRateLimiter

log = logging.getLogger(__name__)


class BackpressureQueue:
    """Holds deferred requests until the rate limiter admits them.

    A single drain loop runs at a time. Each step asks the limiter for
    admission: on denial it re-checks after
    ``min(backoff_base_ms * 2**retry, backoff_max_ms)``; on admission it pops
    the head item, calls its ``resume`` and continues after
    ``drain_interval_ms``. Backoff escalates per drain attempt, not per item,
    and resets to the base delay once an item is dispatched.

    Items are resumed strictly in enqueue order. The admission taken by the
    drain loop belongs to the resumed request; ``resume`` must not ask for
    another one.
    """

    def __init__(
        self,
        config: QueueConfig,
        rate_limiter: SlidingWindowRateLimiter,
        scheduler: IScheduler,
        stats: GatewayStats | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._rate_limiter = rate_limiter
        self._scheduler = scheduler
        self._stats = stats if stats is not None else GatewayStats()
        self._clock = clock
        self._items: deque[QueueItem] = deque()
        self._processing = False

    def __len__(self) -> int:
        return len(self._items)

    @property
    def processing(self) -> bool:
        return self._processing

    def backoff_delay_ms(self, retry_count: int) -> int:
        return min(self._config.backoff_base_ms * (2**retry_count), self._config.backoff_max_ms)

    def enqueue(self, resume: Callable[[], None]) -> QueueItem:
        """Append a deferred request and make sure the drain loop is running.

        Raises ``QueueFullError`` immediately when ``max_size`` items are waiting.
        """
        if len(self._items) >= self._config.max_size:
            raise QueueFullError(self._config.max_size)

        item = QueueItem(resume=resume, enqueued_at=self._clock())
        self._items.append(item)
        self._stats.queue_enqueued += 1
        log.info("Request queued behind rate limit (%d pending)", len(self._items))
        self._start()
        return item

    def _start(self) -> None:
        if self._processing:
            return
        self._processing = True
        self._process_next(0)

    def _process_next(self, retry_count: int) -> None:
        if not self._items:
            self._processing = False
            return

        if not self._rate_limiter.try_admit():
            self._items[0].retry_count = retry_count
            delay = self.backoff_delay_ms(retry_count)
            log.debug("Queue drain denied, retrying in %dms (attempt %d)", delay, retry_count + 1)
            self._scheduler.defer(delay, lambda: self._process_next(retry_count + 1))
            return

        item = self._items.popleft()
        try:
            item.resume()
        finally:
            self._scheduler.defer(self._config.drain_interval_ms, lambda: self._process_next(0))
