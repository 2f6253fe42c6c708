"""Default host primitives: asyncio-backed scheduler and log-backed notifier."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from codemind.protocols import NotifyLevel

log = logging.getLogger(__name__)


class LoopScheduler:
    """Schedules callbacks on an asyncio event loop.

    When no loop is bound, the loop running at ``defer()`` time is used, so
    the scheduler must be driven from inside a coroutine or loop callback.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def defer(self, delay_ms: int, fn: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(delay_ms, 0) / 1000.0, fn)


class LogNotifier:
    """Routes user-visible notifications to the ``codemind.notify`` logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or logging.getLogger("codemind.notify")

    def notify(self, message: str, level: NotifyLevel = NotifyLevel.INFO) -> None:
        self._log.log(int(level), message)
