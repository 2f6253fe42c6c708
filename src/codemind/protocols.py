"""Collaborator protocols: the host primitives the gateway is built on.

The gateway never spawns processes, schedules timers or talks to the user
directly; it goes through these three contracts so that tests (and other
hosts) can supply their own implementations.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable, Protocol, Sequence, runtime_checkable

from codemind.models import ProcessResult


class NotifyLevel(IntEnum):
    """Severity of a user-visible notification (mirrors ``logging`` levels)."""

    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40


@runtime_checkable
class IProcessRunner(Protocol):
    """Executes an argument vector without any shell involvement."""

    def run(self, argv: Sequence[str], *, timeout_ms: int) -> ProcessResult:
        """Run ``argv`` to completion, blocking the caller."""
        ...

    async def run_async(self, argv: Sequence[str], *, timeout_ms: int) -> ProcessResult:
        """Run ``argv`` to completion, suspending only the awaiting coroutine."""
        ...


@runtime_checkable
class ICancellable(Protocol):
    def cancel(self) -> Any:
        ...


@runtime_checkable
class IScheduler(Protocol):
    """Defers a zero-argument callable by a number of milliseconds."""

    def defer(self, delay_ms: int, fn: Callable[[], None]) -> ICancellable:
        ...


@runtime_checkable
class INotifier(Protocol):
    """Sink for user-visible messages."""

    def notify(self, message: str, level: NotifyLevel = NotifyLevel.INFO) -> None:
        ...
