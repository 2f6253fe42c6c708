"""Error boundary: converts every gateway failure into a ``GatewayResult``.

Nothing raised inside an operation crosses the gateway's public surface.
Typed ``GatewayError`` outcomes are returned as-is; anything else is wrapped
in ``UnexpectedError``. Each failure is counted once in ``stats.errors``.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from codemind.exceptions import GatewayError, UnavailableError, UnexpectedError
from codemind.models import GatewayResult, GatewayStats
from codemind.protocols import INotifier, NotifyLevel

log = logging.getLogger(__name__)


class ErrorBoundary:
    """Wraps operations so callers never need their own exception handling."""

    def __init__(self, stats: GatewayStats, notifier: INotifier) -> None:
        self._stats = stats
        self._notifier = notifier

    async def run(self, context: str, operation: Callable[[], Awaitable[Any]]) -> GatewayResult:
        try:
            value = await operation()
        except GatewayError as exc:
            return self.fail(context, exc)
        except Exception as exc:
            log.error("Unexpected failure in %s", context, exc_info=True)
            return self.fail(context, UnexpectedError(f"{type(exc).__name__}: {exc}", cause=exc))
        return GatewayResult(value=value)

    def run_sync(self, context: str, operation: Callable[[], Any]) -> GatewayResult:
        try:
            value = operation()
        except GatewayError as exc:
            return self.fail(context, exc)
        except Exception as exc:
            log.error("Unexpected failure in %s", context, exc_info=True)
            return self.fail(context, UnexpectedError(f"{type(exc).__name__}: {exc}", cause=exc))
        return GatewayResult(value=value)

    def fail(self, context: str, error: GatewayError) -> GatewayResult:
        """Record a terminal failure and build its result."""
        self._stats.errors += 1
        log.warning("%s failed [%s]: %s", context, error.kind, error)

        if isinstance(error, UnexpectedError):
            self._safe_notify(f"AI feature error ({context}): {error}", NotifyLevel.ERROR)
        elif isinstance(error, UnavailableError):
            self._safe_notify(f"AI feature unavailable ({context}): {error}", NotifyLevel.WARN)
        return GatewayResult(error=error)

    def _safe_notify(self, message: str, level: NotifyLevel) -> None:
        # A broken notification sink must not turn a failure result into a raise.
        try:
            self._notifier.notify(message, level)
        except Exception:
            log.error("Notifier failed while reporting: %s", message, exc_info=True)
