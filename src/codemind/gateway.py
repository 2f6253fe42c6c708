"""Gateway facade: the only entry point from the editor to the backend.

Every operation exists twice:

- a coroutine (``await gateway.analyze_code(...)``) that runs on the host's
  event loop, queueing behind the rate limiter when needed;
- a blocking ``*_sync`` twin that never touches the loop and reports
  ``RateLimitedError`` instead of queueing.

Both return a ``GatewayResult`` and never raise. Callback-style consumers
wrap a coroutine with ``submit()``.

Pipeline per call::

    enabled? -> health gate -> sanitize (code ops) -> cache lookup
      -> admit | enqueue -> transport -> cache store -> result
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

from codemind.cache.memory import ResponseCache
from codemind.core.config import GatewaySettings
from codemind.core.startup_checks import validate_settings
from codemind.engines import get_engine
from codemind.exceptions import DisabledError, GatewayError, RateLimitedError, UnavailableError, UnexpectedError
from codemind.health import HealthMonitor
from codemind.hooks.error_boundary import ErrorBoundary
from codemind.models import GatewayResult, GatewayStats, HealthStatus
from codemind.privacy.sanitizer import Sanitizer
from codemind.prompts import (
    CHAT_ENDPOINT,
    build_analysis_request,
    build_optimization_request,
    build_suggestions_request,
    build_test_generation_request,
    render_context,
)
from codemind.protocols import ICancellable, INotifier, IProcessRunner, IScheduler, NotifyLevel
from codemind.runtime import LogNotifier, LoopScheduler
from codemind.throttle.backpressure import BackpressureQueue
from codemind.throttle.rate_limiter import SlidingWindowRateLimiter
from codemind.transport.client import Transport
from codemind.transport.runner import SubprocessRunner

log = logging.getLogger(__name__)

METRICS_ENDPOINT = "/api/v1/metrics/metrics/latest"

ResultCallback = Callable[[Any, "GatewayError | None"], None]


class Gateway:
    """Owns the cache, rate-limit window, queue and stats for one process."""

    def __init__(
        self,
        settings: GatewaySettings | None = None,
        *,
        runner: IProcessRunner | None = None,
        scheduler: IScheduler | None = None,
        notifier: INotifier | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings or GatewaySettings()
        self._scheduler = scheduler or LoopScheduler()
        self._notifier = notifier or LogNotifier()
        self.stats = GatewayStats()

        self._sanitizer = Sanitizer(self._settings.privacy)
        self._cache = ResponseCache(self._settings.cache, self.stats, clock)
        self._rate_limiter = SlidingWindowRateLimiter(self._settings.rate_limit, clock)
        self._queue = BackpressureQueue(
            self._settings.queue, self._rate_limiter, self._scheduler, self.stats, clock
        )
        self._transport = Transport(
            self._settings.base_url,
            runner or SubprocessRunner(),
            curl_binary=self._settings.curl_binary,
        )
        self._health = HealthMonitor(self._transport, self._settings.health, clock)
        self._boundary = ErrorBoundary(self.stats, self._notifier)

        self._health_timer: ICancellable | None = None
        self._last_available: bool | None = None
        self._closed = False
        self._background: set[asyncio.Future[Any]] = set()

    @property
    def settings(self) -> GatewaySettings:
        return self._settings

    # ── Lifecycle ────────────────────────────────────────────────────

    async def start(self) -> HealthStatus:
        """Validate settings, probe the backend once and start periodic checks."""
        validate_settings(self._settings)
        self._closed = False
        status = await self._health.check()
        self._last_available = status.available
        if status.available:
            self._notifier.notify("CodeMind AI integration: Ready", NotifyLevel.INFO)
        else:
            self._notifier.notify(
                f"CodeMind AI integration: Unavailable ({status.reason or 'unknown error'})",
                NotifyLevel.WARN,
            )
        if self._settings.health.auto_check:
            self._schedule_health_tick()
        return status

    def close(self) -> None:
        """Stop periodic health checks. Queued requests are left to drain."""
        self._closed = True
        if self._health_timer is not None:
            self._health_timer.cancel()
            self._health_timer = None

    async def __aenter__(self) -> Gateway:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def _schedule_health_tick(self) -> None:
        self._health_timer = self._scheduler.defer(
            self._settings.health.check_interval_ms,
            lambda: self._spawn(self._health_tick()),
        )

    async def _health_tick(self) -> None:
        try:
            status = await self._health.check()
            if not status.available and self._last_available:
                self._notifier.notify("CodeMind AI integration: Connection lost", NotifyLevel.WARN)
            elif status.available and self._last_available is False:
                self._notifier.notify("CodeMind AI integration: Reconnected", NotifyLevel.INFO)
            self._last_available = status.available
        finally:
            if not self._closed:
                self._schedule_health_tick()

    def _spawn(self, coro: Awaitable[Any]) -> asyncio.Future[Any]:
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    # ── Callback surface ─────────────────────────────────────────────

    def submit(self, operation: Awaitable[GatewayResult], callback: ResultCallback) -> asyncio.Future[Any]:
        """Run a gateway coroutine and deliver ``callback(value, error)`` exactly once."""
        task = asyncio.ensure_future(operation)

        def _deliver(done: asyncio.Future[Any]) -> None:
            if done.cancelled():
                result = self._boundary.fail("submit", UnexpectedError("request cancelled"))
            elif done.exception() is not None:
                exc = done.exception()
                result = self._boundary.fail("submit", UnexpectedError(str(exc), cause=exc))
            else:
                result = done.result()
            try:
                callback(result.value, result.error)
            except Exception:
                log.error("Gateway result callback raised", exc_info=True)

        task.add_done_callback(_deliver)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    # ── Shared pipeline ──────────────────────────────────────────────

    def _ensure_enabled(self) -> None:
        if not self._settings.enabled:
            raise DisabledError("AI integration is disabled")

    @staticmethod
    def _raise_if_unavailable(status: HealthStatus) -> None:
        if not status.available:
            raise UnavailableError(f"CodeMind API unavailable: {status.reason or 'unknown error'}")

    async def _gate(self) -> None:
        self.stats.total_calls += 1
        self._ensure_enabled()
        self._raise_if_unavailable(await self._health.check())

    def _gate_sync(self) -> None:
        self.stats.total_calls += 1
        self._ensure_enabled()
        self._raise_if_unavailable(self._health.check_sync())

    async def _admit(self) -> None:
        if self._rate_limiter.try_admit():
            return
        if not self._settings.queue.enabled:
            raise RateLimitedError()

        admitted: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def _resume() -> None:
            if not admitted.done():
                admitted.set_result(None)

        self._queue.enqueue(_resume)
        await admitted

    async def _dispatch(self, endpoint: str, body: Any) -> Any:
        cached = self._cache.lookup(endpoint, body)
        if cached is not None:
            return cached
        await self._admit()
        response = await self._transport.post(endpoint, body, timeout_ms=self._settings.request_timeout_ms)
        self._cache.store(endpoint, body, response)
        return response

    def _dispatch_sync(self, endpoint: str, body: Any) -> Any:
        cached = self._cache.lookup(endpoint, body)
        if cached is not None:
            return cached
        if not self._rate_limiter.try_admit():
            raise RateLimitedError()
        response = self._transport.post_sync(endpoint, body, timeout_ms=self._settings.request_timeout_ms)
        self._cache.store(endpoint, body, response)
        return response

    async def _gated(self, endpoint: str, build_body: Callable[[], Any]) -> Any:
        await self._gate()
        return await self._dispatch(endpoint, build_body())

    def _gated_sync(self, endpoint: str, build_body: Callable[[], Any]) -> Any:
        self._gate_sync()
        return self._dispatch_sync(endpoint, build_body())

    # ── Request bodies ───────────────────────────────────────────────

    def _analysis_body(self, code: str, file_type: str, file_path: str | None) -> dict[str, Any]:
        sanitized = self._sanitizer.sanitize(code)
        path = file_path if self._settings.privacy.send_file_paths else None
        return build_analysis_request(sanitized, file_type, path)

    def _optimization_body(self, code: str, optimization_type: str) -> dict[str, Any]:
        return build_optimization_request(self._sanitizer.sanitize(code), optimization_type)

    def _test_body(self, code: str, test_framework: str) -> dict[str, Any]:
        return build_test_generation_request(self._sanitizer.sanitize(code), test_framework)

    def _suggestions_body(self, context: dict[str, Any]) -> dict[str, Any]:
        safe_context = self._sanitizer.redact_value(context)
        return build_suggestions_request(safe_context, self._sanitizer.redact(render_context(safe_context)))

    # ── Operations (coroutine form) ──────────────────────────────────

    async def check_health(self) -> GatewayResult:
        """Probe (or reuse the cached probe of) the backend. Value is True when up."""

        async def _op() -> bool:
            self._raise_if_unavailable(await self._health.check())
            return True

        return await self._boundary.run("health check", _op)

    async def request(self, endpoint: str, body: Any = None) -> GatewayResult:
        payload = body if body is not None else {}
        return await self._boundary.run("api request", lambda: self._gated(endpoint, lambda: payload))

    async def analyze_code(self, code: str, file_type: str, file_path: str | None = None) -> GatewayResult:
        return await self._boundary.run(
            "code analysis",
            lambda: self._gated(CHAT_ENDPOINT, lambda: self._analysis_body(code, file_type, file_path)),
        )

    async def optimize_code(self, code: str, optimization_type: str) -> GatewayResult:
        return await self._boundary.run(
            "code optimization",
            lambda: self._gated(CHAT_ENDPOINT, lambda: self._optimization_body(code, optimization_type)),
        )

    async def generate_tests(self, code: str, test_framework: str) -> GatewayResult:
        return await self._boundary.run(
            "test generation",
            lambda: self._gated(CHAT_ENDPOINT, lambda: self._test_body(code, test_framework)),
        )

    async def get_development_suggestions(self, context: dict[str, Any]) -> GatewayResult:
        return await self._boundary.run(
            "development suggestions",
            lambda: self._gated(CHAT_ENDPOINT, lambda: self._suggestions_body(context)),
        )

    async def get_metrics(self) -> GatewayResult:
        return await self._boundary.run("API metrics", lambda: self._gated(METRICS_ENDPOINT, dict))

    async def engine_request(self, engine_id: str, payload: Any = None) -> GatewayResult:
        async def _op() -> Any:
            engine = get_engine(engine_id)
            return await self._gated(engine.endpoint, lambda: payload if payload is not None else {})

        return await self._boundary.run(f"engine {engine_id}", _op)

    # ── Operations (blocking form) ───────────────────────────────────

    def check_health_sync(self) -> GatewayResult:
        def _op() -> bool:
            self._raise_if_unavailable(self._health.check_sync())
            return True

        return self._boundary.run_sync("health check", _op)

    def request_sync(self, endpoint: str, body: Any = None) -> GatewayResult:
        payload = body if body is not None else {}
        return self._boundary.run_sync("api request", lambda: self._gated_sync(endpoint, lambda: payload))

    def analyze_code_sync(self, code: str, file_type: str, file_path: str | None = None) -> GatewayResult:
        return self._boundary.run_sync(
            "code analysis",
            lambda: self._gated_sync(CHAT_ENDPOINT, lambda: self._analysis_body(code, file_type, file_path)),
        )

    def optimize_code_sync(self, code: str, optimization_type: str) -> GatewayResult:
        return self._boundary.run_sync(
            "code optimization",
            lambda: self._gated_sync(CHAT_ENDPOINT, lambda: self._optimization_body(code, optimization_type)),
        )

    def generate_tests_sync(self, code: str, test_framework: str) -> GatewayResult:
        return self._boundary.run_sync(
            "test generation",
            lambda: self._gated_sync(CHAT_ENDPOINT, lambda: self._test_body(code, test_framework)),
        )

    def get_development_suggestions_sync(self, context: dict[str, Any]) -> GatewayResult:
        return self._boundary.run_sync(
            "development suggestions",
            lambda: self._gated_sync(CHAT_ENDPOINT, lambda: self._suggestions_body(context)),
        )

    def get_metrics_sync(self) -> GatewayResult:
        return self._boundary.run_sync("API metrics", lambda: self._gated_sync(METRICS_ENDPOINT, dict))

    def engine_request_sync(self, engine_id: str, payload: Any = None) -> GatewayResult:
        def _op() -> Any:
            engine = get_engine(engine_id)
            return self._gated_sync(engine.endpoint, lambda: payload if payload is not None else {})

        return self._boundary.run_sync(f"engine {engine_id}", _op)

    # ── Diagnostics ──────────────────────────────────────────────────

    def invalidate_health(self) -> None:
        """Force the next operation to re-probe the backend."""
        self._health.invalidate()

    def clear_cache(self) -> None:
        self._cache.clear()
        self._notifier.notify("AI request cache cleared", NotifyLevel.INFO)

    def get_stats(self) -> dict[str, Any]:
        return {
            **self.stats.as_dict(),
            "queue_pending": len(self._queue),
            "cached_entries": len(self._cache),
            "rate_window_used": self._rate_limiter.in_window(),
            "rate_window_limit": self._rate_limiter.limit,
        }
