"""Cached liveness probing of the intelligence backend."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from codemind.core.config import HealthConfig
from codemind.exceptions import GatewayError
from codemind.models import HealthStatus
from codemind.transport.client import Transport

log = logging.getLogger(__name__)

HEALTH_ENDPOINT = "/health"
_UNHEALTHY_REASON = "API not healthy or unreachable"


class HealthMonitor:
    """Probes ``GET /health`` at most once per ``ttl_seconds``.

    Both outcomes are cached: a failed probe is remembered as well, so an
    outage does not turn every gateway call into another probe.
    """

    def __init__(
        self,
        transport: Transport,
        config: HealthConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._transport = transport
        self._config = config or HealthConfig()
        self._clock = clock
        self._status: HealthStatus | None = None

    @property
    def last_status(self) -> HealthStatus | None:
        return self._status

    def cached(self) -> HealthStatus | None:
        """The cached status if it is still fresh."""
        if self._status is None:
            return None
        if self._status.age(self._clock()) >= self._config.ttl_seconds:
            return None
        return self._status

    def invalidate(self) -> None:
        self._status = None

    async def check(self) -> HealthStatus:
        fresh = self.cached()
        if fresh is not None:
            return fresh
        try:
            body = await self._transport.get(HEALTH_ENDPOINT, timeout_ms=self._config.probe_timeout_ms)
        except Exception as exc:
            return self._record(False, exc)
        return self._record(self.is_healthy(body), None)

    def check_sync(self) -> HealthStatus:
        fresh = self.cached()
        if fresh is not None:
            return fresh
        try:
            body = self._transport.get_sync(HEALTH_ENDPOINT, timeout_ms=self._config.probe_timeout_ms)
        except Exception as exc:
            return self._record(False, exc)
        return self._record(self.is_healthy(body), None)

    @staticmethod
    def is_healthy(body: Any) -> bool:
        return isinstance(body, dict) and body.get("status") == "healthy"

    def _record(self, available: bool, exc: BaseException | None) -> HealthStatus:
        reason = None if available else _UNHEALTHY_REASON
        if isinstance(exc, (GatewayError, OSError)):
            log.warning("Health probe failed: %s", exc)
        elif exc is not None:
            log.error("Health probe raised unexpectedly", exc_info=exc)
        self._status = HealthStatus(available=available, checked_at=self._clock(), reason=reason)
        return self._status
