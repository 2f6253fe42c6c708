"""codemind: hardened gateway between an editor and a code-intelligence backend.

Public API::

    from codemind import (
        Gateway, GatewaySettings, GatewayResult, GatewayStats,
        merge_with_defaults, setup_logging,
        GatewayError, DisabledError, UnavailableError, SanitizeError,
        RateLimitedError, QueueFullError, TransportError, UnexpectedError,
    )

Typical use from a coroutine::

    gateway = Gateway(merge_with_defaults({"cache": {"ttl_seconds": 600}}))
    await gateway.start()
    value, error = await gateway.analyze_code(source, "python")
"""

from __future__ import annotations

from codemind.core.config import GatewaySettings, merge_with_defaults
from codemind.exceptions import (
    DecodeError,
    DisabledError,
    EmptyPayloadError,
    EncodeError,
    GatewayError,
    PayloadTooLargeError,
    QueueFullError,
    RateLimitedError,
    RequestFailedError,
    SanitizeError,
    TransportError,
    UnavailableError,
    UnexpectedError,
    UnknownEngineError,
)
from codemind.gateway import Gateway
from codemind.hooks import setup_logging
from codemind.models import GatewayResult, GatewayStats, HealthStatus
from codemind.protocols import NotifyLevel

__all__ = [
    "Gateway",
    "GatewaySettings",
    "merge_with_defaults",
    "setup_logging",
    "GatewayResult",
    "GatewayStats",
    "HealthStatus",
    "NotifyLevel",
    "GatewayError",
    "DisabledError",
    "UnavailableError",
    "SanitizeError",
    "EmptyPayloadError",
    "PayloadTooLargeError",
    "RateLimitedError",
    "QueueFullError",
    "TransportError",
    "EncodeError",
    "RequestFailedError",
    "DecodeError",
    "UnknownEngineError",
    "UnexpectedError",
]
