"""Exception hierarchy for codemind.

Every failure the gateway can report is a ``GatewayError`` subclass with a
stable ``kind`` string. Pipeline stages raise these; only the error boundary
turns them into ``GatewayResult`` values.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base exception for all codemind errors."""

    kind = "gateway_error"


class DisabledError(GatewayError):
    """Raised when the AI integration is switched off in configuration."""

    kind = "disabled"


class UnavailableError(GatewayError):
    """Raised when the backend health probe reports it unavailable."""

    kind = "unavailable"


class SanitizeError(GatewayError):
    """Raised when an outgoing code payload cannot be sent."""

    kind = "sanitize_error"


class EmptyPayloadError(SanitizeError):
    kind = "empty_payload"

    def __init__(self, message: str = "Empty code content") -> None:
        super().__init__(message)


class PayloadTooLargeError(SanitizeError):
    """The redacted payload is larger than ``privacy.max_payload_bytes``."""

    kind = "payload_too_large"

    def __init__(self, actual_bytes: int, max_bytes: int) -> None:
        super().__init__(f"Code size exceeds limit: {actual_bytes} bytes (max: {max_bytes})")
        self.actual_bytes = actual_bytes
        self.max_bytes = max_bytes


class RateLimitedError(GatewayError):
    """Admission denied and the request could not be queued."""

    kind = "rate_limited"

    def __init__(self, message: str = "Rate limit exceeded") -> None:
        super().__init__(message)


class QueueFullError(GatewayError):
    """Admission denied and the backpressure queue is at capacity."""

    kind = "queue_full"

    def __init__(self, max_size: int) -> None:
        super().__init__(f"Request queue is full ({max_size} pending)")
        self.max_size = max_size


class TransportError(GatewayError):
    """Raised when a single backend request fails."""

    kind = "transport_error"


class EncodeError(TransportError):
    """Request body could not be serialized to JSON."""

    kind = "encode_error"


class RequestFailedError(TransportError):
    """The request process exited non-zero or timed out."""

    kind = "request_failed"

    def __init__(self, exit_code: int, *, timed_out: bool = False) -> None:
        if timed_out:
            message = f"API request timed out (code: {exit_code})"
        else:
            message = f"API request failed with code: {exit_code}"
        super().__init__(message)
        self.exit_code = exit_code
        self.timed_out = timed_out


class DecodeError(TransportError):
    """Backend response could not be parsed as JSON."""

    kind = "decode_error"

    def __init__(self, message: str, raw_response: str = "") -> None:
        super().__init__(message)
        self.raw_response = raw_response


class UnknownEngineError(GatewayError):
    kind = "unknown_engine"

    def __init__(self, engine_id: str) -> None:
        super().__init__(f"Unknown AI engine: {engine_id!r}")
        self.engine_id = engine_id


class UnexpectedError(GatewayError):
    """Wraps a fault caught by the error boundary."""

    kind = "unexpected"

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
