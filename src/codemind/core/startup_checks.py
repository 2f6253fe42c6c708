"""Startup validation: warn on legal but risky gateway settings.

Hard range errors are rejected by the pydantic models themselves; the checks
here cover combinations that are valid but worth surfacing in the logs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlparse

if TYPE_CHECKING:
    from codemind.core.config import GatewaySettings

log = logging.getLogger(__name__)

_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


def validate_settings(settings: GatewaySettings) -> list[str]:
    """Run all startup checks. Returns the warnings that were logged."""
    warnings: list[str] = []
    warnings.extend(_check_privacy(settings))
    warnings.extend(_check_transport(settings))
    warnings.extend(_check_throttling(settings))
    for message in warnings:
        log.warning(message)
    return warnings


def _check_privacy(settings: GatewaySettings) -> list[str]:
    found: list[str] = []
    if not settings.privacy.redact_secrets:
        found.append(
            "CODEMIND_PRIVACY_REDACT_SECRETS=false: code is sent to the backend without secret redaction."
        )
    if settings.privacy.send_file_paths:
        found.append("CODEMIND_PRIVACY_SEND_FILE_PATHS=true: local file paths are included in requests.")
    return found


def _check_transport(settings: GatewaySettings) -> list[str]:
    parsed = urlparse(settings.base_url)
    if parsed.scheme == "http" and (parsed.hostname or "") not in _LOCAL_HOSTS:
        return [
            f"Backend {settings.base_url} is not local and uses plain http; "
            "code payloads travel unencrypted."
        ]
    return []


def _check_throttling(settings: GatewaySettings) -> list[str]:
    found: list[str] = []
    window_ms = settings.rate_limit.window_seconds * 1000
    if settings.queue.enabled and settings.queue.backoff_max_ms > window_ms:
        found.append(
            f"CODEMIND_QUEUE_BACKOFF_MAX_MS={settings.queue.backoff_max_ms} exceeds the "
            f"{settings.rate_limit.window_seconds}s rate window; queued requests may idle "
            "after capacity frees up."
        )
    if settings.rate_limit.burst_size > settings.rate_limit.max_requests_per_window:
        found.append(
            "CODEMIND_RATE_LIMIT_BURST_SIZE is larger than MAX_REQUESTS_PER_WINDOW; "
            "admission is capped by the window limit."
        )
    return found
