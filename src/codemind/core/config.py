"""Nested pydantic-settings configuration for the gateway.

Each concern has its own sub-model and env prefix, so both the nested
``GatewaySettings().cache.ttl_seconds`` style and flat env vars work::

    export CODEMIND_BASE_URL=http://localhost:8004
    export CODEMIND_CACHE_TTL_SECONDS=600
    export CODEMIND_RATE_LIMIT_MAX_REQUESTS_PER_WINDOW=10

Settings are frozen once built: the gateway treats them as immutable for the
session. Out-of-range values are rejected, never coerced.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping
from urllib.parse import urlparse

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class CacheConfig(BaseSettings):
    """Response cache configuration.

    Env vars use ``CODEMIND_CACHE_`` prefix.
    """

    model_config = {"env_prefix": "CODEMIND_CACHE_", "frozen": True, "extra": "forbid"}

    enabled: bool = True
    ttl_seconds: int = Field(default=300, gt=0)
    max_entries: int = Field(default=100, gt=0)


class RateLimitConfig(BaseSettings):
    """Sliding-window admission control.

    ``burst_size`` is accepted for forward compatibility; admission only
    consults ``max_requests_per_window`` over the trailing window.

    Env vars use ``CODEMIND_RATE_LIMIT_`` prefix.
    """

    model_config = {"env_prefix": "CODEMIND_RATE_LIMIT_", "frozen": True, "extra": "forbid"}

    max_requests_per_window: int = Field(default=30, gt=0)
    window_seconds: int = Field(default=60, gt=0)
    burst_size: int = Field(default=10, gt=0)


class QueueConfig(BaseSettings):
    """Backpressure queue configuration.

    Env vars use ``CODEMIND_QUEUE_`` prefix.
    """

    model_config = {"env_prefix": "CODEMIND_QUEUE_", "frozen": True, "extra": "forbid"}

    enabled: bool = True
    max_size: int = Field(default=50, gt=0)
    backoff_base_ms: int = Field(default=1000, gt=0)
    backoff_max_ms: int = Field(default=30_000, gt=0)
    drain_interval_ms: int = Field(default=100, gt=0)

    @model_validator(mode="after")
    def _check_backoff_bounds(self) -> QueueConfig:
        if self.backoff_base_ms > self.backoff_max_ms:
            raise ValueError(
                f"backoff_base_ms ({self.backoff_base_ms}) must not exceed "
                f"backoff_max_ms ({self.backoff_max_ms})"
            )
        return self


class PrivacyConfig(BaseSettings):
    """Outgoing payload controls.

    Env vars use ``CODEMIND_PRIVACY_`` prefix.
    """

    model_config = {"env_prefix": "CODEMIND_PRIVACY_", "frozen": True, "extra": "forbid"}

    redact_secrets: bool = True
    max_payload_bytes: int = Field(default=100_000, gt=0)
    send_file_paths: bool = False


class HealthConfig(BaseSettings):
    """Backend liveness probing.

    Env vars use ``CODEMIND_HEALTH_`` prefix.
    """

    model_config = {"env_prefix": "CODEMIND_HEALTH_", "frozen": True, "extra": "forbid"}

    ttl_seconds: int = Field(default=30, gt=0)
    probe_timeout_ms: int = Field(default=2000, gt=0)
    auto_check: bool = True
    check_interval_ms: int = Field(default=30_000, gt=0)


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``CODEMIND_OBSERVABILITY_`` prefix. ``json_logs`` of None
    means "JSON unless stderr is a terminal".
    """

    model_config = {"env_prefix": "CODEMIND_OBSERVABILITY_", "frozen": True, "extra": "forbid"}

    log_level: str = "INFO"
    service_name: str = "codemind"
    json_logs: bool | None = None


class GatewaySettings(BaseSettings):
    """Top-level gateway settings aggregating all sub-configs.

    Top-level fields read ``CODEMIND_*``; each sub-config reads its own
    ``CODEMIND_<GROUP>_*`` env vars.
    """

    model_config = {"env_prefix": "CODEMIND_", "frozen": True, "extra": "forbid"}

    enabled: bool = True
    base_url: str = "http://localhost:8004"
    request_timeout_ms: int = Field(default=30_000, gt=0)
    curl_binary: str = "curl"

    cache: CacheConfig = Field(default_factory=CacheConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    queue: QueueConfig = Field(default_factory=QueueConfig)
    privacy: PrivacyConfig = Field(default_factory=PrivacyConfig)
    health: HealthConfig = Field(default_factory=HealthConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"base_url must be an http(s) URL, got {value!r}")
        return value.rstrip("/")


def _deep_merge(base: dict[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_with_defaults(overrides: Mapping[str, Any] | None = None) -> GatewaySettings:
    """Overlay a partial user config onto the defaults and validate it.

    Raises ``pydantic.ValidationError`` for unknown keys or out-of-range values.
    """
    defaults = GatewaySettings().model_dump()
    if not overrides:
        return GatewaySettings(**defaults)
    return GatewaySettings(**_deep_merge(defaults, overrides))
