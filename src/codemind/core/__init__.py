"""Core configuration and startup validation."""

from __future__ import annotations

from codemind.core.config import (
    CacheConfig,
    GatewaySettings,
    HealthConfig,
    ObservabilityConfig,
    PrivacyConfig,
    QueueConfig,
    RateLimitConfig,
    merge_with_defaults,
)
from codemind.core.startup_checks import validate_settings

__all__ = [
    "CacheConfig",
    "GatewaySettings",
    "HealthConfig",
    "ObservabilityConfig",
    "PrivacyConfig",
    "QueueConfig",
    "RateLimitConfig",
    "merge_with_defaults",
    "validate_settings",
]
