"""Cross-cutting gateway hooks: error boundary and logging setup."""

from __future__ import annotations

from codemind.hooks.error_boundary import ErrorBoundary
from codemind.hooks.logging_config import setup_logging

__all__ = ["ErrorBoundary", "setup_logging"]
