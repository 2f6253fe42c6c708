"""Backend transport: argv-only process runner and curl request client."""

from __future__ import annotations

from codemind.transport.client import Transport
from codemind.transport.runner import TIMEOUT_EXIT_CODE, SubprocessRunner

__all__ = ["TIMEOUT_EXIT_CODE", "SubprocessRunner", "Transport"]
