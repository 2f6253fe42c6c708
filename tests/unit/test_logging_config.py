"""Tests for structlog-based logging setup."""

from __future__ import annotations

import logging
from typing import Iterator

import pytest
import structlog

from codemind.core.config import ObservabilityConfig
from codemind.hooks.logging_config import setup_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    codemind_level = logging.getLogger("codemind").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("codemind").setLevel(codemind_level)
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


class TestSetupLogging:
    def test_installs_processor_formatter(self) -> None:
        setup_logging(ObservabilityConfig(json_logs=True))  # type: ignore[call-arg]
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_level_applied(self) -> None:
        setup_logging(ObservabilityConfig(log_level="DEBUG", json_logs=False))  # type: ignore[call-arg]
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("codemind").level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging(ObservabilityConfig(log_level="chatty", json_logs=True))  # type: ignore[call-arg]
        assert logging.getLogger().level == logging.INFO

    def test_binds_service_name(self) -> None:
        setup_logging(ObservabilityConfig(service_name="codemind-test", json_logs=True))  # type: ignore[call-arg]
        assert structlog.contextvars.get_contextvars()["service"] == "codemind-test"
