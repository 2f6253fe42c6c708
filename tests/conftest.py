"""Shared fixtures for codemind tests."""

from __future__ import annotations

import os
from typing import Any, Callable

import pytest

from codemind.core.config import merge_with_defaults
from codemind.gateway import Gateway
from tests.fakes.fake_clock import FakeClock
from tests.fakes.fake_notifier import RecordingNotifier
from tests.fakes.fake_runner import FakeProcessRunner
from tests.fakes.fake_scheduler import FakeScheduler


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer CODEMIND_* variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("CODEMIND_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def runner() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def make_gateway(
    runner: FakeProcessRunner,
    scheduler: FakeScheduler,
    notifier: RecordingNotifier,
    clock: FakeClock,
) -> Callable[..., Gateway]:
    """Factory: ``make_gateway({"cache": {"max_entries": 2}})`` overlays test defaults."""

    def _make(overrides: dict[str, Any] | None = None) -> Gateway:
        merged: dict[str, Any] = {"health": {"auto_check": False}}
        for key, value in (overrides or {}).items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = {**merged[key], **value}
            else:
                merged[key] = value
        return Gateway(
            merge_with_defaults(merged),
            runner=runner,
            scheduler=scheduler,
            notifier=notifier,
            clock=clock,
        )

    return _make


@pytest.fixture
def gateway(make_gateway: Callable[..., Gateway]) -> Gateway:
    return make_gateway()
