"""End-to-end gateway tests over the real event loop, scheduler and subprocesses."""

from __future__ import annotations

import asyncio
import stat
import sys
import time
from pathlib import Path
from typing import Sequence

import pytest

from codemind.core.config import merge_with_defaults
from codemind.gateway import Gateway
from codemind.models import ProcessResult
from codemind.runtime import LoopScheduler
from tests.fakes.fake_notifier import RecordingNotifier
from tests.fakes.fake_runner import FakeProcessRunner

# Stands in for curl: answers /health and echoes the --data-raw body back as JSON.
FAKE_CURL = """\
import json
import sys

args = sys.argv[1:]
if "--data-raw" in args:
    body = json.loads(args[args.index("--data-raw") + 1])
    print(json.dumps({"url": args[-1], "echo": body}))
elif args[-1].endswith("/health"):
    print(json.dumps({"status": "healthy"}))
else:
    sys.exit(22)
"""

INJECTION = "print('hi'); `touch /tmp/codemind-pwned` $(id) ; rm -rf / #"


class TimedRunner(FakeProcessRunner):
    """Records the monotonic time of every POST."""

    def __init__(self) -> None:
        super().__init__()
        self.post_times: list[float] = []

    async def run_async(self, argv: Sequence[str], *, timeout_ms: int) -> ProcessResult:
        if "POST" in argv:
            self.post_times.append(time.monotonic())
        return await super().run_async(argv, timeout_ms=timeout_ms)


@pytest.fixture
def fake_curl(tmp_path: Path) -> Path:
    script = tmp_path / "fake-curl"
    script.write_text(f"#!{sys.executable}\n{FAKE_CURL}", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return script


class TestQueueOnRealLoop:
    async def test_burst_is_smoothed_to_rate_limit(self) -> None:
        runner = TimedRunner()
        settings = merge_with_defaults(
            {
                "rate_limit": {"max_requests_per_window": 2, "window_seconds": 1},
                "queue": {"backoff_base_ms": 50, "backoff_max_ms": 200, "drain_interval_ms": 10},
                "health": {"auto_check": False},
            }
        )
        gateway = Gateway(settings, runner=runner, scheduler=LoopScheduler(), notifier=RecordingNotifier())

        results = await asyncio.wait_for(
            asyncio.gather(*(gateway.request("/q", {"n": n}) for n in range(5))),
            timeout=10,
        )

        assert all(r.ok for r in results)
        assert [p["n"] for p in runner.post_payloads()] == [0, 1, 2, 3, 4]
        assert gateway.stats.queue_enqueued == 3
        for i, start in enumerate(runner.post_times):
            in_window = [t for t in runner.post_times[i:] if t < start + 1]
            assert len(in_window) <= 2


class TestRealSubprocess:
    async def test_code_travels_as_data(self, fake_curl: Path) -> None:
        settings = merge_with_defaults({"curl_binary": str(fake_curl), "health": {"auto_check": False}})
        gateway = Gateway(settings, scheduler=LoopScheduler(), notifier=RecordingNotifier())

        result = await gateway.analyze_code(INJECTION + '\npassword="hunter2"', "python")

        assert result.ok, result.reason
        assert result.value["url"] == "http://localhost:8004/ai/chat"
        prompt = result.value["echo"]["messages"][1]["content"]
        assert INJECTION in prompt
        assert "hunter2" not in prompt
        assert not Path("/tmp/codemind-pwned").exists()

    def test_blocking_form(self, fake_curl: Path) -> None:
        settings = merge_with_defaults({"curl_binary": str(fake_curl), "health": {"auto_check": False}})
        gateway = Gateway(settings, notifier=RecordingNotifier())

        value, error = gateway.request_sync("/api/v1/custom", {"code": INJECTION})

        assert error is None
        assert value["echo"] == {"code": INJECTION}

    def test_missing_binary_is_reported_unavailable(self, tmp_path: Path) -> None:
        settings = merge_with_defaults(
            {"curl_binary": str(tmp_path / "no-such-curl"), "health": {"auto_check": False}}
        )
        notifier = RecordingNotifier()
        gateway = Gateway(settings, notifier=notifier)

        result = gateway.request_sync("/a")

        assert result.error is not None
        assert result.error.kind == "unavailable"
        assert notifier.messages
