"""Tests for the subprocess runner using the current interpreter as the child."""

from __future__ import annotations

import subprocess
import sys

import pytest

from codemind.transport.runner import TIMEOUT_EXIT_CODE, SubprocessRunner

ECHO_ARG = "import sys; sys.stdout.write(sys.argv[1])"
INJECTION = "; echo pwned && `id` $(whoami) | cat > /dev/null #"


@pytest.fixture
def process_runner() -> SubprocessRunner:
    return SubprocessRunner()


class TestBlockingRun:
    def test_argument_reaches_child_literally(self, process_runner: SubprocessRunner) -> None:
        result = process_runner.run([sys.executable, "-c", ECHO_ARG, INJECTION], timeout_ms=10_000)
        assert result.exit_code == 0
        assert result.stdout == INJECTION
        assert result.timed_out is False

    def test_non_zero_exit(self, process_runner: SubprocessRunner) -> None:
        result = process_runner.run([sys.executable, "-c", "import sys; sys.exit(3)"], timeout_ms=10_000)
        assert result.exit_code == 3

    def test_timeout(self, process_runner: SubprocessRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        def _expire(*args: object, **kwargs: object) -> None:
            raise subprocess.TimeoutExpired(cmd="curl", timeout=0.1)

        monkeypatch.setattr(subprocess, "run", _expire)
        result = process_runner.run(["curl", "http://localhost"], timeout_ms=100)
        assert result.timed_out is True
        assert result.exit_code == TIMEOUT_EXIT_CODE

    def test_never_uses_shell(self, process_runner: SubprocessRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: dict[str, object] = {}

        def _capture(args: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
            seen["args"] = args
            seen.update(kwargs)
            return subprocess.CompletedProcess(args, 0, "{}", "")

        monkeypatch.setattr(subprocess, "run", _capture)
        process_runner.run(["curl", INJECTION], timeout_ms=1000)
        assert seen["args"] == ["curl", INJECTION]
        assert seen.get("shell", False) is False


class TestAsyncRun:
    async def test_argument_reaches_child_literally(self, process_runner: SubprocessRunner) -> None:
        result = await process_runner.run_async([sys.executable, "-c", ECHO_ARG, INJECTION], timeout_ms=10_000)
        assert result.exit_code == 0
        assert result.stdout == INJECTION

    async def test_timeout_kills_child(self, process_runner: SubprocessRunner) -> None:
        result = await process_runner.run_async(
            [sys.executable, "-c", "import time; time.sleep(30)"], timeout_ms=200
        )
        assert result.timed_out is True
        assert result.exit_code == TIMEOUT_EXIT_CODE

    async def test_missing_binary_raises_os_error(self, process_runner: SubprocessRunner) -> None:
        with pytest.raises(OSError):
            await process_runner.run_async(["/nonexistent/curl-binary"], timeout_ms=1000)
