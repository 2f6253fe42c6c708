"""Argument-vector process execution. No shell is ever involved."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from typing import Sequence

from codemind.models import ProcessResult

log = logging.getLogger(__name__)

# Exit status reported when the runner kills a process for exceeding its timeout.
TIMEOUT_EXIT_CODE = 124


class SubprocessRunner:
    """Runs commands with ``subprocess`` / ``asyncio`` exec APIs.

    ``argv[0]`` is the program and every further element reaches it as one
    literal argument, whatever characters it contains.
    """

    def run(self, argv: Sequence[str], *, timeout_ms: int) -> ProcessResult:
        args = list(argv)
        try:
            completed = subprocess.run(
                args,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout_ms / 1000.0,
                check=False,
            )
        except subprocess.TimeoutExpired:
            log.warning("%s timed out after %dms", args[0], timeout_ms)
            return ProcessResult(exit_code=TIMEOUT_EXIT_CODE, timed_out=True)
        return ProcessResult(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    async def run_async(self, argv: Sequence[str], *, timeout_ms: int) -> ProcessResult:
        args = list(argv)
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout_ms / 1000.0)
        except asyncio.TimeoutError:
            log.warning("%s timed out after %dms", args[0], timeout_ms)
            if proc.returncode is None:
                proc.kill()
            await proc.wait()
            return ProcessResult(exit_code=TIMEOUT_EXIT_CODE, timed_out=True)
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
            raise
        return ProcessResult(
            exit_code=proc.returncode if proc.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
