"""Single-request transport to the intelligence backend via ``curl``.

Requests are built as argument vectors: the JSON body is one argv element
passed with ``--data-raw`` (which, unlike ``-d``, never treats a leading
``@`` as a file name), so nothing in a code snippet can act as shell or
curl syntax.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from codemind.exceptions import DecodeError, EncodeError, RequestFailedError
from codemind.models import ProcessResult
from codemind.protocols import IProcessRunner

log = logging.getLogger(__name__)


class Transport:
    """Executes one backend request and returns the parsed JSON response."""

    def __init__(self, base_url: str, runner: IProcessRunner, *, curl_binary: str = "curl") -> None:
        self._base_url = base_url.rstrip("/")
        self._runner = runner
        self._curl = curl_binary

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, endpoint: str) -> str:
        if not endpoint.startswith("/"):
            endpoint = "/" + endpoint
        return self._base_url + endpoint

    def _base_argv(self, timeout_ms: int) -> list[str]:
        return [
            self._curl,
            "-q",
            "--silent",
            "--show-error",
            "--proto",
            "=http,https",
            "--max-time",
            f"{timeout_ms / 1000.0:g}",
        ]

    def build_post_argv(self, endpoint: str, payload: str, *, timeout_ms: int) -> list[str]:
        return [
            *self._base_argv(timeout_ms),
            "-X",
            "POST",
            "-H",
            "Content-Type: application/json",
            "--data-raw",
            payload,
            self.url_for(endpoint),
        ]

    def build_get_argv(self, endpoint: str, *, timeout_ms: int) -> list[str]:
        return [*self._base_argv(timeout_ms), self.url_for(endpoint)]

    @staticmethod
    def encode_body(body: Any) -> str:
        try:
            return json.dumps(body if body is not None else {}, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise EncodeError(f"Failed to encode request data: {exc}") from exc

    @staticmethod
    def decode_response(result: ProcessResult) -> Any:
        """Turn a completed process into parsed JSON or a ``TransportError``."""
        if result.timed_out or result.exit_code != 0:
            raise RequestFailedError(result.exit_code, timed_out=result.timed_out)
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"Invalid JSON response: {exc}", raw_response=result.stdout[:500]) from exc

    async def post(self, endpoint: str, body: Any, *, timeout_ms: int) -> Any:
        argv = self.build_post_argv(endpoint, self.encode_body(body), timeout_ms=timeout_ms)
        log.debug("POST %s", endpoint)
        result = await self._runner.run_async(argv, timeout_ms=timeout_ms)
        return self.decode_response(result)

    def post_sync(self, endpoint: str, body: Any, *, timeout_ms: int) -> Any:
        argv = self.build_post_argv(endpoint, self.encode_body(body), timeout_ms=timeout_ms)
        log.debug("POST %s (blocking)", endpoint)
        return self.decode_response(self._runner.run(argv, timeout_ms=timeout_ms))

    async def get(self, endpoint: str, *, timeout_ms: int) -> Any:
        argv = self.build_get_argv(endpoint, timeout_ms=timeout_ms)
        result = await self._runner.run_async(argv, timeout_ms=timeout_ms)
        return self.decode_response(result)

    def get_sync(self, endpoint: str, *, timeout_ms: int) -> Any:
        argv = self.build_get_argv(endpoint, timeout_ms=timeout_ms)
        return self.decode_response(self._runner.run(argv, timeout_ms=timeout_ms))
