"""Tests for chat prompt builders and the engine registry."""

from __future__ import annotations

import pytest

from codemind.engines import ENGINES, get_engine
from codemind.exceptions import UnknownEngineError
from codemind.prompts import (
    build_analysis_request,
    build_optimization_request,
    build_suggestions_request,
    build_test_generation_request,
    render_context,
)


class TestPromptBuilders:
    def test_analysis_shape(self) -> None:
        body = build_analysis_request("x = 1", "python")
        assert [m["role"] for m in body["messages"]] == ["system", "user"]
        assert "```python\nx = 1\n```" in body["messages"][1]["content"]

    def test_analysis_with_path(self) -> None:
        body = build_analysis_request("x = 1", "python", "src/app.py")
        assert body["messages"][1]["content"].endswith("\n\nFile: src/app.py")

    def test_braces_in_code_survive_formatting(self) -> None:
        code = "data = {'a': {}} # {file_type}"
        body = build_optimization_request(code, "performance")
        assert code in body["messages"][1]["content"]

    def test_test_generation_names_framework(self) -> None:
        body = build_test_generation_request("def f(): pass", "busted")
        assert "busted framework" in body["messages"][0]["content"]

    def test_render_context_is_stable(self) -> None:
        assert render_context({"b": 1, "a": 2}) == render_context({"a": 2, "b": 1})

    def test_suggestions_default_file_type(self) -> None:
        body = build_suggestions_request({}, "{}")
        assert "unknown project" in body["messages"][1]["content"]


class TestEngines:
    def test_registry(self) -> None:
        assert set(ENGINES) == {"dise", "ccas", "ana", "lgm", "rlgf"}

    def test_get_engine(self) -> None:
        assert get_engine("ana").endpoint == "/api/v1/enhanced/ana/negotiate"

    def test_unknown_engine(self) -> None:
        with pytest.raises(UnknownEngineError, match="'missing'"):
            get_engine("missing")
