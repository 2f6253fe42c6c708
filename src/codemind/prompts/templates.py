"""Chat prompt templates for the code-intelligence operations.

Every builder returns the ``{"messages": [...]}`` body posted to
``CHAT_ENDPOINT``. Callers pass already-sanitized code.
"""

from __future__ import annotations

import json
from typing import Any

CHAT_ENDPOINT = "/ai/chat"

_PROMPT_DATA: dict[str, str] = {
    "ANALYSIS_SYSTEM_PROMPT": (
        "You are an expert code reviewer. Analyze the provided code for quality, potential issues, "
        "and optimization opportunities. Provide specific, actionable feedback."
    ),
    "ANALYSIS_USER_TEMPLATE": "Please analyze this {file_type} code:\n\n```{file_type}\n{code}\n```",
    "ANALYSIS_PATH_SUFFIX": "\n\nFile: {file_path}",
    "OPTIMIZE_SYSTEM_TEMPLATE": (
        "You are an expert code optimizer. Focus on {optimization_type} optimization. "
        "Provide improved code with explanations."
    ),
    "OPTIMIZE_USER_TEMPLATE": "Please optimize this code for {optimization_type}:\n\n{code}",
    "TESTS_SYSTEM_TEMPLATE": (
        "You are an expert test writer. Generate comprehensive tests using {test_framework} framework. "
        "Include edge cases and error handling."
    ),
    "TESTS_USER_TEMPLATE": "Generate tests for this code:\n\n{code}",
    "SUGGESTIONS_SYSTEM_PROMPT": (
        "You are an AI development assistant. Provide helpful suggestions for improving development "
        "workflow, code organization, and best practices."
    ),
    "SUGGESTIONS_USER_TEMPLATE": (
        "I'm working on a {file_type} project. Current context: {context}. "
        "What development improvements do you suggest?"
    ),
}


def _chat(system: str, user: str) -> dict[str, Any]:
    return {
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ]
    }


def build_analysis_request(code: str, file_type: str, file_path: str | None = None) -> dict[str, Any]:
    user = _PROMPT_DATA["ANALYSIS_USER_TEMPLATE"].format(file_type=file_type, code=code)
    if file_path:
        user += _PROMPT_DATA["ANALYSIS_PATH_SUFFIX"].format(file_path=file_path)
    return _chat(_PROMPT_DATA["ANALYSIS_SYSTEM_PROMPT"], user)


def build_optimization_request(code: str, optimization_type: str) -> dict[str, Any]:
    return _chat(
        _PROMPT_DATA["OPTIMIZE_SYSTEM_TEMPLATE"].format(optimization_type=optimization_type),
        _PROMPT_DATA["OPTIMIZE_USER_TEMPLATE"].format(optimization_type=optimization_type, code=code),
    )


def build_test_generation_request(code: str, test_framework: str) -> dict[str, Any]:
    return _chat(
        _PROMPT_DATA["TESTS_SYSTEM_TEMPLATE"].format(test_framework=test_framework),
        _PROMPT_DATA["TESTS_USER_TEMPLATE"].format(code=code),
    )


def render_context(context: dict[str, Any]) -> str:
    """Serialize a development context mapping for embedding in a prompt."""
    return json.dumps(context, sort_keys=True, ensure_ascii=False, default=str)


def build_suggestions_request(context: dict[str, Any], rendered_context: str) -> dict[str, Any]:
    return _chat(
        _PROMPT_DATA["SUGGESTIONS_SYSTEM_PROMPT"],
        _PROMPT_DATA["SUGGESTIONS_USER_TEMPLATE"].format(
            file_type=context.get("file_type") or "unknown",
            context=rendered_context,
        ),
    )
