"""Prompt builders for the chat-based code operations."""

from __future__ import annotations

from codemind.prompts.templates import (
    CHAT_ENDPOINT,
    build_analysis_request,
    build_optimization_request,
    build_suggestions_request,
    build_test_generation_request,
    render_context,
)

__all__ = [
    "CHAT_ENDPOINT",
    "build_analysis_request",
    "build_optimization_request",
    "build_suggestions_request",
    "build_test_generation_request",
    "render_context",
]
