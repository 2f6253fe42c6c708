"""Data-loss prevention for outgoing payloads."""

from __future__ import annotations

from codemind.privacy.rules import DEFAULT_RULES, RedactionRule
from codemind.privacy.sanitizer import Sanitizer

__all__ = ["DEFAULT_RULES", "RedactionRule", "Sanitizer"]
