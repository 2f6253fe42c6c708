"""Outgoing payload sanitization: secret redaction, then size enforcement."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from codemind.core.config import PrivacyConfig
from codemind.exceptions import EmptyPayloadError, PayloadTooLargeError
from codemind.privacy.rules import DEFAULT_RULES, RedactionRule

log = logging.getLogger(__name__)


class Sanitizer:
    """Scrubs secrets from code before it leaves the machine.

    Redaction always runs before the size check: a payload that only fits
    once its secrets are replaced is accepted, and a rejected payload is
    measured (and reported) in its redacted form.
    """

    def __init__(
        self,
        config: PrivacyConfig | None = None,
        rules: Iterable[RedactionRule] = DEFAULT_RULES,
    ) -> None:
        self._config = config or PrivacyConfig()
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[RedactionRule, ...]:
        return self._rules

    def redact(self, text: str) -> str:
        """Apply every redaction rule in order. No-op when redaction is disabled."""
        if not self._config.redact_secrets:
            return text
        redacted = text
        for rule in self._rules:
            redacted = rule.apply(redacted)
        return redacted

    def redact_value(self, value: Any) -> Any:
        """Redact every string inside a JSON-like structure. Keys are kept as-is."""
        if isinstance(value, str):
            return self.redact(value)
        if isinstance(value, dict):
            return {key: self.redact_value(item) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [self.redact_value(item) for item in value]
        return value

    def sanitize(self, code: str) -> str:
        """Return the redacted payload, or raise a ``SanitizeError``."""
        if not code:
            raise EmptyPayloadError()

        redacted = self.redact(code)
        size = len(redacted.encode("utf-8"))
        if size > self._config.max_payload_bytes:
            raise PayloadTooLargeError(size, self._config.max_payload_bytes)

        if redacted != code:
            log.debug("Redacted secrets from payload (%d -> %d bytes)", len(code.encode("utf-8")), size)
        return redacted
