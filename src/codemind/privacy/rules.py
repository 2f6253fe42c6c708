"""Secret redaction rules applied to outgoing code payloads.

Rules are plain data: a compiled pattern and its replacement. New patterns
are added to ``DEFAULT_RULES`` without touching the sanitizer. Every
replacement is a fixed point of its own rule (and of every other rule), so
redacting already-redacted text changes nothing.
"""

from __future__ import annotations

import dataclasses
import re

# key["']? = "value" or key: 'value'. Each quote style is matched on its own so a value
# holding the other quote is still covered. Key spelling, separator and quote are kept.
_ASSIGNMENT_TAIL = r"""(["']?\s*[:=]\s*)(?:(")[^"\n]+"|(')[^'\n]+')"""


@dataclasses.dataclass(frozen=True)
class RedactionRule:
    """A named (pattern, replacement) pair."""

    name: str
    pattern: re.Pattern[str]
    replacement: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def _assignment(name: str, key_pattern: str) -> RedactionRule:
    return RedactionRule(
        name=name,
        pattern=re.compile(rf"({key_pattern}){_ASSIGNMENT_TAIL}", re.IGNORECASE),
        replacement=r"\1\2\3\4[REDACTED]\3\4",
    )


DEFAULT_RULES: tuple[RedactionRule, ...] = (
    # Whole PEM blocks first so their base64 body never reaches later rules.
    RedactionRule(
        name="pem_private_key_block",
        pattern=re.compile(
            r"-----BEGIN ([A-Z ]*?)PRIVATE KEY-----.*?-----END \1PRIVATE KEY-----",
            re.DOTALL,
        ),
        replacement="[REDACTED_PRIVATE_KEY]",
    ),
    RedactionRule(
        name="pem_private_key_header",
        pattern=re.compile(r"-----BEGIN [A-Z ]*PRIVATE KEY-----"),
        replacement="[REDACTED_PRIVATE_KEY]",
    ),
    RedactionRule(
        name="connection_string",
        pattern=re.compile(r"\b(mongodb(?:\+srv)?|postgres(?:ql)?|mysql|rediss?|amqps?)://[^\"'\s]+"),
        replacement=r"\1://[REDACTED]",
    ),
    RedactionRule(
        name="quoted_base64_token",
        pattern=re.compile(r"""(["'])[A-Za-z0-9+/=]{32,}\1"""),
        replacement=r"\1[REDACTED_SECRET]\1",
    ),
    _assignment("password", r"password|passwd|pwd"),
    _assignment("api_key", r"api[_-]?key"),
    _assignment("token", r"(?:access[_-]?|refresh[_-]?|auth[_-]?)?token"),
    _assignment("secret", r"secret(?:[_-]?access)?(?:[_-]?key)?"),
    RedactionRule(
        name="bearer_token",
        pattern=re.compile(r"\b(bearer)\s+[A-Za-z0-9._~+/-]+=*", re.IGNORECASE),
        replacement=r"\1 [REDACTED_JWT]",
    ),
    RedactionRule(
        name="raw_jwt",
        pattern=re.compile(r"\beyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+(?:\.[A-Za-z0-9_-]+)?"),
        replacement="[REDACTED_JWT]",
    ),
    RedactionRule(
        name="ssh_public_key",
        pattern=re.compile(r"\b(ssh-(?:rsa|ed25519|dss)|ecdsa-sha2-nistp\d+)\s+[A-Za-z0-9+/]+=*"),
        replacement=r"\1 [REDACTED_SSH_KEY]",
    ),
    RedactionRule(
        name="cloud_access_key",
        pattern=re.compile(r"\b(?:AKIA|ASIA)[0-9A-Z]{16}\b"),
        replacement="[REDACTED_AWS_KEY]",
    ),
    _assignment("url_env_var", r"DATABASE_URL|REDIS_URL|MONGO_URL"),
)
