"""Cache key computation for deterministic, collision-resistant keys."""

from __future__ import annotations

import hashlib
import json
from typing import Any

from codemind.exceptions import EncodeError

_SCALAR_KEYS = (int, float, bool, type(None))


def _string_keys(value: Any) -> Any:
    """Convert scalar object keys to the strings ``json`` would write for them."""
    if isinstance(value, dict):
        return {
            (json.dumps(k) if isinstance(k, _SCALAR_KEYS) else k): _string_keys(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_string_keys(v) for v in value]
    return value


def canonical_json(body: Any) -> str:
    """Serialize ``body`` so that logically equal values give identical text.

    Object keys are sorted and whitespace is fixed, so dict insertion order
    never changes the output. Non-string keys are stringified first, so a body
    mixing ``1`` and ``"b"`` keys sorts instead of failing.
    """
    try:
        return json.dumps(
            _string_keys(body), sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False
        )
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"Failed to encode request data: {exc}") from exc


def compute_cache_key(endpoint: str, body: Any) -> str:
    """Compute a SHA-256 key from the endpoint and canonical request body."""
    raw = "|".join([endpoint, canonical_json(body if body is not None else {})])
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()
