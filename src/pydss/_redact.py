"""Helpers for safe debug logging.

Requests to the backend carry the user's identity token in a header, and
payloads may echo station credentials. Everything logged at DEBUG goes
through :func:`redact_for_log` first.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "auth-token",
        "id_token",
        "token",
        "authorization",
        "cookie",
        # Station credentials stored by the backend
        "davisapikey",
        "davissecretkey",
        "irrimetertoken",
        "campbellpass",
    }
)


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}...<truncated>"
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _SENSITIVE_VALUE_KEYS:
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence):
        if len(value) > 5:
            head = [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value[:5]]
            return [*head, f"<{len(value) - 5} more>"]
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
