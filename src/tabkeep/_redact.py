"""Helpers for safe debug logging.

Tab urls routinely carry session ids, OAuth codes and signed tokens in
their query strings.  This module masks those parts before a url reaches
a DEBUG log line.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import urlsplit, urlunsplit

_REDACTED = "<redacted>"

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "token",
        "accesstoken",
        "refreshtoken",
        "authorization",
        "cookie",
    }
)

_URL_KEYS: frozenset[str] = frozenset({"url", "pendingurl", "faviconurl"})


def redact_url(url: str) -> str:
    """Return *url* with credentials, query string and fragment masked.

    Scheme, host and path are kept so log lines stay useful.  Strings
    that do not parse as a url with a scheme are returned unchanged.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return _REDACTED
    if not parts.scheme:
        return url

    netloc = parts.netloc
    if "@" in netloc:
        netloc = f"{_REDACTED}@{netloc.rsplit('@', 1)[1]}"
    query = _REDACTED if parts.query else ""
    fragment = _REDACTED if parts.fragment else ""
    return urlunsplit((parts.scheme, netloc, parts.path, query, fragment))


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            lowered = key.lower()
            if lowered in _SENSITIVE_VALUE_KEYS:
                redacted[key] = _REDACTED
            elif lowered in _URL_KEYS and isinstance(v, str):
                redacted[key] = redact_url(v)
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    # Pydantic models: redact their alias dump rather than the repr.
    model_dump = getattr(value, "model_dump", None)
    if callable(model_dump):
        return redact_for_log(model_dump(by_alias=True, mode="json"), max_string=max_string, _depth=_depth + 1)

    # Fallback: represent unknown objects without dumping internals.
    return repr(value)
