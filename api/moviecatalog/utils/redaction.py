"""Redaction helpers for provider errors written to logs."""

from __future__ import annotations

import re

_URL_USERINFO_RE = re.compile(r"([a-z][a-z0-9+.-]*://)([^@/]+)@", re.IGNORECASE)
_QUERY_SECRET_RE = re.compile(r"(?i)(token|secret|password|api_key|apikey|access_token)=([^&\s'\"]+)")
_BEARER_RE = re.compile(r"(?i)(bearer\s+)([A-Za-z0-9._~-]+)")


def redact_secrets(text: str) -> str:
    """Mask credentials in URLs, query strings, and bearer headers."""
    if not text:
        return text
    redacted = _URL_USERINFO_RE.sub(r"\1***@", text)
    redacted = _QUERY_SECRET_RE.sub(r"\1=***", redacted)
    return _BEARER_RE.sub(r"\1***", redacted)


def describe_error(exc: BaseException) -> str:
    """Return a log-safe one-line description of an exception."""
    message = redact_secrets(str(exc)) or "no detail"
    return f"{type(exc).__name__}: {message}"
