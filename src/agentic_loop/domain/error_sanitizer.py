"""Sanitize error text before it reaches transcripts or logs."""

from __future__ import annotations

import re
from typing import Any, Dict

REDACTED_VALUE = "<redacted>"
DEFAULT_MAX_STRING_LENGTH = 512

_TOKEN_PATTERNS = (
    re.compile(r"sk-[A-Za-z0-9_-]{10,}"),
    re.compile(r"(?i)authorization:\s*bearer\s+[A-Za-z0-9._-]{10,}"),
    re.compile(r"(?i)bearer\s+[A-Za-z0-9._-]{10,}"),
    re.compile(r"(?i)(x-api-key|api[_-]?key)(\s*[=:]\s*)[A-Za-z0-9._-]{8,}"),
)


def sanitize_text(value: str, max_length: int = DEFAULT_MAX_STRING_LENGTH) -> str:
    """Redact secrets and cap a string value.

    Args:
        value: Input text value.
        max_length: Maximum length of the returned string.

    Returns:
        A redacted, length-capped string.
    """

    sanitized = _redact_tokens(value)
    if len(sanitized) <= max_length:
        return sanitized
    return f"{sanitized[:max_length]}...[truncated]"


def describe_error(error: BaseException) -> str:
    """Return a sanitized one-line description of an exception.

    Falls back to the exception class name when the message is empty.
    """

    message = str(error).strip()
    if not message:
        return error.__class__.__name__
    return sanitize_text(message)


def build_exception_details(error: BaseException) -> Dict[str, Any]:
    """Build a sanitized error detail mapping for structured logging.

    Args:
        error: Exception to summarize.

    Returns:
        A sanitized error detail dictionary.
    """

    details: Dict[str, Any] = {"error_class": error.__class__.__name__}
    message = str(error)
    if message:
        details["message"] = sanitize_text(message)
    code = getattr(error, "code", None)
    if isinstance(code, str):
        details["code"] = code
    retryable = getattr(error, "retryable", None)
    if isinstance(retryable, bool):
        details["retryable"] = retryable
    cause = error.__cause__
    if isinstance(cause, BaseException):
        details["cause_class"] = cause.__class__.__name__
    return details


def _redact_tokens(text: str) -> str:
    """Redact common secret/token patterns from text."""

    redacted = text
    for pattern in _TOKEN_PATTERNS:
        redacted = pattern.sub(REDACTED_VALUE, redacted)
    return redacted
