"""Tests for error sanitization utilities."""

from agentic_loop.domain.error_sanitizer import (
    REDACTED_VALUE,
    build_exception_details,
    describe_error,
    sanitize_text,
)
from agentic_loop.domain.exceptions import ProviderError


def test_sanitize_text_redacts_tokens_and_truncates() -> None:
    """Redacts token-like strings and truncates long text."""
    text = "sk-1234567890 " + ("x" * 300)

    sanitized = sanitize_text(text, max_length=32)

    assert REDACTED_VALUE in sanitized
    assert sanitized.endswith("...[truncated]")


def test_describe_error_redacts_bearer_tokens() -> None:
    """Keeps the message but hides credentials."""
    error = RuntimeError("401 with Authorization: Bearer abcdefghijklmnop")

    description = describe_error(error)

    assert description.startswith("401 with")
    assert "abcdefghijklmnop" not in description


def test_describe_error_falls_back_to_class_name() -> None:
    """Uses the exception class name when the message is empty."""
    assert describe_error(TimeoutError()) == "TimeoutError"


def test_build_exception_details_includes_cause_and_code() -> None:
    """Includes error code, retryability and cause metadata."""
    try:
        try:
            raise ValueError("inner error")
        except ValueError as exc:
            raise ProviderError("outer error", retryable=True) from exc
    except ProviderError as exc:
        details = build_exception_details(exc)

    assert details["error_class"] == "ProviderError"
    assert details["message"] == "outer error"
    assert details["code"] == "PROVIDER_ERROR"
    assert details["retryable"] is True
    assert details["cause_class"] == "ValueError"
