"""Tests for the oracle retryability predicate."""

import httpx
import pytest

from agentic_loop.domain.exceptions import (
    ApiKeyError,
    ConfigurationError,
    ProviderError,
    RateLimitError,
    SchemaError,
)
from agentic_loop.llm.llm_retry_policy import ORACLE_RETRY_POLICY, is_retryable_error


def test_oracle_retry_policy_bounds() -> None:
    """Oracle calls get two attempts with 100ms base and 500ms cap."""
    assert ORACLE_RETRY_POLICY.attempts == 2
    assert ORACLE_RETRY_POLICY.base_delay_ms == 100
    assert ORACLE_RETRY_POLICY.max_delay_ms == 500


@pytest.mark.parametrize(
    "error, expected",
    [
        (ProviderError("down", retryable=True), True),
        (ProviderError("timeout", retryable=False), False),
        (RateLimitError("slow"), True),
        (ApiKeyError("missing"), False),
        (ConfigurationError("no adapter"), False),
        (SchemaError("bad json"), False),
        (TimeoutError(), True),
        (ConnectionResetError(), True),
        (RuntimeError("HTTP 502 Bad Gateway"), True),
        (RuntimeError("getaddrinfo ENOTFOUND api.example.com"), True),
        (RuntimeError("rate limit exceeded"), True),
        (RuntimeError("invalid request"), False),
    ],
)
def test_is_retryable_error(error: BaseException, expected: bool) -> None:
    """Declared retryability wins; otherwise transient patterns decide."""
    assert is_retryable_error(error) is expected


def test_http_status_error_retryability() -> None:
    """HTTP 429 and 5xx are retryable, other statuses are not."""
    request = httpx.Request("POST", "https://example.com")

    def status_error(code: int) -> httpx.HTTPStatusError:
        response = httpx.Response(code, request=request)
        return httpx.HTTPStatusError("failed", request=request, response=response)

    assert is_retryable_error(status_error(429)) is True
    assert is_retryable_error(status_error(500)) is True
    assert is_retryable_error(status_error(404)) is False
