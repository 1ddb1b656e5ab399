import re

import httpx
from litellm import (
    APIConnectionError,
    BadGatewayError,
    InternalServerError,
    RateLimitError,
    RouterRateLimitError,
    ServiceUnavailableError,
    Timeout,
)

from agentic_loop.domain.exceptions import AgentLoopError
from agentic_loop.domain.policy import RetryPolicy

ORACLE_RETRY_POLICY = RetryPolicy(attempts=2, base_delay_ms=100, max_delay_ms=500)

RETRY_JITTER_MS = 50

_TRANSIENT_PATTERN = re.compile(
    r"(timeout|timed out|temporar|rate limit|429|5\d\d|econnreset|connection reset"
    r"|enotfound|eai_again|name or service not known)",
    re.IGNORECASE,
)


def default_retry_exceptions() -> tuple[type[BaseException], ...]:
    """Return the third-party exception types treated as transient."""

    return (
        RateLimitError,
        RouterRateLimitError,
        ServiceUnavailableError,
        InternalServerError,
        BadGatewayError,
        APIConnectionError,
        Timeout,
        httpx.TransportError,
        TimeoutError,
        ConnectionError,
    )


def is_retryable_error(error: BaseException) -> bool:
    """Return True when retrying the failed call may succeed.

    Errors from this package declare their own retryability. Known transient
    provider and transport exceptions are retryable, as is any message that
    matches a transient pattern (timeouts, rate limits, 5xx, DNS failures,
    connection resets).

    Args:
        error: The last error raised by the operation.

    Returns:
        True if the error is retryable.
    """

    if isinstance(error, AgentLoopError):
        return error.retryable
    if isinstance(error, default_retry_exceptions()):
        return True
    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
        return status_code == 429 or status_code >= 500
    return bool(_TRANSIENT_PATTERN.search(str(error)))
