"""Normalize third-party provider failures into the package error hierarchy."""

import json

import httpx
import litellm
from pydantic import ValidationError

from agentic_loop.domain.error_sanitizer import describe_error
from agentic_loop.domain.exceptions import (
    AgentLoopError,
    ApiKeyError,
    ProviderError,
    RateLimitError,
    SchemaError,
)
from agentic_loop.llm.llm_retry_policy import is_retryable_error


def map_provider_error(error: BaseException, provider: str) -> AgentLoopError:
    """Map an exception raised during a provider call.

    Args:
        error: Exception raised by the provider SDK or response parsing.
        provider: Provider name used to prefix the message.

    Returns:
        An AgentLoopError with the right retryability.
    """

    if isinstance(error, AgentLoopError):
        return error

    message = f"{provider} adapter failed: {describe_error(error)}"

    if isinstance(error, (ValidationError, json.JSONDecodeError)):
        return SchemaError(message)
    if isinstance(error, litellm.ContextWindowExceededError):
        return ProviderError(message, retryable=False)
    if isinstance(error, (litellm.AuthenticationError, litellm.PermissionDeniedError)):
        return ApiKeyError(message)
    if isinstance(error, (litellm.RateLimitError, litellm.RouterRateLimitError)):
        return RateLimitError(message)
    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
        if status_code == 429:
            return RateLimitError(message)
        if status_code in (401, 403):
            return ApiKeyError(message)
        return ProviderError(message, retryable=status_code >= 500)

    error_name = error.__class__.__name__.lower()
    if "authentication" in error_name or "api key" in str(error).lower():
        return ApiKeyError(message)
    return ProviderError(message, retryable=is_retryable_error(error))
