"""Tests for provider error mapping."""

import json

import httpx
import litellm
import pytest
from pydantic import BaseModel, ValidationError

from agentic_loop.domain.exceptions import (
    ApiKeyError,
    ConfigurationError,
    ProviderError,
    RateLimitError,
    SchemaError,
)
from agentic_loop.llm.llm_error_mapper import map_provider_error


class _SchemaModel(BaseModel):
    value: int


def _status_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://example.com")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError("failed", request=request, response=response)


def test_package_errors_pass_through() -> None:
    """Errors already in the hierarchy are returned unchanged."""
    error = ConfigurationError("bad")

    assert map_provider_error(error, "openai") is error


def test_validation_errors_map_to_schema_error() -> None:
    """Validation and JSON decode failures are schema errors."""
    with pytest.raises(ValidationError) as exc_info:
        _SchemaModel.model_validate({"value": "nope"})

    mapped = map_provider_error(exc_info.value, "openai")
    decoded = map_provider_error(json.JSONDecodeError("bad", "{", 0), "openai")

    assert isinstance(mapped, SchemaError)
    assert isinstance(decoded, SchemaError)
    assert mapped.retryable is False


@pytest.mark.parametrize(
    "status_code, expected_type, retryable",
    [
        (429, RateLimitError, True),
        (401, ApiKeyError, False),
        (403, ApiKeyError, False),
        (503, ProviderError, True),
        (400, ProviderError, False),
    ],
)
def test_http_status_errors(status_code: int, expected_type: type, retryable: bool) -> None:
    """HTTP status codes decide the error kind and retryability."""
    mapped = map_provider_error(_status_error(status_code), "anthropic")

    assert type(mapped) is expected_type
    assert mapped.retryable is retryable
    assert str(mapped).startswith("anthropic adapter failed:")


def test_litellm_rate_limit_is_retryable() -> None:
    """LiteLLM rate limit errors map to RateLimitError."""
    error = litellm.RateLimitError(
        message="slow down", llm_provider="openai", model="gpt-4o-mini"
    )

    mapped = map_provider_error(error, "openai")

    assert isinstance(mapped, RateLimitError)
    assert mapped.retryable is True


def test_litellm_authentication_error_is_api_key_error() -> None:
    """LiteLLM authentication failures are not retried."""
    error = litellm.AuthenticationError(
        message="invalid key", llm_provider="openai", model="gpt-4o-mini"
    )

    mapped = map_provider_error(error, "openai")

    assert isinstance(mapped, ApiKeyError)
    assert mapped.retryable is False


@pytest.mark.parametrize(
    "error, retryable",
    [
        (RuntimeError("ECONNRESET while reading"), True),
        (RuntimeError("request timed out"), True),
        (RuntimeError("unexpected token"), False),
    ],
)
def test_unknown_errors_use_transient_patterns(error: Exception, retryable: bool) -> None:
    """Unknown errors are retryable only when they look transient."""
    mapped = map_provider_error(error, "openai")

    assert type(mapped) is ProviderError
    assert mapped.retryable is retryable


def test_api_key_messages_map_to_api_key_error() -> None:
    """Messages mentioning an API key are credential failures."""
    mapped = map_provider_error(RuntimeError("Invalid API key provided"), "openai")

    assert isinstance(mapped, ApiKeyError)
