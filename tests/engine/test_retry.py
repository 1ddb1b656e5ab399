"""Tests for the async retry wrapper."""

from unittest.mock import AsyncMock

import pytest

from agentic_loop.domain.policy import RetryPolicy
from agentic_loop.engine.retry import build_wait_strategy, retry_async


class TransientError(Exception):
    pass


def _flaky(failures: int, error: Exception):
    calls = {"count": 0}

    async def operation() -> str:
        calls["count"] += 1
        if calls["count"] <= failures:
            raise error
        return "ok"

    return operation, calls


@pytest.mark.asyncio
async def test_retry_async_retries_until_success() -> None:
    """Retries accepted errors until the operation succeeds."""
    operation, calls = _flaky(2, TransientError("temporary"))
    sleep = AsyncMock()

    result = await retry_async(
        operation,
        RetryPolicy(attempts=3, base_delay_ms=10, max_delay_ms=100),
        should_retry=lambda exc: isinstance(exc, TransientError),
        sleep=sleep,
    )

    assert result == "ok"
    assert calls["count"] == 3
    assert sleep.await_count == 2


@pytest.mark.asyncio
async def test_retry_async_raises_last_error_after_exhaustion() -> None:
    """Propagates the last error once the attempt budget is spent."""
    operation, calls = _flaky(5, TransientError("still down"))

    with pytest.raises(TransientError, match="still down"):
        await retry_async(
            operation,
            RetryPolicy(attempts=2, base_delay_ms=1, max_delay_ms=1),
            should_retry=lambda exc: True,
            sleep=AsyncMock(),
        )

    assert calls["count"] == 2


@pytest.mark.asyncio
async def test_retry_async_stops_when_predicate_rejects() -> None:
    """Does not retry errors the predicate rejects."""
    operation, calls = _flaky(5, ValueError("permanent"))
    sleep = AsyncMock()

    with pytest.raises(ValueError):
        await retry_async(
            operation,
            RetryPolicy(attempts=4, base_delay_ms=1, max_delay_ms=1),
            should_retry=lambda exc: False,
            sleep=sleep,
        )

    assert calls["count"] == 1
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_single_attempt_policy_never_retries() -> None:
    """attempts=1 means the operation runs exactly once."""
    operation, calls = _flaky(1, TransientError("temporary"))

    with pytest.raises(TransientError):
        await retry_async(operation, RetryPolicy(), should_retry=lambda exc: True)

    assert calls["count"] == 1


@pytest.mark.asyncio
async def test_backoff_delays_are_capped() -> None:
    """Delays grow exponentially up to the cap."""
    operation, _ = _flaky(3, TransientError("temporary"))
    sleep = AsyncMock()

    await retry_async(
        operation,
        RetryPolicy(attempts=4, base_delay_ms=100, max_delay_ms=250),
        should_retry=lambda exc: True,
        sleep=sleep,
        jitter_ms=0,
    )

    delays = [call.args[0] for call in sleep.await_args_list]
    assert delays == pytest.approx([0.1, 0.2, 0.25])


def test_wait_strategy_uses_policy_bounds() -> None:
    """Builds the tenacity wait strategy in seconds."""
    wait = build_wait_strategy(
        RetryPolicy(attempts=2, base_delay_ms=100, max_delay_ms=500), jitter_ms=50
    )

    assert wait.initial == pytest.approx(0.1)
    assert wait.max == pytest.approx(0.5)
    assert wait.jitter == pytest.approx(0.05)
