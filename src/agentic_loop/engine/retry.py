"""Bounded retry with exponential backoff for awaitable operations."""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from agentic_loop.domain.policy import RetryPolicy
from agentic_loop.llm.llm_retry_policy import RETRY_JITTER_MS

T = TypeVar("T")

RetryPredicate = Callable[[BaseException], bool]
SleepFn = Callable[[float], Awaitable[None]]


def never_retry(error: BaseException) -> bool:
    """Retry predicate that rejects every error."""

    del error
    return False


def build_wait_strategy(policy: RetryPolicy, jitter_ms: int = RETRY_JITTER_MS):
    """Return the tenacity wait strategy for a retry policy.

    The delay before attempt ``n + 1`` is
    ``min(base * 2 ** (n - 1) + uniform(0, jitter), max)``.
    """

    return wait_exponential_jitter(
        initial=policy.base_delay_ms / 1000,
        max=policy.max_delay_ms / 1000,
        exp_base=2,
        jitter=jitter_ms / 1000,
    )


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    should_retry: RetryPredicate = never_retry,
    sleep: Optional[SleepFn] = None,
    jitter_ms: int = RETRY_JITTER_MS,
) -> T:
    """Execute an awaitable operation with bounded retry.

    Args:
        operation: Zero-argument coroutine factory to execute.
        policy: Attempt budget and backoff bounds.
        should_retry: Predicate over the last error deciding if a retry is allowed.
        sleep: Optional async sleep override, used by tests.
        jitter_ms: Upper bound of the random jitter added to each delay.

    Returns:
        The operation result from the first successful attempt.

    Raises:
        Exception: The last error when attempts are exhausted or the predicate
            rejects it.
    """

    if policy.attempts <= 1:
        return await operation()

    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.attempts),
        retry=retry_if_exception(should_retry),
        wait=build_wait_strategy(policy, jitter_ms),
        sleep=sleep or asyncio.sleep,
        reraise=True,
    )
    return await retrying(operation)
