"""Composition of timeout, circuit breaker and retry."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from checkmate.resilience.breaker import CircuitBreaker
from checkmate.resilience.retry import RetryPolicy, with_retry
from checkmate.resilience.timeout import with_timeout

T = TypeVar("T")


async def execute_with_resilience(
    fn: Callable[[], Awaitable[T]],
    operation: str,
    *,
    breaker: CircuitBreaker,
    timeout: float,
    retry: RetryPolicy,
) -> T:
    """Run ``fn`` as ``timeout(breaker.execute(retry(fn)))``.

    Retries happen inside the breaker, so a call that exhausts its retries
    counts as one breaker failure. The timeout bounds the whole composed
    call, backoff sleeps included.

    Args:
        fn: Zero-argument coroutine factory.
        operation: Name used in logs and timeout errors.
        breaker: Breaker for the dependency ``fn`` talks to.
        timeout: Overall budget in seconds.
        retry: Backoff policy.

    Returns:
        The result of ``fn()``.
    """

    async def guarded() -> T:
        return await breaker.execute(lambda: with_retry(fn, retry, operation))

    return await with_timeout(guarded, timeout, operation)
