"""Retry with exponential backoff."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

import anthropic
import httpx
import openai

from checkmate.errors import CheckmateError, OperationTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


def default_should_retry(error: BaseException) -> bool:
    """Retry network-class failures and 5xx responses, never 4xx.

    Typed pipeline errors are only retried when they are timeouts or carry a
    5xx status. ``CircuitOpen`` (503) is excluded explicitly so a tripped
    breaker is never hammered.
    """
    if isinstance(error, OperationTimeout):
        return True
    if isinstance(error, CheckmateError):
        return error.code != "CIRCUIT_OPEN" and error.status_code >= 500
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= 500
    if isinstance(
        error,
        (
            httpx.TransportError,
            anthropic.APIConnectionError,
            openai.APIConnectionError,
            ConnectionError,
            TimeoutError,
        ),
    ):
        return True
    status = _status_code(error)
    return status is not None and status >= 500


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff parameters. Delays are in seconds."""

    max_attempts: int = 3
    initial_delay: float = 1.0
    backoff_multiplier: float = 2.0
    max_delay: float = 30.0
    should_retry: Callable[[BaseException], bool] = field(default=default_should_retry)

    def delay_after(self, attempt: int) -> float:
        """Delay after the given 1-based failed attempt."""
        return min(self.initial_delay * self.backoff_multiplier ** (attempt - 1), self.max_delay)


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    operation: str = "operation",
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Call ``fn()`` until it succeeds or the policy gives up.

    Args:
        fn: Zero-argument coroutine factory, called once per attempt.
        policy: Backoff parameters and retry predicate.
        operation: Name used in log messages.
        sleep: Awaitable sleep, injectable for tests.

    Returns:
        The first successful result.

    Raises:
        The last error, unchanged, once attempts are exhausted or the
        predicate declines to retry.
    """
    attempt = 1
    while True:
        try:
            return await fn()
        except Exception as e:
            if attempt >= policy.max_attempts or not policy.should_retry(e):
                raise
            delay = policy.delay_after(attempt)
            logger.info(
                f"Retrying '{operation}' after attempt {attempt}/{policy.max_attempts} "
                f"failed ({type(e).__name__}); waiting {delay:g}s"
            )
            await sleep(delay)
            attempt += 1


def _status_code(error: BaseException) -> int | None:
    """Best-effort status code from vendor SDK errors (anthropic, openai, ...)."""
    status = getattr(error, "status_code", None)
    if isinstance(status, int):
        return status
    return None
