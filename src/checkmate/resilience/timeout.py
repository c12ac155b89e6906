"""Timeout combinator."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from checkmate.errors import OperationTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")

TIMEOUT_CANCEL_MESSAGE = "checkmate: operation timed out"


async def with_timeout(
    fn: Callable[[], Awaitable[T]],
    seconds: float,
    operation: str,
) -> T:
    """Race ``fn()`` against a timer.

    On expiry the work is cancelled best-effort and its eventual result is
    discarded. Work running in a thread (``asyncio.to_thread``) keeps going
    in the background; callers must not rely on it stopping. Cancelling the
    caller cancels the work as well.

    Args:
        fn: Zero-argument coroutine factory.
        seconds: Time budget.
        operation: Name used in the timeout error.

    Returns:
        The result of ``fn()``.

    Raises:
        OperationTimeout: If the budget elapses first.
    """
    task = asyncio.ensure_future(fn())
    try:
        done, _ = await asyncio.wait({task}, timeout=seconds)
    except asyncio.CancelledError:
        task.add_done_callback(_discard_result)
        task.cancel()
        raise
    if task in done:
        return task.result()

    task.add_done_callback(_discard_result)
    task.cancel(TIMEOUT_CANCEL_MESSAGE)
    logger.warning(f"Operation '{operation}' timed out after {seconds:g}s")
    raise OperationTimeout(operation, seconds)


def cancelled_by_timeout(error: asyncio.CancelledError) -> bool:
    """Whether ``error`` comes from a :func:`with_timeout` expiry rather than the caller."""
    return TIMEOUT_CANCEL_MESSAGE in error.args


def _discard_result(task: "asyncio.Future[object]") -> None:
    """Retrieve a late outcome so it is never reported as unhandled."""
    if not task.cancelled():
        task.exception()
