"""Bounded retries with exponential backoff for async operations."""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from .logging import get_logger

logger = get_logger("retry")

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryOptions:
    """Retry settings.

    ``max_retries`` counts retries, so an operation runs at most
    ``max_retries + 1`` times.
    """
    max_retries: int = 3
    initial_delay: float = 1.0
    backoff_multiplier: float = 2.0
    max_delay: float = 30.0


async def retry_operation(
    operation: Callable[[], Awaitable[T]],
    options: RetryOptions,
    sleep: Optional[SleepFn] = None
) -> T:
    """
    Run ``operation`` retrying every failure with exponential backoff.

    Args:
        operation: Zero-argument coroutine function to run
        options: Retry settings
        sleep: Awaitable sleep used between attempts (``asyncio.sleep`` by default)

    Returns:
        The operation's result

    Raises:
        The last exception raised by ``operation``, unchanged
    """
    return await retry_with_condition(operation, lambda error, attempt: True, options, sleep=sleep)


async def retry_with_condition(
    operation: Callable[[], Awaitable[T]],
    should_retry: Callable[[BaseException, int], bool],
    options: RetryOptions,
    sleep: Optional[SleepFn] = None
) -> T:
    """
    Run ``operation`` retrying only the failures ``should_retry`` accepts.

    ``should_retry(error, attempt_index)`` is called with the zero-based index of
    the attempt that just failed. A rejected error is re-raised at once without
    waiting.
    """
    sleep = sleep or asyncio.sleep
    current_delay = options.initial_delay
    total_attempts = options.max_retries + 1

    for attempt in range(total_attempts):
        try:
            return await operation()
        except Exception as e:
            if attempt == options.max_retries or not should_retry(e, attempt):
                raise

            wait = min(current_delay, options.max_delay)
            logger.warning(
                f"Operation failed (attempt {attempt + 1}/{total_attempts}): {e}. "
                f"Retrying in {wait:.2f}s"
            )
            await sleep(wait)
            current_delay *= options.backoff_multiplier

    # Unreachable: the loop either returns or raises
    raise RuntimeError("retry loop exited without result")
