"""
Retry utilities for transient backend errors.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRANSIENT_MARKERS: tuple[str, ...] = (
    "rate limit",
    "rate_limit",
    "timeout",
    "timed out",
    "temporarily unavailable",
    "connection reset",
)


def is_transient_error(exception: BaseException) -> bool:
    """Check if an error is worth retrying.

    Timeouts and connection errors are always transient; other errors are
    transient only when their message carries a known marker.
    """
    if isinstance(exception, (TimeoutError, asyncio.TimeoutError, ConnectionError)):
        return True
    error_str = str(exception).lower()
    return any(marker in error_str for marker in _TRANSIENT_MARKERS)


async def run_with_retry(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay: float = 0.5,
    backoff_factor: float = 2.0,
) -> T:
    """
    Execute an async function, retrying transient errors with backoff.

    Args:
        func: Async function to execute (no parameters)
        max_retries: Maximum number of attempts
        initial_delay: Delay in seconds before the first retry
        backoff_factor: Multiplier for delay between retries

    Returns:
        Result from the function

    Raises:
        Exception: The last error when attempts run out or the error is permanent
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    for attempt in range(max_retries):
        try:
            return await func()
        except Exception as e:
            if not is_transient_error(e) or attempt >= max_retries - 1:
                raise

            wait_time = initial_delay * (backoff_factor**attempt)
            logger.warning(
                "Transient error detected (%s). Attempt %s/%s. Waiting %.1f seconds before retry...",
                e,
                attempt + 1,
                max_retries,
                wait_time,
            )
            await asyncio.sleep(wait_time)

    raise RuntimeError("unreachable")
