"""Timeouts and bounded retries around store calls."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, TypeVar

import structlog

from shared.dal.exceptions import StoreUnavailableError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = structlog.get_logger()

T = TypeVar("T")


async def with_timeout(awaitable: Awaitable[T], timeout: float, *, operation: str) -> T:
    """Await ``awaitable``, turning a timeout into StoreUnavailableError."""
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except TimeoutError:
        raise StoreUnavailableError(f"{operation} timed out after {timeout}s") from None


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    base_delay: float,
    description: str,
    retry_on: tuple[type[Exception], ...] = (StoreUnavailableError,),
) -> T:
    """
    Run an idempotent ``operation`` up to ``attempts`` times.

    The delay before retry n (1-based) is ``base_delay * n``. The last
    failure propagates unchanged.
    """
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except retry_on as e:
            if attempt == attempts:
                logger.warning("giving up", operation=description, attempts=attempts, error=str(e))
                raise
            delay = base_delay * attempt
            logger.warning("retrying", operation=description, attempt=attempt, delay=delay, error=str(e))
            await asyncio.sleep(delay)
    raise ValueError(f"attempts must be positive, got {attempts}")
