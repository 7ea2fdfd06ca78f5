"""
Retry of transient store failures.

Only connection-level failures (``OperationalError``: unreachable server,
locked database, dropped connection) are retried. Everything else propagates.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import OperationalError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreUnavailableError(Exception):
    """The store stayed unreachable after all retries"""


async def with_store_retry(
    operation: Callable[[], Awaitable[T]],
    attempts: int = 3,
    base_delay: float = 0.2,
) -> T:
    """
    Run ``operation`` retrying on transient store failures with exponential
    backoff.

    Raises:
        StoreUnavailableError: if every attempt failed
    """
    delay = base_delay
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except OperationalError as exc:
            if attempt == attempts:
                logger.error(f"Store unavailable after {attempts} attempts: {exc}")
                raise StoreUnavailableError(str(exc)) from exc
            logger.warning(
                f"Store unavailable (attempt {attempt}/{attempts}), "
                f"retrying in {delay:.2f}s: {exc}"
            )
            await asyncio.sleep(delay)
            delay *= 2
    raise StoreUnavailableError("no attempts made")
