"""
Caller-side retry with exponential backoff.

Applied around a whole pipeline invocation (API handler, CLI), never inside
individual stages, so retry policy stays separate from extraction logic.
"""

from __future__ import annotations

import asyncio
import random
from typing import Awaitable, Callable, Optional, TypeVar

from shared.logging import get_logger
from scraper.errors import ScrapeError

logger = get_logger(__name__)

T = TypeVar("T")


def is_retryable(exc: BaseException) -> bool:
    """Default retry predicate: transient classified failures only."""
    return isinstance(exc, ScrapeError) and exc.retryable


def backoff_delay(
    attempt: int,
    initial_delay: float,
    backoff_factor: float,
    jitter: float = 0.0,
) -> float:
    """Delay in seconds after the 1-based *attempt* failed; adds 0..jitter seconds."""
    base = initial_delay * (backoff_factor ** (attempt - 1))
    if jitter > 0:
        base += random.uniform(0, jitter)
    return base


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    *,
    retry_if: Callable[[BaseException], bool] = is_retryable,
    jitter: float = 0.0,
    sleep: Optional[Callable[[float], Awaitable[None]]] = None,
) -> T:
    """
    Run *operation* up to *max_attempts* times.

    The delay starts at *initial_delay* seconds and is multiplied by
    *backoff_factor* after every failure. Exceptions rejected by *retry_if*,
    and the exception of the last attempt, propagate unchanged.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    sleep = sleep or asyncio.sleep

    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as e:
            if attempt >= max_attempts or not retry_if(e):
                raise
            delay = backoff_delay(attempt, initial_delay, backoff_factor, jitter)
            logger.info(
                "retry.scheduled",
                attempt=attempt,
                max_attempts=max_attempts,
                backoff_s=round(delay, 2),
                error=str(e),
                error_kind=getattr(getattr(e, "kind", None), "value", type(e).__name__),
            )
            await sleep(delay)
            attempt += 1
