"""
Content readiness gate: wait for a source-specific DOM marker.

The marker selectors are alternatives. One waiter runs per selector and the
first to attach wins; the rest are cancelled. Running out of budget means
navigation finished but the expected content never rendered (or the site
changed its markup), which is reported as ReadinessTimeout. A challenge page
found at that point is reported as AccessDenied instead.
"""

from __future__ import annotations

import asyncio
import time
from typing import Sequence

from playwright.async_api import Page

from shared.logging import get_logger
from scraper.errors import ErrorKind, ScrapeError
from scraper.navigation import is_bot_block_page
from scraper.session import BrowserSession

logger = get_logger(__name__)


async def _wait_for(page: Page, selector: str, budget_ms: int) -> str:
    await page.wait_for_selector(selector, state="attached", timeout=budget_ms)
    return selector


async def _race(page: Page, selectors: Sequence[str], budget_ms: int) -> str | None:
    """First selector to attach, or None when every waiter failed or timed out."""
    tasks = [asyncio.ensure_future(_wait_for(page, s, budget_ms)) for s in selectors]
    pending = set(tasks)
    deadline = time.monotonic() + budget_ms / 1000
    try:
        while pending:
            done, pending = await asyncio.wait(
                pending,
                timeout=max(0.0, deadline - time.monotonic()),
                return_when=asyncio.FIRST_COMPLETED,
            )
            if not done:
                return None
            # Prefer the earliest-listed selector when several finish together.
            for task in tasks:
                if task in done and not task.cancelled() and task.exception() is None:
                    return task.result()
            for task in done:
                exc = task.exception() if not task.cancelled() else None
                if exc is not None:
                    logger.debug(
                        "readiness.waiter_failed",
                        error=str(exc),
                        error_type=type(exc).__name__,
                    )
        return None
    finally:
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


async def await_marker(
    session: BrowserSession,
    marker_selectors: Sequence[str],
    budget_ms: int,
) -> str:
    """
    Wait until any of *marker_selectors* is in the DOM.

    Returns the selector that appeared first.

    Raises:
        ValueError: if *marker_selectors* is empty.
        ScrapeError: ReadinessTimeout, or AccessDenied for a challenge page.
    """
    if not marker_selectors:
        raise ValueError("marker_selectors must not be empty")

    page = session.page
    start = time.monotonic()
    matched = await _race(page, marker_selectors, budget_ms)
    elapsed_ms = round((time.monotonic() - start) * 1000)

    if matched is not None:
        logger.info("readiness.marker_found", selector=matched, elapsed_ms=elapsed_ms)
        return matched

    if await is_bot_block_page(page):
        logger.warning("readiness.bot_block", elapsed_ms=elapsed_ms)
        raise ScrapeError(
            ErrorKind.ACCESS_DENIED,
            "The target site served a bot challenge",
            {"markers": list(marker_selectors)},
        )

    logger.warning(
        "readiness.timeout",
        markers=list(marker_selectors),
        budget_ms=budget_ms,
        elapsed_ms=elapsed_ms,
    )
    raise ScrapeError(
        ErrorKind.READINESS_TIMEOUT,
        "Could not find novel title. The page might be taking too long to load "
        "or the structure has changed.",
        {"markers": list(marker_selectors), "budget_ms": budget_ms},
    )
