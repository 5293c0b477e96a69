"""
Navigation controller: one bounded page.goto with a configurable wait strategy.

No retries here; retry policy belongs to the caller (see scraper.retry).
Failures are classified on the spot:

- Playwright timeout -> NavigationTimeout
- net::ERR_* (DNS, refused, TLS) -> NavigationTransportError
- blocking signatures or HTTP 403/429 -> AccessDenied

A successful goto is never rejected on its title. Challenge pages are
detected by the readiness gate once no marker has appeared.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from shared.logging import get_logger
from scraper.constants import (
    ACCESS_DENIED_STATUSES,
    BOT_BLOCK_BODY_CHARS,
    BOT_BLOCK_INDICATORS,
    WAIT_UNTIL_DOM_CONTENT_LOADED,
)
from scraper.errors import ErrorKind, ScrapeError, is_access_denied_text, is_transport_error_text
from scraper.session import BrowserSession

logger = get_logger(__name__)


@dataclass
class NavigationOutcome:
    """Result of a successful navigation."""

    status: Optional[int]
    final_url: str
    elapsed_ms: float


def _classify_failure(exc: BaseException) -> tuple[ErrorKind, str]:
    """
    Classify a goto failure.

    Returns (kind, reason). Reason is one of: navigation_timeout,
    access_denied, net_err, or non_transport.
    """
    if isinstance(exc, PlaywrightTimeoutError):
        return ErrorKind.NAVIGATION_TIMEOUT, "navigation_timeout"
    msg = getattr(exc, "message", None) or str(exc)
    if is_access_denied_text(msg):
        return ErrorKind.ACCESS_DENIED, "access_denied"
    if is_transport_error_text(msg):
        return ErrorKind.NAVIGATION_TRANSPORT_ERROR, "net_err"
    return ErrorKind.NAVIGATION_TRANSPORT_ERROR, "non_transport"


def _message_for(kind: ErrorKind) -> str:
    if kind is ErrorKind.NAVIGATION_TIMEOUT:
        return "Navigation timeout"
    if kind is ErrorKind.ACCESS_DENIED:
        return "The target site blocked automated access"
    return "Navigation failed"


async def is_bot_block_page(page: Page) -> bool:
    """
    Detect a challenge/captcha interstitial from the page title and body head.

    Any failure reading the page counts as "not blocked".
    """
    try:
        title = await page.title()
        body_text = await page.inner_text("body")
        combined = f"{title} {body_text[:BOT_BLOCK_BODY_CHARS]}"
    except Exception:
        return False
    combined = combined.lower()
    return any(ind in combined for ind in BOT_BLOCK_INDICATORS)


async def navigate(
    session: BrowserSession,
    url: str,
    *,
    budget_ms: int,
    wait_until: str = WAIT_UNTIL_DOM_CONTENT_LOADED,
) -> NavigationOutcome:
    """
    Drive the session's page to *url* within *budget_ms*.

    Raises:
        ScrapeError: NavigationTimeout, NavigationTransportError or AccessDenied.
    """
    page = session.page
    logger.info("navigation.attempt", url=url, wait_until=wait_until, budget_ms=budget_ms)

    start = time.monotonic()
    try:
        response = await page.goto(url, wait_until=wait_until, timeout=budget_ms)
    except Exception as e:
        elapsed_ms = (time.monotonic() - start) * 1000
        kind, reason = _classify_failure(e)
        logger.warning(
            "navigation.failed",
            url=url,
            failure_classification=reason,
            elapsed_ms=round(elapsed_ms),
            error=str(e),
        )
        raise ScrapeError(
            kind,
            _message_for(kind),
            {
                "url": url,
                "reason": reason,
                "budget_ms": budget_ms,
                "error": str(e),
            },
        ) from e

    elapsed_ms = (time.monotonic() - start) * 1000
    status = response.status if response is not None else None

    if status in ACCESS_DENIED_STATUSES:
        logger.warning(
            "navigation.failed",
            url=url,
            failure_classification="access_denied_status",
            status=status,
        )
        raise ScrapeError(
            ErrorKind.ACCESS_DENIED,
            f"The target site refused the request ({status})",
            {"url": url, "status": status},
        )

    logger.info(
        "navigation.success",
        url=url,
        status=status,
        elapsed_ms=round(elapsed_ms),
    )
    return NavigationOutcome(status=status, final_url=page.url, elapsed_ms=elapsed_ms)
