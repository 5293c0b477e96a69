"""
Browser session management: launch, fingerprint, resource policy, release.

`acquire_session` is an async context manager; the browser, context, page
and Playwright driver are released on every exit path, task cancellation
included. Launch problems surface as ScrapeError(LaunchFailure) and are not
retried here.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    Request,
    Route,
    async_playwright,
)

from shared.config import (
    DEFAULT_BLOCKED_RESOURCE_TYPES,
    DEFAULT_LAUNCH_ARGS,
    DEFAULT_USER_AGENT,
    ScraperSettings,
)
from shared.logging import get_logger
from scraper.errors import ErrorKind, ScrapeError

logger = get_logger(__name__)


def should_block(resource_type: str, blocked_types: frozenset[str]) -> bool:
    """True if a sub-resource of this type should be aborted."""
    return (resource_type or "").lower() in blocked_types


def resolve_executable_path(configured: Optional[str]) -> Optional[str]:
    """
    Resolve the Chromium binary once at startup.

    None means Playwright's bundled browser. A configured path that does not
    exist is a launch failure.
    """
    if not configured:
        return None
    path = os.path.expanduser(configured)
    if not os.path.isfile(path):
        raise ScrapeError(
            ErrorKind.LAUNCH_FAILURE,
            "Configured browser executable not found",
            {"executable_path": configured},
        )
    return path


@dataclass(frozen=True)
class SessionOptions:
    """Launch and fingerprint options for one browser session."""

    executable_path: Optional[str] = None
    headless: bool = True
    launch_args: tuple[str, ...] = DEFAULT_LAUNCH_ARGS
    viewport_width: int = 1280
    viewport_height: int = 800
    user_agent: str = DEFAULT_USER_AGENT
    locale: str = "en-US"
    block_resources: bool = True
    blocked_resource_types: frozenset[str] = field(
        default_factory=lambda: DEFAULT_BLOCKED_RESOURCE_TYPES
    )
    launch_timeout_ms: int = 10_000

    @classmethod
    def from_settings(
        cls,
        settings: ScraperSettings,
        executable_path: Optional[str],
    ) -> "SessionOptions":
        return cls(
            executable_path=executable_path,
            headless=settings.headless,
            launch_args=settings.launch_args,
            viewport_width=settings.viewport_width,
            viewport_height=settings.viewport_height,
            user_agent=settings.user_agent,
            locale=settings.locale,
            block_resources=settings.block_resources,
            blocked_resource_types=settings.blocked_resource_types,
            launch_timeout_ms=settings.launch_timeout_ms,
        )


class BrowserSession:
    """One exclusively-owned browser, context and page."""

    def __init__(
        self,
        playwright: Optional[Playwright] = None,
        browser: Optional[Browser] = None,
        context: Optional[BrowserContext] = None,
        page: Optional[Page] = None,
    ) -> None:
        self.playwright = playwright
        self.browser = browser
        self.context = context
        self.page = page
        self.closed = False
        self.blocked_requests = 0

    async def close(self) -> None:
        """Release page, context, browser and driver; idempotent, never raises."""
        if self.closed:
            return
        self.closed = True
        for name, closer in (
            ("page", self.page.close if self.page else None),
            ("context", self.context.close if self.context else None),
            ("browser", self.browser.close if self.browser else None),
            ("playwright", self.playwright.stop if self.playwright else None),
        ):
            if closer is None:
                continue
            try:
                await closer()
            except Exception as e:
                logger.warning(
                    "session.close_failed",
                    resource=name,
                    error=str(e),
                    error_type=type(e).__name__,
                )
        logger.debug("session.closed", blocked_requests=self.blocked_requests)


async def install_resource_blocking(
    session: BrowserSession,
    context: BrowserContext,
    blocked_types: frozenset[str],
) -> None:
    """Abort sub-resources whose type is blocked; let everything else through."""

    async def route_handler(route: Route) -> None:
        if should_block(route.request.resource_type, blocked_types):
            session.blocked_requests += 1
            await route.abort()
        else:
            await route.continue_()

    await context.route("**/*", route_handler)


def install_request_failure_logging(page: Page, blocked_types: frozenset[str]) -> None:
    """Log failed sub-requests at debug level; deliberate aborts are skipped."""

    def on_request_failed(request: Request) -> None:
        if should_block(request.resource_type, blocked_types):
            return
        logger.debug(
            "session.request_failed",
            url=request.url,
            resource_type=request.resource_type,
            failure=request.failure,
        )

    page.on("requestfailed", on_request_failed)


async def _open(options: SessionOptions, session: BrowserSession) -> None:
    try:
        session.playwright = await async_playwright().start()
        session.browser = await session.playwright.chromium.launch(
            executable_path=options.executable_path,
            headless=options.headless,
            args=list(options.launch_args),
            timeout=options.launch_timeout_ms,
        )
        session.context = await session.browser.new_context(
            viewport={"width": options.viewport_width, "height": options.viewport_height},
            user_agent=options.user_agent,
            locale=options.locale,
        )
        if options.block_resources:
            await install_resource_blocking(
                session, session.context, options.blocked_resource_types
            )
        session.page = await session.context.new_page()
        install_request_failure_logging(
            session.page,
            options.blocked_resource_types if options.block_resources else frozenset(),
        )
    except ScrapeError:
        raise
    except Exception as e:
        logger.error(
            "session.launch_failed",
            error=str(e),
            error_type=type(e).__name__,
            executable_path=options.executable_path,
        )
        raise ScrapeError(
            ErrorKind.LAUNCH_FAILURE,
            "Failed to launch browser",
            {"error": str(e), "error_type": type(e).__name__},
        ) from e


@asynccontextmanager
async def acquire_session(options: SessionOptions) -> AsyncIterator[BrowserSession]:
    """
    Launch a browser and yield a ready page.

    Usage:
        async with acquire_session(options) as session:
            await session.page.goto(url)
    """
    session = BrowserSession()
    logger.info(
        "session.launch",
        headless=options.headless,
        block_resources=options.block_resources,
        executable_path=options.executable_path,
    )
    try:
        await _open(options, session)
        yield session
    finally:
        await session.close()
