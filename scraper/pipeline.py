"""
Scrape pipeline: URL -> session -> navigation -> readiness -> adapter -> record.

`NovelScraper` is built once per process with the scraper settings; the
browser binary is resolved at that point and passed down. Each `scrape` call
is independent: it launches its own browser, holds no state afterwards, and
always releases the session before returning. Every failure leaves as a
ScrapeError.
"""

from __future__ import annotations

import asyncio
import dataclasses
from typing import Callable, Optional
from uuid import uuid4

from shared.config import ScraperSettings
from shared.logging import bind_request_context, get_logger
from scraper.adapters import Adapter, select_adapter
from scraper.deadline import Deadline
from scraper.errors import Stage, classify_exception
from scraper.models import ScrapedRecord
from scraper.navigation import navigate
from scraper.normalize import normalize
from scraper.readiness import await_marker
from scraper.session import SessionOptions, acquire_session, resolve_executable_path
from scraper.urls import canonicalize_url, domain_of

logger = get_logger(__name__)


class _StageTracker:
    """Which stage is running; used to classify ceiling hits."""

    def __init__(self) -> None:
        self.stage: Stage = "launch"


class NovelScraper:
    """Stateless scraper for supported novel catalog pages."""

    def __init__(
        self,
        settings: ScraperSettings,
        *,
        session_factory: Callable = acquire_session,
        executable_path: Optional[str] = None,
    ) -> None:
        self.settings = settings
        self._session_factory = session_factory
        if executable_path is None:
            executable_path = resolve_executable_path(settings.browser_executable_path)
        self.session_options = SessionOptions.from_settings(settings, executable_path)

    async def scrape(self, url: str) -> ScrapedRecord:
        """
        Scrape one novel page.

        Raises:
            ScrapeError: classified failure; the browser is already closed.
        """
        target = canonicalize_url(url)
        adapter = select_adapter(target)

        bind_request_context(
            request_id=uuid4().hex,
            source=adapter.source.value,
            domain=domain_of(target),
        )
        logger.info("scrape.started", url=target)

        deadline = Deadline(self.settings.total_timeout_ms)
        tracker = _StageTracker()
        try:
            record = await asyncio.wait_for(
                self._run(target, adapter, deadline, tracker),
                timeout=self.settings.total_timeout_ms / 1000,
            )
        except asyncio.TimeoutError as e:
            error = classify_exception(e, tracker.stage)
            error.details = {**(error.details or {}), "total_timeout_ms": deadline.total_ms}
            logger.error("scrape.failed", error_kind=error.kind.value, stage=tracker.stage)
            raise error from e
        except Exception as e:
            error = classify_exception(e, tracker.stage)
            logger.error(
                "scrape.failed",
                error_kind=error.kind.value,
                stage=tracker.stage,
                error=error.message,
            )
            if error is e:
                raise
            raise error from e

        logger.info(
            "scrape.completed",
            title=record.title,
            chapters=record.chapters,
            elapsed_ms=round(deadline.elapsed_ms()),
        )
        return record

    async def _run(
        self,
        target: str,
        adapter: Adapter,
        deadline: Deadline,
        tracker: _StageTracker,
    ) -> ScrapedRecord:
        settings = self.settings
        options = dataclasses.replace(
            self.session_options,
            launch_timeout_ms=deadline.budget_for(settings.launch_timeout_ms),
        )

        async with self._session_factory(options) as session:
            tracker.stage = "navigate"
            await navigate(
                session,
                target,
                budget_ms=deadline.budget_for(settings.navigation_timeout_ms),
                wait_until=settings.wait_until,
            )

            tracker.stage = "readiness"
            await await_marker(
                session,
                adapter.markers,
                deadline.budget_for(settings.readiness_timeout_ms),
            )

            tracker.stage = "content"
            markup = await session.page.content()

        # Session released; extraction is pure.
        tracker.stage = "extract"
        raw = adapter.extract(markup)
        return normalize(raw, adapter.source)

