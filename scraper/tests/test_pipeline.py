"""
End-to-end tests for NovelScraper with a mocked browser.

Covers the four request scenarios (success, missing title, navigation
timeout with guaranteed release, unsupported source short-circuit) plus the
wall-clock ceiling and readiness wiring.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from scraper.errors import ErrorKind, ScrapeError
from scraper.models import NovelStatus, Source
from scraper.pipeline import NovelScraper
from shared.config import ScraperSettings

NOVELUPDATES_URL = "https://www.novelupdates.com/series/example"

SCENARIO_A_HTML = """\
<html><body>
  <div class="seriestitlenu">Example Saga</div>
  <div class="seriesimg"><img src="https://cdn.novelupdates.com/example.jpg"></div>
  <a id="authtag">Jane, Doe</a>
  <div id="editstatus">500 Chapters (Ongoing)</div>
  <div id="editdescription">A hero rises from nothing.</div>
</body></html>
"""


def _ready_page(page, html=SCENARIO_A_HTML, status=200):
    response = MagicMock()
    response.status = status
    page.goto = AsyncMock(return_value=response)
    page.wait_for_selector = AsyncMock(return_value=object())
    page.content = AsyncMock(return_value=html)
    page.title = AsyncMock(return_value="Example Saga - Novel Updates")
    return page


@pytest.mark.asyncio
async def test_scenario_a_novelupdates_success(playwright_mocks, scraper_settings):
    page = _ready_page(playwright_mocks.page)

    record = await NovelScraper(scraper_settings).scrape(NOVELUPDATES_URL)

    assert record.title == "Example Saga"
    assert record.author == "Jane - Doe"
    assert record.status is NovelStatus.ONGOING
    assert record.chapters == 500
    assert record.synopsis == ("A hero rises from nothing.",)
    assert record.description == "A hero rises from nothing."
    assert record.image == "https://cdn.novelupdates.com/example.jpg"
    assert record.source is Source.NOVEL_UPDATES
    assert record.to_dict()["source"] == "NovelUpdates"

    page.goto.assert_awaited_once()
    assert page.goto.call_args.args[0] == NOVELUPDATES_URL
    playwright_mocks.browser.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_scenario_a_with_comment_page_url(playwright_mocks, scraper_settings):
    page = _ready_page(playwright_mocks.page)

    await NovelScraper(scraper_settings).scrape(NOVELUPDATES_URL + "/comment-page-3?foo=1")

    assert page.goto.call_args.args[0] == NOVELUPDATES_URL


@pytest.mark.asyncio
async def test_scenario_b_missing_title(playwright_mocks, scraper_settings):
    html = SCENARIO_A_HTML.replace('<div class="seriestitlenu">Example Saga</div>', "")
    _ready_page(playwright_mocks.page, html=html)

    with pytest.raises(ScrapeError) as exc_info:
        await NovelScraper(scraper_settings).scrape(NOVELUPDATES_URL)

    assert exc_info.value.kind is ErrorKind.MISSING_TITLE
    playwright_mocks.browser.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_scenario_c_navigation_timeout_releases_session(playwright_mocks, scraper_settings):
    page = _ready_page(playwright_mocks.page)
    page.goto = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout 2000ms exceeded"))

    with pytest.raises(ScrapeError) as exc_info:
        await NovelScraper(scraper_settings).scrape(NOVELUPDATES_URL)

    assert exc_info.value.kind is ErrorKind.NAVIGATION_TIMEOUT
    assert page.goto.call_args.kwargs["timeout"] <= scraper_settings.navigation_timeout_ms
    page.close.assert_awaited_once()
    playwright_mocks.context.close.assert_awaited_once()
    playwright_mocks.browser.close.assert_awaited_once()
    playwright_mocks.playwright.stop.assert_awaited_once()


@pytest.mark.asyncio
async def test_scenario_d_unsupported_source_never_launches(scraper_settings):
    session_factory = MagicMock()

    scraper = NovelScraper(scraper_settings, session_factory=session_factory)
    with pytest.raises(ScrapeError) as exc_info:
        await scraper.scrape("https://www.royalroad.com/fiction/1234")

    assert exc_info.value.kind is ErrorKind.UNSUPPORTED_SOURCE
    session_factory.assert_not_called()


@pytest.mark.asyncio
async def test_missing_url_never_launches(scraper_settings):
    session_factory = MagicMock()

    with pytest.raises(ScrapeError) as exc_info:
        await NovelScraper(scraper_settings, session_factory=session_factory).scrape("  ")

    assert exc_info.value.kind is ErrorKind.INVALID_REQUEST
    session_factory.assert_not_called()


@pytest.mark.asyncio
async def test_readiness_uses_adapter_markers(playwright_mocks, scraper_settings):
    html = """<div class="book-info"><h1>Sky Realm</h1></div>
<div class="book-intro">One.

Two.</div>"""
    page = _ready_page(playwright_mocks.page, html=html)

    record = await NovelScraper(scraper_settings).scrape("https://www.webnovel.com/book/sky_1")

    selectors = {c.args[0] for c in page.wait_for_selector.call_args_list}
    assert selectors <= {".book-info h1", ".book-intro"}
    assert record.source is Source.WEBNOVEL
    assert record.synopsis == ("One.", "Two.")
    assert record.chapters == 0


@pytest.mark.asyncio
async def test_readiness_timeout_is_classified(playwright_mocks, scraper_settings):
    page = _ready_page(playwright_mocks.page)
    page.wait_for_selector = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout"))

    with pytest.raises(ScrapeError) as exc_info:
        await NovelScraper(scraper_settings).scrape(NOVELUPDATES_URL)

    assert exc_info.value.kind is ErrorKind.READINESS_TIMEOUT
    playwright_mocks.browser.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_wall_clock_ceiling_aborts_and_releases(playwright_mocks):
    """A stage hanging past the overall ceiling is cancelled and classified by stage."""
    settings = ScraperSettings(
        navigation_timeout_ms=60_000,
        total_timeout_ms=50,
        readiness_timeout_ms=60_000,
    )
    page = _ready_page(playwright_mocks.page)

    async def hang(*args, **kwargs):
        await asyncio.sleep(10)

    page.goto = AsyncMock(side_effect=hang)

    with pytest.raises(ScrapeError) as exc_info:
        await NovelScraper(settings).scrape(NOVELUPDATES_URL)

    assert exc_info.value.kind is ErrorKind.NAVIGATION_TIMEOUT
    assert exc_info.value.details["total_timeout_ms"] == 50
    playwright_mocks.browser.close.assert_awaited_once()
    playwright_mocks.playwright.stop.assert_awaited_once()


@pytest.mark.asyncio
async def test_stage_budgets_are_capped_by_remaining_time(playwright_mocks):
    settings = ScraperSettings(navigation_timeout_ms=60_000, total_timeout_ms=3000)
    page = _ready_page(playwright_mocks.page)

    await NovelScraper(settings).scrape(NOVELUPDATES_URL)

    assert page.goto.call_args.kwargs["timeout"] <= 3000


@pytest.mark.asyncio
async def test_non_network_goto_failure_is_classified_and_session_released(scraper_settings):
    session = MagicMock()
    session.page = AsyncMock()
    session.page.goto = AsyncMock(side_effect=RuntimeError("Target crashed"))
    closed = []

    @asynccontextmanager
    async def factory(options):
        try:
            yield session
        finally:
            closed.append(True)

    with pytest.raises(ScrapeError) as exc_info:
        await NovelScraper(scraper_settings, session_factory=factory).scrape(NOVELUPDATES_URL)

    assert exc_info.value.kind is ErrorKind.NAVIGATION_TRANSPORT_ERROR
    assert closed == [True]


@pytest.mark.asyncio
async def test_launch_failure_surfaces(playwright_mocks, scraper_settings):
    playwright_mocks.playwright.chromium.launch = AsyncMock(side_effect=Exception("no chrome"))

    with pytest.raises(ScrapeError) as exc_info:
        await NovelScraper(scraper_settings).scrape(NOVELUPDATES_URL)

    assert exc_info.value.kind is ErrorKind.LAUNCH_FAILURE
    playwright_mocks.playwright.stop.assert_awaited_once()


@pytest.mark.asyncio
async def test_novel_titled_like_challenge_page_is_scraped(playwright_mocks, scraper_settings):
    html = SCENARIO_A_HTML.replace("Example Saga", "Just a Moment")
    page = _ready_page(playwright_mocks.page, html=html)
    page.title = AsyncMock(return_value="Just a Moment - Novel Updates")

    record = await NovelScraper(scraper_settings).scrape(NOVELUPDATES_URL)

    assert record.title == "Just a Moment"
    assert record.chapters == 500


@pytest.mark.asyncio
async def test_ceiling_hit_while_reading_markup_is_readiness_timeout(playwright_mocks):
    settings = ScraperSettings(navigation_timeout_ms=60_000, total_timeout_ms=50)
    page = _ready_page(playwright_mocks.page)

    async def hang(*args, **kwargs):
        await asyncio.sleep(10)

    page.content = AsyncMock(side_effect=hang)

    with pytest.raises(ScrapeError) as exc_info:
        await NovelScraper(settings).scrape(NOVELUPDATES_URL)

    assert exc_info.value.kind is ErrorKind.READINESS_TIMEOUT
    playwright_mocks.browser.close.assert_awaited_once()
