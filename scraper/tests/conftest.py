"""
Shared fixtures for scraper tests.

`playwright_mocks` patches async_playwright in scraper.session so that the
real acquire_session runs against mocks; tests can assert every close call.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shared.config import ScraperSettings


@pytest.fixture
def playwright_mocks():
    page = AsyncMock()
    page.url = "about:blank"
    page.title = AsyncMock(return_value="")
    page.inner_text = AsyncMock(return_value="")
    page.on = MagicMock()
    context = AsyncMock()
    context.new_page = AsyncMock(return_value=page)
    browser = AsyncMock()
    browser.new_context = AsyncMock(return_value=context)
    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)
    playwright.stop = AsyncMock()
    starter = MagicMock()
    starter.start = AsyncMock(return_value=playwright)

    with patch("scraper.session.async_playwright", return_value=starter):
        yield SimpleNamespace(
            playwright=playwright,
            browser=browser,
            context=context,
            page=page,
        )


@pytest.fixture
def scraper_settings():
    return ScraperSettings(
        navigation_timeout_ms=2000,
        total_timeout_ms=5000,
        launch_timeout_ms=1000,
        readiness_timeout_ms=1000,
    )
