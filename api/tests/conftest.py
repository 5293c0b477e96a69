"""
Pytest configuration and fixtures for API tests.

The app is built from an explicit AppConfig (no environment needed) and the
process-wide scraper is swapped for a stub, so no browser is launched.
"""

from __future__ import annotations

from typing import Generator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from shared.config import AppConfig, ScraperSettings


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        environment="local",
        log_level="INFO",
        log_file=None,
        log_stdout=True,
        scraper=ScraperSettings(
            navigation_timeout_ms=2000,
            retry_max_attempts=2,
            retry_initial_delay_ms=1,
        ),
    )


@pytest.fixture
def stub_scraper() -> AsyncMock:
    scraper = AsyncMock()
    scraper.scrape = AsyncMock()
    return scraper


@pytest.fixture
def client(app_config, stub_scraper) -> Generator[TestClient, None, None]:
    """FastAPI test client whose scraper is a stub."""
    app = create_app(app_config)
    app.state.scraper = stub_scraper

    with TestClient(app) as test_client:
        yield test_client
