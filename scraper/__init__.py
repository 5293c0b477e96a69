"""
Playwright-based metadata scraper for novel catalog sites.

Public API: re-exports the symbols used by the API service, the CLI and
tests so that `from scraper import ...` stays stable.
"""

from __future__ import annotations

from scraper.adapters import ADAPTERS, Adapter, NovelUpdatesAdapter, WebnovelAdapter, select_adapter
from scraper.errors import ErrorKind, ScrapeError, classify_exception
from scraper.models import NovelStatus, RawFields, ScrapedRecord, Source
from scraper.navigation import NavigationOutcome, is_bot_block_page, navigate
from scraper.normalize import normalize
from scraper.pipeline import NovelScraper
from scraper.readiness import await_marker
from scraper.retry import with_retry
from scraper.session import BrowserSession, SessionOptions, acquire_session, should_block
from scraper.urls import canonicalize_url

__all__ = [
    # models
    "NovelStatus",
    "RawFields",
    "ScrapedRecord",
    "Source",
    # errors
    "ErrorKind",
    "ScrapeError",
    "classify_exception",
    # session
    "BrowserSession",
    "SessionOptions",
    "acquire_session",
    "should_block",
    # navigation / readiness
    "NavigationOutcome",
    "navigate",
    "is_bot_block_page",
    "await_marker",
    # adapters / normalize
    "ADAPTERS",
    "Adapter",
    "NovelUpdatesAdapter",
    "WebnovelAdapter",
    "select_adapter",
    "normalize",
    "canonicalize_url",
    # pipeline
    "NovelScraper",
    "with_retry",
]
