"""
Tests for the CLI flag overrides in run_scrape.
"""

from __future__ import annotations

import argparse

import pytest

from run_scrape import apply_overrides
from scraper.retry import with_retry
from shared.config import ScraperSettings


def _args(no_headless=False, wait_until=None, retries=None):
    return argparse.Namespace(no_headless=no_headless, wait_until=wait_until, retries=retries)


def test_no_flags_keep_environment_settings():
    base = ScraperSettings(navigation_timeout_ms=2000, retry_max_attempts=3)
    assert apply_overrides(base, _args()) == base


def test_flags_override_settings():
    base = ScraperSettings(navigation_timeout_ms=2000)
    settings = apply_overrides(base, _args(no_headless=True, wait_until="networkidle", retries=4))
    assert settings.headless is False
    assert settings.wait_until == "networkidle"
    assert settings.retry_max_attempts == 4


@pytest.mark.asyncio
async def test_zero_retries_is_passed_through_and_rejected():
    base = ScraperSettings(navigation_timeout_ms=2000, retry_max_attempts=3)
    settings = apply_overrides(base, _args(retries=0))
    assert settings.retry_max_attempts == 0

    async def operation():
        return "never"

    with pytest.raises(ValueError):
        await with_retry(operation, max_attempts=settings.retry_max_attempts)
