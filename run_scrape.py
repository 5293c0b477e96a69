#!/usr/bin/env python3
"""
CLI script for scraping one novel page.

Usage: python run_scrape.py --url <series_url> [--no-headless] [--wait-until networkidle]
"""

import argparse
import asyncio
import dataclasses
import json
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from shared.config import ScraperSettings, get_config
from shared.logging import configure_logging
from scraper import NovelScraper, ScrapeError, with_retry


def apply_overrides(settings: ScraperSettings, args: argparse.Namespace) -> ScraperSettings:
    """Layer CLI flags over the environment settings."""
    overrides = {}
    if args.no_headless:
        overrides["headless"] = False
    if args.wait_until:
        overrides["wait_until"] = args.wait_until
    if args.retries is not None:
        overrides["retry_max_attempts"] = args.retries
    return dataclasses.replace(settings, **overrides)


async def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="Scrape novel metadata from a catalog page")
    parser.add_argument("--url", required=True, help="Series page URL")
    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Show browser window. Use for local debugging.",
    )
    parser.add_argument(
        "--wait-until",
        choices=["domcontentloaded", "networkidle", "load"],
        help="Navigation wait strategy (overrides SCRAPE_WAIT_UNTIL)",
    )
    parser.add_argument(
        "--retries",
        type=int,
        help="Total attempts for transient failures (overrides SCRAPE_RETRY_MAX_ATTEMPTS)",
    )
    args = parser.parse_args()

    config = get_config()
    configure_logging(
        level=logging.getLevelName(config.log_level.upper()),
        log_file=config.log_file,
        log_stdout=config.log_stdout,
    )

    settings = apply_overrides(config.scraper, args)

    try:
        scraper = NovelScraper(settings)
        record = await with_retry(
            lambda: scraper.scrape(args.url),
            max_attempts=settings.retry_max_attempts,
            initial_delay=settings.retry_initial_delay_ms / 1000,
            backoff_factor=settings.retry_backoff_factor,
        )
    except ScrapeError as e:
        print(json.dumps(e.to_payload(), indent=2))
        return 1

    print(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
