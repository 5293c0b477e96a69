"""
FastAPI application entrypoint for the novel scraper API.

This module sets up the FastAPI app, configures logging, builds the
process-wide scraper, and registers route handlers.
"""

from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import scrape
from shared.config import AppConfig, get_config
from shared.logging import configure_logging
from scraper import NovelScraper


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if config is None:
        load_dotenv()
        config = get_config()

    log_level = logging.getLevelName(config.log_level.upper())
    configure_logging(level=log_level, log_file=config.log_file, log_stdout=config.log_stdout)

    app = FastAPI(
        title="Novel Scraper API",
        description="Scrapes novel metadata from supported catalog sites",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # The browser binary is resolved once here; each request launches its own session.
    app.state.scraper_settings = config.scraper
    app.state.scraper = NovelScraper(config.scraper)

    app.include_router(scrape.router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app
