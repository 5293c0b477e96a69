"""
Route handler for the scrape endpoint.

The handler owns the HTTP status mapping and the (optional) retry policy;
the pipeline itself only produces records or classified errors.
"""

from __future__ import annotations

from typing import Annotated, Union

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from api.schemas import ScrapedNovelResponse, ScrapeErrorResponse, ScrapeRequest
from shared.config import ScraperSettings
from shared.logging import clear_request_context, get_logger
from scraper import NovelScraper, ScrapeError, with_retry
from scraper.errors import ErrorKind

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["scrape"])


def get_scraper(request: Request) -> NovelScraper:
    """Dependency returning the process-wide scraper built at startup."""
    return request.app.state.scraper


def get_scraper_settings(request: Request) -> ScraperSettings:
    return request.app.state.scraper_settings


def _error_response(error: ScrapeError) -> JSONResponse:
    return JSONResponse(status_code=error.http_status, content=error.to_payload())


@router.post(
    "/scrape",
    response_model=ScrapedNovelResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ScrapeErrorResponse},
        status.HTTP_403_FORBIDDEN: {"model": ScrapeErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ScrapeErrorResponse},
    },
    summary="Scrape novel metadata from a catalog page",
)
async def scrape(
    body: ScrapeRequest,
    scraper: Annotated[NovelScraper, Depends(get_scraper)],
    settings: Annotated[ScraperSettings, Depends(get_scraper_settings)],
) -> Union[ScrapedNovelResponse, JSONResponse]:
    """
    Scrape one series page and return its normalized metadata.

    Unsupported sites and missing URLs are 400, blocked requests 403, every
    other classified failure 500.
    """
    if not body.url:
        return _error_response(ScrapeError(ErrorKind.INVALID_REQUEST, "URL is required"))

    url = body.url
    try:
        record = await with_retry(
            lambda: scraper.scrape(url),
            max_attempts=settings.retry_max_attempts,
            initial_delay=settings.retry_initial_delay_ms / 1000,
            backoff_factor=settings.retry_backoff_factor,
        )
    except ScrapeError as e:
        logger.warning(
            "scrape_request.failed",
            url=url,
            error_kind=e.kind.value,
            http_status=e.http_status,
        )
        return _error_response(e)
    finally:
        clear_request_context()

    logger.info("scrape_request.completed", url=url, source=record.source.value)
    return ScrapedNovelResponse(**record.to_dict())
