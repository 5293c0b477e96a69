"""
Structured logging setup for the novel scraper.

All runtime logging goes through structlog. Logs are rendered as JSON and
carry context bound per scrape request (request_id, source, domain), so a
single request can be followed across session, navigation and extraction.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional

import structlog


def _build_shared_processors() -> list[structlog.types.Processor]:
    """Processors shared by the API service and the CLI."""

    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        timestamper,
        structlog.processors.EventRenamer("message"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def _stream_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_stdout: bool = True,
) -> None:
    """
    Configure structlog and the standard logging module.

    Called once at process startup by each entry point. At least one handler
    is always installed: stdout is used when both log_stdout=False and
    log_file is unset.
    """

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if log_stdout:
        root.addHandler(_stream_handler(level))

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(file_handler)

    if not root.handlers:
        root.addHandler(_stream_handler(level))

    structlog.configure(
        processors=_build_shared_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Obtain a structured logger.

    Usage:
        from shared.logging import get_logger, bind_request_context

        logger = get_logger(__name__)
        bind_request_context(request_id="...", source="NovelUpdates")
        logger.info("navigation.success")
    """

    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(name) if name else structlog.get_logger()


def bind_request_context(
    *,
    request_id: Optional[str] = None,
    source: Optional[str] = None,
    domain: Optional[str] = None,
    **extra: Any,
) -> Mapping[str, Any]:
    """
    Bind common context fields for scrape logging.

    Keys with None values are dropped to keep logs concise.
    """

    context: dict[str, Any] = {
        "request_id": request_id,
        "source": source,
        "domain": domain,
        **extra,
    }
    filtered_context = {k: v for k, v in context.items() if v is not None}

    structlog.contextvars.bind_contextvars(**filtered_context)
    return filtered_context


def clear_request_context() -> None:
    """Drop all request-scoped context bound in the current task."""

    structlog.contextvars.clear_contextvars()
