"""
Error taxonomy and classification for the scrape pipeline.

Every failure leaving `NovelScraper.scrape` is a `ScrapeError` carrying a
stable `ErrorKind`. Stages may raise `ScrapeError` directly; anything else is
mapped by `classify_exception` at the pipeline boundary, using the stage that
was running when the exception surfaced.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Literal, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

Stage = Literal["launch", "navigate", "readiness", "content", "extract"]


class ErrorKind(str, Enum):
    """Stable error kinds exposed to callers."""

    LAUNCH_FAILURE = "LaunchFailure"
    NAVIGATION_TIMEOUT = "NavigationTimeout"
    NAVIGATION_TRANSPORT_ERROR = "NavigationTransportError"
    READINESS_TIMEOUT = "ReadinessTimeout"
    UNSUPPORTED_SOURCE = "UnsupportedSource"
    MISSING_TITLE = "MissingTitle"
    ACCESS_DENIED = "AccessDenied"
    INVALID_REQUEST = "InvalidRequest"
    UNEXPECTED_ERROR = "UnexpectedError"


_HTTP_STATUS = {
    ErrorKind.UNSUPPORTED_SOURCE: 400,
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.ACCESS_DENIED: 403,
}

_RETRYABLE_KINDS = frozenset(
    {
        ErrorKind.NAVIGATION_TIMEOUT,
        ErrorKind.NAVIGATION_TRANSPORT_ERROR,
        ErrorKind.READINESS_TIMEOUT,
    }
)

# Transport error text that means the target refused automated access.
ACCESS_DENIED_SIGNATURES = (
    "err_blocked_by_response",
    "err_access_denied",
    "403 forbidden",
    "access denied",
    "captcha",
    "cf-chl",
)

# Timeout hits are reported as the timeout kind of the stage that was running.
_STAGE_TIMEOUT_KIND = {
    "launch": ErrorKind.LAUNCH_FAILURE,
    "navigate": ErrorKind.NAVIGATION_TIMEOUT,
    "readiness": ErrorKind.READINESS_TIMEOUT,
    # Markup retrieval and release belong to the readiness wait.
    "content": ErrorKind.READINESS_TIMEOUT,
}


class ScrapeError(Exception):
    """A classified scrape failure."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details

    @property
    def http_status(self) -> int:
        """HTTP-style status for the enclosing request handler."""
        return _HTTP_STATUS.get(self.kind, 500)

    @property
    def retryable(self) -> bool:
        """True for transient kinds a caller may reasonably retry."""
        return self.kind in _RETRYABLE_KINDS

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"errorKind": self.kind.value, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload

    def __repr__(self) -> str:
        return f"ScrapeError({self.kind.value!r}, {self.message!r})"


def _error_text(exc: BaseException) -> str:
    return (getattr(exc, "message", None) or str(exc)).lower()


def is_access_denied_text(text: str) -> bool:
    """True if error text matches a known blocking signature."""
    lowered = text.lower()
    return any(sig in lowered for sig in ACCESS_DENIED_SIGNATURES)


def is_transport_error_text(text: str) -> bool:
    """True for Chromium network-stack failures (DNS, refused, TLS, ...)."""
    return "net::err_" in text.lower()


def classify_exception(exc: BaseException, stage: Stage) -> ScrapeError:
    """
    Map any exception raised inside the pipeline to a `ScrapeError`.

    Already-classified errors pass through unchanged.
    """
    if isinstance(exc, ScrapeError):
        return exc

    details = {"stage": stage, "error_type": type(exc).__name__}

    if isinstance(exc, (PlaywrightTimeoutError, asyncio.TimeoutError)):
        kind = _STAGE_TIMEOUT_KIND.get(stage, ErrorKind.UNEXPECTED_ERROR)
        return ScrapeError(kind, f"Timed out during {stage}", details)

    text = _error_text(exc)
    if is_access_denied_text(text):
        return ScrapeError(
            ErrorKind.ACCESS_DENIED,
            "The target site blocked automated access",
            {**details, "error": str(exc)},
        )
    if stage == "launch":
        return ScrapeError(
            ErrorKind.LAUNCH_FAILURE,
            "Failed to launch browser",
            {**details, "error": str(exc)},
        )
    if is_transport_error_text(text):
        return ScrapeError(
            ErrorKind.NAVIGATION_TRANSPORT_ERROR,
            "Network error while loading the page",
            {**details, "error": str(exc)},
        )
    return ScrapeError(
        ErrorKind.UNEXPECTED_ERROR,
        "Failed to scrape data",
        {**details, "error": str(exc)},
    )
