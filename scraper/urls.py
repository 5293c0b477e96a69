"""
URL canonicalization for scrape requests.

Strips tracking query strings, fragments and paginated-comment suffixes so
that every variant of a series page resolves to the same target.
"""

from __future__ import annotations

from urllib.parse import urlparse

from scraper.errors import ErrorKind, ScrapeError

COMMENT_PAGE_MARKER = "/comment-page-"


def canonicalize_url(url: str) -> str:
    """
    Return the effective scrape target for *url*.

    Examples:
        https://x/y/comment-page-3?foo=1 -> https://x/y
        https://x/y?utm_source=feed#top -> https://x/y

    Raises:
        ScrapeError(InvalidRequest): if *url* is empty or whitespace.
    """
    cleaned = (url or "").strip()
    if not cleaned:
        raise ScrapeError(ErrorKind.INVALID_REQUEST, "URL is required")

    cleaned = cleaned.split(COMMENT_PAGE_MARKER, 1)[0]
    cleaned = cleaned.split("?", 1)[0]
    cleaned = cleaned.split("#", 1)[0]
    return cleaned


def domain_of(url: str) -> str:
    """Lowercased host of *url* without a leading www."""
    netloc = (urlparse(url).netloc or "").lower()
    if netloc.startswith("www."):
        netloc = netloc[4:]
    return netloc
