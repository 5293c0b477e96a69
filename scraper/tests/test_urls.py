"""Unit tests for URL canonicalization."""

from __future__ import annotations

import pytest

from scraper.errors import ErrorKind, ScrapeError
from scraper.urls import canonicalize_url, domain_of


def test_comment_page_and_query_stripped():
    """Comment pagination and tracking params resolve to the same target."""
    assert canonicalize_url("https://x/y/comment-page-3?foo=1") == "https://x/y"
    assert canonicalize_url("https://x/y") == "https://x/y"


@pytest.mark.parametrize(
    "url, expected",
    [
        (
            "https://www.novelupdates.com/series/example/?utm_source=feed",
            "https://www.novelupdates.com/series/example/",
        ),
        (
            "https://www.novelupdates.com/series/example/comment-page-12/#comments",
            "https://www.novelupdates.com/series/example",
        ),
        ("https://www.webnovel.com/book/123#intro", "https://www.webnovel.com/book/123"),
        ("  https://www.webnovel.com/book/123  ", "https://www.webnovel.com/book/123"),
    ],
)
def test_canonicalize_url(url, expected):
    assert canonicalize_url(url) == expected


@pytest.mark.parametrize("url", ["", "   ", None])
def test_empty_url_is_invalid_request(url):
    with pytest.raises(ScrapeError) as exc_info:
        canonicalize_url(url)
    assert exc_info.value.kind is ErrorKind.INVALID_REQUEST
    assert exc_info.value.http_status == 400


def test_domain_of():
    assert domain_of("https://www.novelupdates.com/series/x") == "novelupdates.com"
    assert domain_of("https://m.webnovel.com/book/1") == "m.webnovel.com"
