"""
Source adapter registry.

Dispatch is a substring match on the canonical URL, in registry order; the
first adapter whose pattern matches wins. Supporting a new site means adding
one adapter class and one entry to ADAPTERS.
"""

from __future__ import annotations

from scraper.adapters.base import Adapter
from scraper.adapters.novelupdates import NovelUpdatesAdapter
from scraper.adapters.webnovel import WebnovelAdapter
from scraper.errors import ErrorKind, ScrapeError

ADAPTERS: tuple[Adapter, ...] = (
    NovelUpdatesAdapter(),
    WebnovelAdapter(),
)


def select_adapter(url: str) -> Adapter:
    """
    Return the adapter for *url*.

    Raises:
        ScrapeError(UnsupportedSource): if no adapter matches.
    """
    for adapter in ADAPTERS:
        if adapter.matches(url):
            return adapter
    raise ScrapeError(
        ErrorKind.UNSUPPORTED_SOURCE,
        "Unsupported website",
        {"url": url, "supported": [a.source.value for a in ADAPTERS]},
    )


__all__ = [
    "ADAPTERS",
    "Adapter",
    "NovelUpdatesAdapter",
    "WebnovelAdapter",
    "select_adapter",
]
