"""
Adapter base class: one subclass per supported catalog site.

An adapter is a pure function from page markup to `RawFields`. It never
touches the browser; the pipeline hands it the rendered HTML.
"""

from __future__ import annotations

from typing import ClassVar

from bs4 import BeautifulSoup

from scraper.errors import ErrorKind, ScrapeError
from scraper.models import RawFields, Source


def select_text(soup: BeautifulSoup, selector: str) -> str:
    """Concatenated text of every element matching *selector*, trimmed."""
    return "".join(el.get_text() for el in soup.select(selector)).strip()


def select_attr(soup: BeautifulSoup, selector: str, attr: str) -> str:
    """Attribute of the first element matching *selector*, or empty string."""
    element = soup.select_one(selector)
    if element is None:
        return ""
    value = element.get(attr)
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


class Adapter:
    """Maps one site's markup to raw field values."""

    source: ClassVar[Source]
    # Substring of the canonical URL that selects this adapter.
    url_pattern: ClassVar[str]
    # Readiness selectors, any one of which means the page has rendered.
    markers: ClassVar[tuple[str, ...]]

    def matches(self, url: str) -> bool:
        return self.url_pattern in url

    def extract(self, markup: str) -> RawFields:
        """
        Parse *markup* and read this site's fields.

        Raises:
            ScrapeError(MissingTitle): if the title is empty after trimming.
        """
        soup = BeautifulSoup(markup, "html.parser")
        fields = self._read_fields(soup)
        if not fields.title.strip():
            raise ScrapeError(
                ErrorKind.MISSING_TITLE,
                "Could not find novel title. The page structure might have changed "
                "or the URL might be incorrect.",
                {"source": self.source.value},
            )
        return fields

    def _read_fields(self, soup: BeautifulSoup) -> RawFields:
        raise NotImplementedError
