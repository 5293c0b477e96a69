"""Webnovel book pages (webnovel.com/book/...)."""

from __future__ import annotations

from bs4 import BeautifulSoup

from scraper.adapters.base import Adapter, select_attr, select_text
from scraper.models import RawFields, Source
from scraper.normalize import parse_leading_int, split_synopsis


class WebnovelAdapter(Adapter):
    source = Source.WEBNOVEL
    url_pattern = "webnovel"
    markers = (".book-info h1", ".book-intro")

    def _read_fields(self, soup: BeautifulSoup) -> RawFields:
        description = select_text(soup, ".book-intro")
        return RawFields(
            title=select_text(soup, ".book-info h1"),
            author=select_text(soup, ".author-name"),
            status_text=select_text(soup, ".book-status"),
            chapters=parse_leading_int(select_text(soup, ".chapter-count")),
            description=description,
            image=select_attr(soup, ".book-cover img", "src"),
            synopsis=split_synopsis(description),
        )
