"""NovelUpdates series pages (novelupdates.com/series/...)."""

from __future__ import annotations

from bs4 import BeautifulSoup

from scraper.adapters.base import Adapter, select_attr, select_text
from scraper.models import RawFields, Source
from scraper.normalize import normalize_author, parse_chapter_count


class NovelUpdatesAdapter(Adapter):
    source = Source.NOVEL_UPDATES
    url_pattern = "novelupdates"
    markers = (".seriestitlenu", ".seriesimg")

    def _read_fields(self, soup: BeautifulSoup) -> RawFields:
        # Status reads like "786 Chapters (Ongoing)"; it also carries the count.
        status_text = select_text(soup, "#editstatus")
        description = select_text(soup, "#editdescription")
        return RawFields(
            title=select_text(soup, ".seriestitlenu"),
            author=normalize_author(select_text(soup, "#authtag")),
            status_text=status_text,
            chapters=parse_chapter_count(status_text),
            description=description,
            image=select_attr(soup, ".seriesimg img", "src"),
            synopsis=[description],
        )
