"""
Shared post-processing for adapter output.

Adapters stay minimal and return raw text; this module owns trimming,
numeric parsing, synopsis splitting and status derivation so that every
source produces records with the same invariants.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from scraper.models import NovelStatus, RawFields, ScrapedRecord, Source

CHAPTER_COUNT_PATTERN = re.compile(r"(\d+)\s+Chapters")
_LEADING_INT_PATTERN = re.compile(r"^[+-]?\d+")
_AUTHOR_SEPARATOR_PATTERN = re.compile(r"\s*,\s*")


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace and trim."""
    return re.sub(r"\s+", " ", text).strip()


def parse_chapter_count(status_text: str) -> int:
    """
    Chapter count from a free-text status such as "1260 Chapters (Completed)".

    Returns 0 when no "<digits> Chapters" pattern is present.
    """
    match = CHAPTER_COUNT_PATTERN.search(status_text or "")
    return int(match.group(1)) if match else 0


def parse_leading_int(text: str) -> Optional[int]:
    """Integer prefix of *text* after trimming ("12 Chapters" -> 12), else None."""
    match = _LEADING_INT_PATTERN.match((text or "").strip())
    return int(match.group(0)) if match else None


def normalize_author(text: str) -> str:
    """Rewrite comma-separated author lists as "A - B - C"."""
    return _AUTHOR_SEPARATOR_PATTERN.sub(" - ", (text or "").strip())


def split_synopsis(text: str) -> list[str]:
    """Split on newlines, dropping blank lines, keeping document order."""
    return [line for line in (text or "").split("\n") if line.strip()]


def derive_status(status_text: str) -> NovelStatus:
    """Completed only when the status text carries the capitalised "Completed" label."""
    if "Completed" in (status_text or ""):
        return NovelStatus.COMPLETED
    return NovelStatus.ONGOING


def _clean_paragraphs(paragraphs: Iterable[str]) -> tuple[str, ...]:
    return tuple(p.strip() for p in paragraphs if p and p.strip())


def normalize(raw: RawFields, source: Source) -> ScrapedRecord:
    """Assemble the final immutable record from adapter output."""
    chapters = raw.chapters if raw.chapters is not None and raw.chapters >= 0 else 0
    return ScrapedRecord(
        title=raw.title.strip(),
        author=raw.author.strip(),
        status=derive_status(raw.status_text),
        chapters=chapters,
        description=raw.description.strip(),
        synopsis=_clean_paragraphs(raw.synopsis),
        image=raw.image.strip(),
        source=source,
    )
