"""Data models for the scrape pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class NovelStatus(str, Enum):
    ONGOING = "Ongoing"
    COMPLETED = "Completed"


class Source(str, Enum):
    """Catalog sites with a registered adapter."""

    NOVEL_UPDATES = "NovelUpdates"
    WEBNOVEL = "Webnovel"


@dataclass
class RawFields:
    """Field values as read from markup by an adapter, before normalization."""

    title: str
    author: str = ""
    status_text: str = ""
    chapters: Optional[int] = None
    description: str = ""
    image: str = ""
    synopsis: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ScrapedRecord:
    """Normalized novel metadata returned to the caller."""

    title: str
    author: str
    status: NovelStatus
    chapters: int
    description: str
    synopsis: tuple[str, ...]
    image: str
    source: Source

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return {
            "title": self.title,
            "author": self.author,
            "status": self.status.value,
            "chapters": self.chapters,
            "description": self.description,
            "image": self.image,
            "synopsis": list(self.synopsis),
            "source": self.source.value,
        }
