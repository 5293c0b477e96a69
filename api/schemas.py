"""
Pydantic schemas for the scrape endpoint's request/response contracts.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class ScrapeRequest(BaseModel):
    """Request schema for POST /api/scrape."""

    url: Optional[str] = Field(
        default=None,
        description="Series page URL on a supported catalog site",
    )

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v: Any) -> Optional[str]:
        """Treat blank strings as missing."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class ScrapedNovelResponse(BaseModel):
    """Normalized novel metadata."""

    title: str
    author: str
    status: Literal["Ongoing", "Completed"]
    chapters: int = Field(ge=0)
    description: str
    image: str
    synopsis: list[str]
    source: str


class ScrapeErrorResponse(BaseModel):
    """Classified failure returned with a 4xx/5xx status."""

    errorKind: str
    message: str
    details: Optional[dict[str, Any]] = None
