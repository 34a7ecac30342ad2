from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FeedScope(str, Enum):
    ALL = "all"
    FEED = "feed"
    LIBRARY = "library"


class Article(BaseModel):
    """A Reader document as returned by the list endpoint."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str | None = None
    author: str | None = None
    category: str | None = None
    location: str | None = None
    site_name: str | None = None
    url: str | None = None
    source_url: str | None = None
    content: str | None = None
    summary: str | None = None
    notes: str | None = None
    word_count: int | None = None
    saved_at: datetime | None = None

    @field_validator("saved_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ArticlePage(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    results: list[Article] = []
    next_page_cursor: str | None = Field(default=None, alias="nextPageCursor")
