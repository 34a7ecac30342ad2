from datetime import datetime

from pydantic import BaseModel

from src.modules.readwise.schemas import FeedScope


class FeedItem(BaseModel):
    """One playable summary, built fresh for every feed request."""

    id: str
    title: str
    source: str
    summary: str
    content: str
    url: str
    source_url: str | None = None
    word_count: int
    location: str | None = None
    saved_at: datetime | None = None


class FeedResponse(BaseModel):
    articles: list[FeedItem]
    total_available: int
    location: FeedScope
