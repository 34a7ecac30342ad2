"""Display metadata derived from a Reader document."""

from urllib.parse import urlparse

from bs4 import BeautifulSoup

from src.modules.readwise.schemas import Article

UNKNOWN_SOURCE = "Unknown source"
UNTITLED = "Untitled"


def extract_source(article: Article) -> str:
    """Site name, else the source URL's host without ``www.``."""
    if article.site_name:
        return article.site_name
    if not article.source_url:
        return UNKNOWN_SOURCE
    try:
        hostname = urlparse(article.source_url).hostname
    except ValueError:
        return UNKNOWN_SOURCE
    if not hostname:
        return UNKNOWN_SOURCE
    return hostname.removeprefix("www.")


def article_text(article: Article) -> str:
    """Plain text of the first non-empty body field (content, summary, notes)."""
    raw = next(
        (field for field in (article.content, article.summary, article.notes) if field),
        "",
    )
    if "<" not in raw:
        return raw.strip()
    return BeautifulSoup(raw, "lxml").get_text(" ", strip=True)


def count_words(article: Article) -> int:
    if article.word_count is not None:
        return article.word_count
    return len(article_text(article).split())
