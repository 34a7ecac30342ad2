import logging
from dataclasses import dataclass

from src.config.settings import Settings
from src.modules.common.errors import SummarizerError
from src.modules.feed.schemas import FeedItem
from src.modules.readwise.metadata import UNTITLED, article_text, count_words, extract_source
from src.modules.readwise.schemas import Article, FeedScope
from src.modules.readwise.service import ReadwiseService
from src.modules.store.contracts import KeyValueStoreContract
from src.modules.store.keys import HEARD_PREFIX, LATER_PREFIX, later_key
from src.modules.summarizer.cache import SummaryCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemResult:
    """Outcome of summarizing one candidate: exactly one of item/error is set."""

    article: Article
    item: FeedItem | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.item is not None


@dataclass(frozen=True)
class FeedResult:
    items: list[FeedItem]
    total_available: int


def is_due(article_id: str, heard: set[str], later: set[str]) -> bool:
    """Unheard items are due; heard ones only when deferred."""
    return article_id not in heard or article_id in later


class FeedAssembler:
    def __init__(
        self,
        settings: Settings,
        readwise: ReadwiseService,
        store: KeyValueStoreContract,
        summaries: SummaryCache,
    ) -> None:
        self._settings = settings
        self._readwise = readwise
        self._store = store
        self._summaries = summaries

    def _to_item(self, article: Article, summary: str) -> FeedItem:
        return FeedItem(
            id=article.id,
            title=article.title or UNTITLED,
            source=extract_source(article),
            summary=summary,
            content=article_text(article)[: self._settings.content_preview_chars],
            url=article.url or f"{self._settings.reader_document_url}/{article.id}",
            source_url=article.source_url,
            word_count=count_words(article),
            location=article.location,
            saved_at=article.saved_at,
        )

    async def _summarize(self, article: Article) -> ItemResult:
        try:
            summary = await self._summaries.get_or_create(article)
        except SummarizerError as exc:
            return ItemResult(article=article, error=exc)
        return ItemResult(article=article, item=self._to_item(article, summary))

    async def assemble(self, scope: FeedScope = FeedScope.ALL) -> FeedResult:
        candidates = await self._readwise.list_candidates(scope)

        heard = await self._store.scan_prefix(HEARD_PREFIX)
        later = await self._store.scan_prefix(LATER_PREFIX)
        due = [a for a in candidates if is_due(a.id, heard, later)]
        selected = due[: self._settings.feed_max_items]
        logger.info(
            "Feed '%s': %d candidates, %d due, %d selected",
            scope.value, len(candidates), len(due), len(selected),
        )

        # One summarizer call in flight at a time.
        results = [await self._summarize(article) for article in selected]

        items: list[FeedItem] = []
        for result in results:
            if not result.ok:
                logger.warning("Skipping %s: %s", result.article.id, result.error)
                continue
            items.append(result.item)
            if result.article.id in later:
                await self._store.delete(later_key(result.article.id))

        logger.info("Feed '%s' served %d items", scope.value, len(items))
        return FeedResult(items=items, total_available=len(due))
