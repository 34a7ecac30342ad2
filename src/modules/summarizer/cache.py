import logging

from src.modules.readwise.schemas import Article
from src.modules.store.contracts import KeyValueStoreContract
from src.modules.store.keys import summary_key
from src.modules.summarizer.service import SummarizerService

logger = logging.getLogger(__name__)


class SummaryCache:
    """Read-through summary cache keyed by article id.

    Callers run articles one at a time, so each article is summarized at most
    once per TTL window. Overlapping feed passes may both miss and regenerate.
    """

    def __init__(
        self,
        store: KeyValueStoreContract,
        summarizer: SummarizerService,
        ttl: int,
    ) -> None:
        self._store = store
        self._summarizer = summarizer
        self._ttl = ttl

    async def get_or_create(self, article: Article) -> str:
        key = summary_key(article.id)
        cached = await self._store.get(key)
        if cached is not None:
            logger.debug("Summary cache hit: %s", article.id)
            return cached

        logger.info("Summary cache miss: %s", article.id)
        summary = await self._summarizer.summarize(article)
        await self._store.put(key, summary, ttl=self._ttl)
        return summary
