import logging

from src.config.settings import Settings
from src.modules.readwise.service import ReadwiseService
from src.modules.store.contracts import KeyValueStoreContract
from src.modules.store.keys import heard_key, later_key, marker_value

logger = logging.getLogger(__name__)


class ActionReconciler:
    """Applies archive/delete/later to the local markers and the article store.

    Markers are written before the upstream call and never rolled back, so a
    failed upstream call leaves the item hidden rather than repeated.
    """

    def __init__(
        self,
        settings: Settings,
        readwise: ReadwiseService,
        store: KeyValueStoreContract,
    ) -> None:
        self._settings = settings
        self._readwise = readwise
        self._store = store

    async def _mark_heard(self, article_id: str) -> None:
        await self._store.put(
            heard_key(article_id), marker_value(), ttl=self._settings.heard_ttl
        )

    async def archive(self, article_id: str) -> None:
        await self._mark_heard(article_id)
        await self._readwise.update(article_id, {"location": "archive"})
        logger.info("Archived %s", article_id)

    async def delete(self, article_id: str) -> None:
        await self._mark_heard(article_id)
        await self._readwise.remove(article_id)
        logger.info("Deleted %s", article_id)

    async def defer(self, article_id: str) -> None:
        await self._store.put(
            later_key(article_id), marker_value(), ttl=self._settings.later_ttl
        )
        await self._store.delete(heard_key(article_id))
        if self._settings.defer_moves_upstream:
            await self._readwise.update(article_id, {"location": "later"})
        logger.info("Deferred %s", article_id)
