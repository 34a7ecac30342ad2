import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from src.modules.store.contracts import KeyValueStoreContract

logger = logging.getLogger(__name__)


class MaintenanceService:
    """Periodically drops expired markers and summaries from the store."""

    def __init__(self, store: KeyValueStoreContract, interval_minutes: int) -> None:
        self._store = store
        self._interval_minutes = interval_minutes
        self._scheduler = AsyncIOScheduler()

    async def purge(self) -> int:
        removed = await self._store.purge_expired()
        logger.info("Store purge removed %d entries", removed)
        return removed

    def start(self) -> None:
        if self._interval_minutes <= 0:
            logger.info("Store purge disabled")
            return
        self._scheduler.add_job(
            self.purge,
            IntervalTrigger(minutes=self._interval_minutes),
            id="purge_expired",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info("Scheduler started, purging every %d minutes", self._interval_minutes)

    def stop(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")
