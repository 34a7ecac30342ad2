from dataclasses import dataclass

import httpx
from fastapi import Request

from src.config.settings import Settings
from src.modules.actions.service import ActionReconciler
from src.modules.feed.service import FeedAssembler
from src.modules.maintenance.service import MaintenanceService
from src.modules.readwise.service import ReadwiseService
from src.modules.store.contracts import KeyValueStoreContract
from src.modules.store.service import MemoryKeyValueStore, SqlKeyValueStore
from src.modules.summarizer.cache import SummaryCache
from src.modules.summarizer.service import SummarizerService
from src.modules.tts.service import TTSService


@dataclass(frozen=True)
class AppContext:
    """Everything a request needs, wired once at startup and never mutated."""

    settings: Settings
    store: KeyValueStoreContract
    readwise: ReadwiseService
    summaries: SummaryCache
    feed: FeedAssembler
    actions: ActionReconciler
    tts: TTSService
    maintenance: MaintenanceService


def build_store(settings: Settings) -> KeyValueStoreContract:
    if settings.kv_backend == "memory":
        return MemoryKeyValueStore()
    return SqlKeyValueStore()


def build_context(
    settings: Settings,
    store: KeyValueStoreContract | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppContext:
    if store is None:
        store = build_store(settings)
    readwise = ReadwiseService(settings, transport=transport)
    summaries = SummaryCache(
        store,
        SummarizerService(settings, transport=transport),
        ttl=settings.summary_cache_ttl,
    )
    return AppContext(
        settings=settings,
        store=store,
        readwise=readwise,
        summaries=summaries,
        feed=FeedAssembler(settings, readwise, store, summaries),
        actions=ActionReconciler(settings, readwise, store),
        tts=TTSService(settings, transport=transport),
        maintenance=MaintenanceService(store, settings.purge_interval_minutes),
    )


def get_context(request: Request) -> AppContext:
    return request.app.state.context
