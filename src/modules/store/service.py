import time
from collections.abc import Callable

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.config.database import async_session
from src.modules.store.contracts import KeyValueStoreContract
from src.modules.store.models import KeyValueEntry

Clock = Callable[[], float]


def _expiry(clock: Clock, ttl: int | None) -> float | None:
    return clock() + ttl if ttl else None


class SqlKeyValueStore(KeyValueStoreContract):
    """Key-value store on top of a single SQL table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] = async_session,
        clock: Clock = time.time,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def _live(self):
        return or_(
            KeyValueEntry.expires_at.is_(None),
            KeyValueEntry.expires_at > self._clock(),
        )

    async def get(self, key: str) -> str | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(KeyValueEntry.value).where(
                    KeyValueEntry.key == key, self._live()
                )
            )
            return result.scalar_one_or_none()

    async def put(self, key: str, value: str, ttl: int | None = None) -> None:
        async with self._session_factory() as session:
            await session.merge(
                KeyValueEntry(
                    key=key, value=value, expires_at=_expiry(self._clock, ttl)
                )
            )
            await session.commit()

    async def delete(self, key: str) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
            await session.commit()

    async def scan_prefix(self, prefix: str) -> set[str]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(KeyValueEntry.key).where(
                    KeyValueEntry.key.startswith(prefix, autoescape=True),
                    self._live(),
                )
            )
            # LIKE is case-insensitive on some backends.
            return {
                key[len(prefix):]
                for key in result.scalars().all()
                if key.startswith(prefix)
            }

    async def purge_expired(self) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(KeyValueEntry).where(
                    KeyValueEntry.expires_at.is_not(None),
                    KeyValueEntry.expires_at <= self._clock(),
                )
            )
            await session.commit()
        return result.rowcount


class MemoryKeyValueStore(KeyValueStoreContract):
    """Dict-backed store for tests and throwaway runs."""

    def __init__(self, clock: Clock = time.time) -> None:
        self._clock = clock
        self._data: dict[str, tuple[str, float | None]] = {}

    def _alive(self, expires_at: float | None) -> bool:
        return expires_at is None or expires_at > self._clock()

    async def get(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None or not self._alive(entry[1]):
            return None
        return entry[0]

    async def put(self, key: str, value: str, ttl: int | None = None) -> None:
        self._data[key] = (value, _expiry(self._clock, ttl))

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def scan_prefix(self, prefix: str) -> set[str]:
        return {
            key[len(prefix):]
            for key, (_, expires_at) in self._data.items()
            if key.startswith(prefix) and self._alive(expires_at)
        }

    async def purge_expired(self) -> int:
        expired = [k for k, (_, exp) in self._data.items() if not self._alive(exp)]
        for key in expired:
            del self._data[key]
        return len(expired)
