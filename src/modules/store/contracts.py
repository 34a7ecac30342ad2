from abc import ABC, abstractmethod


class KeyValueStoreContract(ABC):
    """String-to-string mapping with optional per-key expiry."""

    @abstractmethod
    async def get(self, key: str) -> str | None: ...

    @abstractmethod
    async def put(self, key: str, value: str, ttl: int | None = None) -> None: ...

    @abstractmethod
    async def delete(self, key: str) -> None: ...

    @abstractmethod
    async def scan_prefix(self, prefix: str) -> set[str]:
        """Return the key suffixes of all live keys starting with ``prefix``."""

    @abstractmethod
    async def purge_expired(self) -> int: ...
