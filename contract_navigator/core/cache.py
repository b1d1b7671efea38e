"""Spec cache interface and the in-process implementation."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class SpecCache(ABC):
    """Abstract base class for normalized spec storage.

    Entries never expire: contracts are treated as immutable for the life of
    the owning store.
    """

    @abstractmethod
    async def has(self, key: str) -> bool:
        """Check whether a key is cached.

        Args:
            key: Cache key

        Returns:
            True if an entry exists
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Retrieve value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store value in cache.

        Args:
            key: Cache key
            value: Normalized spec
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete value from cache.

        Args:
            key: Cache key
        """
        pass


class InMemorySpecCache(SpecCache):
    """Dict-backed cache returning stored objects by reference."""

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}

    async def has(self, key: str) -> bool:
        return key in self._entries

    async def get(self, key: str) -> Optional[Any]:
        return self._entries.get(key)

    async def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
