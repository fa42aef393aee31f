"""
Cache Store Interface

Durable key/value blob store used to keep fetched history between cycles.
"""

from abc import ABC, abstractmethod
from typing import Optional


class ICacheStore(ABC):
    """Interface for blob store implementations."""

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        """
        Read the blob stored under ``key``.

        Returns:
            Stored bytes, or ``None`` when the key is absent

        Raises:
            CacheStoreError: When the store cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: bytes) -> None:
        """
        Store ``value`` under ``key``, replacing any previous blob.

        Raises:
            CacheStoreError: When the write fails
        """
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Drop every blob owned by this store."""
        pass

    async def close(self) -> None:
        """Release connections held by the store."""
        return None
