"""
History Cache Repository Interface

Persists and retrieves per-entity ``CacheRecord`` objects, optionally in a
compressed representation stored under a distinct key.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities.time_series import CacheRecord


class IHistoryCacheRepository(ABC):
    """Interface for the per-entity history cache."""

    @abstractmethod
    async def get(self, key: str, compressed: bool) -> Optional[CacheRecord]:
        """
        Load the cache record stored for ``key``.

        Args:
            key: Entity identifier
            compressed: Read the compressed representation instead of the raw one

        Returns:
            The record, or ``None`` when absent or unreadable
        """
        pass

    @abstractmethod
    async def set(self, key: str, record: CacheRecord, compressed: bool) -> bool:
        """
        Persist ``record`` for ``key``.

        A failing write clears the whole store and is reported through the
        return value instead of an exception.

        Returns:
            True when the record was stored
        """
        pass
