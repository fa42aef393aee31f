"""In-process blob store, used when no redis instance is configured."""

from typing import Dict, Optional

from src.domain.repositories.cache_store import ICacheStore


class MemoryCacheStore(ICacheStore):
    """Dictionary backed blob store; contents are lost on restart."""

    def __init__(self) -> None:
        self._blobs: Dict[str, bytes] = {}

    async def get(self, key: str) -> Optional[bytes]:
        return self._blobs.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self._blobs[key] = bytes(value)

    async def clear(self) -> None:
        self._blobs.clear()

    def __len__(self) -> int:
        return len(self._blobs)
