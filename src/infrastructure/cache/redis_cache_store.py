"""
Redis Cache Store - Infrastructure Layer

Blob store backed by redis. Every key is namespaced with a prefix so that
``clear`` only drops the blobs owned by the engine.
"""

from typing import Any, Optional

import redis.asyncio as aioredis
import structlog
from redis.exceptions import RedisError

from src.domain.entities.errors import CacheStoreError
from src.domain.repositories.cache_store import ICacheStore

logger = structlog.get_logger(__name__)


class RedisCacheStore(ICacheStore):
    """Redis implementation of the blob store."""

    def __init__(
        self,
        redis_url: str,
        key_prefix: str = "graph-history:",
        *,
        socket_timeout: float = 5.0,
        client: Optional[Any] = None,
    ) -> None:
        self._redis_url = redis_url
        self._key_prefix = key_prefix
        self._client = client or aioredis.from_url(
            redis_url,
            socket_connect_timeout=socket_timeout,
            socket_timeout=socket_timeout,
        )

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    async def get(self, key: str) -> Optional[bytes]:
        try:
            return await self._client.get(self._key(key))
        except RedisError as exc:
            raise CacheStoreError(f"Redis read failed: {exc}", {"key": key}) from exc

    async def set(self, key: str, value: bytes) -> None:
        try:
            await self._client.set(self._key(key), value)
        except RedisError as exc:
            raise CacheStoreError(f"Redis write failed: {exc}", {"key": key}) from exc

    async def clear(self) -> None:
        try:
            keys = [key async for key in self._client.scan_iter(match=f"{self._key_prefix}*")]
            if keys:
                await self._client.delete(*keys)
        except RedisError as exc:
            raise CacheStoreError(f"Redis clear failed: {exc}") from exc
        logger.info("cache.store.cleared", prefix=self._key_prefix, keys=len(keys))

    async def ping(self) -> bool:
        return bool(await self._client.ping())

    async def close(self) -> None:
        await self._client.aclose()
