from __future__ import annotations

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.domain.entities.errors import CacheStoreError
from src.infrastructure.cache.memory_cache_store import MemoryCacheStore
from src.infrastructure.cache.redis_cache_store import RedisCacheStore


class _StubRedis:
    def __init__(self, fail: bool = False) -> None:
        self.data = {}
        self.fail = fail
        self.closed = False

    def _check(self) -> None:
        if self.fail:
            raise RedisConnectionError("connection refused")

    async def get(self, key):
        self._check()
        return self.data.get(key)

    async def set(self, key, value):
        self._check()
        self.data[key] = value

    async def scan_iter(self, match=None):
        self._check()
        prefix = match.rstrip("*")
        for key in list(self.data):
            if key.startswith(prefix):
                yield key

    async def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)

    async def ping(self):
        self._check()
        return True

    async def aclose(self):
        self.closed = True


@pytest.mark.asyncio
async def test_memory_store_roundtrip() -> None:
    store = MemoryCacheStore()

    await store.set("a", b"1")
    assert await store.get("a") == b"1"
    assert await store.get("missing") is None
    assert len(store) == 1

    await store.clear()
    assert len(store) == 0
    await store.close()


@pytest.mark.asyncio
async def test_redis_store_prefixes_keys() -> None:
    client = _StubRedis()
    client.data["other:key"] = b"foreign"
    store = RedisCacheStore("redis://localhost", key_prefix="graphs:", client=client)

    await store.set("sensor.a", b"blob")

    assert client.data["graphs:sensor.a"] == b"blob"
    assert await store.get("sensor.a") == b"blob"
    assert await store.ping() is True

    await store.clear()
    assert client.data == {"other:key": b"foreign"}

    await store.close()
    assert client.closed is True


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["get", "set", "clear"])
async def test_redis_errors_become_cache_store_errors(operation) -> None:
    store = RedisCacheStore("redis://localhost", client=_StubRedis(fail=True))

    with pytest.raises(CacheStoreError):
        if operation == "get":
            await store.get("sensor.a")
        elif operation == "set":
            await store.set("sensor.a", b"blob")
        else:
            await store.clear()
