from __future__ import annotations

import gzip

import pytest

from conftest import NOW, samples
from src.domain.entities.errors import CacheStoreError
from src.domain.entities.time_series import CacheRecord
from src.infrastructure.cache.memory_cache_store import MemoryCacheStore
from src.infrastructure.repositories.history_cache_repository import (
    HistoryCacheRepository,
    decode_record,
    encode_record,
    storage_key,
)


class _FailingWriteStore(MemoryCacheStore):
    def __init__(self, fail_clear: bool = False) -> None:
        super().__init__()
        self.fail_clear = fail_clear
        self.cleared = False

    async def set(self, key, value):
        raise CacheStoreError("quota exceeded")

    async def clear(self):
        if self.fail_clear:
            raise CacheStoreError("unavailable")
        self.cleared = True
        await super().clear()


class _FailingReadStore(MemoryCacheStore):
    async def get(self, key):
        raise CacheStoreError("unavailable")


def _record() -> CacheRecord:
    return CacheRecord(
        hours_to_show=24,
        last_fetched=NOW,
        data=samples((30, "21.5"), (20, "3"), (10, "on")),
    )


def test_compressed_encoding_is_gzipped_json() -> None:
    blob = encode_record(_record(), compressed=True)

    document = gzip.decompress(blob).decode("utf-8")
    assert document.startswith('{"hours_to_show":24.0')
    assert '"last_changed"' in document

    decoded = decode_record(blob, compressed=True)
    assert decoded.hours_to_show == 24
    assert decoded.last_fetched == NOW
    assert [sample.value for sample in decoded.data] == ["21.5", "3", "on"]


def test_numeric_states_are_persisted_as_strings() -> None:
    record = CacheRecord(hours_to_show=1, last_fetched=NOW, data=samples((20, 1), (10, 4.25)))

    document = encode_record(record, compressed=False).decode("utf-8")

    assert '"state":"1"' in document
    assert '"state":"4.25"' in document
    decoded = decode_record(document.encode("utf-8"), compressed=False)
    assert [sample.value for sample in decoded.data] == ["1", "4.25"]


def test_empty_record_roundtrip() -> None:
    record = CacheRecord(hours_to_show=1, last_fetched=NOW)

    decoded = decode_record(encode_record(record, compressed=False), compressed=False)

    assert decoded.data == []
    assert decoded.last_fetched == NOW


def test_storage_keys_keep_formats_apart() -> None:
    assert storage_key("sensor.a", True) == "sensor.a"
    assert storage_key("sensor.a", False) == "sensor.a-raw"


@pytest.mark.asyncio
async def test_repository_roundtrip(memory_store) -> None:
    repository = HistoryCacheRepository(memory_store)

    assert await repository.set("sensor.a", _record(), compressed=False) is True

    assert await repository.get("sensor.a", compressed=True) is None
    record = await repository.get("sensor.a", compressed=False)
    assert record.data == _record().data


@pytest.mark.asyncio
async def test_unreadable_blob_is_a_miss(memory_store) -> None:
    await memory_store.set("sensor.a", b"not gzip")
    await memory_store.set("sensor.b-raw", b"{broken")
    repository = HistoryCacheRepository(memory_store)

    assert await repository.get("sensor.a", compressed=True) is None
    assert await repository.get("sensor.b", compressed=False) is None


@pytest.mark.asyncio
async def test_store_read_failure_is_a_miss() -> None:
    repository = HistoryCacheRepository(_FailingReadStore())

    assert await repository.get("sensor.a", compressed=True) is None


@pytest.mark.asyncio
async def test_write_failure_clears_the_store() -> None:
    store = _FailingWriteStore()
    await MemoryCacheStore.set(store, "sensor.other", b"old")
    repository = HistoryCacheRepository(store)

    assert await repository.set("sensor.a", _record(), compressed=True) is False

    assert store.cleared is True
    assert len(store) == 0


@pytest.mark.asyncio
async def test_failed_clear_is_reported_not_raised() -> None:
    repository = HistoryCacheRepository(_FailingWriteStore(fail_clear=True))

    assert await repository.set("sensor.a", _record(), compressed=True) is False
