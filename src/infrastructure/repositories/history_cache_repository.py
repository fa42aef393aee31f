"""
History Cache Repository - Infrastructure Layer

Stores ``CacheRecord`` objects in a blob store as JSON documents of the form
``{hours_to_show, last_fetched, data: [{last_changed, state}, ...]}``.
Compressed records are gzipped and stored under the entity id, raw records
under ``<entity id>-raw`` so the two formats never collide.
"""

import gzip
from datetime import datetime
from typing import Any, List, Optional

import structlog
from pydantic import BaseModel, ValidationError, field_validator

from src.domain.entities.errors import CacheStoreError
from src.domain.entities.time_series import CacheRecord, Sample
from src.domain.repositories.cache_store import ICacheStore
from src.domain.repositories.history_cache_repository import IHistoryCacheRepository

logger = structlog.get_logger(__name__)

RAW_SUFFIX = "-raw"


class _SampleDocument(BaseModel):
    last_changed: datetime
    state: str

    @field_validator("state", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return str(value)


class _CacheDocument(BaseModel):
    hours_to_show: float
    last_fetched: datetime
    data: List[_SampleDocument] = []


def encode_record(record: CacheRecord, compressed: bool) -> bytes:
    document = _CacheDocument(
        hours_to_show=record.hours_to_show,
        last_fetched=record.last_fetched,
        data=[
            _SampleDocument(last_changed=sample.timestamp, state=sample.value)
            for sample in record.data
        ],
    )
    payload = document.model_dump_json().encode("utf-8")
    return gzip.compress(payload) if compressed else payload


def decode_record(blob: bytes, compressed: bool) -> CacheRecord:
    payload = gzip.decompress(blob) if compressed else blob
    document = _CacheDocument.model_validate_json(payload)
    return CacheRecord(
        hours_to_show=document.hours_to_show,
        last_fetched=document.last_fetched,
        data=[
            Sample(timestamp=item.last_changed, value=item.state)
            for item in document.data
        ],
    )


def storage_key(key: str, compressed: bool) -> str:
    return key if compressed else f"{key}{RAW_SUFFIX}"


class HistoryCacheRepository(IHistoryCacheRepository):
    """Best-effort history cache on top of an ``ICacheStore``."""

    def __init__(self, cache_store: ICacheStore) -> None:
        self._store = cache_store

    async def get(self, key: str, compressed: bool) -> Optional[CacheRecord]:
        try:
            blob = await self._store.get(storage_key(key, compressed))
        except CacheStoreError as e:
            logger.warning("cache.read.failed", key=key, error=e.message)
            return None
        if not blob:
            return None

        try:
            return decode_record(blob, compressed)
        except (OSError, EOFError, ValidationError, ValueError) as e:
            logger.warning("cache.record.unreadable", key=key, error=str(e))
            return None

    async def set(self, key: str, record: CacheRecord, compressed: bool) -> bool:
        try:
            await self._store.set(storage_key(key, compressed), encode_record(record, compressed))
            return True
        except CacheStoreError as e:
            logger.error("cache.write.failed", key=key, error=e.message, exc_info=e)

        try:
            await self._store.clear()
            logger.warning("cache.store.reset", key=key)
        except CacheStoreError as e:
            logger.error("cache.clear.failed", error=e.message, exc_info=e)
        return False
