"""
Cache package - Infrastructure Layer

Blob stores backing the history cache.
"""

from src.infrastructure.cache.memory_cache_store import MemoryCacheStore
from src.infrastructure.cache.redis_cache_store import RedisCacheStore

__all__ = ["MemoryCacheStore", "RedisCacheStore"]
