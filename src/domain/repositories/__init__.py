"""
Repositories Package

This package contains interfaces defining repository contracts
for data access operations. Specific implementations are provided
by the infrastructure layer.
"""

from .cache_store import ICacheStore
from .history_cache_repository import IHistoryCacheRepository

__all__ = ["ICacheStore", "IHistoryCacheRepository"]
