"""
Infrastructure Layer Package

This package contains implementations of interfaces defined in the
domain layer, dealing with external concerns such as the history source,
the cache store and timers.
"""

from src.infrastructure import cache, repositories

__all__ = ["cache", "repositories"]
