"""
Domain Errors

This module defines custom error classes for domain-specific exceptions.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class HistoryFetchError(DomainError):
    """Raised when the history source cannot deliver samples for an entity."""

    def __init__(
        self,
        entity_id: str,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.entity_id = entity_id
        message = f"History fetch for {entity_id} failed: {reason}"
        super().__init__(message, details)


class CacheStoreError(DomainError):
    """Raised when the blob store backing the history cache fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class GraphConfigurationError(DomainError):
    """Raised when a card configuration cannot drive the engine."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)

