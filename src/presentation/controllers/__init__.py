"""
Controllers Package - Presentation Layer

This package contains FastAPI controllers (routers) that handle
HTTP requests and responses. Controllers are responsible for
input validation, error handling, and mapping between API DTOs
and application layer use cases.
"""

from .graphs_controller import router as graphs_router
from .system_controller import router as system_router

__all__ = ["graphs_router", "system_router"]
