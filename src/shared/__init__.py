"""
Shared module - Cross-cutting concerns / Shared Layer

Constants, enums and logging setup used by every layer of the graph engine.
It must not depend on Infrastructure or Frameworks.
"""

from .consts import EnumCacheBackend, EnumEnvironment, EnumLogLevel
from .logging import configure_logging, get_logger, update_logging_from_settings

__all__ = [
    "EnumCacheBackend",
    "EnumEnvironment",
    "EnumLogLevel",
    "configure_logging",
    "get_logger",
    "update_logging_from_settings",
]
