"""
Logging Configuration - Shared Layer

structlog is layered over the standard ``logging`` module so that records from
third-party libraries and from the engine share one renderer: colored console
output while developing, one JSON object per line in production.
"""

import logging
import os
import sys
from typing import Any, List, Optional, Sequence

import structlog
from structlog.types import Processor

from src.shared.consts import NOISY_LOGGERS, EnumEnvironment


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    return handlers


def configure_logging(
    level: Optional[str] = None,
    file_path: Optional[str] = None,
    environment: str = EnumEnvironment.DEVELOPMENT.value,
    quiet_loggers: Sequence[str] = NOISY_LOGGERS,
) -> None:
    """
    Configure structlog and the root logger.

    Called once at import time of the application with values taken from
    ``LOG_LEVEL``/``LOG_FILE_PATH`` so that settings loading is already
    logged, then again through ``update_logging_from_settings``.

    Args:
        level: Log level name, defaults to ``LOG_LEVEL`` or INFO
        file_path: Optional file receiving a copy of every record
        environment: Application environment; production renders JSON
        quiet_loggers: Library loggers capped at WARNING
    """
    log_level = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    log_file = file_path or os.environ.get("LOG_FILE_PATH")
    numeric_level = getattr(logging, log_level, logging.INFO)

    renderer: Processor
    if environment.lower() == EnumEnvironment.PRODUCTION.value:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        ],
    )

    handlers = _build_handlers(log_file)
    for handler in handlers:
        handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.handlers = handlers
    root_logger.setLevel(numeric_level)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    get_logger(__name__).debug(
        "logging.configured", level=log_level, file_path=log_file
    )


def _enum_value(value: Any) -> Any:
    return value.value if hasattr(value, "value") else value


def update_logging_from_settings(settings: Any) -> None:
    """Re-apply the logging configuration from the loaded application settings."""
    configure_logging(
        level=_enum_value(settings.logging.level),
        file_path=settings.logging.file_path,
        environment=_enum_value(settings.environment),
    )
    get_logger(__name__).info(
        "logging.updated_from_settings",
        environment=_enum_value(settings.environment),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger configured for the project."""
    return structlog.get_logger(name)
