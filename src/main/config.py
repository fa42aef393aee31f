"""
Application Settings - Main Layer

Use Pydantic Settings for configuration management.
This module handles configuration settings provided using
environment variables, .env files and default values.
"""

import json
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.application.dtos.graph_config_dto import GraphConfigDTO
from src.shared import EnumCacheBackend, EnumEnvironment, EnumLogLevel


class ServiceSettings(BaseSettings):
    """HTTP service metadata and binding."""

    title: str = Field(default="Mini Graph Engine", description="Service title")
    description: str = Field(
        default="Time-series aggregation, caching and path generation "
        "for compact sensor graphs",
        description="Service description",
    )
    version: str = Field(default="1.0.0", description="Service version")
    git_commit: str = Field(
        default="unknown",
        description="Git commit hash",
        validation_alias=AliasChoices("SERVICE_GIT_COMMIT", "GIT_COMMIT"),
    )
    build_time: str = Field(
        default="unknown",
        description="Build timestamp",
        validation_alias=AliasChoices("SERVICE_BUILD_TIME", "BUILD_TIME"),
    )
    host: str = Field(default="0.0.0.0", description="Interface to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")
    reload: bool = Field(
        default=False, description="Enable auto-reload for development"
    )

    model_config = SettingsConfigDict(
        env_prefix="SERVICE_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class HistorySettings(BaseSettings):
    """History source (Home Assistant REST API) settings."""

    base_url: str = Field(
        default="http://localhost:8123", description="Base URL of the history source"
    )
    token: Optional[str] = Field(
        default=None, description="Long-lived access token sent as bearer token"
    )
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    state_poll_seconds: float = Field(
        default=0.0,
        ge=0,
        description="Period of live state polling; 0 disables the poller",
    )

    model_config = SettingsConfigDict(
        env_prefix="HISTORY_", case_sensitive=False, extra="ignore"
    )


class CacheSettings(BaseSettings):
    """History cache store settings."""

    backend: EnumCacheBackend = Field(
        default=EnumCacheBackend.MEMORY, description="Blob store backing the cache"
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0", description="Redis URL for the redis backend"
    )
    key_prefix: str = Field(
        default="graph-history:", description="Namespace of the cache keys in redis"
    )

    model_config = SettingsConfigDict(
        env_prefix="CACHE_", case_sensitive=False, extra="ignore"
    )


class GraphSettings(BaseSettings):
    """Card configuration loaded at startup."""

    config_file: Optional[Path] = Field(
        default=None,
        description="JSON card configuration; without it the card waits for PUT /graph/config",
    )

    model_config = SettingsConfigDict(
        env_prefix="GRAPH_", case_sensitive=False, extra="ignore"
    )

    def load(self) -> Optional[GraphConfigDTO]:
        if self.config_file is None:
            return None
        return GraphConfigDTO.model_validate(
            json.loads(self.config_file.read_text(encoding="utf-8"))
        )


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    service: ServiceSettings = Field(default_factory=ServiceSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    graph: GraphSettings = Field(default_factory=GraphSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Get application settings instance Factory.

    Used to be mocked in tests, allowing different settings based on enviroment.
    """
    return AppSettings()
