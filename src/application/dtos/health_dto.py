"""DTOs for the /health and /info responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from src.domain.entities.health import (
    ApplicationInfo,
    DependencyStatus,
    EngineStatus,
    ServiceStatus,
    SystemHealth,
)


class DependencyStatusDTO(BaseModel):
    name: str = Field(description="history_source or cache")
    status: ServiceStatus
    message: Optional[str] = Field(default=None, description="Probe outcome")
    checked_at: datetime
    latency_ms: Optional[float] = Field(default=None, description="Probe latency in milliseconds")
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, status: DependencyStatus) -> "DependencyStatusDTO":
        return cls(
            name=status.name,
            status=status.status,
            message=status.message,
            checked_at=status.checked_at,
            latency_ms=status.latency_ms,
            details=status.details,
        )


class SystemHealthDTO(BaseModel):
    """Payload of GET /health."""

    status: ServiceStatus = Field(description="Worst status across dependencies")
    dependencies: List[DependencyStatusDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, health: SystemHealth) -> "SystemHealthDTO":
        return cls(
            status=health.status,
            dependencies=[DependencyStatusDTO.from_domain(dep) for dep in health.dependencies],
        )

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "up",
                "dependencies": [
                    {
                        "name": "history_source",
                        "status": "up",
                        "message": "HTTP 200",
                        "checked_at": "2025-01-10T08:00:00Z",
                        "latency_ms": 8.1,
                        "details": {"url": "http://homeassistant:8123/api/"},
                    },
                    {
                        "name": "cache",
                        "status": "up",
                        "message": "In-process cache store",
                        "checked_at": "2025-01-10T08:00:00Z",
                        "details": {"backend": "memory"},
                    },
                ],
            }
        }
    }


class EngineStatusDTO(BaseModel):
    configured: bool = Field(description="Whether a card configuration is loaded")
    entities: List[str] = Field(default_factory=list, description="Configured entity ids")
    queued: List[str] = Field(default_factory=list, description="Entities awaiting a history refresh")
    frames_published: int = Field(default=0, description="Render frames produced so far")
    last_frame_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, engine: EngineStatus) -> "EngineStatusDTO":
        return cls(
            configured=engine.configured,
            entities=list(engine.entities),
            queued=list(engine.queued),
            frames_published=engine.frames_published,
            last_frame_at=engine.last_frame_at,
        )


class ApplicationInfoDTO(BaseModel):
    """Payload of GET /info."""

    name: str
    description: str
    version: str
    environment: str
    git_commit: str
    build_time: str
    started_at: datetime
    uptime_seconds: float
    status: ServiceStatus
    engine: EngineStatusDTO
    dependencies: List[DependencyStatusDTO] = Field(default_factory=list)
    extras: Dict[str, Any] = Field(
        default_factory=dict,
        description="History source and cache settings",
    )

    @classmethod
    def from_domain(cls, info: ApplicationInfo) -> "ApplicationInfoDTO":
        return cls(
            name=info.name,
            description=info.description,
            version=info.version,
            environment=info.environment,
            git_commit=info.git_commit,
            build_time=info.build_time,
            started_at=info.started_at,
            uptime_seconds=info.uptime_seconds,
            status=info.status,
            engine=EngineStatusDTO.from_domain(info.engine),
            dependencies=[DependencyStatusDTO.from_domain(dep) for dep in info.dependencies],
            extras=info.extras,
        )
