from __future__ import annotations

from datetime import timezone

from src.domain.entities.health import (
    DependencyStatus,
    EngineStatus,
    ServiceStatus,
    SystemHealth,
)


def test_dependency_status_defaults() -> None:
    status = DependencyStatus(name="history_source", status=ServiceStatus.UP)
    assert status.checked_at.tzinfo == timezone.utc
    assert status.details == {}


def test_system_health_container() -> None:
    dependency = DependencyStatus(name="cache", status=ServiceStatus.DOWN)
    health = SystemHealth(status=ServiceStatus.DEGRADED, dependencies=[dependency])
    assert health.dependencies[0] is dependency
    assert health.status is ServiceStatus.DEGRADED


def test_engine_status_defaults_to_idle() -> None:
    engine = EngineStatus(configured=False)
    assert engine.entities == []
    assert engine.queued == []
    assert engine.frames_published == 0
    assert engine.last_frame_at is None
