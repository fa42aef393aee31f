from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from src.application.models import SystemInfo
from src.application.use_cases.health_use_cases import (
    GetApplicationInfoUseCase,
    GetHealthStatusUseCase,
    redact_url,
)
from src.domain.entities.health import DependencyStatus, ServiceStatus, SystemHealth


@dataclass
class _StubHealthService:
    health: SystemHealth

    async def evaluate(self) -> SystemHealth:
        return self.health


@pytest.mark.asyncio
async def test_get_health_status_use_case_returns_dto() -> None:
    dependencies = [
        DependencyStatus(name="history_source", status=ServiceStatus.UP),
        DependencyStatus(name="cache", status=ServiceStatus.DOWN),
    ]
    health = SystemHealth(status=ServiceStatus.DOWN, dependencies=dependencies)

    use_case = GetHealthStatusUseCase(health_check_service=_StubHealthService(health))

    dto = await use_case.execute()

    assert dto.status is ServiceStatus.DOWN
    assert len(dto.dependencies) == 2
    assert dto.dependencies[1].status is ServiceStatus.DOWN


@pytest.mark.asyncio
async def test_get_application_info_use_case_reports_engine_state(card) -> None:
    health = SystemHealth(
        status=ServiceStatus.UP,
        dependencies=[DependencyStatus(name="history_source", status=ServiceStatus.UP)],
    )
    system_info = SystemInfo(
        title="Mini Graph Engine",
        description="desc",
        version="1.2.3",
        environment="development",
        git_commit="abc1234",
        build_time="2025-01-09T10:00:00Z",
        history_url="http://homeassistant:8123",
        cache_backend="redis",
        redis_url="redis://:secret@redis:6379/0",
    )
    card.enqueue(["sensor.temperature"])
    started_at = datetime.now(timezone.utc) - timedelta(seconds=120)

    use_case = GetApplicationInfoUseCase(_StubHealthService(health), system_info, card)
    dto = await use_case.execute(started_at)

    assert dto.name == "Mini Graph Engine"
    assert abs(dto.uptime_seconds - 120) < 2
    assert dto.extras["cache"] == {"backend": "redis", "redis_url": "redis://redis:6379/0"}
    assert dto.extras["history"]["url"] == "http://homeassistant:8123"
    assert dto.engine.configured is True
    assert dto.engine.entities == ["sensor.temperature"]
    assert dto.engine.queued == ["sensor.temperature"]


def test_redact_url_keeps_urls_without_credentials() -> None:
    assert redact_url("") == ""
    assert redact_url("redis://localhost:6379/0") == "redis://localhost:6379/0"
    assert redact_url("redis://user:pw@cache/1") == "redis://cache/1"
