from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.application.dtos.graph_config_dto import GraphConfigDTO  # noqa: E402
from src.application.models.graph_card import GraphCard  # noqa: E402
from src.domain.entities.errors import HistoryFetchError  # noqa: E402
from src.domain.entities.graph_config import GraphConfig  # noqa: E402
from src.domain.entities.time_series import EntityState, Sample  # noqa: E402
from src.infrastructure.cache.memory_cache_store import MemoryCacheStore  # noqa: E402

NOW = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Callable clock returning a settable instant."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class StubHistoryGateway:
    """History gateway serving canned samples and recording every request."""

    def __init__(
        self,
        history: Optional[Dict[str, List[Sample]]] = None,
        states: Optional[Dict[str, EntityState]] = None,
    ) -> None:
        self.history = history or {}
        self.states = states or {}
        self.failing: Dict[str, Exception] = {}
        self.calls: List[dict] = []
        self.closed = False

    async def fetch_history(
        self,
        entity_id: str,
        start: datetime,
        end: Optional[datetime] = None,
        skip_initial_state: bool = False,
    ) -> List[Sample]:
        self.calls.append(
            {
                "entity_id": entity_id,
                "start": start,
                "end": end,
                "skip_initial_state": skip_initial_state,
            }
        )
        if entity_id in self.failing:
            raise self.failing[entity_id]
        return [
            sample
            for sample in self.history.get(entity_id, [])
            if sample.timestamp >= start and (end is None or sample.timestamp <= end)
        ]

    async def fetch_state(self, entity_id: str) -> Optional[EntityState]:
        if entity_id in self.failing:
            raise HistoryFetchError(entity_id, "unreachable")
        return self.states.get(entity_id)

    async def close(self) -> None:
        self.closed = True


def samples(*pairs: Sequence) -> List[Sample]:
    """Build samples from ``(minutes before NOW, value)`` pairs."""
    return [
        Sample(timestamp=NOW - timedelta(minutes=minutes), value=value)
        for minutes, value in pairs
    ]


def make_config(**overrides) -> GraphConfig:
    payload = {"entities": ["sensor.temperature"], "hours_to_show": 1, "points_per_hour": 2}
    payload.update(overrides)
    return GraphConfigDTO.model_validate(payload).to_domain()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def memory_store() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture()
def history_gateway() -> StubHistoryGateway:
    return StubHistoryGateway()


@pytest.fixture()
def graph_config() -> GraphConfig:
    return make_config()


@pytest.fixture()
def card(clock: FixedClock, graph_config: GraphConfig) -> GraphCard:
    graph_card = GraphCard(clock=clock)
    graph_card.set_config(graph_config)
    return graph_card
