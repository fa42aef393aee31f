from __future__ import annotations

import pytest

from conftest import StubHistoryGateway, make_config, samples
from src.application.models.graph_card import GraphCard
from src.application.use_cases.entity_history_use_case import EntityHistoryUseCase
from src.application.use_cases.graph_update_use_case import GraphUpdateUseCase
from src.domain.entities.errors import HistoryFetchError
from src.domain.entities.time_series import EntityState
from src.infrastructure.repositories.history_cache_repository import HistoryCacheRepository

HISTORY = {
    "sensor.a": samples((60, 10), (30, 20), (0, 30)),
    "sensor.b": samples((45, 100), (15, 200)),
}


def _build(clock, memory_store, gateway=None, **config):
    card = GraphCard(clock=clock)
    config.setdefault("entities", ["sensor.a", "sensor.b"])
    card.set_config(make_config(**config))
    card.enqueue(card.config.entity_ids)
    gateway = gateway or StubHistoryGateway(HISTORY)
    history = EntityHistoryUseCase(gateway, HistoryCacheRepository(memory_store))
    return card, GraphUpdateUseCase(card, history), gateway


@pytest.mark.asyncio
async def test_cycle_produces_lines_for_every_entity(clock, memory_store) -> None:
    card, use_case, _ = _build(clock, memory_store)

    frame = await use_case.execute()

    assert frame.sequence == 1
    assert set(frame.lines) == {0, 1}
    assert set(frame.fills) == {0, 1}
    assert frame.bound == (15.0, 200.0)
    assert card.initial is False
    assert card.update_queue == []


@pytest.mark.asyncio
async def test_failed_entity_does_not_block_others(clock, memory_store) -> None:
    gateway = StubHistoryGateway(HISTORY)
    gateway.failing["sensor.b"] = HistoryFetchError("sensor.b", "HTTP 502")
    card, use_case, _ = _build(clock, memory_store, gateway)

    frame = await use_case.execute()

    assert list(frame.lines) == [0]
    assert frame.bound == (15.0, 25.0)
    assert card.update_queue == ["sensor.b"]

    gateway.failing.clear()
    frame = await use_case.execute()

    assert set(frame.lines) == {0, 1}
    assert frame.sequence == 2


@pytest.mark.asyncio
async def test_single_entity_line_matches_bucket_values(clock, memory_store) -> None:
    card, use_case, _ = _build(clock, memory_store, entities=["sensor.a"])

    frame = await use_case.execute()

    assert frame.lines[0] == "M0,140 L500,10"
    assert [coord.value for coord in card.graphs[0].coords] == [15.0, 25.0]


@pytest.mark.asyncio
async def test_secondary_axis_and_configured_bounds(clock, memory_store) -> None:
    card, use_case, _ = _build(
        clock,
        memory_store,
        entities=["sensor.a", {"entity": "sensor.b", "y_axis": "secondary"}],
        lower_bound=0,
    )

    frame = await use_case.execute()

    assert frame.bound == (0.0, 25.0)
    assert frame.bound_secondary == (100.0, 200.0)
    assert card.graphs[0].min == 0.0


@pytest.mark.asyncio
async def test_hidden_entities_are_neither_fetched_nor_drawn(clock, memory_store) -> None:
    card, use_case, gateway = _build(
        clock,
        memory_store,
        entities=["sensor.a", {"entity": "sensor.b", "show_graph": False}],
    )

    frame = await use_case.execute()

    assert [call["entity_id"] for call in gateway.calls] == ["sensor.a"]
    assert list(frame.lines) == [0]
    assert frame.bound == (15.0, 25.0)


@pytest.mark.asyncio
async def test_bar_mode_produces_bars_per_visible_entity(clock, memory_store) -> None:
    _, use_case, _ = _build(clock, memory_store, show={"graph": "bar"})

    frame = await use_case.execute()

    assert frame.lines == {}
    assert set(frame.bars) == {0, 1}
    assert frame.bars[0][0].x < frame.bars[1][0].x


@pytest.mark.asyncio
async def test_points_and_gradients_follow_thresholds(clock, memory_store) -> None:
    _, use_case, _ = _build(
        clock,
        memory_store,
        entities=["sensor.a", {"entity": "sensor.b", "color": "#000000"}],
        color_thresholds=[{"value": 20, "color": "#ff0000"}, {"value": 0, "color": "#0000ff"}],
        show={"points": True},
    )

    frame = await use_case.execute()

    assert set(frame.gradients) == {0}
    assert all(point.color for point in frame.points[0])
    assert all(point.color is None for point in frame.points[1])


@pytest.mark.asyncio
async def test_disabled_graph_still_publishes_frame(clock, memory_store) -> None:
    card, use_case, _ = _build(clock, memory_store, show={"graph": False})

    frame = await use_case.execute()

    assert frame.lines == {}
    assert frame.bars == {}
    assert card.graphs[0].coords == []


@pytest.mark.asyncio
async def test_header_color_uses_current_state(clock, memory_store) -> None:
    card, use_case, _ = _build(
        clock,
        memory_store,
        color_thresholds=[{"value": 20, "color": "#ff0000"}, {"value": 0, "color": "#0000ff"}],
    )
    card.set_states([EntityState(entity_id="sensor.a", state="25")])

    frame = await use_case.execute()

    assert frame.color == "#ff0000"
