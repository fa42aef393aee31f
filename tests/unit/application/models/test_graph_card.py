from __future__ import annotations

from dataclasses import replace

import pytest

from conftest import NOW, make_config
from src.application.models.graph_card import GraphCard
from src.domain.entities.chart import Tooltip, YAxis
from src.domain.entities.errors import GraphConfigurationError
from src.domain.entities.time_series import EntityState


def _state(entity_id: str, value: str) -> EntityState:
    return EntityState(entity_id=entity_id, state=value, last_changed=NOW)


def test_unconfigured_card_rejects_input(clock) -> None:
    card = GraphCard(clock=clock)

    assert card.is_configured is False
    with pytest.raises(GraphConfigurationError):
        card.set_states([_state("sensor.temperature", "1")])


def test_config_without_entities_is_rejected(clock) -> None:
    card = GraphCard(clock=clock)
    config = replace(make_config(), entities=())

    with pytest.raises(GraphConfigurationError):
        card.set_config(config)


def test_set_config_builds_one_graph_per_entity(clock) -> None:
    card = GraphCard(clock=clock)

    rebuilt = card.set_config(make_config(entities=["sensor.a", "binary_sensor.b"]))

    assert rebuilt is True
    assert len(card.graphs) == 2
    assert card.graphs[0].smoothing is True
    assert card.graphs[1].smoothing is False
    assert card.graphs[0].hours_to_show == 1
    assert card.states == [None, None]


def test_smoothing_resolution_order(clock) -> None:
    card = GraphCard(clock=clock)
    card.set_config(
        make_config(
            entities=[{"entity": "binary_sensor.b", "smoothing": True}, "sensor.a"],
            smoothing=False,
        )
    )

    assert card.graphs[0].smoothing is True
    assert card.graphs[1].smoothing is False


def test_fill_changes_graph_margin(clock) -> None:
    card = GraphCard(clock=clock)
    card.set_config(make_config(show={"fill": False}, line_width=4))

    assert card.graphs[0].margin == (4, 4)
    assert card.graphs[0].width == 500 - 8


def test_cosmetic_change_keeps_graphs(card) -> None:
    graphs = list(card.graphs)

    rebuilt = card.set_config(make_config(hour24=True, decimals=1))

    assert rebuilt is False
    assert card.graphs == graphs
    assert card.config.hour24 is True


def test_window_change_rebuilds_and_replays_states(card) -> None:
    card.set_states([_state("sensor.temperature", "20")])
    card.update_queue = []

    rebuilt = card.set_config(make_config(hours_to_show=2))

    assert rebuilt is True
    assert card.graphs[0].hours_to_show == 2
    assert card.states[0].state == "20"
    assert card.update_queue == ["sensor.temperature"]


def test_set_states_queues_only_changes(card) -> None:
    queued = card.set_states([_state("sensor.temperature", "20"), _state("sensor.other", "1")])

    assert queued == ["sensor.temperature"]
    assert card.update_queue == ["sensor.temperature"]
    assert card.state_changed is True

    card.update_queue = []
    assert card.set_states([_state("sensor.temperature", "20")]) == []
    assert card.update_queue == []


def test_enqueue_prepends_unique_ids(card) -> None:
    card.update_queue = ["a", "b"]

    card.enqueue(["b", "c"])

    assert card.update_queue == ["b", "c", "a"]
    assert card.take_from_queue("c") is True
    assert card.take_from_queue("c") is False
    assert card.update_queue == ["b", "a"]


def test_axis_helpers(clock) -> None:
    card = GraphCard(clock=clock)
    card.set_config(
        make_config(
            entities=[
                "sensor.a",
                {"entity": "sensor.b", "y_axis": "secondary"},
                {"entity": "sensor.c", "show_graph": False, "show_legend": False},
            ],
            state_map=[{"value": "off"}, {"value": "on"}],
            state_map_axis="secondary",
        )
    )

    assert [entity.entity for entity in card.primary_entities] == ["sensor.a"]
    assert [entity.entity for entity in card.secondary_entities] == ["sensor.b"]
    assert [entity.entity for entity in card.visible_legends] == ["sensor.a", "sensor.b"]
    assert card.series_for(YAxis.SECONDARY) == [card.graphs[1]]
    assert card.is_state_axis(YAxis.SECONDARY) is True
    assert card.is_state_axis(YAxis.PRIMARY) is False


def test_snapshot_and_republish(card) -> None:
    assert card.republish() is None

    card.lines = {0: "M0,0 L1,1"}
    frame = card.snapshot(color="#ffffff")

    assert frame.sequence == 1
    assert frame.generated_at == NOW
    assert frame.lines == {0: "M0,0 L1,1"}

    card.lines[0] = "changed"
    card.tooltip = Tooltip(entity_index=0, bucket_index=0, value="1", time_range=("1:00 PM", "2:00 PM"))
    republished = card.republish(color="#000000")

    assert republished.sequence == 1
    assert republished.lines == {0: "M0,0 L1,1"}
    assert republished.tooltip is card.tooltip
    assert republished.color == "#000000"


def test_rebuild_drops_previous_frame(card) -> None:
    card.lines = {0: "M0,0 L1,1"}
    card.snapshot()

    card.set_config(make_config(hour24=True))
    assert card.frame is not None

    card.set_config(make_config(entities=["sensor.humidity"]))
    assert card.frame is None
    assert card.lines == {}
    assert card.republish() is None
