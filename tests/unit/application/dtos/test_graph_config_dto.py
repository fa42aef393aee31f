from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.application.dtos.graph_config_dto import GraphConfigDTO
from src.domain.entities.chart import AggregateFunc, ChartType, FillMode, YAxis
from src.domain.entities.graph_config import DEFAULT_LINE_COLORS


def test_entity_strings_are_expanded() -> None:
    config = GraphConfigDTO.model_validate(
        {"entities": ["sensor.a", {"entity": "sensor.b", "y_axis": "secondary"}]}
    ).to_domain()

    assert config.entity_ids == ("sensor.a", "sensor.b")
    assert [entity.index for entity in config.entities] == [0, 1]
    assert config.entities[1].y_axis is YAxis.SECONDARY


def test_defaults() -> None:
    config = GraphConfigDTO.model_validate({"entities": ["sensor.a"]}).to_domain()

    assert config.hours_to_show == 24
    assert config.points_per_hour == 0.5
    assert config.aggregate_func is AggregateFunc.AVG
    assert config.line_color == DEFAULT_LINE_COLORS
    assert config.show.graph is ChartType.LINE
    assert config.show.fill is FillMode.SOLID
    assert config.cache is True
    assert len(config.state_map) == 0


def test_show_switches() -> None:
    config = GraphConfigDTO.model_validate(
        {
            "entities": ["sensor.a"],
            "show": {"graph": False, "fill": "fade", "points": "hover", "labels": False},
        }
    ).to_domain()

    assert config.show.graph is None
    assert config.show.fill is FillMode.FADE
    assert config.show.points is True
    assert config.show.labels is False

    no_fill = GraphConfigDTO.model_validate(
        {"entities": ["sensor.a"], "show": {"fill": False}}
    ).to_domain()
    assert no_fill.show.fill is FillMode.NONE


def test_state_map_and_line_color() -> None:
    config = GraphConfigDTO.model_validate(
        {
            "entities": ["binary_sensor.door"],
            "line_color": "#abcdef",
            "state_map": [{"value": 0, "label": "Closed"}, {"value": "on"}],
            "state_map_axis": "secondary",
        }
    ).to_domain()

    assert config.line_color == ("#abcdef",)
    assert config.state_map.entries[0].value == "0"
    assert config.state_map.entries[1].label == "on"
    assert config.state_map.axis is YAxis.SECONDARY
    assert config.entities[0].is_binary


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"entities": ["sensor.a"], "hours_to_show": 0},
        {"entities": ["sensor.a"], "points_per_hour": -1},
        {"entities": ["sensor.a"], "aggregate_func": "mode"},
        {"entities": ["sensor.a"], "show": {"graph": "pie"}},
    ],
)
def test_invalid_configurations_are_rejected(payload) -> None:
    with pytest.raises(ValidationError):
        GraphConfigDTO.model_validate(payload)


def test_unknown_entity_options_are_ignored() -> None:
    config = GraphConfigDTO.model_validate(
        {"entities": [{"entity": "sensor.a", "show_indicator": True, "state_adaptive_color": True}]}
    ).to_domain()

    entity = config.entities[0]
    assert entity.entity == "sensor.a"
    assert not hasattr(entity, "show_indicator")
    assert not hasattr(entity, "state_adaptive_color")
