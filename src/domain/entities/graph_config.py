"""
Domain Entities - Graph Configuration

Immutable card configuration consumed by the graph engine. Parsing and
defaulting happen in the application DTOs; these objects only carry values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from src.domain.entities.chart import (
    AggregateFunc,
    ChartType,
    ColorThreshold,
    FillMode,
    GroupBy,
    StateMap,
    YAxis,
)

DEFAULT_LINE_COLORS: Tuple[str, ...] = (
    "#03a9f4",
    "#ff9800",
    "#4caf50",
    "#e91e63",
    "#9c27b0",
    "#00bcd4",
    "#ffc107",
    "#795548",
)


@dataclass(frozen=True, slots=True)
class EntityConfig:
    """Per-entity options; ``None`` means "inherit from the card"."""

    entity: str
    index: int = 0
    name: Optional[str] = None
    color: Optional[str] = None
    unit: Optional[str] = None
    aggregate_func: Optional[AggregateFunc] = None
    smoothing: Optional[bool] = None
    y_axis: YAxis = YAxis.PRIMARY
    show_graph: bool = True
    show_line: bool = True
    show_fill: bool = True
    show_points: bool = True
    show_legend: bool = True
    show_state: bool = False
    fixed_value: bool = False

    @property
    def is_binary(self) -> bool:
        return self.entity.startswith("binary_sensor.")


@dataclass(frozen=True, slots=True)
class ShowConfig:
    graph: Optional[ChartType] = ChartType.LINE
    fill: FillMode = FillMode.SOLID
    points: bool = False
    extrema: bool = False
    average: bool = False
    labels: bool = False
    labels_secondary: bool = False
    legend: bool = True


@dataclass(frozen=True, slots=True)
class GraphConfig:
    """Card level configuration for one set of tracked entities."""

    entities: Tuple[EntityConfig, ...]
    hours_to_show: float = 24
    points_per_hour: float = 0.5
    aggregate_func: AggregateFunc = AggregateFunc.AVG
    group_by: GroupBy = GroupBy.INTERVAL
    update_interval: Optional[float] = None
    height: float = 150
    line_width: float = 5
    line_color: Tuple[str, ...] = DEFAULT_LINE_COLORS
    color_thresholds: Tuple[ColorThreshold, ...] = ()
    lower_bound: Optional[float] = None
    upper_bound: Optional[float] = None
    lower_bound_secondary: Optional[float] = None
    upper_bound_secondary: Optional[float] = None
    smoothing: Optional[bool] = None
    bar_spacing: float = 4
    decimals: Optional[int] = None
    hour24: bool = False
    state_map: StateMap = field(default_factory=StateMap)
    cache: bool = True
    use_compress: bool = True
    show: ShowConfig = field(default_factory=ShowConfig)

    @property
    def entity_ids(self) -> Tuple[str, ...]:
        return tuple(entity.entity for entity in self.entities)

    def line_color_for(self, index: int) -> str:
        if index < len(self.line_color):
            return self.line_color[index]
        return self.line_color[0]
