"""
Graph Configuration DTOs - Application Layer

Pydantic models parsing the card configuration (as pushed over HTTP or read
from the ``GRAPH_CONFIG_FILE`` JSON document) into the immutable domain
configuration. Only coercion and defaulting happen here.
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from src.domain.entities.chart import (
    AggregateFunc,
    ChartType,
    ColorThreshold,
    FillMode,
    GroupBy,
    StateMap,
    StateMapEntry,
    YAxis,
)
from src.domain.entities.graph_config import (
    DEFAULT_LINE_COLORS,
    EntityConfig,
    GraphConfig,
    ShowConfig,
)


class EntityConfigDTO(BaseModel):
    """Options of one tracked entity."""

    entity: str = Field(..., description="Entity identifier, e.g. sensor.temperature")
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

    def to_domain(self, index: int) -> EntityConfig:
        return EntityConfig(index=index, **self.model_dump())


class ColorThresholdDTO(BaseModel):
    value: float
    color: str


class StateMapEntryDTO(BaseModel):
    value: str
    label: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return str(value)


class ShowConfigDTO(BaseModel):
    """Display switches; ``graph: false`` disables drawing entirely."""

    graph: Union[Literal[False], ChartType] = ChartType.LINE
    fill: Union[bool, Literal["fade"]] = True
    points: Union[bool, Literal["hover"]] = "hover"
    extrema: bool = False
    average: bool = False
    labels: Union[bool, Literal["hover"]] = "hover"
    labels_secondary: Union[bool, Literal["hover"]] = "hover"
    legend: bool = True

    def to_domain(self) -> ShowConfig:
        if self.fill == "fade":
            fill = FillMode.FADE
        else:
            fill = FillMode.SOLID if self.fill else FillMode.NONE
        return ShowConfig(
            graph=self.graph or None,
            fill=fill,
            points=bool(self.points),
            extrema=self.extrema,
            average=self.average,
            labels=bool(self.labels),
            labels_secondary=bool(self.labels_secondary),
            legend=self.legend,
        )


class GraphConfigDTO(BaseModel):
    """Card configuration as accepted by ``PUT /graph/config``."""

    entities: List[EntityConfigDTO] = Field(..., description="Tracked entities")
    hours_to_show: float = Field(24, gt=0)
    points_per_hour: float = Field(0.5, gt=0)
    aggregate_func: AggregateFunc = AggregateFunc.AVG
    group_by: GroupBy = GroupBy.INTERVAL
    update_interval: Optional[float] = Field(
        default=None, gt=0, description="Fixed refresh period in seconds"
    )
    height: float = Field(150, gt=0)
    line_width: float = Field(5, ge=0)
    line_color: List[str] = Field(default_factory=lambda: list(DEFAULT_LINE_COLORS))
    color_thresholds: List[ColorThresholdDTO] = Field(default_factory=list)
    lower_bound: Optional[float] = None
    upper_bound: Optional[float] = None
    lower_bound_secondary: Optional[float] = None
    upper_bound_secondary: Optional[float] = None
    smoothing: Optional[bool] = None
    bar_spacing: float = Field(4, ge=0)
    decimals: Optional[int] = Field(default=None, ge=0)
    hour24: bool = False
    state_map: List[StateMapEntryDTO] = Field(default_factory=list)
    state_map_axis: YAxis = YAxis.PRIMARY
    cache: bool = True
    use_compress: bool = True
    show: ShowConfigDTO = Field(default_factory=ShowConfigDTO)

    @field_validator("entities", mode="before")
    @classmethod
    def _expand_entity_strings(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [{"entity": item} if isinstance(item, str) else item for item in value]
        return value

    @field_validator("line_color", mode="before")
    @classmethod
    def _single_line_color(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    def to_domain(self) -> GraphConfig:
        return GraphConfig(
            entities=tuple(
                entity.to_domain(index) for index, entity in enumerate(self.entities)
            ),
            hours_to_show=self.hours_to_show,
            points_per_hour=self.points_per_hour,
            aggregate_func=self.aggregate_func,
            group_by=self.group_by,
            update_interval=self.update_interval,
            height=self.height,
            line_width=self.line_width,
            line_color=tuple(self.line_color) or DEFAULT_LINE_COLORS,
            color_thresholds=tuple(
                ColorThreshold(value=item.value, color=item.color)
                for item in self.color_thresholds
            ),
            lower_bound=self.lower_bound,
            upper_bound=self.upper_bound,
            lower_bound_secondary=self.lower_bound_secondary,
            upper_bound_secondary=self.upper_bound_secondary,
            smoothing=self.smoothing,
            bar_spacing=self.bar_spacing,
            decimals=self.decimals,
            hour24=self.hour24,
            state_map=StateMap(
                entries=tuple(
                    StateMapEntry(value=item.value, label=item.label or item.value)
                    for item in self.state_map
                ),
                axis=self.state_map_axis,
            ),
            cache=self.cache,
            use_compress=self.use_compress,
            show=self.show.to_domain(),
        )

    model_config = {
        "json_schema_extra": {
            "example": {
                "entities": [
                    "sensor.living_room_temperature",
                    {"entity": "sensor.outside_temperature", "y_axis": "secondary"},
                ],
                "hours_to_show": 24,
                "points_per_hour": 2,
                "aggregate_func": "avg",
                "color_thresholds": [
                    {"value": 25, "color": "#f44336"},
                    {"value": 18, "color": "#ffc107"},
                    {"value": 0, "color": "#2196f3"},
                ],
                "show": {"graph": "line", "fill": "fade", "extrema": True},
            }
        }
    }
