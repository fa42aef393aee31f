"""
Graph Card - Application Layer

Mutable state of one card: the active configuration, one
``SeriesAggregator`` per configured entity, the latest live states, the
queue of entities waiting for a history refresh and the drawable output of
the last update cycle.

Only the update cycle and the tooltip use case mutate the drawable output;
configuration and state input only touch the graphs and the queue.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from src.domain.entities.chart import (
    Bar,
    Bound,
    Extremum,
    FillMode,
    FillPath,
    GradientStop,
    Point,
    RenderFrame,
    Tooltip,
    YAxis,
)
from src.domain.entities.errors import GraphConfigurationError
from src.domain.entities.graph_config import EntityConfig, GraphConfig
from src.domain.entities.time_series import EntityState
from src.domain.services.series_aggregator import SeriesAggregator
from src.shared import get_logger

logger = get_logger(__name__)

GRAPH_WIDTH = 500

Clock = Callable[[], datetime]


def _graph_shape(config: GraphConfig) -> tuple:
    """Options baked into the aggregators; any change requires new ones."""
    return (
        config.entities,
        config.hours_to_show,
        config.points_per_hour,
        config.aggregate_func,
        config.group_by,
        config.smoothing,
        config.height,
        config.line_width,
        config.show.fill,
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GraphCard:
    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock: Clock = clock or _utcnow
        self.config: Optional[GraphConfig] = None
        self.graphs: List[SeriesAggregator] = []
        self.states: List[Optional[EntityState]] = []
        self.update_queue: List[str] = []
        self.state_changed = False
        self.initial = True

        self.bound: Bound = (0.0, 0.0)
        self.bound_secondary: Bound = (0.0, 0.0)
        self.lines: Dict[int, str] = {}
        self.fills: Dict[int, FillPath] = {}
        self.bars: Dict[int, List[Bar]] = {}
        self.points: Dict[int, List[Point]] = {}
        self.gradients: Dict[int, List[GradientStop]] = {}
        self.extrema: List[Extremum] = []
        self.tooltip: Optional[Tooltip] = None
        self.sequence = 0
        self.frame: Optional[RenderFrame] = None

    @property
    def is_configured(self) -> bool:
        return self.config is not None

    def require_config(self) -> GraphConfig:
        if self.config is None:
            raise GraphConfigurationError("No graph configuration has been set")
        return self.config

    def set_config(self, config: GraphConfig) -> bool:
        """
        Apply a new configuration.

        Graphs are rebuilt when the entities or any option baked into the
        aggregators changed, or none exist yet;
        previously known states are then replayed so every entity gets queued.

        Returns:
            True when the graphs were rebuilt
        """
        if not config.entities:
            raise GraphConfigurationError("At least one entity must be configured")

        rebuild = (
            self.config is None
            or not self.graphs
            or _graph_shape(self.config) != _graph_shape(config)
        )
        known = [state for state in self.states if state is not None]
        self.config = config

        if not rebuild:
            logger.debug("graph_card.config.updated", entities=list(config.entity_ids))
            return False

        self.graphs = [self._build_graph(entity, config) for entity in config.entities]
        self.states = [None] * len(config.entities)
        self.update_queue = []
        self._reset_output()
        logger.info(
            "graph_card.config.rebuilt",
            entities=list(config.entity_ids),
            hours_to_show=config.hours_to_show,
            points_per_hour=config.points_per_hour,
        )
        if known:
            self.set_states(known)
        return True

    def _build_graph(self, entity: EntityConfig, config: GraphConfig) -> SeriesAggregator:
        fill = config.show.fill != FillMode.NONE
        smoothing = entity.smoothing
        if smoothing is None:
            smoothing = config.smoothing
        if smoothing is None:
            smoothing = not entity.is_binary
        return SeriesAggregator(
            width=GRAPH_WIDTH,
            height=config.height,
            margin=(0 if fill else config.line_width, config.line_width),
            hours_to_show=config.hours_to_show,
            points_per_hour=config.points_per_hour,
            aggregate_func=entity.aggregate_func or config.aggregate_func,
            group_by=config.group_by,
            smoothing=smoothing,
            fixed_value=entity.fixed_value,
            clock=self.clock,
        )

    def _reset_output(self) -> None:
        self.lines = {}
        self.fills = {}
        self.bars = {}
        self.points = {}
        self.gradients = {}
        self.extrema = []
        self.tooltip = None
        self.frame = None

    def set_states(self, states: Iterable[EntityState]) -> List[str]:
        """
        Record live states of configured entities.

        Returns:
            Ids of the entities whose state changed, already prepended to the
            update queue
        """
        config = self.require_config()
        by_id = {state.entity_id: state for state in states}
        queued: List[str] = []
        for index, entity in enumerate(config.entities):
            state = by_id.get(entity.entity)
            if state is None or self.states[index] == state:
                continue
            self.states[index] = state
            if entity.entity not in queued:
                queued.append(entity.entity)

        if queued:
            self.enqueue(queued)
            self.state_changed = True
        return queued

    def enqueue(self, entity_ids: Iterable[str]) -> None:
        """Prepend ``entity_ids`` to the update queue, keeping entries unique."""
        fresh = [entity_id for entity_id in entity_ids]
        self.update_queue = fresh + [
            entity_id for entity_id in self.update_queue if entity_id not in fresh
        ]

    def take_from_queue(self, entity_id: str) -> bool:
        if entity_id not in self.update_queue:
            return False
        self.update_queue = [entry for entry in self.update_queue if entry != entity_id]
        return True

    # helpers used by legends, bounds and labels

    @property
    def visible_entities(self) -> List[EntityConfig]:
        return [entity for entity in self.require_config().entities if entity.show_graph]

    @property
    def primary_entities(self) -> List[EntityConfig]:
        return [e for e in self.visible_entities if e.y_axis != YAxis.SECONDARY]

    @property
    def secondary_entities(self) -> List[EntityConfig]:
        return [e for e in self.visible_entities if e.y_axis == YAxis.SECONDARY]

    @property
    def visible_legends(self) -> List[EntityConfig]:
        return [e for e in self.require_config().entities if e.show_legend]

    def axis_of(self, index: int) -> YAxis:
        return self.require_config().entities[index].y_axis

    def is_state_axis(self, axis: YAxis) -> bool:
        config = self.require_config()
        return len(config.state_map) > 0 and config.state_map.axis == axis

    def series_for(self, axis: YAxis) -> List[SeriesAggregator]:
        entities = self.primary_entities if axis == YAxis.PRIMARY else self.secondary_entities
        return [self.graphs[entity.index] for entity in entities]

    def current_value(self, index: int = 0) -> Optional[str]:
        state = self.states[index] if index < len(self.states) else None
        return state.state if state is not None else None

    def snapshot(self, color: Optional[str] = None) -> RenderFrame:
        """Freeze the current output into a new ``RenderFrame``."""
        self.sequence += 1
        self.frame = RenderFrame(
            sequence=self.sequence,
            generated_at=self.clock(),
            bound=self.bound,
            bound_secondary=self.bound_secondary,
            lines=dict(self.lines),
            fills=dict(self.fills),
            bars={index: list(bars) for index, bars in self.bars.items()},
            points={index: list(points) for index, points in self.points.items()},
            gradients={index: list(stops) for index, stops in self.gradients.items()},
            extrema=list(self.extrema),
            color=color,
            tooltip=self.tooltip,
        )
        return self.frame

    def republish(self, color: Optional[str] = None) -> Optional[RenderFrame]:
        """Replace the tooltip part of the latest frame without a new cycle."""
        if self.frame is None:
            return None
        self.frame = replace(self.frame, tooltip=self.tooltip, color=color)
        return self.frame
