"""
Graph Update Use Case

One update cycle of a card: refresh the queued entities concurrently,
re-bucket every series against the current window, recompute the axis
bounds and derive the drawable output.

Callers must not run two cycles of the same card at once; the update
scheduler provides that guarantee.
"""

from __future__ import annotations

import asyncio
from time import perf_counter
from typing import Dict, List, Set

from src.application.models.graph_card import GraphCard
from src.application.use_cases.entity_history_use_case import EntityHistoryUseCase
from src.domain.entities.chart import (
    Bar,
    ChartType,
    FillMode,
    FillPath,
    GradientStop,
    Point,
    RenderFrame,
    YAxis,
)
from src.domain.services import color_engine
from src.domain.services.bounds_calculator import axis_bound
from src.domain.services.time_window import end_anchor, window_start
from src.shared import get_logger

logger = get_logger(__name__)


class GraphUpdateUseCase:
    def __init__(self, card: GraphCard, history_use_case: EntityHistoryUseCase) -> None:
        self._card = card
        self._history_use_case = history_use_case

    @property
    def card(self) -> GraphCard:
        return self._card

    async def execute(self) -> RenderFrame:
        card = self._card
        config = card.require_config()
        started = perf_counter()

        end = end_anchor(card.clock(), config.group_by)
        start = window_start(end, config.hours_to_show)
        queued = list(card.update_queue)
        logger.info(
            "graph.cycle.started",
            queued=queued,
            start=start.isoformat(),
            end=end.isoformat(),
        )

        failed = await self._refresh_entities(start, end)

        if config.show.graph is not None:
            for index, graph in enumerate(card.graphs):
                if index not in failed:
                    graph.update()

        self._update_bounds()
        self._build_output()

        frame = card.snapshot(color=self.header_color())
        card.initial = False
        logger.info(
            "graph.cycle.finished",
            sequence=frame.sequence,
            failed=len(failed),
            duration_ms=round((perf_counter() - started) * 1000, 2),
        )
        return frame

    async def _refresh_entities(self, start, end) -> Set[int]:
        card = self._card
        indexes = list(range(len(card.graphs)))
        results = await asyncio.gather(
            *(
                self._history_use_case.execute(card, index, start, end)
                for index in indexes
            ),
            return_exceptions=True,
        )

        failed: Set[int] = set()
        for index, result in zip(indexes, results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                failed.add(index)
                logger.error(
                    "history.fetch.failed",
                    entity_id=card.config.entities[index].entity,
                    error=str(result),
                    exc_info=result,
                )
        return failed

    def _update_bounds(self) -> None:
        card = self._card
        config = card.require_config()
        state_map_size = len(config.state_map)

        card.bound = axis_bound(
            card.series_for(YAxis.PRIMARY),
            config.lower_bound,
            config.upper_bound,
            card.bound,
            state_map_size if card.is_state_axis(YAxis.PRIMARY) else None,
        )
        card.bound_secondary = axis_bound(
            card.series_for(YAxis.SECONDARY),
            config.lower_bound_secondary,
            config.upper_bound_secondary,
            card.bound_secondary,
            state_map_size if card.is_state_axis(YAxis.SECONDARY) else None,
        )

    def _build_output(self) -> None:
        card = self._card
        config = card.require_config()
        lines: Dict[int, str] = {}
        fills: Dict[int, FillPath] = {}
        bars: Dict[int, List[Bar]] = {}
        points: Dict[int, List[Point]] = {}
        gradients: Dict[int, List[GradientStop]] = {}

        if config.show.graph is not None:
            visible = len(card.visible_entities)
            position = 0
            for entity in config.entities:
                graph = card.graphs[entity.index]
                if not entity.show_graph or not graph.coords:
                    continue

                bound = card.bound_secondary if entity.y_axis == YAxis.SECONDARY else card.bound
                graph.min, graph.max = bound

                if config.show.graph == ChartType.BAR:
                    bars[entity.index] = graph.get_bars(position, visible, config.bar_spacing)
                    position += 1
                    continue

                line = graph.get_path()
                if entity.show_line:
                    lines[entity.index] = line
                if config.show.fill != FillMode.NONE and entity.show_fill:
                    fill = graph.get_fill(line, fade=config.show.fill == FillMode.FADE)
                    if fill is not None:
                        fills[entity.index] = fill

                gradient_active = bool(config.color_thresholds) and not entity.color
                if config.show.points and entity.show_points:
                    color_for = None
                    if gradient_active:
                        def color_for(value, index=entity.index):
                            return color_engine.int_color(value, index, config)
                    points[entity.index] = graph.get_points(color_for)
                if gradient_active:
                    gradients[entity.index] = graph.compute_gradient(config.color_thresholds)

        card.lines = lines
        card.fills = fills
        card.bars = bars
        card.points = points
        card.gradients = gradients

    def header_color(self) -> str:
        """Color of the card header: tooltip value if hovering, else current state."""
        card = self._card
        config = card.require_config()
        tooltip = card.tooltip
        index = tooltip.entity_index if tooltip is not None else 0
        state = tooltip.value if tooltip is not None else card.current_value(0)
        return color_engine.int_color(state, index, config)
