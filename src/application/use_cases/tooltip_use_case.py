"""Use case computing the hover tooltip of a card."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Union

from src.application.models.graph_card import GraphCard
from src.application.use_cases.graph_update_use_case import GraphUpdateUseCase
from src.domain.entities.chart import RenderFrame, Tooltip
from src.domain.entities.errors import GraphConfigurationError
from src.domain.services.state_formatter import format_state
from src.domain.services.time_window import (
    ONE_MINUTE,
    bucket_count,
    end_anchor,
    tooltip_offset_hours,
)

CURRENT_LABEL = "Current"
LEGEND_BUCKET = -1


def format_time(moment: datetime, hour24: bool) -> str:
    if hour24:
        return moment.strftime("%H:%M")
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


class TooltipUseCase:
    def __init__(self, card: GraphCard, graph_update_use_case: GraphUpdateUseCase) -> None:
        self._card = card
        self._graph_update_use_case = graph_update_use_case

    def set_tooltip(
        self,
        entity_index: int,
        bucket_index: int,
        value: Union[float, str],
        label: Optional[str] = None,
    ) -> Tooltip:
        """
        Describe the bucket under the pointer.

        The time range is counted back from the window end: the bucket
        ``reverse_index`` positions before the newest one, shortened by one
        minute on each side.
        """
        card = self._card
        config = card.require_config()
        if not 0 <= entity_index < len(config.entities):
            raise GraphConfigurationError(f"Unknown entity index {entity_index}")
        if bucket_index == LEGEND_BUCKET and label is None:
            label = CURRENT_LABEL

        offset = timedelta(
            hours=tooltip_offset_hours(config.hours_to_show, config.points_per_hour)
        )
        count = bucket_count(config.hours_to_show, config.points_per_hour)
        reverse_index = abs(bucket_index + 1 - count)

        range_end = end_anchor(card.clock(), config.group_by) - (
            offset * reverse_index + ONE_MINUTE
        )
        range_start = range_end - (offset - ONE_MINUTE)

        state_map = None
        if card.is_state_axis(card.axis_of(entity_index)):
            state_map = config.state_map
        display = format_state(value, config.decimals, state_map)

        card.tooltip = Tooltip(
            entity_index=entity_index,
            bucket_index=bucket_index,
            value=value if display is None else display,
            time_range=(
                format_time(range_start, config.hour24),
                format_time(range_end, config.hour24),
            ),
            label=label,
            reverse_index=reverse_index,
        )
        return card.tooltip

    def clear_tooltip(self) -> None:
        self._card.tooltip = None

    def publish(self) -> Optional[RenderFrame]:
        """Attach the current tooltip and header color to the latest frame."""
        return self._card.republish(color=self._graph_update_use_case.header_color())
