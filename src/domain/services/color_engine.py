"""
Color Engine

Maps scalar states onto colors using an ordered list of thresholds, either
discretely (first threshold below the state wins) or by interpolating between
the two thresholds that surround the state.

Thresholds are scanned in the order they are given. A threshold matches when
its value is strictly less than the state, so a state equal to a threshold
value belongs to the next threshold in the list.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

import matplotlib.colors as mcolors

from src.domain.entities.chart import ChartType, ColorThreshold, GradientStop
from src.domain.entities.graph_config import GraphConfig
from src.domain.entities.time_series import parse_numeric
from src.shared import get_logger

logger = get_logger(__name__)


def _first_below(state: float, thresholds: Sequence[ColorThreshold]) -> int:
    for index, threshold in enumerate(thresholds):
        if threshold.value < state:
            return index
    return -1


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator


def interpolate_color(start: str, end: str, factor: float) -> str:
    """Blend two colors channel-wise; ``factor`` 0 yields ``start``, 1 ``end``."""
    factor = min(max(factor, 0.0), 1.0)
    try:
        start_rgb = mcolors.to_rgb(start)
        end_rgb = mcolors.to_rgb(end)
    except ValueError:
        logger.debug("color.interpolate.unparsable", start=start, end=end)
        return start if factor < 0.5 else end

    blended = tuple(a + factor * (b - a) for a, b in zip(start_rgb, end_rgb))
    return mcolors.to_hex(blended)


def discrete_color(
    state: float, thresholds: Sequence[ColorThreshold]
) -> Optional[str]:
    """Color of the first threshold below ``state``, else of the last one."""
    if not thresholds:
        return None
    index = _first_below(state, thresholds)
    return thresholds[index].color


def interpolated_color(
    state: float, thresholds: Sequence[ColorThreshold]
) -> Optional[str]:
    """Color blended between the thresholds surrounding ``state``."""
    if not thresholds:
        return None

    index = _first_below(state, thresholds)
    if index > 0:
        lower = thresholds[index]
        upper = thresholds[index - 1]
        factor = _ratio(upper.value - state, upper.value - lower.value)
        return interpolate_color(upper.color, lower.color, factor)

    # above every threshold -> first color, below every threshold -> last color
    return thresholds[-1].color if index == -1 else thresholds[0].color


def _numeric_state(state: Any) -> float:
    number = parse_numeric(state)
    return number if number is not None else 0.0


def compute_color(state: Any, index: int, config: GraphConfig) -> str:
    """Discrete color of ``state`` for entity ``index``."""
    entity = config.entities[index]
    if entity.color:
        return entity.color
    color = discrete_color(_numeric_state(state), config.color_thresholds)
    return color or config.line_color_for(index)


def int_color(state: Any, index: int, config: GraphConfig) -> str:
    """Interpolated color of ``state`` for entity ``index``; bars stay discrete."""
    entity = config.entities[index]
    if entity.color:
        return entity.color

    color: Optional[str] = None
    if config.color_thresholds:
        value = _numeric_state(state)
        if config.show.graph == ChartType.BAR:
            color = discrete_color(value, config.color_thresholds)
        else:
            color = interpolated_color(value, config.color_thresholds)
    return color or config.line_color_for(index)


def gradient_stops(
    thresholds: Sequence[ColorThreshold], minimum: float, maximum: float
) -> List[GradientStop]:
    """
    Build vertical gradient stops for a series spanning ``[minimum, maximum]``.

    Offsets are percentages measured from the top (``maximum``). Thresholds
    outside the range are pinned to the edge and recolored to the color the
    range edge would get.
    """
    scale = maximum - minimum
    stops: List[GradientStop] = []

    for index, stop in enumerate(thresholds):
        color = stop.color
        following = thresholds[index + 1] if index + 1 < len(thresholds) else None
        previous = thresholds[index - 1] if index > 0 else None

        if stop.value > maximum and following is not None:
            factor = _ratio(maximum - following.value, stop.value - following.value)
            color = interpolate_color(following.color, stop.color, factor)
        elif stop.value < minimum and previous is not None:
            factor = _ratio(previous.value - minimum, previous.value - stop.value)
            color = interpolate_color(previous.color, stop.color, factor)

        if scale <= 0:
            offset = 0.0
        else:
            offset = min(max((maximum - stop.value) * (100 / scale), 0.0), 100.0)
        stops.append(GradientStop(color=color, offset=offset))

    return stops
