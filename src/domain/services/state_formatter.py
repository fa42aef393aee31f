"""Formatting of raw and aggregated states for labels, legends and tooltips."""

from __future__ import annotations

from typing import Any, Optional, Union

from src.domain.entities.chart import StateMap
from src.domain.entities.time_series import parse_numeric
from src.shared import get_logger

logger = get_logger(__name__)


def format_number(value: float, precision: int = 2) -> str:
    """Render ``value`` rounded to ``precision`` without trailing zeros."""
    rounded = round(value, precision) + 0.0
    text = f"{rounded:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def lookup_state_label(value: Any, state_map: StateMap) -> Optional[str]:
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value < len(state_map.entries):
            return state_map.entries[value].label
        return None
    for entry in state_map.entries:
        if entry.value == value:
            return entry.label
    return None


def format_state(
    value: Union[str, float, int, None],
    decimals: Optional[int] = None,
    state_map: Optional[StateMap] = None,
) -> Optional[str]:
    """
    Format a state for display.

    When ``state_map`` is given (the value belongs to a category axis) the
    matching label is returned; a miss is logged and the value falls back to
    numeric formatting. Numeric strings may use a decimal comma.

    Returns:
        The formatted text, or ``None`` for values that are not numeric
    """
    if state_map is not None and len(state_map) > 0:
        label = lookup_state_label(value, state_map)
        if label is not None:
            return label
        logger.warning("state_map.lookup.miss", value=value)

    if isinstance(value, str):
        number = parse_numeric(value.replace(",", "."))
    else:
        number = parse_numeric(value)
    if number is None:
        return None

    if decimals is None or decimals < 0:
        return format_number(number, 2)
    return f"{round(number, decimals) + 0.0:.{decimals}f}"
