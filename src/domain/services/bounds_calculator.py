"""Axis bound computation over the visible series of one axis."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from src.domain.entities.chart import Bound


class SeriesExtent(Protocol):
    min: float
    max: float
    coords: Sequence[object]


def axis_bound(
    series: Sequence[SeriesExtent],
    lower: Optional[float],
    upper: Optional[float],
    previous: Bound,
    state_map_size: Optional[int] = None,
) -> Bound:
    """
    Compute ``(min, max)`` for one axis.

    ``series`` must already be restricted to the visible entities drawn on the
    axis. Series without coordinates carry no data and are ignored. A
    configured bound always wins; a missing side falls back to the previous
    bound when no series holds data. ``state_map_size`` switches the axis to
    category mode.
    """
    if state_map_size is not None:
        return (0.0, float(max(state_map_size - 1, 0)))

    populated = [entry for entry in series if entry.coords]
    if lower is not None:
        low = float(lower)
    elif populated:
        low = min(entry.min for entry in populated)
    else:
        low = previous[0]

    if upper is not None:
        high = float(upper)
    elif populated:
        high = max(entry.max for entry in populated)
    else:
        high = previous[1]

    return (low, high)
