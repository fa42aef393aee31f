"""
Path Builder

Turns scaled coordinates into SVG path descriptions, bar rectangles and
point descriptors.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from src.domain.entities.chart import Bar, Coordinate, FillPath, Point
from src.domain.services.state_formatter import format_number

XY = Tuple[float, float]

FADE_MASK_STOPS: Tuple[Tuple[float, float], ...] = ((0.0, 1.0), (100.0, 0.15))


def _pair(point: XY) -> str:
    return f"{format_number(point[0])},{format_number(point[1])}"


def _midpoint(a: XY, b: XY) -> XY:
    return ((a[0] - b[0]) / 2 + b[0], (a[1] - b[1]) / 2 + b[1])


def _as_points(coords: Sequence[Coordinate], right_edge: float) -> List[XY]:
    points = [(coord.x, coord.y) for coord in coords]
    if len(points) == 1:
        points.append((right_edge, points[0][1]))
    return points


def line_path(
    coords: Sequence[Coordinate], smoothing: bool, right_edge: float
) -> str:
    """
    Describe the line through ``coords``.

    Smoothed lines run through the midpoints between consecutive buckets using
    quadratic curves whose control points are the bucket points themselves.
    A single coordinate is stretched into a flat line ending at ``right_edge``.
    """
    points = _as_points(coords, right_edge)
    if not points:
        return ""

    segments = [f"M{_pair(points[0])}"]
    if not smoothing or len(points) == 2:
        segments.extend(f"L{_pair(point)}" for point in points[1:])
        return " ".join(segments)

    segments.append(f"L{_pair(_midpoint(points[0], points[1]))}")
    for index in range(1, len(points) - 1):
        control = points[index]
        target = _midpoint(points[index], points[index + 1])
        segments.append(f"Q{_pair(control)} {_pair(target)}")
    segments.append(f"L{_pair(points[-1])}")
    return " ".join(segments)


def fill_path(
    line: str,
    coords: Sequence[Coordinate],
    baseline: float,
    right_edge: float,
    fade: bool = False,
) -> Optional[FillPath]:
    """Close ``line`` down to ``baseline`` to describe the area below it."""
    if not line or not coords:
        return None
    first_x = coords[0].x
    last_x = coords[-1].x if len(coords) > 1 else right_edge
    path = (
        f"{line} L{_pair((last_x, baseline))} L{_pair((first_x, baseline))} Z"
    )
    return FillPath(path=path, fade=fade, mask_stops=FADE_MASK_STOPS if fade else ())


def bars(
    coords: Sequence[Coordinate],
    position: int,
    total: int,
    spacing: float,
    width: float,
    bottom: float,
) -> List[Bar]:
    """
    One rectangle per bucket.

    The available width is split into one column per bucket and each column
    is shared by ``total`` series; ``position`` selects this series' slot.
    """
    if not coords:
        return []
    total = max(total, 1)
    slot = ((width - spacing) / len(coords)) / total
    bar_width = max(slot - spacing, 0.0)
    return [
        Bar(
            x=slot * index * total + slot * position + spacing,
            y=coord.y,
            width=bar_width,
            height=max(bottom - coord.y, 0.0),
            value=coord.value,
            bucket_index=coord.bucket_index,
        )
        for index, coord in enumerate(coords)
    ]


def points(
    coords: Sequence[Coordinate],
    color_for: Optional[Callable[[float], str]] = None,
) -> List[Point]:
    return [
        Point(
            x=coord.x,
            y=coord.y,
            value=coord.value,
            bucket_index=coord.bucket_index,
            color=color_for(coord.value) if color_for else None,
        )
        for coord in coords
    ]
