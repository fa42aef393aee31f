from __future__ import annotations

from src.domain.entities.chart import Coordinate
from src.domain.services.path_builder import bars, fill_path, line_path, points


def _coords(*pairs):
    return [
        Coordinate(x=x, y=y, value=float(y), bucket_index=index)
        for index, (x, y) in enumerate(pairs)
    ]


def test_smoothed_line_runs_through_midpoints() -> None:
    path = line_path(_coords((0, 10), (10, 20), (20, 10)), True, 20)

    assert path == "M0,10 L5,15 Q10,20 15,15 L20,10"


def test_straight_line() -> None:
    path = line_path(_coords((0, 10), (10, 20), (20, 10)), False, 20)

    assert path == "M0,10 L10,20 L20,10"


def test_empty_line() -> None:
    assert line_path([], True, 100) == ""
    assert fill_path("", [], 10, 100) is None


def test_solid_fill_has_no_mask() -> None:
    coords = _coords((0, 10), (10, 20))
    fill = fill_path("M0,10 L10,20", coords, 30, 10)

    assert fill.path == "M0,10 L10,20 L10,30 L0,30 Z"
    assert fill.fade is False
    assert fill.mask_stops == ()


def test_bars_never_have_negative_size() -> None:
    result = bars(_coords((0, 10), (10, 200)), 0, 0, 4, 500, 100)

    assert len(result) == 2
    assert all(bar.width >= 0 and bar.height >= 0 for bar in result)
    assert result[0].width == 244
    assert result[1].height == 0


def test_points_without_color_callback() -> None:
    result = points(_coords((0, 10)))

    assert result[0].color is None
    assert result[0].bucket_index == 0
