"""
Series Aggregator

Downsamples the raw history of one entity into a fixed number of time
buckets and produces the drawable geometry for it.
"""

from __future__ import annotations

import math
from bisect import bisect_left, bisect_right
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from src.domain.entities.chart import (
    AggregateFunc,
    Bar,
    ColorThreshold,
    Coordinate,
    Extremum,
    FillPath,
    GradientStop,
    GroupBy,
    Point,
)
from src.domain.entities.time_series import Sample
from src.domain.services import color_engine, path_builder
from src.domain.services.time_window import bucket_bounds, end_anchor

Clock = Callable[[], datetime]


def _delta(values: np.ndarray) -> float:
    return float(values[-1] - values[0])


AGGREGATORS: Dict[AggregateFunc, Callable[[np.ndarray], float]] = {
    AggregateFunc.AVG: lambda values: float(np.mean(values)),
    AggregateFunc.MEDIAN: lambda values: float(np.median(values)),
    AggregateFunc.MIN: lambda values: float(np.min(values)),
    AggregateFunc.MAX: lambda values: float(np.max(values)),
    AggregateFunc.FIRST: lambda values: float(values[0]),
    AggregateFunc.LAST: lambda values: float(values[-1]),
    AggregateFunc.SUM: lambda values: float(np.sum(values)),
    AggregateFunc.DELTA: _delta,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def numeric_samples(history: Sequence[Sample]) -> List[Tuple[datetime, float]]:
    """Timestamp/value pairs of the samples holding a finite number, in time order."""
    pairs = []
    for sample in history:
        value = sample.numeric
        if value is not None:
            pairs.append((sample.timestamp, value))
    pairs.sort(key=lambda pair: pair[0])
    return pairs


class SeriesAggregator:
    """
    Aggregation state of one tracked entity.

    ``coords`` holds one coordinate per bucket once ``update`` found numeric
    data, and is empty otherwise. ``min``/``max`` start as the extrema of the
    bucketed values and may be overridden with axis bounds before any
    geometry is requested.
    """

    def __init__(
        self,
        width: float,
        height: float,
        margin: Tuple[float, float],
        hours_to_show: float = 24,
        points_per_hour: float = 1,
        aggregate_func: AggregateFunc = AggregateFunc.AVG,
        group_by: GroupBy = GroupBy.INTERVAL,
        smoothing: bool = True,
        fixed_value: bool = False,
        clock: Optional[Clock] = None,
    ) -> None:
        self.margin = margin
        self.width = width - margin[0] * 2
        self.height = height - margin[1] * 4
        self.full_height = height
        self.hours_to_show = hours_to_show
        self.points_per_hour = points_per_hour
        self.aggregate_func = aggregate_func
        self.group_by = group_by
        self.smoothing = smoothing
        self.fixed_value = fixed_value
        self._aggregate = AGGREGATORS.get(aggregate_func, AGGREGATORS[AggregateFunc.AVG])
        self._clock = clock or _utcnow

        self.history: List[Sample] = []
        self.coords: List[Coordinate] = []
        self.min = 0.0
        self.max = 0.0
        self.end_time: Optional[datetime] = None

    @property
    def right_edge(self) -> float:
        return self.width + self.margin[0]

    @property
    def baseline(self) -> float:
        """Vertical position of the axis minimum."""
        return self.height + self.margin[1] * 2

    def set_history(self, history: Sequence[Sample]) -> None:
        """Replace the raw history, collapsing it for fixed-value entities."""
        history = list(history)
        if self.fixed_value and history:
            history = [history[0], history[-1]]
        self.history = history

    def update(self, history: Optional[Sequence[Sample]] = None) -> None:
        """Rebuild ``coords`` from the raw history against the current window."""
        if history is not None:
            self.set_history(history)

        samples = numeric_samples(self.history)
        if not samples:
            self.coords = []
            return

        self.end_time = end_anchor(self._clock(), self.group_by)
        if self.fixed_value:
            values = [samples[0][1], samples[-1][1]]
        else:
            values = self._bucket_values(samples, self.end_time)

        self.coords = self._place(values)
        self.min = min(values)
        self.max = max(values)

    def _bucket_values(
        self, samples: List[Tuple[datetime, float]], end: datetime
    ) -> List[float]:
        bounds = bucket_bounds(end, self.hours_to_show, self.points_per_hour)
        start = bounds[0][0]

        # only the latest sample from before the window survives, moved to its start
        first_inside = bisect_left([ts for ts, _ in samples], start)
        if first_inside > 0:
            samples = [(start, samples[first_inside - 1][1])] + samples[first_inside:]

        timestamps = [ts for ts, _ in samples]
        values = np.array([value for _, value in samples], dtype=float)

        bucketed: List[Optional[float]] = []
        for bucket_start, bucket_end in bounds:
            lo = bisect_left(timestamps, bucket_start)
            hi = bisect_right(timestamps, bucket_end)
            bucketed.append(self._aggregate_slice(values[lo:hi]))

        return self._carry_forward(bucketed)

    def _aggregate_slice(self, values: np.ndarray) -> Optional[float]:
        if values.size == 0:
            return None
        with np.errstate(all="ignore"):
            result = self._aggregate(values)
        return result if math.isfinite(result) else None

    @staticmethod
    def _carry_forward(bucketed: List[Optional[float]]) -> List[float]:
        seed = next((value for value in bucketed if value is not None), 0.0)
        filled: List[float] = []
        last = seed
        for value in bucketed:
            if value is not None:
                last = value
            filled.append(last)
        return filled

    def _place(self, values: List[float]) -> List[Coordinate]:
        count = len(values)
        x_ratio = self.width / (count - 1) if count > 1 else self.width
        return [
            Coordinate(
                x=x_ratio * index + self.margin[0],
                y=0.0,
                value=value,
                bucket_index=index,
            )
            for index, value in enumerate(values)
        ]

    def scaled_coords(self) -> List[Coordinate]:
        """``coords`` with ``y`` scaled between the current ``min`` and ``max``."""
        y_ratio = (self.max - self.min) / self.height if self.height else 0.0
        if not y_ratio or not math.isfinite(y_ratio):
            y_ratio = 1.0
        return [
            Coordinate(
                x=coord.x,
                y=self.height - (coord.value - self.min) / y_ratio + self.margin[1] * 2,
                value=coord.value,
                bucket_index=coord.bucket_index,
            )
            for coord in self.coords
        ]

    def get_path(self) -> str:
        return path_builder.line_path(
            self.scaled_coords(), self.smoothing, self.right_edge
        )

    def get_fill(self, path: str, fade: bool = False) -> Optional[FillPath]:
        return path_builder.fill_path(
            path, self.coords, self.baseline, self.right_edge, fade=fade
        )

    def get_points(
        self, color_for: Optional[Callable[[float], str]] = None
    ) -> List[Point]:
        return path_builder.points(self.scaled_coords(), color_for)

    def get_bars(self, position: int, total: int, spacing: float = 4) -> List[Bar]:
        return path_builder.bars(
            self.scaled_coords(),
            position,
            total,
            spacing,
            self.width,
            self.full_height,
        )

    def compute_gradient(
        self, thresholds: Sequence[ColorThreshold]
    ) -> List[GradientStop]:
        return color_engine.gradient_stops(thresholds, self.min, self.max)


def summarize_history(
    history: Sequence[Sample], extrema: bool, average: bool
) -> List[Extremum]:
    """Min/avg/max of the raw numeric history, in that display order."""
    samples = numeric_samples(history)
    if not samples or not (extrema or average):
        return []

    summary: List[Extremum] = []
    low = min(samples, key=lambda pair: pair[1])
    high = max(samples, key=lambda pair: pair[1])
    if extrema:
        summary.append(Extremum(type="min", value=low[1], timestamp=low[0]))
    if average:
        mean = float(np.mean([value for _, value in samples]))
        summary.append(Extremum(type="avg", value=mean))
    if extrema:
        summary.append(Extremum(type="max", value=high[1], timestamp=high[0]))
    return summary
