"""Time window arithmetic shared by aggregation, caching and tooltips."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import List, Tuple

from src.domain.entities.chart import GroupBy

ONE_HOUR = timedelta(hours=1)
ONE_MINUTE = timedelta(minutes=1)


def bucket_count(hours_to_show: float, points_per_hour: float) -> int:
    """Number of buckets in the window, rounded half up and never below one."""
    return max(1, math.floor(points_per_hour * hours_to_show + 0.5))


def end_anchor(now: datetime, group_by: GroupBy) -> datetime:
    """Instant used as the right edge of the display window."""
    if group_by == GroupBy.DATE:
        tomorrow = now + timedelta(days=1)
        return tomorrow.replace(hour=0, minute=0, second=0, microsecond=0)
    if group_by == GroupBy.HOUR:
        next_hour = now + ONE_HOUR
        return next_hour.replace(minute=0, second=0, microsecond=0)
    return now


def window_start(end: datetime, hours_to_show: float) -> datetime:
    return end - timedelta(hours=hours_to_show)


def bucket_bounds(
    end: datetime, hours_to_show: float, points_per_hour: float
) -> List[Tuple[datetime, datetime]]:
    """
    Split ``[end - hours_to_show, end]`` into equal, contiguous buckets.

    Each bucket ends exactly where the next one starts and the last bucket
    ends exactly at ``end``.
    """
    count = bucket_count(hours_to_show, points_per_hour)
    start = window_start(end, hours_to_show)
    width = timedelta(hours=hours_to_show) / count
    edges = [start + width * index for index in range(count)] + [end]
    return [(edges[index], edges[index + 1]) for index in range(count)]


def tooltip_offset_hours(hours_to_show: float, points_per_hour: float) -> float:
    """Width in hours attributed to one bucket when labelling a tooltip."""
    if hours_to_show < 1 and points_per_hour < 1:
        return points_per_hour * hours_to_show
    return 1 / points_per_hour


def refresh_interval(points_per_hour: float) -> timedelta:
    """Delay between two re-aggregations when no fixed interval is set."""
    return ONE_HOUR / points_per_hour
