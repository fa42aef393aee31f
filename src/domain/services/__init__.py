"""
Domain Services Package

Pure computations of the graph engine: time windows, aggregation, bounds,
geometry, colors, cache merging and state formatting.
"""

from .bounds_calculator import axis_bound
from .history_merge import MergePlan, append_samples, plan_from_cache, prepare_fetched
from .series_aggregator import SeriesAggregator, summarize_history
from .state_formatter import format_number, format_state

__all__ = [
    "SeriesAggregator",
    "summarize_history",
    "axis_bound",
    "MergePlan",
    "plan_from_cache",
    "prepare_fetched",
    "append_samples",
    "format_number",
    "format_state",
]
