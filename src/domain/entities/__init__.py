"""
Domain Entities Package

This package contains the value objects of the graph engine: raw history,
card configuration, drawable output and health information.
"""

from .chart import (
    AggregateFunc,
    Bar,
    Bound,
    ChartType,
    ColorThreshold,
    Coordinate,
    Extremum,
    FillMode,
    FillPath,
    GradientStop,
    GroupBy,
    Point,
    RenderFrame,
    StateMap,
    StateMapEntry,
    Tooltip,
    YAxis,
)
from .errors import (
    CacheStoreError,
    DomainError,
    GraphConfigurationError,
    HistoryFetchError,
)
from .graph_config import EntityConfig, GraphConfig, ShowConfig
from .health import (
    ApplicationInfo,
    DependencyStatus,
    EngineStatus,
    ServiceStatus,
    SystemHealth,
)
from .time_series import CacheRecord, EntityState, Sample, parse_numeric

__all__ = [
    "AggregateFunc",
    "Bar",
    "Bound",
    "ChartType",
    "ColorThreshold",
    "Coordinate",
    "Extremum",
    "FillMode",
    "FillPath",
    "GradientStop",
    "GroupBy",
    "Point",
    "RenderFrame",
    "StateMap",
    "StateMapEntry",
    "Tooltip",
    "YAxis",
    "EntityConfig",
    "GraphConfig",
    "ShowConfig",
    "Sample",
    "CacheRecord",
    "EntityState",
    "parse_numeric",
    "SystemHealth",
    "DependencyStatus",
    "ServiceStatus",
    "ApplicationInfo",
    "EngineStatus",
    "DomainError",
    "HistoryFetchError",
    "CacheStoreError",
    "GraphConfigurationError",
]
