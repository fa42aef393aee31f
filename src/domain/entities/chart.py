"""
Domain Entities - Chart

Value objects describing the drawable output of the graph engine and the
enumerations that select its behaviour.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class AggregateFunc(str, Enum):
    """Policy used to collapse the samples of one bucket into a value."""

    AVG = "avg"
    MEDIAN = "median"
    MIN = "min"
    MAX = "max"
    FIRST = "first"
    LAST = "last"
    SUM = "sum"
    DELTA = "delta"


class GroupBy(str, Enum):
    """Anchor used as the end of the display window."""

    INTERVAL = "interval"
    HOUR = "hour"
    DATE = "date"


class ChartType(str, Enum):
    LINE = "line"
    BAR = "bar"


class FillMode(str, Enum):
    NONE = "none"
    SOLID = "solid"
    FADE = "fade"


class YAxis(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True, slots=True)
class ColorThreshold:
    """Breakpoint mapping states below ``value`` towards ``color``."""

    value: float
    color: str


@dataclass(frozen=True, slots=True)
class StateMapEntry:
    value: str
    label: str


@dataclass(frozen=True, slots=True)
class StateMap:
    """Discrete state mapping used to draw categorical entities."""

    entries: Tuple[StateMapEntry, ...] = ()
    axis: YAxis = YAxis.PRIMARY

    def __len__(self) -> int:
        return len(self.entries)

    def index_of(self, value: str) -> Optional[int]:
        for index, entry in enumerate(self.entries):
            if entry.value == value:
                return index
        return None


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Bucketed point of a series, ``y`` is filled in once bounds are known."""

    x: float
    y: float
    value: float
    bucket_index: int


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float
    value: float
    bucket_index: int
    color: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Bar:
    x: float
    y: float
    width: float
    height: float
    value: float
    bucket_index: int


@dataclass(frozen=True, slots=True)
class GradientStop:
    color: str
    offset: float


@dataclass(frozen=True, slots=True)
class FillPath:
    """Area under a line; ``fade`` requests a vertical opacity mask."""

    path: str
    fade: bool = False
    mask_stops: Tuple[Tuple[float, float], ...] = ()


@dataclass(frozen=True, slots=True)
class Extremum:
    """Min/avg/max information shown next to the graph."""

    type: str
    value: float
    timestamp: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class Tooltip:
    entity_index: int
    bucket_index: int
    value: Union[float, str]
    time_range: Tuple[str, str]
    label: Optional[str] = None
    reverse_index: int = 0


Bound = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class RenderFrame:
    """Everything the rendering layer needs to redraw one card."""

    sequence: int
    generated_at: datetime
    bound: Bound
    bound_secondary: Bound
    lines: Dict[int, str] = field(default_factory=dict)
    fills: Dict[int, FillPath] = field(default_factory=dict)
    bars: Dict[int, List[Bar]] = field(default_factory=dict)
    points: Dict[int, List[Point]] = field(default_factory=dict)
    gradients: Dict[int, List[GradientStop]] = field(default_factory=dict)
    extrema: List[Extremum] = field(default_factory=list)
    color: Optional[str] = None
    tooltip: Optional[Tooltip] = None
