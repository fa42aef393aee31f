"""Domain entities for raw telemetry history and its cached form."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

SampleValue = Union[float, int, str]


def parse_numeric(value: Any) -> Optional[float]:
    """Parse a raw state into a finite float, or ``None`` when not numeric."""

    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


@dataclass(frozen=True, slots=True)
class Sample:
    """A single observation of an entity at an instant."""

    timestamp: datetime
    value: SampleValue

    @property
    def numeric(self) -> Optional[float]:
        return parse_numeric(self.value)

    def at(self, timestamp: datetime) -> "Sample":
        """Return a copy of this sample moved to ``timestamp``."""
        return replace(self, timestamp=timestamp)


@dataclass(slots=True)
class CacheRecord:
    """Cached history for one entity, valid for a specific display window."""

    hours_to_show: float
    last_fetched: datetime
    data: List[Sample] = field(default_factory=list)

    def is_valid_for(self, hours_to_show: float) -> bool:
        return self.hours_to_show == hours_to_show


@dataclass(slots=True)
class EntityState:
    """Live state snapshot of a tracked entity as published upstream."""

    entity_id: str
    state: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    last_changed: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def friendly_name(self) -> Optional[str]:
        return self.attributes.get("friendly_name")

    @property
    def unit_of_measurement(self) -> Optional[str]:
        return self.attributes.get("unit_of_measurement")
