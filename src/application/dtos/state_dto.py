"""DTOs for live entity states pushed to the engine."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from src.domain.entities.time_series import EntityState


class EntityStateDTO(BaseModel):
    """Live state of one entity, shaped like a Home Assistant state object."""

    entity_id: str
    state: str
    attributes: Dict[str, Any] = Field(default_factory=dict)
    last_changed: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def to_domain(self) -> EntityState:
        return EntityState(
            entity_id=self.entity_id,
            state=self.state,
            attributes=dict(self.attributes),
            last_changed=self.last_changed,
        )


class StatesUpdateDTO(BaseModel):
    states: List[EntityStateDTO] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "example": {
                "states": [
                    {
                        "entity_id": "sensor.living_room_temperature",
                        "state": "21.4",
                        "attributes": {"unit_of_measurement": "°C"},
                        "last_changed": "2025-01-10T08:15:00Z",
                    }
                ]
            }
        }
    }


class StatesUpdateResponseDTO(BaseModel):
    """Entities queued for a refresh after a state push."""

    queued: List[str] = Field(default_factory=list)
