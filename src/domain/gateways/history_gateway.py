"""
Domain Gateway - History Source

This module defines the gateway interface for reading recorded history and
live states of tracked entities from an external time-series source.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.domain.entities.time_series import EntityState, Sample


class IHistoryGateway(ABC):
    """Interface for history source gateways."""

    @abstractmethod
    async def fetch_history(
        self,
        entity_id: str,
        start: datetime,
        end: Optional[datetime] = None,
        skip_initial_state: bool = False,
    ) -> List[Sample]:
        """
        Fetch the recorded samples of one entity.

        Args:
            entity_id: Identifier of the tracked entity (e.g., "sensor.temperature")
            start: Inclusive start of the requested period
            end: End of the requested period, ``None`` means "until now"
            skip_initial_state: Do not prepend the synthetic sample describing
                the state in effect at ``start``

        Returns:
            Samples ordered ascending by timestamp; raw states are kept as
            strings so that state mapping can still be applied

        Raises:
            HistoryFetchError: When the source cannot be reached or answers
                with an unusable payload
        """
        pass

    @abstractmethod
    async def fetch_state(self, entity_id: str) -> Optional[EntityState]:
        """
        Fetch the live state of one entity.

        Returns:
            The state, or ``None`` when the source does not know the entity

        Raises:
            HistoryFetchError: When the source cannot be reached
        """
        pass

    async def close(self) -> None:
        """Release transport resources held by the gateway."""
        return None
