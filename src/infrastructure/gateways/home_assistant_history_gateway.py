"""
Infrastructure Gateway - Home Assistant History Implementation

This module implements the history gateway against the Home Assistant REST
API: ``/api/history/period`` for recorded states and ``/api/states`` for the
live state of an entity.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import structlog

from src.domain.entities.errors import HistoryFetchError
from src.domain.entities.time_series import EntityState, Sample
from src.domain.gateways.history_gateway import IHistoryGateway

logger = structlog.get_logger(__name__)


def _parse_instant(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_instant(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class HomeAssistantHistoryGateway(IHistoryGateway):
    """History gateway speaking the Home Assistant REST API over httpx."""

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 30.0):
        """
        Initialize the gateway.

        Args:
            base_url: Base URL of the Home Assistant instance (e.g., "http://homeassistant:8123")
            token: Long-lived access token sent as bearer token
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def fetch_history(
        self,
        entity_id: str,
        start: datetime,
        end: Optional[datetime] = None,
        skip_initial_state: bool = False,
    ) -> List[Sample]:
        """Fetch the recorded states of ``entity_id`` between ``start`` and ``end``."""

        url = f"{self.base_url}/api/history/period/{quote(_format_instant(start), safe='')}"
        params: Dict[str, str] = {"filter_entity_id": entity_id}
        if end is not None:
            params["end_time"] = _format_instant(end)
        if skip_initial_state:
            params["skip_initial_state"] = ""

        logger.debug(
            "history.fetch.request",
            url=url,
            entity_id=entity_id,
            skip_initial_state=skip_initial_state,
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params, headers=self._headers())
                response.raise_for_status()
                data = response.json()

        except httpx.HTTPStatusError as e:
            logger.error(
                "history.fetch.http_error",
                entity_id=entity_id,
                status_code=e.response.status_code,
                response_text=e.response.text,
            )
            raise HistoryFetchError(
                entity_id,
                f"HTTP {e.response.status_code}",
                {"response": e.response.text},
            ) from e

        except httpx.RequestError as e:
            logger.error("history.fetch.request_error", entity_id=entity_id, error=str(e))
            raise HistoryFetchError(entity_id, f"request failed: {e}") from e

        except ValueError as e:
            raise HistoryFetchError(entity_id, "response is not valid JSON") from e

        return self._parse_history(data, entity_id)

    def _parse_history(self, data: Any, entity_id: str) -> List[Sample]:
        """Flatten ``[[{state, last_changed, ...}, ...]]`` into samples."""

        if not isinstance(data, list):
            raise HistoryFetchError(entity_id, "unexpected history payload")
        if not data:
            return []

        entries = data[0]
        if not isinstance(entries, list):
            raise HistoryFetchError(entity_id, "unexpected history payload")

        samples: List[Sample] = []
        for entry in entries:
            state = entry.get("state") if isinstance(entry, dict) else None
            changed = entry.get("last_changed") if isinstance(entry, dict) else None
            if state is None or not changed:
                logger.warning("history.entry.incomplete", entity_id=entity_id, entry=entry)
                continue
            try:
                timestamp = _parse_instant(changed)
            except ValueError:
                logger.warning(
                    "history.entry.bad_timestamp", entity_id=entity_id, value=changed
                )
                continue
            samples.append(Sample(timestamp=timestamp, value=str(state)))

        samples.sort(key=lambda sample: sample.timestamp)
        logger.debug("history.fetch.parsed", entity_id=entity_id, count=len(samples))
        return samples

    async def fetch_state(self, entity_id: str) -> Optional[EntityState]:
        """Fetch the live state object of ``entity_id``."""

        url = f"{self.base_url}/api/states/{quote(entity_id, safe='')}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, headers=self._headers())
                if response.status_code == 404:
                    return None
                response.raise_for_status()
                data = response.json()

        except httpx.HTTPStatusError as e:
            logger.error(
                "history.state.http_error",
                entity_id=entity_id,
                status_code=e.response.status_code,
            )
            raise HistoryFetchError(
                entity_id, f"state request returned HTTP {e.response.status_code}"
            ) from e

        except httpx.RequestError as e:
            logger.error("history.state.request_error", entity_id=entity_id, error=str(e))
            raise HistoryFetchError(entity_id, f"state request failed: {e}") from e

        except ValueError as e:
            raise HistoryFetchError(entity_id, "state response is not valid JSON") from e

        changed = data.get("last_changed")
        return EntityState(
            entity_id=data.get("entity_id", entity_id),
            state=str(data.get("state")),
            attributes=dict(data.get("attributes") or {}),
            last_changed=_parse_instant(changed) if changed else datetime.now(timezone.utc),
        )
