"""Periodic poller feeding live entity states into the update scheduler."""

from __future__ import annotations

import asyncio
from typing import List, Optional

import structlog

from src.domain.entities.errors import HistoryFetchError
from src.domain.entities.time_series import EntityState
from src.domain.gateways.history_gateway import IHistoryGateway
from src.infrastructure.services.update_scheduler import Sleep, UpdateScheduler

logger = structlog.get_logger(__name__)


class StateWatcher:
    """Polls the current state of every configured entity at a fixed period."""

    def __init__(
        self,
        history_gateway: IHistoryGateway,
        scheduler: UpdateScheduler,
        poll_seconds: float,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._history_gateway = history_gateway
        self._scheduler = scheduler
        self._poll_seconds = poll_seconds
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None

    @property
    def enabled(self) -> bool:
        return self._poll_seconds > 0

    async def poll_once(self) -> List[str]:
        """Fetch all states once and push them; returns the entity ids queued."""
        config = self._scheduler.card.config
        if config is None:
            return []

        results = await asyncio.gather(
            *(self._history_gateway.fetch_state(entity_id) for entity_id in config.entity_ids),
            return_exceptions=True,
        )
        states: List[EntityState] = []
        for entity_id, result in zip(config.entity_ids, results):
            if isinstance(result, HistoryFetchError):
                logger.warning("state.poll.failed", entity_id=entity_id, error=result.message)
            elif isinstance(result, BaseException):
                raise result
            elif result is None:
                logger.warning("state.poll.unknown_entity", entity_id=entity_id)
            else:
                states.append(result)

        if not states:
            return []
        return self._scheduler.push_states(states)

    def start(self) -> None:
        if not self.enabled or self._task is not None:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("state.watcher.started", poll_seconds=self._poll_seconds)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        logger.info("state.watcher.stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("state.watcher.poll_failed", error=str(e), exc_info=e)
            await self._sleep(self._poll_seconds)
