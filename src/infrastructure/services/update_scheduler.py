"""
Update Scheduler - Infrastructure Layer

Decides when the update cycle of a card runs and guarantees that at most one
cycle is in flight at any time.

Triggers:
    * a fixed ``update_interval`` elapses and a state changed since the last
      cycle
    * without a fixed interval, a state change arrives; the first one after
      construction runs immediately, later ones are batched for one second
    * without a fixed interval, ``ONE_HOUR / points_per_hour`` elapses after
      the previous cycle
    * an explicit refresh request

Triggers arriving while a cycle runs only extend the card's update queue and
request one follow-up cycle. A configuration replacement waits for the running
cycle to finish before it touches the graphs.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Iterable, List, Optional

import structlog

from src.application.models.graph_card import GraphCard
from src.application.use_cases.graph_update_use_case import GraphUpdateUseCase
from src.domain.entities.chart import RenderFrame
from src.domain.entities.graph_config import GraphConfig
from src.domain.entities.time_series import EntityState
from src.domain.services.time_window import refresh_interval

logger = structlog.get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]

DEBOUNCE_SECONDS = 1.0


class SchedulerState(str, Enum):
    IDLE = "idle"
    UPDATING = "updating"
    SCHEDULED_REFRESH = "scheduled_refresh"


class UpdateScheduler:
    """Single-flight driver of ``GraphUpdateUseCase`` for one card."""

    def __init__(
        self,
        update_use_case: GraphUpdateUseCase,
        *,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._update_use_case = update_use_case
        self._debounce_seconds = debounce_seconds
        self._sleep = sleep
        self._updating = False
        self._follow_up = False
        self._disposed = False
        self._idle = asyncio.Event()
        self._idle.set()
        self._debounce_task: Optional[asyncio.Task] = None
        self._refresh_task: Optional[asyncio.Task] = None
        self._interval_task: Optional[asyncio.Task] = None

    @property
    def card(self) -> GraphCard:
        return self._update_use_case.card

    @property
    def state(self) -> SchedulerState:
        if self._updating:
            return SchedulerState.UPDATING
        if any(self._active(task) for task in self._timers()):
            return SchedulerState.SCHEDULED_REFRESH
        return SchedulerState.IDLE

    @property
    def is_updating(self) -> bool:
        return self._updating

    def _timers(self) -> List[Optional[asyncio.Task]]:
        return [self._debounce_task, self._refresh_task, self._interval_task]

    @staticmethod
    def _active(task: Optional[asyncio.Task]) -> bool:
        return task is not None and not task.done()

    # lifecycle

    def start(self) -> None:
        """Arm the timers matching the current configuration."""
        self._disposed = False
        config = self.card.config
        if config is None:
            logger.info("scheduler.start.unconfigured")
            return
        if config.update_interval:
            self._cancel(self._interval_task)
            self._interval_task = asyncio.create_task(
                self._interval_loop(config.update_interval)
            )
        else:
            self._arm_refresh()
        if self.card.update_queue:
            self._request_update()
        logger.info(
            "scheduler.started",
            update_interval=config.update_interval,
            points_per_hour=config.points_per_hour,
        )

    async def stop(self) -> None:
        """Cancel every timer; an in-flight cycle may finish but is not followed up."""
        self._disposed = True
        tasks = [task for task in self._timers() if self._active(task)]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._debounce_task = self._refresh_task = self._interval_task = None
        logger.info("scheduler.stopped")

    async def apply_config(self, config: GraphConfig) -> bool:
        """Replace the card configuration once no cycle is in flight, then re-arm the timers."""
        while self._updating:
            await self._idle.wait()
        rebuilt = self.card.set_config(config)
        if rebuilt:
            self.card.enqueue(config.entity_ids)
        await self.stop()
        self.start()
        return rebuilt

    # triggers

    def push_states(self, states: Iterable[EntityState]) -> List[str]:
        """Record live states and schedule a cycle for the entities that changed."""
        queued = self.card.set_states(states)
        if queued:
            config = self.card.require_config()
            if not config.update_interval:
                self._request_update()
        return queued

    async def refresh(self, entity_ids: Optional[Iterable[str]] = None) -> Optional[RenderFrame]:
        """
        Run a cycle now for ``entity_ids`` (all entities by default).

        Returns:
            The new frame, or None when a cycle was already in flight and the
            entities were only queued for the follow-up cycle
        """
        config = self.card.require_config()
        self.card.enqueue(entity_ids if entity_ids is not None else config.entity_ids)
        if self._updating:
            self._follow_up = True
            logger.info("scheduler.trigger.coalesced", queued=list(self.card.update_queue))
            return None
        return await self._run_cycle()

    def _request_update(self) -> None:
        if self._disposed:
            return
        if self._updating:
            self._follow_up = True
            logger.debug("scheduler.trigger.coalesced", queued=list(self.card.update_queue))
            return
        if self._active(self._debounce_task):
            return
        delay = 0.0 if self.card.initial else self._debounce_seconds
        self._debounce_task = asyncio.create_task(self._debounced(delay))

    async def _debounced(self, delay: float) -> None:
        await self._sleep(delay)
        self._debounce_task = None
        await asyncio.shield(self._run_cycle())

    async def _interval_loop(self, seconds: float) -> None:
        while True:
            card = self.card
            if card.state_changed and not self._updating:
                card.state_changed = False
                await asyncio.shield(self._run_cycle())
            await self._sleep(seconds)

    def _arm_refresh(self) -> None:
        config = self.card.config
        if self._disposed or config is None or config.update_interval:
            return
        self._cancel(self._refresh_task)
        delay = refresh_interval(config.points_per_hour).total_seconds()
        self._refresh_task = asyncio.create_task(self._refresh_after(delay))

    async def _refresh_after(self, delay: float) -> None:
        await self._sleep(delay)
        self._refresh_task = None
        await asyncio.shield(self._run_cycle())

    @staticmethod
    def _cancel(task: Optional[asyncio.Task]) -> None:
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    # cycle

    async def _run_cycle(self) -> Optional[RenderFrame]:
        if self._updating:
            self._follow_up = True
            logger.info("scheduler.trigger.skipped", reason="cycle in flight")
            return None

        self._updating = True
        self._idle.clear()
        self._follow_up = False
        frame: Optional[RenderFrame] = None
        try:
            frame = await self._update_use_case.execute()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("scheduler.cycle.failed", error=str(e), exc_info=e)
        finally:
            self._updating = False
            self._idle.set()

        self._arm_refresh()
        if self._follow_up and self.card.update_queue:
            self._follow_up = False
            self._request_update()
        return frame
