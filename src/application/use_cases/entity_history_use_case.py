"""
Entity History Use Case

Brings the raw history of one tracked entity up to date: consult the cache,
fetch what is missing from the history source, merge, persist and hand the
result to the entity's aggregator.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from src.application.models.graph_card import GraphCard
from src.domain.entities.time_series import CacheRecord, Sample
from src.domain.gateways.history_gateway import IHistoryGateway
from src.domain.repositories.history_cache_repository import IHistoryCacheRepository
from src.domain.services.history_merge import (
    append_samples,
    plan_from_cache,
    prepare_fetched,
)
from src.domain.services.series_aggregator import summarize_history
from src.shared import get_logger

logger = get_logger(__name__)


class EntityHistoryUseCase:
    """Cache-aware history refresh for a single entity."""

    def __init__(
        self,
        history_gateway: IHistoryGateway,
        cache_repository: IHistoryCacheRepository,
    ) -> None:
        self._history_gateway = history_gateway
        self._cache_repository = cache_repository

    async def execute(
        self, card: GraphCard, index: int, start: datetime, end: datetime
    ) -> bool:
        """
        Refresh the history of entity ``index`` for the window ``[start, end]``.

        Entities that are hidden or not queued are left alone.

        Returns:
            True when the entity's aggregator received a new history

        Raises:
            HistoryFetchError: When the history source fails; the entity is
                put back on the queue and its aggregator keeps its history
        """
        config = card.require_config()
        entity = config.entities[index]
        if not entity.show_graph or not card.take_from_queue(entity.entity):
            return False

        cached: Optional[CacheRecord] = None
        if config.cache:
            cached = await self._cache_repository.get(entity.entity, config.use_compress)
        plan = plan_from_cache(cached, config.hours_to_show, start)

        try:
            fetched = await self._history_gateway.fetch_history(
                entity.entity,
                plan.fetch_start or start,
                end,
                skip_initial_state=plan.skip_initial_state,
            )
        except Exception:
            card.enqueue([entity.entity])
            raise

        history: List[Sample] = plan.data
        state_map = config.state_map if card.is_state_axis(entity.y_axis) else None
        prepared = prepare_fetched(fetched, state_map)
        if prepared:
            history = append_samples(history, prepared)
            if config.cache:
                await self._cache_repository.set(
                    entity.entity,
                    CacheRecord(
                        hours_to_show=config.hours_to_show,
                        last_fetched=card.clock(),
                        data=history,
                    ),
                    config.use_compress,
                )

        logger.debug(
            "history.entity.refreshed",
            entity_id=entity.entity,
            cached=len(plan.data),
            fetched=len(prepared),
            skip_initial_state=plan.skip_initial_state,
        )

        if not history:
            return False

        if index == 0:
            card.extrema = summarize_history(
                history, config.show.extrema, config.show.average
            )
        card.graphs[index].set_history(history)
        return True
