"""
Graphs Router - Presentation Layer

Endpoints feeding the engine (configuration, live states, hover position)
and exposing the latest render frame.
"""

from typing import List

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from src.application.dtos.graph_config_dto import GraphConfigDTO
from src.application.dtos.render_dto import (
    RefreshResponseDTO,
    RenderFrameDTO,
    TooltipRequestDTO,
)
from src.application.dtos.state_dto import StatesUpdateDTO, StatesUpdateResponseDTO
from src.application.models.graph_card import GraphCard
from src.application.use_cases.tooltip_use_case import TooltipUseCase
from src.domain.entities.errors import GraphConfigurationError
from src.infrastructure.services.update_scheduler import UpdateScheduler

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/graph", tags=["Graph"])


class ConfigResponseDTO(BaseModel):
    rebuilt: bool
    entities: List[str]


def _unprocessable(e: GraphConfigurationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)


def _no_frame() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="No render frame has been produced yet",
    )


@router.get("", response_model=RenderFrameDTO)
@inject
async def get_frame(
    card: GraphCard = Depends(Provide["graph_card"]),
) -> RenderFrameDTO:
    """Return the drawable output of the latest update cycle."""
    if card.frame is None:
        raise _no_frame()
    return RenderFrameDTO.from_domain(card.frame)


@router.put("/config", response_model=ConfigResponseDTO)
@inject
async def put_config(
    config_dto: GraphConfigDTO,
    scheduler: UpdateScheduler = Depends(Provide["update_scheduler"]),
) -> ConfigResponseDTO:
    """Replace the card configuration; entity changes rebuild every series."""
    config = config_dto.to_domain()
    try:
        rebuilt = await scheduler.apply_config(config)
    except GraphConfigurationError as e:
        logger.warning("graph.config.rejected", error=e.message)
        raise _unprocessable(e) from e
    return ConfigResponseDTO(rebuilt=rebuilt, entities=list(config.entity_ids))


@router.post("/states", response_model=StatesUpdateResponseDTO)
@inject
async def post_states(
    update: StatesUpdateDTO,
    scheduler: UpdateScheduler = Depends(Provide["update_scheduler"]),
) -> StatesUpdateResponseDTO:
    """Push live entity states; changed entities are queued for a history refresh."""
    try:
        queued = scheduler.push_states(state.to_domain() for state in update.states)
    except GraphConfigurationError as e:
        raise _unprocessable(e) from e
    return StatesUpdateResponseDTO(queued=queued)


@router.post("/refresh", response_model=RefreshResponseDTO)
@inject
async def refresh(
    scheduler: UpdateScheduler = Depends(Provide["update_scheduler"]),
) -> RefreshResponseDTO:
    """Run an update cycle for every entity unless one is already in flight."""
    try:
        frame = await scheduler.refresh()
    except GraphConfigurationError as e:
        raise _unprocessable(e) from e
    except Exception as e:
        logger.error("graph.refresh.failed", error=str(e), exc_info=e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e
    return RefreshResponseDTO(
        ran=frame is not None,
        sequence=frame.sequence if frame is not None else None,
    )


@router.post("/tooltip", response_model=RenderFrameDTO)
@inject
async def set_tooltip(
    request: TooltipRequestDTO,
    tooltip_use_case: TooltipUseCase = Depends(Provide["tooltip_use_case"]),
) -> RenderFrameDTO:
    """Describe the hovered bucket in the latest frame."""
    try:
        tooltip_use_case.set_tooltip(
            request.entity_index, request.bucket_index, request.value, request.label
        )
    except GraphConfigurationError as e:
        raise _unprocessable(e) from e
    frame = tooltip_use_case.publish()
    if frame is None:
        raise _no_frame()
    return RenderFrameDTO.from_domain(frame)


@router.delete("/tooltip", response_model=RenderFrameDTO)
@inject
async def clear_tooltip(
    tooltip_use_case: TooltipUseCase = Depends(Provide["tooltip_use_case"]),
) -> RenderFrameDTO:
    tooltip_use_case.clear_tooltip()
    try:
        frame = tooltip_use_case.publish()
    except GraphConfigurationError as e:
        raise _unprocessable(e) from e
    if frame is None:
        raise _no_frame()
    return RenderFrameDTO.from_domain(frame)
