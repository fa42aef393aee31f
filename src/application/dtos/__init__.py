"""
DTOs Package - Application Layer

This package contains Data Transfer Objects (DTOs) used for data exchange
between the application layer and the presentation layer.
"""

from .graph_config_dto import (
    ColorThresholdDTO,
    EntityConfigDTO,
    GraphConfigDTO,
    ShowConfigDTO,
    StateMapEntryDTO,
)
from .health_dto import (
    ApplicationInfoDTO,
    DependencyStatusDTO,
    EngineStatusDTO,
    SystemHealthDTO,
)
from .render_dto import (
    RefreshResponseDTO,
    RenderFrameDTO,
    TooltipDTO,
    TooltipRequestDTO,
)
from .state_dto import EntityStateDTO, StatesUpdateDTO, StatesUpdateResponseDTO

__all__ = [
    "ColorThresholdDTO",
    "EntityConfigDTO",
    "GraphConfigDTO",
    "ShowConfigDTO",
    "StateMapEntryDTO",
    "RenderFrameDTO",
    "TooltipDTO",
    "TooltipRequestDTO",
    "RefreshResponseDTO",
    "EntityStateDTO",
    "StatesUpdateDTO",
    "StatesUpdateResponseDTO",
    "SystemHealthDTO",
    "DependencyStatusDTO",
    "ApplicationInfoDTO",
    "EngineStatusDTO",
]
