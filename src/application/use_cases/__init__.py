"""
Use Cases Package - Application Layer

Orchestration of the graph engine: history refresh per entity, whole update
cycles, tooltips and the system endpoints.
"""

from .entity_history_use_case import EntityHistoryUseCase
from .graph_update_use_case import GraphUpdateUseCase
from .health_use_cases import GetApplicationInfoUseCase, GetHealthStatusUseCase
from .tooltip_use_case import TooltipUseCase

__all__ = [
    "EntityHistoryUseCase",
    "GraphUpdateUseCase",
    "TooltipUseCase",
    "GetHealthStatusUseCase",
    "GetApplicationInfoUseCase",
]
