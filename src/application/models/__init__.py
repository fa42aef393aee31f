"""Application models: state holders shared between use cases."""

from .graph_card import GraphCard
from .system_info import SystemInfo

__all__ = ["GraphCard", "SystemInfo"]
