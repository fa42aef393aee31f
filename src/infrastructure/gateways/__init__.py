"""
Gateways Package - Infrastructure Layer

This package contains concrete implementations of the gateway
interfaces defined in the domain layer. These implementations
handle the details of external service communications.
"""

from .home_assistant_history_gateway import HomeAssistantHistoryGateway

__all__ = ["HomeAssistantHistoryGateway"]
