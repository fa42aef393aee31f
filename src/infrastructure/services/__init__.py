"""Infrastructure services package."""

from .health_check_service import HealthCheckService
from .state_watcher import StateWatcher
from .update_scheduler import SchedulerState, UpdateScheduler

__all__ = ["HealthCheckService", "StateWatcher", "SchedulerState", "UpdateScheduler"]
