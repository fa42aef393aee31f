"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the application.
"""

from contextlib import asynccontextmanager

from dependency_injector import containers, providers

from src.application.models import GraphCard, SystemInfo
from src.application.use_cases.entity_history_use_case import EntityHistoryUseCase
from src.application.use_cases.graph_update_use_case import GraphUpdateUseCase
from src.application.use_cases.health_use_cases import (
    GetApplicationInfoUseCase,
    GetHealthStatusUseCase,
)
from src.application.use_cases.tooltip_use_case import TooltipUseCase
from src.infrastructure.cache import MemoryCacheStore, RedisCacheStore
from src.infrastructure.gateways.home_assistant_history_gateway import (
    HomeAssistantHistoryGateway,
)
from src.infrastructure.repositories.history_cache_repository import (
    HistoryCacheRepository,
)
from src.infrastructure.services.health_check_service import HealthCheckService
from src.infrastructure.services.state_watcher import StateWatcher
from src.infrastructure.services.update_scheduler import UpdateScheduler
from src.shared import get_logger

from .config import AppSettings, GraphSettings

logger = get_logger(__name__)


def _enum_value(value):
    return value.value if hasattr(value, "value") else str(value)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependecy-injector."""

    wiring_config = containers.WiringConfiguration(
        packages=["..presentation", "..application"]
    )

    # Settings
    config = providers.Configuration()

    graph_settings = providers.Factory(
        GraphSettings,
        config_file=config.graph.config_file,
    )

    # Infrastructure
    cache_store = providers.Selector(
        providers.Callable(_enum_value, config.cache.backend),
        memory=providers.Singleton(MemoryCacheStore),
        redis=providers.Singleton(
            RedisCacheStore,
            redis_url=config.cache.redis_url,
            key_prefix=config.cache.key_prefix,
        ),
    )

    history_cache_repository = providers.Singleton(
        HistoryCacheRepository,
        cache_store=cache_store,
    )

    # Gateways
    history_gateway = providers.Singleton(
        HomeAssistantHistoryGateway,
        base_url=config.history.base_url,
        token=config.history.token,
        timeout=config.history.timeout,
    )

    # Application
    graph_card = providers.Singleton(GraphCard)

    entity_history_use_case = providers.Factory(
        EntityHistoryUseCase,
        history_gateway=history_gateway,
        cache_repository=history_cache_repository,
    )

    graph_update_use_case = providers.Singleton(
        GraphUpdateUseCase,
        card=graph_card,
        history_use_case=entity_history_use_case,
    )

    tooltip_use_case = providers.Factory(
        TooltipUseCase,
        card=graph_card,
        graph_update_use_case=graph_update_use_case,
    )

    update_scheduler = providers.Singleton(
        UpdateScheduler,
        update_use_case=graph_update_use_case,
    )

    state_watcher = providers.Singleton(
        StateWatcher,
        history_gateway=history_gateway,
        scheduler=update_scheduler,
        poll_seconds=config.history.state_poll_seconds,
    )

    health_check_service = providers.Singleton(
        HealthCheckService,
        history_url=config.history.base_url,
        cache_backend=providers.Callable(_enum_value, config.cache.backend),
        redis_url=config.cache.redis_url,
        history_token=config.history.token,
    )

    system_info = providers.Singleton(
        SystemInfo,
        title=config.service.title,
        description=config.service.description,
        version=config.service.version,
        environment=providers.Callable(_enum_value, config.environment),
        git_commit=config.service.git_commit,
        build_time=config.service.build_time,
        history_url=config.history.base_url,
        cache_backend=providers.Callable(_enum_value, config.cache.backend),
        redis_url=config.cache.redis_url,
    )

    get_health_status_use_case = providers.Factory(
        GetHealthStatusUseCase,
        health_check_service=health_check_service,
    )

    get_application_info_use_case = providers.Factory(
        GetApplicationInfoUseCase,
        health_check_service=health_check_service,
        system_info=system_info,
        card=graph_card,
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container


@asynccontextmanager
async def app_lifespan():
    """
    Centralized lifecycle management for the engine.

    Loads the startup card configuration when one is configured, starts the
    update scheduler and the optional state poller, and on shutdown cancels
    every timer before closing the gateway and cache clients.
    """
    container = get_container()

    scheduler = container.update_scheduler()
    watcher = container.state_watcher()
    history_gateway = container.history_gateway()
    cache_store = container.cache_store()

    try:
        graph_config = container.graph_settings().load()
        if graph_config is not None:
            await scheduler.apply_config(graph_config.to_domain())
            logger.info("container.graph_config.loaded")
        else:
            logger.info("container.graph_config.awaiting")
            scheduler.start()

        watcher.start()
        logger.info("container.resources.initialized")
        yield container

    finally:
        await watcher.stop()
        await scheduler.stop()
        await history_gateway.close()
        await cache_store.close()
        logger.info("container.resources.shutdown")
