from __future__ import annotations

import asyncio
import json

import pytest
from dependency_injector import providers

from conftest import StubHistoryGateway
from src.infrastructure.cache.memory_cache_store import MemoryCacheStore
from src.infrastructure.cache.redis_cache_store import RedisCacheStore
from src.main.config import AppSettings
from src.main.container import app_lifespan, get_container, init_container


@pytest.mark.asyncio
async def test_init_and_get_container(monkeypatch) -> None:
    monkeypatch.delenv("GRAPH_CONFIG_FILE", raising=False)
    container = init_container(AppSettings())
    assert get_container() is container
    assert isinstance(container.cache_store(), MemoryCacheStore)
    assert container.graph_update_use_case().card is container.graph_card()

    gateway = StubHistoryGateway()
    container.history_gateway.override(providers.Object(gateway))

    async with app_lifespan():
        assert container.graph_card().is_configured is False

    assert gateway.closed is True


def test_redis_backend_is_selected(monkeypatch) -> None:
    monkeypatch.setenv("CACHE_BACKEND", "redis")
    container = init_container(AppSettings())

    assert isinstance(container.cache_store(), RedisCacheStore)


@pytest.mark.asyncio
async def test_app_lifespan_applies_startup_config(monkeypatch, tmp_path) -> None:
    config_file = tmp_path / "card.json"
    config_file.write_text(json.dumps({"entities": ["sensor.a"]}))
    monkeypatch.setenv("GRAPH_CONFIG_FILE", str(config_file))
    container = init_container(AppSettings())
    gateway = StubHistoryGateway()
    container.history_gateway.override(providers.Object(gateway))

    async with app_lifespan():
        card = container.graph_card()
        assert card.config.entity_ids == ("sensor.a",)
        for _ in range(20):
            await asyncio.sleep(0)
        assert card.frame is not None

    assert [call["entity_id"] for call in gateway.calls] == ["sensor.a"]


def test_get_container_without_init_raises(monkeypatch) -> None:
    monkeypatch.setattr("src.main.container._app_container", None)
    with pytest.raises(RuntimeError):
        get_container()
