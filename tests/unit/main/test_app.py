from __future__ import annotations

import pytest
from dependency_injector import providers

from conftest import StubHistoryGateway
from src.main import app as module_app
from src.main.app import create_app
from src.main.container import get_container


@pytest.mark.asyncio
async def test_create_app_initializes_lifespan(monkeypatch) -> None:
    monkeypatch.delenv("GRAPH_CONFIG_FILE", raising=False)
    app = create_app()
    assert app.title == "Mini Graph Engine"
    get_container().history_gateway.override(providers.Object(StubHistoryGateway()))

    async with app.router.lifespan_context(app):
        assert app.state.started_at is not None
        assert app.state.container is get_container()

    assert isinstance(module_app.app, type(app))


def test_routes_are_registered() -> None:
    paths = {route.path for route in create_app().routes}

    assert {"/graph", "/graph/config", "/graph/states", "/graph/refresh", "/graph/tooltip"} <= paths
    assert {"/health", "/info"} <= paths
