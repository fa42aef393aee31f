from __future__ import annotations

import runpy


def test_main_module_runs_uvicorn(monkeypatch):
    executed = {}

    def fake_run(app, **kwargs) -> None:
        executed["app"] = app
        executed.update(kwargs)

    monkeypatch.setattr("uvicorn.run", fake_run)
    monkeypatch.setenv("SERVICE_PORT", "9001")

    runpy.run_module("src.main.__main__", run_name="__main__")

    assert executed["app"] == "src.main.app:app"
    assert executed["port"] == 9001
    assert executed["log_config"] is None
