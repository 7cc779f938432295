# tests/unit/test_main_entrypoint.py
from __future__ import annotations

from typing import Any

import pytest
import uvicorn

from forecast_api import main


def test_run_serves_app_factory_with_uvicorn(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []
    monkeypatch.setattr(uvicorn, "run", lambda *a, **kw: calls.append((a, kw)))
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "9090")

    main.run()

    assert calls == [
        (
            ("forecast_api.main:create_app",),
            {"factory": True, "host": "0.0.0.0", "port": 9090},
        )
    ]
