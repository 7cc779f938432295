# tests/unit/infrastructure/observability/test_forecast_metrics.py
from __future__ import annotations

import prometheus_client as prom
import pytest

from forecast_api.infrastructure.observability.metrics import (
    get_forecast_history_failures_total,
    get_forecast_lines_ingested_total,
    observe_forecast_batch,
)


def _value(name: str, labels: dict[str, str] | None = None) -> float:
    return prom.REGISTRY.get_sample_value(name, labels or {}) or 0.0


def test_accessors_return_the_same_collector() -> None:
    assert get_forecast_lines_ingested_total() is get_forecast_lines_ingested_total()


def test_counter_increments() -> None:
    before = _value("forecast_history_failures_total")

    get_forecast_history_failures_total().inc()

    assert _value("forecast_history_failures_total") == before + 1


def test_observe_batch_labels_outcome() -> None:
    ok = {"source": "metrics-test", "outcome": "success"}
    err = {"source": "metrics-test", "outcome": "error"}
    ok_before = _value("forecast_batch_duration_seconds_count", ok)
    err_before = _value("forecast_batch_duration_seconds_count", err)

    with observe_forecast_batch("metrics-test"):
        pass
    with pytest.raises(RuntimeError), observe_forecast_batch("metrics-test"):
        raise RuntimeError("boom")

    assert _value("forecast_batch_duration_seconds_count", ok) == ok_before + 1
    assert _value("forecast_batch_duration_seconds_count", err) == err_before + 1
