# src/forecast_api/infrastructure/observability/metrics.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Prometheus metrics utilities (registry-aware, hot-reload safe).

Forecast ingestion metrics are exposed through accessor functions that return
a collector bound to the **current** ``prometheus_client.REGISTRY``:

- Safe under hot reload and tests that swap the default registry.
- No duplicate-registration errors.
- Cache automatically resets when the active registry changes.

Example:
    get_forecast_lines_ingested_total().labels(source="manual").inc()
    get_forecast_batch_duration_seconds().labels(source="upload").observe(0.4)
"""

from __future__ import annotations

import threading
from collections.abc import Generator
from contextlib import contextmanager, suppress
from time import perf_counter
from typing import Final

import prometheus_client as prom
from prometheus_client import Counter, Histogram

__all__ = [
    "get_forecast_lines_ingested_total",
    "get_forecast_fact_rows_inserted_total",
    "get_forecast_batch_duration_seconds",
    "get_forecast_history_failures_total",
    "get_forecast_audit_failures_total",
    "observe_forecast_batch",
]

_BUCKETS: Final[tuple[float, ...]] = (
    0.010,
    0.050,
    0.100,
    0.250,
    0.500,
    1.000,
    2.500,
    5.000,
    10.000,
    30.000,
)

# Cache keyed by metric name within the currently-active registry.
_registry_id: int | None = None
_hist_cache: dict[str, Histogram] = {}
_counter_cache: dict[str, Counter] = {}
_lock = threading.RLock()


def _ensure_registry() -> None:
    """Reset caches if the active registry changed."""
    global _registry_id
    with _lock:
        rid = id(prom.REGISTRY)
        if _registry_id != rid:
            _hist_cache.clear()
            _counter_cache.clear()
            _registry_id = rid


def _lookup_existing(name: str) -> object | None:
    """Return a collector already registered under ``name`` on the active registry."""
    with _lock, suppress(Exception):
        mapping = getattr(prom.REGISTRY, "_names_to_collectors", None)
        if isinstance(mapping, dict):
            return mapping.get(name)
    return None


def _get_or_create_counter(
    name: str,
    help_text: str,
    *,
    labelnames: tuple[str, ...] = (),
) -> Counter:
    """Get or create a registry-bound ``Counter`` with stable identity.

    Args:
        name: Metric base name (without the ``_total`` suffix).
        help_text: Human-readable description.
        labelnames: Optional label names tuple.

    Returns:
        Counter: Bound to ``prom.REGISTRY``.
    """
    _ensure_registry()
    with _lock:
        cached = _counter_cache.get(name)
        if cached is not None:
            return cached

        existing = _lookup_existing(name)
        if isinstance(existing, Counter):
            _counter_cache[name] = existing
            return existing

        counter = Counter(name, help_text, labelnames, registry=prom.REGISTRY)
        _counter_cache[name] = counter
        return counter


def _get_or_create_hist(
    name: str,
    help_text: str,
    *,
    buckets: tuple[float, ...] = _BUCKETS,
    labelnames: tuple[str, ...] = (),
) -> Histogram:
    """Get or create a registry-bound ``Histogram`` with stable identity."""
    _ensure_registry()
    with _lock:
        cached = _hist_cache.get(name)
        if cached is not None:
            return cached

        existing = _lookup_existing(name)
        if isinstance(existing, Histogram):
            _hist_cache[name] = existing
            return existing

        hist = Histogram(name, help_text, labelnames, buckets=buckets, registry=prom.REGISTRY)
        _hist_cache[name] = hist
        return hist


# ---------------------------------------------------------------------------
# Public accessors


def get_forecast_lines_ingested_total() -> Counter:
    """Counter of forecast lines committed, labelled by ``source``."""
    return _get_or_create_counter(
        "forecast_lines_ingested",
        "Forecast lines committed by ingestion batches.",
        labelnames=("source",),
    )


def get_forecast_fact_rows_inserted_total() -> Counter:
    """Counter of fact rows actually inserted, labelled by ``source``."""
    return _get_or_create_counter(
        "forecast_fact_rows_inserted",
        "Fact rows inserted (duplicates excluded).",
        labelnames=("source",),
    )


def get_forecast_batch_duration_seconds() -> Histogram:
    """Histogram of batch submission latency, labelled by ``source`` and ``outcome``."""
    return _get_or_create_hist(
        "forecast_batch_duration_seconds",
        "Wall-clock duration of forecast batch submissions.",
        labelnames=("source", "outcome"),
    )


def get_forecast_history_failures_total() -> Counter:
    """Counter of history snapshot writes that failed and were swallowed."""
    return _get_or_create_counter(
        "forecast_history_failures",
        "History snapshot writes that failed after facts were committed.",
    )


def get_forecast_audit_failures_total() -> Counter:
    """Counter of audit entries that failed to persist."""
    return _get_or_create_counter(
        "forecast_audit_failures",
        "Audit log writes that failed and were swallowed.",
    )


@contextmanager
def observe_forecast_batch(source: str) -> Generator[None, None, None]:
    """Record the duration of a batch submission.

    The ``outcome`` label is ``success`` unless the body raises, in which
    case it is ``error`` and the exception propagates.
    """
    start = perf_counter()
    outcome = "success"
    try:
        yield
    except Exception:
        outcome = "error"
        raise
    finally:
        with suppress(Exception):
            get_forecast_batch_duration_seconds().labels(source=source, outcome=outcome).observe(
                perf_counter() - start
            )
