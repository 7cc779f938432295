# src/forecast_api/adapters/routers/metrics_router.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Prometheus scrape endpoint (`/metrics`).

The forecast collectors are created lazily; the scrape handler touches each
accessor first so the series exist on a cold scrape.

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from forecast_api.infrastructure.observability.metrics import (
    get_forecast_audit_failures_total,
    get_forecast_batch_duration_seconds,
    get_forecast_fact_rows_inserted_total,
    get_forecast_history_failures_total,
    get_forecast_lines_ingested_total,
)

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics_probe() -> Response:
    """Expose Prometheus metrics in text format."""
    for getter in (
        get_forecast_lines_ingested_total,
        get_forecast_fact_rows_inserted_total,
        get_forecast_batch_duration_seconds,
        get_forecast_history_failures_total,
        get_forecast_audit_failures_total,
    ):
        getter()
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
