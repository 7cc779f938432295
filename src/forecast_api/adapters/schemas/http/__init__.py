# src/forecast_api/adapters/schemas/http/__init__.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""HTTP Schemas package (Adapters Layer).

Purpose:
    Public, adapter-facing HTTP schema surface. Re-exports the canonical
    envelopes and forecast resource schemas used by routers and presenters.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from forecast_api.adapters.schemas.http.envelopes import (
    ErrorEnvelope,
    ErrorObject,
    SuccessEnvelope,
)
from forecast_api.adapters.schemas.http.forecast_schemas import (
    AggregateRowHTTP,
    ForecastFactHTTP,
    ForecastHistoryHTTP,
    ManualLineHTTP,
    ManualMonthHTTP,
    ManualSubmitRequest,
    SheetSubmitRequest,
    SubmitBatchResponseHTTP,
)

__all__ = [
    # Envelopes
    "ErrorObject",
    "ErrorEnvelope",
    "SuccessEnvelope",
    # Forecast schemas
    "AggregateRowHTTP",
    "ForecastFactHTTP",
    "ForecastHistoryHTTP",
    "ManualLineHTTP",
    "ManualMonthHTTP",
    "ManualSubmitRequest",
    "SheetSubmitRequest",
    "SubmitBatchResponseHTTP",
]
