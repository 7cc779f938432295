# src/forecast_api/application/schemas/dto/forecast.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Application DTOs for forecast ingestion and queries.

Synopsis:
    Strict (Pydantic v2) DTOs exchanged between forecast use cases and
    adapters. Query DTOs carry raw user input; validation into domain values
    happens inside the use cases.

Layer:
    application/schemas/dto
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import Field

from forecast_api.application.schemas.dto.base import BaseDTO


class SubmitForecastBatchResultDTO(BaseDTO):
    """Outcome of a fully-committed ingestion batch.

    Attributes:
        run_id: Run allocated for the batch.
        inserted_count: Fact rows actually inserted (duplicates excluded).
        line_count: Lines processed.
    """

    run_id: int
    inserted_count: int = Field(ge=0)
    line_count: int = Field(ge=0)


class AggregateForecastQueryDTO(BaseDTO):
    """Raw aggregation request."""

    groups: list[str]
    metric: str = "forecast_qty"
    month_from: str
    month_to: str
    run: str | None = None


class AggregateRowDTO(BaseDTO):
    """One grouped aggregation row."""

    keys: dict[str, Any]
    value: Decimal | None


class ListForecastFactsQueryDTO(BaseDTO):
    """Raw fact listing filters."""

    company_code: str | None = None
    dept_code: str | None = None
    material_code: str | None = None
    sku_id: int | None = None
    sales_org_id: int | None = None
    dc_code: str | None = None
    month_from: str | None = None
    month_to: str | None = None
    run: str | None = None


class ForecastFactDTO(BaseDTO):
    """Fact row joined with dimension codes."""

    run_id: int
    month_id: date
    company_code: str
    dept_code: str
    material_code: str
    sku_id: int
    sales_org_id: int
    dc_id: int
    forecast_qty: Decimal
    unit_price_snapshot: Decimal | None = None
    revenue_snapshot: Decimal | None = None


class ListForecastHistoryQueryDTO(BaseDTO):
    """Raw history listing filters."""

    anchor_month: str
    company_code: str | None = None
    company_desc: str | None = None
    material_code: str | None = None
    material_desc: str | None = None
    search: str | None = None


class ForecastHistoryDTO(BaseDTO):
    """History snapshot with string ids and a ``YYYY-MM`` anchor month."""

    id: str
    anchor_month: str
    company_code: str
    company_desc: str | None = None
    material_code: str
    material_desc: str | None = None
    forecast_qty: Decimal
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
