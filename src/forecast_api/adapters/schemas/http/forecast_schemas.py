# src/forecast_api/adapters/schemas/http/forecast_schemas.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Forecast HTTP schemas (Adapters Layer).

Purpose:
    Request and response contracts for the ``/v1/forecast`` endpoints.

Layer:
    adapters/schemas/http

Notes:
    - Mandatory natural-key fields on manual lines are plain strings here;
      blank values are rejected per line by the application layer so the
      partial-batch report names the failing line.
    - Sheet rows are already-parsed spreadsheet records keyed by their
      (possibly Thai) column headers.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, Field

from forecast_api.adapters.schemas.http.base import BaseHTTPSchema

__all__ = [
    "ManualMonthHTTP",
    "ManualLineHTTP",
    "ManualSubmitRequest",
    "SheetSubmitRequest",
    "SubmitBatchResponseHTTP",
    "AggregateRowHTTP",
    "ForecastFactHTTP",
    "ForecastHistoryHTTP",
]


class ManualMonthHTTP(BaseHTTPSchema):
    """One month figure of a manual line."""

    month: str = Field(..., description="Month key (YYYY-MM).", examples=["2025-06"])
    qty: Decimal = Field(..., ge=0, description="Forecast quantity.")
    price: Decimal | None = Field(default=None, ge=0, description="Unit price snapshot.")


class ManualLineHTTP(BaseHTTPSchema):
    """A manually submitted forecast line."""

    company_code: str
    company_desc: str | None = None
    dept_code: str
    dc_code: str | None = None
    dc_desc: str | None = None
    material_code: str
    material_desc: str | None = None
    pack_size: str
    uom_code: str
    division: str | None = None
    sales_organization: str | None = None
    sales_office: str | None = None
    sales_group: str | None = None
    sales_representative: str | None = None
    months: list[ManualMonthHTTP] = Field(default_factory=list)


class ManualSubmitRequest(BaseHTTPSchema):
    """Body of ``POST /v1/forecast/manual``."""

    anchor_month: str = Field(
        ...,
        validation_alias=AliasChoices("anchor_month", "anchorMonth"),
        description="Reporting month (YYYY-MM).",
        examples=["2025-06"],
    )
    lines: list[ManualLineHTTP] = Field(..., min_length=1)


class SheetSubmitRequest(BaseHTTPSchema):
    """Body of ``POST /v1/forecast/sheet``."""

    anchor_month: str = Field(
        ...,
        validation_alias=AliasChoices("anchor_month", "anchorMonth"),
        description="Reporting month (YYYY-MM).",
        examples=["2025-06"],
    )
    rows: list[dict[str, Any]] = Field(..., description="Parsed spreadsheet rows.")


class SubmitBatchResponseHTTP(BaseHTTPSchema):
    """Result of an ingestion batch."""

    run_id: int
    inserted_count: int = Field(..., ge=0, description="Fact rows actually inserted.")
    line_count: int = Field(..., ge=0, description="Lines processed.")


class AggregateRowHTTP(BaseHTTPSchema):
    """One grouped aggregation row."""

    keys: dict[str, Any]
    value: Decimal | None = None


class ForecastFactHTTP(BaseHTTPSchema):
    """A fact row joined with its dimension codes."""

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


class ForecastHistoryHTTP(BaseHTTPSchema):
    """A history snapshot; ``id`` is serialized as a string."""

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
