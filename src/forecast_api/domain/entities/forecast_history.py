# src/forecast_api/domain/entities/forecast_history.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Forecast history snapshots (Domain Entities).

Synopsis:
    The ``saleforecast`` table is a denormalized, write-once projection of
    each ingested line: readable codes and descriptions plus a single
    representative quantity. Snapshots are never mutated after insert.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

__all__ = ["ForecastHistorySnapshot", "ForecastHistoryFilter"]


@dataclass(frozen=True, slots=True)
class ForecastHistorySnapshot:
    """One history row.

    Attributes:
        anchor_month: First day of the batch anchor month.
        company_code: Company natural key.
        company_desc: Company description at ingest time, if any.
        material_code: Material natural key.
        material_desc: Material description at ingest time, if any.
        forecast_qty: Anchor-month quantity, or the sum of finite quantities.
        metadata: JSON metadata (source, run id, months, dimension ids, etc.).
        id: Database identifier once persisted.
        created_at: Insert timestamp once persisted.
        updated_at: Update timestamp once persisted.
    """

    anchor_month: date
    company_code: str
    company_desc: str | None
    material_code: str
    material_desc: str | None
    forecast_qty: Decimal
    metadata: dict[str, Any] = field(default_factory=dict)
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class ForecastHistoryFilter:
    """Filters for history listings.

    ``search`` is a case-insensitive substring matched against codes,
    descriptions, and the dept code stored in metadata.
    """

    anchor_month: date
    company_code: str | None = None
    company_desc: str | None = None
    material_code: str | None = None
    material_desc: str | None = None
    search: str | None = None
    limit: int = 50_000
