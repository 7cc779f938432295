# src/forecast_api/domain/entities/forecast_fact.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Forecast facts (Domain Entities).

Synopsis:
    Write-side and read-side shapes of ``fact_forecast`` rows, plus the
    filter used by fact listings.

    The natural dedup key of a fact is
    ``(run_id, company_id, dept_id, sku_id, sales_org_id, dc_id, month_id)``.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from forecast_api.domain.value_objects.run_selector import RunSelector

__all__ = ["ForecastFactRow", "ForecastFactRecord", "ForecastFactFilter", "FactNaturalKey"]

FactNaturalKey = tuple[int, int, int, int, int, int, date]


@dataclass(frozen=True, slots=True)
class ForecastFactRow:
    """Write-side representation of one fact row."""

    run_id: int
    company_id: int
    dept_id: int
    sku_id: int
    sales_org_id: int
    dc_id: int
    month_id: date
    forecast_qty: Decimal
    unit_price_snapshot: Decimal | None
    revenue_snapshot: Decimal | None

    @property
    def natural_key(self) -> FactNaturalKey:
        """Return the unique-constraint tuple for this row."""
        return (
            self.run_id,
            self.company_id,
            self.dept_id,
            self.sku_id,
            self.sales_org_id,
            self.dc_id,
            self.month_id,
        )


@dataclass(frozen=True, slots=True)
class ForecastFactRecord:
    """Read-side fact row joined with its dimension codes."""

    run_id: int
    month_id: date
    company_code: str
    dept_code: str
    material_code: str
    sku_id: int
    sales_org_id: int
    dc_id: int
    forecast_qty: Decimal
    unit_price_snapshot: Decimal | None
    revenue_snapshot: Decimal | None


@dataclass(frozen=True, slots=True)
class ForecastFactFilter:
    """Optional filters for fact listings. ``None`` means unfiltered."""

    company_code: str | None = None
    dept_code: str | None = None
    material_code: str | None = None
    sku_id: int | None = None
    sales_org_id: int | None = None
    dc_code: str | None = None
    month_from: date | None = None
    month_to: date | None = None
    run: RunSelector | None = None
    limit: int = 1000
