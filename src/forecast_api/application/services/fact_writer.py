# src/forecast_api/application/services/fact_writer.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Fact writing service (application layer).

Purpose:
    Expand a resolved line into one fact row per month and insert them
    idempotently.

Rules:
    * ``revenue_snapshot = price * qty`` when a price is present, else NULL.
    * Months repeated within one call collapse to their first occurrence.
    * The return value is the number of rows the store actually inserted;
      rows whose natural key already exists contribute 0.

Layer:
    application/services
"""

from __future__ import annotations

from collections.abc import Iterable

from forecast_api.domain.entities.forecast_dimensions import ResolvedDimensions
from forecast_api.domain.entities.forecast_fact import FactNaturalKey, ForecastFactRow
from forecast_api.domain.entities.forecast_line import MonthFigure
from forecast_api.domain.exceptions.forecast import ForecastValidationError
from forecast_api.domain.interfaces.repositories.forecast_fact_repository import (
    ForecastFactRepository,
)
from forecast_api.domain.services.anchor_month import parse_month
from forecast_api.domain.services.forecast_figures import as_decimal, revenue_for


class FactWriter:
    """Build and insert fact rows for one resolved line."""

    def __init__(self, repository: ForecastFactRepository) -> None:
        self._repo = repository

    def build_rows(
        self,
        run_id: int,
        dims: ResolvedDimensions,
        months: Iterable[MonthFigure],
    ) -> list[ForecastFactRow]:
        """Return the fact rows for ``months``, de-duplicated by natural key.

        Raises:
            ForecastValidationError: If a month key or quantity is invalid.
        """
        rows: dict[FactNaturalKey, ForecastFactRow] = {}
        for figure in months:
            month_id = parse_month(figure.month)
            qty = as_decimal(figure.qty)
            if qty is None or not qty.is_finite():
                raise ForecastValidationError(
                    "qty must be a finite number",
                    details={"month": figure.month, "qty": str(figure.qty)},
                )
            price = as_decimal(figure.price)
            row = ForecastFactRow(
                run_id=run_id,
                company_id=dims.company_id,
                dept_id=dims.dept_id,
                sku_id=dims.sku_id,
                sales_org_id=dims.sales_org_id,
                dc_id=dims.dc_id,
                month_id=month_id,
                forecast_qty=qty,
                unit_price_snapshot=price,
                revenue_snapshot=revenue_for(qty, price),
            )
            rows.setdefault(row.natural_key, row)
        return list(rows.values())

    async def write_facts(
        self,
        run_id: int,
        dims: ResolvedDimensions,
        months: Iterable[MonthFigure],
    ) -> int:
        """Insert the facts of one line and return the inserted count."""
        rows = self.build_rows(run_id, dims, months)
        if not rows:
            return 0
        return await self._repo.insert_facts(rows)
