# tests/unit/application/forecast/test_fact_writer.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

import pytest

from forecast_api.application.services.fact_writer import FactWriter
from forecast_api.domain.entities.forecast_dimensions import ResolvedDimensions
from forecast_api.domain.entities.forecast_line import MonthFigure
from forecast_api.domain.exceptions.forecast import ForecastValidationError

DIMS = ResolvedDimensions(
    company_id=1, dept_id=1, dc_id=1, uom_id=1, material_id=1, sku_id=1, sales_org_id=1
)


def test_build_rows_computes_revenue_and_month_ids() -> None:
    writer = FactWriter(repository=None)  # type: ignore[arg-type]

    rows = writer.build_rows(
        7,
        DIMS,
        [
            MonthFigure(month="2025-06", qty=Decimal("50"), price=Decimal("0.5")),
            MonthFigure(month="2025-07", qty=Decimal("10")),
        ],
    )

    assert [r.month_id for r in rows] == [date(2025, 6, 1), date(2025, 7, 1)]
    assert rows[0].revenue_snapshot == Decimal("25")
    assert rows[0].unit_price_snapshot == Decimal("0.5")
    assert rows[1].revenue_snapshot is None
    assert all(r.run_id == 7 for r in rows)


def test_build_rows_collapses_repeated_months() -> None:
    writer = FactWriter(repository=None)  # type: ignore[arg-type]

    rows = writer.build_rows(
        1,
        DIMS,
        [
            MonthFigure(month="2025-06", qty=Decimal("1")),
            MonthFigure(month="2025-06", qty=Decimal("2")),
        ],
    )

    assert len(rows) == 1
    assert rows[0].forecast_qty == Decimal("1")


def test_build_rows_rejects_non_finite_qty() -> None:
    writer = FactWriter(repository=None)  # type: ignore[arg-type]

    with pytest.raises(ForecastValidationError):
        writer.build_rows(1, DIMS, [MonthFigure(month="2025-06", qty=Decimal("NaN"))])


def test_build_rows_rejects_bad_month() -> None:
    writer = FactWriter(repository=None)  # type: ignore[arg-type]

    with pytest.raises(ForecastValidationError):
        writer.build_rows(1, DIMS, [MonthFigure(month="June", qty=Decimal("1"))])


@pytest.mark.asyncio
async def test_write_facts_returns_inserted_count_only(fake_uow: Any) -> None:
    writer = FactWriter(fake_uow.facts)
    months = [
        MonthFigure(month="2025-06", qty=Decimal("5")),
        MonthFigure(month="2025-07", qty=Decimal("6")),
    ]

    assert await writer.write_facts(1, DIMS, months) == 2
    assert await writer.write_facts(1, DIMS, months) == 0
    assert await writer.write_facts(2, DIMS, months) == 2
    assert len(fake_uow.facts.rows) == 4


@pytest.mark.asyncio
async def test_write_facts_with_no_months_is_noop(fake_uow: Any) -> None:
    assert await FactWriter(fake_uow.facts).write_facts(1, DIMS, []) == 0
