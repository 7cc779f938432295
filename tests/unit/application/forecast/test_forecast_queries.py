# tests/unit/application/forecast/test_forecast_queries.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

import pytest

from forecast_api.application.schemas.dto.forecast import (
    AggregateForecastQueryDTO,
    ListForecastFactsQueryDTO,
    ListForecastHistoryQueryDTO,
)
from forecast_api.application.use_cases.forecast.aggregate_forecast import (
    AggregateForecastUseCase,
)
from forecast_api.application.use_cases.forecast.list_forecast_facts import (
    ListForecastFactsUseCase,
    build_fact_filter,
)
from forecast_api.application.use_cases.forecast.list_forecast_history import (
    ListForecastHistoryUseCase,
)
from forecast_api.domain.entities.forecast_aggregate import AggregateRow
from forecast_api.domain.entities.forecast_fact import ForecastFactRecord
from forecast_api.domain.entities.forecast_history import ForecastHistorySnapshot
from forecast_api.domain.exceptions.forecast import ForecastValidationError


def _record(month: date) -> ForecastFactRecord:
    return ForecastFactRecord(
        run_id=1,
        month_id=month,
        company_code="C001",
        dept_code="D01",
        material_code="MAT-1",
        sku_id=1,
        sales_org_id=1,
        dc_id=1,
        forecast_qty=Decimal("10"),
        unit_price_snapshot=None,
        revenue_snapshot=None,
    )


def test_build_fact_filter_parses_bounds_and_run() -> None:
    filters = build_fact_filter(
        ListForecastFactsQueryDTO(month_from="2025-01", month_to="2025-02", run="latest"),
        limit=10,
    )

    assert filters.month_from == date(2025, 1, 1)
    assert filters.month_to == date(2025, 2, 1)
    assert filters.run is not None and filters.run.latest
    assert filters.limit == 10


def test_build_fact_filter_rejects_inverted_range() -> None:
    with pytest.raises(ForecastValidationError):
        build_fact_filter(
            ListForecastFactsQueryDTO(month_from="2025-03", month_to="2025-02"), limit=10
        )


@pytest.mark.asyncio
async def test_list_facts_applies_limit(fake_uow: Any) -> None:
    fake_uow.facts.records = [_record(date(2025, m, 1)) for m in range(1, 6)]

    rows = await ListForecastFactsUseCase(fake_uow, limit=3).execute(
        ListForecastFactsQueryDTO(company_code="C001")
    )

    assert len(rows) == 3
    assert fake_uow.facts.last_filter.company_code == "C001"
    assert fake_uow.facts.last_filter.limit == 3


@pytest.mark.asyncio
async def test_aggregate_returns_dtos(fake_uow: Any) -> None:
    fake_uow.facts.aggregate_rows = [
        AggregateRow(keys={"month": date(2025, 1, 1)}, value=Decimal("150")),
        AggregateRow(keys={"month": date(2025, 2, 1)}, value=None),
    ]

    rows = await AggregateForecastUseCase(fake_uow).execute(
        AggregateForecastQueryDTO(
            groups=["month"], metric="revenue_snapshot", month_from="2025-01", month_to="2025-02"
        )
    )

    assert [r.value for r in rows] == [Decimal("150"), None]
    assert rows[0].keys == {"month": date(2025, 1, 1)}


@pytest.mark.asyncio
async def test_history_listing_serializes_ids_and_months(fake_uow: Any) -> None:
    fake_uow.history.listed = [
        ForecastHistorySnapshot(
            id=42,
            anchor_month=date(2025, 6, 1),
            company_code="C001",
            company_desc="Acme",
            material_code="MAT-1",
            material_desc="Rice",
            forecast_qty=Decimal("50"),
            metadata={"run_id": "1"},
        )
    ]

    rows = await ListForecastHistoryUseCase(fake_uow, limit=5).execute(
        ListForecastHistoryQueryDTO(anchor_month="2025-06", search="rice")
    )

    assert rows[0].id == "42"
    assert rows[0].anchor_month == "2025-06"
    assert fake_uow.history.last_filter.anchor_month == date(2025, 6, 1)
    assert fake_uow.history.last_filter.search == "rice"
    assert fake_uow.history.last_filter.limit == 5


@pytest.mark.asyncio
async def test_history_listing_requires_valid_anchor(fake_uow: Any) -> None:
    with pytest.raises(ForecastValidationError):
        await ListForecastHistoryUseCase(fake_uow).execute(
            ListForecastHistoryQueryDTO(anchor_month="June")
        )
