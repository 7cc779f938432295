# tests/unit/adapters/forecast/test_forecast_repositories_sql.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT

from __future__ import annotations

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from typing import Any

import pytest
from sqlalchemy.dialects import postgresql

from forecast_api.adapters.repositories.dimension_repository import DimensionRepository
from forecast_api.adapters.repositories.forecast_fact_repository import ForecastFactRepository
from forecast_api.adapters.repositories.forecast_history_repository import (
    ForecastHistoryRepository,
)
from forecast_api.domain.entities.forecast_aggregate import AggregationQuery
from forecast_api.domain.entities.forecast_fact import ForecastFactFilter, ForecastFactRow
from forecast_api.domain.entities.forecast_history import ForecastHistoryFilter
from forecast_api.domain.enums.forecast import AggregationGroup, ForecastMetric
from forecast_api.domain.value_objects.run_selector import RunSelector


class _FakeScalars:
    def __init__(self, items: list[Any]) -> None:
        self._items = items

    def first(self) -> Any:
        return self._items[0] if self._items else None

    def all(self) -> list[Any]:
        return list(self._items)


class _FakeResult:
    def __init__(self, rows: list[Any] | None = None, scalar: Any = None) -> None:
        self._rows = rows or []
        self._scalar = scalar

    def all(self) -> list[Any]:
        return list(self._rows)

    def one(self) -> Any:
        return self._rows[0]

    def scalar_one(self) -> Any:
        return self._scalar

    def scalars(self) -> _FakeScalars:
        return _FakeScalars(self._rows)


class _RecordingSession:
    """Captures executed statements and replays a canned result."""

    def __init__(self, result: _FakeResult | None = None) -> None:
        self.statements: list[Any] = []
        self.result = result or _FakeResult()

    async def execute(self, stmt: Any) -> _FakeResult:
        self.statements.append(stmt)
        return self.result

    def sql(self, index: int = -1) -> str:
        return str(self.statements[index].compile(dialect=postgresql.dialect()))


def _fact_row(month: int) -> ForecastFactRow:
    return ForecastFactRow(
        run_id=1,
        company_id=1,
        dept_id=1,
        sku_id=1,
        sales_org_id=1,
        dc_id=1,
        month_id=date(2025, month, 1),
        forecast_qty=Decimal("10"),
        unit_price_snapshot=None,
        revenue_snapshot=None,
    )


@pytest.mark.asyncio
async def test_upsert_company_is_a_single_conflict_safe_statement() -> None:
    session = _RecordingSession(_FakeResult(scalar=11))
    repo = DimensionRepository(session)  # type: ignore[arg-type]

    company_id = await repo.upsert_company("C001", "Acme")

    sql = session.sql()
    assert company_id == 11
    assert len(session.statements) == 1
    assert "ON CONFLICT (company_code) DO UPDATE" in sql
    assert "coalesce(excluded.company_desc" in sql
    assert "RETURNING" in sql


@pytest.mark.asyncio
async def test_upsert_sku_and_sales_org_use_named_constraints() -> None:
    session = _RecordingSession(_FakeResult(scalar=3))
    repo = DimensionRepository(session)  # type: ignore[arg-type]

    await repo.upsert_sku(1, "1kg", 2)
    await repo.upsert_sales_org(None, "1000", None, None, None)

    assert "ON CONFLICT ON CONSTRAINT uq_dim_sku_natural_key" in session.sql(0)
    assert "ON CONFLICT ON CONSTRAINT uq_dim_sales_org_natural_key" in session.sql(1)


@pytest.mark.asyncio
async def test_insert_facts_counts_returned_rows() -> None:
    session = _RecordingSession(_FakeResult(rows=[(1,)]))
    repo = ForecastFactRepository(session)  # type: ignore[arg-type]

    inserted = await repo.insert_facts([_fact_row(1), _fact_row(2)])

    sql = session.sql()
    assert inserted == 1
    assert "ON CONFLICT ON CONSTRAINT uq_fact_forecast_natural_key DO NOTHING" in sql
    assert "RETURNING" in sql


@pytest.mark.asyncio
async def test_insert_facts_with_no_rows_skips_the_database() -> None:
    session = _RecordingSession()

    assert await ForecastFactRepository(session).insert_facts([]) == 0  # type: ignore[arg-type]
    assert session.statements == []


def test_aggregate_statement_resolves_latest_run_in_sql() -> None:
    query = AggregationQuery(
        groups=(AggregationGroup.COMPANY, AggregationGroup.MONTH),
        metric=ForecastMetric.FORECAST_QTY,
        month_from=date(2025, 1, 1),
        month_to=date(2025, 3, 1),
        run=RunSelector(latest=True),
    )

    sql = str(
        ForecastFactRepository.build_aggregate_statement(query).compile(
            dialect=postgresql.dialect()
        )
    )

    assert "max(" in sql
    assert "forecast_run.run_id" in sql
    assert "sum(" in sql
    assert "GROUP BY" in sql
    assert "dim_company" in sql
    assert "dim_material" not in sql


def test_aggregate_statement_joins_material_through_sku() -> None:
    query = AggregationQuery(
        groups=(AggregationGroup.MATERIAL,),
        metric=ForecastMetric.REVENUE_SNAPSHOT,
        month_from=date(2025, 1, 1),
        month_to=date(2025, 1, 1),
    )

    sql = str(
        ForecastFactRepository.build_aggregate_statement(query).compile(
            dialect=postgresql.dialect()
        )
    )

    assert "dim_sku" in sql
    assert "dim_material" in sql
    assert "revenue_snapshot" in sql
    assert "max(" not in sql


@pytest.mark.asyncio
async def test_aggregate_maps_rows_by_group_name() -> None:
    session = _RecordingSession(
        _FakeResult(rows=[SimpleNamespace(_mapping={"company": "C001", "value": Decimal("5")})])
    )
    repo = ForecastFactRepository(session)  # type: ignore[arg-type]

    rows = await repo.aggregate(
        AggregationQuery(
            groups=(AggregationGroup.COMPANY,),
            metric=ForecastMetric.FORECAST_QTY,
            month_from=date(2025, 1, 1),
            month_to=date(2025, 1, 1),
        )
    )

    assert rows[0].keys == {"company": "C001"}
    assert rows[0].value == Decimal("5")


@pytest.mark.asyncio
async def test_list_facts_orders_and_limits() -> None:
    session = _RecordingSession()
    repo = ForecastFactRepository(session)  # type: ignore[arg-type]

    await repo.list_facts(ForecastFactFilter(dc_code="NA", run=RunSelector(run_id=3), limit=25))

    sql = session.sql()
    assert "ORDER BY fact_forecast.month_id, dim_company.company_code" in sql.replace('"', "")
    assert "LIMIT" in sql
    assert "dim_distribution_channel.dc_code" in sql


@pytest.mark.asyncio
async def test_history_search_covers_dept_code_in_metadata() -> None:
    session = _RecordingSession()
    repo = ForecastHistoryRepository(session)  # type: ignore[arg-type]

    await repo.list_snapshots(ForecastHistoryFilter(anchor_month=date(2025, 6, 1), search="d01"))

    sql = session.sql()
    assert "lower(" in sql
    assert "LIKE" in sql.upper()
    assert "->>" in sql


@pytest.mark.asyncio
async def test_history_search_matches_wildcards_literally() -> None:
    session = _RecordingSession()
    repo = ForecastHistoryRepository(session)  # type: ignore[arg-type]

    await repo.list_snapshots(ForecastHistoryFilter(anchor_month=date(2025, 6, 1), search=" A_1% "))

    compiled = session.statements[-1].compile(dialect=postgresql.dialect())
    assert "ESCAPE '/'" in str(compiled)
    assert "A/_1/%" in compiled.params.values()


@pytest.mark.asyncio
async def test_history_whitespace_search_adds_no_filter() -> None:
    session = _RecordingSession()
    repo = ForecastHistoryRepository(session)  # type: ignore[arg-type]

    await repo.list_snapshots(ForecastHistoryFilter(anchor_month=date(2025, 6, 1), search="   "))

    assert "LIKE" not in session.sql().upper()
