# src/forecast_api/adapters/repositories/forecast_fact_repository.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Forecast fact repository.

This repository provides persistence primitives for ``fact_forecast``.

Responsibilities
----------------
* Idempotent bulk insert keyed by the fact natural key
  (``ON CONFLICT ON CONSTRAINT ... DO NOTHING RETURNING``); the number of
  returned rows is the authoritative inserted count.
* Filtered fact listings joined with dimension codes.
* Grouped aggregation with dynamic group columns; "latest run" is resolved
  inside the same statement via a ``max(run_id)`` scalar subquery.

Layer
-----
Adapters / repositories.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from forecast_api.domain.entities.forecast_aggregate import AggregateRow, AggregationQuery
from forecast_api.domain.entities.forecast_fact import (
    ForecastFactFilter,
    ForecastFactRecord,
    ForecastFactRow,
)
from forecast_api.domain.enums.forecast import AggregationGroup
from forecast_api.domain.value_objects.run_selector import RunSelector
from forecast_api.infrastructure.database.models.forecast import (
    FACT_NATURAL_KEY_CONSTRAINT,
    DimCompany,
    DimDept,
    DimDistributionChannel,
    DimMaterial,
    DimSku,
    FactForecast,
    ForecastRunModel,
)

from .base_repository import BaseRepository

_GROUP_COLUMNS: dict[AggregationGroup, Any] = {
    AggregationGroup.COMPANY: DimCompany.company_code,
    AggregationGroup.DEPT: DimDept.dept_code,
    AggregationGroup.MATERIAL: DimMaterial.material_code,
    AggregationGroup.SKU: FactForecast.sku_id,
    AggregationGroup.MONTH: FactForecast.month_id,
    AggregationGroup.RUN: FactForecast.run_id,
}


def latest_run_id_subquery() -> Any:
    """Return ``(SELECT max(run_id) FROM forecast_run)`` as a scalar subquery."""
    return select(func.max(ForecastRunModel.run_id)).scalar_subquery()


def run_clause(selector: RunSelector) -> ColumnElement[bool]:
    """Return the WHERE clause restricting facts to the selected run."""
    if selector.latest:
        return FactForecast.run_id == latest_run_id_subquery()
    return FactForecast.run_id == selector.run_id


class ForecastFactRepository(BaseRepository[FactForecast]):
    """Repository for forecast facts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            session: Async SQLAlchemy session bound to the target database.
        """
        super().__init__(session)

    async def insert_facts(self, rows: Sequence[ForecastFactRow]) -> int:
        """Insert fact rows, skipping natural-key duplicates.

        Args:
            rows: Fact rows to persist.

        Returns:
            Number of rows actually inserted.
        """
        if not rows:
            return 0

        payload = [
            {
                "run_id": r.run_id,
                "company_id": r.company_id,
                "dept_id": r.dept_id,
                "sku_id": r.sku_id,
                "sales_org_id": r.sales_org_id,
                "dc_id": r.dc_id,
                "month_id": r.month_id,
                "forecast_qty": r.forecast_qty,
                "unit_price_snapshot": r.unit_price_snapshot,
                "revenue_snapshot": r.revenue_snapshot,
            }
            for r in rows
        ]

        stmt = (
            pg_insert(FactForecast)
            .values(payload)
            .on_conflict_do_nothing(constraint=FACT_NATURAL_KEY_CONSTRAINT)
            .returning(FactForecast.run_id)
        )
        res = await self._session.execute(stmt)
        # Caller is responsible for committing; conflicting rows return nothing.
        return len(res.all())

    async def list_facts(self, filters: ForecastFactFilter) -> list[ForecastFactRecord]:
        """Return facts matching ``filters``.

        Ordering is ``month_id, company_code, material_code`` and the result is
        capped at ``filters.limit`` rows.
        """
        stmt: Select[Any] = (
            select(
                FactForecast.run_id,
                FactForecast.month_id,
                DimCompany.company_code,
                DimDept.dept_code,
                DimMaterial.material_code,
                FactForecast.sku_id,
                FactForecast.sales_org_id,
                FactForecast.dc_id,
                FactForecast.forecast_qty,
                FactForecast.unit_price_snapshot,
                FactForecast.revenue_snapshot,
            )
            .select_from(FactForecast)
            .join(DimCompany, DimCompany.company_id == FactForecast.company_id)
            .join(DimDept, DimDept.dept_id == FactForecast.dept_id)
            .join(DimSku, DimSku.sku_id == FactForecast.sku_id)
            .join(DimMaterial, DimMaterial.material_id == DimSku.material_id)
            .join(DimDistributionChannel, DimDistributionChannel.dc_id == FactForecast.dc_id)
        )

        if filters.company_code is not None:
            stmt = stmt.where(DimCompany.company_code == filters.company_code)
        if filters.dept_code is not None:
            stmt = stmt.where(DimDept.dept_code == filters.dept_code)
        if filters.material_code is not None:
            stmt = stmt.where(DimMaterial.material_code == filters.material_code)
        if filters.sku_id is not None:
            stmt = stmt.where(FactForecast.sku_id == filters.sku_id)
        if filters.sales_org_id is not None:
            stmt = stmt.where(FactForecast.sales_org_id == filters.sales_org_id)
        if filters.dc_code is not None:
            stmt = stmt.where(DimDistributionChannel.dc_code == filters.dc_code)
        if filters.month_from is not None:
            stmt = stmt.where(FactForecast.month_id >= filters.month_from)
        if filters.month_to is not None:
            stmt = stmt.where(FactForecast.month_id <= filters.month_to)
        if filters.run is not None:
            stmt = stmt.where(run_clause(filters.run))

        stmt = stmt.order_by(
            FactForecast.month_id, DimCompany.company_code, DimMaterial.material_code
        ).limit(filters.limit)

        res = await self._session.execute(stmt)
        return [
            ForecastFactRecord(
                run_id=int(row.run_id),
                month_id=row.month_id,
                company_code=row.company_code,
                dept_code=row.dept_code,
                material_code=row.material_code,
                sku_id=int(row.sku_id),
                sales_org_id=int(row.sales_org_id),
                dc_id=int(row.dc_id),
                forecast_qty=row.forecast_qty,
                unit_price_snapshot=row.unit_price_snapshot,
                revenue_snapshot=row.revenue_snapshot,
            )
            for row in res.all()
        ]

    async def aggregate(self, query: AggregationQuery) -> list[AggregateRow]:
        """Sum ``query.metric`` grouped by ``query.groups``.

        Only the dimension tables a grouping needs are joined. Rows are ordered
        ascending by the group columns in the caller's order.
        """
        stmt = self.build_aggregate_statement(query)
        res = await self._session.execute(stmt)
        names = [g.value for g in query.groups]
        out: list[AggregateRow] = []
        for row in res.all():
            mapping = row._mapping
            out.append(
                AggregateRow(
                    keys={name: mapping[name] for name in names},
                    value=mapping["value"],
                )
            )
        return out

    @staticmethod
    def build_aggregate_statement(query: AggregationQuery) -> Select[Any]:
        """Build the grouped ``SELECT`` for an aggregation query."""
        group_cols = [_GROUP_COLUMNS[g].label(g.value) for g in query.groups]
        metric_col = getattr(FactForecast, query.metric.value)

        stmt: Select[Any] = select(*group_cols, func.sum(metric_col).label("value")).select_from(
            FactForecast
        )
        if AggregationGroup.COMPANY in query.groups:
            stmt = stmt.join(DimCompany, DimCompany.company_id == FactForecast.company_id)
        if AggregationGroup.DEPT in query.groups:
            stmt = stmt.join(DimDept, DimDept.dept_id == FactForecast.dept_id)
        if AggregationGroup.MATERIAL in query.groups:
            stmt = stmt.join(DimSku, DimSku.sku_id == FactForecast.sku_id).join(
                DimMaterial, DimMaterial.material_id == DimSku.material_id
            )

        stmt = stmt.where(FactForecast.month_id.between(query.month_from, query.month_to))
        if query.run is not None:
            stmt = stmt.where(run_clause(query.run))

        raw_cols = [_GROUP_COLUMNS[g] for g in query.groups]
        return stmt.group_by(*raw_cols).order_by(*raw_cols)
