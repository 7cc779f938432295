# src/forecast_api/adapters/repositories/forecast_history_repository.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Forecast history repository backed by ``saleforecast``.

Snapshots are inserted once per ingested line and never updated. Listings are
scoped to one anchor month, support exact column filters plus a
case-insensitive ``search`` across codes, descriptions and the dept code in
metadata, and are ordered by ``company_code, material_code, id``.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from forecast_api.domain.entities.forecast_history import (
    ForecastHistoryFilter,
    ForecastHistorySnapshot,
)
from forecast_api.infrastructure.database.models.forecast import SaleForecast

from .base_repository import BaseRepository


class ForecastHistoryRepository(BaseRepository[SaleForecast]):
    """Repository for history snapshots."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            session: Async SQLAlchemy session bound to the target database.
        """
        super().__init__(session)

    async def add_snapshot(self, snapshot: ForecastHistorySnapshot) -> int:
        """Insert a snapshot and return its id."""
        model = SaleForecast(
            anchor_month=snapshot.anchor_month,
            company_code=snapshot.company_code,
            company_desc=snapshot.company_desc,
            material_code=snapshot.material_code,
            material_desc=snapshot.material_desc,
            forecast_qty=snapshot.forecast_qty,
            meta=dict(snapshot.metadata),
        )
        self._session.add(model)
        await self._session.flush()
        return int(model.id)

    async def list_snapshots(
        self, filters: ForecastHistoryFilter
    ) -> list[ForecastHistorySnapshot]:
        """Return snapshots for ``filters.anchor_month`` capped at ``filters.limit``."""
        stmt: Select[Any] = select(SaleForecast).where(
            SaleForecast.anchor_month == filters.anchor_month
        )
        if filters.company_code:
            stmt = stmt.where(SaleForecast.company_code == filters.company_code)
        if filters.company_desc:
            stmt = stmt.where(SaleForecast.company_desc == filters.company_desc)
        if filters.material_code:
            stmt = stmt.where(SaleForecast.material_code == filters.material_code)
        if filters.material_desc:
            stmt = stmt.where(SaleForecast.material_desc == filters.material_desc)
        if filters.search:
            # Literal substring: LIKE wildcards in the term are escaped.
            term = filters.search.strip()
            if term:
                stmt = stmt.where(
                    or_(
                        SaleForecast.company_code.icontains(term, autoescape=True),
                        SaleForecast.company_desc.icontains(term, autoescape=True),
                        SaleForecast.material_code.icontains(term, autoescape=True),
                        SaleForecast.material_desc.icontains(term, autoescape=True),
                        SaleForecast.meta["dept_code"].astext.icontains(term, autoescape=True),
                    )
                )

        stmt = stmt.order_by(SaleForecast.company_code, SaleForecast.material_code)
        stmt = self.order_by_pk(stmt, SaleForecast.id).limit(filters.limit)

        return [
            ForecastHistorySnapshot(
                id=int(m.id),
                anchor_month=m.anchor_month,
                company_code=m.company_code,
                company_desc=m.company_desc,
                material_code=m.material_code,
                material_desc=m.material_desc,
                forecast_qty=m.forecast_qty,
                metadata=dict(m.meta or {}),
                created_at=m.created_at,
                updated_at=m.updated_at,
            )
            for m in await self.fetch_all(stmt)
        ]
