# src/forecast_api/adapters/repositories/forecast_run_repository.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Forecast run repository backed by ``forecast_run``."""

from __future__ import annotations

from datetime import date

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from forecast_api.domain.entities.forecast_run import ForecastRun
from forecast_api.infrastructure.database.models.forecast import ForecastRunModel

from .base_repository import BaseRepository


class ForecastRunRepository(BaseRepository[ForecastRunModel]):
    """Allocates immutable runs; ids come from the identity column."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            session: Async SQLAlchemy session bound to the target database.
        """
        super().__init__(session)

    async def create_run(self, anchor_month: date) -> ForecastRun:
        """Insert a run row and return it. Duplicate submissions yield distinct runs."""
        stmt = (
            insert(ForecastRunModel)
            .values(anchor_month=anchor_month)
            .returning(
                ForecastRunModel.run_id,
                ForecastRunModel.anchor_month,
                ForecastRunModel.created_at,
            )
        )
        res = await self._session.execute(stmt)
        row = res.one()
        return ForecastRun(
            run_id=int(row.run_id),
            anchor_month=row.anchor_month,
            created_at=row.created_at,
        )
