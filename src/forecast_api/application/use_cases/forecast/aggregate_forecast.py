# src/forecast_api/application/use_cases/forecast/aggregate_forecast.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Aggregate forecast facts.

Purpose:
    Validate an aggregation request and return grouped sums as DTOs.

Layer:
    application/use_cases
"""

from __future__ import annotations

from forecast_api.application.schemas.dto.forecast import (
    AggregateForecastQueryDTO,
    AggregateRowDTO,
)
from forecast_api.application.services.aggregation_engine import AggregationEngine
from forecast_api.application.uow import UnitOfWork
from forecast_api.domain.interfaces.repositories.forecast_fact_repository import (
    ForecastFactRepository,
)


class AggregateForecastUseCase:
    """Read-only aggregation over ``fact_forecast``."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def execute(self, query: AggregateForecastQueryDTO) -> list[AggregateRowDTO]:
        """Return one row per distinct group combination.

        Raises:
            InvalidGroupError: On empty or unknown grouping keys.
            ForecastValidationError: On a bad metric, month range, or run.
        """
        async with self._uow as tx:
            engine = AggregationEngine(tx.get_repository(ForecastFactRepository))
            rows = await engine.aggregate(
                query.groups,
                query.metric,
                query.month_from,
                query.month_to,
                query.run,
            )
        return [AggregateRowDTO(keys=row.keys, value=row.value) for row in rows]
