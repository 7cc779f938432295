# src/forecast_api/application/use_cases/forecast/list_forecast_facts.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""List forecast facts.

Purpose:
    Translate raw listing filters into a ``ForecastFactFilter`` and return the
    matching facts, ordered by month, company, and material.

Layer:
    application/use_cases
"""

from __future__ import annotations

from forecast_api.application.schemas.dto.forecast import (
    ForecastFactDTO,
    ListForecastFactsQueryDTO,
)
from forecast_api.application.uow import UnitOfWork
from forecast_api.domain.entities.forecast_fact import ForecastFactFilter
from forecast_api.domain.exceptions.forecast import ForecastValidationError
from forecast_api.domain.interfaces.repositories.forecast_fact_repository import (
    ForecastFactRepository,
)
from forecast_api.domain.services.anchor_month import parse_month
from forecast_api.domain.value_objects.run_selector import RunSelector

DEFAULT_FACT_LIMIT = 1000


def build_fact_filter(query: ListForecastFactsQueryDTO, *, limit: int) -> ForecastFactFilter:
    """Validate ``query`` into a domain filter.

    Raises:
        ForecastValidationError: On a malformed month, an inverted range, or a
            bad run selector.
    """
    month_from = parse_month(query.month_from, field="from") if query.month_from else None
    month_to = parse_month(query.month_to, field="to") if query.month_to else None
    if month_from is not None and month_to is not None and month_from > month_to:
        raise ForecastValidationError(
            "from must not be after to",
            details={"from": query.month_from, "to": query.month_to},
        )
    return ForecastFactFilter(
        company_code=query.company_code or None,
        dept_code=query.dept_code or None,
        material_code=query.material_code or None,
        sku_id=query.sku_id,
        sales_org_id=query.sales_org_id,
        dc_code=query.dc_code or None,
        month_from=month_from,
        month_to=month_to,
        run=RunSelector.parse(query.run),
        limit=limit,
    )


class ListForecastFactsUseCase:
    """Filtered, capped fact listing."""

    def __init__(self, uow: UnitOfWork, *, limit: int = DEFAULT_FACT_LIMIT) -> None:
        self._uow = uow
        self._limit = limit

    async def execute(self, query: ListForecastFactsQueryDTO) -> list[ForecastFactDTO]:
        """Return at most ``limit`` facts matching ``query``."""
        filters = build_fact_filter(query, limit=self._limit)
        async with self._uow as tx:
            repo: ForecastFactRepository = tx.get_repository(ForecastFactRepository)
            records = await repo.list_facts(filters)
        return [
            ForecastFactDTO(
                run_id=r.run_id,
                month_id=r.month_id,
                company_code=r.company_code,
                dept_code=r.dept_code,
                material_code=r.material_code,
                sku_id=r.sku_id,
                sales_org_id=r.sales_org_id,
                dc_id=r.dc_id,
                forecast_qty=r.forecast_qty,
                unit_price_snapshot=r.unit_price_snapshot,
                revenue_snapshot=r.revenue_snapshot,
            )
            for r in records
        ]
