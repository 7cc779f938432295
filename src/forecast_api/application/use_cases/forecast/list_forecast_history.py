# src/forecast_api/application/use_cases/forecast/list_forecast_history.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""List history snapshots for an anchor month."""

from __future__ import annotations

from forecast_api.application.schemas.dto.forecast import (
    ForecastHistoryDTO,
    ListForecastHistoryQueryDTO,
)
from forecast_api.application.uow import UnitOfWork
from forecast_api.domain.entities.forecast_history import (
    ForecastHistoryFilter,
    ForecastHistorySnapshot,
)
from forecast_api.domain.interfaces.repositories.forecast_history_repository import (
    ForecastHistoryRepository,
)
from forecast_api.domain.services.anchor_month import format_month, parse_month

DEFAULT_HISTORY_LIMIT = 50_000


def to_history_dto(snapshot: ForecastHistorySnapshot) -> ForecastHistoryDTO:
    """Serialize a snapshot with a string id and a ``YYYY-MM`` anchor month."""
    return ForecastHistoryDTO(
        id=str(snapshot.id) if snapshot.id is not None else "",
        anchor_month=format_month(snapshot.anchor_month),
        company_code=snapshot.company_code,
        company_desc=snapshot.company_desc,
        material_code=snapshot.material_code,
        material_desc=snapshot.material_desc,
        forecast_qty=snapshot.forecast_qty,
        metadata=snapshot.metadata,
        created_at=snapshot.created_at,
        updated_at=snapshot.updated_at,
    )


class ListForecastHistoryUseCase:
    """Exact-filter and free-text listing over ``saleforecast``."""

    def __init__(self, uow: UnitOfWork, *, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._uow = uow
        self._limit = limit

    async def execute(self, query: ListForecastHistoryQueryDTO) -> list[ForecastHistoryDTO]:
        """Return snapshots for ``query.anchor_month``.

        Raises:
            ForecastValidationError: If ``anchor_month`` is malformed.
        """
        filters = ForecastHistoryFilter(
            anchor_month=parse_month(query.anchor_month, field="anchor_month"),
            company_code=query.company_code or None,
            company_desc=query.company_desc or None,
            material_code=query.material_code or None,
            material_desc=query.material_desc or None,
            search=(query.search or "").strip() or None,
            limit=self._limit,
        )
        async with self._uow as tx:
            repo: ForecastHistoryRepository = tx.get_repository(ForecastHistoryRepository)
            snapshots = await repo.list_snapshots(filters)
        return [to_history_dto(s) for s in snapshots]
