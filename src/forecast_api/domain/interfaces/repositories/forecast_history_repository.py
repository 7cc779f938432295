# src/forecast_api/domain/interfaces/repositories/forecast_history_repository.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Domain-facing interface for the forecast history projection."""

from __future__ import annotations

from typing import Protocol

from forecast_api.domain.entities.forecast_history import (
    ForecastHistoryFilter,
    ForecastHistorySnapshot,
)


class ForecastHistoryRepository(Protocol):
    """Contract for the write-once ``saleforecast`` projection."""

    async def add_snapshot(self, snapshot: ForecastHistorySnapshot) -> int:
        """Persist one snapshot and return its id."""
        raise NotImplementedError

    async def list_snapshots(
        self, filters: ForecastHistoryFilter
    ) -> list[ForecastHistorySnapshot]:
        """Return snapshots for an anchor month ordered by company, material, id."""
        raise NotImplementedError
