# src/forecast_api/domain/interfaces/repositories/forecast_run_repository.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Domain-facing interface for forecast run persistence."""

from __future__ import annotations

from datetime import date
from typing import Protocol

from forecast_api.domain.entities.forecast_run import ForecastRun


class ForecastRunRepository(Protocol):
    """Contract for allocating forecast runs."""

    async def create_run(self, anchor_month: date) -> ForecastRun:
        """Insert a new run row and return it with its allocated id.

        Args:
            anchor_month: First day of the batch anchor month.

        Returns:
            ForecastRun: The created run. A new run is created on every call.
        """
        raise NotImplementedError
