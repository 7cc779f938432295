# src/forecast_api/application/services/run_allocator.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Run allocation service (application layer).

Purpose:
    Create a new forecast run for an ingestion batch. Every call allocates a
    fresh run, so resubmitting identical content yields a distinct version.

Layer:
    application/services
"""

from __future__ import annotations

from forecast_api.domain.entities.forecast_run import ForecastRun
from forecast_api.domain.interfaces.repositories.forecast_run_repository import (
    ForecastRunRepository,
)
from forecast_api.domain.services.anchor_month import parse_month


class RunAllocator:
    """Allocate monotonically increasing forecast runs."""

    def __init__(self, repository: ForecastRunRepository) -> None:
        self._repo = repository

    async def create_run(self, anchor_month: str) -> ForecastRun:
        """Validate ``anchor_month`` (``YYYY-MM``) and insert a new run.

        Raises:
            ForecastValidationError: If ``anchor_month`` is malformed.
        """
        return await self._repo.create_run(parse_month(anchor_month, field="anchor_month"))
