# src/forecast_api/domain/interfaces/repositories/forecast_fact_repository.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Domain-facing interface for forecast fact persistence.

This module defines the capabilities required from a fact store:

* Idempotent bulk insert keyed by the fact natural key.
* Filtered listing of facts joined with dimension codes.
* Grouped aggregation with optional latest-run resolution.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from forecast_api.domain.entities.forecast_aggregate import AggregateRow, AggregationQuery
from forecast_api.domain.entities.forecast_fact import (
    ForecastFactFilter,
    ForecastFactRecord,
    ForecastFactRow,
)


class ForecastFactRepository(Protocol):
    """Domain-level contract for the forecast fact store."""

    async def insert_facts(self, rows: Sequence[ForecastFactRow]) -> int:
        """Insert fact rows, skipping rows whose natural key already exists.

        Returns:
            Number of rows actually inserted.
        """
        raise NotImplementedError

    async def list_facts(self, filters: ForecastFactFilter) -> list[ForecastFactRecord]:
        """Return facts matching ``filters`` ordered by month, company, material."""
        raise NotImplementedError

    async def aggregate(self, query: AggregationQuery) -> list[AggregateRow]:
        """Return one summed row per distinct group combination."""
        raise NotImplementedError
