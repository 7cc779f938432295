# src/forecast_api/domain/entities/forecast_run.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Forecast run (Domain Entity).

Synopsis:
    A run is the immutable version stamp of one ingestion batch. Run ids are
    allocated by the database and increase monotonically; the greatest id is
    the "latest" run.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True, slots=True)
class ForecastRun:
    """Persisted forecast run.

    Attributes:
        run_id: Database-assigned monotonically increasing identifier.
        anchor_month: First day of the month the batch was submitted for.
        created_at: Insert timestamp, when known.
    """

    run_id: int
    anchor_month: date
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        """Enforce basic invariants."""
        if self.run_id <= 0:
            raise ValueError("ForecastRun.run_id must be positive.")
        if self.anchor_month.day != 1:
            raise ValueError("ForecastRun.anchor_month must be the first day of a month.")
