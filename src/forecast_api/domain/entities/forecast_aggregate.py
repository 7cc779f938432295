# src/forecast_api/domain/entities/forecast_aggregate.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Aggregation query and result shapes (Domain Entities).

Synopsis:
    ``AggregationQuery`` is an already-validated aggregation request. Each
    ``AggregateRow`` holds one distinct combination of the grouping keys and
    the summed metric for that combination.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from forecast_api.domain.enums.forecast import AggregationGroup, ForecastMetric
from forecast_api.domain.value_objects.run_selector import RunSelector

__all__ = ["AggregationQuery", "AggregateRow"]


@dataclass(frozen=True, slots=True)
class AggregationQuery:
    """Validated aggregation request.

    Attributes:
        groups: Non-empty, de-duplicated grouping keys in caller order.
        metric: Fact column to sum.
        month_from: Inclusive lower month bound (first-of-month).
        month_to: Inclusive upper month bound (first-of-month).
        run: Optional run restriction.
    """

    groups: tuple[AggregationGroup, ...]
    metric: ForecastMetric
    month_from: date
    month_to: date
    run: RunSelector | None = None


@dataclass(frozen=True, slots=True)
class AggregateRow:
    """One grouped result.

    Attributes:
        keys: Group name → value (``company`` → company code, ``month`` → date, ...).
        value: ``SUM(metric)``; None when every summed value was NULL.
    """

    keys: dict[str, Any] = field(default_factory=dict)
    value: Decimal | None = None
