# src/forecast_api/application/services/aggregation_engine.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Aggregation service (application layer).

Purpose:
    Validate an ad hoc aggregation request (grouping keys, metric, month range,
    run selector) and delegate the grouped sum to the fact repository.

Layer:
    application/services

Notes:
    - Every validation error is raised before any query is issued.
    - Duplicate grouping keys collapse, keeping first-occurrence order.
"""

from __future__ import annotations

from collections.abc import Sequence

from forecast_api.domain.entities.forecast_aggregate import AggregateRow, AggregationQuery
from forecast_api.domain.enums.forecast import AggregationGroup, ForecastMetric
from forecast_api.domain.exceptions.forecast import ForecastValidationError, InvalidGroupError
from forecast_api.domain.interfaces.repositories.forecast_fact_repository import (
    ForecastFactRepository,
)
from forecast_api.domain.services.anchor_month import parse_month
from forecast_api.domain.value_objects.run_selector import RunSelector


def parse_groups(raw_groups: Sequence[str]) -> tuple[AggregationGroup, ...]:
    """Validate and de-duplicate grouping keys.

    Raises:
        InvalidGroupError: If the list is empty or contains an unknown key.
    """
    groups: list[AggregationGroup] = []
    unknown: list[str] = []
    for raw in raw_groups:
        group = AggregationGroup.parse(raw)
        if group is None:
            unknown.append(raw)
        elif group not in groups:
            groups.append(group)

    if unknown:
        raise InvalidGroupError(
            f"unknown group key(s): {', '.join(unknown)}",
            details={"unknown": unknown, "allowed": [g.value for g in AggregationGroup]},
        )
    if not groups:
        raise InvalidGroupError(
            "at least one group key is required",
            details={"allowed": [g.value for g in AggregationGroup]},
        )
    return tuple(groups)


def parse_metric(raw: str) -> ForecastMetric:
    """Return the metric for ``raw`` or raise ``ForecastValidationError``."""
    try:
        return ForecastMetric((raw or "").strip())
    except ValueError as exc:
        raise ForecastValidationError(
            f"unsupported metric: {raw}",
            details={"metric": raw, "allowed": [m.value for m in ForecastMetric]},
        ) from exc


class AggregationEngine:
    """Grouped sums over forecast facts."""

    def __init__(self, repository: ForecastFactRepository) -> None:
        self._repo = repository

    def build_query(
        self,
        groups: Sequence[str],
        metric: str,
        month_from: str,
        month_to: str,
        run: str | int | None = None,
    ) -> AggregationQuery:
        """Validate raw inputs into an :class:`AggregationQuery`."""
        parsed_groups = parse_groups(groups)
        parsed_metric = parse_metric(metric)
        start = parse_month(month_from, field="from")
        end = parse_month(month_to, field="to")
        if start > end:
            raise ForecastValidationError(
                "from must not be after to",
                details={"from": month_from, "to": month_to},
            )
        return AggregationQuery(
            groups=parsed_groups,
            metric=parsed_metric,
            month_from=start,
            month_to=end,
            run=RunSelector.parse(run),
        )

    async def aggregate(
        self,
        groups: Sequence[str],
        metric: str,
        month_from: str,
        month_to: str,
        run: str | int | None = None,
    ) -> list[AggregateRow]:
        """Return ``SUM(metric)`` per distinct group combination.

        Args:
            groups: Ordered grouping keys (company, dept, material, sku, month, run).
            metric: ``forecast_qty`` or ``revenue_snapshot``.
            month_from: Inclusive lower bound (``YYYY-MM``).
            month_to: Inclusive upper bound (``YYYY-MM``).
            run: None, a run id, or ``"latest"``.

        Raises:
            InvalidGroupError: On empty or unknown grouping keys.
            ForecastValidationError: On a bad metric, month, range, or run.
        """
        query = self.build_query(groups, metric, month_from, month_to, run)
        return await self._repo.aggregate(query)
