# tests/unit/application/forecast/test_aggregation_engine.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

import pytest

from forecast_api.application.services.aggregation_engine import (
    AggregationEngine,
    parse_groups,
    parse_metric,
)
from forecast_api.domain.entities.forecast_aggregate import AggregateRow
from forecast_api.domain.enums.forecast import AggregationGroup, ForecastMetric
from forecast_api.domain.exceptions.forecast import ForecastValidationError, InvalidGroupError


def test_parse_groups_dedupes_in_caller_order() -> None:
    assert parse_groups(["month", "company", "MONTH"]) == (
        AggregationGroup.MONTH,
        AggregationGroup.COMPANY,
    )


def test_parse_groups_rejects_unknown_keys() -> None:
    with pytest.raises(InvalidGroupError) as exc_info:
        parse_groups(["company", "region"])

    assert exc_info.value.code == "INVALID_GROUP"
    assert exc_info.value.details["unknown"] == ["region"]
    assert "company" in exc_info.value.details["allowed"]


def test_parse_groups_rejects_empty() -> None:
    with pytest.raises(InvalidGroupError):
        parse_groups([])


def test_parse_metric() -> None:
    assert parse_metric("revenue_snapshot") is ForecastMetric.REVENUE_SNAPSHOT
    with pytest.raises(ForecastValidationError):
        parse_metric("margin")


def test_build_query_validates_range_and_run() -> None:
    engine = AggregationEngine(repository=None)  # type: ignore[arg-type]

    query = engine.build_query(["company"], "forecast_qty", "2025-01", "2025-03", "latest")

    assert query.month_from == date(2025, 1, 1)
    assert query.month_to == date(2025, 3, 1)
    assert query.run is not None and query.run.latest

    with pytest.raises(ForecastValidationError):
        engine.build_query(["company"], "forecast_qty", "2025-04", "2025-03")
    with pytest.raises(ForecastValidationError):
        engine.build_query(["company"], "forecast_qty", "2025-01", "2025-03", "newest")


@pytest.mark.asyncio
async def test_aggregate_validates_before_querying(fake_uow: Any) -> None:
    engine = AggregationEngine(fake_uow.facts)

    with pytest.raises(InvalidGroupError):
        await engine.aggregate(["nope"], "forecast_qty", "2025-01", "2025-02")

    assert fake_uow.facts.last_query is None


@pytest.mark.asyncio
async def test_aggregate_delegates_to_repository(fake_uow: Any) -> None:
    fake_uow.facts.aggregate_rows = [
        AggregateRow(keys={"company": "C001"}, value=Decimal("150")),
    ]
    engine = AggregationEngine(fake_uow.facts)

    rows = await engine.aggregate(["company"], "forecast_qty", "2025-01", "2025-02", 4)

    assert rows[0].value == Decimal("150")
    assert fake_uow.facts.last_query.run.run_id == 4
