# tests/unit/domain/forecast/test_forecast_figures.py
from __future__ import annotations

from decimal import Decimal

from forecast_api.domain.entities.forecast_line import MonthFigure
from forecast_api.domain.services.forecast_figures import (
    as_decimal,
    history_quantity,
    revenue_for,
)


def test_revenue_is_price_times_qty() -> None:
    assert revenue_for(Decimal("50"), Decimal("0.5")) == Decimal("25.0")


def test_revenue_is_none_without_price() -> None:
    assert revenue_for(Decimal("50"), None) is None


def test_revenue_is_zero_only_for_zero_price() -> None:
    assert revenue_for(Decimal("50"), Decimal("0")) == Decimal("0")


def test_history_quantity_prefers_anchor_month() -> None:
    months = [
        MonthFigure(month="2025-05", qty=Decimal("10")),
        MonthFigure(month="2025-06", qty=Decimal("50")),
        MonthFigure(month="2025-07", qty=Decimal("70")),
    ]

    assert history_quantity("2025-06", months) == Decimal("50")


def test_history_quantity_sums_when_anchor_missing() -> None:
    months = [
        MonthFigure(month="2025-07", qty=Decimal("20")),
        MonthFigure(month="2025-08", qty=Decimal("30")),
    ]

    assert history_quantity("2025-06", months) == Decimal("50")


def test_history_quantity_skips_non_finite_values() -> None:
    months = [
        MonthFigure(month="2025-06", qty=Decimal("NaN")),
        MonthFigure(month="2025-07", qty=Decimal("5")),
        MonthFigure(month="2025-08", qty=Decimal("Infinity")),
    ]

    assert history_quantity("2025-06", months) == Decimal("5")


def test_history_quantity_defaults_to_zero() -> None:
    assert history_quantity("2025-06", []) == Decimal("0")


def test_as_decimal_handles_loose_input() -> None:
    assert as_decimal("12.5") == Decimal("12.5")
    assert as_decimal(3) == Decimal("3")
    assert as_decimal(None) is None
    assert as_decimal(True) is None
    assert as_decimal("abc") is None
