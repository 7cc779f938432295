# tests/unit/domain/forecast/test_anchor_month.py
from __future__ import annotations

from datetime import date

import pytest

from forecast_api.domain.exceptions.forecast import ForecastValidationError
from forecast_api.domain.services.anchor_month import (
    add_months,
    format_month,
    month_offset,
    parse_month,
)


def test_parse_month_returns_first_of_month() -> None:
    assert parse_month("2025-06") == date(2025, 6, 1)
    assert parse_month(" 2025-12 ") == date(2025, 12, 1)


@pytest.mark.parametrize("raw", ["2025-13", "2025-6", "25-06", "2025/06", "", "latest"])
def test_parse_month_rejects_malformed_keys(raw: str) -> None:
    with pytest.raises(ForecastValidationError) as exc_info:
        parse_month(raw, field="from")

    assert exc_info.value.code == "VALIDATION_ERROR"
    assert exc_info.value.details["field"] == "from"


def test_add_months_crosses_year_boundaries() -> None:
    assert add_months(date(2025, 1, 1), -2) == date(2024, 11, 1)
    assert add_months(date(2025, 11, 1), 3) == date(2026, 2, 1)
    assert add_months(date(2025, 6, 1), 0) == date(2025, 6, 1)


def test_month_offset_and_format_roundtrip() -> None:
    assert month_offset("2025-01", -1) == "2024-12"
    assert month_offset("2025-12", 1) == "2026-01"
    assert format_month(date(2025, 3, 1)) == "2025-03"
