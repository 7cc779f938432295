# src/forecast_api/domain/services/anchor_month.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Month key helpers.

Purpose:
    Parse, format, and shift ``YYYY-MM`` month keys. Months are stored as the
    first day of the month (``DATE``) everywhere in the schema.

Layer:
    domain/services
"""

from __future__ import annotations

import re
from datetime import date

from forecast_api.domain.exceptions.forecast import ForecastValidationError

__all__ = ["MONTH_PATTERN", "parse_month", "format_month", "add_months", "month_offset"]

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def parse_month(value: str, *, field: str = "month") -> date:
    """Parse a ``YYYY-MM`` key into the first day of that month.

    Args:
        value: Month key such as ``"2025-06"``.
        field: Name reported in the error details.

    Returns:
        date: First-of-month date.

    Raises:
        ForecastValidationError: If ``value`` is not a valid month key.
    """
    raw = value.strip() if isinstance(value, str) else ""
    if not MONTH_PATTERN.match(raw):
        raise ForecastValidationError(
            f"{field} must be in YYYY-MM format",
            details={"field": field, "value": value},
        )
    year, month = raw.split("-")
    return date(int(year), int(month), 1)


def format_month(value: date) -> str:
    """Render a date as its ``YYYY-MM`` month key."""
    return f"{value.year:04d}-{value.month:02d}"


def add_months(value: date, offset: int) -> date:
    """Shift a first-of-month date by ``offset`` months (may be negative)."""
    index = value.year * 12 + (value.month - 1) + offset
    return date(index // 12, index % 12 + 1, 1)


def month_offset(anchor: str, offset: int) -> str:
    """Return the month key ``offset`` months away from ``anchor``."""
    return format_month(add_months(parse_month(anchor, field="anchor_month"), offset))
