# src/forecast_api/domain/services/forecast_figures.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Forecast figure rules.

Purpose:
    Pure functions deriving fact revenue and the representative history
    quantity of a line.

Rules:
    * ``revenue = price * qty`` when a price is present, otherwise None (never 0).
    * History quantity is the anchor-month quantity when the line carries a
      finite one, else the sum of all finite quantities, else ``0``.

Layer:
    domain/services
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal, InvalidOperation

from forecast_api.domain.entities.forecast_line import MonthFigure

__all__ = ["as_decimal", "revenue_for", "history_quantity"]


def as_decimal(value: object) -> Decimal | None:
    """Coerce a numeric-ish value to Decimal; None when it cannot be parsed."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None


def _is_finite(value: Decimal | None) -> bool:
    return value is not None and value.is_finite()


def revenue_for(qty: Decimal, price: Decimal | None) -> Decimal | None:
    """Return ``price * qty``, or None when no price is supplied."""
    if price is None:
        return None
    return price * qty


def history_quantity(anchor_month: str, months: Iterable[MonthFigure]) -> Decimal:
    """Return the representative quantity recorded in the history projection.

    Args:
        anchor_month: Batch anchor month (``YYYY-MM``).
        months: Month figures of the line.

    Returns:
        Decimal: Anchor-month qty, or the sum of finite quantities.
    """
    figures = list(months)
    anchor = anchor_month.strip()
    for figure in figures:
        if figure.month.strip() == anchor:
            qty = as_decimal(figure.qty)
            if _is_finite(qty):
                return qty  # type: ignore[return-value]

    total = Decimal("0")
    for figure in figures:
        qty = as_decimal(figure.qty)
        if _is_finite(qty):
            total += qty  # type: ignore[operator]
    return total
