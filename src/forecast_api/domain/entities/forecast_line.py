# src/forecast_api/domain/entities/forecast_line.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Forecast Lines (Domain Entities).

Synopsis:
    A forecast line is one customer × material × pack combination carrying
    quantities for one or more months. Lines arrive from manual entry or from
    spreadsheet rows and are resolved against the dimension tables before
    facts are written.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

__all__ = ["MonthFigure", "ForecastLine", "REQUIRED_LINE_FIELDS"]

#: Natural-key fields that must be non-blank before a line can be resolved.
REQUIRED_LINE_FIELDS: tuple[str, ...] = (
    "company_code",
    "dept_code",
    "dc_code",
    "material_code",
    "pack_size",
    "uom_code",
)


@dataclass(frozen=True, slots=True)
class MonthFigure:
    """Quantity (and optional unit price) for a single month.

    Attributes:
        month: Month key in ``YYYY-MM`` form.
        qty: Forecast quantity. May be non-finite when sourced from loose input;
            such values are ignored by history quantity derivation.
        price: Unit price snapshot, or None when not supplied.
    """

    month: str
    qty: Decimal
    price: Decimal | None = None


@dataclass(frozen=True, slots=True)
class ForecastLine:
    """A single forecast line prior to dimension resolution.

    Sales-org fields are passed through verbatim: ``None`` and ``""`` are
    distinct values for the sales-org natural key.
    """

    company_code: str | None
    dept_code: str | None
    dc_code: str | None
    material_code: str | None
    pack_size: str | None
    uom_code: str | None
    company_desc: str | None = None
    dc_desc: str | None = None
    material_desc: str | None = None
    division: str | None = None
    sales_organization: str | None = None
    sales_office: str | None = None
    sales_group: str | None = None
    sales_representative: str | None = None
    months: tuple[MonthFigure, ...] = field(default_factory=tuple)

    def missing_fields(self) -> list[str]:
        """Return the required natural-key fields that are absent or blank."""
        missing: list[str] = []
        for name in REQUIRED_LINE_FIELDS:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                missing.append(name)
        return missing

    def sales_org_key(self) -> tuple[str | None, str | None, str | None, str | None, str | None]:
        """Return the five-part sales-org natural key in column order."""
        return (
            self.division,
            self.sales_organization,
            self.sales_office,
            self.sales_group,
            self.sales_representative,
        )
