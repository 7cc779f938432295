# src/forecast_api/adapters/mappers/forecast_line_mapper.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Spreadsheet row and manual line mapping.

Purpose:
    Turn loosely-shaped input (already-parsed spreadsheet rows with bilingual
    headers, or manually submitted lines) into canonical ``ForecastLine``
    entities before the application layer sees them.

Layer:
    adapters/mappers

Notes:
    - ``ALIASES`` is the single canonical-field → accepted-headers table; the
      first alias with a non-blank value wins.
    - Column types are checked for the whole sheet before anything is mapped,
      and the diagnostics are rendered into an operator-facing message.
    - Missing mandatory fields are *not* rejected here. That check is done per
      line by the dimension resolver so partial-batch reporting stays exact.
    - A blank distribution channel defaults to ``NA``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import replace
from decimal import Decimal
from typing import Any, Final, Literal

from forecast_api.domain.entities.forecast_line import ForecastLine, MonthFigure
from forecast_api.domain.exceptions.forecast import SheetFormatError
from forecast_api.domain.services.anchor_month import month_offset
from forecast_api.domain.services.forecast_figures import as_decimal

ColumnType = Literal["string", "number"]

DEFAULT_DC_CODE: Final[str] = "NA"
DEFAULT_DC_DESC: Final[str] = "N/A"
MAX_REPORTED_DIAGNOSTICS: Final[int] = 10

ALIASES: Final[dict[str, tuple[str, ...]]] = {
    "company_code": ("company_code", "customer_code", "SAP Code", "CUSTOMER_CODE"),
    "company_name": ("ชื่อบริษัท", "companyName"),
    "company_desc": ("company_desc",),
    "dept_code": ("หน่วยงาน", "dept_code"),
    "dc_code": ("Distribution Channel", "dc_code"),
    "dc_desc": ("Distribution Channel Description", "dc_desc"),
    "material_code": ("material_code", "materialCode", "SAPCode"),
    "material_desc": ("ชื่อสินค้า", "material_desc"),
    "sku": ("SKU", "sku"),
    "pack_size": ("Pack Size", "pack_size"),
    "uom_code": ("หน่วย", "uom_code"),
    "division": ("Division", "division"),
    "sales_organization": ("Sales Organization", "sales_organization"),
    "sales_office": ("Sales Office", "sales_office"),
    "sales_group": ("Sales Group", "sales_group"),
    "sales_representative": ("Sales Representative", "sales_representative"),
    "price": ("Price", "price"),
}

#: Month columns relative to the anchor month.
MONTH_OFFSETS: Final[dict[str, int]] = {
    "n-2": -2,
    "n-1": -1,
    "n": 0,
    "n+1": 1,
    "n+2": 2,
    "n+3": 3,
}

COLUMN_TYPE_MAP: Final[dict[str, ColumnType]] = {
    "หน่วยงาน": "string",
    "ชื่อบริษัท": "string",
    "SAP Code": "string",
    "SAP_Code": "string",
    "SAPCode": "string",
    "ชื่อสินค้า": "string",
    "Pack Size": "string",
    "หน่วย": "string",
    **{column: "number" for column in MONTH_OFFSETS},
    "Price": "number",
    "Division": "string",
    "Sales Organization": "string",
    "Sales Office": "string",
    "Sales Group": "string",
    "Sales Representative": "string",
    "Distribution Channel": "string",
}


def normalize_string(value: Any) -> str | None:
    """Return a trimmed string for ``value``, or None when blank or absent."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        trimmed = value.strip()
        return trimmed or None
    if isinstance(value, int | float | Decimal):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    fallback = str(value).strip()
    return fallback or None


def _type_name(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    if isinstance(value, int | float | Decimal):
        return "number"
    return "object"


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return False


def collect_type_diagnostics(rows: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Return ``{row, column, expected, actual}`` entries for mistyped cells.

    ``row`` is the sheet row number: the 1-based data index plus one for the
    header row. Blank cells are never reported, and a finite number in a
    string column is accepted.
    """
    diagnostics: list[dict[str, Any]] = []
    for index, row in enumerate(rows):
        for column, expected in COLUMN_TYPE_MAP.items():
            if column not in row:
                continue
            value = row[column]
            if value is None or value == "":
                continue
            if expected == "number":
                ok = _is_finite_number(value)
            else:
                ok = isinstance(value, str) or _is_finite_number(value)
            if not ok:
                diagnostics.append(
                    {
                        "row": index + 2,
                        "column": column,
                        "expected": expected,
                        "actual": _type_name(value),
                    }
                )
    return diagnostics


def format_diagnostics(diagnostics: Sequence[Mapping[str, Any]]) -> str:
    """Render diagnostics into the operator-facing (Thai) message."""
    shown = [
        f'แถวที่ {d["row"]} คอลัมน์ "{d["column"]}" ควรเป็น {d["expected"]} แต่พบ {d["actual"]}'
        for d in diagnostics[:MAX_REPORTED_DIAGNOSTICS]
    ]
    message = "; ".join(shown)
    remaining = len(diagnostics) - len(shown)
    if remaining > 0:
        message += f"; และพบปัญหาเพิ่มเติมอีก {remaining} จุด"
    return message or "invalid column types detected"


def validate_sheet_rows(rows: Sequence[Mapping[str, Any]]) -> None:
    """Raise ``SheetFormatError`` when any cell has the wrong type."""
    diagnostics = collect_type_diagnostics(rows)
    if diagnostics:
        raise SheetFormatError(format_diagnostics(diagnostics), diagnostics=diagnostics)


def _pick(row: Mapping[str, Any], field: str) -> str | None:
    for alias in ALIASES[field]:
        value = normalize_string(row.get(alias))
        if value is not None:
            return value
    return None


def _finite_decimal(value: Any) -> Decimal | None:
    if isinstance(value, str) and not value.strip():
        return None
    number = as_decimal(value)
    if number is None or not number.is_finite():
        return None
    return number


def map_sheet_row(row: Mapping[str, Any], anchor_month: str) -> ForecastLine:
    """Map one spreadsheet row to a canonical ``ForecastLine``.

    Month columns ``n-2`` … ``n+3`` become figures for the anchor month
    shifted by the column offset. ``Price`` applies to every month; blank or
    non-finite quantities are skipped.
    """
    company_code = _pick(row, "company_code")
    company_name = _pick(row, "company_name")
    company_desc = _pick(row, "company_desc") or company_name or company_code

    material_desc = _pick(row, "material_desc")
    material_code = _pick(row, "material_code") or material_desc or _pick(row, "sku")

    dc_code = _pick(row, "dc_code") or DEFAULT_DC_CODE
    dc_desc = _pick(row, "dc_desc") or dc_code or DEFAULT_DC_DESC

    price = _finite_decimal(row.get("Price", row.get("price")))
    months: list[MonthFigure] = []
    for column, offset in MONTH_OFFSETS.items():
        qty = _finite_decimal(row.get(column))
        if qty is None:
            continue
        months.append(MonthFigure(month=month_offset(anchor_month, offset), qty=qty, price=price))

    return ForecastLine(
        company_code=company_code,
        dept_code=_pick(row, "dept_code"),
        dc_code=dc_code,
        material_code=material_code,
        pack_size=_pick(row, "pack_size"),
        uom_code=_pick(row, "uom_code"),
        company_desc=company_desc,
        dc_desc=dc_desc,
        material_desc=material_desc or material_code,
        division=_pick(row, "division"),
        sales_organization=_pick(row, "sales_organization"),
        sales_office=_pick(row, "sales_office"),
        sales_group=_pick(row, "sales_group"),
        sales_representative=_pick(row, "sales_representative"),
        months=tuple(months),
    )


def map_sheet_rows(rows: Sequence[Mapping[str, Any]], anchor_month: str) -> list[ForecastLine]:
    """Type-check every row, then map them in order.

    Raises:
        SheetFormatError: If any cell has the wrong type (no row is mapped).
    """
    validate_sheet_rows(rows)
    return [map_sheet_row(row, anchor_month) for row in rows]


def apply_default_dc(line: ForecastLine) -> ForecastLine:
    """Fill a blank distribution channel on a manually submitted line."""
    dc_code = (line.dc_code or "").strip() or DEFAULT_DC_CODE
    dc_desc = (line.dc_desc or "").strip() or dc_code or DEFAULT_DC_DESC
    if dc_code == line.dc_code and dc_desc == line.dc_desc:
        return line
    return replace(line, dc_code=dc_code, dc_desc=dc_desc)
