# src/forecast_api/domain/entities/forecast_dimensions.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Resolved dimension keys for a forecast line."""

from __future__ import annotations

from dataclasses import asdict, dataclass

__all__ = ["ResolvedDimensions"]


@dataclass(frozen=True, slots=True)
class ResolvedDimensions:
    """Surrogate ids of every dimension a forecast line references."""

    company_id: int
    dept_id: int
    dc_id: int
    uom_id: int
    material_id: int
    sku_id: int
    sales_org_id: int

    def as_metadata(self) -> dict[str, str]:
        """Return the ids as strings, suitable for JSON metadata payloads."""
        return {key: str(value) for key, value in asdict(self).items()}
