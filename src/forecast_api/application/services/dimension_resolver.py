# src/forecast_api/application/services/dimension_resolver.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Dimension resolution service (application layer).

Purpose:
    Map the natural keys of a forecast line to surrogate dimension ids using
    the conflict-safe upserts of the dimension repository.

Layer:
    application/services

Notes:
    - Required natural-key fields are validated before any statement runs.
    - SKU depends on material and uom, so those are resolved first.
    - No commit/rollback; callers own the transaction.
"""

from __future__ import annotations

from forecast_api.domain.entities.forecast_dimensions import ResolvedDimensions
from forecast_api.domain.entities.forecast_line import ForecastLine
from forecast_api.domain.exceptions.forecast import ForecastValidationError
from forecast_api.domain.interfaces.repositories.dimension_repository import (
    DimensionRepository,
)


def _code(value: str | None) -> str:
    return (value or "").strip()


class DimensionResolver:
    """Resolve every dimension a line references."""

    def __init__(self, repository: DimensionRepository) -> None:
        """Initialize the resolver.

        Args:
            repository: Dimension repository bound to the active transaction.
        """
        self._repo = repository

    async def resolve(self, line: ForecastLine) -> ResolvedDimensions:
        """Upsert each dimension of ``line`` and return the surrogate ids.

        Args:
            line: Forecast line to resolve.

        Returns:
            ResolvedDimensions: Ids for company, dept, dc, uom, material, sku,
            and sales org.

        Raises:
            ForecastValidationError: If a required natural-key field is missing.
        """
        missing = line.missing_fields()
        if missing:
            raise ForecastValidationError(
                f"missing required lookup fields: {', '.join(missing)}",
                details={"missing_fields": missing},
            )

        company_id = await self._repo.upsert_company(_code(line.company_code), line.company_desc)
        dept_id = await self._repo.upsert_dept(_code(line.dept_code))
        dc_id = await self._repo.upsert_distribution_channel(_code(line.dc_code), line.dc_desc)
        uom_id = await self._repo.upsert_uom(_code(line.uom_code))
        material_id = await self._repo.upsert_material(
            _code(line.material_code), line.material_desc
        )
        sku_id = await self._repo.upsert_sku(material_id, _code(line.pack_size), uom_id)
        sales_org_id = await self._repo.upsert_sales_org(*line.sales_org_key())

        return ResolvedDimensions(
            company_id=company_id,
            dept_id=dept_id,
            dc_id=dc_id,
            uom_id=uom_id,
            material_id=material_id,
            sku_id=sku_id,
            sales_org_id=sales_org_id,
        )
