# src/forecast_api/domain/interfaces/repositories/dimension_repository.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Domain-facing interface for dimension repositories.

Every method is an idempotent, conflict-safe upsert keyed by the dimension's
natural key and returns the surrogate id. Implementations must not
read-then-write; concurrent callers resolving the same key must observe the
same id.
"""

from __future__ import annotations

from typing import Protocol


class DimensionRepository(Protocol):
    """Contract for resolving natural keys to dimension surrogate ids."""

    async def upsert_company(self, company_code: str, company_desc: str | None) -> int:
        """Resolve a company, refreshing its description when one is supplied."""
        raise NotImplementedError

    async def upsert_dept(self, dept_code: str) -> int:
        """Resolve a department by code."""
        raise NotImplementedError

    async def upsert_distribution_channel(self, dc_code: str, dc_desc: str | None) -> int:
        """Resolve a distribution channel, refreshing its description when supplied."""
        raise NotImplementedError

    async def upsert_uom(self, uom_code: str) -> int:
        """Resolve a unit of measure by code."""
        raise NotImplementedError

    async def upsert_material(self, material_code: str, material_desc: str | None) -> int:
        """Resolve a material, refreshing its description when supplied."""
        raise NotImplementedError

    async def upsert_sku(self, material_id: int, pack_size: str, uom_id: int) -> int:
        """Resolve a SKU by ``(material_id, pack_size, uom_id)``."""
        raise NotImplementedError

    async def upsert_sales_org(
        self,
        division: str | None,
        sales_organization: str | None,
        sales_office: str | None,
        sales_group: str | None,
        sales_representative: str | None,
    ) -> int:
        """Resolve a sales org by its five nullable fields (NULL equals NULL)."""
        raise NotImplementedError
