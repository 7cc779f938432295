# src/forecast_api/adapters/repositories/dimension_repository.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Dimension repository.

This repository resolves natural keys to surrogate ids for the forecast
dimension tables.

Responsibilities
----------------
* One ``INSERT ... ON CONFLICT (natural key) DO UPDATE ... RETURNING id``
  statement per dimension: no read-then-write, safe under concurrency.
* Company, distribution channel, and material refresh their description on
  conflict when the caller supplies one (``COALESCE(excluded, current)``).
* Code-only dimensions use a no-op update so ``RETURNING`` always yields the
  existing id.

Layer
-----
Adapters / repositories.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from forecast_api.infrastructure.database.models.forecast import (
    SALES_ORG_NATURAL_KEY_CONSTRAINT,
    SKU_NATURAL_KEY_CONSTRAINT,
    DimCompany,
    DimDept,
    DimDistributionChannel,
    DimMaterial,
    DimSalesOrg,
    DimSku,
    DimUom,
)

from .base_repository import BaseRepository


class DimensionRepository(BaseRepository[Any]):
    """Conflict-safe upserts for every forecast dimension."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            session: Async SQLAlchemy session bound to the target database.
        """
        super().__init__(session)

    async def upsert_company(self, company_code: str, company_desc: str | None) -> int:
        """Resolve ``dim_company`` by code; refresh ``company_desc`` when supplied."""
        stmt = pg_insert(DimCompany).values(company_code=company_code, company_desc=company_desc)
        stmt = stmt.on_conflict_do_update(
            index_elements=[DimCompany.company_code],
            set_={
                "company_desc": func.coalesce(
                    stmt.excluded.company_desc, DimCompany.company_desc
                ),
            },
        ).returning(DimCompany.company_id)
        return await self.execute_returning_id(stmt)

    async def upsert_dept(self, dept_code: str) -> int:
        """Resolve ``dim_dept`` by code."""
        stmt = pg_insert(DimDept).values(dept_code=dept_code)
        stmt = stmt.on_conflict_do_update(
            index_elements=[DimDept.dept_code],
            set_={"dept_code": stmt.excluded.dept_code},
        ).returning(DimDept.dept_id)
        return await self.execute_returning_id(stmt)

    async def upsert_distribution_channel(self, dc_code: str, dc_desc: str | None) -> int:
        """Resolve ``dim_distribution_channel`` by code; refresh ``dc_desc`` when supplied."""
        stmt = pg_insert(DimDistributionChannel).values(dc_code=dc_code, dc_desc=dc_desc)
        stmt = stmt.on_conflict_do_update(
            index_elements=[DimDistributionChannel.dc_code],
            set_={
                "dc_desc": func.coalesce(stmt.excluded.dc_desc, DimDistributionChannel.dc_desc),
            },
        ).returning(DimDistributionChannel.dc_id)
        return await self.execute_returning_id(stmt)

    async def upsert_uom(self, uom_code: str) -> int:
        """Resolve ``dim_uom`` by code."""
        stmt = pg_insert(DimUom).values(uom_code=uom_code)
        stmt = stmt.on_conflict_do_update(
            index_elements=[DimUom.uom_code],
            set_={"uom_code": stmt.excluded.uom_code},
        ).returning(DimUom.uom_id)
        return await self.execute_returning_id(stmt)

    async def upsert_material(self, material_code: str, material_desc: str | None) -> int:
        """Resolve ``dim_material`` by code; refresh ``material_desc`` when supplied."""
        stmt = pg_insert(DimMaterial).values(
            material_code=material_code, material_desc=material_desc
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[DimMaterial.material_code],
            set_={
                "material_desc": func.coalesce(
                    stmt.excluded.material_desc, DimMaterial.material_desc
                ),
            },
        ).returning(DimMaterial.material_id)
        return await self.execute_returning_id(stmt)

    async def upsert_sku(self, material_id: int, pack_size: str, uom_id: int) -> int:
        """Resolve ``dim_sku`` by ``(material_id, pack_size, uom_id)``."""
        stmt = pg_insert(DimSku).values(
            material_id=material_id, pack_size=pack_size, uom_id=uom_id
        )
        stmt = stmt.on_conflict_do_update(
            constraint=SKU_NATURAL_KEY_CONSTRAINT,
            set_={"pack_size": stmt.excluded.pack_size},
        ).returning(DimSku.sku_id)
        return await self.execute_returning_id(stmt)

    async def upsert_sales_org(
        self,
        division: str | None,
        sales_organization: str | None,
        sales_office: str | None,
        sales_group: str | None,
        sales_representative: str | None,
    ) -> int:
        """Resolve ``dim_sales_org`` by its five fields.

        Values are stored verbatim: the ``NULLS NOT DISTINCT`` constraint makes
        all-NULL tuples collide, and ``''`` stays distinct from NULL.
        """
        stmt = pg_insert(DimSalesOrg).values(
            division=division,
            sales_organization=sales_organization,
            sales_office=sales_office,
            sales_group=sales_group,
            sales_representative=sales_representative,
        )
        stmt = stmt.on_conflict_do_update(
            constraint=SALES_ORG_NATURAL_KEY_CONSTRAINT,
            set_={"division": stmt.excluded.division},
        ).returning(DimSalesOrg.sales_org_id)
        return await self.execute_returning_id(stmt)
