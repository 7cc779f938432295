# src/forecast_api/infrastructure/database/models/forecast.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Forecast star-schema ORM models.

Tables:
    * Dimensions: ``dim_company``, ``dim_dept``, ``dim_distribution_channel``,
      ``dim_uom``, ``dim_material``, ``dim_sku``, ``dim_sales_org``.
    * Versioning: ``forecast_run``.
    * Facts: ``fact_forecast``.
    * Projections and side tables: ``saleforecast`` (history),
      ``monthly_access_control``, ``audit_logs``.

All surrogate keys are ``BIGINT GENERATED BY DEFAULT AS IDENTITY``; ingestion
never deletes dimension rows. Quantities and prices use ``NUMERIC(20, 6)``.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Identity,
    Numeric,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .base import Base, JSONBType, TimestampMixin

__all__ = [
    "DimCompany",
    "DimDept",
    "DimDistributionChannel",
    "DimUom",
    "DimMaterial",
    "DimSku",
    "DimSalesOrg",
    "ForecastRunModel",
    "FactForecast",
    "SaleForecast",
    "MonthlyAccessControl",
    "AuditLog",
    "FACT_NATURAL_KEY_CONSTRAINT",
    "SKU_NATURAL_KEY_CONSTRAINT",
    "SALES_ORG_NATURAL_KEY_CONSTRAINT",
]

FACT_NATURAL_KEY_CONSTRAINT = "uq_fact_forecast_natural_key"
SKU_NATURAL_KEY_CONSTRAINT = "uq_dim_sku_natural_key"
SALES_ORG_NATURAL_KEY_CONSTRAINT = "uq_dim_sales_org_natural_key"

_QTY = Numeric(20, 6)


def _identity_pk() -> Any:
    return mapped_column(BigInteger, Identity(always=False), primary_key=True)


# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------


class DimCompany(Base):
    """Customer company keyed by ``company_code``."""

    __tablename__ = "dim_company"

    company_id: Mapped[int] = _identity_pk()
    company_code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    company_desc: Mapped[str | None] = mapped_column(String(255), nullable=True)


class DimDept(Base):
    """Department keyed by ``dept_code``."""

    __tablename__ = "dim_dept"

    dept_id: Mapped[int] = _identity_pk()
    dept_code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)


class DimDistributionChannel(Base):
    """Distribution channel keyed by ``dc_code``."""

    __tablename__ = "dim_distribution_channel"

    dc_id: Mapped[int] = _identity_pk()
    dc_code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    dc_desc: Mapped[str | None] = mapped_column(String(255), nullable=True)


class DimUom(Base):
    """Unit of measure keyed by ``uom_code``."""

    __tablename__ = "dim_uom"

    uom_id: Mapped[int] = _identity_pk()
    uom_code: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)


class DimMaterial(Base):
    """Material keyed by ``material_code``."""

    __tablename__ = "dim_material"

    material_id: Mapped[int] = _identity_pk()
    material_code: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    material_desc: Mapped[str | None] = mapped_column(String(255), nullable=True)


class DimSku(Base):
    """Pack of a material, keyed by ``(material_id, pack_size, uom_id)``."""

    __tablename__ = "dim_sku"
    __table_args__ = (
        UniqueConstraint("material_id", "pack_size", "uom_id", name=SKU_NATURAL_KEY_CONSTRAINT),
    )

    sku_id: Mapped[int] = _identity_pk()
    material_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("dim_material.material_id"), nullable=False
    )
    pack_size: Mapped[str] = mapped_column(String(64), nullable=False)
    uom_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("dim_uom.uom_id"), nullable=False)


class DimSalesOrg(Base):
    """Sales organization keyed by five nullable fields.

    The unique constraint is ``NULLS NOT DISTINCT`` (PostgreSQL 15+): two rows
    with NULL in the same positions collide, while NULL and ``''`` differ.
    """

    __tablename__ = "dim_sales_org"
    __table_args__ = (
        UniqueConstraint(
            "division",
            "sales_organization",
            "sales_office",
            "sales_group",
            "sales_representative",
            name=SALES_ORG_NATURAL_KEY_CONSTRAINT,
            postgresql_nulls_not_distinct=True,
        ),
    )

    sales_org_id: Mapped[int] = _identity_pk()
    division: Mapped[str | None] = mapped_column(String(128), nullable=True)
    sales_organization: Mapped[str | None] = mapped_column(String(128), nullable=True)
    sales_office: Mapped[str | None] = mapped_column(String(128), nullable=True)
    sales_group: Mapped[str | None] = mapped_column(String(128), nullable=True)
    sales_representative: Mapped[str | None] = mapped_column(String(255), nullable=True)


# ---------------------------------------------------------------------------
# Runs and facts
# ---------------------------------------------------------------------------


class ForecastRunModel(Base):
    """One ingestion batch. ``run_id`` order defines "latest"."""

    __tablename__ = "forecast_run"

    run_id: Mapped[int] = _identity_pk()
    anchor_month: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class FactForecast(Base):
    """Monthly forecast fact at the run × dimensions × month grain."""

    __tablename__ = "fact_forecast"
    __table_args__ = (
        UniqueConstraint(
            "run_id",
            "company_id",
            "dept_id",
            "sku_id",
            "sales_org_id",
            "dc_id",
            "month_id",
            name=FACT_NATURAL_KEY_CONSTRAINT,
        ),
    )

    fact_id: Mapped[int] = _identity_pk()
    run_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("forecast_run.run_id"), nullable=False, index=True
    )
    company_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("dim_company.company_id"), nullable=False
    )
    dept_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("dim_dept.dept_id"), nullable=False)
    sku_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("dim_sku.sku_id"), nullable=False)
    sales_org_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("dim_sales_org.sales_org_id"), nullable=False
    )
    dc_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("dim_distribution_channel.dc_id"), nullable=False
    )
    month_id: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    forecast_qty: Mapped[Decimal] = mapped_column(_QTY, nullable=False)
    unit_price_snapshot: Mapped[Decimal | None] = mapped_column(_QTY, nullable=True)
    revenue_snapshot: Mapped[Decimal | None] = mapped_column(Numeric(24, 6), nullable=True)


# ---------------------------------------------------------------------------
# Projection and side tables
# ---------------------------------------------------------------------------


class SaleForecast(TimestampMixin, Base):
    """Write-once history snapshot of an ingested line."""

    __tablename__ = "saleforecast"

    id: Mapped[int] = _identity_pk()
    anchor_month: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    company_code: Mapped[str] = mapped_column(String(64), nullable=False)
    company_desc: Mapped[str | None] = mapped_column(String(255), nullable=True)
    material_code: Mapped[str] = mapped_column(String(128), nullable=False)
    material_desc: Mapped[str | None] = mapped_column(String(255), nullable=True)
    forecast_qty: Mapped[Decimal] = mapped_column(_QTY, nullable=False)
    # ``metadata`` is reserved on declarative classes.
    meta: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSONBType, nullable=False, server_default=text("'{}'::jsonb")
    )


class MonthlyAccessControl(Base):
    """Per-user, per-month edit lock (administered externally)."""

    __tablename__ = "monthly_access_control"
    __table_args__ = (UniqueConstraint("user_email", "anchor_month"),)

    id: Mapped[int] = _identity_pk()
    user_email: Mapped[str] = mapped_column(String(320), nullable=False)
    anchor_month: Mapped[date] = mapped_column(Date, nullable=False)
    is_locked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    locked_by: Mapped[str | None] = mapped_column(String(320), nullable=True)
    locked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class AuditLog(Base):
    """Append-only audit entry."""

    __tablename__ = "audit_logs"

    id: Mapped[int] = _identity_pk()
    service: Mapped[str] = mapped_column(String(64), nullable=False)
    endpoint: Mapped[str] = mapped_column(String(255), nullable=False)
    action: Mapped[str] = mapped_column(String(16), nullable=False)
    record_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    performed_by: Mapped[str | None] = mapped_column(String(320), nullable=True)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    user_username: Mapped[str | None] = mapped_column(String(128), nullable=True)
    client_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    meta: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSONBType, nullable=True)
    performed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
