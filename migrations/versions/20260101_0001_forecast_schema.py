# migrations/versions/20260101_0001_forecast_schema.py
"""Create the forecast star schema.

Revision ID: 20260101_0001_forecast_schema
Revises:
Create Date: 2026-01-01

Creates the dimension tables, the run registry, the fact table, the history
projection (``saleforecast``), the per-user monthly lock table, and the audit
log. Surrogate keys are identity BIGINTs. The sales-organization natural key
is ``NULLS NOT DISTINCT`` and therefore requires PostgreSQL 15 or newer.
"""

from __future__ import annotations

import os
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20260101_0001_forecast_schema"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

SCHEMA: str | None = os.getenv("DB_SCHEMA") or None

_QTY = sa.Numeric(20, 6)


def _pk(name: str) -> sa.Column:
    return sa.Column(name, sa.BigInteger(), sa.Identity(always=False), nullable=False)


def _fk(column: str, table: str, target: str) -> sa.ForeignKeyConstraint:
    qualified = f"{SCHEMA}.{table}.{target}" if SCHEMA else f"{table}.{target}"
    return sa.ForeignKeyConstraint([column], [qualified])


def upgrade() -> None:
    """Create all forecast tables, constraints, and indexes."""
    if SCHEMA:
        op.execute(f'CREATE SCHEMA IF NOT EXISTS "{SCHEMA}"')

    # --- Dimensions -----------------------------------------------------------
    op.create_table(
        "dim_company",
        _pk("company_id"),
        sa.Column("company_code", sa.String(length=64), nullable=False),
        sa.Column("company_desc", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("company_id", name="pk_dim_company"),
        sa.UniqueConstraint("company_code", name="uq_dim_company_company_code"),
        schema=SCHEMA,
    )
    op.create_table(
        "dim_dept",
        _pk("dept_id"),
        sa.Column("dept_code", sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint("dept_id", name="pk_dim_dept"),
        sa.UniqueConstraint("dept_code", name="uq_dim_dept_dept_code"),
        schema=SCHEMA,
    )
    op.create_table(
        "dim_distribution_channel",
        _pk("dc_id"),
        sa.Column("dc_code", sa.String(length=64), nullable=False),
        sa.Column("dc_desc", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("dc_id", name="pk_dim_distribution_channel"),
        sa.UniqueConstraint("dc_code", name="uq_dim_distribution_channel_dc_code"),
        schema=SCHEMA,
    )
    op.create_table(
        "dim_uom",
        _pk("uom_id"),
        sa.Column("uom_code", sa.String(length=32), nullable=False),
        sa.PrimaryKeyConstraint("uom_id", name="pk_dim_uom"),
        sa.UniqueConstraint("uom_code", name="uq_dim_uom_uom_code"),
        schema=SCHEMA,
    )
    op.create_table(
        "dim_material",
        _pk("material_id"),
        sa.Column("material_code", sa.String(length=128), nullable=False),
        sa.Column("material_desc", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("material_id", name="pk_dim_material"),
        sa.UniqueConstraint("material_code", name="uq_dim_material_material_code"),
        schema=SCHEMA,
    )
    op.create_table(
        "dim_sku",
        _pk("sku_id"),
        sa.Column("material_id", sa.BigInteger(), nullable=False),
        sa.Column("pack_size", sa.String(length=64), nullable=False),
        sa.Column("uom_id", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("sku_id", name="pk_dim_sku"),
        _fk("material_id", "dim_material", "material_id"),
        _fk("uom_id", "dim_uom", "uom_id"),
        sa.UniqueConstraint("material_id", "pack_size", "uom_id", name="uq_dim_sku_natural_key"),
        schema=SCHEMA,
    )
    op.create_table(
        "dim_sales_org",
        _pk("sales_org_id"),
        sa.Column("division", sa.String(length=128), nullable=True),
        sa.Column("sales_organization", sa.String(length=128), nullable=True),
        sa.Column("sales_office", sa.String(length=128), nullable=True),
        sa.Column("sales_group", sa.String(length=128), nullable=True),
        sa.Column("sales_representative", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("sales_org_id", name="pk_dim_sales_org"),
        sa.UniqueConstraint(
            "division",
            "sales_organization",
            "sales_office",
            "sales_group",
            "sales_representative",
            name="uq_dim_sales_org_natural_key",
            postgresql_nulls_not_distinct=True,
        ),
        schema=SCHEMA,
    )

    # --- Runs and facts -------------------------------------------------------
    op.create_table(
        "forecast_run",
        _pk("run_id"),
        sa.Column("anchor_month", sa.Date(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("run_id", name="pk_forecast_run"),
        schema=SCHEMA,
    )
    op.create_table(
        "fact_forecast",
        _pk("fact_id"),
        sa.Column("run_id", sa.BigInteger(), nullable=False),
        sa.Column("company_id", sa.BigInteger(), nullable=False),
        sa.Column("dept_id", sa.BigInteger(), nullable=False),
        sa.Column("sku_id", sa.BigInteger(), nullable=False),
        sa.Column("sales_org_id", sa.BigInteger(), nullable=False),
        sa.Column("dc_id", sa.BigInteger(), nullable=False),
        sa.Column("month_id", sa.Date(), nullable=False),
        sa.Column("forecast_qty", _QTY, nullable=False),
        sa.Column("unit_price_snapshot", _QTY, nullable=True),
        sa.Column("revenue_snapshot", sa.Numeric(24, 6), nullable=True),
        sa.PrimaryKeyConstraint("fact_id", name="pk_fact_forecast"),
        _fk("run_id", "forecast_run", "run_id"),
        _fk("company_id", "dim_company", "company_id"),
        _fk("dept_id", "dim_dept", "dept_id"),
        _fk("sku_id", "dim_sku", "sku_id"),
        _fk("sales_org_id", "dim_sales_org", "sales_org_id"),
        _fk("dc_id", "dim_distribution_channel", "dc_id"),
        sa.UniqueConstraint(
            "run_id",
            "company_id",
            "dept_id",
            "sku_id",
            "sales_org_id",
            "dc_id",
            "month_id",
            name="uq_fact_forecast_natural_key",
        ),
        schema=SCHEMA,
    )
    op.create_index("ix_fact_forecast_run_id", "fact_forecast", ["run_id"], schema=SCHEMA)
    op.create_index("ix_fact_forecast_month_id", "fact_forecast", ["month_id"], schema=SCHEMA)

    # --- Projection and side tables -------------------------------------------
    op.create_table(
        "saleforecast",
        _pk("id"),
        sa.Column("anchor_month", sa.Date(), nullable=False),
        sa.Column("company_code", sa.String(length=64), nullable=False),
        sa.Column("company_desc", sa.String(length=255), nullable=True),
        sa.Column("material_code", sa.String(length=128), nullable=False),
        sa.Column("material_desc", sa.String(length=255), nullable=True),
        sa.Column("forecast_qty", _QTY, nullable=False),
        sa.Column(
            "metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_saleforecast"),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_saleforecast_anchor_month", "saleforecast", ["anchor_month"], schema=SCHEMA
    )

    op.create_table(
        "monthly_access_control",
        _pk("id"),
        sa.Column("user_email", sa.String(length=320), nullable=False),
        sa.Column("anchor_month", sa.Date(), nullable=False),
        sa.Column("is_locked", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("locked_by", sa.String(length=320), nullable=True),
        sa.Column("locked_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_monthly_access_control"),
        sa.UniqueConstraint(
            "user_email", "anchor_month", name="uq_monthly_access_control_user_email"
        ),
        schema=SCHEMA,
    )

    op.create_table(
        "audit_logs",
        _pk("id"),
        sa.Column("service", sa.String(length=64), nullable=False),
        sa.Column("endpoint", sa.String(length=255), nullable=False),
        sa.Column("action", sa.String(length=16), nullable=False),
        sa.Column("record_id", sa.String(length=64), nullable=True),
        sa.Column("performed_by", sa.String(length=320), nullable=True),
        sa.Column("user_id", sa.String(length=64), nullable=True),
        sa.Column("user_email", sa.String(length=320), nullable=True),
        sa.Column("user_username", sa.String(length=128), nullable=True),
        sa.Column("client_id", sa.String(length=64), nullable=True),
        sa.Column("metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column(
            "performed_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_audit_logs"),
        schema=SCHEMA,
    )


def downgrade() -> None:
    """Drop all forecast tables in reverse dependency order."""
    op.drop_table("audit_logs", schema=SCHEMA)
    op.drop_table("monthly_access_control", schema=SCHEMA)
    op.drop_index("ix_saleforecast_anchor_month", table_name="saleforecast", schema=SCHEMA)
    op.drop_table("saleforecast", schema=SCHEMA)
    op.drop_index("ix_fact_forecast_month_id", table_name="fact_forecast", schema=SCHEMA)
    op.drop_index("ix_fact_forecast_run_id", table_name="fact_forecast", schema=SCHEMA)
    op.drop_table("fact_forecast", schema=SCHEMA)
    op.drop_table("forecast_run", schema=SCHEMA)
    op.drop_table("dim_sales_org", schema=SCHEMA)
    op.drop_table("dim_sku", schema=SCHEMA)
    op.drop_table("dim_material", schema=SCHEMA)
    op.drop_table("dim_uom", schema=SCHEMA)
    op.drop_table("dim_distribution_channel", schema=SCHEMA)
    op.drop_table("dim_dept", schema=SCHEMA)
    op.drop_table("dim_company", schema=SCHEMA)
