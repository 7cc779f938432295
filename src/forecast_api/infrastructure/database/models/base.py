# src/forecast_api/infrastructure/database/models/base.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Declarative Base and shared persistence helpers for the forecast schema.

This module defines:
    - A project-wide SQLAlchemy Declarative Base with deterministic naming
      conventions (for stable Alembic diffs).
    - A shared ``MetaData`` bound to the configured schema (``DB_SCHEMA``).
    - An audit timestamp mixin (UTC, server-defaulted).
"""

from __future__ import annotations

import os
from datetime import datetime

from sqlalchemy import MetaData
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime

__all__ = [
    "DEFAULT_DB_SCHEMA",
    "metadata",
    "Base",
    "TimestampMixin",
    "JSONBType",
]

#: Schema holding the forecast tables. ``None`` defers to the search_path.
DEFAULT_DB_SCHEMA: str | None = os.getenv("DB_SCHEMA") or None

#: Deterministic naming conventions for Alembic-friendly diffs.
#: Ref: https://alembic.sqlalchemy.org/en/latest/naming.html
NAMING_CONVENTIONS: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTIONS, schema=DEFAULT_DB_SCHEMA)


class Base(DeclarativeBase):
    """Declarative Base for all ORM models.

    The shared metadata carries the naming conventions and the default schema.
    """

    metadata = metadata


class TimestampMixin:
    """Mixin providing immutable ``created_at`` and mutable ``updated_at`` timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


JSONBType = JSONB
