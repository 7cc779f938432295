# migrations/env.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Alembic Environment (migrations/env.py)

Purpose:
    Configure Alembic for the forecast SQLAlchemy models with deterministic
    behavior across offline and online (async) migration runs.

Design:
    - Loads the database URL from environment variables or alembic.ini.
    - Refuses to run if ENVIRONMENT is missing (prevents "wrong DB" footguns).
    - Uses the project Declarative Base metadata for autogenerate.
    - Supports async engines for online migrations.
    - Emits masked connection information to the log (no credentials).

Environment variables:
    ENVIRONMENT                 Required. e.g. "test", "development", "production".
    DATABASE_URL                Primary database URL (preferred).
    DB_SCHEMA                   Optional schema holding the forecast tables.
    ECHO_SQL                    If "1", enable SQL echo in online runs.
    ALEMBIC_SHOW_URL            If "1", log masked URL during runs.

Usage:
    # Offline (SQL script):
    ENVIRONMENT=development alembic upgrade head --sql

    # Online (apply to DB):
    ENVIRONMENT=development alembic -x show_url=1 upgrade head
"""

from __future__ import annotations

import asyncio
import logging
import logging.config
import os
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlparse, urlunparse

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from forecast_api.infrastructure.database.models import forecast as _forecast_models  # noqa: F401
from forecast_api.infrastructure.database.models.base import DEFAULT_DB_SCHEMA
from forecast_api.infrastructure.database.models.base import metadata as BaseMetadata

config = context.config

if config.config_file_name is not None:
    logging.config.fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

_VERSION_TABLE = "alembic_version"


def _xargs() -> Mapping[str, str]:
    """Return Alembic -x key=value arguments as a mapping."""
    return dict(getattr(config, "x", {}) or {})


def _mask_url(url: str) -> str:
    """Return a masked representation of a database URL for safe logging."""
    parts = urlparse(url)
    user = parts.username or ""
    host = parts.hostname or ""
    port = f":{parts.port}" if parts.port else ""
    auth = f"{user}:****@" if user else ""
    return urlunparse((parts.scheme, f"{auth}{host}{port}", parts.path or "", "", "", ""))


def _get_db_url() -> str:
    """Resolve the database URL from ``DATABASE_URL`` or alembic.ini.

    Raises:
        RuntimeError: If no database URL can be resolved.
    """
    env_url = os.getenv("DATABASE_URL")
    if env_url:
        return env_url

    ini_url = config.get_main_option("sqlalchemy.url")
    if ini_url:
        return ini_url

    raise RuntimeError("Database URL not configured (DATABASE_URL/sqlalchemy.url).")


def _require_environment() -> str:
    """Require ENVIRONMENT to be set to prevent accidental migrations."""
    env = (os.getenv("ENVIRONMENT") or "").strip().lower()
    if not env:
        raise RuntimeError(
            "ENVIRONMENT is required for migrations (e.g., ENVIRONMENT=test). "
            "Refusing to run without an explicit environment."
        )
    return env


def _maybe_log_url(url: str) -> None:
    x = _xargs()
    if x.get("show_url") == "1" or os.getenv("ALEMBIC_SHOW_URL") == "1":
        logger.info("Using DATABASE_URL (masked): %s", _mask_url(url))


target_metadata = BaseMetadata


def _context_kwargs() -> dict[str, Any]:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "compare_server_default": True,
        "include_schemas": DEFAULT_DB_SCHEMA is not None,
        "version_table": _VERSION_TABLE,
        "version_table_schema": DEFAULT_DB_SCHEMA,
    }


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (SQL script output)."""
    _require_environment()
    url = _get_db_url()
    _maybe_log_url(url)

    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_context_kwargs(),
    )

    with context.begin_transaction():
        context.run_migrations()


def _configure_and_run(connection: Connection) -> None:
    """Configure Alembic context with a live connection and run migrations."""
    context.configure(connection=connection, **_context_kwargs())

    with context.begin_transaction():
        context.run_migrations()


async def _run_migrations_async() -> None:
    """Run migrations in 'online' mode using an async engine."""
    _require_environment()
    url = _get_db_url()
    _maybe_log_url(url)

    connectable: AsyncEngine = create_async_engine(
        url,
        echo=os.getenv("ECHO_SQL") == "1",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(_configure_and_run)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Entry point used by Alembic for online migrations (async safe)."""
    asyncio.run(_run_migrations_async())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
