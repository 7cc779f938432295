# src/forecast_api/infrastructure/database/session.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Async SQLAlchemy engine/session factory.

This module owns the application-global async SQLAlchemy engine and
`async_sessionmaker`. Units of work open their own sessions from the factory
returned by `get_sessionmaker()`.

Lifecycle:
    * Call `init_engine_and_sessionmaker(settings)` at app startup (lifespan).
    * Use `get_sessionmaker()` when wiring units of work.
    * Call `dispose_engine()` during shutdown.

Notes:
    * No business logic here; repositories/services consume the session.
    * `pool_pre_ping=True` helps surface dead connections before use.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from forecast_api.config.settings import Settings, get_settings

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def init_engine_and_sessionmaker(settings: Settings) -> None:
    """Initialize the global async engine and sessionmaker.

    Args:
        settings: Application settings providing `database_url`.

    Raises:
        ValueError: If `database_url` is empty.
    """
    global _engine, _sessionmaker

    if not settings.database_url:
        raise ValueError("database_url must be configured")
    if _engine is not None:
        # Already initialized (idempotent).
        return

    _engine = create_async_engine(
        url=settings.database_url,
        pool_pre_ping=True,
        echo=settings.db_echo,
    )
    _sessionmaker = async_sessionmaker(bind=_engine, expire_on_commit=False, class_=AsyncSession)


async def dispose_engine() -> None:
    """Dispose the global engine at application shutdown."""
    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _sessionmaker = None


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Return the initialized async sessionmaker.

    Lifespan-less transports (tests, scripts) are supported via lazy init.

    Returns:
        async_sessionmaker[AsyncSession]: The global session factory.
    """
    if _sessionmaker is None:
        init_engine_and_sessionmaker(get_settings())
    assert _sessionmaker is not None
    return _sessionmaker

