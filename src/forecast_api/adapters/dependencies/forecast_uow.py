# src/forecast_api/adapters/dependencies/forecast_uow.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Forecast UnitOfWork dependency wiring.

Purpose:
    Provide a concrete, SQLAlchemy-backed UnitOfWork instance for forecast
    use cases, backed by the core async_sessionmaker.

Layer:
    adapters/dependencies
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from forecast_api.adapters.uow import SqlAlchemyUnitOfWork
from forecast_api.infrastructure.database.session import get_sessionmaker


def get_forecast_uow() -> SqlAlchemyUnitOfWork:
    """Construct a UnitOfWork instance for forecast use cases.

    Behavior:
        - Obtains the global async_sessionmaker via `get_sessionmaker()`.
        - Returns a fresh SqlAlchemyUnitOfWork bound to that factory.
        - Each call returns a new UoW instance (one per use-case invocation).
    """
    session_factory: async_sessionmaker[AsyncSession] = get_sessionmaker()
    return SqlAlchemyUnitOfWork(session_factory=session_factory)
