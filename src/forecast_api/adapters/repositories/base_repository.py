# src/forecast_api/adapters/repositories/base_repository.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""
BaseRepository: shared repository foundation.

Purpose:
    Shared mechanics for all repositories:
      * Safe fetch helpers (optional, all, scalar id).
      * Deterministic primary-key tie-break ordering.

Layer: adapters / repositories

Notes:
    * No business logic, no domain decisions.
    * Repositories never commit; units of work own transactions.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

TModel = TypeVar("TModel")


class BaseRepository(Generic[TModel]):  # noqa: UP046
    """Abstract base class for all repositories."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session bound to the target database.
        """
        self._session: AsyncSession = session

    @staticmethod
    def order_by_pk(
        stmt: Select[Any],
        pk_col: Any,
        *,
        ascending: bool = True,
    ) -> Select[Any]:
        """Apply ordering by primary key only.

        This is a pure tie-break ordering and should usually be composed with
        a more semantic primary sort key.
        """
        return stmt.order_by(pk_col.asc() if ascending else pk_col.desc())

    async def fetch_optional(self, stmt: Select[Any]) -> TModel | None:
        """Execute a statement and return zero or one row."""
        res = await self._session.execute(stmt)
        return res.scalars().first()

    async def fetch_all(self, stmt: Select[Any]) -> list[TModel]:
        """Execute a statement and return all rows as a list."""
        res = await self._session.execute(stmt)
        return list(res.scalars().all())

    async def execute_returning_id(self, stmt: Executable) -> int:
        """Execute an ``INSERT ... RETURNING <id>`` statement and return the id."""
        res = await self._session.execute(stmt)
        return int(res.scalar_one())
