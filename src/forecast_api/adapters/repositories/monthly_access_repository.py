# src/forecast_api/adapters/repositories/monthly_access_repository.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Read-only repository over ``monthly_access_control``."""

from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from forecast_api.domain.entities.monthly_access import MonthlyAccessLock
from forecast_api.infrastructure.database.models.forecast import MonthlyAccessControl

from .base_repository import BaseRepository


class MonthlyAccessRepository(BaseRepository[MonthlyAccessControl]):
    """Looks up per-user monthly edit locks."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            session: Async SQLAlchemy session bound to the target database.
        """
        super().__init__(session)

    async def get_lock(self, user_email: str, anchor_month: date) -> MonthlyAccessLock | None:
        """Return the lock for an already-normalized email and first-of-month date."""
        stmt = select(MonthlyAccessControl).where(
            MonthlyAccessControl.user_email == user_email,
            MonthlyAccessControl.anchor_month == anchor_month,
        )
        row = await self.fetch_optional(stmt)
        if row is None:
            return None
        return MonthlyAccessLock(
            user_email=row.user_email,
            anchor_month=row.anchor_month,
            is_locked=bool(row.is_locked),
            locked_by=row.locked_by,
            locked_at=row.locked_at,
        )
