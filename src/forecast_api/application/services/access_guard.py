# src/forecast_api/application/services/access_guard.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Monthly access guard (application layer).

Purpose:
    Reject submissions from regular users whose edit window for the anchor
    month has been locked by an administrator.

Rules:
    * No-op when the caller email or the anchor month is missing.
    * No-op for elevated roles (any role other than USER).
    * Lookup uses the trimmed, lower-cased email and the first-of-month date.

Layer:
    application/services
"""

from __future__ import annotations

from forecast_api.domain.entities.monthly_access import normalize_email
from forecast_api.domain.enums.forecast import UserRole
from forecast_api.domain.exceptions.forecast import MonthlyAccessLockedError
from forecast_api.domain.interfaces.repositories.monthly_access_repository import (
    MonthlyAccessRepository,
)
from forecast_api.domain.services.anchor_month import parse_month


class AccessGuard:
    """Check the per-user monthly lock."""

    def __init__(self, repository: MonthlyAccessRepository) -> None:
        self._repo = repository

    async def assert_unlocked(
        self,
        email: str | None,
        role: str | None,
        anchor_month: str | None,
    ) -> None:
        """Raise when the caller's month is locked.

        Raises:
            MonthlyAccessLockedError: If a locked row exists for the caller.
            ForecastValidationError: If ``anchor_month`` is present but malformed.
        """
        if not anchor_month or not anchor_month.strip():
            return
        user_email = normalize_email(email)
        if not user_email:
            return
        if UserRole.is_elevated(role):
            return

        month = parse_month(anchor_month, field="anchor_month")
        lock = await self._repo.get_lock(user_email, month)
        if lock is not None and lock.is_locked:
            raise MonthlyAccessLockedError(
                details={"anchor_month": anchor_month.strip(), "user_email": user_email},
            )
