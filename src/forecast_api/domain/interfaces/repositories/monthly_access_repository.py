# src/forecast_api/domain/interfaces/repositories/monthly_access_repository.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Domain-facing interface for the monthly access lock store (read-only)."""

from __future__ import annotations

from datetime import date
from typing import Protocol

from forecast_api.domain.entities.monthly_access import MonthlyAccessLock


class MonthlyAccessRepository(Protocol):
    """Contract for looking up per-user monthly edit locks."""

    async def get_lock(self, user_email: str, anchor_month: date) -> MonthlyAccessLock | None:
        """Return the lock row for a normalized email and month, if any."""
        raise NotImplementedError
