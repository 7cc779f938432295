# src/forecast_api/domain/entities/monthly_access.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Request actor and monthly access lock entities.

Synopsis:
    ``RequestActor`` is the caller identity resolved at the edge (JWT claims
    plus client headers). ``MonthlyAccessLock`` is a per-user, per-month edit
    lock maintained by an external administration surface.

Layer:
    domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

__all__ = ["RequestActor", "MonthlyAccessLock", "normalize_email"]


def normalize_email(value: str | None) -> str:
    """Trim and lower-case an email address; empty string when absent."""
    if not value or not isinstance(value, str):
        return ""
    return value.strip().lower()


@dataclass(frozen=True, slots=True)
class RequestActor:
    """Identity of the caller submitting or querying forecasts."""

    performed_by: str | None = None
    user_id: str | None = None
    email: str | None = None
    username: str | None = None
    role: str | None = None
    client_id: str | None = None

    @classmethod
    def anonymous(cls) -> RequestActor:
        """Return an actor with no identity (auth disabled)."""
        return cls(performed_by="anonymous")

    def as_metadata(self) -> dict[str, Any]:
        """Return the actor fields worth attaching to audit metadata."""
        payload: dict[str, Any] = {}
        if self.user_id or self.email or self.username:
            payload["user"] = {
                "id": self.user_id,
                "email": self.email,
                "username": self.username,
                "role": self.role,
            }
        if self.client_id:
            payload["api_client_id"] = self.client_id
        return payload


@dataclass(frozen=True, slots=True)
class MonthlyAccessLock:
    """A row of ``monthly_access_control``."""

    user_email: str
    anchor_month: date
    is_locked: bool
    locked_by: str | None = None
    locked_at: datetime | None = None
