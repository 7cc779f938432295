# src/forecast_api/adapters/repositories/audit_log_repository.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Append-only repository over ``audit_logs``."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from forecast_api.domain.entities.audit_log import AuditLogEntry
from forecast_api.infrastructure.database.models.forecast import AuditLog

from .base_repository import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    """Persists audit entries; ``performed_at`` is server-defaulted."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            session: Async SQLAlchemy session bound to the target database.
        """
        super().__init__(session)

    async def append(self, entry: AuditLogEntry) -> None:
        """Stage one audit row and flush it."""
        self._session.add(
            AuditLog(
                service=entry.service,
                endpoint=entry.endpoint,
                action=entry.action,
                record_id=entry.record_id,
                performed_by=entry.performed_by,
                user_id=entry.user_id,
                user_email=entry.user_email,
                user_username=entry.user_username,
                client_id=entry.client_id,
                meta=dict(entry.metadata),
            )
        )
        await self._session.flush()
