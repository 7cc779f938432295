# src/forecast_api/domain/interfaces/repositories/audit_log_repository.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Domain-facing interface for the audit sink."""

from __future__ import annotations

from typing import Protocol

from forecast_api.domain.entities.audit_log import AuditLogEntry


class AuditLogRepository(Protocol):
    """Append-only audit log store."""

    async def append(self, entry: AuditLogEntry) -> None:
        """Append a single audit entry."""
        raise NotImplementedError
