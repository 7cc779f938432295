# src/forecast_api/application/services/audit_log_writer.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Audit sink (application layer).

Purpose:
    Append one audit entry per ingestion batch in a dedicated transaction.
    The write is fire-and-forget: failures are logged and counted, never
    raised to the caller.

Layer:
    application/services
"""

from __future__ import annotations

from forecast_api.application.uow import UnitOfWork, run_in_uow
from forecast_api.domain.entities.audit_log import AuditLogEntry
from forecast_api.domain.interfaces.repositories.audit_log_repository import AuditLogRepository
from forecast_api.infrastructure.logging.logger import get_json_logger
from forecast_api.infrastructure.observability.metrics import get_forecast_audit_failures_total

logger = get_json_logger(__name__)


class AuditLogWriter:
    """Best-effort audit log writer."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def write(self, entry: AuditLogEntry) -> None:
        """Persist ``entry``; never raises."""

        async def _append(tx: UnitOfWork) -> None:
            repo: AuditLogRepository = tx.get_repository(AuditLogRepository)
            await repo.append(entry)

        try:
            await run_in_uow(self._uow, _append)
        except Exception:
            get_forecast_audit_failures_total().inc()
            logger.exception(
                "forecast.audit.write_failed",
                extra={
                    "service": entry.service,
                    "endpoint": entry.endpoint,
                    "record_id": entry.record_id,
                },
            )
