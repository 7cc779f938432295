# src/forecast_api/application/use_cases/forecast/submit_forecast_batch.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Submit a forecast ingestion batch.

Purpose:
    Orchestrate one ingestion batch end to end: check the caller's monthly
    lock, allocate a run, then for every line resolve dimensions and write
    facts, record a history snapshot, and finally append one audit entry.

Layer:
    application/use_cases

Transaction policy:
    * The access check and the run allocation each run in their own
      transaction, before any line is touched.
    * Every line commits independently (dimensions + facts). Processing
      halts at the first failing line; earlier lines stay committed and the
      raised ``DomainError`` carries ``line``, ``run_id``, ``committed_lines``
      and ``fact_rows_inserted`` in its details.
    * History snapshots and the audit entry are best-effort and never fail
      the batch.
"""

from __future__ import annotations

from collections.abc import Sequence

from forecast_api.application.schemas.dto.forecast import SubmitForecastBatchResultDTO
from forecast_api.application.services.access_guard import AccessGuard
from forecast_api.application.services.audit_log_writer import AuditLogWriter
from forecast_api.application.services.dimension_resolver import DimensionResolver
from forecast_api.application.services.fact_writer import FactWriter
from forecast_api.application.services.history_recorder import HistoryRecorder
from forecast_api.application.services.run_allocator import RunAllocator
from forecast_api.application.uow import UnitOfWork, run_in_uow
from forecast_api.domain.entities.audit_log import AuditLogEntry
from forecast_api.domain.entities.forecast_dimensions import ResolvedDimensions
from forecast_api.domain.entities.forecast_line import ForecastLine
from forecast_api.domain.entities.forecast_run import ForecastRun
from forecast_api.domain.entities.monthly_access import RequestActor
from forecast_api.domain.enums.forecast import IngestSource
from forecast_api.domain.exceptions.base import DomainError
from forecast_api.domain.interfaces.repositories.dimension_repository import DimensionRepository
from forecast_api.domain.interfaces.repositories.forecast_fact_repository import (
    ForecastFactRepository,
)
from forecast_api.domain.interfaces.repositories.forecast_run_repository import (
    ForecastRunRepository,
)
from forecast_api.domain.interfaces.repositories.monthly_access_repository import (
    MonthlyAccessRepository,
)
from forecast_api.domain.services.anchor_month import parse_month
from forecast_api.infrastructure.logging.logger import get_json_logger
from forecast_api.infrastructure.observability.metrics import (
    get_forecast_fact_rows_inserted_total,
    get_forecast_lines_ingested_total,
    observe_forecast_batch,
)

logger = get_json_logger(__name__)


class SubmitForecastBatchUseCase:
    """Ingest a batch of forecast lines under a fresh run.

    Args:
        uow:
            UnitOfWork entered once per transactional step. The same instance
            is re-entered sequentially for the guard, the run, each line,
            each history snapshot, and the audit entry.
        audit_service_name:
            Value recorded in the ``service`` column of the audit entry.
    """

    def __init__(self, uow: UnitOfWork, *, audit_service_name: str = "ingest-service") -> None:
        """Initialize the use case with its UnitOfWork."""
        self._uow = uow
        self._audit_service_name = audit_service_name
        self._history = HistoryRecorder(uow)
        self._audit = AuditLogWriter(uow)

    async def execute(
        self,
        *,
        anchor_month: str,
        source: IngestSource,
        lines: Sequence[ForecastLine],
        actor: RequestActor | None = None,
    ) -> SubmitForecastBatchResultDTO:
        """Ingest ``lines`` for ``anchor_month``.

        Args:
            anchor_month: Reporting month (``YYYY-MM``).
            source: Whether the lines came from the manual form or a sheet.
            lines: Canonical forecast lines, processed in order.
            actor: Caller identity; anonymous when omitted.

        Returns:
            SubmitForecastBatchResultDTO: Run id, inserted fact rows, and the
            number of processed lines.

        Raises:
            ForecastValidationError: On a malformed anchor month or an invalid
                line (details identify the failing line).
            MonthlyAccessLockedError: If the caller's month is locked.
            ForecastPersistenceError: If a line's database writes fail.
        """
        who = actor or RequestActor.anonymous()
        parse_month(anchor_month, field="anchor_month")

        with observe_forecast_batch(source.value):
            await self._check_access(who, anchor_month)
            run = await self._allocate_run(anchor_month)

            inserted_total = 0
            for index, line in enumerate(lines, start=1):
                try:
                    dims, inserted = await self._ingest_line(run.run_id, line)
                except DomainError as exc:
                    logger.warning(
                        "forecast.batch.line_failed",
                        extra={
                            "run_id": run.run_id,
                            "line": index,
                            "code": exc.code,
                            "committed_lines": index - 1,
                            "fact_rows_inserted": inserted_total,
                        },
                    )
                    raise exc.with_details(
                        line=index,
                        run_id=run.run_id,
                        committed_lines=index - 1,
                        fact_rows_inserted=inserted_total,
                    )

                inserted_total += inserted
                get_forecast_lines_ingested_total().labels(source=source.value).inc()
                get_forecast_fact_rows_inserted_total().labels(source=source.value).inc(inserted)

                await self._history.record_history(
                    anchor_month=anchor_month,
                    line=line,
                    dims=dims,
                    run_id=run.run_id,
                    source=source,
                    inserted_count=inserted,
                )

        await self._audit.write(
            self._audit_entry(
                who,
                anchor_month=anchor_month,
                source=source,
                run_id=run.run_id,
                line_count=len(lines),
                inserted=inserted_total,
            )
        )

        logger.info(
            "forecast.batch.completed",
            extra={
                "run_id": run.run_id,
                "anchor_month": anchor_month,
                "source": source.value,
                "line_count": len(lines),
                "fact_rows_inserted": inserted_total,
            },
        )
        return SubmitForecastBatchResultDTO(
            run_id=run.run_id,
            inserted_count=inserted_total,
            line_count=len(lines),
        )

    async def _check_access(self, actor: RequestActor, anchor_month: str) -> None:
        async def _check(tx: UnitOfWork) -> None:
            guard = AccessGuard(tx.get_repository(MonthlyAccessRepository))
            await guard.assert_unlocked(actor.email, actor.role, anchor_month)

        await run_in_uow(self._uow, _check)

    async def _allocate_run(self, anchor_month: str) -> ForecastRun:
        async def _create(tx: UnitOfWork) -> ForecastRun:
            allocator = RunAllocator(tx.get_repository(ForecastRunRepository))
            return await allocator.create_run(anchor_month)

        return await run_in_uow(self._uow, _create)

    async def _ingest_line(self, run_id: int, line: ForecastLine) -> tuple[ResolvedDimensions, int]:
        async def _write(tx: UnitOfWork) -> tuple[ResolvedDimensions, int]:
            dims = await DimensionResolver(tx.get_repository(DimensionRepository)).resolve(line)
            writer = FactWriter(tx.get_repository(ForecastFactRepository))
            inserted = await writer.write_facts(run_id, dims, line.months)
            return dims, inserted

        return await run_in_uow(self._uow, _write)

    def _audit_entry(
        self,
        actor: RequestActor,
        *,
        anchor_month: str,
        source: IngestSource,
        run_id: int,
        line_count: int,
        inserted: int,
    ) -> AuditLogEntry:
        metadata = {
            "anchor_month": anchor_month,
            "line_count": line_count,
            "fact_rows_inserted": inserted,
            "run_id": str(run_id),
            "source": source.value,
            **actor.as_metadata(),
        }
        return AuditLogEntry(
            service=self._audit_service_name,
            endpoint=source.audit_endpoint,
            action="POST",
            record_id=str(run_id),
            performed_by=actor.performed_by or actor.email or actor.username,
            user_id=actor.user_id,
            user_email=actor.email,
            user_username=actor.username,
            client_id=actor.client_id,
            metadata=metadata,
        )
