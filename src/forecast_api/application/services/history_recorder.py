# src/forecast_api/application/services/history_recorder.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""History projection service (application layer).

Purpose:
    Write one ``saleforecast`` snapshot per ingested line after its facts
    have been committed.

Layer:
    application/services

Notes:
    - Runs in its own transaction, separate from the line's fact writes.
    - Failures are logged and counted, never raised: a committed line is not
      un-done because its projection could not be written.
"""

from __future__ import annotations

from typing import Any

from forecast_api.application.uow import UnitOfWork, run_in_uow
from forecast_api.domain.entities.forecast_dimensions import ResolvedDimensions
from forecast_api.domain.entities.forecast_history import ForecastHistorySnapshot
from forecast_api.domain.entities.forecast_line import ForecastLine
from forecast_api.domain.enums.forecast import IngestSource
from forecast_api.domain.interfaces.repositories.forecast_history_repository import (
    ForecastHistoryRepository,
)
from forecast_api.domain.services.anchor_month import parse_month
from forecast_api.domain.services.forecast_figures import history_quantity
from forecast_api.infrastructure.logging.logger import get_json_logger
from forecast_api.infrastructure.observability.metrics import (
    get_forecast_history_failures_total,
)

logger = get_json_logger(__name__)


def build_history_snapshot(
    *,
    anchor_month: str,
    line: ForecastLine,
    dims: ResolvedDimensions,
    run_id: int,
    source: IngestSource,
    inserted_count: int,
) -> ForecastHistorySnapshot:
    """Build the history snapshot for a committed line."""
    metadata: dict[str, Any] = {
        "source": source.value,
        "run_id": str(run_id),
        "months": [
            {
                "month": m.month,
                "qty": str(m.qty),
                "price": str(m.price) if m.price is not None else None,
            }
            for m in line.months
        ],
        **dims.as_metadata(),
        "fact_rows_inserted": inserted_count,
        "dept_code": line.dept_code,
        "dc_code": line.dc_code,
        "pack_size": line.pack_size,
        "uom_code": line.uom_code,
    }
    return ForecastHistorySnapshot(
        anchor_month=parse_month(anchor_month, field="anchor_month"),
        company_code=(line.company_code or "").strip(),
        company_desc=line.company_desc,
        material_code=(line.material_code or "").strip(),
        material_desc=line.material_desc,
        forecast_qty=history_quantity(anchor_month, line.months),
        metadata=metadata,
    )


class HistoryRecorder:
    """Best-effort writer of history snapshots."""

    def __init__(self, uow: UnitOfWork) -> None:
        """Initialize the recorder.

        Args:
            uow: UnitOfWork used to open a dedicated transaction per snapshot.
        """
        self._uow = uow

    async def record_history(
        self,
        *,
        anchor_month: str,
        line: ForecastLine,
        dims: ResolvedDimensions,
        run_id: int,
        source: IngestSource,
        inserted_count: int,
    ) -> None:
        """Persist a snapshot for ``line``; swallow and log any failure."""
        try:
            snapshot = build_history_snapshot(
                anchor_month=anchor_month,
                line=line,
                dims=dims,
                run_id=run_id,
                source=source,
                inserted_count=inserted_count,
            )

            async def _write(tx: UnitOfWork) -> int:
                repo: ForecastHistoryRepository = tx.get_repository(ForecastHistoryRepository)
                return await repo.add_snapshot(snapshot)

            await run_in_uow(self._uow, _write)
        except Exception:
            get_forecast_history_failures_total().inc()
            logger.exception(
                "forecast.history.write_failed",
                extra={
                    "run_id": run_id,
                    "anchor_month": anchor_month,
                    "company_code": line.company_code,
                    "material_code": line.material_code,
                    "source": source.value,
                },
            )
