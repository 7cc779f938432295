# tests/unit/application/forecast/test_submit_forecast_batch.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

import pytest

from forecast_api.application.use_cases.forecast.submit_forecast_batch import (
    SubmitForecastBatchUseCase,
)
from forecast_api.domain.entities.forecast_line import ForecastLine, MonthFigure
from forecast_api.domain.entities.monthly_access import RequestActor
from forecast_api.domain.enums.forecast import IngestSource
from forecast_api.domain.exceptions.forecast import (
    ForecastValidationError,
    MonthlyAccessLockedError,
)


def _line(material: str, *, dept_code: str | None = "D01", price: str | None = None) -> ForecastLine:
    return ForecastLine(
        company_code="C001",
        dept_code=dept_code,
        dc_code="NA",
        material_code=material,
        pack_size="1kg",
        uom_code="CS",
        months=(
            MonthFigure(
                month="2025-06",
                qty=Decimal("50"),
                price=Decimal(price) if price is not None else None,
            ),
            MonthFigure(month="2025-07", qty=Decimal("40")),
        ),
    )


USER = RequestActor(
    performed_by="planner@example.com",
    user_id="u-1",
    email="planner@example.com",
    username="planner",
    role="USER",
    client_id="web",
)


@pytest.mark.asyncio
async def test_successful_batch_commits_every_line(fake_uow: Any) -> None:
    uc = SubmitForecastBatchUseCase(fake_uow, audit_service_name="ingest-service")

    result = await uc.execute(
        anchor_month="2025-06",
        source=IngestSource.MANUAL,
        lines=[_line("MAT-1", price="0.5"), _line("MAT-2")],
        actor=USER,
    )

    assert result.run_id == 1
    assert result.inserted_count == 4
    assert result.line_count == 2
    assert fake_uow.runs.runs[0].anchor_month == date(2025, 6, 1)

    revenues = sorted(
        (r.revenue_snapshot for r in fake_uow.facts.rows.values() if r.revenue_snapshot),
    )
    assert revenues == [Decimal("25")]

    assert [s.forecast_qty for s in fake_uow.history.snapshots] == [Decimal("50"), Decimal("50")]

    (entry,) = fake_uow.audit.entries
    assert entry.service == "ingest-service"
    assert entry.endpoint == "/v1/manual"
    assert entry.action == "POST"
    assert entry.record_id == "1"
    assert entry.performed_by == "planner@example.com"
    assert entry.client_id == "web"
    assert entry.metadata["line_count"] == 2
    assert entry.metadata["fact_rows_inserted"] == 4
    assert entry.metadata["source"] == "manual"
    assert entry.metadata["user"]["username"] == "planner"


@pytest.mark.asyncio
async def test_failing_line_halts_batch_and_keeps_prior_lines(fake_uow: Any) -> None:
    lines = [
        _line("MAT-1"),
        _line("MAT-2"),
        _line("MAT-3", dept_code=None),
        _line("MAT-4"),
        _line("MAT-5"),
    ]
    uc = SubmitForecastBatchUseCase(fake_uow)

    with pytest.raises(ForecastValidationError) as exc_info:
        await uc.execute(anchor_month="2025-06", source=IngestSource.UPLOAD, lines=lines)

    details = exc_info.value.details
    assert details["line"] == 3
    assert details["run_id"] == 1
    assert details["committed_lines"] == 2
    assert details["fact_rows_inserted"] == 4
    assert details["missing_fields"] == ["dept_code"]

    materials = set(fake_uow.dimensions.ids["material"])
    assert materials == {"MAT-1", "MAT-2"}
    assert len(fake_uow.facts.rows) == 4
    assert len(fake_uow.history.snapshots) == 2
    assert fake_uow.audit.entries == []


@pytest.mark.asyncio
async def test_locked_month_rejects_before_run_allocation(fake_uow: Any) -> None:
    fake_uow.access.lock("planner@example.com", date(2025, 6, 1))
    uc = SubmitForecastBatchUseCase(fake_uow)

    with pytest.raises(MonthlyAccessLockedError):
        await uc.execute(
            anchor_month="2025-06",
            source=IngestSource.MANUAL,
            lines=[_line("MAT-1")],
            actor=USER,
        )

    assert fake_uow.runs.runs == []
    assert fake_uow.facts.rows == {}


@pytest.mark.asyncio
async def test_elevated_role_bypasses_lock(fake_uow: Any) -> None:
    fake_uow.access.lock("planner@example.com", date(2025, 6, 1))
    admin = RequestActor(email="planner@example.com", role="ADMIN")

    result = await SubmitForecastBatchUseCase(fake_uow).execute(
        anchor_month="2025-06",
        source=IngestSource.MANUAL,
        lines=[_line("MAT-1")],
        actor=admin,
    )

    assert result.line_count == 1


@pytest.mark.asyncio
async def test_resubmission_creates_a_new_run(fake_uow: Any) -> None:
    uc = SubmitForecastBatchUseCase(fake_uow)

    first = await uc.execute(
        anchor_month="2025-06", source=IngestSource.MANUAL, lines=[_line("MAT-1")]
    )
    second = await uc.execute(
        anchor_month="2025-06", source=IngestSource.MANUAL, lines=[_line("MAT-1")]
    )

    assert (first.run_id, second.run_id) == (1, 2)
    assert first.inserted_count == second.inserted_count == 2


@pytest.mark.asyncio
async def test_duplicate_lines_in_one_batch_insert_once(fake_uow: Any) -> None:
    result = await SubmitForecastBatchUseCase(fake_uow).execute(
        anchor_month="2025-06",
        source=IngestSource.MANUAL,
        lines=[_line("MAT-1"), _line("MAT-1")],
    )

    assert result.inserted_count == 2
    assert result.line_count == 2


@pytest.mark.asyncio
async def test_history_failure_does_not_fail_the_batch(fake_uow: Any) -> None:
    fake_uow.history.fail = True

    result = await SubmitForecastBatchUseCase(fake_uow).execute(
        anchor_month="2025-06", source=IngestSource.UPLOAD, lines=[_line("MAT-1")]
    )

    assert result.inserted_count == 2
    assert fake_uow.history.snapshots == []
    assert len(fake_uow.audit.entries) == 1


@pytest.mark.asyncio
async def test_audit_failure_does_not_fail_the_batch(fake_uow: Any) -> None:
    fake_uow.audit.fail = True

    result = await SubmitForecastBatchUseCase(fake_uow).execute(
        anchor_month="2025-06", source=IngestSource.UPLOAD, lines=[_line("MAT-1")]
    )

    assert result.run_id == 1


@pytest.mark.asyncio
async def test_malformed_anchor_month_touches_nothing(fake_uow: Any) -> None:
    with pytest.raises(ForecastValidationError):
        await SubmitForecastBatchUseCase(fake_uow).execute(
            anchor_month="2025-6", source=IngestSource.MANUAL, lines=[_line("MAT-1")]
        )

    assert fake_uow.entered == 0


@pytest.mark.asyncio
async def test_anonymous_upload_is_audited_as_anonymous(fake_uow: Any) -> None:
    await SubmitForecastBatchUseCase(fake_uow).execute(
        anchor_month="2025-06", source=IngestSource.UPLOAD, lines=[_line("MAT-1")]
    )

    (entry,) = fake_uow.audit.entries
    assert entry.endpoint == "/v1/upload"
    assert entry.performed_by == "anonymous"
    assert "user" not in entry.metadata
