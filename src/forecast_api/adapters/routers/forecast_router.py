# src/forecast_api/adapters/routers/forecast_router.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Forecast Router (v1).

Synopsis:
    HTTP surface for forecast ingestion and queries under ``/v1/forecast``:

        POST /manual      manual lines        → 201
        POST /sheet       parsed sheet rows   → 202
        GET  ""           fact listing
        GET  /aggregate   grouped sums
        GET  /history     history snapshots

Design:
    * Presentation-only: maps HTTP payloads to canonical lines / DTOs,
      delegates to the use case, shapes the envelope.
    * Domain errors are rendered by the app-level ``DomainError`` handler.

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, Query, Request, Response, status

from forecast_api.adapters.mappers.forecast_line_mapper import apply_default_dc, map_sheet_rows
from forecast_api.adapters.presenters.forecast_presenter import ForecastPresenter
from forecast_api.adapters.routers.base_router import BaseRouter
from forecast_api.adapters.schemas.http.envelopes import SuccessEnvelope
from forecast_api.adapters.schemas.http.forecast_schemas import (
    ManualLineHTTP,
    ManualSubmitRequest,
    SheetSubmitRequest,
)
from forecast_api.application.schemas.dto.forecast import (
    AggregateForecastQueryDTO,
    ListForecastFactsQueryDTO,
    ListForecastHistoryQueryDTO,
)
from forecast_api.application.use_cases.forecast.aggregate_forecast import (
    AggregateForecastUseCase,
)
from forecast_api.application.use_cases.forecast.list_forecast_facts import (
    ListForecastFactsUseCase,
)
from forecast_api.application.use_cases.forecast.list_forecast_history import (
    ListForecastHistoryUseCase,
)
from forecast_api.application.use_cases.forecast.submit_forecast_batch import (
    SubmitForecastBatchUseCase,
)
from forecast_api.dependencies.forecast import (
    get_aggregate_forecast_use_case,
    get_list_forecast_facts_use_case,
    get_list_forecast_history_use_case,
    get_submit_forecast_batch_use_case,
)
from forecast_api.domain.entities.forecast_line import ForecastLine, MonthFigure
from forecast_api.domain.entities.monthly_access import RequestActor
from forecast_api.domain.enums.forecast import IngestSource
from forecast_api.infrastructure.auth.request_actor_dependency import resolve_request_actor

router = BaseRouter(version="v1", resource="forecast", tags=["Forecast"])
_presenter = ForecastPresenter()

ActorDep = Annotated[RequestActor, Depends(resolve_request_actor)]


def _trace_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _split_groups(raw: list[str]) -> list[str]:
    """Accept both ``group=a,b`` and repeated ``group=a&group=b``."""
    return [part.strip() for item in raw for part in item.split(",") if part.strip()]


def to_forecast_line(line: ManualLineHTTP) -> ForecastLine:
    """Map a manual HTTP line to a canonical line with the default DC applied."""
    return apply_default_dc(
        ForecastLine(
            company_code=line.company_code,
            dept_code=line.dept_code,
            dc_code=line.dc_code,
            material_code=line.material_code,
            pack_size=line.pack_size,
            uom_code=line.uom_code,
            company_desc=line.company_desc,
            dc_desc=line.dc_desc,
            material_desc=line.material_desc,
            division=line.division,
            sales_organization=line.sales_organization,
            sales_office=line.sales_office,
            sales_group=line.sales_group,
            sales_representative=line.sales_representative,
            months=tuple(MonthFigure(month=m.month, qty=m.qty, price=m.price) for m in line.months),
        )
    )


@router.post(
    "/manual",
    response_model=SuccessEnvelope[Any],
    status_code=status.HTTP_201_CREATED,
    responses=BaseRouter.std_error_responses(),
    summary="Submit manual forecast lines",
)
async def submit_manual(
    request: Request,
    response: Response,
    body: ManualSubmitRequest,
    actor: ActorDep,
    uc: Annotated[SubmitForecastBatchUseCase, Depends(get_submit_forecast_batch_use_case)],
) -> SuccessEnvelope[Any]:
    """Ingest manually entered lines under a new run."""
    result = await uc.execute(
        anchor_month=body.anchor_month,
        source=IngestSource.MANUAL,
        lines=[to_forecast_line(line) for line in body.lines],
        actor=actor,
    )
    presented = _presenter.present_batch(result, trace_id=_trace_id(request))
    ForecastPresenter.apply_headers(presented, response)
    return presented.body


@router.post(
    "/sheet",
    response_model=SuccessEnvelope[Any],
    status_code=status.HTTP_202_ACCEPTED,
    responses=BaseRouter.std_error_responses(),
    summary="Submit parsed spreadsheet rows",
)
async def submit_sheet(
    request: Request,
    response: Response,
    body: SheetSubmitRequest,
    actor: ActorDep,
    uc: Annotated[SubmitForecastBatchUseCase, Depends(get_submit_forecast_batch_use_case)],
) -> SuccessEnvelope[Any]:
    """Type-check and map sheet rows, then ingest them under a new run."""
    lines = map_sheet_rows(body.rows, body.anchor_month)
    result = await uc.execute(
        anchor_month=body.anchor_month,
        source=IngestSource.UPLOAD,
        lines=lines,
        actor=actor,
    )
    presented = _presenter.present_batch(result, trace_id=_trace_id(request))
    ForecastPresenter.apply_headers(presented, response)
    return presented.body


@router.get(
    "",
    response_model=SuccessEnvelope[Any],
    responses=BaseRouter.std_error_responses(),
    summary="List forecast facts",
)
async def list_facts(
    request: Request,
    response: Response,
    uc: Annotated[ListForecastFactsUseCase, Depends(get_list_forecast_facts_use_case)],
    company_code: Annotated[str | None, Query()] = None,
    dept_code: Annotated[str | None, Query()] = None,
    material_code: Annotated[str | None, Query()] = None,
    sku_id: Annotated[int | None, Query(ge=1)] = None,
    sales_org_id: Annotated[int | None, Query(ge=1)] = None,
    dc_code: Annotated[str | None, Query()] = None,
    from_: Annotated[str | None, Query(alias="from", description="YYYY-MM")] = None,
    to: Annotated[str | None, Query(description="YYYY-MM")] = None,
    run: Annotated[str | None, Query(description="Run id or 'latest'")] = None,
) -> SuccessEnvelope[Any]:
    """Return facts ordered by month, company, material (capped)."""
    query = ListForecastFactsQueryDTO(
        company_code=company_code,
        dept_code=dept_code,
        material_code=material_code,
        sku_id=sku_id,
        sales_org_id=sales_org_id,
        dc_code=dc_code,
        month_from=from_,
        month_to=to,
        run=run,
    )
    rows = await uc.execute(query)
    presented = _presenter.present_facts(rows, trace_id=_trace_id(request))
    ForecastPresenter.apply_headers(presented, response)
    return presented.body


@router.get(
    "/aggregate",
    response_model=SuccessEnvelope[Any],
    responses=BaseRouter.std_error_responses(),
    summary="Aggregate forecast facts",
)
async def aggregate(
    request: Request,
    response: Response,
    uc: Annotated[AggregateForecastUseCase, Depends(get_aggregate_forecast_use_case)],
    from_: Annotated[str, Query(alias="from", description="YYYY-MM (inclusive)")],
    to: Annotated[str, Query(description="YYYY-MM (inclusive)")],
    group: Annotated[list[str], Query(description="company, dept, material, sku, month, run")] = [],  # noqa: B006
    metric: Annotated[str, Query(description="forecast_qty or revenue_snapshot")] = "forecast_qty",
    run: Annotated[str | None, Query(description="Run id or 'latest'")] = None,
) -> SuccessEnvelope[Any]:
    """Return ``SUM(metric)`` per distinct group combination."""
    query = AggregateForecastQueryDTO(
        groups=_split_groups(group),
        metric=metric,
        month_from=from_,
        month_to=to,
        run=run,
    )
    rows = await uc.execute(query)
    presented = _presenter.present_aggregate(rows, trace_id=_trace_id(request))
    ForecastPresenter.apply_headers(presented, response)
    return presented.body


@router.get(
    "/history",
    response_model=SuccessEnvelope[Any],
    responses=BaseRouter.std_error_responses(),
    summary="List history snapshots",
)
async def list_history(
    request: Request,
    response: Response,
    uc: Annotated[ListForecastHistoryUseCase, Depends(get_list_forecast_history_use_case)],
    anchor_month: Annotated[str, Query(description="YYYY-MM")],
    company_code: Annotated[str | None, Query()] = None,
    company_desc: Annotated[str | None, Query()] = None,
    material_code: Annotated[str | None, Query()] = None,
    material_desc: Annotated[str | None, Query()] = None,
    search: Annotated[str | None, Query(description="Case-insensitive substring")] = None,
) -> SuccessEnvelope[Any]:
    """Return history snapshots for one anchor month."""
    query = ListForecastHistoryQueryDTO(
        anchor_month=anchor_month,
        company_code=company_code,
        company_desc=company_desc,
        material_code=material_code,
        material_desc=material_desc,
        search=search,
    )
    rows = await uc.execute(query)
    presented = _presenter.present_history(rows, trace_id=_trace_id(request))
    ForecastPresenter.apply_headers(presented, response)
    return presented.body
