# src/forecast_api/adapters/presenters/forecast_presenter.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Presenter: forecast DTOs → HTTP SuccessEnvelope.

Synopsis:
    Renders application-layer forecast DTOs into canonical envelopes. Write
    endpoints carry no ETag; read endpoints get a content-hash ETag.

Layer:
    adapters/presenters
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from forecast_api.adapters.presenters.base_presenter import BasePresenter, PresentResult
from forecast_api.adapters.schemas.http.envelopes import SuccessEnvelope
from forecast_api.adapters.schemas.http.forecast_schemas import (
    AggregateRowHTTP,
    ForecastFactHTTP,
    ForecastHistoryHTTP,
    SubmitBatchResponseHTTP,
)
from forecast_api.application.schemas.dto.forecast import (
    AggregateRowDTO,
    ForecastFactDTO,
    ForecastHistoryDTO,
    SubmitForecastBatchResultDTO,
)


class ForecastPresenter(BasePresenter):
    """Presenter for ``/v1/forecast`` responses."""

    def present_batch(
        self, dto: SubmitForecastBatchResultDTO, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Render a batch result (no ETag on writes)."""
        payload = SubmitBatchResponseHTTP(
            run_id=dto.run_id,
            inserted_count=dto.inserted_count,
            line_count=dto.line_count,
        )
        return self.present_success(data=payload, trace_id=trace_id, with_etag=False)

    def present_aggregate(
        self, rows: Sequence[AggregateRowDTO], *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Render aggregation rows."""
        items = [AggregateRowHTTP(keys=r.keys, value=r.value) for r in rows]
        return self.present_success(data=items, trace_id=trace_id)

    def present_facts(
        self, rows: Sequence[ForecastFactDTO], *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Render a fact listing."""
        items = [ForecastFactHTTP(**r.model_dump()) for r in rows]
        return self.present_success(data=items, trace_id=trace_id)

    def present_history(
        self, rows: Sequence[ForecastHistoryDTO], *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Render a history listing."""
        items = [ForecastHistoryHTTP(**r.model_dump()) for r in rows]
        return self.present_success(data=items, trace_id=trace_id)
