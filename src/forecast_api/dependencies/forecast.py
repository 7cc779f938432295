# src/forecast_api/dependencies/forecast.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Dependency wiring for forecast use cases.

Overview:
    FastAPI dependency providers that build the forecast use cases consumed
    by the forecast router. Each provider returns a fresh use case bound to
    a fresh SQLAlchemy UnitOfWork; limits and the audit service name come
    from Settings.

Layer:
    dependencies
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from forecast_api.adapters.dependencies.forecast_uow import get_forecast_uow
from forecast_api.adapters.uow import SqlAlchemyUnitOfWork
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
from forecast_api.config.settings import Settings, get_settings

UowDep = Annotated[SqlAlchemyUnitOfWork, Depends(get_forecast_uow)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_submit_forecast_batch_use_case(
    uow: UowDep, settings: SettingsDep
) -> SubmitForecastBatchUseCase:
    """Return the batch ingestion use case."""
    return SubmitForecastBatchUseCase(uow, audit_service_name=settings.audit_service_name)


def get_aggregate_forecast_use_case(uow: UowDep) -> AggregateForecastUseCase:
    """Return the aggregation use case."""
    return AggregateForecastUseCase(uow)


def get_list_forecast_facts_use_case(
    uow: UowDep, settings: SettingsDep
) -> ListForecastFactsUseCase:
    """Return the fact listing use case (capped at ``FORECAST_LIST_LIMIT``)."""
    return ListForecastFactsUseCase(uow, limit=settings.forecast_list_limit)


def get_list_forecast_history_use_case(
    uow: UowDep, settings: SettingsDep
) -> ListForecastHistoryUseCase:
    """Return the history listing use case (capped at ``FORECAST_HISTORY_LIMIT``)."""
    return ListForecastHistoryUseCase(uow, limit=settings.forecast_history_limit)
