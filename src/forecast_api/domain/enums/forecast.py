# src/forecast_api/domain/enums/forecast.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Forecast enumerations.

Purpose:
    Closed vocabularies used by the ingestion and aggregation flows:
    aggregation grouping keys, summable metrics, ingest sources, and the
    caller roles understood by the monthly access guard.

Layer:
    domain/enums
"""

from __future__ import annotations

from enum import Enum


class AggregationGroup(str, Enum):
    """Grouping keys accepted by the aggregation engine."""

    COMPANY = "company"
    DEPT = "dept"
    MATERIAL = "material"
    SKU = "sku"
    MONTH = "month"
    RUN = "run"

    @classmethod
    def parse(cls, raw: str) -> AggregationGroup | None:
        """Return the member for ``raw`` (case-insensitive), or None if unknown."""
        key = (raw or "").strip().lower()
        for member in cls:
            if member.value == key:
                return member
        return None


class ForecastMetric(str, Enum):
    """Fact columns that can be summed by the aggregation engine."""

    FORECAST_QTY = "forecast_qty"
    REVENUE_SNAPSHOT = "revenue_snapshot"


class IngestSource(str, Enum):
    """Origin of an ingestion batch."""

    MANUAL = "manual"
    UPLOAD = "upload"

    @property
    def audit_endpoint(self) -> str:
        """HTTP endpoint label recorded in audit entries for this source."""
        return "/v1/manual" if self is IngestSource.MANUAL else "/v1/upload"


class UserRole(str, Enum):
    """Caller roles. Anything other than USER bypasses the monthly lock."""

    USER = "USER"
    ADMIN = "ADMIN"

    @staticmethod
    def is_elevated(role: str | None) -> bool:
        """Return True when ``role`` is present and is not USER."""
        normalized = (role or "").strip().upper()
        return bool(normalized) and normalized != UserRole.USER.value
