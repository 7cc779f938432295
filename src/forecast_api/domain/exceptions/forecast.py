# src/forecast_api/domain/exceptions/forecast.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""
Forecast Domain Exceptions

Purpose:
    Exceptions raised while ingesting forecast lines or querying forecast
    facts. Each carries a stable ``code`` and the HTTP status the adapters
    map it to.

Layer: domain/exceptions
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .base import DomainError

MONTHLY_ACCESS_LOCKED_MESSAGE = "ติดต่อ admin เพื่อปลดล็อค"


class ForecastValidationError(DomainError):
    """Input line, month, or query parameter failed validation."""

    code = "VALIDATION_ERROR"
    http_status = 400


class InvalidGroupError(ForecastValidationError):
    """Aggregation grouping is empty or references an unknown key."""

    code = "INVALID_GROUP"


class SheetFormatError(ForecastValidationError):
    """Uploaded sheet rows contain cells of the wrong type.

    Attributes:
        diagnostics: Every offending cell, in row order.
    """

    code = "INVALID_FORMAT"

    def __init__(self, message: str, *, diagnostics: Sequence[dict[str, Any]]) -> None:
        super().__init__(message, details={"diagnostics": list(diagnostics)})
        self.diagnostics = list(diagnostics)


class MonthlyAccessLockedError(DomainError):
    """The caller's edit window for the anchor month is locked."""

    code = "MONTHLY_ACCESS_LOCKED"
    http_status = 403

    def __init__(self, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(MONTHLY_ACCESS_LOCKED_MESSAGE, details=details)


class ForecastPersistenceError(DomainError):
    """A database operation failed while writing or reading forecast data."""

    code = "PERSISTENCE_ERROR"
    http_status = 500
