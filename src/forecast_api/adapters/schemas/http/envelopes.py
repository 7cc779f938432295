# src/forecast_api/adapters/schemas/http/envelopes.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""HTTP Envelopes (Adapters Layer).

Purpose:
    Canonical transport-facing HTTP envelopes:
      - ErrorEnvelope
      - SuccessEnvelope[T]
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from forecast_api.adapters.schemas.http.base import BaseHTTPSchema

T = TypeVar("T")

__all__ = [
    "ErrorObject",
    "ErrorEnvelope",
    "SuccessEnvelope",
]


class ErrorObject(BaseModel):
    """Structured error object inside ErrorEnvelope.

    Codes are UPPER_SNAKE_CASE and stable across releases, e.g.
    ``VALIDATION_ERROR``, ``INVALID_GROUP``, ``INVALID_FORMAT``,
    ``MONTHLY_ACCESS_LOCKED`` and ``PERSISTENCE_ERROR``.
    """

    model_config = ConfigDict(
        title="ErrorObject",
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "code": "MONTHLY_ACCESS_LOCKED",
                    "http_status": 403,
                    "message": "ติดต่อ admin เพื่อปลดล็อค",
                    "details": {"anchor_month": "2025-06"},
                    "trace_id": "req-123",
                }
            ]
        },
    )

    code: str = Field(..., description="Stable machine-readable error code.")
    http_status: int = Field(..., description="Associated HTTP status.")
    message: str = Field(..., description="Human-readable error description.")
    details: dict[str, Any] | None = Field(
        default=None,
        description="Optional structured details safe for clients.",
    )
    trace_id: str | None = Field(
        default=None,
        description="Request correlation identifier.",
    )


class ErrorEnvelope(BaseHTTPSchema):
    r"""Canonical error envelope: {"error": ErrorObject}."""

    model_config = ConfigDict(title="ErrorEnvelope", extra="forbid")

    error: ErrorObject = Field(..., description="Structured error details.")


class SuccessEnvelope(BaseHTTPSchema, Generic[T]):
    r"""Success envelope: {"data": T}."""

    model_config = ConfigDict(title="SuccessEnvelope", extra="forbid")

    data: T = Field(..., description="Returned resource or value.")
