# src/forecast_api/adapters/presenters/base_presenter.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Presenter utilities and canonical envelope helpers.

Purpose:
    Thin, framework-aware helpers used by routers to consistently shape HTTP
    responses and headers.

Responsibilities:
    * Build SuccessEnvelope instances (errors are rendered by the app-level
      exception handlers).
    * Compute strong, quoted ETags from canonical JSON material.
    * Echo ``X-Request-ID``.

Layer:
    adapters/presenters
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Generic, TypeVar

from fastapi import Response

from forecast_api.adapters.schemas.http.envelopes import SuccessEnvelope

T = TypeVar("T")


def _json_default(value: Any) -> str:
    """Serialize non-JSON-native types deterministically for hashing."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        v = value.normalize()
        if v == 0:
            return "0"
        if v == v.to_integral():
            return format(v.to_integral(), "f")
        s = format(v, "f")
        return s.rstrip("0").rstrip(".")
    raise TypeError(f"unsupported type for JSON hashing: {type(value)!r}")


def compute_quoted_etag(payload: Mapping[str, Any]) -> str:
    """Return a quoted strong ETag (SHA-256 of canonical JSON for ``payload``)."""
    material = json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        default=_json_default,
    ).encode("utf-8")
    digest = hashlib.sha256(material).hexdigest()
    return f'"{digest}"'


@dataclass(slots=True)
class PresentResult(Generic[T]):
    """Presentation result envelope.

    Attributes:
        body: A Pydantic envelope instance.
        headers: Extra HTTP headers to apply.
    """

    body: T
    headers: Mapping[str, str]


class BasePresenter:
    """Base presenter for HTTP response shaping in adapter layers."""

    def present_success(
        self,
        *,
        data: Any,
        trace_id: str | None = None,
        with_etag: bool = True,
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Build a SuccessEnvelope and attach headers.

        Behavior:
            * Always echoes ``X-Request-ID`` when provided.
            * Computes a **quoted** strong ``ETag`` from the envelope body
              unless ``with_etag`` is False.
        """
        body = SuccessEnvelope[Any](data=data)

        headers: dict[str, str] = {}
        if trace_id:
            headers["X-Request-ID"] = trace_id
        if with_etag:
            headers["ETag"] = compute_quoted_etag(body.model_dump(mode="python"))
        return PresentResult(body=body, headers=headers)

    @staticmethod
    def apply_headers(result: PresentResult[Any], response: Response) -> None:
        """Apply presenter headers to the outgoing response."""
        response.headers.update(dict(result.headers))
