# src/forecast_api/adapters/routers/base_router.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""
Base Router (Adapters Layer)

Purpose:
    Provide a canonical APIRouter wrapper for HTTP endpoints:
      - Versioned routing with stable prefixes (e.g., "/v1/forecast").
      - Standard error response mapping using ErrorEnvelope.
      - Default tags and OpenAPI metadata.

Layer:
    adapters/routers
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from fastapi import APIRouter

from forecast_api.adapters.schemas.http.envelopes import ErrorEnvelope
from forecast_api.infrastructure.logging.logger import get_json_logger

_LOGGER = get_json_logger(__name__)

TagType = str | Enum


class BaseRouter(APIRouter):
    """Canonical router wrapper for versioned HTTP endpoints.

    Args:
        version: API version segment (e.g., "v1").
        resource: Resource segment (e.g., "forecast").
        prefix: Optional explicit prefix (overrides version/resource).
        tags: Default tags applied to all routes mounted on this router.
        dependencies: Optional global dependencies for all routes.
        **kwargs: Additional APIRouter kwargs.
    """

    def __init__(
        self,
        *,
        version: str,
        resource: str,
        prefix: str | None = None,
        tags: Sequence[TagType] | None = None,
        dependencies: Sequence[Any] | None = None,
        **kwargs: Any,
    ) -> None:
        computed_prefix = prefix or f"/{version}/{resource}"
        super().__init__(
            prefix=computed_prefix,
            tags=list(tags) if tags is not None else None,
            dependencies=list(dependencies) if dependencies is not None else None,
            **kwargs,
        )
        _LOGGER.info(
            "router_initialized",
            extra={"prefix": computed_prefix, "tags": [str(t) for t in tags or []]},
        )

    @staticmethod
    def std_error_responses() -> dict[int | str, dict[str, Any]]:
        """Return the canonical error response mapping for endpoints.

        Use in routes via:

            responses=BaseRouter.std_error_responses()
        """
        return {
            400: {"model": ErrorEnvelope, "description": "Bad request (validation or parameter)."},
            401: {"model": ErrorEnvelope, "description": "Unauthorized (missing/invalid auth)."},
            403: {"model": ErrorEnvelope, "description": "Forbidden (month locked)."},
            422: {"model": ErrorEnvelope, "description": "Unprocessable content."},
            500: {"model": ErrorEnvelope, "description": "Internal server error."},
        }
