# src/forecast_api/main.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""
Application Entry (Adapters Bootstrap)

Synopsis:
    FastAPI bootstrap that wires middleware, exception handlers, and routers.
    Provides an application factory (`create_app`) and a module-level eager
    app (`app`) for ASGI servers and tests.

Usage:
    uvicorn forecast_api.main:app --host 0.0.0.0 --port 8080
    forecast-api            # console script, same as ``python -m forecast_api.main``

Design:
    • Bootstrap only (no business logic): routers + middleware + handlers.
    • Lifespan initializes the DB engine and tears it down safely.
    • Domain errors render as the canonical error envelope with their own
      stable code and HTTP status.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.responses import Response as StarletteResponse

from forecast_api.adapters.routers import forecast_router, metrics_router
from forecast_api.config.settings import Settings, get_settings
from forecast_api.dependencies.core.bootstrap import bootstrap
from forecast_api.domain.exceptions.base import DomainError
from forecast_api.infrastructure.http.errors import (
    handle_domain_error,
    handle_http_exception,
    handle_unhandled_exception,
    handle_validation_error,
)
from forecast_api.infrastructure.logging.logger import (
    configure_root_logging,
    get_json_logger,
)
from forecast_api.infrastructure.middleware.request_id import RequestIdMiddleware

configure_root_logging()
logger = get_json_logger(__name__)


@asynccontextmanager
async def runtime_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize and teardown shared infrastructure via the core bootstrap."""
    async with bootstrap(app) as state:
        app.state.settings = state.settings
        yield


def _attach_middlewares(app: FastAPI, settings: Settings) -> None:
    """Attach request-id correlation and CORS middleware."""
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _patch_exception_handlers(app: FastAPI) -> None:
    """Install structured exception handlers."""

    async def _domain_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, DomainError):
            raise exc
        return await handle_domain_error(request, exc)

    async def _http_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, HTTPException):
            raise exc
        return await handle_http_exception(request, exc)

    async def _validation_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, RequestValidationError):
            raise exc
        return await handle_validation_error(request, exc)

    async def _unhandled_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        return await handle_unhandled_exception(request, exc)

    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(HTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Fully configured application instance.
    """
    settings: Settings = get_settings()
    service_version = settings.service_version or "0.0.0"

    app = FastAPI(
        title="Forecast API",
        version=service_version,
        description="Sales forecast ingestion and aggregation.",
        lifespan=runtime_lifespan,
    )

    _patch_exception_handlers(app)
    _attach_middlewares(app, settings)

    app.include_router(forecast_router)
    app.include_router(metrics_router)

    @app.get("/healthz")
    async def healthz() -> JSONResponse:
        """Liveness probe."""
        return JSONResponse({"status": "ok"})

    logger.info(
        "service_startup",
        extra={
            "service": settings.service_name,
            "env": settings.environment.value,
            "version": service_version,
        },
    )
    return app


app: FastAPI = create_app()


def run() -> None:
    """Serve the app with uvicorn; ``HOST``/``PORT`` override the bind address."""
    import uvicorn

    uvicorn.run(
        "forecast_api.main:create_app",
        factory=True,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8080")),
    )


if __name__ == "__main__":  # pragma: no cover
    run()
