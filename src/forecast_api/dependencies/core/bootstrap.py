# src/forecast_api/dependencies/core/bootstrap.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Core bootstrap for infrastructure (logging, DB).

This module owns the lifecycle of shared infrastructure used by the FastAPI app.
It is intentionally thin: configuration is read from Settings, and all heavy
lifting is delegated to the infrastructure modules.

The single public surface is :func:`bootstrap`, an async context manager that
yields a simple state object with the resolved Settings.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI

from forecast_api.config.settings import Settings, get_settings
from forecast_api.infrastructure.logging.logger import configure_root_logging, get_json_logger

logger = get_json_logger(__name__)


@dataclass
class BootstrapState:
    """State yielded by the bootstrap context manager."""

    settings: Settings


@asynccontextmanager
async def bootstrap(app: FastAPI) -> AsyncGenerator[BootstrapState, None]:
    """Initialize and teardown shared infrastructure.

    Responsibilities:
        * Load application settings and configure JSON logging.
        * Initialize the DB engine/sessionmaker.
        * Dispose the engine on exit, even on error.

    Args:
        app: FastAPI application instance.

    Yields:
        BootstrapState: Resolved settings.
    """
    settings: Settings = get_settings()
    configure_root_logging(settings.log_level)
    logger.info("bootstrap.start", extra={"service": settings.service_name})

    # Imported here so tests can monkeypatch its functions.
    import forecast_api.infrastructure.database.session as db_session

    db_session.init_engine_and_sessionmaker(settings)
    app.state.settings = settings

    try:
        yield BootstrapState(settings=settings)
    finally:
        try:
            await db_session.dispose_engine()
        except Exception:
            logger.exception("bootstrap.db_dispose_failed")

        logger.info("bootstrap.stop")
