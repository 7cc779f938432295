# src/forecast_api/adapters/routers/__init__.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Routers Package Export (Adapters Layer).

Purpose:
    Provide stable, explicit exports for the routers mounted by ``main.py``.

Layer:
    adapters/routers
"""

from __future__ import annotations

from .forecast_router import router as forecast_router
from .metrics_router import router as metrics_router

__all__ = ["forecast_router", "metrics_router"]
