# src/forecast_api/domain/value_objects/run_selector.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Run selector value object.

Purpose:
    Express which forecast run a query is restricted to: an explicit run id
    or the latest run (greatest ``run_id``) resolved at query time.

Layer:
    domain/value_objects
"""

from __future__ import annotations

from dataclasses import dataclass

from forecast_api.domain.exceptions.forecast import ForecastValidationError

LATEST = "latest"
MAX_RUN_ID = 2**63 - 1


@dataclass(frozen=True, slots=True)
class RunSelector:
    """Either a concrete run id or the ``latest`` marker."""

    run_id: int | None = None
    latest: bool = False

    def __post_init__(self) -> None:
        """Exactly one of ``run_id`` / ``latest`` must be set."""
        if self.latest == (self.run_id is not None):
            raise ValueError("RunSelector requires exactly one of run_id or latest.")

    @classmethod
    def parse(cls, raw: str | int | None) -> RunSelector | None:
        """Build a selector from user input.

        Args:
            raw: ``None``/empty (no filter), ``"latest"``, or a positive run id
                within the BIGINT range.

        Returns:
            RunSelector | None: Selector, or None when unfiltered.

        Raises:
            ForecastValidationError: If ``raw`` is neither ``latest`` nor a positive integer.
        """
        if raw is None:
            return None
        if isinstance(raw, int) and not isinstance(raw, bool):
            candidate = raw
        else:
            text = str(raw).strip()
            if not text:
                return None
            if text.lower() == LATEST:
                return cls(latest=True)
            if not (text.isascii() and text.isdigit()):
                raise ForecastValidationError(
                    "run must be 'latest' or a positive integer",
                    details={"run": raw},
                )
            candidate = int(text)
        if candidate <= 0 or candidate > MAX_RUN_ID:
            raise ForecastValidationError(
                "run must be 'latest' or a positive integer",
                details={"run": raw},
            )
        return cls(run_id=candidate)
