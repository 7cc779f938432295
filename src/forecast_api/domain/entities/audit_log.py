# src/forecast_api/domain/entities/audit_log.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Audit log entry written once per ingestion batch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class AuditLogEntry:
    """Append-only audit record."""

    service: str
    endpoint: str
    action: str
    record_id: str | None = None
    performed_by: str | None = None
    user_id: str | None = None
    user_email: str | None = None
    user_username: str | None = None
    client_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
