# src/forecast_api/infrastructure/auth/request_actor_dependency.py
# Copyright (c) Forecast.
# SPDX-License-Identifier: MIT
"""Request actor dependency (Infrastructure Layer).

Purpose:
    Resolve the caller identity for forecast endpoints from an HS256 bearer
    JWT and the ``X-Client-Id`` header, and return a ``RequestActor``.

Design:
    - With ``AUTH_ENABLED=false`` every request is anonymous (client id is
      still honoured).
    - With auth enabled a valid bearer token is mandatory. Token issuance is
      handled elsewhere; this module only verifies.

Layer:
    infrastructure/auth
"""

from __future__ import annotations

from typing import Annotated, Any

import jwt
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from forecast_api.config.settings import Settings, get_settings
from forecast_api.domain.entities.monthly_access import RequestActor
from forecast_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

scheme = HTTPBearer(auto_error=False)


def _claim(claims: dict[str, Any], *names: str) -> str | None:
    for name in names:
        value = claims.get(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def actor_from_claims(claims: dict[str, Any], *, client_id: str | None = None) -> RequestActor:
    """Map verified JWT claims to a ``RequestActor``."""
    email = _claim(claims, "email")
    username = _claim(claims, "username", "preferred_username")
    user_id = _claim(claims, "sub", "user_id", "id")
    return RequestActor(
        performed_by=email or username or user_id,
        user_id=user_id,
        email=email,
        username=username,
        role=_claim(claims, "role"),
        client_id=client_id,
    )


async def resolve_request_actor(
    settings: Annotated[Settings, Depends(get_settings)],
    creds: Annotated[HTTPAuthorizationCredentials | None, Depends(scheme)] = None,
    x_client_id: Annotated[str | None, Header(alias="X-Client-Id")] = None,
) -> RequestActor:
    """Return the caller identity for the current request.

    Raises:
        HTTPException: 401 when auth is enabled and the token is missing or invalid.
    """
    client_id = (x_client_id or "").strip() or None
    if not settings.auth_enabled:
        return RequestActor(performed_by="anonymous", client_id=client_id)

    if creds is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    try:
        claims: dict[str, Any] = jwt.decode(
            creds.credentials,
            settings.auth_hs256_secret or "",
            algorithms=[settings.auth_algorithm],
        )
    except jwt.PyJWTError as exc:
        logger.warning("auth.jwt_verification_failed", extra={"reason": type(exc).__name__})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        ) from None

    return actor_from_claims(claims, client_id=client_id)
