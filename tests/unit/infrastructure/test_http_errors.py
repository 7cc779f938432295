# tests/unit/infrastructure/test_http_errors.py
from __future__ import annotations

import json

import pytest
from starlette.exceptions import HTTPException
from starlette.requests import Request

from forecast_api.adapters.schemas.http.envelopes import ErrorEnvelope
from forecast_api.domain.exceptions.forecast import ForecastValidationError
from forecast_api.infrastructure.http.errors import (
    handle_domain_error,
    handle_http_exception,
    handle_unhandled_exception,
)


def _request(request_id: str | None = "req-1") -> Request:
    request = Request(
        {"type": "http", "method": "GET", "path": "/v1/forecast", "headers": [], "query_string": b""}
    )
    if request_id is not None:
        request.state.request_id = request_id
    return request


@pytest.mark.asyncio
async def test_domain_error_body_matches_error_envelope() -> None:
    exc = ForecastValidationError("run must be 'latest'", details={"run": "²"})

    response = await handle_domain_error(_request(), exc)

    assert response.status_code == 400
    envelope = ErrorEnvelope.model_validate(json.loads(response.body))
    assert envelope.error.code == "VALIDATION_ERROR"
    assert envelope.error.details == {"run": "²"}
    assert envelope.error.trace_id == "req-1"


@pytest.mark.asyncio
async def test_http_and_unhandled_errors_match_error_envelope() -> None:
    http_response = await handle_http_exception(
        _request(None), HTTPException(status_code=401, detail="Missing token")
    )
    crash_response = await handle_unhandled_exception(_request(), RuntimeError("boom"))

    http_envelope = ErrorEnvelope.model_validate(json.loads(http_response.body))
    crash_envelope = ErrorEnvelope.model_validate(json.loads(crash_response.body))
    assert http_envelope.error.http_status == 401
    assert http_envelope.error.trace_id is None
    assert crash_envelope.error.code == "INTERNAL_ERROR"
    assert "boom" not in crash_envelope.error.message
