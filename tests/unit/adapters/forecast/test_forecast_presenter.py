# tests/unit/adapters/forecast/test_forecast_presenter.py
from __future__ import annotations

from datetime import date
from decimal import Decimal

from forecast_api.adapters.presenters.base_presenter import compute_quoted_etag
from forecast_api.adapters.presenters.forecast_presenter import ForecastPresenter
from forecast_api.application.schemas.dto.forecast import (
    AggregateRowDTO,
    SubmitForecastBatchResultDTO,
)


def test_batch_result_has_no_etag() -> None:
    presented = ForecastPresenter().present_batch(
        SubmitForecastBatchResultDTO(run_id=4, inserted_count=6, line_count=2),
        trace_id="req-1",
    )

    assert "ETag" not in presented.headers
    assert presented.headers["X-Request-ID"] == "req-1"
    assert presented.body.model_dump(mode="json")["data"] == {
        "run_id": 4,
        "inserted_count": 6,
        "line_count": 2,
    }


def test_aggregate_etag_is_stable_for_equal_payloads() -> None:
    presenter = ForecastPresenter()
    rows = [AggregateRowDTO(keys={"month": date(2025, 1, 1)}, value=Decimal("10.0"))]

    first = presenter.present_aggregate(rows)
    second = presenter.present_aggregate(list(rows))

    assert first.headers["ETag"] == second.headers["ETag"]
    assert first.headers["ETag"].startswith('"') and first.headers["ETag"].endswith('"')
    assert "X-Request-ID" not in first.headers


def test_etag_ignores_decimal_scale() -> None:
    assert compute_quoted_etag({"v": Decimal("10.0")}) == compute_quoted_etag({"v": Decimal("10")})
    assert compute_quoted_etag({"v": Decimal("1")}) != compute_quoted_etag({"v": Decimal("2")})


def test_decimals_render_as_strings_in_json() -> None:
    presented = ForecastPresenter().present_aggregate(
        [AggregateRowDTO(keys={"company": "C001"}, value=Decimal("12.5"))]
    )

    assert presented.body.model_dump(mode="json")["data"] == [
        {"keys": {"company": "C001"}, "value": "12.5"}
    ]
