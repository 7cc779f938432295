# tests/unit/domain/forecast/test_forecast_entities.py
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from forecast_api.domain.entities.forecast_dimensions import ResolvedDimensions
from forecast_api.domain.entities.forecast_fact import ForecastFactRow
from forecast_api.domain.entities.forecast_line import ForecastLine
from forecast_api.domain.entities.forecast_run import ForecastRun
from forecast_api.domain.entities.monthly_access import RequestActor, normalize_email
from forecast_api.domain.enums.forecast import AggregationGroup, IngestSource, UserRole
from forecast_api.domain.exceptions.forecast import (
    MONTHLY_ACCESS_LOCKED_MESSAGE,
    MonthlyAccessLockedError,
)


def test_missing_fields_reports_blank_required_codes() -> None:
    line = ForecastLine(
        company_code="C1",
        dept_code="  ",
        dc_code="NA",
        material_code=None,
        pack_size="1kg",
        uom_code="BOX",
    )

    assert line.missing_fields() == ["dept_code", "material_code"]


def test_sales_org_key_keeps_none_and_empty_distinct() -> None:
    line = ForecastLine(
        company_code="C1",
        dept_code="D1",
        dc_code="NA",
        material_code="M1",
        pack_size="1kg",
        uom_code="BOX",
        division="",
    )

    assert line.sales_org_key() == ("", None, None, None, None)


def test_fact_row_natural_key_excludes_measures() -> None:
    row = ForecastFactRow(
        run_id=1,
        company_id=2,
        dept_id=3,
        sku_id=4,
        sales_org_id=5,
        dc_id=6,
        month_id=date(2025, 6, 1),
        forecast_qty=Decimal("10"),
        unit_price_snapshot=None,
        revenue_snapshot=None,
    )

    assert row.natural_key == (1, 2, 3, 4, 5, 6, date(2025, 6, 1))


def test_forecast_run_invariants() -> None:
    with pytest.raises(ValueError):
        ForecastRun(run_id=0, anchor_month=date(2025, 6, 1))
    with pytest.raises(ValueError):
        ForecastRun(run_id=1, anchor_month=date(2025, 6, 2))


def test_resolved_dimensions_metadata_is_stringly_typed() -> None:
    dims = ResolvedDimensions(
        company_id=1, dept_id=2, dc_id=3, uom_id=4, material_id=5, sku_id=6, sales_org_id=7
    )

    assert dims.as_metadata()["sku_id"] == "6"
    assert set(dims.as_metadata()) == {
        "company_id",
        "dept_id",
        "dc_id",
        "uom_id",
        "material_id",
        "sku_id",
        "sales_org_id",
    }


def test_request_actor_metadata() -> None:
    actor = RequestActor(
        performed_by="a@example.com",
        user_id="u-1",
        email="a@example.com",
        role="USER",
        client_id="client-9",
    )

    meta = actor.as_metadata()

    assert meta["user"]["id"] == "u-1"
    assert meta["api_client_id"] == "client-9"
    assert RequestActor.anonymous().as_metadata() == {}


def test_normalize_email() -> None:
    assert normalize_email("  User@Example.COM ") == "user@example.com"
    assert normalize_email(None) == ""


def test_enum_helpers() -> None:
    assert AggregationGroup.parse(" Company ") is AggregationGroup.COMPANY
    assert AggregationGroup.parse("region") is None
    assert IngestSource.MANUAL.audit_endpoint == "/v1/manual"
    assert IngestSource.UPLOAD.audit_endpoint == "/v1/upload"
    assert UserRole.is_elevated("admin") is True
    assert UserRole.is_elevated("USER") is False
    assert UserRole.is_elevated(None) is False


def test_locked_error_carries_operator_message() -> None:
    exc = MonthlyAccessLockedError(details={"anchor_month": "2025-06"})

    assert exc.http_status == 403
    assert exc.code == "MONTHLY_ACCESS_LOCKED"
    assert exc.message == MONTHLY_ACCESS_LOCKED_MESSAGE
