# tests/unit/domain/forecast/test_run_selector.py
from __future__ import annotations

import pytest

from forecast_api.domain.exceptions.forecast import ForecastValidationError
from forecast_api.domain.value_objects.run_selector import RunSelector


def test_parse_none_and_blank_mean_unfiltered() -> None:
    assert RunSelector.parse(None) is None
    assert RunSelector.parse("  ") is None


def test_parse_latest_is_case_insensitive() -> None:
    selector = RunSelector.parse("LATEST")

    assert selector is not None
    assert selector.latest is True
    assert selector.run_id is None


def test_parse_explicit_run_id() -> None:
    assert RunSelector.parse("7") == RunSelector(run_id=7)
    assert RunSelector.parse(3) == RunSelector(run_id=3)


@pytest.mark.parametrize("raw", ["0", "-1", "abc", "1.5", 0])
def test_parse_rejects_invalid_values(raw: str | int) -> None:
    with pytest.raises(ForecastValidationError):
        RunSelector.parse(raw)


def test_selector_requires_exactly_one_mode() -> None:
    with pytest.raises(ValueError):
        RunSelector()
    with pytest.raises(ValueError):
        RunSelector(run_id=1, latest=True)


@pytest.mark.parametrize("raw", ["²", "١٢", "9223372036854775808", 2**63])
def test_parse_rejects_non_ascii_digits_and_out_of_range_ids(raw: str | int) -> None:
    with pytest.raises(ForecastValidationError):
        RunSelector.parse(raw)


def test_parse_accepts_bigint_maximum() -> None:
    assert RunSelector.parse("9223372036854775807") == RunSelector(run_id=2**63 - 1)
