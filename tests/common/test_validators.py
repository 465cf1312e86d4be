from __future__ import annotations

import math
from datetime import date

import pytest

from src.timesheet_pro.timesheet_pro.common.datetime_utils import coerce_date, coerce_optional_date
from src.timesheet_pro.timesheet_pro.common.validators import (
    optional_text,
    require_clock_time,
    require_min_length,
    require_non_negative,
    require_positive_hours,
)
from src.timesheet_pro.timesheet_pro.core.exceptions import ValidationError


@pytest.mark.parametrize("value", ["2.5", 2.5, 8])
def test_positive_hours_accepts_numbers(value):
    assert require_positive_hours(value) == float(value)


@pytest.mark.parametrize("value", [0, -1, "abc", None, "nan", math.nan, "inf", math.inf, "-inf"])
def test_positive_hours_rejects(value):
    with pytest.raises(ValidationError):
        require_positive_hours(value)


@pytest.mark.parametrize("value", ["nan", math.inf, -3])
def test_non_negative_rejects(value):
    with pytest.raises(ValidationError):
        require_non_negative(value, "Estimated hours")


def test_non_negative_treats_missing_as_zero():
    assert require_non_negative(None, "Estimated hours") == 0


def test_clock_time_is_normalized():
    assert require_clock_time(" 9:05 ", "In time") == "09:05"


@pytest.mark.parametrize("value", [900, 9.5, ["09:00"], "25:00", ""])
def test_clock_time_rejects(value):
    with pytest.raises(ValidationError):
        require_clock_time(value, "In time")


def test_coerce_date_accepts_iso_strings_and_dates():
    assert coerce_date("2024-03-14", "Date") == date(2024, 3, 14)
    assert coerce_date(date(2024, 3, 14), "Date") == date(2024, 3, 14)
    assert coerce_optional_date("", "Date") is None


@pytest.mark.parametrize("value", [20240314, 1.5, {"y": 2024}, "14/03/2024", None])
def test_coerce_date_rejects(value):
    with pytest.raises(ValidationError):
        coerce_date(value, "Date")


def test_optional_text():
    assert optional_text(None, "Phone") == ""
    assert optional_text("  555 ", "Phone") == "555"
    with pytest.raises(ValidationError):
        optional_text(555, "Phone")


def test_min_length_rejects_non_text():
    with pytest.raises(ValidationError):
        require_min_length(123456, "Password", 6)
