"""
Tests for time arithmetic and formatting helpers
"""
from datetime import date

import pytest

from models import InvalidTimeFormat
from utils import (adjust_duration_minutes, compute_duration_minutes, format_minutes,
                   format_minutes_decimal, parse_time_of_day, round2, validate_numeric_input)


@pytest.mark.parametrize("raw,expected", [
    ("0630", (6, 30)),
    ("0000", (0, 0)),
    ("2359", (23, 59)),
    ("08:30", (8, 30)),
])
def test_parse_time_of_day_accepts_hhmm(raw, expected):
    assert parse_time_of_day(raw) == expected


@pytest.mark.parametrize("raw", ["2400", "0860", "123", "12345", "", "ab12", None])
def test_parse_time_of_day_rejects_invalid(raw):
    with pytest.raises(InvalidTimeFormat):
        parse_time_of_day(raw)


def test_duration_same_day():
    assert compute_duration_minutes("2025-01-01", "0800", "2025-01-01", "2020") == 740


def test_duration_twelve_hours():
    assert compute_duration_minutes("2025-01-01", "0800", "2025-01-01", "2000") == 720


def test_duration_overnight_uses_arrival_date():
    assert compute_duration_minutes("2025-01-01", "2200", "2025-01-02", "0130") == 210


def test_duration_has_no_same_date_wraparound():
    """An earlier arrival clock time on the same date is not treated as next day"""
    assert compute_duration_minutes("2025-01-01", "2200", "2025-01-01", "0130") == 0


def test_duration_arrival_before_departure_is_zero():
    assert compute_duration_minutes("2025-01-02", "0800", "2025-01-01", "2020") == 0


def test_duration_equal_instants_is_zero():
    assert compute_duration_minutes("2025-01-01", "0800", "2025-01-01", "0800") == 0


@pytest.mark.parametrize("dep_date,dep_time,arr_date,arr_time", [
    ("2025-01-01", "8am", "2025-01-01", "1000"),
    ("2025-01-01", "0800", "2025-01-01", "2500"),
    ("2025-13-01", "0800", "2025-13-01", "1000"),
    ("", "0800", "2025-01-01", "1000"),
    (None, "0800", "2025-01-01", "1000"),
])
def test_duration_malformed_input_is_zero(dep_date, dep_time, arr_date, arr_time):
    assert compute_duration_minutes(dep_date, dep_time, arr_date, arr_time) == 0


def test_duration_accepts_date_objects():
    assert compute_duration_minutes(date(2025, 2, 28), "2330", date(2025, 3, 1), "0015") == 45


def test_duration_across_leap_day():
    assert compute_duration_minutes("2024-02-28", "1200", "2024-03-01", "1200") == 2 * 1440


@pytest.mark.parametrize("minutes,expected", [
    (650, 1440),
    (1440, 1440),
    (1441, 1441),
    (300, 300),
    (600, 1440),
    (599, 599),
    (0, 0),
])
def test_adjust_duration_minutes(minutes, expected):
    assert adjust_duration_minutes(minutes) == expected


@pytest.mark.parametrize("minutes,expected", [
    (0, "0h 00m"),
    (5, "0h 05m"),
    (725, "12h 05m"),
    (1500, "25h 00m"),
])
def test_format_minutes(minutes, expected):
    assert format_minutes(minutes) == expected


def test_format_minutes_decimal():
    assert format_minutes_decimal(90) == "1.50"
    assert format_minutes_decimal(50) == "0.83"


@pytest.mark.parametrize("value,expected", [
    (1.005, 1.01),
    (2.675, 2.68),
    (0.125, 0.13),
    (18.0, 18.0),
    (3.9312000000000005, 3.93),
])
def test_round2_is_half_up_on_decimal_value(value, expected):
    assert round2(value) == expected


def test_validate_numeric_input_accepts_comma_decimal():
    assert validate_numeric_input("1,5", "x") == 1.5
    assert validate_numeric_input(3, "y") == 3.0


@pytest.mark.parametrize("value", ["abc", None, float("inf"), "nan"])
def test_validate_numeric_input_rejects_invalid(value):
    with pytest.raises(ValueError):
        validate_numeric_input(value, "x")
