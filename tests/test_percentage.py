"""Tests for marks percentage utilities."""

import pytest
from certdesk.utils.percentage import get_percentage, grade_band, parse_leading_int


def test_zero_obtained():
    assert get_percentage("0", "100") == 0


def test_whole_percentage():
    assert get_percentage("85", "100") == 85


def test_non_numeric_obtained_is_zero():
    """Non-numeric input yields 0 instead of propagating an error."""
    assert get_percentage("x", "100") == 0


def test_non_numeric_total_is_zero():
    assert get_percentage("50", "abc") == 0


def test_empty_inputs_are_zero():
    assert get_percentage("", "") == 0
    assert get_percentage(None, "100") == 0


def test_zero_total_is_zero():
    assert get_percentage("50", "0") == 0


def test_rounds_half_up():
    """12.5% rounds up to 13."""
    assert get_percentage("1", "8") == 13


def test_rounds_to_nearest():
    assert get_percentage("420", "500") == 84
    assert get_percentage("2", "3") == 67


def test_integer_prefix_is_used():
    """Only the leading integer of each value counts."""
    assert get_percentage("85.9", "100") == 85
    assert get_percentage(" 45 marks", "50") == 90


@pytest.mark.parametrize(
    "value,expected",
    [("42", 42), ("  7", 7), ("-3", -3), ("+5", 5), ("12abc", 12), ("abc", None), ("", None)],
)
def test_parse_leading_int(value, expected):
    assert parse_leading_int(value) == expected


@pytest.mark.parametrize(
    "percentage,band",
    [(95, "excellent"), (90, "excellent"), (85, "good"), (70, "average"), (69, "poor"), (0, "poor")],
)
def test_grade_band(percentage, band):
    assert grade_band(percentage) == band
