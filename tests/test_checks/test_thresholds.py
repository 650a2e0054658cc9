"""Tests for threshold range parsing."""

import math

import pytest

from fritzcheck.checks.thresholds import (
    Range,
    ThresholdError,
    check_lower,
    check_upper,
    is_set,
    parse_range,
)


@pytest.mark.parametrize("expression, expected", [
    ("10", Range(0.0, 10.0)),
    ("10:", Range(10.0, math.inf)),
    ("~:10", Range(-math.inf, 10.0)),
    (":3000", Range(-math.inf, 3000.0)),
    ("10:20", Range(10.0, 20.0)),
    (" 2.5:7.5 ", Range(2.5, 7.5)),
])
def test_parse_range(expression, expected):
    assert parse_range(expression) == expected


@pytest.mark.parametrize("expression", ["abc", "10:x", "20:10", "@10:20", "", "nan"])
def test_parse_range_rejects(expression):
    with pytest.raises(ThresholdError):
        parse_range(expression)


def test_threshold_error_is_value_error():
    assert issubclass(ThresholdError, ValueError)


def test_is_set():
    assert is_set("10:")
    assert not is_set(None)
    assert not is_set("")
    assert not is_set("   ")


class TestDirections:

    def test_check_lower_floor(self):
        assert check_lower("10:", 9.99) is True
        assert check_lower("10:", 10.0) is False
        assert check_lower("10:", 16.0) is False

    def test_check_upper_ceiling(self):
        assert check_upper(":3000", 4000.0) is True
        assert check_upper(":3000", 3000.0) is False
        assert check_upper("3000", 2999.0) is False

    def test_range_predicates(self):
        r = Range(10.0, 20.0)
        assert r.is_below(5) and not r.is_above(5)
        assert r.is_above(25) and not r.is_below(25)
        assert not r.is_below(15) and not r.is_above(15)
