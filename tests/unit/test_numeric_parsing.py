# ============================================================================
# FILE: tests/unit/test_numeric_parsing.py
# ============================================================================
"""
Unit tests for lab value parsing
"""

import math

import pytest

from lab_ingestion.normalization import (
    is_finite_number,
    parse_numeric_value,
    parse_optional_numeric,
)


@pytest.mark.parametrize("raw,expected", [
    ("17,9", 17.9),
    ("0,85", 0.85),
    ("1,234", 1234.0),
    ("12,345,678", 12345678.0),
    ("1,234.5", 1234.5),
    ("120 mg/dL", 120.0),
    ("120mg/dl", 120.0),
    ("5.8%", 5.8),
    ("7.7 μmol/L", 7.7),
    ("↑95", 95.0),
    ("95↓", 95.0),
    ("  42.1  ", 42.1),
    ("-3.5", -3.5),
    ("1e3", 1000.0),
])
def test_parse_numeric_value_strings(raw, expected):
    """Test locale formats, units and arrows"""
    assert parse_numeric_value(raw) == pytest.approx(expected)


def test_parse_numeric_value_numbers_unchanged():
    """Test numbers are returned as-is"""
    assert parse_numeric_value(95) == 95.0
    assert parse_numeric_value(17.9) == 17.9
    assert isinstance(parse_numeric_value(95), float)


@pytest.mark.parametrize("raw", ["", "   ", None, "abc", "mg/dL", "n/a", "<", True, [1], {}])
def test_parse_numeric_value_invalid_is_nan(raw):
    """Test invalid input yields NaN and never raises"""
    assert math.isnan(parse_numeric_value(raw))


def test_parse_numeric_value_leading_prefix():
    """Test only the leading number is used"""
    assert parse_numeric_value("12.5 (H)") == 12.5
    assert math.isnan(parse_numeric_value("<100"))


def test_comma_with_three_decimals_is_thousands():
    """Test "1,234" is never read as 1.234"""
    assert parse_numeric_value("1,234") == 1234.0
    assert parse_numeric_value("1,23") == 1.23


def test_parse_numeric_value_idempotent():
    """Test parsing the string form of a parsed value gives the same value"""
    for raw in ["17,9", "1,234", "1,234.5", "120 mg/dL", "↑95", "0.001", "-2,5"]:
        once = parse_numeric_value(raw)
        if math.isfinite(once):
            assert parse_numeric_value(str(once)) == once


def test_parse_optional_numeric_keeps_none():
    """Test None stays None for reference bounds"""
    assert parse_optional_numeric(None) is None
    assert parse_optional_numeric("70") == 70.0
    assert math.isnan(parse_optional_numeric("n/a"))


def test_is_finite_number():
    assert is_finite_number(1.0)
    assert is_finite_number(0)
    assert not is_finite_number(float("nan"))
    assert not is_finite_number(float("inf"))
    assert not is_finite_number("1")
    assert not is_finite_number(True)
