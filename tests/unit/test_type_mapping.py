"""Unit tests for value coercion helpers."""

import math

import pytest

from dashpipe.core.type_mapping import (
    MISSING,
    compare,
    normalize_number,
    strict_equals,
    to_number,
    to_text,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        (5, 5.0),
        ("12.5", 12.5),
        (" 7 ", 7.0),
        ("1e3", 1000.0),
        (True, 1.0),
        (False, 0.0),
        (None, 0.0),
        ("", 0.0),
        ("0x1A", 26.0),
        ("0o17", 15.0),
        ("0b101", 5.0),
        ("Infinity", math.inf),
        ("-Infinity", -math.inf),
    ],
)
def test_to_number(value, expected):
    assert to_number(value) == expected


@pytest.mark.parametrize(
    "value", ["abc", "12px", "-0x1A", "0b102", "infinity", MISSING, [1], {"a": 1}]
)
def test_to_number_is_nan_for_non_numeric(value):
    assert math.isnan(to_number(value))


def test_normalize_number():
    assert normalize_number(6.0) == 6
    assert isinstance(normalize_number(6.0), int)
    assert normalize_number(1.5) == 1.5
    assert isinstance(normalize_number(2.0**60), float)


def test_to_text():
    assert to_text("North") == "North"
    assert to_text(3.0) == "3"
    assert to_text(2.5) == "2.5"
    assert to_text(True) == "true"
    assert to_text(None) == "null"
    assert to_text(MISSING) == "undefined"


def test_strict_equals_never_crosses_kinds():
    assert strict_equals("a", "a")
    assert strict_equals(1, 1.0)
    assert not strict_equals("1", 1)
    assert not strict_equals(True, 1)
    assert not strict_equals(None, MISSING)
    assert strict_equals(None, None)


def test_compare():
    assert compare(1, 2) == -1
    assert compare("b", "a") == 1
    assert compare("10", "9") == -1  # both strings: lexicographic
    assert compare("10", 9) == 1  # mixed: numeric
    assert compare("abc", 5) == 0  # NaN ties
    assert compare(None, 1) == -1
