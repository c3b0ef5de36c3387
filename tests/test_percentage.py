"""
Test Percentage Value parsing and validation

Run with: pytest tests/test_percentage.py
"""

import pytest

from bayes_backend.core.percentage import (
    InvalidPercentageError,
    is_percentage,
    is_percentage_string,
    parse_percentage,
    read_percentage,
    to_text,
    validate_percentage,
)


@pytest.mark.parametrize("value", [0, 0.0, 1, 42.5, 99.999, 100])
def test_is_percentage_accepts_range(value):
    assert is_percentage(value)


@pytest.mark.parametrize("value", [-0.01, 100.01, float('nan'), float('inf'), None, "50", True])
def test_is_percentage_rejects(value):
    assert not is_percentage(value)


@pytest.mark.parametrize("text", ["", "5", "50", "05", ".5", "5.25", "99.123456", "0.0"])
def test_lexical_rule_accepts(text):
    assert is_percentage_string(text)


@pytest.mark.parametrize("text", ["100", "-5", "+5", "1e2", "5.", ".", "abc", " 5", "5 ", "12a"])
def test_lexical_rule_rejects(text):
    assert not is_percentage_string(text)


def test_parse_valid_text():
    assert parse_percentage("90") == 90.0
    assert parse_percentage(".5") == 0.5
    assert parse_percentage("0") == 0.0
    assert parse_percentage("12.75") == 12.75


def test_parse_returns_absent_without_raising():
    """Malformed or partial text yields None, never an exception"""
    for text in ["", "-", "1e2", "100", "abc", None]:
        assert parse_percentage(text) is None, f"{text!r} should be absent"


def test_read_path_ignores_lexical_rule():
    """A field written programmatically with 100 must read back"""
    assert read_percentage("100") == 100.0
    assert read_percentage("42.5") == 42.5
    assert read_percentage("") is None
    assert read_percentage("101") is None
    assert read_percentage("nan") is None
    assert read_percentage("abc") is None


def test_validate_never_clamps():
    assert validate_percentage(100) == 100.0
    assert validate_percentage(None) is None

    with pytest.raises(InvalidPercentageError):
        validate_percentage(100.5)

    with pytest.raises(ValueError):
        validate_percentage(-1)

    with pytest.raises(InvalidPercentageError):
        validate_percentage(float('nan'))


def test_to_text():
    assert to_text(90.0) == "90"
    assert to_text(42.5) == "42.5"
    assert to_text(100) == "100"
    assert to_text(None) == ""
