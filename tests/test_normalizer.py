"""Tests for MathEngine.normalize: whitespace, glyphs, commas and input limits."""

import pytest

from MathInput import MathEngine
from MathInput import error as E


# --- Whitespace and glyphs ---

def test_strips_all_whitespace():
    assert MathEngine.normalize("  3 +\t4 *\n2  ") == "3+4*2"


@pytest.mark.parametrize("raw, expected", [
    ("3 × 4", "3*4"),
    ("12 ÷ 3", "12/3"),
    ("2 ^ 4", "2**4"),
    ("2 · 3", "2*3"),
    ("5 − 2", "5-2"),
    ("2π", "2pi"),
])
def test_maps_alternate_glyphs(raw, expected):
    assert MathEngine.normalize(raw) == expected


# --- Comma handling ---

def test_comma_outside_call_is_decimal_separator():
    assert MathEngine.normalize("3,14 + 2,86") == "3.14+2.86"


def test_comma_inside_call_separates_arguments():
    assert MathEngine.normalize("min(3, 7)") == "min(3,7)"


def test_comma_in_plain_group_is_decimal_separator():
    assert MathEngine.normalize("(3,5) * 2") == "(3.5)*2"


def test_group_nested_in_call_uses_its_own_context():
    assert MathEngine.normalize("clamp(1, (2,5), 3)") == "clamp(1,(2.5),3)"


def test_call_after_implicit_multiplication_keeps_separator():
    assert MathEngine.normalize("2max(1,4)") == "2max(1,4)"


def test_comma_after_closed_call_is_decimal_again():
    assert MathEngine.normalize("min(1,2) + 2,5") == "min(1,2)+2.5"


def test_constant_before_paren_is_not_a_call():
    assert MathEngine.normalize("pi(2,5)") == "pi(2.5)"


# --- Limits ---

@pytest.mark.parametrize("raw", ["", "   ", "\t\n", None])
def test_empty_input_raises(raw):
    with pytest.raises(E.EmptyExpression) as excinfo:
        MathEngine.normalize(raw)
    assert excinfo.value.code == "3000"


def test_input_at_limit_is_accepted():
    raw = "1" * MathEngine.MAX_EXPRESSION_LENGTH
    assert MathEngine.normalize(raw) == raw


def test_input_over_limit_raises_too_long():
    with pytest.raises(E.TooLong) as excinfo:
        MathEngine.normalize("1" * (MathEngine.MAX_EXPRESSION_LENGTH + 1))
    assert excinfo.value.code == "3001"


# --- Idempotence ---

@pytest.mark.parametrize("raw", [
    "3 + 4",
    "2 ^ 3 ^ 2",
    "3,14 × 2",
    "min(3, 7) + max(1,5, 2)",
    "clamp(1, (2,5), 3)",
    "2π ÷ 4",
])
def test_normalizing_twice_changes_nothing(raw):
    once = MathEngine.normalize(raw)
    assert MathEngine.normalize(once) == once
