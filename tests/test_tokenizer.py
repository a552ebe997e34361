"""Tests for MathEngine.tokenize."""

import pytest

from MathInput import MathEngine
from MathInput import error as E
from MathInput.MathEngine import (
    COMMA, END, IDENTIFIER, LPAREN, NUMBER, OPERATOR, RPAREN,
)


def kinds(expression):
    return [token.kind for token in MathEngine.tokenize(expression)]


def texts(expression):
    return [token.text for token in MathEngine.tokenize(expression)]


# --- Token stream ---

def test_tokenizes_arithmetic():
    assert kinds("2**3-1") == [NUMBER, OPERATOR, NUMBER, OPERATOR, NUMBER, END]
    assert texts("2**3-1") == ["2", "**", "3", "-", "1", ""]


def test_tokenizes_call():
    assert kinds("min(1,2)") == [IDENTIFIER, LPAREN, NUMBER, COMMA, NUMBER, RPAREN, END]


def test_records_positions():
    positions = [token.position for token in MathEngine.tokenize("12+pi")]
    assert positions == [0, 2, 3, 5]


@pytest.mark.parametrize("expression", ["3.14", ".5", "5.", "0"])
def test_number_forms(expression):
    tokens = MathEngine.tokenize(expression)
    assert tokens[0].kind == NUMBER
    assert tokens[0].text == expression


def test_identifiers_may_contain_digits():
    assert texts("log10(2)")[0] == "log10"


def test_number_then_identifier_splits():
    assert texts("2pi") == ["2", "pi", ""]


def test_scientific_notation_is_not_a_number():
    tokens = MathEngine.tokenize("1e5")
    assert [(t.kind, t.text) for t in tokens[:2]] == [(NUMBER, "1"), (IDENTIFIER, "e5")]


def test_tokens_are_immutable():
    token = MathEngine.tokenize("1")[0]
    with pytest.raises(AttributeError):
        token.text = "2"


# --- Errors ---

@pytest.mark.parametrize("expression, position", [
    ("3+$", 2),
    ("a;b", 1),
    ("x=1", 1),
    ("'pi'", 0),
    ("1[0]", 1),
    ("2²", 1),
])
def test_rejects_disallowed_characters(expression, position):
    with pytest.raises(E.InvalidCharacter) as excinfo:
        MathEngine.tokenize(expression)
    assert excinfo.value.position == position
    assert excinfo.value.code == "3002"


def test_disallowed_character_wins_over_other_errors():
    with pytest.raises(E.InvalidCharacter):
        MathEngine.tokenize("((1.2.3$")


@pytest.mark.parametrize("expression", ["1.2.3", ".", "5..", "1+.", "2.pi"])
def test_rejects_malformed_numbers(expression):
    with pytest.raises(E.SyntaxError):
        MathEngine.tokenize(expression)


def test_missing_closing_paren():
    with pytest.raises(E.UnbalancedParens):
        MathEngine.tokenize("(3+4")


def test_missing_opening_paren_reports_position():
    with pytest.raises(E.UnbalancedParens) as excinfo:
        MathEngine.tokenize("3+4)")
    assert excinfo.value.position == 3


def test_close_before_open_is_unbalanced():
    with pytest.raises(E.UnbalancedParens):
        MathEngine.tokenize(")1(")
