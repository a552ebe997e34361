"""Tests for the toolkit-independent NumberInput controller."""

import pytest

from MathInput.NumberInput import CONTROL, SHIFT, NumberInput


@pytest.fixture
def changes():
    return []


@pytest.fixture
def field(changes):
    return NumberInput(1.0, on_change=changes.append)


def type_and_commit(number_input, text):
    number_input.start_editing()
    number_input.update_display_value(text)
    return number_input.end_editing()


# --- Display ---

def test_initial_display_uses_precision():
    assert NumberInput(3).display_value == "3.00"
    assert NumberInput(3, precision=0).display_value == "3"


def test_custom_formatter():
    number_input = NumberInput(0.5, format_value=lambda value: f"{value * 100:.0f}%")
    assert number_input.display_value == "50%"


# --- Committing text ---

def test_commit_expression(field, changes):
    assert type_and_commit(field, "2 * pi")
    assert field.value == 6.28
    assert field.display_value == "6.28"
    assert not field.is_editing
    assert changes == [6.28]


def test_commit_plain_number(field, changes):
    assert type_and_commit(field, "  4 ")
    assert field.value == 4
    assert changes == [4]


def test_commit_decimal_comma(field):
    assert type_and_commit(field, "2,5")
    assert field.value == 2.5


def test_failed_commit_keeps_value_and_stays_editing(field, changes):
    assert not type_and_commit(field, "foo + 1")
    assert field.value == 1.0
    assert field.is_editing
    assert "Unknown identifier 'foo'" in field.error
    assert changes == []


def test_typing_clears_error(field):
    type_and_commit(field, "5/0")
    assert field.error
    field.update_display_value("5/2")
    assert field.error is None


def test_cancel_restores_last_valid_value(field):
    field.start_editing()
    field.update_display_value("1+")
    field.cancel_editing()
    assert field.display_value == "1.00"
    assert not field.is_editing
    assert field.error is None


def test_revert_keeps_error_for_display(field):
    type_and_commit(field, "(1")
    field.revert()
    assert field.display_value == "1.00"
    assert not field.is_editing
    assert field.error == "Missing ')' (1 unclosed)"


def test_unchanged_value_does_not_notify(field, changes):
    assert type_and_commit(field, "2 - 1")
    assert changes == []


def test_hard_limits_clamp_committed_values(changes):
    number_input = NumberInput(0, on_change=changes.append, min_value=0, max_value=10)
    type_and_commit(number_input, "15")
    assert number_input.value == 10
    type_and_commit(number_input, "-3")
    assert number_input.value == 0
    assert changes == [10, 0]


def test_expressions_can_be_disabled():
    number_input = NumberInput(0, allow_expressions=False)
    assert not type_and_commit(number_input, "2+2")
    assert number_input.error == "Invalid number"
    assert type_and_commit(number_input, "4")
    assert number_input.value == 4


def test_custom_parser_runs_first():
    number_input = NumberInput(0, parse_value=lambda text: 42.0 if text == "answer" else None)
    assert type_and_commit(number_input, "answer")
    assert number_input.value == 42
    assert type_and_commit(number_input, "3 * 3")
    assert number_input.value == 9


def test_is_expression_follows_text(field):
    field.start_editing()
    field.update_display_value("12")
    assert not field.is_expression
    field.update_display_value("12 * 2")
    assert field.is_expression


# --- Steps ---

def test_increment_and_decrement(field):
    field.increment()
    assert field.value == 2
    field.decrement()
    field.decrement()
    assert field.value == 0


def test_modifier_step_sizes():
    number_input = NumberInput(0, step=1)
    number_input.increment(SHIFT)
    assert number_input.value == pytest.approx(0.1)
    number_input.increment(CONTROL)
    assert number_input.value == pytest.approx(10.1)


def test_negate(field):
    field.negate()
    assert field.value == -1


def test_disabled_field_ignores_everything():
    number_input = NumberInput(1, disabled=True)
    number_input.increment()
    number_input.start_editing()
    assert number_input.value == 1
    assert not number_input.is_editing
    assert not number_input.handle_key("Up")


# --- Keyboard ---

def test_enter_starts_then_commits_editing(field):
    assert field.handle_key("Enter")
    assert field.is_editing
    field.update_display_value("3^2")
    assert field.handle_key("Enter")
    assert field.value == 9
    assert not field.is_editing


def test_escape_cancels_editing(field):
    field.handle_key("Enter")
    field.update_display_value("7")
    assert field.handle_key("Escape")
    assert field.value == 1
    assert not field.handle_key("Escape")


def test_arrow_keys_step_only_outside_editing(field):
    assert field.handle_key("Up")
    assert field.value == 2
    assert field.handle_key("Down", SHIFT)
    assert field.value == pytest.approx(1.9)
    field.start_editing()
    assert not field.handle_key("Up")
    assert not field.handle_key("-")


def test_minus_key_negates(field):
    assert field.handle_key("-")
    assert field.value == -1


def test_unknown_key_is_not_consumed(field):
    assert not field.handle_key("Tab")


# --- Dragging ---

def test_drag_moves_one_step_per_five_pixels(changes):
    number_input = NumberInput(0, on_change=changes.append)
    number_input.start_drag(100)
    number_input.update_drag(112)
    assert number_input.value == 2
    assert number_input.display_value == "2.00"
    number_input.update_drag(113)
    assert changes == [2]
    number_input.end_drag()
    assert not number_input.is_dragging


def test_drag_respects_soft_limits():
    number_input = NumberInput(0, soft_max=3, max_value=100)
    number_input.start_drag(0)
    number_input.update_drag(50)
    assert number_input.value == 3
    number_input.end_drag()
    number_input.start_editing()
    number_input.update_display_value("50")
    number_input.end_editing()
    assert number_input.value == 50


def test_drag_without_start_is_ignored(field):
    field.update_drag(100)
    assert field.value == 1


def test_set_value_from_outside_does_not_notify(field, changes):
    field.set_value(8)
    assert field.display_value == "8.00"
    assert changes == []
