# NumberInput.py
"""
State and behaviour of a numeric input field, independent of any GUI toolkit.

The controller owns the committed value and the text currently shown. Text is
only turned into a value on commit (Enter / focus loss), through
MathEngine.parse_numeric_input, so a field accepts "2pi" or "3,5 * 2" as well
as plain numbers. A failed commit never changes the value.

UI.NumberField wires Qt events to this class; tests drive it directly.
"""

import math

from . import MathEngine
from . import error as E

PIXELS_PER_STEP = 5

SHIFT = "shift"
CONTROL = "control"


def clamp(value, min_value=None, max_value=None):
    result = value
    if min_value is not None and result < min_value:
        result = min_value
    if max_value is not None and result > max_value:
        result = max_value
    return result


def round_to_precision(value, precision=None):
    if precision is None:
        return value
    return round(value, precision)


def default_format_value(value, precision=None):
    if precision is not None:
        return f"{value:.{precision}f}"
    return repr(float(value))


class NumberInput:
    def __init__(self, value=0.0, on_change=None, min_value=None, max_value=None,
                 soft_min=None, soft_max=None, step=1, precision_step=None,
                 large_step=None, precision=2, allow_expressions=True,
                 disabled=False, drag_sensitivity=1, format_value=None,
                 parse_value=None):
        self.value = float(value)
        self.on_change = on_change
        self.min_value = min_value
        self.max_value = max_value
        self.soft_min = soft_min
        self.soft_max = soft_max
        self.step = step
        self.precision_step = precision_step if precision_step is not None else step / 10
        self.large_step = large_step if large_step is not None else step * 10
        self.precision = precision
        self.allow_expressions = allow_expressions
        self.disabled = disabled
        self.drag_sensitivity = drag_sensitivity
        self.format_value = format_value
        self.parse_value = parse_value

        self.is_editing = False
        self.is_dragging = False
        self.error = None
        self.display_value = self.format(self.value)

        self._drag_start_x = 0
        self._drag_start_value = 0.0
        self._drag_steps = 0

    # --- Formatting ---
    def format(self, value):
        if self.format_value is not None:
            return self.format_value(value)
        return default_format_value(value, self.precision)

    @property
    def is_expression(self):
        """True while the text being edited looks like a math expression."""
        return self.allow_expressions and MathEngine.looks_like_expression(self.display_value)

    def get_step_size(self, modifier=None):
        if modifier == SHIFT:
            return self.precision_step
        if modifier == CONTROL:
            return self.large_step
        return self.step

    # --- Value handling ---
    def apply_value(self, new_value, use_soft_limits=False):
        """Round, clamp and store new_value; notify on_change if it changed."""
        if self.disabled:
            return False

        rounded = round_to_precision(new_value, self.precision)
        min_limit = self.soft_min if use_soft_limits and self.soft_min is not None else self.min_value
        max_limit = self.soft_max if use_soft_limits and self.soft_max is not None else self.max_value
        clamped = clamp(rounded, min_limit, max_limit)

        if clamped == self.value:
            return False

        self.value = clamped
        if not self.is_editing:
            self.display_value = self.format(clamped)
        if self.on_change is not None:
            self.on_change(clamped)
        return True

    def set_value(self, value):
        """Set the value from outside (e.g. the owning model); never notifies."""
        self.value = float(value)
        if not self.is_editing and not self.is_dragging:
            self.display_value = self.format(self.value)
            self.error = None

    def parse_and_apply_input(self):
        """Commit display_value. Returns True on success, otherwise sets self.error."""
        if self.parse_value is not None:
            parsed = self.parse_value(self.display_value)
            if parsed is not None and parsed == parsed:
                self.apply_value(parsed)
                self.error = None
                return True

        if self.allow_expressions:
            result = MathEngine.parse_numeric_input(self.display_value)
            if result.success:
                self.apply_value(result.value)
                self.error = None
                return True
            self.error = result.error or E.ERROR_MESSAGES["4001"]
            return False

        try:
            number = float(self.display_value.strip())
        except ValueError:
            number = float("nan")
        if number == number and abs(number) != float("inf"):
            self.apply_value(number)
            self.error = None
            return True

        self.error = E.ERROR_MESSAGES["4000"]
        return False

    def increment(self, modifier=None):
        if self.disabled:
            return
        self.apply_value(self.value + self.get_step_size(modifier))

    def decrement(self, modifier=None):
        if self.disabled:
            return
        self.apply_value(self.value - self.get_step_size(modifier))

    def negate(self):
        self.apply_value(-self.value)

    # --- Text editing ---
    def start_editing(self):
        if self.disabled:
            return
        self.is_editing = True
        self.error = None

    def update_display_value(self, text):
        self.display_value = text
        # Clear error when user starts typing
        if self.error:
            self.error = None

    def end_editing(self):
        """Apply the typed text. On failure stay in editing mode and keep the error."""
        if self.parse_and_apply_input():
            self.is_editing = False
            self.display_value = self.format(self.value)
            return True
        return False

    def cancel_editing(self):
        self.is_editing = False
        self.display_value = self.format(self.value)
        self.error = None

    def revert(self):
        """Leave editing and show the last valid value, keeping the error for display."""
        error = self.error
        self.cancel_editing()
        self.error = error

    # --- Dragging ---
    def start_drag(self, x):
        if self.disabled:
            return
        self.is_dragging = True
        self._drag_start_x = x
        self._drag_start_value = self.value
        self._drag_steps = 0

    def update_drag(self, x, modifier=None):
        if not self.is_dragging or self.disabled:
            return
        total_delta = (x - self._drag_start_x) * self.drag_sensitivity / PIXELS_PER_STEP
        steps = math.floor(total_delta)
        if steps == self._drag_steps:
            return
        self._drag_steps = steps
        new_value = self._drag_start_value + steps * self.get_step_size(modifier)
        # Soft limits apply while dragging
        self.apply_value(new_value, use_soft_limits=True)
        self.display_value = self.format(self.value)

    def end_drag(self):
        self.is_dragging = False
        self.display_value = self.format(self.value)

    # --- Keyboard ---
    def handle_key(self, key, modifier=None):
        """Handle a named key ("Enter", "Escape", "Up", "Down", "-").

        Returns True when the key was consumed.
        """
        if self.disabled:
            return False

        if key == "Enter":
            if self.is_editing:
                self.end_editing()
            else:
                self.start_editing()
            return True

        if key == "Escape":
            if self.is_editing:
                self.cancel_editing()
                return True
            return False

        if self.is_editing:
            # typing: arrows move the cursor, '-' is a character
            return False

        if key == "Up":
            self.increment(modifier)
            return True
        if key == "Down":
            self.decrement(modifier)
            return True
        if key == "-":
            self.negate()
            return True
        return False
