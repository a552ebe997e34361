# ScientificEngine.py
"""Symbol table for the expression engine.

Holds the closed allowlist of names an expression may reference: a fixed set
of constants and the native implementations of every function, grouped by
arity. The tables are built once at import time and never modified, so any
number of evaluations can share them.

All functions operate on numpy float64 values and follow IEEE-754 semantics:
a domain error such as sqrt(-1) or log(0) yields NaN or +/-inf instead of
raising. MathEngine evaluates under numpy.errstate(all="ignore") so these
results stay silent until the finiteness check.
"""

from types import MappingProxyType

import numpy as np


def _f(value):
    return np.float64(value)


def _round(x):
    # halves go towards +inf: round(2.5) = 3, round(-2.5) = -2
    # x - floor(x) is exact, x + 0.5 is not (0.49999999999999994 + 0.5 == 1.0)
    lower = np.floor(x)
    if x - lower >= 0.5:
        return lower + 1
    return lower


def _fract(x):
    return x - np.floor(x)


def _mod(a, b):
    """Remainder with the sign of the divisor (-1 mod 3 = 2)."""
    return np.fmod(np.fmod(a, b) + b, b)


def _clamp(value, lo, hi):
    return np.minimum(np.maximum(value, lo), hi)


def _lerp(a, b, t):
    return a + (b - a) * t


def _smoothstep(edge0, edge1, x):
    t = _clamp((x - edge0) / (edge1 - edge0), _f(0), _f(1))
    return t * t * (3 - 2 * t)


CONSTANTS = MappingProxyType({
    "pi": _f(np.pi),
    "e": _f(np.e),
    "tau": _f(2 * np.pi),
    "phi": _f((1 + np.sqrt(5)) / 2),
    "inf": _f(np.inf),
})

FUNCTIONS_1 = MappingProxyType({
    # Trigonometric (radians)
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
    "asin": np.arcsin,
    "acos": np.arccos,
    "atan": np.arctan,
    "sinh": np.sinh,
    "cosh": np.cosh,
    "tanh": np.tanh,
    "asinh": np.arcsinh,
    "acosh": np.arccosh,
    "atanh": np.arctanh,

    # Logarithmic & exponential
    "log": np.log,
    "ln": np.log,
    "log10": np.log10,
    "log2": np.log2,
    "exp": np.exp,
    "exp2": np.exp2,

    # Roots
    "sqrt": np.sqrt,
    "cbrt": np.cbrt,

    # Rounding
    "floor": np.floor,
    "ceil": np.ceil,
    "round": _round,
    "trunc": np.trunc,

    "abs": np.abs,
    "sign": np.sign,
    "fract": _fract,

    # Unit conversion
    "deg": np.degrees,
    "rad": np.radians,
})

FUNCTIONS_2 = MappingProxyType({
    "min": np.minimum,
    "max": np.maximum,
    "pow": np.power,
    "atan2": np.arctan2,
    "mod": _mod,
    "hypot": np.hypot,
})

FUNCTIONS_3 = MappingProxyType({
    "clamp": _clamp,
    "lerp": _lerp,
    "smoothstep": _smoothstep,
    "mix": _lerp,
})

_BY_ARITY = {1: FUNCTIONS_1, 2: FUNCTIONS_2, 3: FUNCTIONS_3}

FUNCTION_ARITY = MappingProxyType({
    name: arity
    for arity, table in _BY_ARITY.items()
    for name in table
})

AVAILABLE_CONSTANTS = tuple(CONSTANTS)
AVAILABLE_FUNCTIONS = tuple(FUNCTION_ARITY)


def isConstant(name):
    return name in CONSTANTS


def isFunction(name):
    return name in FUNCTION_ARITY


def isKnown(name):
    """True if name is on the allowlist (constant or function)."""
    return name in CONSTANTS or name in FUNCTION_ARITY


def constant_value(name):
    """Return the float64 value of a constant. Raises KeyError for unknown names."""
    return CONSTANTS[name]


def arity(name):
    """Return the argument count of a function. Raises KeyError for unknown names."""
    return FUNCTION_ARITY[name]


def function_impl(name):
    """Return the native implementation registered for a function name."""
    return _BY_ARITY[FUNCTION_ARITY[name]][name]


def modulo(a, b):
    """Floored remainder used by both mod() and the '%' operator."""
    return _mod(a, b)
