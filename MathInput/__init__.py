"""Safe math expressions for numeric input fields."""

from .MathEngine import (
    MAX_EXPRESSION_LENGTH,
    EvaluationResult,
    evaluate,
    looks_like_expression,
    normalize,
    parse_numeric_input,
)
from .ScientificEngine import AVAILABLE_CONSTANTS, AVAILABLE_FUNCTIONS

__all__ = [
    "MAX_EXPRESSION_LENGTH",
    "EvaluationResult",
    "evaluate",
    "looks_like_expression",
    "normalize",
    "parse_numeric_input",
    "AVAILABLE_CONSTANTS",
    "AVAILABLE_FUNCTIONS",
]
