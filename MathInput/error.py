# error.py
"""Error taxonomy for the expression engine and the numeric field.

Every stage of the pipeline raises one of the MathError subclasses below.
MathEngine.evaluate() catches them at the module boundary and turns them
into an EvaluationResult, so callers never see these exceptions.
"""


class MathError(Exception):
    kind = "MathError"

    def __init__(self, message, code="9999", equation=None, position=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation
        self.position = position


class EmptyExpression(MathError):
    kind = "EmptyExpression"


class TooLong(MathError):
    kind = "TooLong"


class InvalidCharacter(MathError):
    kind = "InvalidCharacter"


class UnbalancedParens(MathError):
    kind = "UnbalancedParens"


class UnknownIdentifier(MathError):
    kind = "UnknownIdentifier"


class ArityMismatch(MathError):
    kind = "ArityMismatch"


class SyntaxError(MathError):
    kind = "SyntaxError"


class NotFiniteResult(MathError):
    kind = "NotFiniteResult"


Error_Dictionary = {

    "3": "Calculator Error",
    "4": "UI Error",
    "5": "Configuration Error",
    "9": "Runtime Error"

}

# Error codes are structured in:
# 1. Digit: Main Error (see Error_Dictionary)
# 2. Digit: Category
# 3. and 4. Digit: Error Number

ERROR_MESSAGES = {
    "3000": "Expression cannot be empty",
    "3001": "Expression is too long",  # + limit
    "3002": "Invalid character: ",  # + character
    "3003": "Unbalanced parentheses",
    "3004": "Unknown identifier: ",  # + name
    "3005": "Wrong number of arguments: ",  # + function
    "3006": "Syntax error: ",  # + details
    "3007": "Expression does not evaluate to a finite number",

    "4000": "Invalid number",
    "4001": "Invalid expression",

    "5000": "Settings could not be loaded: ",  # + path
    "5001": "Settings could not be saved: ",  # + path
    "5002": "Invalid setting value: ",  # + key

    "9999": "Unexpected Error: "  # + error
}


def describe(code):
    """Return the area and the message text registered for an error code."""
    area = Error_Dictionary.get(str(code)[:1], "Unknown Error")
    return area, ERROR_MESSAGES.get(str(code), "Unknown error")
