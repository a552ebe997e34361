# MathEngine.py
"""
Expression engine for numeric input fields.

Pipeline
--------
1) Normalizer: trims whitespace, maps alternate glyphs, resolves ',' as either
   an argument separator or a decimal separator, enforces the length cap.
2) Tokenizer: converts the normalized string into a flat list of tokens and
   rejects any character that is not on the allowed set.
3) Parser (AST): recursive descent, precedence aware. Every identifier is
   resolved against the ScientificEngine allowlist here, never later.
4) Evaluator: walks the AST with float64 arithmetic.
5) Result: wraps the value or the error into an EvaluationResult.

Nothing in this module executes generated code: the only things an
expression can reach are the operators below and the tables in
ScientificEngine.
"""

import logging
import math
import re
from collections import deque
from dataclasses import dataclass
from typing import NamedTuple, Optional

import numpy as np

from . import ScientificEngine
from . import error as E

logger = logging.getLogger(__name__)

MAX_EXPRESSION_LENGTH = 200

# Token kinds
NUMBER = "Number"
IDENTIFIER = "Identifier"
OPERATOR = "Operator"
LPAREN = "LParen"
RPAREN = "RParen"
COMMA = "Comma"
END = "End"

# Alternate notations accepted from users, rewritten before tokenizing
GLYPHS = {
    "×": "*",
    "·": "*",
    "÷": "/",
    "−": "-",  # unicode minus
    "^": "**",
    "π": "pi",
}

DIGITS = frozenset("0123456789")
IDENTIFIER_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
IDENTIFIER_CHARS = IDENTIFIER_START | DIGITS
ALLOWED_CHARACTERS = IDENTIFIER_CHARS | frozenset(".+-*/%(),")

_TRAILING_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*$")
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_PLAIN_NUMBER = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]+)?|\.[0-9]+)")
_EXPRESSION_CHARACTERS = frozenset("+-*/%^()") | frozenset(GLYPHS)


# -----------------------------
# Normalizer
# -----------------------------

def normalize(expression):
    """Return the canonical form of a raw user string.

    Raises EmptyExpression for empty/blank input and TooLong when the raw
    input exceeds MAX_EXPRESSION_LENGTH characters.
    """
    if not expression or not expression.strip():
        raise E.EmptyExpression(E.ERROR_MESSAGES["3000"], code="3000")

    if len(expression) > MAX_EXPRESSION_LENGTH:
        raise E.TooLong(
            f"Expression is too long (max {MAX_EXPRESSION_LENGTH} characters)",
            code="3001",
        )

    compact = "".join(GLYPHS.get(ch, ch) for ch in expression if not ch.isspace())
    return resolve_commas(compact)


def resolve_commas(text):
    """Rewrite decimal commas to '.', keep commas that separate call arguments.

    Each '(' is pushed onto a stack together with whether it opened a call,
    i.e. whether it directly follows the name of a known function. A ','
    belongs to the call only when the innermost open paren is a call paren.
    """
    calls = []
    result = ""
    for ch in text:
        if ch == "(":
            name = _TRAILING_NAME.search(result)
            calls.append(bool(name) and ScientificEngine.isFunction(name.group()))
        elif ch == ")":
            if calls:
                calls.pop()
        elif ch == "," and not (calls and calls[-1]):
            ch = "."
        result += ch
    return result


# -----------------------------
# Tokenizer
# -----------------------------

class Token(NamedTuple):
    kind: str
    text: str
    position: int


def tokenize(expression):
    """Convert a normalized string into a token list ending with an END token."""
    for position, ch in enumerate(expression):
        if ch not in ALLOWED_CHARACTERS:
            raise E.InvalidCharacter(
                f"Invalid character '{ch}' at position {position}",
                code="3002",
                position=position,
            )

    tokens = []
    length = len(expression)
    b = 0

    while b < length:
        current_char = expression[b]
        start = b

        # --- Numbers: 123, 3.14, .5, 5. ---
        if current_char in DIGITS or current_char == ".":
            while b < length and expression[b] in DIGITS:
                b += 1
            if b < length and expression[b] == ".":
                if b + 1 < length and expression[b + 1] in DIGITS:
                    b += 1
                    while b < length and expression[b] in DIGITS:
                        b += 1
                elif b > start and not (b + 1 < length and expression[b + 1] in IDENTIFIER_START):
                    b += 1  # trailing dot: "5."

            # a lone '.', or a second '.' right after a number ("1.2.3")
            if b == start or (b < length and expression[b] == "."):
                raise E.SyntaxError(
                    f"Malformed number at position {start}", code="3006", position=start
                )
            tokens.append(Token(NUMBER, expression[start:b], start))
            continue

        # --- Identifiers ---
        if current_char in IDENTIFIER_START:
            while b < length and expression[b] in IDENTIFIER_CHARS:
                b += 1
            tokens.append(Token(IDENTIFIER, expression[start:b], start))
            continue

        # --- Operators ('**' before '*') ---
        if current_char == "*" and b + 1 < length and expression[b + 1] == "*":
            tokens.append(Token(OPERATOR, "**", start))
            b += 2
            continue
        if current_char in "+-*/%":
            tokens.append(Token(OPERATOR, current_char, start))
        elif current_char == "(":
            tokens.append(Token(LPAREN, current_char, start))
        elif current_char == ")":
            tokens.append(Token(RPAREN, current_char, start))
        elif current_char == ",":
            tokens.append(Token(COMMA, current_char, start))
        b += 1

    tokens.append(Token(END, "", length))
    check_parentheses(tokens)
    return tokens


def check_parentheses(tokens):
    """Fail with UnbalancedParens unless every '(' has a matching ')'."""
    depth = 0
    for token in tokens:
        if token.kind == LPAREN:
            depth += 1
        elif token.kind == RPAREN:
            depth -= 1
            if depth < 0:
                raise E.UnbalancedParens(
                    f"Missing '(' for ')' at position {token.position}",
                    code="3003",
                    position=token.position,
                )
    if depth != 0:
        raise E.UnbalancedParens(f"Missing ')' ({depth} unclosed)", code="3003")


# -----------------------------
# AST node types
# -----------------------------

class NumberLiteral:
    """AST node for a numeric literal."""
    def __init__(self, value):
        self.value = np.float64(value)

    def evaluate(self):
        return self.value

    def __repr__(self):
        return f"NumberLiteral({float(self.value)!r})"


class ConstantRef:
    """AST node for a named constant; the value is resolved when parsing."""
    def __init__(self, name, value):
        self.name = name
        self.value = value

    def evaluate(self):
        return self.value

    def __repr__(self):
        return f"ConstantRef({self.name!r})"


class UnaryOp:
    """AST node for a leading '+' or '-'."""
    def __init__(self, operator, operand):
        self.operator = operator
        self.operand = operand

    def evaluate(self):
        value = self.operand.evaluate()
        if self.operator == "-":
            return -value
        return value

    def __repr__(self):
        return f"UnaryOp({self.operator!r}, {self.operand})"


class BinaryOp:
    """AST node for a binary operation: left <operator> right."""
    def __init__(self, operator, left, right):
        self.operator = operator
        self.left = left
        self.right = right

    def evaluate(self):
        """Apply the operator. Division by zero and overflow give inf/nan."""
        left_value = self.left.evaluate()
        right_value = self.right.evaluate()

        if self.operator == "+":
            return left_value + right_value
        elif self.operator == "-":
            return left_value - right_value
        elif self.operator == "*":
            return left_value * right_value
        elif self.operator == "/":
            return np.divide(left_value, right_value)
        elif self.operator == "%":
            return ScientificEngine.modulo(left_value, right_value)
        elif self.operator == "**":
            return np.power(left_value, right_value)
        else:
            raise E.SyntaxError(f"Unknown operator: {self.operator}", code="3006")

    def __repr__(self):
        return f"BinaryOp({self.operator!r}, left={self.left}, right={self.right})"


class Call:
    """AST node for a function call; the implementation is resolved when parsing."""
    def __init__(self, name, function, args):
        self.name = name
        self.function = function
        self.args = tuple(args)

    def evaluate(self):
        return self.function(*(argument.evaluate() for argument in self.args))

    def __repr__(self):
        return f"Call({self.name!r}, {list(self.args)})"


# -----------------------------
# Parser (recursive descent)
# -----------------------------

def _describe(token):
    return f"'{token.text}'" if token.text else "end of input"


def _unexpected(token, detail=""):
    message = f"Unexpected {_describe(token)} at position {token.position}"
    if detail:
        message += f" ({detail})"
    return E.SyntaxError(message, code="3006", position=token.position)


def check_identifiers(tokens):
    """Reject the first identifier that is not on the allowlist."""
    for token in tokens:
        if token.kind == IDENTIFIER and not ScientificEngine.isKnown(token.text):
            raise E.UnknownIdentifier(
                f"Unknown identifier '{token.text}' at position {token.position}",
                code="3004",
                position=token.position,
            )


def parse(tokens):
    """Parse a token list into an AST.

    Implements precedence via nested functions:
    factor -> power -> unary -> term (incl. implicit '*') -> sum.
    """
    check_identifiers(tokens)
    stream = deque(tokens)
    end_token = tokens[-1]

    def peek(offset=0):
        if offset < len(stream):
            return stream[offset]
        return end_token

    def advance():
        token = stream[0]
        if token.kind != END:
            stream.popleft()
        return token

    def expect_closing(context):
        token = advance()
        if token.kind != RPAREN:
            raise _unexpected(token, f"expected ')' {context}")

    def parse_call(name_token):
        """name '(' argument (',' argument)* ')' with an exact arity check."""
        name = name_token.text
        advance()

        if peek().kind == RPAREN:
            raise E.SyntaxError(
                f"Missing arguments for '{name}()' at position {peek().position}",
                code="3006",
                position=peek().position,
            )

        arguments = [parse_sum()]
        while peek().kind == COMMA:
            advance()
            arguments.append(parse_sum())
        expect_closing(f"after {name}() arguments")

        expected = ScientificEngine.arity(name)
        if len(arguments) != expected:
            raise E.ArityMismatch(
                f"{name}() expects {expected} argument{'s' if expected > 1 else ''}, "
                f"got {len(arguments)}",
                code="3005",
                position=name_token.position,
            )
        return Call(name, ScientificEngine.function_impl(name), arguments)

    def parse_factor():
        """Numbers, constants, calls and sub-expressions in '()'."""
        token = advance()

        if token.kind == NUMBER:
            return NumberLiteral(float(token.text))

        if token.kind == IDENTIFIER:
            if ScientificEngine.isConstant(token.text):
                return ConstantRef(token.text, ScientificEngine.constant_value(token.text))
            if peek().kind != LPAREN:
                # a bare name must be a constant
                raise E.UnknownIdentifier(
                    f"Unknown identifier '{token.text}' at position {token.position}",
                    code="3004",
                    position=token.position,
                )
            return parse_call(token)

        if token.kind == LPAREN:
            subtree = parse_sum()
            expect_closing("to close '('")
            return subtree

        raise _unexpected(token)

    def parse_power():
        """Exponentiation '**', right-associative; the exponent may carry a sign."""
        base = parse_factor()
        if peek().kind == OPERATOR and peek().text == "**":
            advance()
            return BinaryOp("**", base, parse_unary())
        return base

    def parse_unary():
        if peek().kind == OPERATOR and peek().text in ("+", "-"):
            operator = advance().text
            return UnaryOp(operator, parse_unary())
        return parse_power()

    def parse_term():
        """Multiplication, division, remainder and implicit multiplication."""
        current_tree = parse_unary()
        while True:
            token = peek()
            if token.kind == OPERATOR and token.text in ("*", "/", "%"):
                advance()
                current_tree = BinaryOp(token.text, current_tree, parse_unary())
            elif token.kind in (NUMBER, IDENTIFIER, LPAREN):
                # 2pi, 3(4+1), (2)(3)
                current_tree = BinaryOp("*", current_tree, parse_unary())
            else:
                return current_tree

    def parse_sum():
        current_tree = parse_term()
        while peek().kind == OPERATOR and peek().text in ("+", "-"):
            operator = advance().text
            current_tree = BinaryOp(operator, current_tree, parse_term())
        return current_tree

    final_tree = parse_sum()
    if peek().kind != END:
        raise _unexpected(peek())
    return final_tree


# -----------------------------
# Evaluator
# -----------------------------

def evaluate_tree(tree):
    """Walk the AST and return a Python float (may be inf or nan)."""
    with np.errstate(all="ignore"):
        return float(tree.evaluate())


# -----------------------------
# Result
# -----------------------------

@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of one evaluation. `expression` is always the caller's input."""

    success: bool
    expression: str
    value: Optional[float] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    error_code: Optional[str] = None
    position: Optional[int] = None

    @classmethod
    def ok(cls, value, expression):
        return cls(success=True, expression=expression, value=value)

    @classmethod
    def failure(cls, math_error, expression):
        return cls(
            success=False,
            expression=expression,
            error=math_error.message,
            error_kind=math_error.kind,
            error_code=math_error.code,
            position=math_error.position,
        )


# -----------------------------
# Public entry points
# -----------------------------

def compile_expression(expression):
    """Run normalizer, tokenizer and parser; return the validated AST."""
    normalized = normalize(expression)
    tokens = tokenize(normalized)
    logger.debug("Tokens for %r: %s", expression, [token.text for token in tokens])
    tree = parse(tokens)
    logger.debug("AST: %r", tree)
    return tree


def evaluate(expression):
    """Main API: normalize -> tokenize -> parse -> evaluate -> finiteness check.

    Never raises; every failure is returned as an unsuccessful EvaluationResult.
    """
    try:
        tree = compile_expression(expression)
        value = evaluate_tree(tree)

        if not math.isfinite(value):
            raise E.NotFiniteResult(E.ERROR_MESSAGES["3007"], code="3007")

        return EvaluationResult.ok(value, expression)

    # Our domain errors: attach the source expression
    except E.MathError as e:
        e.equation = expression
        return EvaluationResult.failure(e, expression)
    # Convert unexpected Python exceptions to our unified error type
    except Exception as e:
        logger.debug("Unexpected failure evaluating %r", expression, exc_info=True)
        critical_error = E.MathError(
            message=f"Unexpected error: {e}",
            code="9999",
            equation=expression,
        )
        return EvaluationResult.failure(critical_error, expression)


def looks_like_expression(text):
    """Cheap check whether text is more than a plain number.

    True when the text contains an operator, a parenthesis, or the name of a
    known constant or function; False for bare (optionally signed) numbers.
    """
    trimmed = (text or "").strip()
    if not trimmed or _PLAIN_NUMBER.fullmatch(trimmed):
        return False

    if any(ch in _EXPRESSION_CHARACTERS for ch in trimmed):
        return True

    return any(ScientificEngine.isKnown(name) for name in _IDENTIFIER.findall(trimmed))


def parse_numeric_input(text):
    """Parse a plain number directly, otherwise evaluate text as an expression."""
    trimmed = (text or "").strip()

    if len(text or "") <= MAX_EXPRESSION_LENGTH and _PLAIN_NUMBER.fullmatch(trimmed):
        return EvaluationResult.ok(float(trimmed), text)

    return evaluate(text)
