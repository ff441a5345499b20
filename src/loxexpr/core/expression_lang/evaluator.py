"""
Expression evaluator for the Lox expression language.

A tree-walking interpreter over the closed AST. Operators never coerce
between value variants: arithmetic and ordering take numbers only, ``+``
also joins two strings, ``!`` takes booleans only, and equality compares
values of the same variant (anything else is simply unequal).

Evaluation is left operand first. The first runtime error aborts the whole
expression; no partial value is produced.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from loxexpr.core.errors import (
    NESTING_TOO_DEEP,
    Diagnostics,
    LoxRuntimeError,
    make_runtime_diagnostic,
)
from loxexpr.core.ir.expressions import Binary, Expr, ExprVisitor, Grouping, Literal, Unary
from loxexpr.core.ir.tokens import Token, TokenKind
from loxexpr.core.ir.values import Value, is_number, values_equal

logger = logging.getLogger(__name__)

OPERAND_NUMBER = "Operand must be a number."
OPERAND_BOOLEAN = "Operand must be a boolean."
OPERANDS_NUMBERS = "Operands must be two numbers."
OPERANDS_NUMBERS_OR_STRINGS = "Operands must be two numbers or two strings."
DIVIDE_BY_ZERO = "Cannot divide by zero."
POWER_NOT_REAL = "Exponentiation result is not a real number."
POWER_OVERFLOW = "Exponentiation result is out of range."


@dataclass
class EvalResult:
    """The computed value (None on failure) plus any runtime diagnostics."""

    value: Value
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_errors


class Evaluator(ExprVisitor[Value]):
    """Evaluates expression trees to runtime values."""

    def __init__(self) -> None:
        # Most recently entered operator; anchors nesting errors
        self.operator: Token | None = None

    def evaluate(self, expr: Expr) -> Value:
        """Evaluate an expression.

        Raises:
            LoxRuntimeError: If an operator receives operands it does not accept.
        """
        return expr.accept(self)

    def visit_literal(self, expr: Literal) -> Value:
        return expr.value

    def visit_grouping(self, expr: Grouping) -> Value:
        return self.evaluate(expr.expression)

    def visit_unary(self, expr: Unary) -> Value:
        self.operator = expr.operator
        right = self.evaluate(expr.right)
        op = expr.operator

        if op.kind == TokenKind.MINUS:
            _check_number_operand(op, right)
            return -right  # type: ignore[operator]
        if op.kind == TokenKind.BANG:
            if not isinstance(right, bool):
                raise LoxRuntimeError(op, OPERAND_BOOLEAN)
            return not right

        raise LoxRuntimeError(op, f"Unknown unary operator: {op.lexeme}")

    def visit_binary(self, expr: Binary) -> Value:
        self.operator = expr.operator
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        op = expr.operator

        # Equality never fails
        if op.kind == TokenKind.EQUAL_EQUAL:
            return values_equal(left, right)
        if op.kind == TokenKind.BANG_EQUAL:
            return not values_equal(left, right)

        if op.kind == TokenKind.PLUS:
            if is_number(left) and is_number(right):
                return left + right  # type: ignore[operator]
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(op, OPERANDS_NUMBERS_OR_STRINGS)

        _check_number_operands(op, left, right)
        a: float = left  # type: ignore[assignment]
        b: float = right  # type: ignore[assignment]

        # Arithmetic
        if op.kind == TokenKind.MINUS:
            return a - b
        if op.kind == TokenKind.STAR:
            return a * b
        if op.kind == TokenKind.SLASH:
            if b == 0.0:
                raise LoxRuntimeError(op, DIVIDE_BY_ZERO)
            return a / b
        if op.kind == TokenKind.CARET:
            return _power(op, a, b)

        # Comparison
        if op.kind == TokenKind.GREATER:
            return a > b
        if op.kind == TokenKind.GREATER_EQUAL:
            return a >= b
        if op.kind == TokenKind.LESS:
            return a < b
        if op.kind == TokenKind.LESS_EQUAL:
            return a <= b

        raise LoxRuntimeError(op, f"Unknown binary operator: {op.lexeme}")


def _check_number_operand(op: Token, operand: Value) -> None:
    if not is_number(operand):
        raise LoxRuntimeError(op, OPERAND_NUMBER)


def _check_number_operands(op: Token, left: Value, right: Value) -> None:
    if not (is_number(left) and is_number(right)):
        raise LoxRuntimeError(op, OPERANDS_NUMBERS)


def _power(op: Token, base: float, exponent: float) -> float:
    # math.pow raises instead of returning complex or silently overflowing
    try:
        return math.pow(base, exponent)
    except ValueError as e:
        raise LoxRuntimeError(op, POWER_NOT_REAL) from e
    except OverflowError as e:
        raise LoxRuntimeError(op, POWER_OVERFLOW) from e


def evaluate(expr: Expr) -> Value:
    """Evaluate an expression tree, raising LoxRuntimeError on failure.

    A tree nested deeper than the interpreter stack allows fails with a
    runtime error at the innermost operator reached.
    """
    evaluator = Evaluator()
    try:
        return evaluator.evaluate(expr)
    except RecursionError:
        token = evaluator.operator or Token(TokenKind.EOF, "", None, 1)
        raise LoxRuntimeError(token, NESTING_TOO_DEEP) from None


def interpret(expr: Expr) -> EvalResult:
    """Evaluate an expression tree, reporting failure as a runtime diagnostic.

    Args:
        expr: Parsed expression tree.

    Returns:
        EvalResult with the value, or with value None and one RUNTIME diagnostic.
    """
    try:
        value = evaluate(expr)
    except LoxRuntimeError as e:
        logger.debug("Runtime error at line %d: %s", e.token.line, e.message)
        diagnostics = Diagnostics()
        diagnostics.add(make_runtime_diagnostic(e))
        return EvalResult(value=None, diagnostics=diagnostics)
    return EvalResult(value=value)
