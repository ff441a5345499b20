"""
Static type inference for the Lox expression language.

Infers the value variant an expression produces without evaluating it,
and rejects operator/operand combinations the evaluator would reject.
Since every leaf is a literal, inference is exact except for runtime-only
failures such as division by zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loxexpr.core.errors import (
    NESTING_TOO_DEEP,
    Diagnostics,
    ExpressionTypeError,
    make_type_diagnostic,
)
from loxexpr.core.expression_lang.evaluator import (
    OPERAND_BOOLEAN,
    OPERAND_NUMBER,
    OPERANDS_NUMBERS,
    OPERANDS_NUMBERS_OR_STRINGS,
)
from loxexpr.core.ir.expressions import Binary, Expr, ExprVisitor, Grouping, Literal, Unary
from loxexpr.core.ir.tokens import Token, TokenKind
from loxexpr.core.ir.values import ValueType, type_of

_ARITHMETIC = frozenset({TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH, TokenKind.CARET})
_ORDERING = frozenset(
    {TokenKind.LESS, TokenKind.LESS_EQUAL, TokenKind.GREATER, TokenKind.GREATER_EQUAL}
)
_EQUALITY = frozenset({TokenKind.EQUAL_EQUAL, TokenKind.BANG_EQUAL})


@dataclass
class TypeResult:
    """Inferred type (None on failure) plus any type diagnostics."""

    value_type: ValueType | None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


class TypeChecker(ExprVisitor[ValueType]):
    """Infers the variant of an expression's result."""

    def __init__(self) -> None:
        self.operator: Token | None = None

    def infer(self, expr: Expr) -> ValueType:
        return expr.accept(self)

    def visit_literal(self, expr: Literal) -> ValueType:
        return type_of(expr.value)

    def visit_grouping(self, expr: Grouping) -> ValueType:
        return self.infer(expr.expression)

    def visit_unary(self, expr: Unary) -> ValueType:
        self.operator = expr.operator
        right = self.infer(expr.right)
        if expr.operator.kind == TokenKind.MINUS:
            if right != ValueType.NUMBER:
                raise ExpressionTypeError(expr.operator, OPERAND_NUMBER)
            return ValueType.NUMBER
        if right != ValueType.BOOLEAN:
            raise ExpressionTypeError(expr.operator, OPERAND_BOOLEAN)
        return ValueType.BOOLEAN

    def visit_binary(self, expr: Binary) -> ValueType:
        self.operator = expr.operator
        left = self.infer(expr.left)
        right = self.infer(expr.right)
        kind = expr.operator.kind

        if kind in _EQUALITY:
            return ValueType.BOOLEAN

        if kind == TokenKind.PLUS:
            if left == right and left in (ValueType.NUMBER, ValueType.STRING):
                return left
            raise ExpressionTypeError(expr.operator, OPERANDS_NUMBERS_OR_STRINGS)

        if left != ValueType.NUMBER or right != ValueType.NUMBER:
            raise ExpressionTypeError(expr.operator, OPERANDS_NUMBERS)

        if kind in _ARITHMETIC:
            return ValueType.NUMBER
        if kind in _ORDERING:
            return ValueType.BOOLEAN

        raise ExpressionTypeError(expr.operator, f"Unknown binary operator: {expr.operator.lexeme}")


def infer_type(expr: Expr) -> ValueType:
    """Infer the result type of an expression.

    Raises:
        ExpressionTypeError: If an operator is applied to operand types it rejects.
    """
    checker = TypeChecker()
    try:
        return checker.infer(expr)
    except RecursionError:
        token = checker.operator or Token(TokenKind.EOF, "", None, 1)
        raise ExpressionTypeError(token, NESTING_TOO_DEEP) from None


def check(expr: Expr) -> TypeResult:
    """Infer the result type, reporting a failure as a TYPE diagnostic."""
    try:
        value_type = infer_type(expr)
    except ExpressionTypeError as e:
        diagnostics = Diagnostics()
        diagnostics.add(make_type_diagnostic(e))
        return TypeResult(value_type=None, diagnostics=diagnostics)
    return TypeResult(value_type=value_type)
