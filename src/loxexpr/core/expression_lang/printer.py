"""
Parenthesized prefix rendering of expression trees.

``1 + 2 * 3`` prints as ``(+ 1 (* 2 3))``; groups print as ``(group ...)``.
"""

from __future__ import annotations

from loxexpr.core.ir.expressions import Binary, Expr, ExprVisitor, Grouping, Literal, Unary
from loxexpr.core.ir.values import stringify


class AstPrinter(ExprVisitor[str]):
    """Renders an expression tree as a Lisp-like string."""

    def print(self, expr: Expr) -> str:
        return expr.accept(self)

    def visit_binary(self, expr: Binary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_grouping(self, expr: Grouping) -> str:
        return self._parenthesize("group", expr.expression)

    def visit_unary(self, expr: Unary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.right)

    def visit_literal(self, expr: Literal) -> str:
        return stringify(expr.value)

    def _parenthesize(self, name: str, *exprs: Expr) -> str:
        parts = [name, *(e.accept(self) for e in exprs)]
        return "(" + " ".join(parts) + ")"


def print_ast(expr: Expr) -> str:
    """Render an expression tree in parenthesized prefix form."""
    return AstPrinter().print(expr)
