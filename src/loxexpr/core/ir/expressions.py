"""
Expression AST for the Lox expression language.

The node set is closed: Binary, Grouping, Unary, Literal. Consumers walk
the tree through ``ExprVisitor``; each node's ``accept`` calls the single
visitor method matching its kind. Adding a node kind means adding a
method to ``ExprVisitor``, which every consumer then has to implement.

Nodes are frozen pydantic models. Each non-leaf node owns its children
and the tree has no shared or back references.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from loxexpr.core.ir.tokens import Token
from loxexpr.core.ir.values import Value

R = TypeVar("R")


# ---------------------------------------------------------------------------
# Visitor
# ---------------------------------------------------------------------------


class ExprVisitor(ABC, Generic[R]):
    """Traversal capability accepted by every expression node."""

    @abstractmethod
    def visit_binary(self, expr: Binary) -> R: ...

    @abstractmethod
    def visit_grouping(self, expr: Grouping) -> R: ...

    @abstractmethod
    def visit_unary(self, expr: Unary) -> R: ...

    @abstractmethod
    def visit_literal(self, expr: Literal) -> R: ...


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        from loxexpr.core.expression_lang.printer import print_ast

        return print_ast(self)  # type: ignore[arg-type]


class Binary(_Node):
    """Binary operation: left operator right."""

    left: Expr
    operator: Token
    right: Expr

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_binary(self)


class Grouping(_Node):
    """Parenthesized expression."""

    expression: Expr

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_grouping(self)


class Unary(_Node):
    """Prefix operation: operator right."""

    operator: Token
    right: Expr

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_unary(self)


class Literal(_Node):
    """A literal value: number, string, boolean, or nil."""

    value: Value = Field(description="The literal value")

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_literal(self)


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Binary | Grouping | Unary | Literal

# Rebuild models for recursive forward references
Binary.model_rebuild()
Grouping.model_rebuild()
Unary.model_rebuild()
