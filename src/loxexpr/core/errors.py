"""
Error types and diagnostics for the Lox expression pipeline.

Each phase (scan, parse, evaluate) returns a ``Diagnostics`` collector
alongside its result. The exceptions defined here are internal abort
signals; the public phase functions convert them into ``Diagnostic``
records before returning.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum

from loxexpr.core.ir.tokens import Token, TokenKind

NESTING_TOO_DEEP = "Expression nests too deeply."


class DiagnosticKind(StrEnum):
    """Which phase produced a diagnostic."""

    LEXICAL = "lexical"
    SYNTAX = "syntax"
    RUNTIME = "runtime"
    TYPE = "type"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single report tied to a source line.

    Attributes:
        kind: Phase that produced the report
        line: Line number (1-indexed)
        message: Error description
        where: Optional location suffix, e.g. " at '+'" or " at end"
    """

    kind: DiagnosticKind
    line: int
    message: str
    where: str = ""

    def format(self) -> str:
        """
        Format the diagnostic as a single human-readable line.

        Returns:
            Formatted string like: "[line 3] Error at ')': Expect expression."
        """
        return f"[line {self.line}] Error{self.where}: {self.message}"

    def render(self, source: str | None = None) -> str:
        """Format the diagnostic, followed by the offending source line if known."""
        text = self.format()
        snippet = self._format_snippet(source)
        if snippet:
            return f"{text}\n{snippet}"
        return text

    def _format_snippet(self, source: str | None) -> str:
        if not source:
            return ""
        lines = source.split("\n")
        if not 1 <= self.line <= len(lines):
            return ""
        text = lines[self.line - 1].rstrip("\r")
        if not text.strip():
            return ""
        return f"{self.line:4d} | {text}"

    def __str__(self) -> str:
        return self.format()


@dataclass
class Diagnostics:
    """Ordered collection of diagnostics produced by one phase or one run."""

    items: list[Diagnostic] = field(default_factory=list)

    def add(self, diagnostic: Diagnostic) -> None:
        self.items.append(diagnostic)

    def extend(self, other: Diagnostics) -> None:
        self.items.extend(other.items)

    @property
    def has_errors(self) -> bool:
        return bool(self.items)

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.items if d.kind == kind]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __bool__(self) -> bool:
        return self.has_errors


class LoxError(Exception):
    """Base exception for all loxexpr errors."""

    def __init__(self, message: str, line: int | None = None):
        self.message = message
        self.line = line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.line is not None:
            return f"[line {self.line}] {self.message}"
        return self.message


class ParseError(LoxError):
    """
    Raised inside the parser to abort the current derivation.

    Examples:
    - No expression where one is required
    - Missing closing parenthesis
    - Tokens left over after a complete expression
    """

    def __init__(self, token: Token, message: str):
        self.token = token
        super().__init__(message, token.line)


class LoxRuntimeError(LoxError):
    """
    Raised when an operator is applied to values it does not accept.

    Examples:
    - Negating a string
    - Adding a number to a string
    - Dividing by zero
    """

    def __init__(self, token: Token, message: str):
        self.token = token
        super().__init__(message, token.line)


class ExpressionTypeError(LoxError):
    """Raised by static type inference for operand types an operator rejects."""

    def __init__(self, token: Token, message: str):
        self.token = token
        super().__init__(message, token.line)


class ConfigError(LoxError):
    """Raised when a loxexpr.toml file holds values that cannot be used."""

    pass


def token_location(token: Token) -> str:
    """Location suffix used in syntax and type diagnostics."""
    if token.kind == TokenKind.EOF:
        return " at end"
    return f" at '{token.lexeme}'"


def make_syntax_diagnostic(error: ParseError) -> Diagnostic:
    """
    Helper to turn a parser abort signal into a diagnostic.

    Args:
        error: The ParseError raised by the parser

    Returns:
        SYNTAX diagnostic anchored at the offending token
    """
    return Diagnostic(
        kind=DiagnosticKind.SYNTAX,
        line=error.token.line,
        message=error.message,
        where=token_location(error.token),
    )


def make_runtime_diagnostic(error: LoxRuntimeError) -> Diagnostic:
    """Helper to turn an evaluator failure into a diagnostic at the operator's line."""
    return Diagnostic(
        kind=DiagnosticKind.RUNTIME,
        line=error.token.line,
        message=error.message,
        where=token_location(error.token),
    )


def make_type_diagnostic(error: ExpressionTypeError) -> Diagnostic:
    """Helper to turn a static type failure into a diagnostic."""
    return Diagnostic(
        kind=DiagnosticKind.TYPE,
        line=error.token.line,
        message=error.message,
        where=token_location(error.token),
    )
