"""
Recursive descent parser for the Lox expression language.

Grammar (precedence low to high):
    expression  → equality
    equality    → comparison (("!=" | "==") comparison)*
    comparison  → term (("<" | "<=" | ">" | ">=") term)*
    term        → factor (("-" | "+") factor)*
    factor      → power (("/" | "*") power)*
    power       → unary ("^" unary)*
    unary       → ("!" | "-") unary | primary
    primary     → NUMBER | STRING | "true" | "false" | "nil" | "(" expression ")"

Every binary level folds to the left. ``power`` folds to the right instead
when ``power_associativity = "right"`` is configured.

Input nested deeper than the interpreter stack allows is reported as a syntax
error at the token where parsing stopped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from loxexpr.core.errors import (
    NESTING_TOO_DEEP,
    Diagnostics,
    ParseError,
    make_syntax_diagnostic,
)
from loxexpr.core.ir.expressions import Binary, Expr, Grouping, Literal, Unary
from loxexpr.core.ir.tokens import Token, TokenKind
from loxexpr.core.settings import ParserConfig

logger = logging.getLogger(__name__)

# Tokens that begin a statement-level construct; synchronization stops before them.
_STATEMENT_STARTS = frozenset(
    {
        TokenKind.CLASS,
        TokenKind.FUN,
        TokenKind.VAR,
        TokenKind.FOR,
        TokenKind.IF,
        TokenKind.WHILE,
        TokenKind.PRINT,
        TokenKind.RETURN,
    }
)


@dataclass
class ParseResult:
    """The parsed tree (None on failure) plus any syntax diagnostics."""

    expression: Expr | None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


class Parser:
    """Recursive descent parser over a scanned token list."""

    def __init__(self, tokens: list[Token], config: ParserConfig | None = None) -> None:
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            raise ValueError("Token sequence must end with an EOF token")
        self.tokens = tokens
        self.current = 0
        self.config = config or ParserConfig()
        self.diagnostics = Diagnostics()

    def parse(self) -> ParseResult:
        """Parse a single expression that must span the whole token list."""
        try:
            try:
                expr = self.expression()
            except RecursionError:
                raise self._error(self._peek(), NESTING_TOO_DEEP) from None
            if not self._is_at_end():
                raise self._error(self._peek(), "Expect end of expression.")
        except ParseError as e:
            self.diagnostics.add(make_syntax_diagnostic(e))
            logger.debug("Parse failed at line %d: %s", e.token.line, e.message)
            self.synchronize()
            return ParseResult(expression=None, diagnostics=self.diagnostics)
        return ParseResult(expression=expr, diagnostics=self.diagnostics)

    # -- Grammar rules --

    def expression(self) -> Expr:
        return self.equality()

    def equality(self) -> Expr:
        return self._left_fold(self.comparison, TokenKind.BANG_EQUAL, TokenKind.EQUAL_EQUAL)

    def comparison(self) -> Expr:
        return self._left_fold(
            self.term,
            TokenKind.LESS,
            TokenKind.LESS_EQUAL,
            TokenKind.GREATER,
            TokenKind.GREATER_EQUAL,
        )

    def term(self) -> Expr:
        return self._left_fold(self.factor, TokenKind.MINUS, TokenKind.PLUS)

    def factor(self) -> Expr:
        return self._left_fold(self.power, TokenKind.SLASH, TokenKind.STAR)

    def power(self) -> Expr:
        if self.config.power_associativity == "right":
            left = self.unary()
            if self._match(TokenKind.CARET):
                operator = self._previous()
                right = self.power()
                return Binary(left=left, operator=operator, right=right)
            return left
        return self._left_fold(self.unary, TokenKind.CARET)

    def unary(self) -> Expr:
        if self._match(TokenKind.BANG, TokenKind.MINUS):
            operator = self._previous()
            right = self.unary()
            return Unary(operator=operator, right=right)
        return self.primary()

    def primary(self) -> Expr:
        if self._match(TokenKind.FALSE):
            return Literal(value=False)
        if self._match(TokenKind.TRUE):
            return Literal(value=True)
        if self._match(TokenKind.NIL):
            return Literal(value=None)

        if self._match(TokenKind.NUMBER, TokenKind.STRING):
            return Literal(value=self._previous().literal)

        if self._match(TokenKind.LEFT_PAREN):
            expr = self.expression()
            self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expression=expr)

        raise self._error(self._peek(), "Expect expression.")

    def _left_fold(self, operand, *operators: TokenKind) -> Expr:
        expr = operand()
        while self._match(*operators):
            operator = self._previous()
            right = operand()
            expr = Binary(left=expr, operator=operator, right=right)
        return expr

    # -- Error recovery --

    def synchronize(self) -> None:
        """Discard tokens up to the next statement boundary.

        Always consumes at least one token unless already at EOF.
        """
        self._advance()
        while not self._is_at_end():
            if self._previous().kind == TokenKind.SEMICOLON:
                return
            if self._peek().kind in _STATEMENT_STARTS:
                return
            self._advance()

    # -- Token cursor --

    def _match(self, *kinds: TokenKind) -> bool:
        for kind in kinds:
            if self._check(kind):
                self._advance()
                return True
        return False

    def _consume(self, kind: TokenKind, message: str) -> Token:
        if self._check(kind):
            return self._advance()
        raise self._error(self._peek(), message)

    def _check(self, kind: TokenKind) -> bool:
        if self._is_at_end():
            return False
        return self._peek().kind == kind

    def _advance(self) -> Token:
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        return self._peek().kind == TokenKind.EOF

    def _peek(self) -> Token:
        return self.tokens[self.current]

    def _previous(self) -> Token:
        return self.tokens[self.current - 1]

    def _error(self, token: Token, message: str) -> ParseError:
        return ParseError(token, message)


def parse(tokens: list[Token], config: ParserConfig | None = None) -> ParseResult:
    """Parse a token list into an expression tree.

    Args:
        tokens: Output of the lexer, terminated by an EOF token.
        config: Optional parser settings (exponent associativity).

    Returns:
        ParseResult whose ``expression`` is None when a syntax error was reported.
    """
    return Parser(tokens, config).parse()
