"""
Lexer for the Lox expression language.

Converts source text into a sequence of typed tokens, always terminated
by an EOF token. Lexical errors are recorded and scanning continues, so
one pass can surface several of them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from loxexpr.core.errors import Diagnostic, DiagnosticKind, Diagnostics
from loxexpr.core.ir.tokens import KEYWORDS, Token, TokenKind
from loxexpr.core.ir.values import Value

logger = logging.getLogger(__name__)

__all__ = ["KEYWORDS", "LexResult", "Lexer", "Token", "TokenKind", "scan"]

_SINGLE_CHAR: dict[str, TokenKind] = {
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
    "{": TokenKind.LEFT_BRACE,
    "}": TokenKind.RIGHT_BRACE,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    "-": TokenKind.MINUS,
    "+": TokenKind.PLUS,
    ";": TokenKind.SEMICOLON,
    "*": TokenKind.STAR,
    "^": TokenKind.CARET,
}

# Operators that become a two-character token when followed by "="
_WITH_EQUAL: dict[str, tuple[TokenKind, TokenKind]] = {
    "!": (TokenKind.BANG, TokenKind.BANG_EQUAL),
    "=": (TokenKind.EQUAL, TokenKind.EQUAL_EQUAL),
    "<": (TokenKind.LESS, TokenKind.LESS_EQUAL),
    ">": (TokenKind.GREATER, TokenKind.GREATER_EQUAL),
}


@dataclass
class LexResult:
    """Tokens from one scan plus any lexical diagnostics."""

    tokens: list[Token]
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_alpha(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z") or c == "_"


def _is_alpha_numeric(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


class Lexer:
    """Single-pass scanner with one character of lookahead."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.tokens: list[Token] = []
        self.diagnostics = Diagnostics()
        self.start = 0
        self.current = 0
        self.line = 1

    def scan(self) -> LexResult:
        """Scan the whole source, appending the EOF sentinel."""
        while not self._is_at_end():
            self.start = self.current
            self._scan_token()

        self.tokens.append(Token(TokenKind.EOF, "", None, self.line))
        logger.debug(
            "Scanned %d tokens with %d lexical errors", len(self.tokens), len(self.diagnostics)
        )
        return LexResult(tokens=self.tokens, diagnostics=self.diagnostics)

    # -- Character cursor --

    def _is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def _advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self.source[self.current]

    def _peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    # -- Token production --

    def _add_token(self, kind: TokenKind, literal: Value = None) -> None:
        text = self.source[self.start : self.current]
        self.tokens.append(Token(kind, text, literal, self.line))

    def _error(self, line: int, message: str) -> None:
        self.diagnostics.add(Diagnostic(kind=DiagnosticKind.LEXICAL, line=line, message=message))

    def _scan_token(self) -> None:
        c = self._advance()

        if c in _SINGLE_CHAR:
            self._add_token(_SINGLE_CHAR[c])
            return

        if c in _WITH_EQUAL:
            single, double = _WITH_EQUAL[c]
            self._add_token(double if self._match("=") else single)
            return

        if c == "/":
            if self._match("/"):
                while self._peek() != "\n" and not self._is_at_end():
                    self._advance()
            elif self._match("*"):
                self._block_comment()
            else:
                self._add_token(TokenKind.SLASH)
            return

        if c in " \r\t":
            return

        if c == "\n":
            self.line += 1
            return

        if c == '"':
            self._string()
            return

        if _is_digit(c):
            self._number()
            return

        if _is_alpha(c):
            self._identifier()
            return

        self._error(self.line, f"Unexpected character {c!r}.")

    def _block_comment(self) -> None:
        # Non-nesting; an unterminated comment swallows the rest of the input.
        while not self._is_at_end():
            if self._peek() == "*" and self._peek_next() == "/":
                self._advance()
                self._advance()
                return
            if self._advance() == "\n":
                self.line += 1

    def _string(self) -> None:
        opening_line = self.line
        while self._peek() != '"' and not self._is_at_end():
            if self._peek() == "\n":
                self.line += 1
            self._advance()

        if self._is_at_end():
            self._error(opening_line, "Unterminated string.")
            return

        # The closing quote
        self._advance()
        self._add_token(TokenKind.STRING, self.source[self.start + 1 : self.current - 1])

    def _number(self) -> None:
        while _is_digit(self._peek()):
            self._advance()

        # Fractional part needs at least one digit after the dot
        if self._peek() == "." and _is_digit(self._peek_next()):
            self._advance()
            while _is_digit(self._peek()):
                self._advance()

        self._add_token(TokenKind.NUMBER, float(self.source[self.start : self.current]))

    def _identifier(self) -> None:
        while _is_alpha_numeric(self._peek()):
            self._advance()

        text = self.source[self.start : self.current]
        self._add_token(KEYWORDS.get(text, TokenKind.IDENTIFIER))


def scan(source: str) -> LexResult:
    """Tokenize source text into a list of tokens plus lexical diagnostics."""
    return Lexer(source).scan()
