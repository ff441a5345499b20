"""
Lox expression language.

Lexer, parser, evaluator, printer and type checker for standalone Lox
expressions: arithmetic, comparison, equality, logical negation, string
concatenation and grouping.

Usage:
    from loxexpr.core.expression_lang import interpret, parse, scan

    lexed = scan("1 + 2 * 3")
    parsed = parse(lexed.tokens)
    result = interpret(parsed.expression)
    # result.value == 7.0
"""

from loxexpr.core.expression_lang.evaluator import evaluate, interpret
from loxexpr.core.expression_lang.parser import parse
from loxexpr.core.expression_lang.printer import print_ast
from loxexpr.core.expression_lang.tokenizer import scan
from loxexpr.core.expression_lang.type_checker import infer_type

__all__ = ["evaluate", "infer_type", "interpret", "parse", "print_ast", "scan"]
