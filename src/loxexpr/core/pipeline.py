"""
One unit of work: source text -> tokens -> expression tree -> value.

Every call builds fresh lexer, parser and evaluator state; nothing is
kept between runs. Each phase's diagnostics decide whether the next phase
runs: lexical errors stop before parsing, syntax errors stop before
evaluation. Input nested too deeply for the interpreter stack becomes a
diagnostic of the phase that ran out of stack, never an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from loxexpr.core.errors import NESTING_TOO_DEEP, Diagnostic, DiagnosticKind, Diagnostics
from loxexpr.core.expression_lang.evaluator import interpret
from loxexpr.core.expression_lang.parser import parse
from loxexpr.core.expression_lang.printer import print_ast
from loxexpr.core.expression_lang.tokenizer import scan
from loxexpr.core.expression_lang.type_checker import check
from loxexpr.core.ir.expressions import Expr
from loxexpr.core.ir.tokens import Token
from loxexpr.core.ir.values import Value, stringify
from loxexpr.core.settings import LoxConfig

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DATAERR = 65  # lexical, syntax or static type error
EXIT_SOFTWARE = 70  # runtime error


@dataclass
class RunResult:
    """Everything one pipeline run produced."""

    source: str
    tokens: list[Token] = field(default_factory=list)
    expression: Expr | None = None
    value: Value = None
    output: str | None = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_errors

    @property
    def exit_code(self) -> int:
        if self.diagnostics.of_kind(DiagnosticKind.RUNTIME):
            return EXIT_SOFTWARE
        if self.diagnostics.has_errors:
            return EXIT_DATAERR
        return EXIT_OK


def run_source(source: str, config: LoxConfig | None = None) -> RunResult:
    """Scan, parse and evaluate one piece of source text.

    Args:
        source: Whole-file text or a single REPL line.
        config: Settings; ``output.show_ast`` and ``output.show_type`` replace
            evaluation with printing the tree or its inferred type.

    Returns:
        RunResult. ``output`` holds the text to print when the run succeeded.
    """
    config = config or LoxConfig()
    result = RunResult(source=source)

    lexed = scan(source)
    result.tokens = lexed.tokens
    result.diagnostics.extend(lexed.diagnostics)
    if lexed.diagnostics.has_errors:
        return result

    parsed = parse(lexed.tokens, config.parser)
    result.diagnostics.extend(parsed.diagnostics)
    if parsed.expression is None:
        return result
    result.expression = parsed.expression

    if config.output.show_ast:
        try:
            result.output = print_ast(parsed.expression)
        except RecursionError:
            result.diagnostics.add(
                Diagnostic(
                    kind=DiagnosticKind.RUNTIME,
                    line=lexed.tokens[0].line,
                    message=NESTING_TOO_DEEP,
                )
            )
        return result

    if config.output.show_type:
        typed = check(parsed.expression)
        result.diagnostics.extend(typed.diagnostics)
        if typed.value_type is not None:
            result.output = str(typed.value_type)
        return result

    evaluated = interpret(parsed.expression)
    result.diagnostics.extend(evaluated.diagnostics)
    if evaluated.ok:
        result.value = evaluated.value
        result.output = stringify(evaluated.value)

    logger.debug("Run finished with %d diagnostics", len(result.diagnostics))
    return result
