"""
loxexpr - scanner, parser and tree-walking evaluator for Lox expressions.

Runs standalone expressions built from numbers, strings, booleans and nil
with arithmetic, comparison, equality, negation and concatenation.
"""

from __future__ import annotations

from ._version import get_version
from .core.errors import Diagnostic, Diagnostics, LoxError
from .core.expression_lang import evaluate, infer_type, interpret, parse, print_ast, scan
from .core.pipeline import RunResult, run_source

__version__ = get_version()

__all__ = [
    "__version__",
    "Diagnostic",
    "Diagnostics",
    "LoxError",
    "RunResult",
    "evaluate",
    "infer_type",
    "interpret",
    "parse",
    "print_ast",
    "run_source",
    "scan",
]
