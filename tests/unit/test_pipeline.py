"""End-to-end tests for one pipeline run."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from loxexpr.core.errors import DiagnosticKind
from loxexpr.core.pipeline import EXIT_DATAERR, EXIT_OK, EXIT_SOFTWARE, run_source
from loxexpr.core.settings import LoxConfig, OutputConfig, ParserConfig


class TestScenarios:
    """Source text to printed output."""

    @pytest.mark.parametrize(
        ("source", "output"),
        [
            ("1 + 2 * 3", "7"),
            ("(1 + 2) * 3", "9"),
            ('"a" + "b"', "ab"),
            ("2 ^ 3 ^ 2", "64"),
            ('1 == "1"', "false"),
            ("7 / 2", "3.5"),
            ("nil", "nil"),
            ("!(1 > 2)", "true"),
        ],
    )
    def test_value_output(self, source: str, output: str) -> None:
        result = run_source(source)
        assert result.ok
        assert result.output == output
        assert result.exit_code == EXIT_OK

    def test_ast_output(self) -> None:
        config = LoxConfig(output=OutputConfig(show_ast=True))
        result = run_source("1 + 2 * 3", config)
        assert result.output == "(+ 1 (* 2 3))"
        assert result.value is None

    def test_type_output(self) -> None:
        config = LoxConfig(output=OutputConfig(show_type=True))
        assert run_source('"a" + "b"', config).output == "string"

    def test_type_error_output(self) -> None:
        config = LoxConfig(output=OutputConfig(show_type=True))
        result = run_source("1 + nil", config)
        assert result.output is None
        assert result.diagnostics.of_kind(DiagnosticKind.TYPE)
        assert result.exit_code == EXIT_DATAERR

    def test_right_associative_power(self) -> None:
        config = LoxConfig(parser=ParserConfig(power_associativity="right"))
        assert run_source("2 ^ 3 ^ 2", config).output == "512"


class TestPhaseGating:
    """Each phase's diagnostics decide whether the next one runs."""

    def test_runtime_error(self) -> None:
        result = run_source("1 / 0")
        assert result.output is None
        assert result.value is None
        assert result.expression is not None
        (diagnostic,) = result.diagnostics
        assert diagnostic.kind == DiagnosticKind.RUNTIME
        assert diagnostic.message == "Cannot divide by zero."
        assert result.exit_code == EXIT_SOFTWARE

    def test_syntax_error_skips_evaluation(self) -> None:
        result = run_source("(1 / 0")
        assert result.expression is None
        assert [d.kind for d in result.diagnostics] == [DiagnosticKind.SYNTAX]
        assert result.exit_code == EXIT_DATAERR

    def test_lexical_error_skips_parsing(self) -> None:
        result = run_source("1 + @ + #")
        assert result.expression is None
        assert [d.kind for d in result.diagnostics] == [
            DiagnosticKind.LEXICAL,
            DiagnosticKind.LEXICAL,
        ]
        assert result.exit_code == EXIT_DATAERR

    def test_runs_are_independent(self) -> None:
        first = run_source("1 / 0")
        second = run_source("1 + 1")
        assert not first.ok
        assert second.ok
        assert len(second.diagnostics) == 0

    def test_tokens_recorded(self) -> None:
        result = run_source("1 + 1")
        assert len(result.tokens) == 4


class TestDeepNesting:
    """Input too deep for the interpreter stack reports a diagnostic."""

    @pytest.mark.parametrize("depth", [200, 5000])
    def test_nested_groups(self, depth: int) -> None:
        result = run_source("(" * depth + "1" + ")" * depth)
        assert result.output == "1" or result.diagnostics.has_errors
        if not result.ok:
            (diagnostic,) = result.diagnostics
            assert diagnostic.kind == DiagnosticKind.SYNTAX
            assert diagnostic.message == "Expression nests too deeply."
            assert result.exit_code == EXIT_DATAERR

    def test_long_sum_evaluates_or_reports(self) -> None:
        result = run_source(" + ".join(["1"] * 1000))
        assert result.output == "1000" or result.diagnostics.has_errors

    def test_sum_deeper_than_stack(self) -> None:
        result = run_source(" + ".join(["1"] * sys.getrecursionlimit()))
        assert result.expression is not None
        (diagnostic,) = result.diagnostics
        assert diagnostic.kind == DiagnosticKind.RUNTIME
        assert diagnostic.message == "Expression nests too deeply."
        assert diagnostic.where == " at '+'"
        assert result.exit_code == EXIT_SOFTWARE

    def test_ast_output_deeper_than_stack(self) -> None:
        config = LoxConfig(output=OutputConfig(show_ast=True))
        result = run_source(" + ".join(["1"] * sys.getrecursionlimit()), config)
        assert result.output is None
        assert result.diagnostics.items[0].message == "Expression nests too deeply."

    def test_next_run_unaffected(self) -> None:
        run_source("-" * sys.getrecursionlimit() + "1")
        assert run_source("2 * 4").output == "8"


class TestFixtureScripts:
    """Whole-file scripts under tests/fixtures/lox."""

    def test_precedence(self, lox_fixtures_dir: Path) -> None:
        result = run_source((lox_fixtures_dir / "precedence.lox").read_text())
        assert result.output == "true"

    def test_multiline_string(self, lox_fixtures_dir: Path) -> None:
        result = run_source((lox_fixtures_dir / "multiline_string.lox").read_text())
        assert result.output == "first\nsecond!"

    def test_divide_by_zero_line(self, lox_fixtures_dir: Path) -> None:
        result = run_source((lox_fixtures_dir / "divide_by_zero.lox").read_text())
        (diagnostic,) = result.diagnostics
        assert diagnostic.line == 3
        assert diagnostic.format() == "[line 3] Error at '/': Cannot divide by zero."
