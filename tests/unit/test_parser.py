"""Tests for the Lox recursive descent parser and AST printer."""

from __future__ import annotations

import sys

import pytest
from pydantic import ValidationError

from loxexpr.core.errors import DiagnosticKind
from loxexpr.core.expression_lang.parser import Parser, ParseResult, parse
from loxexpr.core.expression_lang.printer import print_ast
from loxexpr.core.expression_lang.tokenizer import TokenKind, scan
from loxexpr.core.ir.expressions import Binary, Grouping, Literal, Unary
from loxexpr.core.settings import ParserConfig


def _parse(source: str, config: ParserConfig | None = None) -> ParseResult:
    return parse(scan(source).tokens, config)


def _tree(source: str, config: ParserConfig | None = None) -> str:
    result = _parse(source, config)
    assert result.expression is not None, [d.format() for d in result.diagnostics]
    return print_ast(result.expression)


class TestParserLiterals:
    """primary productions."""

    def test_number(self) -> None:
        expr = _parse("12.5").expression
        assert isinstance(expr, Literal)
        assert expr.value == 12.5

    def test_string(self) -> None:
        expr = _parse('"hi"').expression
        assert isinstance(expr, Literal)
        assert expr.value == "hi"

    @pytest.mark.parametrize(
        ("source", "value"), [("true", True), ("false", False), ("nil", None)]
    )
    def test_keyword_literals(self, source: str, value: object) -> None:
        expr = _parse(source).expression
        assert isinstance(expr, Literal)
        assert expr.value is value

    def test_literal_value_comes_from_token(self) -> None:
        tokens = scan("7").tokens
        expr = parse(tokens).expression
        assert isinstance(expr, Literal)
        assert expr.value == tokens[0].literal

    def test_grouping(self) -> None:
        expr = _parse("(1)").expression
        assert isinstance(expr, Grouping)
        assert isinstance(expr.expression, Literal)


class TestParserPrecedence:
    """One production per precedence level, lowest outermost."""

    def test_mul_before_add(self) -> None:
        assert _tree("1 + 2 * 3") == "(+ 1 (* 2 3))"

    def test_parentheses_override_precedence(self) -> None:
        assert _tree("(1 + 2) * 3") == "(* (group (+ 1 2)) 3)"

    def test_power_before_factor(self) -> None:
        assert _tree("2 * 3 ^ 2") == "(* 2 (^ 3 2))"

    def test_unary_before_power(self) -> None:
        assert _tree("-2 ^ 2") == "(^ (- 2) 2)"

    def test_comparison_before_equality(self) -> None:
        assert _tree("1 < 2 == true") == "(== (< 1 2) true)"

    def test_term_before_comparison(self) -> None:
        assert _tree("1 + 2 >= 3") == "(>= (+ 1 2) 3)"

    def test_stacked_unary(self) -> None:
        assert _tree("!!true") == "(! (! true))"
        assert _tree("- -1") == "(- (- 1))"

    def test_operator_token_kept(self) -> None:
        expr = _parse("1 - 2").expression
        assert isinstance(expr, Binary)
        assert expr.operator.kind == TokenKind.MINUS
        assert expr.operator.lexeme == "-"

    def test_unary_node(self) -> None:
        expr = _parse("!false").expression
        assert isinstance(expr, Unary)
        assert expr.operator.kind == TokenKind.BANG


class TestParserAssociativity:
    """Binary levels fold to the left."""

    @pytest.mark.parametrize(
        ("source", "tree"),
        [
            ("1 - 2 - 3", "(- (- 1 2) 3)"),
            ("8 / 4 / 2", "(/ (/ 8 4) 2)"),
            ("1 == 2 == false", "(== (== 1 2) false)"),
            ("1 < 2 < 3", "(< (< 1 2) 3)"),
        ],
    )
    def test_left_fold(self, source: str, tree: str) -> None:
        assert _tree(source) == tree

    def test_power_left_associative_by_default(self) -> None:
        assert _tree("2 ^ 3 ^ 2") == "(^ (^ 2 3) 2)"

    def test_power_right_associative_when_configured(self) -> None:
        config = ParserConfig(power_associativity="right")
        assert _tree("2 ^ 3 ^ 2", config) == "(^ 2 (^ 3 2))"

    def test_right_associative_power_keeps_other_levels(self) -> None:
        config = ParserConfig(power_associativity="right")
        assert _tree("1 - 2 - 3", config) == "(- (- 1 2) 3)"


class TestParserErrors:
    """Syntax errors yield no tree and one diagnostic."""

    def test_expect_expression(self) -> None:
        result = _parse("1 +")
        assert result.expression is None
        (diagnostic,) = result.diagnostics
        assert diagnostic.kind == DiagnosticKind.SYNTAX
        assert diagnostic.message == "Expect expression."
        assert diagnostic.where == " at end"

    def test_expect_expression_at_token(self) -> None:
        result = _parse("1 + )")
        (diagnostic,) = result.diagnostics
        assert diagnostic.where == " at ')'"
        assert diagnostic.format() == "[line 1] Error at ')': Expect expression."

    def test_missing_closing_paren(self) -> None:
        result = _parse("(1 + 2")
        assert result.expression is None
        (diagnostic,) = result.diagnostics
        assert diagnostic.message == "Expect ')' after expression."

    def test_identifier_is_not_an_expression(self) -> None:
        result = _parse("x + 1")
        assert result.expression is None
        assert result.diagnostics.items[0].where == " at 'x'"

    def test_trailing_tokens(self) -> None:
        result = _parse("1 2")
        assert result.expression is None
        assert result.diagnostics.items[0].message == "Expect end of expression."

    def test_error_line_is_anchored_at_token(self) -> None:
        result = _parse("1 +\n\n*")
        assert result.diagnostics.items[0].line == 3

    def test_empty_input(self) -> None:
        result = _parse("")
        assert result.expression is None
        assert result.diagnostics.items[0].message == "Expect expression."

    def test_requires_eof_sentinel(self) -> None:
        tokens = scan("1").tokens[:-1]
        with pytest.raises(ValueError, match="EOF"):
            Parser(tokens)

    def test_nesting_deeper_than_stack(self) -> None:
        depth = sys.getrecursionlimit()
        result = _parse("(" * depth + "1" + ")" * depth)
        assert result.expression is None
        (diagnostic,) = result.diagnostics
        assert diagnostic.kind == DiagnosticKind.SYNTAX
        assert diagnostic.message == "Expression nests too deeply."

    def test_stacked_unary_deeper_than_stack(self) -> None:
        result = _parse("-" * sys.getrecursionlimit() + "1")
        assert result.expression is None
        assert result.diagnostics.items[0].message == "Expression nests too deeply."


class TestParserSynchronize:
    """Error recovery always makes progress."""

    def test_stops_after_semicolon(self) -> None:
        parser = Parser(scan("+ 1 ; 2").tokens)
        parser.synchronize()
        assert parser.tokens[parser.current].lexeme == "2"

    def test_stops_before_statement_keyword(self) -> None:
        parser = Parser(scan("+ 1 2 print 3").tokens)
        parser.synchronize()
        assert parser.tokens[parser.current].kind == TokenKind.PRINT

    def test_advances_at_least_one_token(self) -> None:
        parser = Parser(scan("var x").tokens)
        parser.synchronize()
        assert parser.current >= 1

    def test_reaches_eof_on_garbage(self) -> None:
        parser = Parser(scan(") ) ) )").tokens)
        parser.synchronize()
        assert parser.tokens[parser.current].kind == TokenKind.EOF

    def test_parse_recovers_past_bad_tokens(self) -> None:
        parser = Parser(scan(") ; 1").tokens)
        result = parser.parse()
        assert result.expression is None
        assert parser.current > 0


class TestAstNodes:
    """Nodes are immutable once built."""

    def test_nodes_are_frozen(self) -> None:
        expr = _parse("1 + 2").expression
        assert isinstance(expr, Binary)
        with pytest.raises(ValidationError):
            expr.left = Literal(value=3.0)  # type: ignore[misc]

    def test_str_uses_printer(self) -> None:
        expr = _parse("-(1)").expression
        assert str(expr) == "(- (group 1))"

    def test_printer_literals(self) -> None:
        assert _tree('"a" == nil') == "(== a nil)"
        assert _tree("1.5 != true") == "(!= 1.5 true)"
