# tests/test_parser.py
"""
Tests for the PEG front end: tree shape, tokens, positions and errors.
"""

import pytest

from arith.errors import ArithErrorCodes, ArithSyntaxError
from arith.parser import ARITH_GRAMMAR, parse
from arith.syntax import (
    BinaryExpressionSyntax,
    LiteralExpressionSyntax,
    SyntaxKind,
    SyntaxTree,
    UnaryExpressionSyntax,
)


class TestGrammar:

    def test_rules_present(self):
        for rule in ("expression", "additive", "multiplicative", "unary",
                     "primary", "parenthesized", "number", "boolean"):
            assert rule in ARITH_GRAMMAR, f"Rule {rule!r} missing"

    def test_number_rule(self):
        assert ARITH_GRAMMAR["number"].parse("123").text == "123"


class TestTreeShape:

    def test_literal(self):
        root = parse("42").root
        assert isinstance(root, LiteralExpressionSyntax)
        assert root.literal_token.kind is SyntaxKind.NUMBER_TOKEN
        assert root.literal_token.value == 42

    def test_binary(self):
        root = parse("1 + 2").root
        assert isinstance(root, BinaryExpressionSyntax)
        assert root.operator_token.kind is SyntaxKind.PLUS_TOKEN
        assert root.left.literal_token.value == 1
        assert root.right.literal_token.value == 2

    def test_multiplication_binds_tighter(self):
        root = parse("1 + 2 * 3").root
        assert root.operator_token.kind is SyntaxKind.PLUS_TOKEN
        assert isinstance(root.right, BinaryExpressionSyntax)
        assert root.right.operator_token.kind is SyntaxKind.STAR_TOKEN

    def test_left_associative(self):
        root = parse("8 - 4 - 2").root
        assert isinstance(root.left, BinaryExpressionSyntax)
        assert root.right.literal_token.value == 2

    def test_unary_binds_tighter_than_binary(self):
        root = parse("-5 * 2").root
        assert root.operator_token.kind is SyntaxKind.STAR_TOKEN
        assert isinstance(root.left, UnaryExpressionSyntax)
        assert root.left.operator_token.kind is SyntaxKind.MINUS_TOKEN

    def test_nested_unary(self):
        root = parse("-+-1").root
        assert isinstance(root, UnaryExpressionSyntax)
        assert isinstance(root.operand, UnaryExpressionSyntax)
        assert isinstance(root.operand.operand, UnaryExpressionSyntax)

    def test_parentheses_leave_no_node(self):
        root = parse("((1))").root
        assert isinstance(root, LiteralExpressionSyntax)
        assert root.literal_token.value == 1

    def test_parentheses_group(self):
        root = parse("(1 + 2) * 3").root
        assert root.operator_token.kind is SyntaxKind.STAR_TOKEN
        assert isinstance(root.left, BinaryExpressionSyntax)

    def test_surrounding_whitespace(self):
        assert parse("   7  ").root.literal_token.value == 7

    def test_keywords(self):
        true = parse("true").root.literal_token
        false = parse("false").root.literal_token
        assert (true.kind, true.value) == (SyntaxKind.TRUE_KEYWORD, True)
        assert (false.kind, false.value) == (SyntaxKind.FALSE_KEYWORD, False)

    def test_children_order(self):
        root = parse("1 * 2").root
        kinds = [child.kind for child in root.get_children()]
        assert kinds == [
            SyntaxKind.LITERAL_EXPRESSION,
            SyntaxKind.STAR_TOKEN,
            SyntaxKind.LITERAL_EXPRESSION,
        ]


class TestPositions:

    def test_token_positions(self):
        root = parse("12 / 3").root
        assert root.left.literal_token.position == 0
        assert root.operator_token.position == 3
        assert root.right.literal_token.position == 5

    def test_node_span(self):
        root = parse("12 / 34").root
        assert (root.span.start, root.span.end) == (0, 7)


class TestNumberRange:

    def test_int32_max_is_valid(self):
        tree = parse("2147483647")
        assert tree.diagnostics == ()
        assert tree.root.literal_token.value == 2147483647

    def test_overflow_reports_and_drops_value(self):
        tree = parse("1 + 2147483648")
        assert [str(d) for d in tree.diagnostics] == [
            "The number 2147483648 isn't a valid int32",
        ]
        assert tree.diagnostics[0].code == ArithErrorCodes.INVALID_NUMBER
        assert tree.diagnostics[0].span.start == 4
        assert tree.root.right.literal_token.value is None


class TestErrors:

    @pytest.mark.parametrize("text", ["", "1 +", "1 $ 2", "(1", "1 2", "tru", "truex"])
    def test_rejected(self, text):
        with pytest.raises(ArithSyntaxError):
            parse(text)

    def test_error_carries_location(self):
        with pytest.raises(ArithSyntaxError) as info:
            parse("1 $ 2")
        assert info.value.code == ArithErrorCodes.UNEXPECTED_TOKEN
        assert info.value.span.start == 2
        assert info.value.text == "1 $ 2"

    def test_empty_input(self):
        with pytest.raises(ArithSyntaxError, match="Unexpected end of input"):
            parse("")


class TestSyntaxTreeFacade:

    def test_static_parse(self):
        tree = SyntaxTree.parse("1")
        assert tree.text == "1"
        assert isinstance(tree.root, LiteralExpressionSyntax)


class TestSyntaxKinds:

    def test_parser_produces_every_kind(self):
        tree = parse("1 + 2 - (3 * 4) / -true + +false")
        seen = set()
        pending = [tree.root]
        while pending:
            node = pending.pop()
            seen.add(node.kind)
            pending.extend(node.get_children())
        assert seen == set(SyntaxKind)
