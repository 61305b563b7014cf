# tests/conftest.py
"""
Shared fixtures: a small factory for hand-built syntax trees, so binder
tests do not depend on the parser.
"""

import pytest

from arith.syntax import (
    OPERATOR_KINDS,
    BinaryExpressionSyntax,
    LiteralExpressionSyntax,
    SyntaxKind,
    SyntaxToken,
    UnaryExpressionSyntax,
)


class SyntaxFactory:
    """Builds syntax nodes with plausible tokens."""

    def token(self, text, position=0):
        return SyntaxToken(OPERATOR_KINDS[text], position, text)

    def number(self, value, position=0):
        text = "0" if value is None else str(value)
        return LiteralExpressionSyntax(
            SyntaxToken(SyntaxKind.NUMBER_TOKEN, position, text, value)
        )

    def boolean(self, value, position=0):
        kind = SyntaxKind.TRUE_KEYWORD if value else SyntaxKind.FALSE_KEYWORD
        return LiteralExpressionSyntax(
            SyntaxToken(kind, position, str(value).lower(), value)
        )

    def unary(self, op, operand, position=0):
        return UnaryExpressionSyntax(self.token(op, position), operand)

    def binary(self, left, op, right, position=0):
        return BinaryExpressionSyntax(left, self.token(op, position), right)


@pytest.fixture
def make():
    return SyntaxFactory()
