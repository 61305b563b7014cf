# arith/syntax.py
"""
Untyped syntax tree produced by the parser and consumed by the binder.

Every token carries its position in the input line for diagnostics.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Union

from arith.errors import Diagnostic, TextSpan


# ── Kinds ────────────────────────────────────────────────────────

class SyntaxKind(Enum):
    # Tokens
    NUMBER_TOKEN = "NumberToken"
    TRUE_KEYWORD = "TrueKeyword"
    FALSE_KEYWORD = "FalseKeyword"
    PLUS_TOKEN = "PlusToken"
    MINUS_TOKEN = "MinusToken"
    STAR_TOKEN = "StarToken"
    SLASH_TOKEN = "SlashToken"

    # Expressions
    LITERAL_EXPRESSION = "LiteralExpression"
    UNARY_EXPRESSION = "UnaryExpression"
    BINARY_EXPRESSION = "BinaryExpression"

    def __str__(self):
        return self.value


OPERATOR_KINDS = {
    "+": SyntaxKind.PLUS_TOKEN,
    "-": SyntaxKind.MINUS_TOKEN,
    "*": SyntaxKind.STAR_TOKEN,
    "/": SyntaxKind.SLASH_TOKEN,
}


# ── Tokens ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class SyntaxToken:
    kind: SyntaxKind
    position: int
    text: str
    value: Optional[object] = None

    @property
    def span(self) -> TextSpan:
        return TextSpan(self.position, len(self.text))

    def get_children(self) -> Iterator["SyntaxNode"]:
        return iter(())


# ── Expressions ──────────────────────────────────────────────────

@dataclass(frozen=True)
class LiteralExpressionSyntax:
    literal_token: SyntaxToken

    @property
    def kind(self) -> SyntaxKind:
        return SyntaxKind.LITERAL_EXPRESSION

    @property
    def span(self) -> TextSpan:
        return self.literal_token.span

    def get_children(self) -> Iterator["SyntaxNode"]:
        yield self.literal_token


@dataclass(frozen=True)
class UnaryExpressionSyntax:
    operator_token: SyntaxToken
    operand: ExpressionSyntax

    @property
    def kind(self) -> SyntaxKind:
        return SyntaxKind.UNARY_EXPRESSION

    @property
    def span(self) -> TextSpan:
        return TextSpan.merge(self.operator_token.span, self.operand.span)

    def get_children(self) -> Iterator["SyntaxNode"]:
        yield self.operator_token
        yield self.operand


@dataclass(frozen=True)
class BinaryExpressionSyntax:
    left: ExpressionSyntax
    operator_token: SyntaxToken
    right: ExpressionSyntax

    @property
    def kind(self) -> SyntaxKind:
        return SyntaxKind.BINARY_EXPRESSION

    @property
    def span(self) -> TextSpan:
        return TextSpan.merge(self.left.span, self.right.span)

    def get_children(self) -> Iterator["SyntaxNode"]:
        yield self.left
        yield self.operator_token
        yield self.right


ExpressionSyntax = Union[
    LiteralExpressionSyntax, UnaryExpressionSyntax, BinaryExpressionSyntax,
]

SyntaxNode = Union[SyntaxToken, ExpressionSyntax]


# ── Tree ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SyntaxTree:
    """A parsed input line together with the diagnostics found while parsing it."""
    text: str
    root: ExpressionSyntax
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @staticmethod
    def parse(text: str) -> "SyntaxTree":
        from arith.parser import parse
        return parse(text)
