"""
arith Binder

Turns an untyped syntax tree into a bound tree:

1. Literal coercion - token values become typed values (missing or
   unsupported values silently become ``0``)
2. Operator resolution - each operator is looked up by its token kind and
   operand types in a fixed table
3. Diagnostic accumulation - unresolved operators are reported, never raised

An operator that does not resolve is reported and then dropped from the
tree: the unary case yields its operand, the binary case its left operand.
The caller always receives a complete tree, and must not evaluate it
unless the diagnostics are empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple, Union

from arith.errors import ArithErrorCodes, Diagnostic, DiagnosticBag, InternalError
from arith.syntax import (
    BinaryExpressionSyntax,
    ExpressionSyntax,
    LiteralExpressionSyntax,
    SyntaxKind,
    UnaryExpressionSyntax,
)

logger = logging.getLogger(__name__)


# ============================================================================
# PART 1 — VALUES
# ============================================================================


class ValueType(Enum):
    """The closed set of runtime value types."""
    INT = "int"
    BOOL = "bool"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def of(cls, value: object) -> Optional[ValueType]:
        """Exact-type lookup; ``bool`` is not an ``int`` here."""
        return _PYTHON_TYPES.get(type(value))


_PYTHON_TYPES = {
    int: ValueType.INT,
    bool: ValueType.BOOL,
}

_ZERO = 0


# ============================================================================
# PART 2 — BOUND TREE
# ============================================================================


class BoundNodeKind(Enum):
    LITERAL_EXPRESSION = auto()
    UNARY_EXPRESSION = auto()
    BINARY_EXPRESSION = auto()


class BoundUnaryOperatorKind(Enum):
    IDENTITY = auto()
    NEGATION = auto()


class BoundBinaryOperatorKind(Enum):
    ADDITION = auto()
    SUBTRACTION = auto()
    MULTIPLICATION = auto()
    DIVISION = auto()


@dataclass(frozen=True, slots=True)
class BoundLiteralExpression:
    value: object

    @property
    def kind(self) -> BoundNodeKind:
        return BoundNodeKind.LITERAL_EXPRESSION

    @property
    def type(self) -> ValueType:
        value_type = ValueType.of(self.value)
        if value_type is None:
            raise InternalError(
                f"Literal of unsupported type {type(self.value).__name__}",
                code=ArithErrorCodes.INVARIANT_BROKEN,
            )
        return value_type


@dataclass(frozen=True, slots=True)
class BoundUnaryExpression:
    operator_kind: BoundUnaryOperatorKind
    operand: BoundExpression

    @property
    def kind(self) -> BoundNodeKind:
        return BoundNodeKind.UNARY_EXPRESSION

    @property
    def type(self) -> ValueType:
        return self.operand.type


@dataclass(frozen=True, slots=True)
class BoundBinaryExpression:
    left: BoundExpression
    operator_kind: BoundBinaryOperatorKind
    right: BoundExpression

    @property
    def kind(self) -> BoundNodeKind:
        return BoundNodeKind.BINARY_EXPRESSION

    @property
    def type(self) -> ValueType:
        return self.left.type


BoundExpression = Union[
    BoundLiteralExpression, BoundUnaryExpression, BoundBinaryExpression,
]


# ============================================================================
# PART 3 — OPERATOR TABLES
# ============================================================================


@dataclass(frozen=True, slots=True)
class BoundUnaryOperator:
    """One row of the unary operator table."""
    syntax_kind: SyntaxKind
    kind: BoundUnaryOperatorKind
    operand_type: ValueType

    @staticmethod
    def bind(syntax_kind: SyntaxKind, operand_type: ValueType) -> Optional[BoundUnaryOperator]:
        for op in _UNARY_OPERATORS:
            if op.syntax_kind == syntax_kind and op.operand_type == operand_type:
                return op
        return None


@dataclass(frozen=True, slots=True)
class BoundBinaryOperator:
    """One row of the binary operator table."""
    syntax_kind: SyntaxKind
    kind: BoundBinaryOperatorKind
    left_type: ValueType
    right_type: ValueType

    @staticmethod
    def bind(
        syntax_kind: SyntaxKind, left_type: ValueType, right_type: ValueType
    ) -> Optional[BoundBinaryOperator]:
        for op in _BINARY_OPERATORS:
            if (
                op.syntax_kind == syntax_kind
                and op.left_type == left_type
                and op.right_type == right_type
            ):
                return op
        return None


_UNARY_OPERATORS: Tuple[BoundUnaryOperator, ...] = (
    BoundUnaryOperator(SyntaxKind.PLUS_TOKEN, BoundUnaryOperatorKind.IDENTITY, ValueType.INT),
    BoundUnaryOperator(SyntaxKind.MINUS_TOKEN, BoundUnaryOperatorKind.NEGATION, ValueType.INT),
)

_BINARY_OPERATORS: Tuple[BoundBinaryOperator, ...] = (
    BoundBinaryOperator(SyntaxKind.PLUS_TOKEN, BoundBinaryOperatorKind.ADDITION, ValueType.INT, ValueType.INT),
    BoundBinaryOperator(SyntaxKind.MINUS_TOKEN, BoundBinaryOperatorKind.SUBTRACTION, ValueType.INT, ValueType.INT),
    BoundBinaryOperator(SyntaxKind.STAR_TOKEN, BoundBinaryOperatorKind.MULTIPLICATION, ValueType.INT, ValueType.INT),
    BoundBinaryOperator(SyntaxKind.SLASH_TOKEN, BoundBinaryOperatorKind.DIVISION, ValueType.INT, ValueType.INT),
)


# ============================================================================
# PART 4 — BINDER
# ============================================================================


@dataclass(frozen=True)
class BindResult:
    expression: BoundExpression
    diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def messages(self) -> Tuple[str, ...]:
        return tuple(d.message for d in self.diagnostics)


class Binder:
    """
    Binds one syntax tree.

    A Binder owns the diagnostic bag of its pass; build a new one for each
    input rather than reusing it.
    """

    def __init__(self) -> None:
        self.diagnostics = DiagnosticBag()

    def bind_expression(self, syntax: ExpressionSyntax) -> BoundExpression:
        kind = getattr(syntax, "kind", type(syntax).__name__)
        if kind is SyntaxKind.LITERAL_EXPRESSION:
            return self._bind_literal_expression(syntax)
        if kind is SyntaxKind.UNARY_EXPRESSION:
            return self._bind_unary_expression(syntax)
        if kind is SyntaxKind.BINARY_EXPRESSION:
            return self._bind_binary_expression(syntax)
        raise InternalError(f"Unexpected syntax {kind}")

    def _bind_literal_expression(self, syntax: LiteralExpressionSyntax) -> BoundExpression:
        value = syntax.literal_token.value
        if ValueType.of(value) is None:
            value = _ZERO
        return BoundLiteralExpression(value)

    def _bind_unary_expression(self, syntax: UnaryExpressionSyntax) -> BoundExpression:
        bound_operand = self.bind_expression(syntax.operand)
        operator_token = syntax.operator_token
        bound_operator = BoundUnaryOperator.bind(operator_token.kind, bound_operand.type)

        if bound_operator is None:
            self.diagnostics.report_undefined_unary_operator(
                operator_token.span, operator_token.text, bound_operand.type
            )
            return bound_operand

        return BoundUnaryExpression(bound_operator.kind, bound_operand)

    def _bind_binary_expression(self, syntax: BinaryExpressionSyntax) -> BoundExpression:
        bound_left = self.bind_expression(syntax.left)
        bound_right = self.bind_expression(syntax.right)
        operator_token = syntax.operator_token
        bound_operator = BoundBinaryOperator.bind(
            operator_token.kind, bound_left.type, bound_right.type
        )

        if bound_operator is None:
            self.diagnostics.report_undefined_binary_operator(
                operator_token.span, operator_token.text, bound_left.type, bound_right.type
            )
            return bound_left

        return BoundBinaryExpression(bound_left, bound_operator.kind, bound_right)


def bind_expression(syntax: ExpressionSyntax) -> BindResult:
    """Bind *syntax* with a fresh Binder and return the tree with its diagnostics."""
    binder = Binder()
    expression = binder.bind_expression(syntax)
    diagnostics = binder.diagnostics.to_tuple()
    if diagnostics:
        logger.debug("binding produced %d diagnostic(s)", len(diagnostics))
    return BindResult(expression, diagnostics)
