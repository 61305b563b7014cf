"""
arith/evaluator.py
==================

Computes the value of a bound tree by structural recursion.

The tree must come from a binding pass that produced no diagnostics; a
tree with diagnostics may contain pass-through substitutions and must
not be evaluated; :func:`evaluate` refuses one when given its diagnostics.

Integer division truncates toward zero, and dividing by zero raises
:class:`~arith.errors.EvaluationError`.
"""

from __future__ import annotations

import logging
from typing import Sequence

from arith.binding import (
    BoundBinaryExpression,
    BoundBinaryOperatorKind,
    BoundExpression,
    BoundLiteralExpression,
    BoundNodeKind,
    BoundUnaryExpression,
    BoundUnaryOperatorKind,
)
from arith.errors import (
    ArithErrorCodes,
    Diagnostic,
    EvaluationError,
    InternalError,
    nesting_limit,
)

logger = logging.getLogger(__name__)


def ensure_evaluable(diagnostics: Sequence[Diagnostic]) -> None:
    """Refuse to go on when a tree was produced alongside diagnostics."""
    if diagnostics:
        raise InternalError(
            f"Cannot evaluate a tree with {len(diagnostics)} outstanding diagnostic(s)",
            code=ArithErrorCodes.INVARIANT_BROKEN,
        )


def _divide(left: int, right: int) -> int:
    if right == 0:
        raise EvaluationError("Division by zero", code=ArithErrorCodes.DIVISION_BY_ZERO)
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


class Evaluator:
    """Evaluates the tree rooted at *root*."""

    def __init__(self, root: BoundExpression) -> None:
        self._root = root

    def evaluate(self) -> object:
        return self._evaluate_expression(self._root)

    def _evaluate_expression(self, node: BoundExpression) -> object:
        kind = getattr(node, "kind", type(node).__name__)
        if kind is BoundNodeKind.LITERAL_EXPRESSION:
            return self._evaluate_literal(node)
        if kind is BoundNodeKind.UNARY_EXPRESSION:
            return self._evaluate_unary(node)
        if kind is BoundNodeKind.BINARY_EXPRESSION:
            return self._evaluate_binary(node)
        raise InternalError(f"Unexpected node {kind}")

    def _evaluate_literal(self, node: BoundLiteralExpression) -> object:
        return node.value

    def _evaluate_unary(self, node: BoundUnaryExpression) -> object:
        operand = self._evaluate_expression(node.operand)
        if node.operator_kind is BoundUnaryOperatorKind.IDENTITY:
            return operand
        if node.operator_kind is BoundUnaryOperatorKind.NEGATION:
            return -operand
        raise InternalError(f"Unexpected unary operator {node.operator_kind}")

    def _evaluate_binary(self, node: BoundBinaryExpression) -> object:
        left = self._evaluate_expression(node.left)
        right = self._evaluate_expression(node.right)
        op = node.operator_kind
        if op is BoundBinaryOperatorKind.ADDITION:
            return left + right
        if op is BoundBinaryOperatorKind.SUBTRACTION:
            return left - right
        if op is BoundBinaryOperatorKind.MULTIPLICATION:
            return left * right
        if op is BoundBinaryOperatorKind.DIVISION:
            return _divide(left, right)
        raise InternalError(f"Unexpected binary operator {op}")


def evaluate(root: BoundExpression, diagnostics: Sequence[Diagnostic] = ()) -> object:
    """Evaluate *root* and return its value.

    *diagnostics* are those of the pass that produced *root*; any at all
    make the tree unfit for evaluation and raise ``InternalError``.
    """
    ensure_evaluable(diagnostics)
    with nesting_limit():
        value = Evaluator(root).evaluate()
    logger.debug("evaluated to %r", value)
    return value
