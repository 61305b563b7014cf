"""
arith/compilation.py
====================

Pipeline façade: parse → bind → (gated) evaluate.

Evaluation only runs when the syntax tree and the binder both reported
nothing; otherwise the result carries the diagnostics and no value.

Usage::

    from arith.compilation import evaluate_text

    result = evaluate_text("1 + 2")
    result.ok          # True
    result.value       # 3

    result = evaluate_text("1 + true")
    result.ok          # False
    [str(d) for d in result.diagnostics]
    # ["Binary operator '+' is not defined for type int and bool"]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from arith.binding import BindResult, BoundExpression, bind_expression
from arith.errors import Diagnostic, nesting_limit
from arith.evaluator import evaluate
from arith.parser import parse
from arith.syntax import SyntaxTree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationResult:
    diagnostics: Tuple[Diagnostic, ...] = ()
    value: Optional[object] = None

    @property
    def ok(self) -> bool:
        return not self.diagnostics


class Compilation:
    """One input line on its way to a value."""

    def __init__(self, syntax_tree: SyntaxTree) -> None:
        self.syntax_tree = syntax_tree
        self._bound: Optional[BindResult] = None

    def bind(self) -> BindResult:
        if self._bound is None:
            with nesting_limit():
                self._bound = bind_expression(self.syntax_tree.root)
        return self._bound

    @property
    def bound_expression(self) -> BoundExpression:
        return self.bind().expression

    @property
    def diagnostics(self) -> Tuple[Diagnostic, ...]:
        return self.syntax_tree.diagnostics + self.bind().diagnostics

    def evaluate(self) -> EvaluationResult:
        diagnostics = self.diagnostics
        if diagnostics:
            logger.info("skipping evaluation: %d diagnostic(s)", len(diagnostics))
            return EvaluationResult(diagnostics=diagnostics)
        return EvaluationResult(value=evaluate(self.bound_expression))


def evaluate_text(text: str) -> EvaluationResult:
    """Parse, bind and evaluate *text*.

    Raises ``ArithSyntaxError`` for text the grammar rejects and
    ``EvaluationError`` for fatal runtime conditions, including input
    nested too deeply to process.
    """
    return Compilation(parse(text)).evaluate()
