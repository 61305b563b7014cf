"""
arith/parser.py — PEG front end for arithmetic expressions
===========================================================

Turns one line of input into the untyped syntax tree defined in
:mod:`arith.syntax`.

Usage::

    from arith.parser import parse

    tree = parse("-5 * (2 + 1)")
    tree.root          # BinaryExpressionSyntax(...)
    tree.diagnostics   # () unless a number literal overflowed

Precedence, tightest first: unary ``+``/``-``, then ``*``/``/``, then
binary ``+``/``-``. Binary operators associate to the left. Parentheses
only group; they leave no node behind.

Depends on:
    - parsimonious (PEG parser)
"""

from __future__ import annotations

import logging
from typing import Any, List, Tuple

from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor
from parsimonious.exceptions import IncompleteParseError, ParseError

from arith.errors import (
    ArithSyntaxError,
    Diagnostic,
    DiagnosticBag,
    TextSpan,
    nesting_limit,
)
from arith.syntax import (
    OPERATOR_KINDS,
    BinaryExpressionSyntax,
    ExpressionSyntax,
    LiteralExpressionSyntax,
    SyntaxKind,
    SyntaxToken,
    SyntaxTree,
    UnaryExpressionSyntax,
)

logger = logging.getLogger(__name__)

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


# ═══════════════════════════════════════════════════════════════════
#  PART 1 — GRAMMAR (Parsimonious PEG)
# ═══════════════════════════════════════════════════════════════════

ARITH_GRAMMAR = Grammar(r'''
    expression          = _ additive _

    additive            = multiplicative additive_tail*
    additive_tail       = _ additive_op _ multiplicative
    multiplicative      = unary multiplicative_tail*
    multiplicative_tail = _ multiplicative_op _ unary

    unary               = prefixed / primary
    prefixed            = unary_op _ unary
    primary             = parenthesized / boolean / number
    parenthesized       = "(" _ additive _ ")"

    additive_op         = "+" / "-"
    multiplicative_op   = "*" / "/"
    unary_op            = "+" / "-"

    boolean             = ~r"(true|false)(?![A-Za-z0-9_])"
    number              = ~r"[0-9]+"
    _                   = ~r"\s*"
''')


# ═══════════════════════════════════════════════════════════════════
#  PART 2 — PARSE TREE → SYNTAX TREE
# ═══════════════════════════════════════════════════════════════════

class SyntaxTreeBuilder(NodeVisitor):
    """Transforms a Parsimonious parse tree into arith syntax nodes."""

    grammar = ARITH_GRAMMAR
    unwrapped_exceptions = (RecursionError,)

    def __init__(self) -> None:
        self.diagnostics = DiagnosticBag()

    def generic_visit(self, node, visited_children):
        return visited_children or node

    @staticmethod
    def _repeated(visited: Any) -> List[Any]:
        # An empty ``rule*`` visits to its own (childless) node.
        return visited if isinstance(visited, list) else []

    @staticmethod
    def _fold(left: ExpressionSyntax, tails: List[Tuple[SyntaxToken, ExpressionSyntax]]) -> ExpressionSyntax:
        for operator_token, right in tails:
            left = BinaryExpressionSyntax(left, operator_token, right)
        return left

    # ─────────────────────────────────────────────────────────────
    # Expressions
    # ─────────────────────────────────────────────────────────────

    def visit_expression(self, node, visited_children):
        _, root, _ = visited_children
        return root

    def visit_additive(self, node, visited_children):
        left, tails = visited_children
        return self._fold(left, self._repeated(tails))

    def visit_additive_tail(self, node, visited_children):
        _, operator_token, _, right = visited_children
        return operator_token, right

    def visit_multiplicative(self, node, visited_children):
        left, tails = visited_children
        return self._fold(left, self._repeated(tails))

    def visit_multiplicative_tail(self, node, visited_children):
        _, operator_token, _, right = visited_children
        return operator_token, right

    def visit_unary(self, node, visited_children):
        return visited_children[0]

    def visit_prefixed(self, node, visited_children):
        operator_token, _, operand = visited_children
        return UnaryExpressionSyntax(operator_token, operand)

    def visit_primary(self, node, visited_children):
        return visited_children[0]

    def visit_parenthesized(self, node, visited_children):
        _, _, inner, _, _ = visited_children
        return inner

    # ─────────────────────────────────────────────────────────────
    # Tokens
    # ─────────────────────────────────────────────────────────────

    def _operator(self, node: Node) -> SyntaxToken:
        return SyntaxToken(OPERATOR_KINDS[node.text], node.start, node.text)

    def visit_additive_op(self, node, visited_children):
        return self._operator(node)

    def visit_multiplicative_op(self, node, visited_children):
        return self._operator(node)

    def visit_unary_op(self, node, visited_children):
        return self._operator(node)

    def visit_boolean(self, node, visited_children):
        if node.text == "true":
            token = SyntaxToken(SyntaxKind.TRUE_KEYWORD, node.start, node.text, True)
        else:
            token = SyntaxToken(SyntaxKind.FALSE_KEYWORD, node.start, node.text, False)
        return LiteralExpressionSyntax(token)

    def visit_number(self, node, visited_children):
        value = int(node.text)
        if not INT32_MIN <= value <= INT32_MAX:
            self.diagnostics.report_invalid_number(
                TextSpan(node.start, len(node.text)), node.text
            )
            value = None
        return LiteralExpressionSyntax(
            SyntaxToken(SyntaxKind.NUMBER_TOKEN, node.start, node.text, value)
        )


# ═══════════════════════════════════════════════════════════════════
#  PART 3 — PUBLIC API
# ═══════════════════════════════════════════════════════════════════

def _syntax_error(text: str, exc: ParseError) -> ArithSyntaxError:
    pos = exc.pos
    if pos >= len(text.rstrip()):
        message = "Unexpected end of input"
        span = TextSpan(len(text), 0)
    else:
        message = f"Unexpected character {text[pos]!r}"
        span = TextSpan(pos, 1)
    return ArithSyntaxError(message, span=span, text=text)


def parse(text: str) -> SyntaxTree:
    """Parse one expression.

    Raises
    ------
    ArithSyntaxError
        If *text* is not a well-formed expression.
    EvaluationError
        If *text* nests deeper than the parser can recurse.
    """
    try:
        with nesting_limit():
            parse_tree = ARITH_GRAMMAR.parse(text)
    except (IncompleteParseError, ParseError) as exc:
        error = _syntax_error(text, exc)
        logger.debug("parse failed at %d: %s", exc.pos, error)
        raise error from exc

    builder = SyntaxTreeBuilder()
    with nesting_limit():
        root = builder.visit(parse_tree)
    diagnostics: Tuple[Diagnostic, ...] = builder.diagnostics.to_tuple()
    logger.debug("parsed %r (%d diagnostic(s))", text, len(diagnostics))
    return SyntaxTree(text=text, root=root, diagnostics=diagnostics)
