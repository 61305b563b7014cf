"""
arith/printer.py
================

Tree dumps for syntax and bound trees, plus the ANSI color helper shared
with the REPL.

    └── BinaryExpression
        ├── LiteralExpression
        │   └── NumberToken 1
        ├── PlusToken
        └── LiteralExpression
            └── NumberToken 2
"""

from __future__ import annotations

import os
import sys
from typing import Any, List, Optional, TextIO

from arith.binding import BoundNodeKind
from arith.errors import nesting_limit


# ═══════════════════════════════════════════════════════════════════════════
# TERMINAL COLORS
# ═══════════════════════════════════════════════════════════════════════════

class Colors:
    """ANSI color codes, disabled when not writing to a TTY."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def _code(self, code: str) -> str:
        return code if self.enabled else ""

    @property
    def RESET(self) -> str:
        return self._code("\033[0m")

    @property
    def DIM(self) -> str:
        return self._code("\033[2m")

    @property
    def RED(self) -> str:
        return self._code("\033[31m")


def get_colors(stream: TextIO = sys.stdout) -> Colors:
    """Get color codes appropriate for the given stream."""
    try:
        is_tty = hasattr(stream, "isatty") and stream.isatty()
    except ValueError:
        # closed stream
        is_tty = False
    return Colors(enabled=is_tty and os.environ.get("NO_COLOR") is None)


# ═══════════════════════════════════════════════════════════════════════════
# TREE PRINTER
# ═══════════════════════════════════════════════════════════════════════════

class TreePrinter:
    """Draw a syntax or bound tree with box-drawing connectors."""

    def __init__(self, stream: Optional[TextIO] = None, colors: Optional[Colors] = None) -> None:
        self.stream = stream or sys.stdout
        self.colors = colors or Colors(enabled=False)

    def print(self, node: Any, indent: str = "", is_last: bool = True) -> None:
        c = self.colors
        marker = "└── " if is_last else "├── "
        self.stream.write(f"{c.DIM}{indent}{marker}{self._label(node)}{c.RESET}\n")

        indent += "    " if is_last else "│   "
        children = self._children(node)
        for i, child in enumerate(children):
            self.print(child, indent, i == len(children) - 1)

    @staticmethod
    def _label(node: Any) -> str:
        kind = node.kind
        if isinstance(kind, BoundNodeKind):
            if kind is BoundNodeKind.LITERAL_EXPRESSION:
                return f"BoundLiteralExpression {node.value!r} : {node.type}"
            return f"Bound{_camel(kind.name)} {node.operator_kind.name} : {node.type}"
        label = str(kind)
        value = getattr(node, "value", None)
        if value is not None:
            label = f"{label} {value}"
        return label

    @staticmethod
    def _children(node: Any) -> List[Any]:
        kind = node.kind
        if kind is BoundNodeKind.UNARY_EXPRESSION:
            return [node.operand]
        if kind is BoundNodeKind.BINARY_EXPRESSION:
            return [node.left, node.right]
        if kind is BoundNodeKind.LITERAL_EXPRESSION:
            return []
        return list(node.get_children())


def _camel(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


def pretty_print(node: Any, stream: Optional[TextIO] = None, colors: Optional[Colors] = None) -> None:
    """Print *node* and everything below it."""
    with nesting_limit():
        TreePrinter(stream, colors).print(node)
