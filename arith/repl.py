"""
arith/repl.py
=============

Interactive front end: read a line, print its value or its diagnostics.

Meta-commands
-------------
    #showTree   toggle printing the syntax and bound trees
    #cls        clear the screen

An empty line ends the session.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, TextIO

from arith.compilation import Compilation
from arith.errors import ArithError, Diagnostic
from arith.parser import parse
from arith.printer import Colors, pretty_print

logger = logging.getLogger(__name__)


@dataclass
class ReplConfig:
    """Settings for one interactive session."""
    show_tree: bool = False
    color: bool = True
    prompt: str = "> "

    def validate(self) -> List[str]:
        """Return human-readable warnings for odd settings."""
        warnings = []
        if not self.prompt:
            warnings.append("empty prompt; input lines will not be marked")
        elif "\n" in self.prompt:
            warnings.append("prompt contains a newline")
        return warnings


class Repl:
    """Line-at-a-time evaluator bound to a pair of text streams."""

    def __init__(
        self,
        config: Optional[ReplConfig] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ) -> None:
        self.config = config or ReplConfig()
        for w in self.config.validate():
            logger.warning("ReplConfig: %s", w)
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.colors = Colors(enabled=self.config.color)
        self._commands: dict[str, Callable[[], None]] = {
            "#showTree": self._toggle_show_tree,
            "#cls": self._clear,
        }

    # -- Meta-commands ---------------------------------------------------
    def _toggle_show_tree(self) -> None:
        self.config.show_tree = not self.config.show_tree
        self.stdout.write(
            "Showing parse trees.\n" if self.config.show_tree
            else "Not showing parse trees.\n"
        )

    def _clear(self) -> None:
        self.stdout.write("\033[2J\033[H")

    # -- Output ----------------------------------------------------------
    def write_diagnostics(self, diagnostics: Sequence[Diagnostic], line: str) -> None:
        c = self.colors
        for diagnostic in diagnostics:
            self.stdout.write(f"{c.RED}{diagnostic}{c.RESET}\n")
            span = diagnostic.span
            prefix = line[:span.start]
            error = line[span.start:span.end]
            suffix = line[span.end:]
            self.stdout.write(f"    {prefix}{c.RED}{error}{c.RESET}{suffix}\n")
            self.stdout.write(f"    {' ' * span.start}{'^' * max(1, span.length)}\n")

    def write_error(self, error: ArithError) -> None:
        c = self.colors
        self.stdout.write(f"{c.RED}{error.to_gcc_format()}{c.RESET}\n")

    # -- Loop ------------------------------------------------------------
    def run_line(self, line: str) -> bool:
        """Handle one line. Returns ``False`` if it produced diagnostics or an error."""
        command = self._commands.get(line.strip())
        if command is not None:
            command()
            return True

        try:
            compilation = Compilation(parse(line))
            if self.config.show_tree:
                pretty_print(compilation.syntax_tree.root, self.stdout, self.colors)
                pretty_print(compilation.bound_expression, self.stdout, self.colors)
            result = compilation.evaluate()
        except ArithError as exc:
            self.write_error(exc)
            return False

        if not result.ok:
            self.write_diagnostics(result.diagnostics, line)
            return False

        self.stdout.write(f"{result.value}\n")
        return True

    def run(self) -> int:
        while True:
            self.stdout.write(self.config.prompt)
            self.stdout.flush()
            line = self.stdin.readline()
            if not line.strip():
                return 0
            self.run_line(line.rstrip("\n"))
