#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
arith/__main__.py
=================

Entry point for the arith expression evaluator.

Usage
-----
    python -m arith [options] [<command>] ...

Commands
--------
    repl        Interactive loop (default when no command is given)
    eval        Evaluate each expression given on the command line
    tree        Print the syntax and bound trees of an expression

Pipeline
--------
    text
      │
      ▼
    ┌──────────┐
    │  Parser   │   parsimonious PEG → syntax tree
    └────┬─────┘
         ▼
    ┌──────────┐
    │  Binder   │   operator resolution, diagnostics
    └────┬─────┘
         ▼  (only when there are no diagnostics)
    ┌───────────┐
    │ Evaluator │   value
    └───────────┘
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap
import traceback
from typing import Optional, Sequence

from arith import __version__
from arith.compilation import Compilation
from arith.errors import ArithError, ArithSyntaxError, EvaluationError
from arith.parser import parse
from arith.printer import get_colors, pretty_print
from arith.repl import Repl, ReplConfig

_log = logging.getLogger("arith")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_DIAGNOSTICS: int = 1
EXIT_INTERNAL: int = 2
EXIT_FATAL: int = 3


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the root ``arith`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("arith")
    root.setLevel(level)
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(handler)


def _make_repl(args: argparse.Namespace) -> Repl:
    color = not args.no_color and get_colors(sys.stdout).enabled
    config = ReplConfig(show_tree=getattr(args, "show_tree", False), color=color)
    return Repl(config=config, stdin=sys.stdin, stdout=sys.stdout)


# ===========================================================================
# Commands
# ===========================================================================

def cmd_repl(args: argparse.Namespace) -> int:
    return _make_repl(args).run()


def cmd_eval(args: argparse.Namespace) -> int:
    repl = _make_repl(args)
    status = EXIT_OK
    for text in args.expressions:
        try:
            compilation = Compilation(parse(text))
            result = compilation.evaluate()
        except ArithSyntaxError as exc:
            repl.write_error(exc)
            status = max(status, EXIT_DIAGNOSTICS)
            continue
        except EvaluationError as exc:
            repl.write_error(exc)
            status = EXIT_FATAL
            continue

        if result.ok:
            sys.stdout.write(f"{result.value}\n")
        else:
            repl.write_diagnostics(result.diagnostics, text)
            status = max(status, EXIT_DIAGNOSTICS)
    return status


def cmd_tree(args: argparse.Namespace) -> int:
    repl = _make_repl(args)
    try:
        compilation = Compilation(parse(args.expression))
        pretty_print(compilation.syntax_tree.root, sys.stdout, repl.colors)
        pretty_print(compilation.bound_expression, sys.stdout, repl.colors)
    except ArithSyntaxError as exc:
        repl.write_error(exc)
        return EXIT_DIAGNOSTICS
    except EvaluationError as exc:
        repl.write_error(exc)
        return EXIT_FATAL
    if compilation.diagnostics:
        repl.write_diagnostics(compilation.diagnostics, args.expression)
        return EXIT_DIAGNOSTICS
    return EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the arith CLI."""
    parser = argparse.ArgumentParser(
        prog="arith",
        description="Bind and evaluate small arithmetic expressions.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              %(prog)s
              %(prog)s eval "1 + 2" "-5 * 2"
              %(prog)s tree "1 + true"
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (repeatable)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Disable colored output",
    )
    parser.set_defaults(func=cmd_repl)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    p_repl = subparsers.add_parser("repl", help="Start the interactive loop")
    p_repl.add_argument(
        "--show-tree",
        action="store_true",
        default=False,
        help="Print syntax and bound trees for every line",
    )
    p_repl.set_defaults(func=cmd_repl)

    p_eval = subparsers.add_parser("eval", help="Evaluate expressions and exit")
    p_eval.add_argument("expressions", nargs="+", metavar="EXPR")
    p_eval.set_defaults(func=cmd_eval)

    p_tree = subparsers.add_parser("tree", help="Print the trees of an expression")
    p_tree.add_argument("expression", metavar="EXPR")
    p_tree.set_defaults(func=cmd_tree)

    return parser


# ===========================================================================
# MAIN
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the arith CLI.

    Returns
    -------
    int
        Exit code (0 = success, non-zero = failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    _log.debug("command: %s", args.command or "repl")

    try:
        return args.func(args)
    except KeyboardInterrupt:
        sys.stderr.write("\nInterrupted.\n")
        return 130
    except ArithError as exc:
        colors = get_colors(sys.stderr)
        sys.stderr.write(
            f"{colors.RED}Internal error:{colors.RESET} {exc.to_gcc_format()}\n"
        )
        traceback.print_exc()
        return EXIT_INTERNAL


if __name__ == "__main__":
    sys.exit(main())
