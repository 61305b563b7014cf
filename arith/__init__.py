"""arith — binder and evaluator for a small arithmetic expression language.

Submodules
----------
syntax
    Untyped syntax tree: ``SyntaxKind``, ``SyntaxToken`` and the literal,
    unary and binary expression nodes.

parser
    parsimonious PEG grammar turning one line of text into a
    ``SyntaxTree``.

binding
    ``Binder`` / ``bind_expression``: operator resolution by operand type,
    the bound tree, and the operator tables.

evaluator
    ``Evaluator`` / ``evaluate``: computes the value of a bound tree.

compilation
    ``Compilation`` / ``evaluate_text``: parse → bind → evaluate, with
    evaluation gated on an empty diagnostic list.

errors
    ``ErrorCode`` (``ARITH-XXXX``), ``Diagnostic``, ``DiagnosticBag`` and the
    ``ArithError`` exception hierarchy.

printer, repl
    Tree dumps and the interactive front end.

Usage
-----
Command-line::

    python -m arith
    python -m arith eval "1 + 2"

Programmatic::

    from arith.parser import parse
    from arith.binding import bind_expression
    from arith.evaluator import evaluate

    result = bind_expression(parse("-5 * 2").root)
    if not result.diagnostics:
        print(evaluate(result.expression))

"""

from __future__ import annotations

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "binding",
    "compilation",
    "errors",
    "evaluator",
    "parser",
    "syntax",
]
