# arith/errors.py
"""
arith Error Types and Diagnostic Reporting

This module provides the error handling infrastructure for the arith
pipeline. Two disjoint classes of problem are modelled:

Reported diagnostics:
─────────────────────
Operator/type mismatches found while binding, and number literals that
do not fit the integer type. They never abort a pass; they are appended
to a ``DiagnosticBag`` and surfaced to the caller as an ordered sequence.

Fatal errors:
─────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│                          Error Hierarchy                                     │
├─────────────────────────────────────────────────────────────────────────────┤
│  ArithError (base)                                                          │
│  ├── ArithSyntaxError  - Text the grammar cannot match                      │
│  ├── EvaluationError   - Execution-time failures (division by zero)         │
│  └── InternalError     - Contract violations (should never happen)          │
└─────────────────────────────────────────────────────────────────────────────┘

Error Codes:
────────────
Each error has a unique code following the pattern ARITH-XXXX, where XXXX
is a 4-digit number in ranges:
  - 0001-0999: Lexical errors
  - 1000-1999: Syntax errors
  - 2000-2999: Semantic errors (operator/type)
  - 5000-5999: Runtime errors
  - 9000-9999: Internal errors

Example Usage:
──────────────
    from arith.errors import DiagnosticBag, TextSpan

    bag = DiagnosticBag()
    bag.report_undefined_unary_operator(TextSpan(0, 1), "-", "bool")

    for diagnostic in bag:
        print(diagnostic.to_gcc_format())
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum, auto, unique
from typing import Any, Iterator, List, Optional


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR SEVERITY AND CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorSeverity(Enum):
    """Severity levels for arith errors and diagnostics."""

    # Errors that stop the pipeline
    FATAL = "fatal"

    # Reported problems that block evaluation
    ERROR = "error"


@unique
class ErrorPhase(Enum):
    """Pipeline phase where the error occurred."""

    LEXICAL = "lexical"        # Number literal conversion
    SYNTAX = "syntax"          # Parsing
    SEMANTIC = "semantic"      # Binding
    RUNTIME = "runtime"        # Evaluation
    INTERNAL = "internal"      # Pipeline internals


@unique
class ErrorCategory(Enum):
    """Fine-grained error categories for filtering and statistics."""

    INVALID_NUMBER = auto()

    UNEXPECTED_TOKEN = auto()

    UNDEFINED_OPERATOR = auto()

    DIVISION_BY_ZERO = auto()
    NESTING_TOO_DEEP = auto()

    UNEXPECTED_NODE = auto()
    INVARIANT_BROKEN = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES
# ═══════════════════════════════════════════════════════════════════════════════

class ErrorCode:
    """
    Structured error codes.

    Error codes follow the pattern ARITH-NNNN; see the module docstring
    for the ranges.
    """

    __slots__ = ("prefix", "number", "category", "phase", "default_severity")

    def __init__(
        self,
        prefix: str,
        number: int,
        category: ErrorCategory,
        phase: ErrorPhase,
        default_severity: ErrorSeverity = ErrorSeverity.ERROR,
    ) -> None:
        self.prefix = prefix
        self.number = number
        self.category = category
        self.phase = phase
        self.default_severity = default_severity

    @property
    def code(self) -> str:
        """Get the full error code string."""
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.category.name})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class ArithErrorCodes:
    """Predefined error codes."""

    # LEXICAL ERRORS (0001-0999)
    INVALID_NUMBER = ErrorCode(
        "ARITH", 1, ErrorCategory.INVALID_NUMBER, ErrorPhase.LEXICAL
    )

    # SYNTAX ERRORS (1000-1999)
    UNEXPECTED_TOKEN = ErrorCode(
        "ARITH", 1001, ErrorCategory.UNEXPECTED_TOKEN, ErrorPhase.SYNTAX,
        ErrorSeverity.FATAL,
    )

    # SEMANTIC ERRORS (2000-2999)
    UNDEFINED_UNARY_OPERATOR = ErrorCode(
        "ARITH", 2001, ErrorCategory.UNDEFINED_OPERATOR, ErrorPhase.SEMANTIC
    )
    UNDEFINED_BINARY_OPERATOR = ErrorCode(
        "ARITH", 2002, ErrorCategory.UNDEFINED_OPERATOR, ErrorPhase.SEMANTIC
    )

    # RUNTIME ERRORS (5000-5999)
    DIVISION_BY_ZERO = ErrorCode(
        "ARITH", 5001, ErrorCategory.DIVISION_BY_ZERO, ErrorPhase.RUNTIME,
        ErrorSeverity.FATAL,
    )
    EXPRESSION_TOO_DEEP = ErrorCode(
        "ARITH", 5002, ErrorCategory.NESTING_TOO_DEEP, ErrorPhase.RUNTIME,
        ErrorSeverity.FATAL,
    )

    # INTERNAL ERRORS (9000-9999)
    UNEXPECTED_NODE = ErrorCode(
        "ARITH", 9001, ErrorCategory.UNEXPECTED_NODE, ErrorPhase.INTERNAL,
        ErrorSeverity.FATAL,
    )
    INVARIANT_BROKEN = ErrorCode(
        "ARITH", 9002, ErrorCategory.INVARIANT_BROKEN, ErrorPhase.INTERNAL,
        ErrorSeverity.FATAL,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# SOURCE LOCATION TYPES
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TextSpan:
    """
    A range of characters within one input line.

    ``start`` is a 0-based offset; ``column`` is the 1-based column used
    when printing.
    """

    start: int = 0
    length: int = 0

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def column(self) -> int:
        return self.start + 1

    @classmethod
    def from_bounds(cls, start: int, end: int) -> "TextSpan":
        return cls(start, end - start)

    @classmethod
    def merge(cls, *spans: "TextSpan") -> "TextSpan":
        """Merge multiple spans into one that covers all of them."""
        if not spans:
            return cls()
        return cls.from_bounds(min(s.start for s in spans), max(s.end for s in spans))

    def __str__(self) -> str:
        return f"{self.column}"


# ═══════════════════════════════════════════════════════════════════════════════
# DIAGNOSTICS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Diagnostic:
    """
    A reported, non-fatal problem.

    ``str(diagnostic)`` is the bare message, which is what callers display
    by default; ``to_gcc_format`` adds code, severity and location.
    """

    code: ErrorCode
    message: str
    span: TextSpan = TextSpan()
    severity: ErrorSeverity = ErrorSeverity.ERROR

    def __str__(self) -> str:
        return self.message

    def to_gcc_format(self, source_line: str = "", filename: str = "<input>") -> str:
        """Format as a GCC-style message, with a caret line when the source is known."""
        lines = [
            f"{filename}:{self.span.column}: {self.severity.value}: "
            f"{self.message} [{self.code}]"
        ]
        if source_line:
            lines.append(f"    {source_line}")
            lines.append(f"    {' ' * self.span.start}{'^' * max(1, self.span.length)}")
        return "\n".join(lines)


class DiagnosticBag:
    """
    Append-only accumulator for the diagnostics of one pass.

    Order is append order; nothing is deduplicated. A bag belongs to a
    single pass and is never reset, so a new pass needs a new bag.
    """

    def __init__(self) -> None:
        self._diagnostics: List[Diagnostic] = []

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __bool__(self) -> bool:
        return bool(self._diagnostics)

    def to_tuple(self) -> tuple:
        return tuple(self._diagnostics)

    def _report(self, code: ErrorCode, span: TextSpan, message: str) -> Diagnostic:
        diagnostic = Diagnostic(
            code=code,
            message=message,
            span=span,
            severity=code.default_severity,
        )
        self._diagnostics.append(diagnostic)
        return diagnostic

    def report_invalid_number(self, span: TextSpan, text: str) -> Diagnostic:
        return self._report(
            ArithErrorCodes.INVALID_NUMBER,
            span,
            f"The number {text} isn't a valid int32",
        )

    def report_undefined_unary_operator(
        self, span: TextSpan, operator_text: str, operand_type: Any
    ) -> Diagnostic:
        return self._report(
            ArithErrorCodes.UNDEFINED_UNARY_OPERATOR,
            span,
            f"Unary operator '{operator_text}' is not defined for type {operand_type}",
        )

    def report_undefined_binary_operator(
        self, span: TextSpan, operator_text: str, left_type: Any, right_type: Any
    ) -> Diagnostic:
        return self._report(
            ArithErrorCodes.UNDEFINED_BINARY_OPERATOR,
            span,
            f"Binary operator '{operator_text}' is not defined for type "
            f"{left_type} and {right_type}",
        )


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class ArithError(Exception):
    """
    Base exception for all fatal arith errors.

    Carries a structured code, a severity and an optional span so the
    front end can print it the same way it prints diagnostics.
    """

    default_code: ErrorCode = ArithErrorCodes.UNEXPECTED_NODE

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        span: Optional[TextSpan] = None,
        severity: Optional[ErrorSeverity] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.span = span
        self.severity = severity or self.code.default_severity

    def to_gcc_format(self) -> str:
        location = f"{self.span}: " if self.span is not None else ""
        return f"{location}{self.severity.value}: {self.message} [{self.code}]"

    def __str__(self) -> str:
        return self.message


class ArithSyntaxError(ArithError):
    """Input text that the grammar cannot match."""

    default_code = ArithErrorCodes.UNEXPECTED_TOKEN

    def __init__(
        self,
        message: str,
        span: Optional[TextSpan] = None,
        text: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, span=span, **kwargs)
        self.text = text


class EvaluationError(ArithError):
    """Error raised while evaluating a bound tree."""

    default_code = ArithErrorCodes.DIVISION_BY_ZERO


class InternalError(ArithError):
    """A pipeline contract was violated; this is a bug in the caller or in arith."""

    default_code = ArithErrorCodes.UNEXPECTED_NODE


# ═══════════════════════════════════════════════════════════════════════════════
# RECURSION LIMIT
# ═══════════════════════════════════════════════════════════════════════════════

@contextmanager
def nesting_limit() -> Iterator[None]:
    """
    Report interpreter stack exhaustion as a fatal ``EvaluationError``.

    Parsing, binding, evaluation and tree printing all recurse over the
    tree, so a long operator chain or deeply nested parentheses can run
    out of stack in any of them.
    """
    try:
        yield
    except RecursionError as exc:
        raise EvaluationError(
            "Expression is nested too deeply",
            code=ArithErrorCodes.EXPRESSION_TOO_DEEP,
        ) from exc
