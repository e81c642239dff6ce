"""Error kinds reported by the tokenizer, the stack machine and the evaluator.

Every error is a structured value: a kind, the 1-based line it happened on
and a human-readable message. The evaluator reports them instead of raising
them out of a run, so callers get the results produced before the failure.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Exhaustive list of ways a run can fail."""

    LEX = "lex-error"
    STACK_UNDERFLOW = "stack-underflow"
    DIVISION_BY_ZERO = "division-by-zero"
    ARITHMETIC = "arithmetic-fault"


class RpnError(Exception):
    """Base class for all evaluation errors."""

    kind: ErrorKind

    def __init__(self, message: str, lineno: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.lineno = lineno

    def with_line(self, lineno: int) -> RpnError:
        """Tag the error with the line being evaluated, if not already set."""
        if self.lineno is None:
            self.lineno = lineno
        return self

    def details(self) -> dict:
        """Kind-specific context, merged into to_dict()."""
        return {}

    def to_dict(self) -> dict:
        """Converts the error to a dictionary for serialization."""
        d = {
            "kind": self.kind.value,
            "line": self.lineno,
            "message": self.message,
        }
        d.update(self.details())
        return d

    def __str__(self) -> str:
        if self.lineno is not None:
            return f"{self.kind.value}: {self.message} [Line {self.lineno}]"
        return f"{self.kind.value}: {self.message}"


class LexError(RpnError):
    """A token that is neither a number nor a known operator."""

    kind = ErrorKind.LEX

    def __init__(self, text: str, lineno: int, column: int = 0):
        super().__init__(f"unrecognized symbol {text!r}", lineno)
        self.text = text
        self.column = column

    def details(self) -> dict:
        return {"text": self.text, "column": self.column}


class StackUnderflow(RpnError):
    """An operator was applied with fewer values on the stack than it needs."""

    kind = ErrorKind.STACK_UNDERFLOW

    def __init__(self, operator: str, available: int, lineno: Optional[int] = None, needed: int = 2):
        noun = "value" if available == 1 else "values"
        super().__init__(
            f"operator {operator!r} needs {needed} operands, {available} {noun} on the stack",
            lineno,
        )
        self.operator = operator
        self.available = available
        self.needed = needed

    def details(self) -> dict:
        return {"operator": self.operator, "available": self.available}


class DivisionByZero(RpnError):
    """'/' applied with a zero divisor."""

    kind = ErrorKind.DIVISION_BY_ZERO

    def __init__(self, lineno: Optional[int] = None):
        super().__init__("division by zero", lineno)


class ArithmeticFault(RpnError):
    """An operator produced a value that is not a finite real number."""

    kind = ErrorKind.ARITHMETIC

    def __init__(self, operator: str, detail: str, lineno: Optional[int] = None):
        super().__init__(f"operator {operator!r}: {detail}", lineno)
        self.operator = operator
        self.detail = detail

    def details(self) -> dict:
        return {"operator": self.operator, "detail": self.detail}
