"""Data models for the rpncalc evaluator.

OperatorSymbol enum, Number/Operator tokens, TokenLine, EvaluationResult,
RunSummary — all the typed structures that flow through
tokenizer → machine → evaluator → CLI.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from rpncalc.errors import RpnError


class OperatorSymbol(str, Enum):
    """Binary operators understood by the stack machine."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    POWER = "^"


CORE_OPERATORS = {
    "+": OperatorSymbol.ADD,
    "-": OperatorSymbol.SUBTRACT,
    "*": OperatorSymbol.MULTIPLY,
    "/": OperatorSymbol.DIVIDE,
}

# Alternate spellings, accepted unless aliases are switched off.
OPERATOR_ALIASES = {
    "plus": OperatorSymbol.ADD,
    "add": OperatorSymbol.ADD,
    "minus": OperatorSymbol.SUBTRACT,
    "subtract": OperatorSymbol.SUBTRACT,
    "x": OperatorSymbol.MULTIPLY,
    "times": OperatorSymbol.MULTIPLY,
    "multiply": OperatorSymbol.MULTIPLY,
    "divide": OperatorSymbol.DIVIDE,
    "^": OperatorSymbol.POWER,
    "**": OperatorSymbol.POWER,
    "power": OperatorSymbol.POWER,
}


@dataclass(frozen=True)
class Number:
    """A numeric literal."""

    value: float
    text: str = ""
    column: int = 0


@dataclass(frozen=True)
class Operator:
    """An operator token; `text` keeps the spelling used in the source."""

    symbol: OperatorSymbol
    text: str = ""
    column: int = 0


Token = Union[Number, Operator]


@dataclass(frozen=True)
class TokenLine:
    """All tokens of one source line. Blank and comment lines have none."""

    lineno: int
    tokens: tuple[Token, ...] = ()

    @property
    def is_blank(self) -> bool:
        return not self.tokens


# Beyond 2**53 a double no longer holds every integer exactly
_EXACT_INT_LIMIT = 2.0 ** 53


def format_number(value: float) -> str:
    """Render a value the way results are displayed.

    Exactly representable integers print without the trailing '.0' (3960,
    not 3960.0); anything larger or fractional uses repr (1e+100).
    """
    if math.isfinite(value) and abs(value) < _EXACT_INT_LIMIT and value == int(value):
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class EvaluationResult:
    """Top of the stack after a line finished without error."""

    lineno: int
    value: float
    source: str = ""

    def __str__(self) -> str:
        return format_number(self.value)

    def to_dict(self) -> dict:
        return {"line": self.lineno, "value": self.value}


@dataclass
class RunSummary:
    """Everything one evaluation run reported, in order."""

    source: str
    results: list[EvaluationResult] = field(default_factory=list)
    errors: list[RpnError] = field(default_factory=list)
    final_depth: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def error(self) -> Optional[RpnError]:
        """The first reported error (the halting one under the default policy)."""
        return self.errors[0] if self.errors else None

    @property
    def values(self) -> list[float]:
        return [r.value for r in self.results]

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "source": self.source,
            "ok": self.ok,
            "results": [r.to_dict() for r in self.results],
            "errors": [e.to_dict() for e in self.errors],
            "final_depth": self.final_depth,
        }
