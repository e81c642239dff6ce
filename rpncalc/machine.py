"""The stack machine — one numeric stack and the binary operators over it.

Operands are popped b-then-a, so `a b -` computes a - b. A fold applies the
operator left to right across several values (`a b c -` folded is
(a - b) - c). A failing operator leaves the stack exactly as it was.
"""

from __future__ import annotations

import operator
from typing import Callable, Optional

from rpncalc.errors import ArithmeticFault, DivisionByZero, StackUnderflow
from rpncalc.models import OperatorSymbol

_BINARY_OPS: dict[OperatorSymbol, Callable[[float, float], float]] = {
    OperatorSymbol.ADD: operator.add,
    OperatorSymbol.SUBTRACT: operator.sub,
    OperatorSymbol.MULTIPLY: operator.mul,
    OperatorSymbol.DIVIDE: operator.truediv,
    OperatorSymbol.POWER: operator.pow,
}


class StackMachine:
    """Owns a single stack for the lifetime of one evaluation run."""

    def __init__(self) -> None:
        self._stack: list[float] = []

    def __len__(self) -> int:
        return len(self._stack)

    @property
    def depth(self) -> int:
        return len(self._stack)

    def top(self) -> Optional[float]:
        """Current top of the stack, or None when empty."""
        return self._stack[-1] if self._stack else None

    def snapshot(self) -> tuple[float, ...]:
        """Copy of the stack, bottom first."""
        return tuple(self._stack)

    def clear(self) -> None:
        self._stack.clear()

    def push_number(self, n: float) -> None:
        self._stack.append(float(n))

    def apply(self, op: OperatorSymbol) -> float:
        """Pop two operands, push `a op b` and return it.

        Raises:
            StackUnderflow: fewer than two values are on the stack.
            DivisionByZero: '/' with a zero divisor.
            ArithmeticFault: '^' with no finite real result.
        """
        return self.fold(op, 2)

    def fold(self, op: OperatorSymbol, count: int) -> float:
        """Replace the top `count` values (at least two) with their left fold."""
        symbol = OperatorSymbol(op)
        count = max(count, 2)
        if len(self._stack) < count:
            raise StackUnderflow(symbol.value, len(self._stack), needed=count)

        operands = self._stack[-count:]
        result = operands[0]
        for b in operands[1:]:
            result = self._compute(symbol, result, b)

        del self._stack[-count:]
        self._stack.append(result)
        return result

    @staticmethod
    def _compute(symbol: OperatorSymbol, a: float, b: float) -> float:
        if symbol == OperatorSymbol.DIVIDE and b == 0:
            raise DivisionByZero()
        if symbol != OperatorSymbol.POWER:
            # IEEE semantics: overflow gives inf, as float arithmetic does
            return _BINARY_OPS[symbol](a, b)
        try:
            result = a ** b
        except OverflowError:
            raise ArithmeticFault(symbol.value, "result out of range")
        except ZeroDivisionError:
            raise ArithmeticFault(symbol.value, "zero raised to a negative power")
        if isinstance(result, complex):
            raise ArithmeticFault(symbol.value, "result is not a real number")
        return result
