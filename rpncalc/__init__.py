"""rpncalc — Reverse Polish Notation calculator with a stack shared across lines.

Each line of a program is a run of numbers and operators. The stack survives
from one line to the next, so a line can build on what earlier lines left,
and the top of the stack is reported as that line's result.

Usage:
    python -m rpncalc run prog.rpn          # One result per line
    python -m rpncalc eval "5 12 *" "3 +"   # Arguments as lines
    python -m rpncalc tokens prog.rpn       # Inspect tokenization
"""

from rpncalc.errors import ArithmeticFault, DivisionByZero, ErrorKind, LexError, RpnError, StackUnderflow
from rpncalc.evaluator import ErrorPolicy, EvaluatorState, LineEvaluator, evaluate_lines
from rpncalc.machine import StackMachine
from rpncalc.models import EvaluationResult, Number, Operator, OperatorSymbol, RunSummary, TokenLine
from rpncalc.tokenizer import Tokenizer, tokenize

__all__ = [
    "ArithmeticFault",
    "DivisionByZero",
    "ErrorKind",
    "ErrorPolicy",
    "EvaluationResult",
    "EvaluatorState",
    "LexError",
    "LineEvaluator",
    "Number",
    "Operator",
    "OperatorSymbol",
    "RpnError",
    "RunSummary",
    "StackMachine",
    "StackUnderflow",
    "TokenLine",
    "Tokenizer",
    "evaluate_lines",
    "tokenize",
]
