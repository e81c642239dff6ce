"""Line evaluator — drives the stack machine one source line at a time.

Data flow per run:
1. Split the source into lines (tokenizer)
2. Feed each line's tokens to the stack machine in order
3. After a clean line, report the top of the stack as that line's result
4. On the first error, report it tagged with its line number and halt

The stack is created once per evaluator and is never reset between lines,
so a line can keep working on whatever earlier lines left behind.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable, Iterator, Optional, Union

from rpncalc.errors import RpnError
from rpncalc.machine import StackMachine
from rpncalc.models import EvaluationResult, Number, RunSummary, Token, TokenLine
from rpncalc.tokenizer import Tokenizer

Outcome = Union[EvaluationResult, RpnError]
StepHook = Callable[[int, Token, tuple], None]


class ErrorPolicy(str, Enum):
    """What happens after a line fails."""

    HALT = "halt"
    RESET = "reset"  # report, clear the stack, carry on with the next line


class EvaluatorState(str, Enum):
    RUNNING = "running"
    HALTED = "halted"


class LineEvaluator:
    """One evaluation run: one stack, one pass over the source.

    Args:
        policy: ErrorPolicy.HALT stops at the first error, ErrorPolicy.RESET
            reports it, empties the stack and moves on to the next line.
        aliases: Accept word spellings of operators ('plus', 'times', ...).
        comments: Treat words starting with '#' as the start of a comment.
        on_step: Called after every token with (lineno, token, stack snapshot).
    """

    def __init__(
        self,
        policy: ErrorPolicy = ErrorPolicy.HALT,
        aliases: bool = True,
        comments: bool = True,
        on_step: Optional[StepHook] = None,
    ):
        self.policy = ErrorPolicy(policy)
        self.aliases = aliases
        self.comments = comments
        self.on_step = on_step
        self.machine = StackMachine()
        self.state = EvaluatorState.RUNNING
        self.error: Optional[RpnError] = None

    @property
    def halted(self) -> bool:
        return self.state == EvaluatorState.HALTED

    def evaluate(self, source: Union[str, Tokenizer]) -> Iterator[Outcome]:
        """Evaluate `source`, yielding results and errors as they happen.

        Lines are tokenized lazily, so everything before a bad word is still
        evaluated and reported.
        """
        if isinstance(source, Tokenizer):
            tokenizer = source
        else:
            tokenizer = Tokenizer(source, aliases=self.aliases, comments=self.comments)

        for lineno, line in tokenizer.raw_lines():
            if self.halted:
                return
            try:
                token_line = tokenizer.scan_line(line, lineno)
                result = self.feed_line(token_line, source=line)
            except RpnError as e:
                yield self._fail(e.with_line(lineno))
                continue
            if result is not None:
                yield result

    def feed_line(self, token_line: TokenLine, source: str = "") -> Optional[EvaluationResult]:
        """Run one line's tokens through the machine.

        An operator ending the line folds every value the line added into
        the value carried over from earlier lines, so `5 12 66 *` gives 3960
        and a following `15 -` gives 3945. Operators elsewhere in the line
        take exactly two operands.

        Returns the line's result, or None for a blank or comment line and
        for a line that leaves the stack empty. Errors propagate to the
        caller untagged by line.
        """
        if token_line.is_blank:
            return None

        start_depth = self.machine.depth
        last = len(token_line.tokens) - 1
        for i, token in enumerate(token_line.tokens):
            if isinstance(token, Number):
                self.machine.push_number(token.value)
            elif i == last:
                added = self.machine.depth - start_depth
                self.machine.fold(token.symbol, min(added + 1, self.machine.depth))
            else:
                self.machine.apply(token.symbol)
            if self.on_step:
                self.on_step(token_line.lineno, token, self.machine.snapshot())

        top = self.machine.top()
        if top is None:
            return None
        return EvaluationResult(lineno=token_line.lineno, value=top, source=source.strip())

    def _fail(self, error: RpnError) -> RpnError:
        if self.policy == ErrorPolicy.RESET:
            self.machine.clear()
        else:
            self.state = EvaluatorState.HALTED
            self.error = error
        return error

    def run(self, source: Union[str, Tokenizer], name: str = "") -> RunSummary:
        """Evaluate `source` to completion and collect everything reported."""
        summary = RunSummary(source=name)
        for outcome in self.evaluate(source):
            if isinstance(outcome, RpnError):
                summary.errors.append(outcome)
            else:
                summary.results.append(outcome)
        summary.final_depth = self.machine.depth
        return summary


def evaluate_lines(lines: Iterable[str], **kwargs) -> list[float]:
    """Evaluate `lines` as one run and return the per-line results.

    Raises the halting error, if any.
    """
    summary = LineEvaluator(**kwargs).run("\n".join(lines))
    if summary.error is not None:
        raise summary.error
    return summary.values
