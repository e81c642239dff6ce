"""Rendering for rpncalc — result lines, error reports, token tables, traces.

Results go to the stdout console as bare numbers so they can be piped;
everything diagnostic goes to the stderr console with Rich markup.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rpncalc.errors import LexError, RpnError
from rpncalc.models import EvaluationResult, Number, Token, TokenLine, format_number

_KIND_STYLES = {
    "number": "cyan",
    "operator": "magenta",
}


def print_result(result: EvaluationResult, out: Console) -> None:
    """Print one line's result as a plain number."""
    out.print(str(result), markup=False, highlight=False, emoji=False, soft_wrap=True)


def print_error(error: RpnError, console: Console, source: str = "") -> None:
    """Report an evaluation error with its location."""
    where = f"{escape(source)}:" if source else ""
    if error.lineno is not None:
        where += f"{error.lineno}:"
        if isinstance(error, LexError) and error.column:
            where += f"{error.column}:"
    prefix = f"{where} " if where else ""
    console.print(
        f"{prefix}[red]Error:[/red] {escape(error.message)} [dim]({error.kind.value})[/dim]",
        soft_wrap=True,
    )


def print_header(name: str, out: Console) -> None:
    """Separator printed before each file when several are evaluated."""
    out.print(f"==> {name} <==", markup=False, highlight=False, emoji=False, soft_wrap=True)


def _fmt_stack(stack: tuple) -> str:
    if not stack:
        return "[]"
    return "[" + " ".join(format_number(v) for v in stack) + "]"


def print_step(lineno: int, token: Token, stack: tuple, console: Console) -> None:
    """One --trace line: where we are, what was consumed, what the stack holds."""
    text = token.text or (format_number(token.value) if isinstance(token, Number) else token.symbol.value)
    console.print(
        f"[dim]{lineno:>4}:{token.column:<3} {escape(text):<8} {escape(_fmt_stack(stack))}[/dim]",
        highlight=False,
    )


def render_tokens(token_lines: list[TokenLine], console: Console, title: str = "Tokens") -> None:
    """Render a Rich table of every token with its position."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Line", justify="right", style="dim")
    table.add_column("Col", justify="right", style="dim")
    table.add_column("Kind", min_width=8)
    table.add_column("Text")
    table.add_column("Value", justify="right")

    for token_line in token_lines:
        for token in token_line.tokens:
            if isinstance(token, Number):
                kind, value = "number", format_number(token.value)
            else:
                kind, value = "operator", token.symbol.value
            style = _KIND_STYLES[kind]
            table.add_row(
                str(token_line.lineno),
                str(token.column),
                f"[{style}]{kind}[/{style}]",
                escape(token.text),
                escape(value),
            )

    console.print()
    console.print(table)
    console.print()
