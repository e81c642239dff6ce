"""CLI for the rpncalc RPN evaluator.

Usage:
    python -m rpncalc run prog.rpn                  # One result per line
    python -m rpncalc run a.rpn b.rpn               # Each file gets its own stack
    python -m rpncalc run prog.rpn --on-error reset # Report, clear stack, keep going
    python -m rpncalc run prog.rpn --trace          # Show the stack after every token
    python -m rpncalc run prog.rpn --json           # Machine-readable summary
    python -m rpncalc tokens prog.rpn               # Show how the source tokenizes
    python -m rpncalc eval "5 12 66 *" "15 -"       # Arguments as successive lines
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from rpncalc.display import print_error, print_header, print_result, print_step, render_tokens
from rpncalc.errors import LexError, RpnError
from rpncalc.evaluator import ErrorPolicy, LineEvaluator
from rpncalc.models import RunSummary
from rpncalc.settings import Settings, load_settings
from rpncalc.tokenizer import Tokenizer

app = typer.Typer(
    name="rpncalc",
    help="Evaluate Reverse Polish Notation files with a stack shared across lines",
    no_args_is_help=True,
)

EXIT_EVAL_ERROR = 1
EXIT_USAGE_ERROR = 2


def _settings(on_error: Optional[str], no_aliases: bool, err: Console) -> Settings:
    """Load environment settings, then apply command-line overrides."""
    try:
        settings = load_settings()
    except ValueError as e:
        err.print(f"[red]Invalid configuration:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(EXIT_USAGE_ERROR)

    if on_error:
        try:
            settings.on_error = ErrorPolicy(on_error.lower())
        except ValueError:
            err.print(f"[red]Invalid --on-error: {escape(on_error)}[/red]. Choose: halt, reset")
            raise typer.Exit(EXIT_USAGE_ERROR)
    if no_aliases:
        settings.aliases = False
    return settings


def _consoles(settings: Settings) -> tuple[Console, Console]:
    """(stdout console for results, stderr console for diagnostics)."""
    return Console(no_color=settings.no_color), Console(stderr=True, no_color=settings.no_color)


def _read_source(path: str) -> str:
    """Read a program file; '-' means stdin."""
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _evaluate_file(
    name: str,
    text: str,
    settings: Settings,
    out: Console,
    err: Console,
    trace: bool,
    as_json: bool,
) -> RunSummary:
    """Evaluate one file with a fresh evaluator, streaming output as it goes."""
    def on_step(lineno, token, stack) -> None:
        print_step(lineno, token, stack, err)

    evaluator = LineEvaluator(
        policy=settings.on_error,
        aliases=settings.aliases,
        comments=settings.comments,
        on_step=on_step if trace else None,
    )
    summary = RunSummary(source=name)
    for outcome in evaluator.evaluate(text):
        if isinstance(outcome, RpnError):
            summary.errors.append(outcome)
            if not as_json:
                print_error(outcome, err, source=name)
        else:
            summary.results.append(outcome)
            if not as_json:
                print_result(outcome, out)
    summary.final_depth = evaluator.machine.depth

    if as_json:
        out.print(json.dumps(summary.to_dict()), markup=False, highlight=False, emoji=False, soft_wrap=True)
    return summary


@app.command("run")
def cmd_run(
    files: list[str] = typer.Argument(help="Program files to evaluate ('-' for stdin)"),
    on_error: Optional[str] = typer.Option(None, "--on-error", "-e", help="After an error: halt (default) or reset"),
    trace: bool = typer.Option(False, "--trace", "-t", help="Print every token and the stack after it to stderr"),
    as_json: bool = typer.Option(False, "--json", help="Print one JSON summary per file instead of plain results"),
    no_aliases: bool = typer.Option(False, "--no-aliases", help="Only accept the symbols + - * /"),
) -> None:
    """Evaluate one or more RPN files, printing each line's result."""
    settings = _settings(on_error, no_aliases, Console(stderr=True))
    out, err = _consoles(settings)

    failed = False
    for path in files:
        name = "<stdin>" if path == "-" else path
        try:
            text = _read_source(path)
        except (OSError, UnicodeDecodeError) as e:
            err.print(f"[red]Error:[/red] cannot read {escape(name)}: {escape(str(e))}", soft_wrap=True)
            raise typer.Exit(EXIT_USAGE_ERROR)

        if len(files) > 1 and not as_json:
            print_header(name, out)
        summary = _evaluate_file(name, text, settings, out, err, trace, as_json)
        if not summary.ok:
            failed = True

    if failed:
        raise typer.Exit(EXIT_EVAL_ERROR)


@app.command("eval")
def cmd_eval(
    lines: list[str] = typer.Argument(help="Lines of RPN, evaluated in order on one stack"),
    on_error: Optional[str] = typer.Option(None, "--on-error", "-e", help="After an error: halt (default) or reset"),
    trace: bool = typer.Option(False, "--trace", "-t", help="Print every token and the stack after it to stderr"),
) -> None:
    """Evaluate command-line arguments as successive lines of one run."""
    settings = _settings(on_error, False, Console(stderr=True))
    out, err = _consoles(settings)

    summary = _evaluate_file("", "\n".join(lines), settings, out, err, trace, as_json=False)
    if not summary.ok:
        raise typer.Exit(EXIT_EVAL_ERROR)


@app.command("tokens")
def cmd_tokens(
    file: str = typer.Argument(help="Program file to tokenize ('-' for stdin)"),
    no_aliases: bool = typer.Option(False, "--no-aliases", help="Only accept the symbols + - * /"),
) -> None:
    """Show the token stream for a file."""
    settings = _settings(None, no_aliases, Console(stderr=True))
    out, err = _consoles(settings)

    name = "<stdin>" if file == "-" else file
    try:
        text = _read_source(file)
    except (OSError, UnicodeDecodeError) as e:
        err.print(f"[red]Error:[/red] cannot read {escape(name)}: {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(EXIT_USAGE_ERROR)

    tokenizer = Tokenizer(text, aliases=settings.aliases, comments=settings.comments)
    token_lines = []
    try:
        for token_line in tokenizer:
            token_lines.append(token_line)
    except LexError as e:
        render_tokens(token_lines, out, title=name)
        print_error(e, err, source=name)
        raise typer.Exit(EXIT_EVAL_ERROR)

    render_tokens(token_lines, out, title=name)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
