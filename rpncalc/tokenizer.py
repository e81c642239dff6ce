"""Split RPN source text into per-line groups of tokens.

A Tokenizer is a lazy, restartable view over the text: iterating it scans the
source from the top every time and yields one TokenLine per source line,
blank lines included, so line numbers in error messages stay accurate.
Scanning stops with a LexError at the first token that is neither a number
nor a known operator.
"""

from __future__ import annotations

import re
from typing import Iterator

from rpncalc.errors import LexError
from rpncalc.models import CORE_OPERATORS, OPERATOR_ALIASES, Number, Operator, Token, TokenLine

# Optional leading minus, digits, optional fraction. No exponent, no bare dot.
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?", re.ASCII)
# Runs of anything but spaces/tabs (a stray \r from CRLF input counts as space)
_WORD_RE = re.compile(r"[^ \t\r\f\v]+")
_COMMENT_PREFIX = "#"


class Tokenizer:
    """Restartable token stream over one source text."""

    def __init__(self, text: str, aliases: bool = True, comments: bool = True):
        self.text = text
        self.aliases = aliases
        self.comments = comments

    def __iter__(self) -> Iterator[TokenLine]:
        for lineno, line in self.raw_lines():
            yield self.scan_line(line, lineno)

    def raw_lines(self) -> Iterator[tuple[int, str]]:
        """Yield (lineno, text) for every source line, 1-based."""
        lines = self.text.split("\n")
        # A trailing newline terminates the last line rather than opening a new one
        if len(lines) > 1 and lines[-1] == "":
            lines.pop()
        yield from enumerate(lines, start=1)

    def scan_line(self, line: str, lineno: int) -> TokenLine:
        """Tokenize a single line. Raises LexError on the first bad word."""
        tokens = []
        for match in _WORD_RE.finditer(line):
            word = match.group(0)
            if self.comments and word.startswith(_COMMENT_PREFIX):
                break
            tokens.append(self.classify(word, lineno, match.start() + 1))
        return TokenLine(lineno=lineno, tokens=tuple(tokens))

    def tokens(self) -> Iterator[Token]:
        """Flat token sequence, ignoring line structure."""
        for token_line in self:
            yield from token_line.tokens

    def classify(self, word: str, lineno: int = 1, column: int = 0) -> Token:
        """Turn one whitespace-free word into a Number or an Operator."""
        symbol = CORE_OPERATORS.get(word)
        if symbol is None and self.aliases:
            symbol = OPERATOR_ALIASES.get(word)
        if symbol is not None:
            return Operator(symbol=symbol, text=word, column=column)
        if _NUMBER_RE.fullmatch(word):
            # Literals too long for a double become inf, as float() does
            return Number(value=float(word), text=word, column=column)
        raise LexError(word, lineno, column)


def tokenize(text: str, aliases: bool = True, comments: bool = True) -> Tokenizer:
    """Tokenize `text`. The result can be iterated any number of times."""
    return Tokenizer(text, aliases=aliases, comments=comments)
