"""Error types raised while tokenizing and parsing CSS."""

from __future__ import annotations

from cssparse.tokens import Span

__all__ = [
    "CSSParseError",
    "LexError",
    "UnexpectedToken",
    "UnterminatedConstruct",
    "InvalidArity",
    "NumberFormat",
    "NestingTooDeep",
]


class CSSParseError(Exception):
    """Base class for every tokenizer and parser error.

    `span` is a half-open `(start, end)` range of UTF-8 byte offsets into the
    source the parse started from. When that source is given, `line` and
    `column` are the 1-based position of `span[0]`, the column counted in
    characters.
    """

    def __init__(self, message: str, span: Span, source: str | None = None):
        self.message = message
        self.span = span
        self.line: int | None = None
        self.column: int | None = None
        if source is not None:
            self.line, self.column = _locate(source, span[0])
        super().__init__(message)

    def __str__(self) -> str:
        if self.line is not None:
            return f"{self.message} (line {self.line}, column {self.column})"
        return f"{self.message} (at {self.span[0]}..{self.span[1]})"


class LexError(CSSParseError):
    """Raised for a character sequence no token rule accepts."""

    def __init__(self, message: str, span: Span, text: str, source: str | None = None):
        self.text = text
        super().__init__(message, span, source)


class UnexpectedToken(CSSParseError):
    """A token that is not valid at the current grammar position."""


class UnterminatedConstruct(CSSParseError):
    """Input ran out inside a function call or at-rule."""


class InvalidArity(CSSParseError):
    """Wrong number of arguments for a fixed-arity function such as `rgb()`."""


class NumberFormat(CSSParseError):
    """Numeric token text that cannot be converted to the required number."""


class NestingTooDeep(CSSParseError):
    """Blocks nested deeper than `ParserConfig.max_depth`."""


def _locate(source: str, offset: int) -> tuple[int, int]:
    """1-based line and column (in characters) of the byte `offset`."""
    prefix = source.encode("utf-8")[:max(0, offset)].decode("utf-8", "ignore")
    line = prefix.count("\n") + 1
    column = len(prefix) - (prefix.rfind("\n") + 1) + 1
    return line, column
