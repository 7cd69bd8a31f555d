"""
Lexical tokens produced by `cssparse.lexer.Lexer`.

Every token owns its text in `raw` and knows where it came from through `span`,
a half-open `(start, end)` range of UTF-8 byte offsets into the original source.
Prefix and suffix characters that only mark the kind of token are stripped from
`raw` (`@` of an at-keyword, `#` of a hash, quotes of a string, `%` of a percentage).

Bracket blocks are flat captures: `(`, `[` and `{` run to the first closer of
the same kind, never counting nesting.
"""
from __future__ import annotations
from typing import Literal

__all__ = [
    "Span",
    "Token",
    "Ident",
    "Function",
    "AtKeyword",
    "Hash",
    "QuotedString",
    "BadString",
    "UnquotedUrl",
    "BadUrl",

    "Delim",
    "Colon",
    "Semicolon",
    "Comma",

    "IncludeMatch",
    "DashMatch",
    "PrefixMatch",
    "SuffixMatch",
    "SubstringMatch",

    "ParenthesisBlock",
    "SquareBracketBlock",
    "CurlyBracketBlock",
    "CloseParenthesis",
    "CloseSquareBracket",
    "CloseCurlyBracket",

    "Number",
    "Percentage",
    "Dimension",

    "ClassSelector",
    "PseudoClassSelector",
    "CustomProperty",
    "Important",

    "Comment",
    "CDC",
    "CDO",
]

Span = tuple[int, int]

class Token:
    raw: str
    span: Span
    def __init__(self, raw: str = '', span: Span = (0, 0)):
        self.raw = raw
        self.span = span

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.raw!r})'

    def __str__(self) -> str:
        return self.raw

    def __eq__(self, other: object) -> bool:
        if type(other) is type(self):
            return self.raw == other.raw and self.span == other.span
        return False

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self.raw, self.span))

class Ident(Token): pass
class Function(Token):
    def __str__(self) -> str:
        return f"{self.raw}("
class AtKeyword(Token):
    def __str__(self) -> str:
        return f"@{self.raw}"
class Hash(Token):
    def __str__(self) -> str:
        return f"#{self.raw}"

class QuotedString(Token):
    def __str__(self) -> str:
        return repr(self.raw)
class BadString(Token): pass
class UnquotedUrl(Token):
    def __str__(self) -> str:
        return f"url({self.raw})"
class BadUrl(Token): pass

class Delim(Token):
    def __init__(self, raw: str, span: Span = (0, 0)):
        if len(raw) > 1:
            raise ValueError("Delimiters may only be one codepoint long")
        super().__init__(raw, span)
    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.raw!r})'

class Colon(Delim): pass
class Semicolon(Delim): pass
class Comma(Delim): pass

class IncludeMatch(Token): pass
class DashMatch(Token): pass
class PrefixMatch(Token): pass
class SuffixMatch(Token): pass
class SubstringMatch(Token): pass

class _Block(Token):
    opening: str
    closing: str

    @property
    def content(self) -> str:
        """The captured text without its outer brackets, trimmed."""
        inner = self.raw
        if inner.startswith(self.opening):
            inner = inner[1:]
        if inner.endswith(self.closing):
            inner = inner[:-1]
        return inner.strip()

    @property
    def content_offset(self) -> int:
        """Absolute byte offset of the first character of `content`."""
        inner = self.raw[1:] if self.raw.startswith(self.opening) else self.raw
        skipped = len(self.raw) - len(inner.lstrip())
        return self.span[0] + len(self.raw[:skipped].encode("utf-8"))

class ParenthesisBlock(_Block):
    opening = '('
    closing = ')'
class SquareBracketBlock(_Block):
    opening = '['
    closing = ']'
class CurlyBracketBlock(_Block):
    opening = '{'
    closing = '}'

class CloseParenthesis(Token): pass
class CloseSquareBracket(Token): pass
class CloseCurlyBracket(Token): pass

class Number(Token):
    type: Literal['integer', 'number']
    def __init__(self, raw: str, span: Span = (0, 0), type: Literal['integer', 'number'] = 'integer'):
        self.type = type
        super().__init__(raw, span)

class Percentage(Number):
    def __repr__(self) -> str:
        return f"Percentage({self.raw!r}%)"

    def __str__(self) -> str:
        return f"{self.raw}%"

class Dimension(Token):
    type: Literal['integer', 'number']
    def __init__(self, number: str, unit: str, span: Span = (0, 0), type: Literal['integer', 'number'] = 'integer'):
        self.number = number
        self.unit = unit
        self.type = type
        super().__init__(number + unit, span)

class ClassSelector(Token): pass
class PseudoClassSelector(Token):
    @property
    def is_element(self) -> bool:
        return self.raw.startswith("::")
class CustomProperty(Token): pass
class Important(Token): pass

class Comment(Token):
    @property
    def text(self) -> str:
        return self.raw.removeprefix("/*").removesuffix("*/")

class CDO(Token): pass
class CDC(Token): pass
