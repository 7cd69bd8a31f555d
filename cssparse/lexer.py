""" CSS LEXING
https://www.w3.org/TR/css-syntax-3/#tokenization

The lexer is a cursor over an immutable source string. Each call to
`Lexer.next_token` skips whitespace and returns one of:

    Token     the next token, with its span
    LexError  an unrecognised character sequence (returned, never raised)
    None      end of input

Rules are tried in priority order on the first code point, with a small amount
of lookahead and no backtracking across tokens:

    /*       | comment
    " '      | string
    #        | hash
    + - . 0-9| number, percentage, dimension
    --       | custom property, `-->`
    .        | class selector
    @        | at-keyword
    : ::     | pseudo-class / pseudo-element, else colon
    ~= |= ...| attribute match operators
    !        | !important
    keyword  | ident, function, url
    ( [ {    | flat bracket block
"""

from __future__ import annotations
import logging
from bisect import bisect_left
from itertools import accumulate
from cssparse.errors import LexError
from cssparse.tokens import *

logger = logging.getLogger(__name__)

WHITESPACE = " \t\r\n\f"

class Check:
    @staticmethod
    def letter(current: str | None) -> bool:
        return current is not None and current.isalpha()

    @staticmethod
    def non_ascii(current: str | None) -> bool:
        return current is not None and ord(current) >= ord('\u0080')

    @staticmethod
    def ident_start(current: str | None) -> bool:
        return current is not None and (Check.letter(current) or Check.non_ascii(current) or current == "_")

    @staticmethod
    def digit(current: str | None) -> bool:
        return current is not None and current in "0123456789"

    @staticmethod
    def whitespace(current: str | None) -> bool:
        return current is not None and current in WHITESPACE

    @staticmethod
    def hex(current: str | None) -> bool:
        return current is not None and current in '0123456789abcdefABCDEF'

    @staticmethod
    def ident(current: str | None) -> bool:
        return current is not None and (Check.ident_start(current) or Check.digit(current) or current == "-")

    @staticmethod
    def escape(current: str | None, next: str | None) -> bool:
        return current == "\\" and next is not None and next != "\n"

    @staticmethod
    def non_printable(current: str | None) -> bool:
        if current is None:
            return False
        o = ord(current)
        return o <= 0x08 or o == 0x0B or 0x0E <= o <= 0x1F or o == 0x7F

    @staticmethod
    def starts_with_ident(first: str | None, second: str | None, third: str | None) -> bool:
        if Check.ident_start(first):
            return True
        elif first == "-":
            return Check.ident_start(second) or second == "-" or Check.escape(second, third)
        elif first == "\\":
            return Check.escape(first, second)
        return False

    @staticmethod
    def starts_with_number(first: str | None, second: str | None, third: str | None) -> bool:
        if first is not None and first in "+-":
            if Check.digit(second):
                return True
            elif second == "." and Check.digit(third):
                return True
            return False
        elif first == ".":
            return Check.digit(second)
        return Check.digit(first)


class Lexer:
    """Cursor over `source`.

    Spans are UTF-8 byte offsets. `offset` is the byte position of `source[0]`
    inside the text the parse started from, so spans stay meaningful when a
    block's contents are lexed on their own. `root` is that original text,
    used to give lex errors a line and column.
    """

    def __init__(self, source: str, offset: int = 0, root: str | None = None) -> None:
        self.source = source
        self.offset = offset
        self.root = root if root is not None else (source if offset == 0 else None)
        self.index = 0
        self.errors: list[LexError] = []
        # Byte offset of every code point boundary; None when bytes and code points agree.
        self._bytes: list[int] | None = None
        if not source.isascii():
            self._bytes = [0, *accumulate(len(char.encode("utf-8")) for char in source)]

    def __iter__(self):
        return self

    def __next__(self) -> Token | LexError:
        next = self.next_token()
        if next is None:
            raise StopIteration
        return next

    def process(self) -> list[Token | LexError]:
        """Lexes the entire source at once."""
        return [token for token in self]

    @property
    def position(self) -> int:
        """Absolute byte offset of the cursor."""
        return self._byte_(self.index)

    def seek(self, position: int):
        """Move the cursor to the absolute byte offset `position`."""
        self.index = self._index_(position)

    def text(self, span: Span) -> str:
        """Source text covered by an absolute `span` of this lexer's tokens."""
        return self.source[self._index_(span[0]):self._index_(span[1])]

    def peek(self, amount: int = 1) -> str | None:
        """The code point `amount` places ahead of the cursor."""
        index = self.index + amount - 1
        if index < len(self.source):
            return self.source[index]
        return None

    def next(self) -> str | None:
        if self.index < len(self.source):
            self.index += 1
            return self.source[self.index - 1]
        return None

    def _byte_(self, index: int) -> int:
        if self._bytes is None:
            return self.offset + index
        return self.offset + self._bytes[index]

    def _index_(self, position: int) -> int:
        position -= self.offset
        if self._bytes is None:
            return min(max(position, 0), len(self.source))
        return min(bisect_left(self._bytes, max(position, 0)), len(self.source))

    def _span_(self, start: int) -> Span:
        return (self._byte_(start), self._byte_(self.index))

    def _error_(self, message: str, start: int) -> LexError:
        error = LexError(message, self._span_(start), self.source[start:self.index], self.root)
        logger.debug("lex error at %d: %s %r", error.span[0], message, error.text)
        self.errors.append(error)
        return error

    def _skip_whitespace_(self):
        while Check.whitespace(self.peek()):
            self.index += 1

    def _consume_comment_(self, start: int) -> Comment | LexError:
        end = self.source.find("*/", start + 2)
        if end == -1:
            self.index = len(self.source)
            return self._error_("Comment not closed", start)
        self.index = end + 2
        return Comment(self.source[start:self.index], self._span_(start))

    def _consume_string_(self, start: int, ending: str) -> QuotedString | BadString:
        while True:
            next = self.next()
            if next is None:
                return BadString(self.source[start + 1:self.index], self._span_(start))
            elif next == "\\":
                # Escapes are kept verbatim, including escaped newlines.
                self.next()
            elif next == "\n":
                self.index -= 1
                return BadString(self.source[start + 1:self.index], self._span_(start))
            elif next == ending:
                return QuotedString(self.source[start + 1:self.index - 1], self._span_(start))

    def _consume_escape_(self):
        """Advance past an escape whose backslash is already consumed."""
        if Check.hex(self.peek()):
            count = 0
            while Check.hex(self.peek()) and count < 6:
                self.next()
                count += 1
            if Check.whitespace(self.peek()):
                self.next()
        else:
            self.next()

    def _consume_name_(self) -> str:
        start = self.index
        while True:
            current = self.peek()
            if Check.ident(current):
                self.next()
            elif Check.escape(current, self.peek(2)):
                self.next()
                self._consume_escape_()
            else:
                return self.source[start:self.index]

    def _consume_hash_(self, start: int) -> Hash | Delim:
        if Check.ident(self.peek()) or Check.escape(self.peek(), self.peek(2)):
            return Hash(self._consume_name_(), self._span_(start))
        return Delim("#", self._span_(start))

    def _consume_numeric_(self, start: int) -> Number | Percentage | Dimension:
        """Consume code points and produce a Number, Percentage, or Dimension token."""
        _type = 'integer'
        if (peek := self.peek()) is not None and peek in "+-":
            self.next()

        while Check.digit(self.peek()):
            self.next()

        if self.peek() == "." and Check.digit(self.peek(2)):
            self.next()
            _type = "number"
            while Check.digit(self.peek()):
                self.next()

        if (peek := self.peek()) is not None and peek in "Ee":
            sign = self.peek(2)
            if Check.digit(sign) or (sign is not None and sign in "+-" and Check.digit(self.peek(3))):
                _type = "number"
                self.next()
                if not Check.digit(sign):
                    self.next()
                while Check.digit(self.peek()):
                    self.next()

        number = self.source[start:self.index]
        if self.peek() == "%":
            self.next()
            return Percentage(number, self._span_(start), _type)
        elif Check.letter(self.peek()):
            unit_start = self.index
            while Check.letter(self.peek()):
                self.next()
            return Dimension(number, self.source[unit_start:self.index], self._span_(start), _type)
        return Number(number, self._span_(start), _type)

    def _consume_remnant_bad_url_(self):
        while True:
            next = self.next()
            if next is None or next == ")":
                return
            elif Check.escape(next, self.peek()):
                self._consume_escape_()

    def _consume_url_(self, start: int) -> UnquotedUrl | BadUrl:
        self._skip_whitespace_()
        content = self.index
        while True:
            next = self.next()
            if next is None:
                return BadUrl(self.source[start:self.index], self._span_(start))
            elif next == ")":
                if self.index - 1 == content:
                    return BadUrl(self.source[start:self.index], self._span_(start))
                return UnquotedUrl(self.source[content:self.index - 1], self._span_(start))
            elif Check.whitespace(next):
                end = self.index - 1
                self._skip_whitespace_()
                if self.peek() == ")":
                    self.next()
                    return UnquotedUrl(self.source[content:end], self._span_(start))
                self._consume_remnant_bad_url_()
                return BadUrl(self.source[start:self.index], self._span_(start))
            elif next in '\'"(' or Check.non_printable(next):
                self._consume_remnant_bad_url_()
                return BadUrl(self.source[start:self.index], self._span_(start))
            elif next == "\\":
                if Check.escape(next, self.peek()):
                    self._consume_escape_()
                else:
                    self._consume_remnant_bad_url_()
                    return BadUrl(self.source[start:self.index], self._span_(start))

    def _consume_ident_like_(self, start: int) -> Ident | Function | UnquotedUrl | BadUrl:
        ident = self._consume_name_()
        if ident.lower() == "url" and self.peek() == "(":
            self.next()
            look = self.index
            while look < len(self.source) and Check.whitespace(self.source[look]):
                look += 1
            if look < len(self.source) and self.source[look] in '\'"':
                return Function(ident, self._span_(start))
            return self._consume_url_(start)
        elif self.peek() == "(":
            self.next()
            return Function(ident, self._span_(start))
        return Ident(ident, self._span_(start))

    def _consume_pseudo_(self, start: int) -> PseudoClassSelector | Colon:
        if self.peek() == ":" and Check.starts_with_ident(self.peek(2), self.peek(3), self.peek(4)):
            self.next()
        elif not Check.starts_with_ident(self.peek(), self.peek(2), self.peek(3)):
            return Colon(":", self._span_(start))
        self._consume_name_()
        if self.peek() == "(":
            end = self.source.find(")", self.index)
            self.index = len(self.source) if end == -1 else end + 1
        return PseudoClassSelector(self.source[start:self.index], self._span_(start))

    def _consume_important_(self, start: int) -> Important | Delim:
        look = self.index
        while look < len(self.source) and Check.whitespace(self.source[look]):
            look += 1
        if (
            self.source[look:look + 9].lower() == "important"
            and not Check.ident(self.source[look + 9] if look + 9 < len(self.source) else None)
        ):
            self.index = look + 9
            return Important(self.source[start:self.index], self._span_(start))
        return Delim("!", self._span_(start))

    def _consume_block_(self, start: int, kind: type) -> Token:
        end = self.source.find(kind.closing, self.index)
        self.index = len(self.source) if end == -1 else end + 1
        return kind(self.source[start:self.index], self._span_(start))

    def next_token(self) -> Token | LexError | None:
        """Consume code points and return the next token."""
        self._skip_whitespace_()
        start = self.index
        next = self.next()
        if next is None:
            return None
        elif next == "/" and self.peek() == "*":
            return self._consume_comment_(start)
        elif next in '"\'':
            return self._consume_string_(start, next)
        elif next == "#":
            return self._consume_hash_(start)
        elif next in "+-." and Check.starts_with_number(next, self.peek(), self.peek(2)):
            self.index = start
            return self._consume_numeric_(start)
        elif Check.digit(next):
            self.index = start
            return self._consume_numeric_(start)
        elif next == "-":
            if self.peek() == "-" and self.peek(2) == ">":
                self.index += 2
                return CDC('-->', self._span_(start))
            elif self.peek() == "-" and (Check.ident(self.peek(2)) or Check.escape(self.peek(2), self.peek(3))):
                self.next()
                self._consume_name_()
                return CustomProperty(self.source[start:self.index], self._span_(start))
            elif Check.starts_with_ident(next, self.peek(), self.peek(2)):
                self.index = start
                return self._consume_ident_like_(start)
            return Delim(next, self._span_(start))
        elif next == ".":
            if Check.starts_with_ident(self.peek(), self.peek(2), self.peek(3)):
                self._consume_name_()
                return ClassSelector(self.source[start:self.index], self._span_(start))
            return Delim(next, self._span_(start))
        elif next == "<":
            if self.source.startswith("!--", self.index):
                self.index += 3
                return CDO('<!--', self._span_(start))
            return Delim(next, self._span_(start))
        elif next == "@":
            if Check.starts_with_ident(self.peek(), self.peek(2), self.peek(3)):
                return AtKeyword(self._consume_name_(), self._span_(start))
            return Delim(next, self._span_(start))
        elif next == ":":
            return self._consume_pseudo_(start)
        elif next in "~|^$*" and self.peek() == "=":
            self.next()
            return MATCHES[next](next + "=", self._span_(start))
        elif next == "!":
            return self._consume_important_(start)
        elif next == "\\":
            if Check.escape(next, self.peek()):
                self.index = start
                return self._consume_ident_like_(start)
            return self._error_("Invalid backslash", start)
        elif Check.ident_start(next):
            self.index = start
            return self._consume_ident_like_(start)
        elif next in BLOCKS:
            return self._consume_block_(start, BLOCKS[next])
        elif next in CLOSERS:
            return CLOSERS[next](next, self._span_(start))
        elif next == ",":
            return Comma(next, self._span_(start))
        elif next == ";":
            return Semicolon(next, self._span_(start))
        elif Check.non_printable(next):
            return self._error_("Unexpected control character", start)
        return Delim(next, self._span_(start))


MATCHES: dict[str, type] = {
    "~": IncludeMatch,
    "|": DashMatch,
    "^": PrefixMatch,
    "$": SuffixMatch,
    "*": SubstringMatch,
}

BLOCKS: dict[str, type] = {
    "(": ParenthesisBlock,
    "[": SquareBracketBlock,
    "{": CurlyBracketBlock,
}

CLOSERS: dict[str, type] = {
    ")": CloseParenthesis,
    "]": CloseSquareBracket,
    "}": CloseCurlyBracket,
}
