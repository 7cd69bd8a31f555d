"""Tests for the CSS lexer."""

import pytest

from cssparse import tokenize
from cssparse.errors import LexError
from cssparse.lexer import Lexer
from cssparse.tokens import *


def kinds(source: str) -> list[type]:
    return [type(token) for token in tokenize(source)]


# ---------------------------------------------------------------------------
# Whitespace, spans, cursor
# ---------------------------------------------------------------------------


class TestCursor:
    def test_whitespace_is_never_emitted(self):
        assert tokenize(" \t\r\n\f  ") == []

    def test_spans_are_half_open_offsets(self):
        tokens = tokenize("body { color: #fff; }")
        assert tokens == [
            Ident("body", (0, 4)),
            CurlyBracketBlock("{ color: #fff; }", (5, 21)),
        ]

    def test_offset_shifts_spans(self):
        lexer = Lexer("a b", offset=10)
        assert lexer.next_token().span == (10, 11)
        assert lexer.next_token().span == (12, 13)
        assert lexer.next_token() is None

    def test_seek_repositions_cursor(self):
        lexer = Lexer("abc def")
        assert lexer.next_token().raw == "abc"
        lexer.seek(5)
        assert lexer.next_token() == Ident("ef", (5, 7))

    def test_spans_count_utf8_bytes(self):
        assert tokenize("é a") == [Ident("é", (0, 2)), Ident("a", (3, 4))]

    def test_seek_and_text_use_byte_offsets(self):
        lexer = Lexer("é abc")
        lexer.seek(4)
        token = lexer.next_token()
        assert token == Ident("bc", (4, 6))
        assert lexer.text((0, 2)) == "é"

    def test_iteration_matches_process(self):
        assert Lexer("a, b").process() == list(Lexer("a, b"))


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


class TestNames:
    def test_ident_and_function(self):
        tokens = tokenize("solid rgb(")
        assert tokens[0] == Ident("solid", (0, 5))
        assert isinstance(tokens[1], Function)
        assert tokens[1].raw == "rgb"
        assert tokens[1].span == (6, 10)

    def test_vendor_prefixed_ident(self):
        assert tokenize("-webkit-transform")[0] == Ident("-webkit-transform", (0, 17))

    def test_at_keyword_strips_at(self):
        token = tokenize("@media")[0]
        assert isinstance(token, AtKeyword)
        assert token.raw == "media"

    def test_hash_strips_hash(self):
        assert tokenize("#007bff")[0] == Hash("007bff", (0, 7))

    def test_lone_hash_is_delim(self):
        assert kinds("# ") == [Delim]

    def test_class_selector_keeps_dot(self):
        assert tokenize(".container")[0] == ClassSelector(".container", (0, 10))

    def test_custom_property(self):
        assert tokenize("--main-color")[0] == CustomProperty("--main-color", (0, 12))


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


class TestNumbers:
    def test_number_percentage_dimension(self):
        tokens = tokenize("10px 50% 3")
        assert isinstance(tokens[0], Dimension)
        assert (tokens[0].number, tokens[0].unit, tokens[0].raw) == ("10", "px", "10px")
        assert isinstance(tokens[1], Percentage)
        assert tokens[1].raw == "50"
        assert type(tokens[2]) is Number
        assert tokens[2].type == "integer"

    def test_sign_is_part_of_literal(self):
        tokens = tokenize("-2.25rem +3")
        assert (tokens[0].number, tokens[0].unit) == ("-2.25", "rem")
        assert tokens[0].type == "number"
        assert tokens[1].raw == "+3"

    def test_leading_dot_and_exponent(self):
        tokens = tokenize(".5 1e3 2e-1em")
        assert [token.raw for token in tokens] == [".5", "1e3", "2e-1em"]
        assert tokens[2].unit == "em"

    def test_unit_stops_at_slash(self):
        assert kinds("12px/1.5") == [Dimension, Delim, Number]

    def test_plus_before_space_is_delim(self):
        assert kinds("a + b") == [Ident, Delim, Ident]


# ---------------------------------------------------------------------------
# Strings and urls
# ---------------------------------------------------------------------------


class TestStrings:
    def test_quoted_strings_strip_quotes(self):
        tokens = tokenize("\"Courier New\" 'x'")
        assert tokens[0].raw == "Courier New"
        assert isinstance(tokens[1], QuotedString)
        assert tokens[1].raw == "x"

    def test_escapes_preserved_raw(self):
        assert tokenize('"a\\"b"')[0].raw == 'a\\"b'

    def test_unterminated_string_is_bad_string(self):
        token = tokenize('"abc')[0]
        assert isinstance(token, BadString)
        assert token.raw == "abc"

    def test_newline_ends_bad_string(self):
        assert kinds('"abc\ndef') == [BadString, Ident]


class TestUrls:
    def test_unquoted_url(self):
        assert tokenize("url(img/a.png)")[0] == UnquotedUrl("img/a.png", (0, 14))

    def test_unquoted_url_trailing_whitespace(self):
        assert tokenize("url( a.png  )")[0].raw == "a.png"

    def test_empty_url_is_bad(self):
        assert kinds("url()") == [BadUrl]

    def test_whitespace_inside_url_is_bad(self):
        assert kinds("url(a b) c") == [BadUrl, Ident]

    def test_quoted_url_is_function(self):
        assert kinds('url("a.png")') == [Function, QuotedString, CloseParenthesis]


# ---------------------------------------------------------------------------
# Punctuation and blocks
# ---------------------------------------------------------------------------


class TestPunctuation:
    def test_match_operators(self):
        assert kinds("~= |= ^= $= *=") == [IncludeMatch, DashMatch, PrefixMatch, SuffixMatch, SubstringMatch]

    def test_cdo_cdc(self):
        assert kinds("<!-- -->") == [CDO, CDC]

    def test_colon_semicolon_comma_are_delims(self):
        tokens = tokenize(": ; ,")
        assert [type(token) for token in tokens] == [Colon, Semicolon, Comma]
        assert all(isinstance(token, Delim) for token in tokens)

    def test_closers(self):
        assert kinds(") ] }") == [CloseParenthesis, CloseSquareBracket, CloseCurlyBracket]

    def test_important(self):
        tokens = tokenize("!important ! IMPORTANT !foo")
        assert [type(token) for token in tokens] == [Important, Important, Delim, Ident]

    def test_universal_is_delim(self):
        assert tokenize("*")[0] == Delim("*", (0, 1))


class TestPseudo:
    def test_pseudo_class(self):
        assert tokenize(":hover")[0] == PseudoClassSelector(":hover", (0, 6))

    def test_pseudo_element(self):
        token = tokenize("::before")[0]
        assert isinstance(token, PseudoClassSelector)
        assert token.is_element

    def test_pseudo_with_argument(self):
        assert tokenize(":nth-child(2n+1)")[0].raw == ":nth-child(2n+1)"

    def test_colon_before_space_or_digit(self):
        assert kinds(": red :5") == [Colon, Ident, Colon, Number]


class TestBlocks:
    def test_flat_capture(self):
        tokens = tokenize("(max-width: 600px) [type=text]")
        assert tokens[0] == ParenthesisBlock("(max-width: 600px)", (0, 18))
        assert isinstance(tokens[1], SquareBracketBlock)

    def test_block_closes_at_first_closer(self):
        tokens = tokenize("{ a { b } c }")
        assert tokens[0].raw == "{ a { b }"
        assert [type(token) for token in tokens[1:]] == [Ident, CloseCurlyBracket]

    def test_unterminated_block_runs_to_end(self):
        token = tokenize("{ width: 100%;")[0]
        assert isinstance(token, CurlyBracketBlock)
        assert token.content == "width: 100%;"

    def test_content_offset_points_into_source(self):
        source = "a {  color: red; }"
        block = tokenize(source)[1]
        assert source[block.content_offset:].startswith(block.content)


# ---------------------------------------------------------------------------
# Comments and errors
# ---------------------------------------------------------------------------


class TestComments:
    def test_comments_are_emitted(self):
        tokens = tokenize("/* hi */ a")
        assert isinstance(tokens[0], Comment)
        assert tokens[0].text == " hi "
        assert tokens[1] == Ident("a", (9, 10))


class TestErrors:
    def test_control_character_is_lex_error_and_lexing_continues(self):
        tokens = tokenize("a \x01 b")
        assert isinstance(tokens[1], LexError)
        assert tokens[1].text == "\x01"
        assert tokens[1].span == (2, 3)
        assert tokens[2] == Ident("b", (4, 5))

    def test_unterminated_comment(self):
        lexer = Lexer("a /* never closed")
        tokens = lexer.process()
        assert isinstance(tokens[-1], LexError)
        assert tokens[-1].text == "/* never closed"
        assert lexer.errors == [tokens[-1]]

    def test_invalid_backslash(self):
        assert isinstance(tokenize("\\\n")[0], LexError)

    def test_lex_error_has_line_and_column(self):
        error = tokenize("a\n  \x02")[1]
        assert (error.line, error.column) == (2, 3)

    def test_lex_error_is_returned_not_raised(self):
        with pytest.raises(StopIteration):
            next(iter(Lexer("")))
        assert isinstance(Lexer("\x7f").next_token(), LexError)
