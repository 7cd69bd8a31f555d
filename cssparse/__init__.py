"""
CSS source -> tokens -> AST.

References:
    - [syntax](https://www.w3.org/TR/css-syntax-3/)
    - [nesting](https://developer.chrome.com/articles/css-nesting/)
    - [custom properites](https://developer.mozilla.org/en-US/docs/Web/CSS/Using_CSS_custom_properties)
    - [@media](https://developer.mozilla.org/en-US/docs/Web/CSS/@media)

    >>> from cssparse import parse_stylesheet
    >>> parse_stylesheet("body { color: #fff; }").rules[0].declarations
    [Declaration(property='color', value=[Color(color=Hex(value='fff'))])]
"""
from __future__ import annotations

from cssparse import nodes, tokens
from cssparse.config import DEFAULT_CONFIG, ParserConfig
from cssparse.errors import (
    CSSParseError,
    InvalidArity,
    LexError,
    NestingTooDeep,
    NumberFormat,
    UnexpectedToken,
    UnterminatedConstruct,
)
from cssparse.lexer import Lexer
from cssparse.parser import Parse, Parser

__version__ = "0.1.0"

__all__ = [
    "parse_stylesheet",
    "tokenize",
    "Lexer",
    "Parser",
    "Parse",
    "ParserConfig",
    "DEFAULT_CONFIG",
    "CSSParseError",
    "LexError",
    "UnexpectedToken",
    "UnterminatedConstruct",
    "InvalidArity",
    "NumberFormat",
    "NestingTooDeep",
    "nodes",
    "tokens",
]


def parse_stylesheet(source: str, config: ParserConfig | None = None) -> nodes.Stylesheet:
    """Parse CSS source into a `Stylesheet`, raising a `CSSParseError` on failure."""
    return Parse.parse_stylesheet(source, config)


def tokenize(source: str) -> list[tokens.Token | LexError]:
    """All tokens of `source` in order. Lex errors are included, not raised."""
    return Lexer(source).process()
