"""Command-line driver: parse a stylesheet and print its tree."""

from __future__ import annotations

import logging
import re
import sys
import time
from collections.abc import Iterator
from pathlib import Path

import click
from conterm.pretty import Markup

from cssparse import nodes
from cssparse.config import DEFAULT_CONFIG, ParserConfig
from cssparse.errors import CSSParseError, LexError
from cssparse.lexer import Lexer
from cssparse.parser import Parse

logger = logging.getLogger(__name__)

CHARSET = re.compile(rb'@charset\s*"([^"]+)"\s*;')
RESET = "\x1b[0m"


def read_css(path: Path) -> str:
    """Read `path`, decoding with the encoding named by a leading `@charset`
    rule, or UTF-8."""
    data = path.read_bytes()
    match = CHARSET.match(data.lstrip(b"\xef\xbb\xbf"))
    encoding = match.group(1).decode("ascii").strip().lower() if match else "utf-8-sig"
    try:
        return data.decode(encoding)
    except LookupError:
        raise click.ClickException(f"Unknown @charset {encoding!r} in {path}") from None


def _label(text: str, color: str, enabled: bool) -> str:
    if not enabled:
        return text
    return Markup.parse(f"[{color}]{text}", mar=False) + RESET


def _number(value: float) -> str:
    return f"{value:g}"


def selector_text(selector: nodes.Selector) -> str:
    if isinstance(selector, nodes.Simple):
        text = selector.tag or ""
        if selector.id is not None:
            text += f"#{selector.id}"
        return text + "".join(selector.classes)
    return repr(selector)


def color_text(color: nodes.ColorValue) -> str:
    if isinstance(color, nodes.Hex):
        return f"#{color.value}"
    elif isinstance(color, nodes.Rgb):
        return f"rgb({color.r}, {color.g}, {color.b})"
    elif isinstance(color, nodes.Rgba):
        return f"rgba({color.r}, {color.g}, {color.b}, {_number(color.a)})"
    elif isinstance(color, nodes.Hsl):
        return f"hsl({_number(color.h)}, {_number(color.s)}%, {_number(color.l)}%)"
    elif isinstance(color, nodes.Hsla):
        return f"hsla({_number(color.h)}, {_number(color.s)}%, {_number(color.l)}%, {_number(color.a)})"
    return color.name


def value_text(value: nodes.Value) -> str:
    if isinstance(value, nodes.Identifier):
        return value.value
    elif isinstance(value, nodes.Uri):
        return f"url({value.value})"
    elif isinstance(value, nodes.String):
        return f'"{value.value}"'
    elif isinstance(value, nodes.Number):
        return _number(value.value)
    elif isinstance(value, nodes.Percentage):
        return f"{_number(value.value)}%"
    elif isinstance(value, nodes.Dimension):
        return f"{_number(value.value)}{value.unit}"
    elif isinstance(value, nodes.Var):
        return value.name
    elif isinstance(value, nodes.Color):
        return color_text(value.color)
    elif isinstance(value, nodes.Function):
        return f"{value.name}({' '.join(value_text(arg) for arg in value.arguments)})"
    elif isinstance(value, nodes.Calc):
        terms = (
            term.operator.value if isinstance(term, nodes.CalcOperator)
            else f"{_number(term.value)}{term.unit or ''}"
            for term in value.terms
        )
        return f"calc({' '.join(terms)})"
    return repr(value)


def render(rules: list[nodes.Rule], color: bool = True, depth: int = 0) -> Iterator[str]:
    """Indented, one line per rule or declaration."""
    pad = "  " * depth
    for rule in rules:
        if isinstance(rule, nodes.RuleSet):
            selectors = ", ".join(selector_text(selector) for selector in rule.selectors)
            yield f"{pad}{_label('rule', 'cyan', color)} {selectors}"
            declarations, children = rule.declarations, rule.nested_rules
        else:
            yield f"{pad}{_label('@' + rule.name, 'magenta', color)} {' '.join(rule.prelude)}".rstrip()
            declarations = rule.declarations
            children = rule.block.rules if rule.block is not None else []
        for declaration in declarations:
            values = " ".join(value_text(value) for value in declaration.value)
            yield f"{pad}  {_label(declaration.property, 'yellow', color)}: {values}"
        yield from render(children, color, depth + 1)


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--tokens", "show_tokens", is_flag=True, help="Print the token stream instead of the tree.")
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.option("--max-depth", type=int, default=DEFAULT_CONFIG.max_depth, show_default=True,
              help="Deepest block nesting accepted.")
@click.option("--blockless-at-rules", is_flag=True, help="Accept at-rules such as @import that end at ';' with no block.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(
    path: Path,
    show_tokens: bool,
    no_color: bool,
    max_depth: int,
    blockless_at_rules: bool,
    verbose: bool,
) -> None:
    """Parse the stylesheet at PATH and print its rules."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    color = not no_color
    source = read_css(path)
    config = ParserConfig(max_depth=max_depth, blockless_at_rules=blockless_at_rules)

    start = time.perf_counter()
    if show_tokens:
        for token in Lexer(source):
            if isinstance(token, LexError):
                text = f"{_label('error', 'red', color)} {token.message}: {token.text!r}"
            else:
                text = repr(token)
            click.echo(f"{token.span[0]:>6}..{token.span[1]:<6} {text}")
    else:
        try:
            stylesheet = Parse.parse_stylesheet(source, config)
        except CSSParseError as error:
            logger.debug("parse failed", exc_info=True)
            click.echo(f"{path}:{error.line}:{error.column}: {error.message}", err=True)
            sys.exit(1)
        for line in render(stylesheet.rules, color):
            click.echo(line)
    elapsed = time.perf_counter() - start
    click.echo(f"Elapsed: {elapsed * 1000:.3f}ms", err=True)
