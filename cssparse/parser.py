""" CSS Parser
https://www.w3.org/TR/css-syntax-3/#parsing

Recursive descent over the token stream of `cssparse.lexer.Lexer`.

The lexer never tracks brace depth: a `{...}` block is captured up to its first
`}`. A rule's block is parsed by a fresh `Parser` over the block's inner text,
so nesting comes from recursion rather than from the tokenizer. Spans reported
by nested parsers are UTF-8 byte offsets into the text the outermost parse
started from.

Top-level parsing is lenient and skips tokens that cannot start a rule. Inside
declarations, functions and at-rule preludes every grammar violation raises.
"""

from __future__ import annotations
import logging
import math
from typing import Optional
from cssparse import nodes
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
from cssparse.tokens import *

__all__ = ["Parser", "Parse"]

logger = logging.getLogger(__name__)

# Tokens that may begin a rule set at the top level of a stylesheet.
RULE_START = (Ident, ClassSelector, Hash, PseudoClassSelector, SquareBracketBlock)
# Inside a rule's block `Ident` starts a declaration instead.
NESTED_RULE_START = (ClassSelector, Hash, PseudoClassSelector, ParenthesisBlock, SquareBracketBlock)
# Inside an at-rule's block; percentages are keyframe selectors.
AT_RULE_BLOCK_START = (Ident, ClassSelector, Hash, PseudoClassSelector, Percentage)
PRELUDE = (Ident, Number, Dimension, ParenthesisBlock, SquareBracketBlock, QuotedString, UnquotedUrl)
COMBINATORS = (">", "+", "~")
OPERATORS = {
    "+": nodes.Operator.Add,
    "-": nodes.Operator.Subtract,
    "*": nodes.Operator.Multiply,
    "/": nodes.Operator.Divide,
}
GRADIENTS = ("linear-gradient", "radial-gradient", "repeating-linear-gradient", "repeating-radial-gradient")
RADIAL_SHAPES = ("circle", "ellipse")
RADIAL_SIZES = ("closest-side", "closest-corner", "farthest-side", "farthest-corner")
DEGREES_PER = {
    nodes.AngleUnit.Degree: 1.0,
    nodes.AngleUnit.Grad: 0.9,
    nodes.AngleUnit.Radian: 180 / math.pi,
    nodes.AngleUnit.Turn: 360.0,
}


def _delim(token: Token | LexError | None, *chars: str) -> bool:
    return isinstance(token, Delim) and token.raw in chars


class Parser:
    def __init__(
        self,
        source: str,
        config: ParserConfig | None = None,
        *,
        offset: int = 0,
        depth: int = 0,
        root: str | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.depth = depth
        # Function calls currently open in a value.
        self.functions = 0
        self.root = root if root is not None else source
        if depth > self.config.max_depth:
            raise NestingTooDeep(
                f"Blocks nested deeper than {self.config.max_depth} levels",
                (offset, offset + len(source.encode("utf-8"))),
                self.root,
            )
        self.lexer = Lexer(source, offset, self.root)
        self.current: Token | LexError | None = None
        self.span: Span = (offset, offset)
        self.advance()

    def advance(self):
        self.current = self.lexer.next_token()
        if self.current is not None:
            self.span = self.current.span
        else:
            self.span = (self.lexer.position, self.lexer.position)

    def error(self, kind: type[CSSParseError], message: str, span: Span | None = None) -> CSSParseError:
        return kind(message, span or self.span, self.root)

    def _skip_comments(self):
        while isinstance(self.current, Comment):
            self.advance()

    def _nested(self, block: CurlyBracketBlock) -> Parser:
        logger.debug("parsing block at %d (depth %d)", block.span[0], self.depth + 1)
        return Parser(
            block.content,
            self.config,
            offset=block.content_offset,
            depth=self.depth + 1,
            root=self.root,
        )

    def _number(self, text: str) -> float:
        try:
            return float(text)
        except ValueError:
            raise self.error(NumberFormat, f"Invalid number {text!r}") from None

    # -----------------------------------------------------------------------
    # Rules
    # -----------------------------------------------------------------------

    def parse_stylesheet(self) -> nodes.Stylesheet:
        rules: list[nodes.Rule] = []
        while (token := self.current) is not None:
            if isinstance(token, AtKeyword):
                self.advance()
                rules.append(self.parse_at_rule(token.raw))
            elif isinstance(token, RULE_START) or _delim(token, "*"):
                rules.append(self.parse_rule_set())
            else:
                logger.debug("skipping %r at %d", token, self.span[0])
                self.advance()
        return nodes.Stylesheet(rules)

    def parse_selectors(self) -> list[nodes.Selector]:
        selectors: list[nodes.Simple] = []
        has_separator = True

        while (token := self.current) is not None:
            if isinstance(token, CurlyBracketBlock):
                break
            elif isinstance(token, Comment):
                self.advance()
            elif isinstance(token, Hash):
                selectors.append(nodes.Simple(id=token.raw))
                has_separator = False
                self.advance()
            elif _delim(token, "*", "&"):
                selectors.append(nodes.Simple(tag=token.raw))
                has_separator = False
                self.advance()
            elif isinstance(token, (PseudoClassSelector, SquareBracketBlock, ParenthesisBlock)):
                if has_separator or not selectors:
                    selectors.append(nodes.Simple(tag=token.raw))
                    has_separator = False
                else:
                    selectors[-1].classes.append(token.raw)
                self.advance()
            elif isinstance(token, (ClassSelector, Ident, Percentage)):
                selectors.append(nodes.Simple(tag=str(token)))
                has_separator = False
                self.advance()
            elif _delim(token, *COMBINATORS):
                self.advance()
                self._skip_comments()
                following = self._selector_text(self.current)
                if following is not None:
                    self.advance()
                else:
                    following = ""
                if not selectors:
                    selectors.append(nodes.Simple(tag=following))
                elif selectors[-1].tag is not None:
                    selectors[-1].tag = f"{selectors[-1].tag} {token.raw} {following}"
                else:
                    selectors[-1].tag = following
                has_separator = True
            elif isinstance(token, Comma):
                has_separator = True
                self.advance()
            else:
                break

        return selectors

    @staticmethod
    def _selector_text(token: Token | LexError | None) -> Optional[str]:
        """Text of a selector token spliced after a combinator."""
        if isinstance(token, (Ident, ClassSelector, PseudoClassSelector, SquareBracketBlock)):
            return token.raw
        elif isinstance(token, Hash):
            return f"#{token.raw}"
        elif _delim(token, "*"):
            return "*"
        return None

    def parse_rule_set(self) -> nodes.RuleSet:
        selectors = self.parse_selectors()
        logger.debug("selectors: %r", selectors)
        block = self.current
        if not isinstance(block, CurlyBracketBlock):
            raise self.error(UnexpectedToken, "Expected '{' after selectors")
        if not selectors:
            raise self.error(UnexpectedToken, "Expected a selector before '{'")
        self.advance()

        declarations, nested_rules = self._nested(block).parse_block()
        return nodes.RuleSet(selectors, declarations, nested_rules)

    def parse_block(self) -> tuple[list[nodes.Declaration], list[nodes.Rule]]:
        """Parse the contents of a rule's block: declarations interleaved with nested rules."""
        declarations: list[nodes.Declaration] = []
        nested_rules: list[nodes.Rule] = []

        while (token := self.current) is not None:
            if isinstance(token, (Ident, CustomProperty)):
                declarations.append(self.parse_declaration())
            elif isinstance(token, NESTED_RULE_START) or _delim(token, "&"):
                nested_rules.append(self.parse_rule_set())
            elif isinstance(token, AtKeyword):
                self.advance()
                nested_rules.append(self.parse_at_rule(token.raw))
            else:
                if not isinstance(token, Comment):
                    logger.debug("skipping %r in block at %d", token, self.span[0])
                self.advance()

        return declarations, nested_rules

    def parse_declaration(self) -> nodes.Declaration:
        name = self.current.raw
        self.advance()
        self._skip_comments()

        colon = self.current
        if isinstance(colon, PseudoClassSelector) and not colon.is_element:
            # `color:red` lexes as a pseudo-class; resume right after the colon.
            self.lexer.seek(colon.span[0] + 1)
            self.advance()
        elif isinstance(colon, Colon):
            self.advance()
        else:
            raise self.error(UnexpectedToken, "Expected ':' after property")

        value = self.parse_declaration_value()
        logger.debug("declaration %s: %r", name, value)

        if isinstance(self.current, Semicolon):
            self.advance()
        elif not (self.current is None and self.config.lenient_final_semicolon):
            raise self.error(UnexpectedToken, "Expected ';' after value")

        return nodes.Declaration(name, value)

    def parse_at_rule(self, name: str) -> nodes.AtRule:
        prelude: list[str] = []

        while (token := self.current) is not None:
            if isinstance(token, CurlyBracketBlock):
                self.advance()
                rules, declarations = self._nested(token).parse_at_rule_block()
                return nodes.AtRule(name, prelude, nodes.Stylesheet(rules), declarations)
            elif isinstance(token, Semicolon) and self.config.blockless_at_rules:
                self.advance()
                return nodes.AtRule(name, prelude)
            elif isinstance(token, Function):
                prelude.append(self._prelude_function(token))
                continue
            elif isinstance(token, PRELUDE):
                prelude.append(self.lexer.text(token.span))
            self.advance()

        if self.config.blockless_at_rules:
            return nodes.AtRule(name, prelude)
        raise self.error(UnterminatedConstruct, f"Expected '{{' in @{name} rule")

    def _prelude_function(self, function: Function) -> str:
        """Source text of `name(...)` up to its matching `)`, or up to the
        block or `;` that cuts it short."""
        depth, end = 1, function.span[1]
        self.advance()
        while (token := self.current) is not None and depth:
            if isinstance(token, (CurlyBracketBlock, Semicolon)):
                break
            elif isinstance(token, Function):
                depth += 1
            elif isinstance(token, CloseParenthesis):
                depth -= 1
            end = token.span[1]
            self.advance()
        return self.lexer.text((function.span[0], end))

    def parse_at_rule_block(self) -> tuple[list[nodes.Rule], list[nodes.Declaration]]:
        """Parse an at-rule's block: rule sets, nested at-rules, and descriptor
        declarations such as the ones of `@font-face`."""
        rules: list[nodes.Rule] = []
        declarations: list[nodes.Declaration] = []

        while (token := self.current) is not None:
            if isinstance(token, AtKeyword):
                self.advance()
                rules.append(self.parse_at_rule(token.raw))
            elif isinstance(token, CustomProperty) or (
                isinstance(token, Ident) and self._looks_like_declaration()
            ):
                declarations.append(self.parse_declaration())
            elif isinstance(token, AT_RULE_BLOCK_START) or _delim(token, "*"):
                rules.append(self.parse_rule_set())
            else:
                self.advance()

        return rules, declarations

    def _looks_like_declaration(self) -> bool:
        """Whether a `;` (or the end of input) comes before the next `{...}`."""
        position, current, span = self.lexer.position, self.current, self.span
        errors = len(self.lexer.errors)
        try:
            self.advance()
            while self.current is not None:
                if isinstance(self.current, Semicolon):
                    return True
                elif isinstance(self.current, CurlyBracketBlock):
                    return False
                self.advance()
            return True
        finally:
            self.lexer.seek(position)
            del self.lexer.errors[errors:]
            self.current, self.span = current, span

    # -----------------------------------------------------------------------
    # Values
    # -----------------------------------------------------------------------

    def parse_declaration_value(self) -> list[nodes.Value]:
        values: list[nodes.Value] = []

        while (token := self.current) is not None and not isinstance(token, Semicolon):
            if isinstance(token, (Comma, Comment)):
                self.advance()
                continue
            value = self._parse_component()
            if value is None:
                break
            values.append(value)

        return values

    def _parse_component(self) -> nodes.Value | None:
        """Convert the current token into a value, or return None without
        consuming it when it cannot start one."""
        token = self.current
        if isinstance(token, LexError):
            raise token
        elif isinstance(token, (BadString, BadUrl)):
            raise self.error(UnexpectedToken, f"Malformed {'string' if isinstance(token, BadString) else 'url'}")
        elif isinstance(token, Function):
            self.advance()
            return self.parse_function(token.raw)

        if isinstance(token, Hash):
            value = nodes.Color(nodes.Hex(token.raw))
        elif isinstance(token, Ident):
            value = nodes.Identifier(token.raw)
        elif isinstance(token, Percentage):
            value = nodes.Percentage(self._number(token.raw))
        elif isinstance(token, Number):
            value = nodes.Number(self._number(token.raw))
        elif isinstance(token, Dimension):
            value = nodes.Dimension(self._number(token.number), token.unit)
        elif isinstance(token, QuotedString):
            value = nodes.String(token.raw)
        elif isinstance(token, UnquotedUrl):
            value = nodes.Uri(token.raw)
        elif isinstance(token, CustomProperty):
            value = nodes.Var(token.raw)
        elif isinstance(token, Important):
            value = nodes.Identifier("!important")
        elif _delim(token, "/"):
            value = nodes.Identifier("/")
        else:
            return None
        self.advance()
        return value

    def _closes(self, name: str) -> bool:
        """Consume the `)` ending `name(` if it is next."""
        self._skip_comments()
        if self.current is None:
            raise self.error(UnterminatedConstruct, f"Expected ')' to close {name}()")
        elif isinstance(self.current, CloseParenthesis):
            self.advance()
            return True
        return False

    def _unexpected(self, name: str) -> CSSParseError:
        if isinstance(self.current, LexError):
            return self.current
        return self.error(UnexpectedToken, f"Unexpected {self.current!r} in {name}()")

    def parse_function(self, name: str) -> nodes.Value:
        """Parse the arguments of `name(`; the function token is already consumed.

        Nested calls count toward `config.max_depth` together with the block
        depth of this parser.
        """
        self.functions += 1
        try:
            if self.depth + self.functions > self.config.max_depth:
                raise self.error(
                    NestingTooDeep,
                    f"Functions nested deeper than {self.config.max_depth} levels",
                )
            return self._function_arguments(name)
        finally:
            self.functions -= 1

    def _function_arguments(self, name: str) -> nodes.Value:
        key = name.lower()
        if key in ("rgb", "rgba"):
            return self._parse_rgb(name)
        elif key in ("hsl", "hsla"):
            return self._parse_hsl(name)
        elif key == "calc":
            return self._parse_calc(name)
        elif key == "url":
            return self._parse_url(name)
        elif key == "rect":
            return self._parse_rect(name)
        elif key in GRADIENTS:
            return self._parse_gradient(name)

        arguments: list[nodes.Value] = []
        while not self._closes(name):
            before = self.current
            arguments.extend(self.parse_declaration_value())
            if self.current is before:
                raise self._unexpected(name)
        return nodes.Function(name, arguments)

    def _numeric_arguments(self, name: str, kinds: tuple[type, ...]) -> list[Token]:
        """Collect `kinds` tokens separated by commas, spaces or `/`."""
        arguments: list[Token] = []
        while not self._closes(name):
            token = self.current
            if isinstance(token, kinds):
                arguments.append(token)
            elif not (isinstance(token, Comma) or _delim(token, "/")):
                raise self._unexpected(name)
            self.advance()
        return arguments

    def _parse_rgb(self, name: str) -> nodes.Color:
        arguments = self._numeric_arguments(name, (Number,))
        if len(arguments) not in (3, 4):
            raise self.error(InvalidArity, f"{name}() takes 3 or 4 arguments, got {len(arguments)}")

        channels = []
        for token in arguments[:3]:
            if isinstance(token, Percentage) or token.type != "integer":
                raise self.error(NumberFormat, f"{name}() channel {str(token)!r} is not an integer", token.span)
            channel = int(token.raw)
            if not 0 <= channel <= 255:
                raise self.error(NumberFormat, f"{name}() channel {channel} is outside 0..255", token.span)
            channels.append(channel)

        r, g, b = channels
        if len(arguments) == 4:
            return nodes.Color(nodes.Rgba(r, g, b, self._alpha(arguments[3])))
        return nodes.Color(nodes.Rgb(r, g, b))

    def _alpha(self, token: Token) -> float:
        if isinstance(token, Percentage):
            return self._number(token.raw) / 100
        elif isinstance(token, Number):
            return self._number(token.raw)
        raise self.error(UnexpectedToken, f"Invalid alpha value {str(token)!r}", token.span)

    def _parse_hsl(self, name: str) -> nodes.Color:
        arguments = self._numeric_arguments(name, (Number, Dimension))
        if len(arguments) not in (3, 4):
            raise self.error(InvalidArity, f"{name}() takes 3 or 4 arguments, got {len(arguments)}")

        hue = arguments[0]
        if isinstance(hue, Dimension):
            angle = self._angle(self._number(hue.number), hue.unit)
            if angle is None:
                raise self.error(UnexpectedToken, f"Invalid hue {hue.raw!r}", hue.span)
            h = angle.value * DEGREES_PER[angle.unit]
        elif isinstance(hue, Percentage):
            raise self.error(UnexpectedToken, f"Invalid hue {str(hue)!r}", hue.span)
        else:
            h = self._number(hue.raw)

        s, l = (self._percent(token) for token in arguments[1:3])
        if len(arguments) == 4:
            return nodes.Color(nodes.Hsla(h, s, l, self._alpha(arguments[3])))
        return nodes.Color(nodes.Hsl(h, s, l))

    def _percent(self, token: Token) -> float:
        if isinstance(token, Number):
            return self._number(token.raw)
        raise self.error(UnexpectedToken, f"Expected a percentage, got {str(token)!r}", token.span)

    @staticmethod
    def _angle(value: float, unit: str) -> nodes.Angle | None:
        try:
            return nodes.Angle(value, nodes.AngleUnit(unit.lower()))
        except ValueError:
            return None

    def _parse_calc(self, name: str) -> nodes.Calc:
        terms: list[nodes.CalcTerm] = []
        while not self._closes(name):
            token = self.current
            if isinstance(token, Percentage):
                terms.append(nodes.CalcNumber(self._number(token.raw), "%"))
            elif isinstance(token, Number):
                terms.append(nodes.CalcNumber(self._number(token.raw)))
            elif isinstance(token, Dimension):
                terms.append(nodes.CalcNumber(self._number(token.number), token.unit))
            elif _delim(token, "%"):
                # Placeholder only; the preceding number is not rescaled.
                terms.append(nodes.CalcNumber(0.0, "%"))
            elif _delim(token, *OPERATORS):
                terms.append(nodes.CalcOperator(OPERATORS[token.raw]))
            else:
                raise self._unexpected(name)
            self.advance()
        return nodes.Calc(terms)

    def _parse_url(self, name: str) -> nodes.Uri:
        url = ""
        while not self._closes(name):
            if not isinstance(self.current, (UnquotedUrl, QuotedString)):
                raise self._unexpected(name)
            url += self.current.raw
            self.advance()
        return nodes.Uri(url)

    def _parse_rect(self, name: str) -> nodes.Function:
        arguments = []
        while not self._closes(name):
            token = self.current
            if isinstance(token, Number) and not isinstance(token, Percentage):
                arguments.append(nodes.Number(self._number(token.raw)))
            elif not isinstance(token, Comma):
                raise self._unexpected(name)
            self.advance()

        if len(arguments) != 4:
            raise self.error(InvalidArity, f"{name}() takes 4 arguments, got {len(arguments)}")
        return nodes.Function("rect", arguments)

    def _argument_groups(self, name: str) -> list[list[nodes.Value]]:
        """Comma separated argument lists of `name(`."""
        groups: list[list[nodes.Value]] = [[]]
        while not self._closes(name):
            if isinstance(self.current, Comma):
                groups.append([])
                self.advance()
                continue
            value = self._parse_component()
            if value is None:
                raise self._unexpected(name)
            groups[-1].append(value)
        if any(not group for group in groups):
            raise self.error(UnexpectedToken, f"Empty argument in {name}()")
        return groups

    def _parse_gradient(self, name: str) -> nodes.Gradient:
        groups = self._argument_groups(name)
        key = name.lower()
        repeating = key.startswith("repeating-")

        if key.endswith("linear-gradient"):
            gradient = nodes.LinearGradient(repeating=repeating)
            first = groups[0]
            if len(first) == 1 and isinstance(first[0], nodes.Dimension):
                angle = self._angle(first[0].value, first[0].unit)
                if angle is not None:
                    gradient.direction = angle
                    groups = groups[1:]
            elif isinstance(first[0], nodes.Identifier) and first[0].value == "to":
                if not all(isinstance(value, nodes.Identifier) for value in first[1:]) or len(first) == 1:
                    raise self.error(UnexpectedToken, f"Invalid direction in {name}()")
                gradient.direction = " ".join(value.value for value in first)
                groups = groups[1:]
        else:
            gradient = nodes.RadialGradient(repeating=repeating)
            if self._radial_shape(gradient, groups[0]):
                groups = groups[1:]

        if len(groups) < 2:
            raise self.error(InvalidArity, f"{name}() needs at least two color stops")
        gradient.color_stops = [
            nodes.ColorStop(group[0], group[1] if len(group) > 1 else None)
            for group in groups
        ]
        return nodes.Gradient(gradient)

    @staticmethod
    def _radial_shape(gradient: nodes.RadialGradient, group: list[nodes.Value]) -> bool:
        """Fill shape, size and position from the first argument of a radial
        gradient. Returns False when that argument is a color stop instead."""
        words = [value.value if isinstance(value, nodes.Identifier) else None for value in group]
        if not any(word in RADIAL_SHAPES or word in RADIAL_SIZES or word == "at" for word in words):
            return False

        index = 0
        while index < len(group):
            word = words[index]
            if word in RADIAL_SHAPES:
                gradient.shape = word
            elif word in RADIAL_SIZES:
                gradient.size = word
            elif word == "at":
                rest = group[index + 1:]
                gradient.position = nodes.Position(
                    rest[0] if len(rest) > 0 else None,
                    rest[1] if len(rest) > 1 else None,
                )
                break
            elif isinstance(group[index], nodes.Dimension):
                dimension = group[index]
                size = f"{dimension.value:g}{dimension.unit}"
                gradient.size = f"{gradient.size} {size}" if gradient.size else size
            index += 1
        return True


class Parse:
    """Entry points that each build a fresh `Parser` over `source`."""

    @staticmethod
    def parse_stylesheet(source: str, config: ParserConfig | None = None) -> nodes.Stylesheet:
        return Parser(source, config).parse_stylesheet()

    @staticmethod
    def parse_rule(source: str, config: ParserConfig | None = None) -> nodes.Rule:
        """Parse exactly one rule set or at-rule."""
        parser = Parser(source, config)
        parser._skip_comments()

        token = parser.current
        if isinstance(token, AtKeyword):
            parser.advance()
            rule = parser.parse_at_rule(token.raw)
        elif isinstance(token, RULE_START) or _delim(token, "*", "&"):
            rule = parser.parse_rule_set()
        else:
            raise parser.error(UnexpectedToken, "Expected a rule")

        parser._skip_comments()
        if parser.current is not None:
            raise parser.error(UnexpectedToken, "Expected a single rule")
        return rule

    @staticmethod
    def parse_selectors(source: str, config: ParserConfig | None = None) -> list[nodes.Selector]:
        parser = Parser(source, config)
        selectors = parser.parse_selectors()
        if parser.current is not None:
            raise parser.error(UnexpectedToken, "Unexpected token in selector list")
        return selectors

    @staticmethod
    def parse_declarations(
        source: str, config: ParserConfig | None = None
    ) -> tuple[list[nodes.Declaration], list[nodes.Rule]]:
        """Parse the body of a rule block, without its braces."""
        return Parser(source, config).parse_block()

    @staticmethod
    def parse_value(source: str, config: ParserConfig | None = None) -> list[nodes.Value]:
        """Parse a declaration value such as `1px solid red`."""
        parser = Parser(source, config)
        values = parser.parse_declaration_value()
        if isinstance(parser.current, Semicolon):
            parser.advance()
        parser._skip_comments()
        if isinstance(parser.current, LexError):
            raise parser.current
        elif parser.current is not None:
            raise parser.error(UnexpectedToken, f"Unexpected {parser.current!r} in value")
        return values
