"""
AST produced by `cssparse.parser`.

Nodes are plain dataclasses with no behavior and no reference back to the
tokens they were built from.

<stylesheet>
    <ruleset>
        <selector/>, <selector/> { <declaration/>; <ruleset/> }
    </ruleset>
    <at-rule> @name <prelude/> { <stylesheet/> } </at-rule>
</stylesheet>

The parser only builds `Simple` selectors: pseudo-classes, pseudo-elements and
attribute captures are kept as raw text in `Simple.classes` (or `Simple.tag`
when nothing precedes them), and combinators are spliced into `Simple.tag` as
`"a > b"`. The richer selector variants exist for consumers that want to build
them themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from typing_extensions import TypeAliasType

__all__ = [
    "Stylesheet",
    "Rule",
    "RuleSet",
    "AtRule",
    "Declaration",
    # selectors
    "Selector",
    "Simple",
    "Attribute",
    "AttributeOperator",
    "PseudoClass",
    "PseudoElement",
    "Combinator",
    "CombinatorKind",
    # values
    "Value",
    "Identifier",
    "String",
    "Number",
    "Percentage",
    "Dimension",
    "Uri",
    "Function",
    "Calc",
    "Var",
    "Color",
    "Gradient",
    "Angle",
    "Time",
    "Frequency",
    "Resolution",
    "AngleUnit",
    "TimeUnit",
    "FrequencyUnit",
    "ResolutionUnit",
    # colors
    "ColorValue",
    "Hex",
    "Rgb",
    "Rgba",
    "Hsl",
    "Hsla",
    "Named",
    # calc
    "CalcTerm",
    "CalcNumber",
    "CalcOperator",
    "Operator",
    # gradients
    "GradientValue",
    "LinearGradient",
    "RadialGradient",
    "ColorStop",
    "Position",
]


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------


@dataclass
class Simple:
    """Tag, id and classes, e.g. `div#main.wide`."""

    tag: Optional[str] = None
    id: Optional[str] = None
    classes: list[str] = field(default_factory=list)


class AttributeOperator(Enum):
    Equals = "="
    Includes = "~="
    DashMatch = "|="
    PrefixMatch = "^="
    SuffixMatch = "$="
    SubstringMatch = "*="


@dataclass
class Attribute:
    attribute: str
    operator: Optional[AttributeOperator] = None
    value: Optional[str] = None


@dataclass
class PseudoClass:
    name: str
    argument: Optional[str] = None  # nth-child(2) -> "2"


@dataclass
class PseudoElement:
    name: str


class CombinatorKind(Enum):
    Descendant = " "
    Child = ">"
    AdjacentSibling = "+"
    GeneralSibling = "~"


@dataclass
class Combinator:
    kind: CombinatorKind
    inner: Optional[Selector] = None


Selector = TypeAliasType(
    "Selector",
    Simple | Attribute | PseudoClass | PseudoElement | Combinator,
)


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------


@dataclass
class Hex:
    value: str  # without the leading '#'


@dataclass
class Rgb:
    r: int
    g: int
    b: int


@dataclass
class Rgba:
    r: int
    g: int
    b: int
    a: float  # 0..1


@dataclass
class Hsl:
    h: float
    s: float
    l: float


@dataclass
class Hsla:
    h: float
    s: float
    l: float
    a: float


@dataclass
class Named:
    name: str


ColorValue = TypeAliasType("ColorValue", Hex | Rgb | Rgba | Hsl | Hsla | Named)


# ---------------------------------------------------------------------------
# calc()
# ---------------------------------------------------------------------------


class Operator(Enum):
    Add = "+"
    Subtract = "-"
    Multiply = "*"
    Divide = "/"


@dataclass
class CalcNumber:
    value: float
    unit: Optional[str] = None


@dataclass
class CalcOperator:
    operator: Operator


CalcTerm = TypeAliasType("CalcTerm", CalcNumber | CalcOperator)


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


class AngleUnit(Enum):
    Degree = "deg"
    Grad = "grad"
    Radian = "rad"
    Turn = "turn"


class TimeUnit(Enum):
    Second = "s"
    Millisecond = "ms"


class FrequencyUnit(Enum):
    Hertz = "hz"
    Kilohertz = "khz"


class ResolutionUnit(Enum):
    Dpi = "dpi"
    Dpcm = "dpcm"
    Dppx = "dppx"


@dataclass
class Angle:
    value: float
    unit: AngleUnit


@dataclass
class Time:
    value: float
    unit: TimeUnit


@dataclass
class Frequency:
    value: float
    unit: FrequencyUnit


@dataclass
class Resolution:
    value: float
    unit: ResolutionUnit


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


@dataclass
class Identifier:
    value: str


@dataclass
class String:
    value: str


@dataclass
class Number:
    value: float


@dataclass
class Percentage:
    value: float


@dataclass
class Dimension:
    value: float
    unit: str


@dataclass
class Uri:
    value: str


@dataclass
class Function:
    name: str
    arguments: list[Value] = field(default_factory=list)


@dataclass
class Calc:
    terms: list[CalcTerm] = field(default_factory=list)


@dataclass
class Var:
    name: str


@dataclass
class Color:
    color: ColorValue


@dataclass
class Gradient:
    gradient: GradientValue


Value = TypeAliasType(
    "Value",
    Identifier
    | String
    | Number
    | Percentage
    | Dimension
    | Uri
    | Function
    | Calc
    | Var
    | Color
    | Gradient
    | Angle
    | Time
    | Frequency
    | Resolution,
)


# ---------------------------------------------------------------------------
# Gradients
# ---------------------------------------------------------------------------


@dataclass
class ColorStop:
    color: Value
    position: Optional[Value] = None  # 10%, 20px


@dataclass
class Position:
    x: Optional[Value] = None  # center, 10px
    y: Optional[Value] = None  # top, 20px


@dataclass
class LinearGradient:
    # An angle such as 45deg, or a side keyword such as "to right".
    direction: Angle | str | None = None
    color_stops: list[ColorStop] = field(default_factory=list)
    repeating: bool = False


@dataclass
class RadialGradient:
    shape: Optional[str] = None  # circle, ellipse
    size: Optional[str] = None  # closest-side
    position: Optional[Position] = None
    color_stops: list[ColorStop] = field(default_factory=list)
    repeating: bool = False


GradientValue = TypeAliasType("GradientValue", LinearGradient | RadialGradient)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


@dataclass
class Declaration:
    property: str
    value: list[Value] = field(default_factory=list)


@dataclass
class RuleSet:
    selectors: list[Selector]
    declarations: list[Declaration] = field(default_factory=list)
    nested_rules: list[Rule] = field(default_factory=list)


@dataclass
class AtRule:
    name: str
    prelude: list[str] = field(default_factory=list)  # raw source text per token
    block: Optional[Stylesheet] = None
    # Descriptors of blocks like @font-face and @page.
    declarations: list[Declaration] = field(default_factory=list)


Rule = TypeAliasType("Rule", RuleSet | AtRule)


@dataclass
class Stylesheet:
    rules: list[Rule] = field(default_factory=list)
