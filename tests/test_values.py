"""Tests for declaration values and the function grammars."""

import pytest

from cssparse.errors import InvalidArity, NumberFormat, UnexpectedToken, UnterminatedConstruct
from cssparse.nodes import *
from cssparse.parser import Parse


def value(source: str) -> Value:
    values = Parse.parse_value(source)
    assert len(values) == 1
    return values[0]


class TestComponents:
    def test_mixed_values(self):
        assert Parse.parse_value("1px solid red") == [
            Dimension(1.0, "px"),
            Identifier("solid"),
            Identifier("red"),
        ]

    def test_commas_are_dropped(self):
        assert Parse.parse_value('"Courier New", monospace') == [String("Courier New"), Identifier("monospace")]

    def test_slash_and_number(self):
        assert Parse.parse_value("12px/1.5 Arial") == [
            Dimension(12.0, "px"),
            Identifier("/"),
            Number(1.5),
            Identifier("Arial"),
        ]

    def test_important(self):
        assert Parse.parse_value("red !important") == [Identifier("red"), Identifier("!important")]

    def test_custom_property_reference(self):
        assert value("--gap") == Var("--gap")

    def test_percentage_and_signed_numbers(self):
        assert Parse.parse_value("-50% +2 -0.5em") == [Percentage(-50.0), Number(2.0), Dimension(-0.5, "em")]

    def test_trailing_semicolon_is_accepted(self):
        assert Parse.parse_value("auto;") == [Identifier("auto")]

    def test_trailing_garbage(self):
        with pytest.raises(UnexpectedToken):
            Parse.parse_value("auto }")

    def test_bad_string(self):
        with pytest.raises(UnexpectedToken, match="Malformed string"):
            Parse.parse_value('"abc')

    def test_bad_url(self):
        with pytest.raises(UnexpectedToken, match="Malformed url"):
            Parse.parse_value("url(a b)")


# ---------------------------------------------------------------------------
# Generic functions
# ---------------------------------------------------------------------------


class TestFunctions:
    def test_generic_function(self):
        assert value("translate(10px, 20px)") == Function(
            "translate", [Dimension(10.0, "px"), Dimension(20.0, "px")]
        )

    def test_var_function(self):
        assert value("var(--main-color)") == Function("var", [Var("--main-color")])

    def test_nested_functions(self):
        assert value("foo(bar(1) baz)") == Function("foo", [Function("bar", [Number(1.0)]), Identifier("baz")])

    def test_unterminated_function(self):
        with pytest.raises(UnterminatedConstruct) as info:
            Parse.parse_value("translate(10px")
        assert "translate()" in info.value.message

    def test_unexpected_token_in_function(self):
        with pytest.raises(UnexpectedToken):
            Parse.parse_value("translate(10px; 20px)")


class TestUrl:
    def test_unquoted(self):
        assert value("url(img/a.png)") == Uri("img/a.png")

    def test_quoted(self):
        assert value('url("img/a.png")') == Uri("img/a.png")

    def test_quoted_unterminated(self):
        with pytest.raises(UnterminatedConstruct):
            Parse.parse_value('url("a.png"')


class TestRect:
    def test_four_numbers(self):
        assert value("rect(1, 2, 3, 4)") == Function("rect", [Number(1.0), Number(2.0), Number(3.0), Number(4.0)])

    def test_wrong_count(self):
        with pytest.raises(InvalidArity):
            Parse.parse_value("rect(1, 2, 3)")

    def test_dimensions_are_rejected(self):
        with pytest.raises(UnexpectedToken):
            Parse.parse_value("rect(1px, 2px, 3px, 4px)")


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------


class TestRgb:
    def test_hex(self):
        assert value("#007bff") == Color(Hex("007bff"))

    def test_rgb(self):
        assert value("rgb(255, 0, 128)") == Color(Rgb(255, 0, 128))

    @pytest.mark.parametrize("r", range(256))
    def test_every_byte_channel_is_exact(self, r):
        assert value(f"rgb({r}, {255 - r}, {r})") == Color(Rgb(r, 255 - r, r))

    def test_rgba(self):
        assert value("rgba(0, 0, 0, 0.5)") == Color(Rgba(0, 0, 0, 0.5))

    def test_space_separated_with_slash_alpha(self):
        assert value("rgb(0 0 0 / 50%)") == Color(Rgba(0, 0, 0, 0.5))

    def test_case_insensitive_name(self):
        assert value("RGB(1, 2, 3)") == Color(Rgb(1, 2, 3))

    @pytest.mark.parametrize("source", ["rgb(1, 2)", "rgba(1, 2, 3, 4, 5)", "rgb()"])
    def test_arity(self, source):
        with pytest.raises(InvalidArity):
            Parse.parse_value(source)

    def test_channel_out_of_range(self):
        with pytest.raises(NumberFormat) as info:
            Parse.parse_value("rgb(300, 0, 0)")
        assert info.value.span == (4, 7)

    @pytest.mark.parametrize("source", ["rgb(1.5, 0, 0)", "rgb(10%, 0, 0)", "rgb(-1, 0, 0)"])
    def test_channel_must_be_byte_integer(self, source):
        with pytest.raises(NumberFormat):
            Parse.parse_value(source)

    def test_ident_argument(self):
        with pytest.raises(UnexpectedToken, match=r"rgb\(\)"):
            Parse.parse_value("rgb(red, 0, 0)")


class TestHsl:
    def test_hsl(self):
        assert value("hsl(120, 100%, 50%)") == Color(Hsl(120.0, 100.0, 50.0))

    def test_hsla_with_angle(self):
        assert value("hsla(0.5turn, 50%, 25%, 0.3)") == Color(Hsla(180.0, 50.0, 25.0, 0.3))

    def test_degree_hue(self):
        assert value("hsl(90deg 10% 10%)") == Color(Hsl(90.0, 10.0, 10.0))

    def test_hue_must_be_an_angle(self):
        with pytest.raises(UnexpectedToken, match="Invalid hue"):
            Parse.parse_value("hsl(10px, 1%, 1%)")

    def test_arity(self):
        with pytest.raises(InvalidArity):
            Parse.parse_value("hsl(1, 2%)")


# ---------------------------------------------------------------------------
# calc()
# ---------------------------------------------------------------------------


class TestCalc:
    def test_mixed_units(self):
        assert value("calc(100% - 20px)") == Calc([
            CalcNumber(100.0, "%"),
            CalcOperator(Operator.Subtract),
            CalcNumber(20.0, "px"),
        ])

    def test_operators(self):
        assert value("calc(2 * 3 / 4 + 1)") == Calc([
            CalcNumber(2.0),
            CalcOperator(Operator.Multiply),
            CalcNumber(3.0),
            CalcOperator(Operator.Divide),
            CalcNumber(4.0),
            CalcOperator(Operator.Add),
            CalcNumber(1.0),
        ])

    def test_lone_percent_is_a_placeholder(self):
        assert value("calc(5 %)") == Calc([CalcNumber(5.0), CalcNumber(0.0, "%")])

    def test_unexpected_term(self):
        with pytest.raises(UnexpectedToken, match=r"calc\(\)"):
            Parse.parse_value("calc(1px + auto)")

    def test_unterminated(self):
        with pytest.raises(UnterminatedConstruct):
            Parse.parse_value("calc(1px + 2px")


# ---------------------------------------------------------------------------
# Gradients
# ---------------------------------------------------------------------------


class TestGradients:
    def test_linear_with_angle(self):
        assert value("linear-gradient(45deg, red, blue)") == Gradient(
            LinearGradient(
                direction=Angle(45.0, AngleUnit.Degree),
                color_stops=[ColorStop(Identifier("red")), ColorStop(Identifier("blue"))],
            )
        )

    def test_linear_with_side_and_positions(self):
        gradient = value("linear-gradient(to right, #fff 0%, #000 100%)").gradient
        assert gradient.direction == "to right"
        assert gradient.color_stops == [
            ColorStop(Color(Hex("fff")), Percentage(0.0)),
            ColorStop(Color(Hex("000")), Percentage(100.0)),
        ]

    def test_repeating_without_direction(self):
        gradient = value("repeating-linear-gradient(red, blue 10px)").gradient
        assert gradient.repeating
        assert gradient.direction is None
        assert gradient.color_stops[1] == ColorStop(Identifier("blue"), Dimension(10.0, "px"))

    def test_radial_shape_and_position(self):
        gradient = value("radial-gradient(circle at center, red, blue)").gradient
        assert isinstance(gradient, RadialGradient)
        assert gradient.shape == "circle"
        assert gradient.position == Position(Identifier("center"))
        assert len(gradient.color_stops) == 2

    def test_radial_without_shape(self):
        gradient = value("radial-gradient(red, blue)").gradient
        assert gradient.shape is None
        assert [stop.color for stop in gradient.color_stops] == [Identifier("red"), Identifier("blue")]

    def test_needs_two_stops(self):
        with pytest.raises(InvalidArity):
            Parse.parse_value("linear-gradient(45deg, red)")

    def test_empty_argument(self):
        with pytest.raises(UnexpectedToken, match="Empty argument"):
            Parse.parse_value("linear-gradient(red, , blue)")
