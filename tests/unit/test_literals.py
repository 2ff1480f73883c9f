"""Tests for boolean, null and fixed-width number classification."""

from __future__ import annotations

import math

import pytest

from yamlshape.parser.literals import (
    FALSE_LITERALS,
    TRUE_LITERALS,
    NumberFormatError,
    NumberWidth,
    format_f32,
    is_null,
    parse_bool,
    parse_number,
    to_f32,
)

F32_MAX = 3.4028234663852886e38


class TestBooleans:
    @pytest.mark.parametrize(
        "text", ["y", "Y", "yes", "Yes", "YES", "true", "True", "TRUE", "on", "On", "ON", ""]
    )
    def test_truthy(self, text: str) -> None:
        assert parse_bool(text) is True

    @pytest.mark.parametrize(
        "text", ["n", "N", "no", "No", "NO", "false", "False", "FALSE", "off", "Off", "OFF"]
    )
    def test_falsy(self, text: str) -> None:
        assert parse_bool(text) is False

    @pytest.mark.parametrize("text", ["tRUE", "yEs", "oN", "1", "0", "nope", "~"])
    def test_other_casings_rejected(self, text: str) -> None:
        assert parse_bool(text) is None

    def test_families_are_disjoint(self) -> None:
        assert not TRUE_LITERALS & FALSE_LITERALS
        assert len(TRUE_LITERALS) == 12
        assert len(FALSE_LITERALS) == 11


class TestNulls:
    @pytest.mark.parametrize("text", ["null", "Null", "NULL", "~", "", "  "])
    def test_null_literals(self, text: str) -> None:
        assert is_null(text)

    @pytest.mark.parametrize("text", ["none", "nULL", "0", "false"])
    def test_non_null(self, text: str) -> None:
        assert not is_null(text)


class TestIntegers:
    def test_bounds(self) -> None:
        assert NumberWidth.I8.bounds == (-128, 127)
        assert NumberWidth.U8.bounds == (0, 255)
        assert NumberWidth.U64.bounds == (0, 2**64 - 1)
        assert NumberWidth.I64.bounds == (-(2**63), 2**63 - 1)

    @pytest.mark.parametrize(
        "text,width,expected",
        [
            ("0", NumberWidth.U8, 0),
            ("255", NumberWidth.U8, 255),
            ("+7", NumberWidth.U16, 7),
            ("-128", NumberWidth.I8, -128),
            ("2147483647", NumberWidth.I32, 2147483647),
            ("18446744073709551615", NumberWidth.U64, 2**64 - 1),
        ],
    )
    def test_in_range(self, text: str, width: NumberWidth, expected: int) -> None:
        assert parse_number(text, width) == expected

    @pytest.mark.parametrize(
        "text,width,detail",
        [
            ("256", NumberWidth.U8, "number too large to fit in target type"),
            ("-129", NumberWidth.I8, "number too small to fit in target type"),
            ("-1", NumberWidth.U8, "invalid digit found in string"),
            ("12a", NumberWidth.I32, "invalid digit found in string"),
            ("1.0", NumberWidth.I64, "invalid digit found in string"),
            ("0x1F", NumberWidth.U32, "invalid digit found in string"),
            ("", NumberWidth.I16, "cannot parse integer from empty string"),
        ],
    )
    def test_rejected(self, text: str, width: NumberWidth, detail: str) -> None:
        with pytest.raises(NumberFormatError) as exc_info:
            parse_number(text, width)
        assert str(exc_info.value) == detail


class TestFloats:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1.5", 1.5),
            ("-2e3", -2000.0),
            (".5", 0.5),
            ("3", 3.0),
            ("1.", 1.0),
            ("+4.25E-1", 0.425),
        ],
    )
    def test_decimal_forms(self, text: str, expected: float) -> None:
        assert parse_number(text, NumberWidth.F64) == expected

    @pytest.mark.parametrize("text", ["inf", "-Infinity", "+INF"])
    def test_infinities(self, text: str) -> None:
        assert math.isinf(parse_number(text, NumberWidth.F64))

    def test_nan(self) -> None:
        assert math.isnan(parse_number("NaN", NumberWidth.F32))

    @pytest.mark.parametrize("text", ["abc", "1_000", "1e", "", "--1", "0x10"])
    def test_invalid_literal(self, text: str) -> None:
        with pytest.raises(NumberFormatError, match="invalid float literal"):
            parse_number(text, NumberWidth.F64)

    def test_f32_rounds_to_single_precision(self) -> None:
        value = parse_number("0.1", NumberWidth.F32)
        assert value != 0.1
        assert value == to_f32(0.1)

    def test_f32_overflow(self) -> None:
        with pytest.raises(NumberFormatError, match="too large to fit in f32"):
            parse_number("1e39", NumberWidth.F32)

    def test_f32_max_is_accepted(self) -> None:
        assert parse_number("3.4028235e38", NumberWidth.F32) == F32_MAX
        assert parse_number("-3.4028235e38", NumberWidth.F32) == -F32_MAX

    def test_f32_rounding_past_max_overflows(self) -> None:
        with pytest.raises(NumberFormatError, match="too large to fit in f32"):
            parse_number("3.4028236e38", NumberWidth.F32)

    def test_f64_accepts_large(self) -> None:
        assert parse_number("1e39", NumberWidth.F64) == 1e39


class TestFormatF32:
    @pytest.mark.parametrize(
        "value,expected",
        [(0.1, "0.1"), (1.0, "1.0"), (3.14, "3.14"), (0.25, "0.25"), (-2.0, "-2.0")],
    )
    def test_shortest_text(self, value: float, expected: str) -> None:
        assert format_f32(to_f32(value)) == expected

    def test_largest_finite(self) -> None:
        assert format_f32(F32_MAX) == "3.4028235e+38"

    def test_non_finite(self) -> None:
        assert format_f32(math.inf) == "inf"
