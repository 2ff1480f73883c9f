"""Static literal classification: booleans, nulls and fixed-width numbers.

All tables are module constants; nothing is compiled or rebuilt per call.
"""

from __future__ import annotations

import math
import re
import struct
from enum import StrEnum

TRUE_LITERALS = frozenset(
    {"y", "Y", "yes", "Yes", "YES", "true", "True", "TRUE", "on", "On", "ON", ""}
)
FALSE_LITERALS = frozenset(
    {"n", "N", "no", "No", "NO", "false", "False", "FALSE", "off", "Off", "OFF"}
)
NULL_LITERALS = frozenset({"null", "Null", "NULL", "~", ""})

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


class NumberWidth(StrEnum):
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    F32 = "f32"
    F64 = "f64"

    @property
    def is_float(self) -> bool:
        return self in (NumberWidth.F32, NumberWidth.F64)

    @property
    def is_signed(self) -> bool:
        return self.value.startswith("i")

    @property
    def bits(self) -> int:
        return int(self.value[1:])

    @property
    def bounds(self) -> tuple[int, int]:
        """Inclusive integer range for this width."""
        if self.is_signed:
            return -(1 << (self.bits - 1)), (1 << (self.bits - 1)) - 1
        return 0, (1 << self.bits) - 1


class NumberFormatError(ValueError):
    """Text is not a number of the requested width; message is the detail."""


def parse_bool(text: str) -> bool | None:
    """Classify ``text`` as True/False, or None if it is in neither family."""
    if text in TRUE_LITERALS:
        return True
    if text in FALSE_LITERALS:
        return False
    return None


def is_null(text: str) -> bool:
    return text.strip() in NULL_LITERALS


def parse_int(text: str, width: NumberWidth) -> int:
    if not text:
        raise NumberFormatError("cannot parse integer from empty string")
    pattern = _SIGNED_RE if width.is_signed else _UNSIGNED_RE
    if pattern.fullmatch(text) is None:
        raise NumberFormatError("invalid digit found in string")
    value = int(text)
    low, high = width.bounds
    if value > high:
        raise NumberFormatError("number too large to fit in target type")
    if value < low:
        raise NumberFormatError("number too small to fit in target type")
    return value


def parse_float(text: str, width: NumberWidth) -> float:
    if _FLOAT_RE.fullmatch(text) is None:
        raise NumberFormatError("invalid float literal")
    value = float(text)
    if width is NumberWidth.F32:
        return to_f32(value)
    return value


def to_f32(value: float) -> float:
    """Round to single precision; finite values that round to infinity are rejected."""
    try:
        packed = struct.pack("<f", value)
    except OverflowError as exc:
        raise NumberFormatError("number too large to fit in f32") from exc
    return struct.unpack("<f", packed)[0]


def parse_number(text: str, width: NumberWidth) -> int | float:
    if width.is_float:
        return parse_float(text, width)
    return parse_int(text, width)


def format_f32(value: float) -> str:
    """Shortest decimal text that reads back as the same f32."""
    if not math.isfinite(value):
        return repr(value)
    for precision in range(1, 10):
        text = f"{value:.{precision}g}"
        if to_f32(float(text)) == value:
            return text if any(c in text for c in ".eEn") else f"{text}.0"
    return repr(value)
