"""YAML event access and literal classification for yamlshape."""

from yamlshape.parser.cursor import EventCursor, describe_event, span_of
from yamlshape.parser.literals import (
    FALSE_LITERALS,
    NULL_LITERALS,
    TRUE_LITERALS,
    NumberFormatError,
    NumberWidth,
    format_f32,
    is_null,
    parse_bool,
    parse_number,
)

__all__ = [
    "FALSE_LITERALS",
    "NULL_LITERALS",
    "TRUE_LITERALS",
    "EventCursor",
    "NumberFormatError",
    "NumberWidth",
    "describe_event",
    "format_f32",
    "is_null",
    "parse_bool",
    "parse_number",
    "span_of",
]
