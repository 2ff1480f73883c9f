"""Pull decoder: drives shape visitors from the YAML event stream."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ruamel.yaml.events import MappingStartEvent, ScalarEvent, SequenceStartEvent

from yamlshape.de.access import (
    MappingAccessor,
    ScalarVariantAccess,
    SequenceAccessor,
    VariantAccessor,
)
from yamlshape.models.errors import (
    BoolParseError,
    InvalidTypeError,
    NumberParseError,
    UnexpectedElementError,
)
from yamlshape.parser.cursor import EventCursor, describe_event
from yamlshape.parser.literals import (
    NumberFormatError,
    NumberWidth,
    is_null,
    parse_bool,
    parse_number,
)
from yamlshape.settings import Settings
from yamlshape.shapes.describe import describe
from yamlshape.shapes.protocol import Deserializer, Visitor

logger = logging.getLogger("yamlshape.de")


class Decoder(Deserializer):
    """Implements every ``deserialize_*`` request against one ``EventCursor``.

    After any call returns, the cursor sits on the event following the
    value just decoded, however much of a collection the visitor read.
    """

    def __init__(self, cursor: EventCursor) -> None:
        self._cursor = cursor

    @property
    def cursor(self) -> EventCursor:
        return self._cursor

    # -- helpers -------------------------------------------------------------

    def _visit_sequence(self, visitor: Visitor) -> Any:
        access = SequenceAccessor(self)
        value = visitor.visit_seq(access)
        access.drain()
        return value

    def _visit_mapping(self, visitor: Visitor) -> Any:
        access = MappingAccessor(self)
        value = visitor.visit_map(access)
        access.drain()
        return value

    def _number(self, width: NumberWidth, visitor: Visitor) -> Any:
        text, span = self._cursor.expect_scalar(f"deserialize_{width.value}")
        try:
            value = parse_number(text, width)
        except NumberFormatError as exc:
            raise NumberParseError(text, str(exc), width.value, span) from exc
        if isinstance(value, float):
            return visitor.visit_float(value)
        return visitor.visit_int(value)

    # -- self-describing -----------------------------------------------------

    def deserialize_any(self, visitor: Visitor) -> Any:
        event, span = self._cursor.next()
        if isinstance(event, ScalarEvent):
            return visitor.visit_str(event.value)
        if isinstance(event, SequenceStartEvent):
            return self._visit_sequence(visitor)
        if isinstance(event, MappingStartEvent):
            return self._visit_mapping(visitor)
        raise UnexpectedElementError(describe_event(event), span, "deserialize_any")

    def deserialize_ignored_any(self, visitor: Visitor) -> Any:
        self._cursor.skip_node()
        return visitor.visit_unit()

    # -- scalars -------------------------------------------------------------

    def deserialize_bool(self, visitor: Visitor) -> Any:
        text, span = self._cursor.expect_scalar("deserialize_bool")
        value = parse_bool(text)
        if value is None:
            raise BoolParseError(text, span)
        return visitor.visit_bool(value)

    def deserialize_i8(self, visitor: Visitor) -> Any:
        return self._number(NumberWidth.I8, visitor)

    def deserialize_i16(self, visitor: Visitor) -> Any:
        return self._number(NumberWidth.I16, visitor)

    def deserialize_i32(self, visitor: Visitor) -> Any:
        return self._number(NumberWidth.I32, visitor)

    def deserialize_i64(self, visitor: Visitor) -> Any:
        return self._number(NumberWidth.I64, visitor)

    def deserialize_u8(self, visitor: Visitor) -> Any:
        return self._number(NumberWidth.U8, visitor)

    def deserialize_u16(self, visitor: Visitor) -> Any:
        return self._number(NumberWidth.U16, visitor)

    def deserialize_u32(self, visitor: Visitor) -> Any:
        return self._number(NumberWidth.U32, visitor)

    def deserialize_u64(self, visitor: Visitor) -> Any:
        return self._number(NumberWidth.U64, visitor)

    def deserialize_f32(self, visitor: Visitor) -> Any:
        return self._number(NumberWidth.F32, visitor)

    def deserialize_f64(self, visitor: Visitor) -> Any:
        return self._number(NumberWidth.F64, visitor)

    def deserialize_char(self, visitor: Visitor) -> Any:
        text, span = self._cursor.expect_scalar("deserialize_char")
        if len(text) != 1:
            raise InvalidTypeError(
                f"invalid type: string {text!r}, expected a single character", span
            )
        return visitor.visit_str(text)

    def deserialize_str(self, visitor: Visitor) -> Any:
        text, _span = self._cursor.expect_scalar("deserialize_str")
        return visitor.visit_str(text)

    def deserialize_identifier(self, visitor: Visitor) -> Any:
        text, _span = self._cursor.expect_scalar("deserialize_identifier")
        return visitor.visit_str(text)

    # -- absence -------------------------------------------------------------

    def deserialize_option(self, visitor: Visitor) -> Any:
        event = self._cursor.peek_event()
        if isinstance(event, ScalarEvent) and is_null(event.value):
            self._cursor.next()
            return visitor.visit_none()
        return visitor.visit_some(self)

    def deserialize_unit(self, visitor: Visitor) -> Any:
        event, span = self._cursor.next()
        if not (isinstance(event, ScalarEvent) and is_null(event.value)):
            raise InvalidTypeError(
                f"invalid type: {describe_event(event)}, expected null", span
            )
        return visitor.visit_unit()

    def deserialize_unit_struct(self, name: str, visitor: Visitor) -> Any:
        return self.deserialize_unit(visitor)

    def deserialize_newtype_struct(self, name: str, visitor: Visitor) -> Any:
        return visitor.visit_newtype_struct(self)

    # -- collections ---------------------------------------------------------

    def deserialize_seq(self, visitor: Visitor) -> Any:
        self._cursor.expect_sequence_start("deserialize_seq")
        return self._visit_sequence(visitor)

    def deserialize_tuple(self, length: int, visitor: Visitor) -> Any:
        self._cursor.expect_sequence_start("deserialize_tuple")
        return self._visit_sequence(visitor)

    def deserialize_tuple_struct(self, name: str, length: int, visitor: Visitor) -> Any:
        self._cursor.expect_sequence_start("deserialize_tuple_struct")
        return self._visit_sequence(visitor)

    def deserialize_map(self, visitor: Visitor) -> Any:
        self._cursor.expect_mapping_start("deserialize_map")
        return self._visit_mapping(visitor)

    def deserialize_struct(self, name: str, fields: Sequence[str], visitor: Visitor) -> Any:
        self._cursor.expect_mapping_start("deserialize_struct")
        return self._visit_mapping(visitor)

    def deserialize_enum(self, name: str, variants: Sequence[str], visitor: Visitor) -> Any:
        event, span = self._cursor.next()
        if isinstance(event, ScalarEvent):
            return visitor.visit_enum(ScalarVariantAccess(event.value, span))
        if isinstance(event, MappingStartEvent):
            value = visitor.visit_enum(VariantAccessor(self))
            self._cursor.expect_mapping_end("deserialize_enum")
            return value
        raise UnexpectedElementError(describe_event(event), span, "deserialize_enum")


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def decode(
    text: str,
    target: Any,
    *,
    filename: str = "<string>",
    settings: Settings | None = None,
) -> Any:
    """Decode one YAML document into a value of type ``target``."""
    shape = describe(target)
    logger.debug("decode %s as %r (%d chars)", filename, shape, len(text))
    cursor = EventCursor.from_string(text, filename, settings)
    cursor.expect_stream_start("decode")
    cursor.expect_document_start("decode")
    value = shape.deserialize(Decoder(cursor))
    cursor.expect_document_end("decode")
    cursor.expect_stream_end("decode")
    return value


def decode_file(path: Path, target: Any, *, settings: Settings | None = None) -> Any:
    """Decode a UTF-8 YAML file into a value of type ``target``."""
    with path.open("r", encoding="utf-8") as handle:
        content = handle.read()
    return decode(content, target, filename=str(path), settings=settings)
