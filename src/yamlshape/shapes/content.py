"""Buffered node content and its replay deserializer.

Internally tagged unions cannot know which variant they hold until the
tag field has been read, and the tag may come after the payload fields.
The mapping is therefore captured once as ``Content`` and the payload is
replayed through :class:`ContentDeserializer`, which applies the same
literal policy as the streaming decoder.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from yamlshape.models.errors import BoolParseError, InvalidTypeError, NumberParseError
from yamlshape.parser.literals import (
    NumberFormatError,
    NumberWidth,
    is_null,
    parse_bool,
    parse_number,
)
from yamlshape.shapes.protocol import (
    Deserializer,
    EnumAccess,
    MapAccess,
    Seed,
    SeqAccess,
    VariantAccess,
    Visitor,
    missing_field,
    unknown_field,
)
from yamlshape.shapes.shape import StructShape, UnionShape, VariantKind


@dataclass(frozen=True)
class ScalarContent:
    text: str


@dataclass(frozen=True)
class SeqContent:
    items: tuple[Content, ...]


@dataclass(frozen=True)
class MapContent:
    entries: tuple[tuple[Content, Content], ...]


Content = ScalarContent | SeqContent | MapContent


class _ContentVisitor(Visitor):
    expecting = "any value"

    def visit_str(self, value: str) -> ScalarContent:
        return ScalarContent(value)

    def visit_seq(self, access: SeqAccess) -> SeqContent:
        items: list[Content] = []
        while True:
            more, item = access.next_element(ContentShape())
            if not more:
                return SeqContent(tuple(items))
            items.append(item)

    def visit_map(self, access: MapAccess) -> MapContent:
        entries: list[tuple[Content, Content]] = []
        while True:
            more, key = access.next_key(ContentShape())
            if not more:
                return MapContent(tuple(entries))
            entries.append((key, access.next_value(ContentShape())))


class ContentShape:
    """Seed that captures one node of any shape."""

    def deserialize(self, deserializer: Deserializer) -> Content:
        return deserializer.deserialize_any(_ContentVisitor())


def _kind(content: Content) -> str:
    if isinstance(content, ScalarContent):
        return f"string {content.text!r}"
    if isinstance(content, SeqContent):
        return "sequence"
    return "map"


class _ContentSeqAccess(SeqAccess):
    def __init__(self, items: Sequence[Content]) -> None:
        self._items = list(items)
        self._index = 0

    def next_element(self, seed: Seed) -> tuple[bool, Any]:
        if self._index >= len(self._items):
            return False, None
        item = self._items[self._index]
        self._index += 1
        return True, seed.deserialize(ContentDeserializer(item))


class _ContentMapAccess(MapAccess):
    def __init__(self, entries: Sequence[tuple[Content, Content]]) -> None:
        self._entries = list(entries)
        self._index = 0

    def next_key(self, seed: Seed) -> tuple[bool, Any]:
        if self._index >= len(self._entries):
            return False, None
        return True, seed.deserialize(ContentDeserializer(self._entries[self._index][0]))

    def next_value(self, seed: Seed) -> Any:
        value = self._entries[self._index][1]
        self._index += 1
        return seed.deserialize(ContentDeserializer(value))


class _ContentEnumAccess(EnumAccess, VariantAccess):
    """``Tag`` (scalar) or ``Tag: payload`` (single-entry map)."""

    def __init__(self, tag: Content, payload: Content | None) -> None:
        self._tag = tag
        self._payload = payload

    def variant(self, seed: Seed) -> tuple[Any, VariantAccess]:
        return seed.deserialize(ContentDeserializer(self._tag)), self

    def _require_payload(self, expected: str) -> Content:
        if self._payload is None:
            raise InvalidTypeError(f"invalid type: unit variant, expected {expected}")
        return self._payload

    def unit_variant(self) -> None:
        if self._payload is not None:
            raise InvalidTypeError(f"invalid type: {_kind(self._payload)}, expected unit variant")

    def newtype_variant(self, seed: Seed) -> Any:
        return seed.deserialize(ContentDeserializer(self._require_payload("newtype variant")))

    def tuple_variant(self, length: int, visitor: Visitor) -> Any:
        payload = self._require_payload("tuple variant")
        return ContentDeserializer(payload).deserialize_tuple(length, visitor)

    def struct_variant(self, fields: Sequence[str], visitor: Visitor) -> Any:
        payload = self._require_payload("struct variant")
        return ContentDeserializer(payload).deserialize_struct("", fields, visitor)


class ContentDeserializer(Deserializer):
    """Replays buffered content through the shape protocol."""

    def __init__(self, content: Content) -> None:
        self._content = content

    def _scalar(self, expected: str) -> str:
        if not isinstance(self._content, ScalarContent):
            raise InvalidTypeError(f"invalid type: {_kind(self._content)}, expected {expected}")
        return self._content.text

    def _number(self, width: NumberWidth, visitor: Visitor) -> Any:
        text = self._scalar(width.value)
        try:
            value = parse_number(text, width)
        except NumberFormatError as exc:
            raise NumberParseError(text, str(exc), width.value) from exc
        if isinstance(value, float):
            return visitor.visit_float(value)
        return visitor.visit_int(value)

    def deserialize_any(self, visitor: Visitor) -> Any:
        content = self._content
        if isinstance(content, ScalarContent):
            return visitor.visit_str(content.text)
        if isinstance(content, SeqContent):
            return visitor.visit_seq(_ContentSeqAccess(content.items))
        return visitor.visit_map(_ContentMapAccess(content.entries))

    def deserialize_bool(self, visitor: Visitor) -> Any:
        text = self._scalar("a boolean")
        value = parse_bool(text)
        if value is None:
            raise BoolParseError(text)
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
        text = self._scalar("a character")
        if len(text) != 1:
            raise InvalidTypeError(f"invalid type: string {text!r}, expected a character")
        return visitor.visit_str(text)

    def deserialize_str(self, visitor: Visitor) -> Any:
        return visitor.visit_str(self._scalar("a string"))

    def deserialize_identifier(self, visitor: Visitor) -> Any:
        return visitor.visit_str(self._scalar("an identifier"))

    def deserialize_option(self, visitor: Visitor) -> Any:
        if isinstance(self._content, ScalarContent) and is_null(self._content.text):
            return visitor.visit_none()
        return visitor.visit_some(self)

    def deserialize_unit(self, visitor: Visitor) -> Any:
        if not is_null(self._scalar("unit")):
            raise InvalidTypeError(f"invalid type: {_kind(self._content)}, expected unit")
        return visitor.visit_unit()

    def deserialize_unit_struct(self, name: str, visitor: Visitor) -> Any:
        return self.deserialize_unit(visitor)

    def deserialize_newtype_struct(self, name: str, visitor: Visitor) -> Any:
        return visitor.visit_newtype_struct(self)

    def deserialize_seq(self, visitor: Visitor) -> Any:
        if not isinstance(self._content, SeqContent):
            raise InvalidTypeError(f"invalid type: {_kind(self._content)}, expected a sequence")
        return visitor.visit_seq(_ContentSeqAccess(self._content.items))

    def deserialize_tuple(self, length: int, visitor: Visitor) -> Any:
        return self.deserialize_seq(visitor)

    def deserialize_tuple_struct(self, name: str, length: int, visitor: Visitor) -> Any:
        return self.deserialize_seq(visitor)

    def deserialize_map(self, visitor: Visitor) -> Any:
        if not isinstance(self._content, MapContent):
            raise InvalidTypeError(f"invalid type: {_kind(self._content)}, expected a map")
        return visitor.visit_map(_ContentMapAccess(self._content.entries))

    def deserialize_struct(self, name: str, fields: Sequence[str], visitor: Visitor) -> Any:
        return self.deserialize_map(visitor)

    def deserialize_enum(self, name: str, variants: Sequence[str], visitor: Visitor) -> Any:
        content = self._content
        if isinstance(content, ScalarContent):
            return visitor.visit_enum(_ContentEnumAccess(content, None))
        if isinstance(content, MapContent) and len(content.entries) == 1:
            tag, payload = content.entries[0]
            return visitor.visit_enum(_ContentEnumAccess(tag, payload))
        raise InvalidTypeError(f"invalid type: {_kind(content)}, expected enum {name}")

    def deserialize_ignored_any(self, visitor: Visitor) -> Any:
        return visitor.visit_unit()


def decode_internally_tagged(union: UnionShape, deserializer: Deserializer) -> Any:
    """Buffer one mapping, pick the variant from its tag field, replay the rest."""
    assert union.tag is not None
    content = ContentShape().deserialize(deserializer)
    if not isinstance(content, MapContent):
        raise InvalidTypeError(
            f"invalid type: {_kind(content)}, expected internally tagged {union.name}"
        )
    tag_value: str | None = None
    rest: list[tuple[Content, Content]] = []
    for key, value in content.entries:
        if isinstance(key, ScalarContent) and key.text == union.tag and tag_value is None:
            tag_value = ContentDeserializer(value)._scalar("a variant name")
        else:
            rest.append((key, value))
    if tag_value is None:
        raise missing_field(union.tag)
    spec = union.lookup(tag_value)
    payload = ContentDeserializer(MapContent(tuple(rest)))
    if spec.kind is VariantKind.UNIT:
        if rest:
            key = rest[0][0]
            name = key.text if isinstance(key, ScalarContent) else _kind(key)
            raise unknown_field(name, [union.tag])
        return spec.cls()
    assert isinstance(spec.payload, StructShape)
    if spec.kind is VariantKind.NEWTYPE:
        return spec.cls(**{spec.attr or "": spec.payload.deserialize(payload)})
    return spec.payload.deserialize(payload)
