"""Block-style YAML writer driven by shape serialization."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from yamlshape.models.errors import YamlShapeError
from yamlshape.parser.literals import format_f32
from yamlshape.shapes.describe import describe, infer
from yamlshape.shapes.protocol import (
    Serializable,
    SerializeMap,
    SerializeSeq,
    SerializeStruct,
    Serializer,
)

logger = logging.getLogger("yamlshape.ser")

_INDENT = "  "


class Encoder(Serializer):
    """Writes one value into an in-memory buffer.

    Nested block content is indented two spaces per level.  A new line is
    not started at the very beginning of the output or right after a
    ``"- "`` marker, so mappings and variants continue inline there.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._indent = 0
        self._inline = True
        self._after_colon = False
        self._in_key = False

    # -- low-level writing ---------------------------------------------------

    def newline_with_indent(self) -> None:
        self._after_colon = False
        if self._inline:
            self._inline = False
            return
        self._parts.append("\n" + _INDENT * self._indent)

    def write_scalar(self, text: str) -> None:
        if self._after_colon and text:
            self._parts.append(" ")
        self._parts.append(text)
        self._after_colon = False
        self._inline = False

    def write_colon(self) -> None:
        self._parts.append(":")
        self._after_colon = True
        self._inline = False

    def write_dash(self) -> None:
        self._parts.append("- ")
        self._after_colon = False
        self._inline = True

    def increase_indent(self) -> None:
        self._indent += 1

    def decrease_indent(self) -> None:
        self._indent -= 1

    def write_key(self, key: Any, shape: Serializable) -> None:
        self.newline_with_indent()
        self._in_key = True
        try:
            shape.serialize(key, self)
        finally:
            self._in_key = False
        self.write_colon()

    def _block(self) -> None:
        if self._in_key:
            raise YamlShapeError.custom("map keys must be scalars")

    def finish(self) -> str:
        self._parts.append("\n")
        return "".join(self._parts)

    # -- scalars -------------------------------------------------------------

    def serialize_bool(self, value: bool) -> None:
        self.write_scalar("true" if value else "false")

    def serialize_int(self, value: int) -> None:
        self.write_scalar(str(value))

    def serialize_f32(self, value: float) -> None:
        self.write_scalar(format_f32(value))

    def serialize_f64(self, value: float) -> None:
        self.write_scalar(repr(value))

    def serialize_char(self, value: str) -> None:
        self.write_scalar(value)

    def serialize_str(self, value: str) -> None:
        self.write_scalar(value)

    def serialize_none(self) -> None:
        self.write_scalar("null")

    def serialize_some(self, value: Any, shape: Serializable) -> None:
        shape.serialize(value, self)

    def serialize_unit(self) -> None:
        self.write_scalar("null")

    def serialize_unit_struct(self, name: str) -> None:
        self.write_scalar("null")

    def serialize_unit_variant(self, name: str, index: int, variant: str) -> None:
        self.write_scalar(variant)

    def serialize_newtype_struct(self, name: str, value: Any, shape: Serializable) -> None:
        shape.serialize(value, self)

    def serialize_newtype_variant(
        self, name: str, index: int, variant: str, value: Any, shape: Serializable
    ) -> None:
        self._open_variant(variant)
        shape.serialize(value, self)
        self.decrease_indent()

    def _open_variant(self, variant: str) -> None:
        self._block()
        self.newline_with_indent()
        self.write_scalar(variant)
        self.write_colon()
        self.increase_indent()

    # -- compound ------------------------------------------------------------

    def serialize_seq(self, length: int | None) -> SerializeSeq:
        self._block()
        return _SequenceWriter(self)

    def serialize_tuple(self, length: int) -> SerializeSeq:
        return self.serialize_seq(length)

    def serialize_tuple_struct(self, name: str, length: int) -> SerializeSeq:
        return self.serialize_seq(length)

    def serialize_tuple_variant(
        self, name: str, index: int, variant: str, length: int
    ) -> SerializeSeq:
        self._open_variant(variant)
        return _SequenceWriter(self, closes_variant=True)

    def serialize_map(self, length: int | None) -> SerializeMap:
        self._block()
        return _MappingWriter(self)

    def serialize_struct(self, name: str, length: int) -> SerializeStruct:
        self._block()
        return _StructWriter(self)

    def serialize_struct_variant(
        self, name: str, index: int, variant: str, length: int
    ) -> SerializeStruct:
        self._open_variant(variant)
        return _StructWriter(self, closes_variant=True)


class _SequenceWriter(SerializeSeq):
    def __init__(self, encoder: Encoder, closes_variant: bool = False) -> None:
        self._encoder = encoder
        self._closes_variant = closes_variant
        self._count = 0

    def serialize_element(self, value: Any, shape: Serializable) -> None:
        encoder = self._encoder
        encoder.newline_with_indent()
        encoder.write_dash()
        encoder.increase_indent()
        shape.serialize(value, encoder)
        encoder.decrease_indent()
        self._count += 1

    def end(self) -> None:
        if self._count == 0:
            self._encoder.write_scalar("[]")
        if self._closes_variant:
            self._encoder.decrease_indent()


class _MappingWriter(SerializeMap):
    def __init__(self, encoder: Encoder) -> None:
        self._encoder = encoder
        self._count = 0

    def serialize_key(self, key: Any, shape: Serializable) -> None:
        self._encoder.write_key(key, shape)

    def serialize_value(self, value: Any, shape: Serializable) -> None:
        encoder = self._encoder
        encoder.increase_indent()
        shape.serialize(value, encoder)
        encoder.decrease_indent()
        self._count += 1

    def end(self) -> None:
        if self._count == 0:
            self._encoder.write_scalar("{}")


class _StructWriter(SerializeStruct):
    def __init__(self, encoder: Encoder, closes_variant: bool = False) -> None:
        self._encoder = encoder
        self._closes_variant = closes_variant
        self._count = 0

    def serialize_field(self, key: str, value: Any, shape: Serializable) -> None:
        encoder = self._encoder
        encoder.newline_with_indent()
        encoder.write_scalar(key)
        encoder.write_colon()
        encoder.increase_indent()
        shape.serialize(value, encoder)
        encoder.decrease_indent()
        self._count += 1

    def end(self) -> None:
        if self._count == 0:
            self._encoder.write_scalar("{}")
        if self._closes_variant:
            self._encoder.decrease_indent()


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def encode(value: Any, target: Any = None) -> str:
    """Render ``value`` as a block-style YAML document.

    ``target`` selects the shape explicitly; without it the shape follows
    the runtime type of ``value``.
    """
    shape = describe(target) if target is not None else infer(value)
    logger.debug("encode %s as %r", type(value).__name__, shape)
    encoder = Encoder()
    shape.serialize(value, encoder)
    return encoder.finish()


def encode_file(path: Path, value: Any, target: Any = None) -> None:
    """Write ``value`` to ``path`` as UTF-8 block-style YAML."""
    with path.open("w", encoding="utf-8") as handle:
        handle.write(encode(value, target))
