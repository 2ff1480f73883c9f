"""Bounded accessors handed to visitors for sequences, mappings and variants.

An accessor owns the end marker of its collection: it consumes the end
event while reporting exhaustion.  ``drain`` finishes whatever the
visitor left unread so the cursor always ends up just past the
collection.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from ruamel.yaml.events import MappingEndEvent, SequenceEndEvent

from yamlshape.models.errors import InvalidTypeError, SourceSpan
from yamlshape.shapes.content import ContentDeserializer, ScalarContent
from yamlshape.shapes.protocol import EnumAccess, MapAccess, Seed, SeqAccess, VariantAccess, Visitor

if TYPE_CHECKING:
    from yamlshape.de.decoder import Decoder


class SequenceAccessor(SeqAccess):
    def __init__(self, decoder: Decoder) -> None:
        self._decoder = decoder
        self._finished = False

    def next_element(self, seed: Seed) -> tuple[bool, Any]:
        if self._finished:
            return False, None
        cursor = self._decoder.cursor
        if isinstance(cursor.peek_event(), SequenceEndEvent):
            cursor.next()
            self._finished = True
            return False, None
        return True, seed.deserialize(self._decoder)

    def drain(self) -> None:
        if not self._finished:
            self._decoder.cursor.consume_to_sequence_end()
            self._finished = True


class MappingAccessor(MapAccess):
    def __init__(self, decoder: Decoder) -> None:
        self._decoder = decoder
        self._finished = False

    def next_key(self, seed: Seed) -> tuple[bool, Any]:
        if self._finished:
            return False, None
        cursor = self._decoder.cursor
        if isinstance(cursor.peek_event(), MappingEndEvent):
            cursor.next()
            self._finished = True
            return False, None
        return True, seed.deserialize(self._decoder)

    def next_value(self, seed: Seed) -> Any:
        # Only valid right after next_key returned a key.
        return seed.deserialize(self._decoder)

    def drain(self) -> None:
        if not self._finished:
            self._decoder.cursor.consume_to_mapping_end()
            self._finished = True


class VariantAccessor(EnumAccess, VariantAccess):
    """Externally tagged variant: a mapping whose single key is the tag.

    The caller asserts the mapping end once the payload has been read.
    """

    def __init__(self, decoder: Decoder) -> None:
        self._decoder = decoder

    def variant(self, seed: Seed) -> tuple[Any, VariantAccess]:
        return seed.deserialize(self._decoder), self

    def unit_variant(self) -> None:
        return None

    def newtype_variant(self, seed: Seed) -> Any:
        return seed.deserialize(self._decoder)

    def tuple_variant(self, length: int, visitor: Visitor) -> Any:
        return self._decoder.deserialize_tuple(length, visitor)

    def struct_variant(self, fields: Sequence[str], visitor: Visitor) -> Any:
        return self._decoder.deserialize_struct("", fields, visitor)


class ScalarVariantAccess(EnumAccess, VariantAccess):
    """Bare scalar variant: the text is the tag and there is no payload."""

    def __init__(self, tag: str, span: SourceSpan) -> None:
        self._tag = tag
        self._span = span

    def variant(self, seed: Seed) -> tuple[Any, VariantAccess]:
        return seed.deserialize(ContentDeserializer(ScalarContent(self._tag))), self

    def _no_payload(self, expected: str) -> InvalidTypeError:
        return InvalidTypeError(f"invalid type: unit variant, expected {expected}", self._span)

    def unit_variant(self) -> None:
        return None

    def newtype_variant(self, seed: Seed) -> Any:
        raise self._no_payload("newtype variant")

    def tuple_variant(self, length: int, visitor: Visitor) -> Any:
        raise self._no_payload("tuple variant")

    def struct_variant(self, fields: Sequence[str], visitor: Visitor) -> Any:
        raise self._no_payload("struct variant")
