"""Format-independent visitor protocol between shapes and codecs.

A *shape* describes one Python type.  Decoding asks a ``Deserializer`` for
the shape it expects and passes a ``Visitor`` that receives whatever the
format actually found.  Encoding walks a value and calls one
``Serializer`` method per part.  Neither side knows YAML syntax.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Protocol

from yamlshape.models.errors import CustomError, YamlShapeError


class Seed(Protocol):
    """Anything that can pull one value out of a deserializer."""

    def deserialize(self, deserializer: Deserializer) -> Any: ...


class Serializable(Protocol):
    """Anything that can write one value into a serializer."""

    def serialize(self, value: Any, serializer: Serializer) -> None: ...


def invalid_type(unexpected: str, visitor: Visitor) -> CustomError:
    return YamlShapeError.custom(f"invalid type: {unexpected}, expected {visitor.expecting}")


def invalid_length(length: int, expected: str) -> CustomError:
    return YamlShapeError.custom(f"invalid length {length}, expected {expected}")


def unknown_field(name: str, expected: Sequence[str]) -> CustomError:
    if not expected:
        return YamlShapeError.custom(f"unknown field `{name}`, there are no fields")
    names = ", ".join(f"`{n}`" for n in expected)
    return YamlShapeError.custom(f"unknown field `{name}`, expected one of {names}")


def unknown_variant(name: str, expected: Sequence[str]) -> CustomError:
    names = ", ".join(f"`{n}`" for n in expected)
    return YamlShapeError.custom(f"unknown variant `{name}`, expected one of {names}")


def missing_field(name: str) -> CustomError:
    return YamlShapeError.custom(f"missing field `{name}`")


def duplicate_field(name: str) -> CustomError:
    return YamlShapeError.custom(f"duplicate field `{name}`")


# ---------------------------------------------------------------------------
# Decoding side
# ---------------------------------------------------------------------------


class Visitor:
    """Receives the value a deserializer found.

    Override the ``visit_*`` methods the target accepts; the defaults
    reject the input with an ``invalid type`` error.
    """

    expecting = "a value"

    def visit_bool(self, value: bool) -> Any:
        raise invalid_type(f"boolean `{str(value).lower()}`", self)

    def visit_int(self, value: int) -> Any:
        raise invalid_type(f"integer `{value}`", self)

    def visit_float(self, value: float) -> Any:
        raise invalid_type(f"floating point `{value}`", self)

    def visit_str(self, value: str) -> Any:
        raise invalid_type(f"string {value!r}", self)

    def visit_none(self) -> Any:
        raise invalid_type("Option value", self)

    def visit_some(self, deserializer: Deserializer) -> Any:
        raise invalid_type("Option value", self)

    def visit_unit(self) -> Any:
        raise invalid_type("unit value", self)

    def visit_newtype_struct(self, deserializer: Deserializer) -> Any:
        raise invalid_type("newtype struct", self)

    def visit_seq(self, access: SeqAccess) -> Any:
        raise invalid_type("sequence", self)

    def visit_map(self, access: MapAccess) -> Any:
        raise invalid_type("map", self)

    def visit_enum(self, access: EnumAccess) -> Any:
        raise invalid_type("enum", self)


class SeqAccess(ABC):
    @abstractmethod
    def next_element(self, seed: Seed) -> tuple[bool, Any]:
        """Return ``(True, value)`` or ``(False, None)`` once exhausted."""


class MapAccess(ABC):
    @abstractmethod
    def next_key(self, seed: Seed) -> tuple[bool, Any]:
        """Return ``(True, key)`` or ``(False, None)`` once exhausted."""

    @abstractmethod
    def next_value(self, seed: Seed) -> Any:
        """Decode the value of the key returned just before."""


class VariantAccess(ABC):
    @abstractmethod
    def unit_variant(self) -> None: ...

    @abstractmethod
    def newtype_variant(self, seed: Seed) -> Any: ...

    @abstractmethod
    def tuple_variant(self, length: int, visitor: Visitor) -> Any: ...

    @abstractmethod
    def struct_variant(self, fields: Sequence[str], visitor: Visitor) -> Any: ...


class EnumAccess(ABC):
    @abstractmethod
    def variant(self, seed: Seed) -> tuple[Any, VariantAccess]:
        """Decode the variant tag and return it with the payload accessor."""


class Deserializer(ABC):
    """One method per requested shape."""

    @abstractmethod
    def deserialize_any(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_bool(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_i8(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_i16(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_i32(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_i64(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_u8(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_u16(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_u32(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_u64(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_f32(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_f64(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_char(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_str(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_identifier(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_option(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_unit(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_unit_struct(self, name: str, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_newtype_struct(self, name: str, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_seq(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_tuple(self, length: int, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_tuple_struct(self, name: str, length: int, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_map(self, visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_struct(self, name: str, fields: Sequence[str], visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_enum(self, name: str, variants: Sequence[str], visitor: Visitor) -> Any: ...

    @abstractmethod
    def deserialize_ignored_any(self, visitor: Visitor) -> Any: ...


# ---------------------------------------------------------------------------
# Encoding side
# ---------------------------------------------------------------------------


class SerializeSeq(ABC):
    @abstractmethod
    def serialize_element(self, value: Any, shape: Serializable) -> None: ...

    @abstractmethod
    def end(self) -> None: ...


class SerializeMap(ABC):
    @abstractmethod
    def serialize_key(self, key: Any, shape: Serializable) -> None: ...

    @abstractmethod
    def serialize_value(self, value: Any, shape: Serializable) -> None: ...

    @abstractmethod
    def end(self) -> None: ...

    def serialize_entry(
        self, key: Any, key_shape: Serializable, value: Any, value_shape: Serializable
    ) -> None:
        self.serialize_key(key, key_shape)
        self.serialize_value(value, value_shape)


class SerializeStruct(ABC):
    @abstractmethod
    def serialize_field(self, key: str, value: Any, shape: Serializable) -> None: ...

    @abstractmethod
    def end(self) -> None: ...


class Serializer(ABC):
    """One method per produced shape, symmetric to ``Deserializer``."""

    @abstractmethod
    def serialize_bool(self, value: bool) -> None: ...

    @abstractmethod
    def serialize_int(self, value: int) -> None: ...

    @abstractmethod
    def serialize_f32(self, value: float) -> None: ...

    @abstractmethod
    def serialize_f64(self, value: float) -> None: ...

    @abstractmethod
    def serialize_char(self, value: str) -> None: ...

    @abstractmethod
    def serialize_str(self, value: str) -> None: ...

    @abstractmethod
    def serialize_none(self) -> None: ...

    @abstractmethod
    def serialize_some(self, value: Any, shape: Serializable) -> None: ...

    @abstractmethod
    def serialize_unit(self) -> None: ...

    @abstractmethod
    def serialize_unit_struct(self, name: str) -> None: ...

    @abstractmethod
    def serialize_unit_variant(self, name: str, index: int, variant: str) -> None: ...

    @abstractmethod
    def serialize_newtype_struct(self, name: str, value: Any, shape: Serializable) -> None: ...

    @abstractmethod
    def serialize_newtype_variant(
        self, name: str, index: int, variant: str, value: Any, shape: Serializable
    ) -> None: ...

    @abstractmethod
    def serialize_seq(self, length: int | None) -> SerializeSeq: ...

    @abstractmethod
    def serialize_tuple(self, length: int) -> SerializeSeq: ...

    @abstractmethod
    def serialize_tuple_struct(self, name: str, length: int) -> SerializeSeq: ...

    @abstractmethod
    def serialize_tuple_variant(
        self, name: str, index: int, variant: str, length: int
    ) -> SerializeSeq: ...

    @abstractmethod
    def serialize_map(self, length: int | None) -> SerializeMap: ...

    @abstractmethod
    def serialize_struct(self, name: str, length: int) -> SerializeStruct: ...

    @abstractmethod
    def serialize_struct_variant(
        self, name: str, index: int, variant: str, length: int
    ) -> SerializeStruct: ...
