"""Shape descriptors: how one Python type is decoded and encoded.

Each shape is both a seed (``deserialize``) and a serializable
(``serialize``).  Shapes are built once per type by
:func:`yamlshape.shapes.describe.describe` and cached.
"""

from __future__ import annotations

import contextlib
import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator, Sequence
from enum import Enum, StrEnum
from functools import cached_property
from typing import Any

from pydantic import BaseModel, ValidationError

from yamlshape.models.errors import YamlShapeError
from yamlshape.parser.literals import NumberFormatError, NumberWidth, to_f32
from yamlshape.shapes.protocol import (
    Deserializer,
    EnumAccess,
    MapAccess,
    SeqAccess,
    Serializer,
    SerializeStruct,
    Visitor,
    duplicate_field,
    invalid_length,
    missing_field,
    unknown_field,
    unknown_variant,
)


@contextlib.contextmanager
def at_path(segment: str) -> Iterator[None]:
    """Prefix ``segment`` onto the path of any error raised inside."""
    try:
        yield
    except YamlShapeError as exc:
        exc.prefix_path(segment)
        raise


def _check_instance(value: Any, kinds: type | tuple[type, ...], expecting: str) -> None:
    if isinstance(value, bool) and bool not in (kinds if isinstance(kinds, tuple) else (kinds,)):
        raise YamlShapeError.custom(f"cannot encode boolean as {expecting}")
    if not isinstance(value, kinds):
        raise YamlShapeError.custom(f"cannot encode {type(value).__name__} as {expecting}")


class Shape(ABC):
    """Decodes and encodes one Python type."""

    expecting = "a value"

    @abstractmethod
    def deserialize(self, deserializer: Deserializer) -> Any: ...

    @abstractmethod
    def serialize(self, value: Any, serializer: Serializer) -> None: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.expecting})"


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


class _ValueVisitor(Visitor):
    """Accepts exactly the visit methods named in ``accepts``."""

    def __init__(self, expecting: str, accepts: Iterable[str]) -> None:
        self.expecting = expecting
        for method in accepts:
            setattr(self, method, _identity)


def _identity(value: Any) -> Any:
    return value


class BoolShape(Shape):
    expecting = "a boolean"

    def deserialize(self, deserializer: Deserializer) -> bool:
        return deserializer.deserialize_bool(_ValueVisitor(self.expecting, ["visit_bool"]))

    def serialize(self, value: Any, serializer: Serializer) -> None:
        _check_instance(value, bool, self.expecting)
        serializer.serialize_bool(value)


class IntShape(Shape):
    def __init__(self, width: NumberWidth = NumberWidth.I64) -> None:
        self.width = width
        self.expecting = f"{width.value} integer"

    def deserialize(self, deserializer: Deserializer) -> int:
        method = getattr(deserializer, f"deserialize_{self.width.value}")
        return method(_ValueVisitor(self.expecting, ["visit_int"]))

    def serialize(self, value: Any, serializer: Serializer) -> None:
        _check_instance(value, int, self.expecting)
        low, high = self.width.bounds
        if not low <= value <= high:
            raise YamlShapeError.custom(f"value {value} out of range for {self.width.value}")
        serializer.serialize_int(value)


class _FloatVisitor(Visitor):
    def __init__(self, expecting: str) -> None:
        self.expecting = expecting

    def visit_float(self, value: float) -> float:
        return value


class FloatShape(Shape):
    def __init__(self, width: NumberWidth = NumberWidth.F64) -> None:
        self.width = width
        self.expecting = f"{width.value} float"

    def deserialize(self, deserializer: Deserializer) -> float:
        method = getattr(deserializer, f"deserialize_{self.width.value}")
        return method(_FloatVisitor(self.expecting))

    def serialize(self, value: Any, serializer: Serializer) -> None:
        _check_instance(value, (int, float), self.expecting)
        if self.width is NumberWidth.F64:
            serializer.serialize_f64(float(value))
            return
        try:
            serializer.serialize_f32(to_f32(float(value)))
        except NumberFormatError as exc:
            raise YamlShapeError.custom(f"value {value} out of range for f32") from exc


class StrShape(Shape):
    expecting = "a string"

    def deserialize(self, deserializer: Deserializer) -> str:
        return deserializer.deserialize_str(_ValueVisitor(self.expecting, ["visit_str"]))

    def serialize(self, value: Any, serializer: Serializer) -> None:
        _check_instance(value, str, self.expecting)
        serializer.serialize_str(value)


class CharShape(Shape):
    expecting = "a character"

    def deserialize(self, deserializer: Deserializer) -> str:
        return deserializer.deserialize_char(_ValueVisitor(self.expecting, ["visit_str"]))

    def serialize(self, value: Any, serializer: Serializer) -> None:
        _check_instance(value, str, self.expecting)
        if len(value) != 1:
            raise YamlShapeError.custom(f"cannot encode {value!r} as a character")
        serializer.serialize_char(value)


class IdentifierShape(Shape):
    """Struct field names and variant tags."""

    expecting = "an identifier"

    def deserialize(self, deserializer: Deserializer) -> str:
        return deserializer.deserialize_identifier(_ValueVisitor(self.expecting, ["visit_str"]))

    def serialize(self, value: Any, serializer: Serializer) -> None:
        serializer.serialize_str(str(value))


class _UnitVisitor(Visitor):
    def __init__(self, expecting: str, factory: Callable[[], Any]) -> None:
        self.expecting = expecting
        self._factory = factory

    def visit_unit(self) -> Any:
        return self._factory()


class UnitShape(Shape):
    """``None`` as a target type."""

    expecting = "unit"

    def deserialize(self, deserializer: Deserializer) -> None:
        return deserializer.deserialize_unit(_UnitVisitor(self.expecting, lambda: None))

    def serialize(self, value: Any, serializer: Serializer) -> None:
        if value is not None:
            raise YamlShapeError.custom(f"cannot encode {type(value).__name__} as unit")
        serializer.serialize_unit()


class UnitStructShape(Shape):
    """A dataclass without fields."""

    def __init__(self, cls: type) -> None:
        self.cls = cls
        self.expecting = f"unit struct {cls.__name__}"

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_unit_struct(
            self.cls.__name__, _UnitVisitor(self.expecting, self.cls)
        )

    def serialize(self, value: Any, serializer: Serializer) -> None:
        _check_instance(value, self.cls, self.expecting)
        serializer.serialize_unit_struct(self.cls.__name__)


class _OptionVisitor(Visitor):
    def __init__(self, inner: Shape) -> None:
        self._inner = inner
        self.expecting = f"option of {inner.expecting}"

    def visit_none(self) -> None:
        return None

    def visit_unit(self) -> None:
        return None

    def visit_some(self, deserializer: Deserializer) -> Any:
        return self._inner.deserialize(deserializer)


class OptionShape(Shape):
    def __init__(self, inner: Shape) -> None:
        self.inner = inner
        self.expecting = f"option of {inner.expecting}"

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_option(_OptionVisitor(self.inner))

    def serialize(self, value: Any, serializer: Serializer) -> None:
        if value is None:
            serializer.serialize_none()
        else:
            serializer.serialize_some(value, self.inner)


class _NewtypeVisitor(Visitor):
    def __init__(self, inner: Shape, expecting: str) -> None:
        self._inner = inner
        self.expecting = expecting

    def visit_newtype_struct(self, deserializer: Deserializer) -> Any:
        return self._inner.deserialize(deserializer)


class NewtypeShape(Shape):
    """``typing.NewType`` aliases; transparent in the document."""

    def __init__(self, name: str, inner: Shape) -> None:
        self.name = name
        self.inner = inner
        self.expecting = f"newtype struct {name}"

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_newtype_struct(
            self.name, _NewtypeVisitor(self.inner, self.expecting)
        )

    def serialize(self, value: Any, serializer: Serializer) -> None:
        serializer.serialize_newtype_struct(self.name, value, self.inner)


# ---------------------------------------------------------------------------
# Dynamic values
# ---------------------------------------------------------------------------


class _AnyVisitor(Visitor):
    expecting = "any value"

    def visit_bool(self, value: bool) -> bool:
        return value

    def visit_int(self, value: int) -> int:
        return value

    def visit_float(self, value: float) -> float:
        return value

    def visit_str(self, value: str) -> str:
        return value

    def visit_none(self) -> None:
        return None

    def visit_unit(self) -> None:
        return None

    def visit_some(self, deserializer: Deserializer) -> Any:
        return AnyShape().deserialize(deserializer)

    def visit_newtype_struct(self, deserializer: Deserializer) -> Any:
        return AnyShape().deserialize(deserializer)

    def visit_seq(self, access: SeqAccess) -> list[Any]:
        items: list[Any] = []
        element = AnyShape()
        while True:
            with at_path(f"[{len(items)}]"):
                more, item = access.next_element(element)
            if not more:
                return items
            items.append(item)

    def visit_map(self, access: MapAccess) -> dict[Any, Any]:
        result: dict[Any, Any] = {}
        element = AnyShape()
        while True:
            more, key = access.next_key(element)
            if not more:
                return result
            with at_path(str(key)):
                value = access.next_value(element)
            try:
                result[key] = value
            except TypeError as exc:
                raise YamlShapeError.custom(f"unhashable map key {key!r}") from exc


class AnyShape(Shape):
    """Self-described values: scalars stay strings, collections are list/dict."""

    expecting = "any value"

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_any(_AnyVisitor())

    def serialize(self, value: Any, serializer: Serializer) -> None:
        from yamlshape.shapes.describe import infer

        infer(value).serialize(value, serializer)


class _IgnoringVisitor(Visitor):
    expecting = "anything"

    def _ignore(self, *_args: Any) -> None:
        return None

    visit_bool = visit_int = visit_float = visit_str = _ignore
    visit_none = visit_unit = visit_some = visit_newtype_struct = _ignore
    visit_seq = visit_map = visit_enum = _ignore


class IgnoredShape(Shape):
    """Skips one value of any shape."""

    expecting = "anything"

    def deserialize(self, deserializer: Deserializer) -> None:
        return deserializer.deserialize_ignored_any(_IgnoringVisitor())

    def serialize(self, value: Any, serializer: Serializer) -> None:
        raise YamlShapeError.custom("ignored values cannot be encoded")


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


class _SeqVisitor(Visitor):
    def __init__(self, element: Shape, factory: Callable[[list[Any]], Any]) -> None:
        self._element = element
        self._factory = factory
        self.expecting = f"a sequence of {element.expecting}"

    def visit_seq(self, access: SeqAccess) -> Any:
        items: list[Any] = []
        while True:
            with at_path(f"[{len(items)}]"):
                more, item = access.next_element(self._element)
            if not more:
                break
            items.append(item)
        try:
            return self._factory(items)
        except TypeError as exc:
            raise YamlShapeError.custom(str(exc)) from exc


class SeqShape(Shape):
    """``list[X]``, ``set[X]``, ``frozenset[X]`` and ``tuple[X, ...]``."""

    def __init__(self, element: Shape, factory: Callable[[list[Any]], Any] = list) -> None:
        self.element = element
        self.factory = factory
        self.expecting = f"a sequence of {element.expecting}"

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_seq(_SeqVisitor(self.element, self.factory))

    def serialize(self, value: Any, serializer: Serializer) -> None:
        _check_instance(value, (list, tuple, set, frozenset), self.expecting)
        seq = serializer.serialize_seq(len(value))
        for index, item in enumerate(value):
            with at_path(f"[{index}]"):
                seq.serialize_element(item, self.element)
        seq.end()


class _TupleVisitor(Visitor):
    def __init__(
        self, elements: Sequence[Shape], factory: Callable[..., Any], expecting: str
    ) -> None:
        self._elements = elements
        self._factory = factory
        self.expecting = expecting

    def visit_seq(self, access: SeqAccess) -> Any:
        items: list[Any] = []
        for index, element in enumerate(self._elements):
            with at_path(f"[{index}]"):
                more, item = access.next_element(element)
            if not more:
                raise invalid_length(index, self.expecting)
            items.append(item)
        more, _ = access.next_element(IgnoredShape())
        if more:
            raise YamlShapeError.custom(f"invalid length, expected {self.expecting}")
        return self._factory(*items)


class TupleShape(Shape):
    """Fixed-arity ``tuple[X, Y, ...]``."""

    def __init__(self, elements: Sequence[Shape]) -> None:
        self.elements = list(elements)
        self.expecting = f"a tuple of {len(self.elements)} elements"

    def deserialize(self, deserializer: Deserializer) -> tuple[Any, ...]:
        visitor = _TupleVisitor(self.elements, lambda *items: tuple(items), self.expecting)
        return deserializer.deserialize_tuple(len(self.elements), visitor)

    def serialize(self, value: Any, serializer: Serializer) -> None:
        _check_instance(value, (tuple, list), self.expecting)
        if len(value) != len(self.elements):
            raise invalid_length(len(value), self.expecting)
        seq = serializer.serialize_tuple(len(self.elements))
        _write_elements(seq, value, self.elements)


def _write_elements(seq: Any, values: Sequence[Any], shapes: Sequence[Shape]) -> None:
    for index, (item, shape) in enumerate(zip(values, shapes, strict=True)):
        with at_path(f"[{index}]"):
            seq.serialize_element(item, shape)
    seq.end()


class TupleStructShape(Shape):
    """``NamedTuple`` classes, encoded positionally."""

    def __init__(self, cls: type, resolve: Callable[[type], list[Shape]]) -> None:
        self.cls = cls
        self._resolve = resolve
        self.expecting = f"tuple struct {cls.__name__}"

    @cached_property
    def elements(self) -> list[Shape]:
        return self._resolve(self.cls)

    def visitor(self) -> _TupleVisitor:
        return _TupleVisitor(self.elements, self.cls, self.expecting)

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_tuple_struct(
            self.cls.__name__, len(self.elements), self.visitor()
        )

    def serialize(self, value: Any, serializer: Serializer) -> None:
        _check_instance(value, self.cls, self.expecting)
        seq = serializer.serialize_tuple_struct(self.cls.__name__, len(self.elements))
        _write_elements(seq, value, self.elements)


class _MapVisitor(Visitor):
    def __init__(self, key: Shape, value: Shape) -> None:
        self._key = key
        self._value = value
        self.expecting = f"a map of {key.expecting} to {value.expecting}"

    def visit_map(self, access: MapAccess) -> dict[Any, Any]:
        result: dict[Any, Any] = {}
        while True:
            more, key = access.next_key(self._key)
            if not more:
                return result
            with at_path(str(key)):
                result[key] = access.next_value(self._value)


class MapShape(Shape):
    def __init__(self, key: Shape, value: Shape) -> None:
        self.key = key
        self.value = value
        self.expecting = f"a map of {key.expecting} to {value.expecting}"

    def deserialize(self, deserializer: Deserializer) -> dict[Any, Any]:
        return deserializer.deserialize_map(_MapVisitor(self.key, self.value))

    def serialize(self, value: Any, serializer: Serializer) -> None:
        _check_instance(value, dict, self.expecting)
        writer = serializer.serialize_map(len(value))
        for key, item in value.items():
            with at_path(str(key)):
                writer.serialize_entry(key, self.key, item, self.value)
        writer.end()


# ---------------------------------------------------------------------------
# Structs
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class FieldSpec:
    """One struct field: Python attribute, document key and shape."""

    attr: str
    wire: str
    shape: Shape
    has_default: bool


class _StructVisitor(Visitor):
    def __init__(self, struct: StructShape) -> None:
        self._struct = struct
        self.expecting = struct.expecting

    def visit_map(self, access: MapAccess) -> Any:
        struct = self._struct
        values: dict[str, Any] = {}
        extras: dict[str, Any] = {}
        identifier = IdentifierShape()
        while True:
            more, key = access.next_key(identifier)
            if not more:
                break
            spec = struct.by_wire.get(key)
            if spec is None:
                if struct.extra == "allow":
                    with at_path(key):
                        extras[key] = access.next_value(AnyShape())
                elif struct.extra == "ignore":
                    access.next_value(IgnoredShape())
                else:
                    raise unknown_field(key, struct.wire_names)
                continue
            if spec.attr in values:
                raise duplicate_field(key)
            with at_path(key):
                values[spec.attr] = access.next_value(spec.shape)
        return struct.build(values, extras)


class StructShape(Shape):
    """Dataclasses and pydantic models, encoded as block mappings.

    Unknown keys are rejected unless a pydantic model sets ``extra`` to
    ``"ignore"`` or ``"allow"``.
    """

    def __init__(self, cls: type, resolve: Callable[[type], list[FieldSpec]]) -> None:
        self.cls = cls
        self._resolve = resolve
        self.expecting = f"struct {cls.__name__}"
        self.is_model = issubclass(cls, BaseModel)
        self.extra = "forbid"
        if self.is_model:
            self.extra = cls.model_config.get("extra") or "forbid"

    @cached_property
    def fields(self) -> list[FieldSpec]:
        return self._resolve(self.cls)

    @cached_property
    def by_wire(self) -> dict[str, FieldSpec]:
        return {spec.wire: spec for spec in self.fields}

    @cached_property
    def wire_names(self) -> list[str]:
        return [spec.wire for spec in self.fields]

    def visitor(self) -> Visitor:
        return _StructVisitor(self)

    def deserialize(self, deserializer: Deserializer) -> Any:
        return deserializer.deserialize_struct(self.cls.__name__, self.wire_names, self.visitor())

    def build(self, values: dict[str, Any], extras: dict[str, Any] | None = None) -> Any:
        """Instantiate the class from decoded field values."""
        for spec in self.fields:
            if spec.attr in values or spec.has_default:
                continue
            if isinstance(spec.shape, OptionShape):
                values[spec.attr] = None
            else:
                raise missing_field(spec.wire)
        if self.is_model:
            data = {self.by_attr[attr].wire: value for attr, value in values.items()}
            data.update(extras or {})
            try:
                return self.cls.model_validate(data)
            except ValidationError as exc:
                raise YamlShapeError.custom(str(exc)) from exc
        try:
            return self.cls(**values)
        except (TypeError, ValueError) as exc:
            raise YamlShapeError.custom(f"cannot build {self.cls.__name__}: {exc}") from exc

    @cached_property
    def by_attr(self) -> dict[str, FieldSpec]:
        return {spec.attr: spec for spec in self.fields}

    def serialize(self, value: Any, serializer: Serializer) -> None:
        _check_instance(value, self.cls, self.expecting)
        extras = self._extras(value)
        writer = serializer.serialize_struct(self.cls.__name__, len(self.fields) + len(extras))
        self.write_fields(value, writer)
        for key, item in extras.items():
            with at_path(key):
                writer.serialize_field(key, item, AnyShape())
        writer.end()

    def _extras(self, value: Any) -> dict[str, Any]:
        if self.is_model and self.extra == "allow":
            return dict(value.model_extra or {})
        return {}

    def write_fields(self, value: Any, writer: SerializeStruct) -> None:
        for spec in self.fields:
            with at_path(spec.wire):
                writer.serialize_field(spec.wire, getattr(value, spec.attr), spec.shape)


# ---------------------------------------------------------------------------
# Enums and tagged unions
# ---------------------------------------------------------------------------


class _EnumVisitor(Visitor):
    def __init__(self, shape: EnumShape) -> None:
        self._shape = shape
        self.expecting = shape.expecting

    def visit_enum(self, access: EnumAccess) -> Enum:
        members = self._shape.cls.__members__
        tag, variant = access.variant(IdentifierShape())
        if tag not in members:
            raise unknown_variant(tag, list(members))
        variant.unit_variant()
        return members[tag]


class EnumShape(Shape):
    """``enum.Enum`` subclasses; every member is a unit variant named by its name."""

    def __init__(self, cls: type[Enum]) -> None:
        self.cls = cls
        self.expecting = f"enum {cls.__name__}"

    def deserialize(self, deserializer: Deserializer) -> Enum:
        return deserializer.deserialize_enum(
            self.cls.__name__, list(self.cls.__members__), _EnumVisitor(self)
        )

    def serialize(self, value: Any, serializer: Serializer) -> None:
        _check_instance(value, self.cls, self.expecting)
        index = list(self.cls).index(value)
        serializer.serialize_unit_variant(self.cls.__name__, index, value.name)


class VariantKind(StrEnum):
    UNIT = "unit"
    NEWTYPE = "newtype"
    TUPLE = "tuple"
    STRUCT = "struct"


@dataclasses.dataclass
class VariantSpec:
    """One member class of a tagged union."""

    name: str
    index: int
    cls: type
    kind: VariantKind
    payload: Shape | None = None  # newtype inner, tuple struct or struct shape
    attr: str | None = None  # newtype field name


class _UnionVisitor(Visitor):
    def __init__(self, union: UnionShape) -> None:
        self._union = union
        self.expecting = union.expecting

    def visit_enum(self, access: EnumAccess) -> Any:
        tag, variant = access.variant(IdentifierShape())
        spec = self._union.lookup(tag)
        if spec.kind is VariantKind.UNIT:
            variant.unit_variant()
            return spec.cls()
        if spec.kind is VariantKind.NEWTYPE:
            assert spec.payload is not None and spec.attr is not None
            return spec.cls(**{spec.attr: variant.newtype_variant(spec.payload)})
        if spec.kind is VariantKind.TUPLE:
            assert isinstance(spec.payload, TupleStructShape)
            return variant.tuple_variant(len(spec.payload.elements), spec.payload.visitor())
        assert isinstance(spec.payload, StructShape)
        return variant.struct_variant(spec.payload.wire_names, spec.payload.visitor())


class UnionShape(Shape):
    """A union of variant classes, externally or internally tagged."""

    def __init__(self, variants: Sequence[VariantSpec], tag: str | None = None) -> None:
        self.variants = list(variants)
        self.tag = tag
        self.names = [spec.name for spec in self.variants]
        self.name = " | ".join(self.names)
        self.expecting = f"one of {self.name}"
        self._by_name = {spec.name: spec for spec in self.variants}

    def lookup(self, tag: str) -> VariantSpec:
        spec = self._by_name.get(tag)
        if spec is None:
            raise unknown_variant(tag, self.names)
        return spec

    def variant_of(self, value: Any) -> VariantSpec:
        for spec in self.variants:
            if type(value) is spec.cls:
                return spec
        for spec in self.variants:
            if isinstance(value, spec.cls):
                return spec
        raise YamlShapeError.custom(f"cannot encode {type(value).__name__} as {self.expecting}")

    def deserialize(self, deserializer: Deserializer) -> Any:
        if self.tag is None:
            return deserializer.deserialize_enum(self.name, self.names, _UnionVisitor(self))
        from yamlshape.shapes.content import decode_internally_tagged

        return decode_internally_tagged(self, deserializer)

    def serialize(self, value: Any, serializer: Serializer) -> None:
        spec = self.variant_of(value)
        if self.tag is not None:
            self._serialize_internal(spec, value, serializer)
        elif spec.kind is VariantKind.UNIT:
            serializer.serialize_unit_variant(self.name, spec.index, spec.name)
        elif spec.kind is VariantKind.NEWTYPE:
            assert spec.payload is not None and spec.attr is not None
            serializer.serialize_newtype_variant(
                self.name, spec.index, spec.name, getattr(value, spec.attr), spec.payload
            )
        elif spec.kind is VariantKind.TUPLE:
            assert isinstance(spec.payload, TupleStructShape)
            elements = spec.payload.elements
            seq = serializer.serialize_tuple_variant(
                self.name, spec.index, spec.name, len(elements)
            )
            _write_elements(seq, value, elements)
        else:
            assert isinstance(spec.payload, StructShape)
            writer = serializer.serialize_struct_variant(
                self.name, spec.index, spec.name, len(spec.payload.fields)
            )
            spec.payload.write_fields(value, writer)
            writer.end()

    def _serialize_internal(self, spec: VariantSpec, value: Any, serializer: Serializer) -> None:
        assert self.tag is not None
        struct: StructShape | None = None
        if spec.kind is VariantKind.STRUCT:
            struct, payload = spec.payload, value  # type: ignore[assignment]
        elif spec.kind is VariantKind.NEWTYPE:
            struct = spec.payload  # type: ignore[assignment]
            payload = getattr(value, spec.attr or "")
        length = 1 + (len(struct.fields) if struct is not None else 0)
        writer = serializer.serialize_struct(spec.name, length)
        writer.serialize_field(self.tag, spec.name, IdentifierShape())
        if struct is not None:
            struct.write_fields(payload, writer)
        writer.end()
