"""Derive shapes from Python type annotations."""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Mapping, MutableSequence
from collections.abc import Sequence as SequenceABC
from collections.abc import Set as SetABC
from enum import Enum
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from yamlshape.parser.literals import NumberWidth
from yamlshape.shapes.shape import (
    AnyShape,
    BoolShape,
    CharShape,
    EnumShape,
    FieldSpec,
    FloatShape,
    IntShape,
    MapShape,
    NewtypeShape,
    OptionShape,
    SeqShape,
    Shape,
    StrShape,
    StructShape,
    TupleShape,
    TupleStructShape,
    UnionShape,
    UnitShape,
    UnitStructShape,
    VariantKind,
    VariantSpec,
)
from yamlshape.shapes.types import CHAR, NEWTYPE_ATTR, Tagged

_NONE_TYPE = type(None)


class ShapeRegistry:
    """Cache of type → shape descriptors."""

    _shapes: dict[Any, Shape] = {}

    @classmethod
    def get(cls, tp: Any) -> Shape:
        try:
            return cls._shapes[tp]
        except KeyError:
            pass
        except TypeError:  # unhashable annotation
            return _build(tp)
        shape = _build(tp)
        cls._shapes[tp] = shape
        return shape

    @classmethod
    def reset(cls) -> None:
        """Clear all cached shapes (for testing)."""
        cls._shapes.clear()


def describe(tp: Any) -> Shape:
    """Return the shape for a type annotation."""
    return ShapeRegistry.get(tp)


def _build(tp: Any) -> Shape:
    if tp is Any or tp is object:
        return AnyShape()
    if tp is None or tp is _NONE_TYPE:
        return UnitShape()
    if tp is bool:
        return BoolShape()
    if tp is int:
        return IntShape(NumberWidth.I64)
    if tp is float:
        return FloatShape(NumberWidth.F64)
    if tp is str:
        return StrShape()

    origin = get_origin(tp)
    if origin is Annotated:
        return _annotated(tp)
    if origin is Union or origin is types.UnionType:
        return _union_or_option(tp)
    if origin is not None:
        return _generic(tp, origin)

    supertype = getattr(tp, "__supertype__", None)
    if supertype is not None:
        return NewtypeShape(tp.__name__, describe(supertype))

    if isinstance(tp, type):
        if issubclass(tp, Enum):
            return EnumShape(tp)
        if issubclass(tp, tuple) and hasattr(tp, "_fields"):
            return TupleStructShape(tp, _tuple_fields)
        if dataclasses.is_dataclass(tp):
            if not [f for f in dataclasses.fields(tp) if f.init]:
                return UnitStructShape(tp)
            return StructShape(tp, _dataclass_fields)
        if issubclass(tp, BaseModel):
            return StructShape(tp, _model_fields)
        if tp in (list, tuple, set, frozenset):
            return SeqShape(AnyShape(), tp)
        if tp is dict:
            return MapShape(AnyShape(), AnyShape())
    raise TypeError(f"cannot describe type {tp!r}")


def _annotated(tp: Any) -> Shape:
    base, *metadata = get_args(tp)
    for marker in metadata:
        if isinstance(marker, NumberWidth):
            return FloatShape(marker) if marker.is_float else IntShape(marker)
        if marker is CHAR:
            return CharShape()
        if isinstance(marker, Tagged):
            return _tagged(base, marker)
    return describe(base)


def _union_or_option(tp: Any) -> Shape:
    args = get_args(tp)
    present = [arg for arg in args if arg is not _NONE_TYPE]
    if len(present) == len(args):
        return _tagged(tp, Tagged())
    if len(present) == 1:
        return OptionShape(describe(present[0]))
    return OptionShape(_tagged(Union[tuple(present)], Tagged()))  # noqa: UP007


def _generic(tp: Any, origin: Any) -> Shape:
    args = get_args(tp)
    if origin in (list, MutableSequence, SequenceABC):
        return SeqShape(describe(args[0]) if args else AnyShape(), list)
    if origin in (set, frozenset, SetABC):
        factory = frozenset if origin is frozenset else set
        return SeqShape(describe(args[0]) if args else AnyShape(), factory)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return SeqShape(describe(args[0]), tuple)
        return TupleShape([describe(arg) for arg in args])
    if origin in (dict, Mapping):
        key, value = args if args else (Any, Any)
        return MapShape(describe(key), describe(value))
    if origin is typing.ClassVar:
        raise TypeError(f"cannot describe class variable {tp!r}")
    raise TypeError(f"cannot describe type {tp!r}")


# ---------------------------------------------------------------------------
# Field resolution (deferred so self-referencing classes work)
# ---------------------------------------------------------------------------


def _dataclass_fields(cls: type) -> list[FieldSpec]:
    hints = get_type_hints(cls, include_extras=True, localns={cls.__name__: cls})
    specs: list[FieldSpec] = []
    for item in dataclasses.fields(cls):
        if not item.init:
            continue
        has_default = (
            item.default is not dataclasses.MISSING
            or item.default_factory is not dataclasses.MISSING
        )
        specs.append(FieldSpec(item.name, item.name, describe(hints[item.name]), has_default))
    return specs


def _model_fields(cls: type) -> list[FieldSpec]:
    specs: list[FieldSpec] = []
    for name, info in cls.model_fields.items():  # type: ignore[attr-defined]
        annotation = info.annotation
        # pydantic moves Annotated metadata off the annotation; put ours back
        markers = [m for m in info.metadata if isinstance(m, (NumberWidth, Tagged)) or m is CHAR]
        if markers:
            annotation = Annotated[(annotation, *markers)]
        specs.append(
            FieldSpec(name, info.alias or name, describe(annotation), not info.is_required())
        )
    return specs


def _tuple_fields(cls: type) -> list[Shape]:
    hints = get_type_hints(cls, include_extras=True)
    return [describe(hints.get(name, Any)) for name in cls._fields]  # type: ignore[attr-defined]


# ---------------------------------------------------------------------------
# Tagged unions
# ---------------------------------------------------------------------------


def _tagged(tp: Any, tagged: Tagged) -> Shape:
    members = get_args(tp) if get_origin(tp) in (Union, types.UnionType) else (tp,)
    variants = [_variant(member, index) for index, member in enumerate(members)]
    if tagged.tag is not None:
        for spec in variants:
            if spec.kind is VariantKind.TUPLE or (
                spec.kind is VariantKind.NEWTYPE and not isinstance(spec.payload, StructShape)
            ):
                raise TypeError(
                    f"internally tagged union cannot hold {spec.kind.value} variant {spec.name}"
                )
    return UnionShape(variants, tagged.tag)


def _variant(member: Any, index: int) -> VariantSpec:
    if not isinstance(member, type):
        raise TypeError(f"tagged union members must be classes, got {member!r}")
    name = getattr(member, "__variant_name__", member.__name__)
    if getattr(member, NEWTYPE_ATTR, False):
        (item,) = dataclasses.fields(member)
        hints = get_type_hints(member, include_extras=True)
        return VariantSpec(
            name, index, member, VariantKind.NEWTYPE, describe(hints[item.name]), item.name
        )
    shape = describe(member)
    if isinstance(shape, UnitStructShape):
        return VariantSpec(name, index, member, VariantKind.UNIT)
    if isinstance(shape, TupleStructShape):
        return VariantSpec(name, index, member, VariantKind.TUPLE, shape)
    if isinstance(shape, StructShape):
        return VariantSpec(name, index, member, VariantKind.STRUCT, shape)
    raise TypeError(f"cannot use {member!r} as a tagged union variant")


# ---------------------------------------------------------------------------
# Runtime inference (encode without a target type)
# ---------------------------------------------------------------------------


def infer(value: Any) -> Shape:
    """Pick a shape from the runtime type of ``value``."""
    if value is None:
        return UnitShape()
    if isinstance(value, bool):
        return BoolShape()
    if isinstance(value, Enum):
        return describe(type(value))
    if isinstance(value, int):
        return IntShape(NumberWidth.I64)
    if isinstance(value, float):
        return FloatShape(NumberWidth.F64)
    if isinstance(value, str):
        return StrShape()
    if isinstance(value, BaseModel) or dataclasses.is_dataclass(value):
        return describe(type(value))
    if isinstance(value, tuple) and hasattr(value, "_fields"):
        return describe(type(value))
    if isinstance(value, (list, tuple, set, frozenset)):
        return SeqShape(AnyShape(), type(value))
    if isinstance(value, dict):
        return MapShape(AnyShape(), AnyShape())
    raise TypeError(f"cannot encode value of type {type(value).__name__}")
