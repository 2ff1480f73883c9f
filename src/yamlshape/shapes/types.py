"""Annotation markers that pick a shape where the Python type is ambiguous."""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from typing import Annotated, TypeVar

from yamlshape.parser.literals import NumberWidth

T = TypeVar("T", bound=type)

i8 = Annotated[int, NumberWidth.I8]
i16 = Annotated[int, NumberWidth.I16]
i32 = Annotated[int, NumberWidth.I32]
i64 = Annotated[int, NumberWidth.I64]
u8 = Annotated[int, NumberWidth.U8]
u16 = Annotated[int, NumberWidth.U16]
u32 = Annotated[int, NumberWidth.U32]
u64 = Annotated[int, NumberWidth.U64]
f32 = Annotated[float, NumberWidth.F32]
f64 = Annotated[float, NumberWidth.F64]


class _CharMarker:
    def __repr__(self) -> str:
        return "Char"


CHAR = _CharMarker()

Char = Annotated[str, CHAR]


@dataclass(frozen=True)
class Tagged:
    """Marks a union of variant classes as a tagged union.

    ``tag=None`` selects the externally tagged form (``Variant: payload``);
    a field name selects the internally tagged form, where that field of
    the mapping holds the variant name and its siblings are the payload.
    """

    tag: str | None = None


NEWTYPE_ATTR = "__yamlshape_newtype__"


def newtype(cls: T) -> T:
    """Mark a single-field dataclass as a newtype variant (``Name: value``)."""
    if not is_dataclass(cls) or len(fields(cls)) != 1:
        raise TypeError(f"@newtype requires a dataclass with exactly one field, got {cls!r}")
    setattr(cls, NEWTYPE_ATTR, True)
    return cls
