"""Type-directed shape framework: visitor protocol and type descriptors."""

from yamlshape.shapes.content import ContentDeserializer, ContentShape
from yamlshape.shapes.describe import ShapeRegistry, describe, infer
from yamlshape.shapes.protocol import (
    Deserializer,
    EnumAccess,
    MapAccess,
    SeqAccess,
    SerializeMap,
    SerializeSeq,
    SerializeStruct,
    Serializer,
    VariantAccess,
    Visitor,
)
from yamlshape.shapes.shape import Shape
from yamlshape.shapes.types import (
    Char,
    Tagged,
    f32,
    f64,
    i8,
    i16,
    i32,
    i64,
    newtype,
    u8,
    u16,
    u32,
    u64,
)

__all__ = [
    "Char",
    "ContentDeserializer",
    "ContentShape",
    "Deserializer",
    "EnumAccess",
    "MapAccess",
    "SeqAccess",
    "SerializeMap",
    "SerializeSeq",
    "SerializeStruct",
    "Serializer",
    "Shape",
    "ShapeRegistry",
    "Tagged",
    "VariantAccess",
    "Visitor",
    "describe",
    "f32",
    "f64",
    "i8",
    "i16",
    "i32",
    "i64",
    "infer",
    "newtype",
    "u8",
    "u16",
    "u32",
    "u64",
]
