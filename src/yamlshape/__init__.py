"""yamlshape: typed block-style YAML decoding and encoding."""

from yamlshape.de import decode, decode_file
from yamlshape.models.errors import (
    BoolParseError,
    CustomError,
    EarlyTerminationError,
    ErrorKind,
    InvalidTypeError,
    LimitExceededError,
    NumberParseError,
    ScanError,
    SourceSpan,
    TrailingCharactersError,
    UnexpectedElementError,
    YamlShapeError,
)
from yamlshape.ser import encode, encode_file
from yamlshape.settings import Settings, get_settings
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

__version__ = "0.1.0"

__all__ = [
    "BoolParseError",
    "Char",
    "CustomError",
    "EarlyTerminationError",
    "ErrorKind",
    "InvalidTypeError",
    "LimitExceededError",
    "NumberParseError",
    "ScanError",
    "Settings",
    "SourceSpan",
    "Tagged",
    "TrailingCharactersError",
    "UnexpectedElementError",
    "YamlShapeError",
    "decode",
    "decode_file",
    "encode",
    "encode_file",
    "f32",
    "f64",
    "get_settings",
    "i8",
    "i16",
    "i32",
    "i64",
    "newtype",
    "u8",
    "u16",
    "u32",
    "u64",
]
