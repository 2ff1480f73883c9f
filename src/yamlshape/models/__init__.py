"""Error and position models for yamlshape."""

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

__all__ = [
    "BoolParseError",
    "CustomError",
    "EarlyTerminationError",
    "ErrorKind",
    "InvalidTypeError",
    "LimitExceededError",
    "NumberParseError",
    "ScanError",
    "SourceSpan",
    "TrailingCharactersError",
    "UnexpectedElementError",
    "YamlShapeError",
]
