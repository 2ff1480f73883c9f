"""Decoding: YAML events to typed values."""

from yamlshape.de.access import (
    MappingAccessor,
    ScalarVariantAccess,
    SequenceAccessor,
    VariantAccessor,
)
from yamlshape.de.decoder import Decoder, decode, decode_file

__all__ = [
    "Decoder",
    "MappingAccessor",
    "ScalarVariantAccess",
    "SequenceAccessor",
    "VariantAccessor",
    "decode",
    "decode_file",
]
