"""Encoding: typed values to block-style YAML."""

from yamlshape.ser.encoder import Encoder, encode, encode_file

__all__ = ["Encoder", "encode", "encode_file"]
