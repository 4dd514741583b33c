"""
app/serializers/binary_serializer.py

Compact binary output format ("gob").

Layout
------
``PLCB`` magic, one version byte, then exactly one tagged value:

  N                      null
  T / F                  booleans
  I <int64>              signed integer, big-endian
  D <float64>            IEEE-754 double, big-endian
  S <uint32 len> <utf-8> string
  B <uint32 len> <raw>   bytes
  L <uint32 n> value*n   list
  M <uint32 n> (key value)*n   map, keys encoded as length-prefixed utf-8

The format is private to this service and not meant to be read by other
languages.
"""

from __future__ import annotations

import struct
from collections.abc import Sequence
from typing import Any

from app.errors import SerializationError
from app.serializers.base import SerializationFormat, Serializer, T

MAGIC = b"PLCB"
VERSION = 1

TAG_NULL = b"N"
TAG_TRUE = b"T"
TAG_FALSE = b"F"
TAG_INT = b"I"
TAG_FLOAT = b"D"
TAG_STR = b"S"
TAG_BYTES = b"B"
TAG_LIST = b"L"
TAG_MAP = b"M"

_INT64 = struct.Struct(">q")
_FLOAT64 = struct.Struct(">d")
_UINT32 = struct.Struct(">I")

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def encode_value(value: Any) -> bytes:
    """
    Encode one plain Python value (with header) into the tagged layout.
    """

    out = bytearray(MAGIC)
    out.append(VERSION)
    _encode_into(out, value)
    return bytes(out)


def decode_value(data: bytes) -> Any:
    """
    Decode a payload produced by ``encode_value``.
    """

    reader = _Reader(data)
    if reader.take(len(MAGIC)) != MAGIC:
        raise SerializationError("gob: bad magic header")
    version = reader.take(1)[0]
    if version != VERSION:
        raise SerializationError(f"gob: unsupported version {version}")
    value = reader.read_value()
    if not reader.at_end():
        raise SerializationError(f"gob: {reader.remaining()} trailing byte(s) after payload")
    return value


def _encode_length(out: bytearray, length: int) -> None:
    if length > 0xFFFFFFFF:
        raise SerializationError(f"gob: length {length} exceeds uint32")
    out += _UINT32.pack(length)


def _encode_into(out: bytearray, value: Any) -> None:
    # bool before int: bool is an int subclass
    if value is None:
        out += TAG_NULL
    elif isinstance(value, bool):
        out += TAG_TRUE if value else TAG_FALSE
    elif isinstance(value, int):
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise SerializationError(f"gob: integer {value} does not fit in int64")
        out += TAG_INT
        out += _INT64.pack(value)
    elif isinstance(value, float):
        out += TAG_FLOAT
        out += _FLOAT64.pack(value)
    elif isinstance(value, str):
        encoded = value.encode("utf-8")
        out += TAG_STR
        _encode_length(out, len(encoded))
        out += encoded
    elif isinstance(value, (bytes, bytearray)):
        out += TAG_BYTES
        _encode_length(out, len(value))
        out += value
    elif isinstance(value, (list, tuple)):
        out += TAG_LIST
        _encode_length(out, len(value))
        for item in value:
            _encode_into(out, item)
    elif isinstance(value, dict):
        out += TAG_MAP
        _encode_length(out, len(value))
        for key, item in value.items():
            if not isinstance(key, str):
                raise SerializationError(f"gob: map key {key!r} is not a string")
            encoded_key = key.encode("utf-8")
            _encode_length(out, len(encoded_key))
            out += encoded_key
            _encode_into(out, item)
    else:
        raise SerializationError(f"gob: cannot encode value of type {type(value).__name__}")


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = memoryview(data)
        self._offset = 0

    def take(self, size: int) -> bytes:
        end = self._offset + size
        if end > len(self._data):
            raise SerializationError(
                f"gob: truncated payload at offset {self._offset} (wanted {size} byte(s))"
            )
        chunk = self._data[self._offset : end].tobytes()
        self._offset = end
        return chunk

    def at_end(self) -> bool:
        return self._offset == len(self._data)

    def remaining(self) -> int:
        return len(self._data) - self._offset

    def read_length(self) -> int:
        return _UINT32.unpack(self.take(_UINT32.size))[0]

    def read_text(self) -> str:
        raw = self.take(self.read_length())
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SerializationError("gob: string is not valid utf-8") from exc

    def read_value(self) -> Any:
        tag = self.take(1)
        if tag == TAG_NULL:
            return None
        if tag == TAG_TRUE:
            return True
        if tag == TAG_FALSE:
            return False
        if tag == TAG_INT:
            return _INT64.unpack(self.take(_INT64.size))[0]
        if tag == TAG_FLOAT:
            return _FLOAT64.unpack(self.take(_FLOAT64.size))[0]
        if tag == TAG_STR:
            return self.read_text()
        if tag == TAG_BYTES:
            return self.take(self.read_length())
        if tag == TAG_LIST:
            return [self.read_value() for _ in range(self.read_length())]
        if tag == TAG_MAP:
            count = self.read_length()
            result: dict[str, Any] = {}
            for _ in range(count):
                key = self.read_text()
                result[key] = self.read_value()
            return result
        raise SerializationError(f"gob: unknown tag {tag!r} at offset {self._offset - 1}")


class BinarySerializer(Serializer[T]):
    """
    Encodes records as a tagged list of field maps.
    """

    format = SerializationFormat.GOB
    media_type = "application/octet-stream"

    def serialize(self, items: Sequence[T]) -> bytes:
        return encode_value(self._to_plain(items))

    def deserialize(self, data: bytes) -> list[T]:
        return self._from_plain(decode_value(data))
