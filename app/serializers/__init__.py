"""
app/serializers package.

Output formats are a closed set; ``get_serializer`` picks one per request.
"""

from __future__ import annotations

from functools import lru_cache

from app.errors import UnsupportedFormatError
from app.serializers.base import SerializationFormat, Serializer, T
from app.serializers.binary_serializer import BinarySerializer
from app.serializers.json_serializer import JSONSerializer

DEFAULT_FORMAT = SerializationFormat.JSON


def get_serializer(format: str | SerializationFormat, record_type: type[T]) -> Serializer[T]:
    """
    Return the serializer for ``format`` bound to ``record_type``.

    Serializers hold no per-call state, so one instance per (format, type)
    is built and shared. Raises ``UnsupportedFormatError`` for any key other
    than ``json`` or ``gob``.
    """

    selected = format if isinstance(format, SerializationFormat) else SerializationFormat.parse(format)
    return _build_serializer(selected, record_type)


@lru_cache(maxsize=None)
def _build_serializer(selected: SerializationFormat, record_type: type[T]) -> Serializer[T]:
    if selected is SerializationFormat.JSON:
        return JSONSerializer(record_type)
    if selected is SerializationFormat.GOB:
        return BinarySerializer(record_type)
    raise UnsupportedFormatError(selected.value)


__all__ = [
    "DEFAULT_FORMAT",
    "BinarySerializer",
    "JSONSerializer",
    "SerializationFormat",
    "Serializer",
    "get_serializer",
]
