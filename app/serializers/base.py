"""
app/serializers/base.py

Serializer strategy abstraction shared by every output format.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from app.errors import SerializationError, UnsupportedFormatError

T = TypeVar("T")


class SerializationFormat(str, Enum):
    """
    Closed set of output formats selectable per request.
    """

    JSON = "json"
    GOB = "gob"

    @classmethod
    def parse(cls, raw: str) -> SerializationFormat:
        """
        Resolve a format key exactly as given; unknown keys are rejected.
        """

        for member in cls:
            if member.value == raw:
                return member
        raise UnsupportedFormatError(raw)


class Serializer(ABC, Generic[T]):
    """
    Converts a sequence of records of one dataclass type to and from bytes.

    Records are turned into plain Python values (and validated back) through
    a pydantic ``TypeAdapter`` so every format decodes to the same types.
    """

    format: SerializationFormat
    media_type: str

    def __init__(self, record_type: type[T]) -> None:
        self.record_type = record_type
        self._adapter: TypeAdapter[list[T]] = TypeAdapter(list[record_type])  # type: ignore[valid-type]

    @abstractmethod
    def serialize(self, items: Sequence[T]) -> bytes:
        """
        Encode every record into one payload.
        """

    @abstractmethod
    def deserialize(self, data: bytes) -> list[T]:
        """
        Decode a payload produced by ``serialize`` back into records.
        """

    def _to_plain(self, items: Sequence[T]) -> list[Any]:
        try:
            return self._adapter.dump_python(list(items), mode="python")
        except PydanticSerializationError as exc:
            raise SerializationError(f"{self.format.value}: cannot encode records: {exc}") from exc

    def _from_plain(self, value: Any) -> list[T]:
        try:
            return self._adapter.validate_python(value)
        except ValidationError as exc:
            raise SerializationError(
                f"{self.format.value}: payload does not match {self.record_type.__name__}: "
                f"{exc.error_count()} error(s)"
            ) from exc
