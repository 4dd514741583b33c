"""
app/serializers/json_serializer.py

Human-readable JSON output format.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from app.errors import SerializationError
from app.serializers.base import SerializationFormat, Serializer, T


class JSONSerializer(Serializer[T]):
    """
    Encodes records as a JSON array of objects keyed by field name.
    """

    format = SerializationFormat.JSON
    media_type = "application/json"

    def serialize(self, items: Sequence[T]) -> bytes:
        try:
            return self._adapter.dump_json(list(items))
        except PydanticSerializationError as exc:
            raise SerializationError(f"json: cannot encode records: {exc}") from exc

    def deserialize(self, data: bytes) -> list[T]:
        try:
            return self._adapter.validate_json(data)
        except ValidationError as exc:
            raise SerializationError(
                f"json: payload is not a valid {self.record_type.__name__} list: "
                f"{exc.error_count()} error(s)"
            ) from exc
