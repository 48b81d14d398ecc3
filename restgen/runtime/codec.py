"""Pluggable body serialization."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Protocol

from pydantic import TypeAdapter


class Codec(Protocol):
    content_type: str

    def serialize(self, value: Any) -> bytes: ...

    def deserialize(self, data: bytes, type_: Any) -> Any: ...


@lru_cache(maxsize=256)
def _adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


class JsonCodec:
    """JSON codec validating bodies against the declared type with pydantic.

    Plain values, dataclasses and pydantic models are all supported on both
    sides. Deserialization errors propagate as ``pydantic.ValidationError``.
    """

    content_type = "application/json"

    def serialize(self, value: Any) -> bytes:
        return _adapter(type(value)).dump_json(value, by_alias=True)

    def deserialize(self, data: bytes, type_: Any) -> Any:
        return _adapter(type_).validate_json(data)
