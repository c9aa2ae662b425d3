# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""JSON codec for typed payloads, backed by pydantic.

Encoding accepts anything ``pydantic_core.to_json`` understands: dataclasses,
pydantic models, ``TypedDict`` values, enums, datetimes and the builtin
containers.  Decoding validates JSON bytes against an arbitrary type
annotation through a cached ``pydantic.TypeAdapter``.
"""

from __future__ import annotations

import functools
from types import NoneType, UnionType
from typing import Any, Union, get_args, get_origin

import pydantic
import pydantic_core

__all__ = [
    "decode_details",
    "decode_json",
    "encode_json",
    "is_bytes_target",
]

_DETAILS_ADAPTER: pydantic.TypeAdapter[dict[str, Any]] = pydantic.TypeAdapter(dict[str, Any])


def encode_json(value: Any) -> bytes:
    """Serialize *value* to compact JSON bytes.

    Raises:
        pydantic_core.PydanticSerializationError: If *value* is not
            serializable.

    """
    return pydantic_core.to_json(value)


@functools.lru_cache(maxsize=256)
def _cached_adapter(target: Any) -> pydantic.TypeAdapter[Any]:
    return pydantic.TypeAdapter(target)


def _adapter(target: Any) -> pydantic.TypeAdapter[Any]:
    try:
        return _cached_adapter(target)
    except TypeError:
        # Unhashable annotation (e.g. Annotated with unhashable metadata).
        return pydantic.TypeAdapter(target)


def decode_json(data: bytes, target: Any) -> Any:
    """Validate JSON *data* against the *target* annotation.

    Raises:
        pydantic.ValidationError: If *data* is not valid JSON or does not
            match *target*.
        pydantic.PydanticSchemaGenerationError: If *target* is not a type
            pydantic can validate.

    """
    return _adapter(target).validate_json(data)


def decode_details(data: bytes) -> dict[str, Any] | None:
    """Parse *data* as a JSON object with string keys.

    Returns ``None`` for anything else (invalid JSON, arrays, scalars, empty
    bodies); never raises.
    """
    if not data:
        return None
    try:
        return _DETAILS_ADAPTER.validate_json(data)
    except pydantic.ValidationError:
        return None


def is_bytes_target(target: Any) -> bool:
    """Return whether *target* is ``bytes`` or an optional form of it."""
    if target is bytes:
        return True
    origin = get_origin(target)
    if origin is Union or origin is UnionType:
        args = get_args(target)
        return bytes in args and all(arg is bytes or arg is NoneType for arg in args)
    return False
