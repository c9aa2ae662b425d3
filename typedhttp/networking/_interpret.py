# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Response interpretation: status checks, typed decoding, file placement.

Mocked and real responses both pass through the functions in this module,
so callers cannot tell them apart.

Interpretation strategies
-------------------------
The facade runs every exchange through a single ``send`` operation that is
parameterized by one of these strategies:

- :class:`DecodeAs`: decode the body into a type.
- :data:`STATUS_ONLY`: return the :class:`~typedhttp.status.Status`, ignore
  the body.
- :data:`HEADERS_ONLY`: return the response headers, ignore the body.
- :data:`RAW_BYTES`: return the body bytes whatever the MIME type.
"""

from __future__ import annotations

import contextlib
import os
import shutil
from collections.abc import Set
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

import httpx
import pydantic

from typedhttp.codec import decode_details, decode_json, is_bytes_target
from typedhttp.constants import HeaderField, MimeType, essence_of
from typedhttp.errors import (
    DecodingError,
    UnexpectedMimeType,
    UnexpectedResponse,
    Unsuccessful,
    UnsuccessfulWithDetails,
)
from typedhttp.status import Status

__all__ = [
    "DEFAULT_DETAIL_MIME_TYPES",
    "HEADERS_ONLY",
    "RAW_BYTES",
    "STATUS_ONLY",
    "DecodeAs",
    "Interpretation",
    "decode_file",
    "decode_response",
    "response_status",
]

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

DEFAULT_DETAIL_MIME_TYPES: frozenset[MimeType] = frozenset({MimeType.APPLICATION_JSON})
"""MIME types whose error bodies are parsed for details."""

_JSON_MIME_TYPES: frozenset[MimeType] = frozenset({MimeType.APPLICATION_JSON, MimeType.TEXT_JAVASCRIPT})

# Some servers mislabel binary payloads; these are accepted for ``bytes`` targets only.
_BINARY_MIME_TYPES: frozenset[MimeType] = frozenset(
    {
        MimeType.APPLICATION_OCTET_STREAM,
        MimeType.APPLICATION_X_DOSEXEC,
        MimeType.APPLICATION_BINARY,
    }
)


def _require_response(response: object) -> httpx.Response:
    if not isinstance(response, httpx.Response):
        raise UnexpectedResponse(f"{type(response).__name__} != httpx.Response")
    return response


def response_status(response: object) -> tuple[Status, httpx.Headers]:
    """Return the status and a copy of the headers of a successful response.

    Raises:
        UnexpectedResponse: If *response* is not an ``httpx.Response``.
        Unsuccessful: If the status is not 2xx.

    """
    checked = _require_response(response)
    status = Status(checked.status_code)
    if not status.is_success:
        raise Unsuccessful(status)
    return status, httpx.Headers(checked.headers)


def decode_response(
    data: bytes,
    response: object,
    target: Any,
    *,
    detail_mime_types: Set[MimeType] = DEFAULT_DETAIL_MIME_TYPES,
) -> Any:
    """Decode *data* into *target* according to the response status and MIME type.

    On a non-2xx status the body is parsed for a JSON object only when the
    MIME type is in *detail_mime_types*; a parse failure there silently
    degrades to a plain :class:`~typedhttp.errors.Unsuccessful`.

    Args:
        data: Response body.
        response: The response the body belongs to.
        target: Type annotation to decode into.
        detail_mime_types: MIME types eligible for error-detail parsing.

    Returns:
        The decoded value, or *data* itself for binary MIME types with a
        ``bytes`` target.

    Raises:
        UnexpectedResponse: If *response* is not an ``httpx.Response``.
        UnsuccessfulWithDetails: Non-2xx status with a JSON object body.
        Unsuccessful: Non-2xx status otherwise.
        DecodingError: JSON body does not decode into *target*, or pydantic
            cannot build a validator for *target*.
        UnexpectedMimeType: The MIME type does not fit *target*.

    """
    checked = _require_response(response)
    status = Status(checked.status_code)
    raw_mime = checked.headers.get(HeaderField.CONTENT_TYPE.value)
    mime = MimeType.from_wire(raw_mime)

    if not status.is_success:
        if mime in detail_mime_types:
            details = decode_details(data)
            if details is not None:
                raise UnsuccessfulWithDetails(status, details)
        raise Unsuccessful(status)

    if mime in _JSON_MIME_TYPES:
        try:
            return decode_json(data, target)
        except (pydantic.ValidationError, pydantic.PydanticUserError) as exc:
            raise DecodingError(exc) from exc

    if mime in _BINARY_MIME_TYPES and is_bytes_target(target):
        return data

    raise UnexpectedMimeType(essence_of(raw_mime) or MimeType.UNKNOWN.value)


def decode_file(
    source: str | os.PathLike[str],
    destination: str | os.PathLike[str],
    response: object,
) -> httpx.Headers:
    """Move a downloaded file into place after checking the response status.

    Any existing file at *destination* is replaced.

    Returns:
        The response headers.

    Raises:
        UnexpectedResponse: If *response* is not an ``httpx.Response``.
        Unsuccessful: If the status is not 2xx.
        OSError: If the file cannot be moved (e.g. missing parent directory).

    """
    _, headers = response_status(response)
    with contextlib.suppress(FileNotFoundError):
        os.remove(destination)
    shutil.move(os.fspath(source), os.fspath(destination))
    return headers


# ---------------------------------------------------------------------------
# Interpretation strategies
# ---------------------------------------------------------------------------


class Interpretation(Protocol[T_co]):
    """Turns a response body and its response into the caller's result."""

    def interpret(
        self,
        data: bytes,
        response: object,
        *,
        detail_mime_types: Set[MimeType] = DEFAULT_DETAIL_MIME_TYPES,
    ) -> T_co:
        """Interpret *data* received with *response*."""
        ...


@dataclass(frozen=True)
class DecodeAs(Generic[T]):
    """Decode the body into :attr:`target` (see :func:`decode_response`)."""

    target: type[T] | Any

    def interpret(
        self,
        data: bytes,
        response: object,
        *,
        detail_mime_types: Set[MimeType] = DEFAULT_DETAIL_MIME_TYPES,
    ) -> T:
        """Decode *data* into the target type."""
        result: T = decode_response(data, response, self.target, detail_mime_types=detail_mime_types)
        return result


@dataclass(frozen=True)
class _StatusOnly:
    def interpret(
        self,
        data: bytes,
        response: object,
        *,
        detail_mime_types: Set[MimeType] = DEFAULT_DETAIL_MIME_TYPES,
    ) -> Status:
        return response_status(response)[0]


@dataclass(frozen=True)
class _HeadersOnly:
    def interpret(
        self,
        data: bytes,
        response: object,
        *,
        detail_mime_types: Set[MimeType] = DEFAULT_DETAIL_MIME_TYPES,
    ) -> httpx.Headers:
        return response_status(response)[1]


@dataclass(frozen=True)
class _RawBytes:
    def interpret(
        self,
        data: bytes,
        response: object,
        *,
        detail_mime_types: Set[MimeType] = DEFAULT_DETAIL_MIME_TYPES,
    ) -> bytes:
        response_status(response)
        return data


STATUS_ONLY: Interpretation[Status] = _StatusOnly()
"""Return the response status and ignore the body."""

HEADERS_ONLY: Interpretation[httpx.Headers] = _HeadersOnly()
"""Return the response headers and ignore the body."""

RAW_BYTES: Interpretation[bytes] = _RawBytes()
"""Return the body bytes regardless of MIME type."""
