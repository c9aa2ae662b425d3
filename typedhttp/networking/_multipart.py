# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""``multipart/form-data`` body construction.

Body layout for each part, in the given order, with CRLF line breaks::

    --<boundary>
    Content-Disposition: form-data; name="<name>"[; filename="<filename>"]
    [Content-Type: <mime type>]

    <raw bytes>

followed by the closing delimiter ``--<boundary>--``.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from typedhttp.codec import encode_json
from typedhttp.constants import HeaderField, MimeType
from typedhttp.errors import UnsuitableRequest

__all__ = [
    "MultipartPart",
    "build_multipart_body",
    "make_multipart_boundary",
    "multipart_boundary",
    "parse_multipart_body",
    "prepare_multipart_upload",
]

_CRLF = b"\r\n"
_DISPOSITION_PARAM_RE = re.compile(r';\s*(name|filename)="([^"]*)"', re.IGNORECASE)
_BOUNDARY_PARAM_RE = re.compile(r';\s*boundary\s*=\s*(?:"([^"]*)"|([^;\s]*))', re.IGNORECASE)
_TOKEN_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


@dataclass(frozen=True)
class MultipartPart:
    """A single part of a ``multipart/form-data`` body.

    Part names are not required to be unique and order is preserved on the
    wire.

    Attributes:
        name: Form field name.
        data: Raw part content.
        filename: Optional filename for the ``Content-Disposition`` line.
        mime_type: Optional ``Content-Type`` for the part.

    """

    name: str
    data: bytes
    filename: str | None = None
    mime_type: MimeType | str | None = None

    @classmethod
    def json(cls, value: Any, name: str = "json", filename: str | None = None) -> MultipartPart:
        """Build a part holding *value* encoded as JSON.

        Raises:
            UnsuitableRequest: If *value* cannot be JSON-encoded.

        """
        try:
            data = encode_json(value)
        except (TypeError, ValueError) as exc:
            raise UnsuitableRequest(f"Cannot JSON-encode multipart part {name!r}: {exc}") from exc
        return cls(name, data, filename, MimeType.APPLICATION_JSON)


def make_multipart_boundary() -> str:
    """Return a fresh boundary token derived from a random UUID."""
    return f"Boundary-{str(uuid.uuid4()).upper()}"


def multipart_boundary(content_type: str | None) -> str | None:
    """Extract the ``boundary`` parameter from a ``Content-Type`` value.

    The parameter name is matched case-insensitively.  A quoted value is
    returned without its quotes and may itself contain ``;``.
    """
    if not content_type:
        return None
    match = _BOUNDARY_PARAM_RE.search(content_type)
    if match is None:
        return None
    quoted, bare = match.groups()
    return (quoted if quoted is not None else bare) or None


def build_multipart_body(parts: Sequence[MultipartPart], boundary: str) -> bytes:
    """Serialize *parts* into a multipart body delimited by *boundary*."""
    delimiter = f"--{boundary}".encode()
    chunks: list[bytes] = []
    for part in parts:
        chunks.append(delimiter + _CRLF)
        disposition = f'Content-Disposition: form-data; name="{part.name}"'
        if part.filename is not None:
            disposition += f'; filename="{part.filename}"'
        chunks.append(disposition.encode() + _CRLF)
        if part.mime_type is not None:
            chunks.append(f"Content-Type: {part.mime_type}".encode() + _CRLF)
        chunks.append(_CRLF)
        chunks.append(part.data)
        chunks.append(_CRLF)
    chunks.append(delimiter + b"--" + _CRLF)
    return b"".join(chunks)


def prepare_multipart_upload(
    parts: Sequence[MultipartPart],
    request: httpx.Request,
    boundary: str | None = None,
) -> bytes:
    """Build a multipart body for *parts* and set the request's ``Content-Type``.

    The boundary is, in order of preference: *boundary*, the boundary already
    present in the request's ``Content-Type`` header, or a fresh one.

    Args:
        parts: Parts to serialize, in wire order.
        request: Request whose headers are updated in place.
        boundary: Explicit boundary override.

    Returns:
        The serialized body.

    Raises:
        UnsuitableRequest: If *parts* is empty.

    """
    if not parts:
        raise UnsuitableRequest("Multipart upload requires at least one part")
    content_type_field = HeaderField.CONTENT_TYPE.value
    used = boundary or multipart_boundary(request.headers.get(content_type_field)) or make_multipart_boundary()
    param = used if _TOKEN_RE.fullmatch(used) else f'"{used}"'
    request.headers[content_type_field] = f"{MimeType.MULTIPART_FORM_DATA.value}; boundary={param}"
    return build_multipart_body(parts, used)


def parse_multipart_body(body: bytes, boundary: str) -> list[MultipartPart]:
    """Split a body produced by :func:`build_multipart_body` back into parts.

    Only the headers this module writes (``Content-Disposition`` and
    ``Content-Type``) are interpreted.

    Raises:
        ValueError: If *body* is not delimited by *boundary*.

    """
    delimiter = b"--" + boundary.encode()
    closing = delimiter + b"--" + _CRLF
    if body == closing:
        return []
    if not body.startswith(delimiter + _CRLF) or not body.endswith(_CRLF + closing):
        raise ValueError(f"Body is not a multipart body with boundary {boundary!r}")
    inner = body[len(delimiter) + len(_CRLF) : -(len(_CRLF) + len(closing))]
    parts: list[MultipartPart] = []
    for segment in inner.split(_CRLF + delimiter + _CRLF):
        head, sep, data = segment.partition(_CRLF + _CRLF)
        if not sep:
            raise ValueError("Multipart part is missing its header terminator")
        name: str | None = None
        filename: str | None = None
        mime_type: str | None = None
        for line in head.decode().split("\r\n"):
            field, _, value = line.partition(":")
            if field.strip().lower() == "content-disposition":
                for key, param in _DISPOSITION_PARAM_RE.findall(value):
                    if key.lower() == "name":
                        name = param
                    else:
                        filename = param
            elif field.strip().lower() == "content-type":
                mime_type = value.strip()
        if name is None:
            raise ValueError("Multipart part has no name")
        parts.append(MultipartPart(name, data, filename, mime_type))
    return parts
