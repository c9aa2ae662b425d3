# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Typed header values.

:class:`Header` pairs a :class:`~typedhttp.constants.HeaderField` with its
rendered wire value.  Build one with a named constructor and apply it to any
mutable header mapping::

    request = httpx.Request("GET", url)
    Header.range_closed(0, 1023).apply(request.headers)
    Header.authorization("eyJhbGciOi...").apply(request.headers)
"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass

import httpx

from typedhttp.constants import ContentEncoding, HeaderField, MimeType

__all__ = ["Header"]


@dataclass(frozen=True)
class Header:
    """A single header field together with its wire value.

    Attributes:
        field: The header field name.
        value: The rendered header value.

    """

    field: HeaderField
    value: str

    def apply(self, headers: MutableMapping[str, str] | httpx.Headers) -> None:
        """Set this header on *headers*, replacing any existing value."""
        headers[self.field.value] = self.value

    @classmethod
    def accept_language(cls, value: str) -> Header:
        """``Accept-Language: <value>``."""
        return cls(HeaderField.ACCEPT_LANGUAGE, value)

    @classmethod
    def authorization(cls, token: str) -> Header:
        """``Authorization: Bearer <token>``."""
        return cls(HeaderField.AUTHORIZATION, f"Bearer {token}")

    @classmethod
    def content_disposition(cls, *components: str) -> Header:
        """``Content-Disposition`` built from ``"; "``-joined components."""
        return cls(HeaderField.CONTENT_DISPOSITION, "; ".join(components))

    @classmethod
    def content_encoding(cls, encoding: ContentEncoding) -> Header:
        """``Content-Encoding: <encoding>``."""
        return cls(HeaderField.CONTENT_ENCODING, encoding.value)

    @classmethod
    def content_length(cls, length: int) -> Header:
        """``Content-Length: <length>``."""
        if length < 0:
            raise ValueError(f"content length must be >= 0, got {length}")
        return cls(HeaderField.CONTENT_LENGTH, str(length))

    @classmethod
    def content_type(cls, mime_type: MimeType | str) -> Header:
        """``Content-Type: <mime_type>``."""
        return cls(HeaderField.CONTENT_TYPE, str(mime_type))

    @classmethod
    def range_closed(cls, lower: int, upper: int) -> Header:
        """``Range: bytes=lower-upper`` (both bounds inclusive)."""
        if lower < 0 or upper < lower:
            raise ValueError(f"invalid byte range {lower}-{upper}")
        return cls(HeaderField.RANGE, f"bytes={lower}-{upper}")

    @classmethod
    def range_from(cls, lower: int) -> Header:
        """``Range: bytes=lower-`` (open-ended)."""
        if lower < 0:
            raise ValueError(f"invalid byte range start {lower}")
        return cls(HeaderField.RANGE, f"bytes={lower}-")

    @classmethod
    def range_through(cls, upper: int) -> Header:
        """``Range: bytes=-upper`` (suffix range)."""
        if upper < 0:
            raise ValueError(f"invalid byte range end {upper}")
        return cls(HeaderField.RANGE, f"bytes=-{upper}")

    @classmethod
    def user_agent(cls, value: str) -> Header:
        """``User-Agent: <value>``."""
        return cls(HeaderField.USER_AGENT, value)
