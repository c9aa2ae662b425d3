# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Closed value sets for HTTP methods, header fields, MIME types and encodings.

Every member carries exactly one canonical wire string as its value, so
``MimeType.APPLICATION_JSON.value == "application/json"`` and members compare
equal to their wire strings (``StrEnum``).

Unrecognized MIME types coming off the wire never raise: they map to the
:attr:`MimeType.UNKNOWN` sentinel via :meth:`MimeType.from_wire`.
"""

from __future__ import annotations

from enum import StrEnum

import httpx

__all__ = [
    "ContentEncoding",
    "HeaderField",
    "Headers",
    "Method",
    "MimeType",
    "RTSPMethod",
    "WebDAVMethod",
]

Headers = httpx.Headers
"""Header mapping returned by header-producing operations (case-insensitive lookup)."""


class Method(StrEnum):
    """Well-known HTTP methods."""

    CONNECT = "CONNECT"
    DELETE = "DELETE"
    GET = "GET"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"
    POST = "POST"
    PUT = "PUT"
    TRACE = "TRACE"


class WebDAVMethod(StrEnum):
    """HTTP methods used with the WebDAV protocol."""

    COPY = "COPY"
    LOCK = "LOCK"
    MKCOL = "MKCOL"
    PROPFIND = "PROPFIND"
    PROPPATCH = "PROPPATCH"
    UNLOCK = "UNLOCK"


class RTSPMethod(StrEnum):
    """Methods used with the RTSP protocol."""

    ANNOUNCE = "ANNOUNCE"
    DESCRIBE = "DESCRIBE"
    GET_PARAMETER = "GET_PARAMETER"
    PAUSE = "PAUSE"
    PLAY = "PLAY"
    RECORD = "RECORD"
    REDIRECT = "REDIRECT"
    SET_PARAMETER = "SET_PARAMETER"
    SETUP = "SETUP"
    TEARDOWN = "TEARDOWN"


class HeaderField(StrEnum):
    """Well-known HTTP header field names."""

    ACCEPT_LANGUAGE = "Accept-Language"
    AUTHORIZATION = "Authorization"
    CONTENT_DISPOSITION = "Content-Disposition"
    CONTENT_ENCODING = "Content-Encoding"
    CONTENT_LENGTH = "Content-Length"
    CONTENT_TYPE = "Content-Type"
    RANGE = "Range"
    USER_AGENT = "User-Agent"


class MimeType(StrEnum):
    """Well-known MIME types.

    ``UNKNOWN`` is the sentinel for anything not listed here; it is what
    :meth:`from_wire` returns for vendor-specific or malformed values.
    """

    APPLICATION_BINARY = "application/binary"
    APPLICATION_JSON = "application/json"
    APPLICATION_OCTET_STREAM = "application/octet-stream"
    APPLICATION_X_DOSEXEC = "application/x-dosexec"
    MULTIPART_FORM_DATA = "multipart/form-data"
    IMAGE_JPEG = "image/jpeg"
    IMAGE_HEIC = "image/heic"
    TEXT_PLAIN = "text/plain"
    TEXT_JAVASCRIPT = "text/javascript"
    TEXT_HTML = "text/html"
    TEXT_XML = "text/xml"
    UNKNOWN = "unknown/unknown"

    @classmethod
    def from_wire(cls, value: str | None) -> MimeType:
        """Map a ``Content-Type`` header value to a member.

        Parameters such as ``; charset=utf-8`` are ignored and the comparison
        is case-insensitive.

        Args:
            value: Raw header value, or ``None`` when the header is absent.

        Returns:
            The matching member, or ``UNKNOWN``.

        """
        essence = essence_of(value)
        if essence is None:
            return cls.UNKNOWN
        try:
            return cls(essence)
        except ValueError:
            return cls.UNKNOWN


class ContentEncoding(StrEnum):
    """Well-known ``Content-Encoding`` tokens."""

    GZIP = "gzip"
    DEFLATE = "deflate"
    BROTLI = "br"
    ZSTD = "zstd"


def essence_of(content_type: str | None) -> str | None:
    """Return the lowercased ``type/subtype`` part of a ``Content-Type`` value.

    ``None`` or blank input yields ``None``.
    """
    if content_type is None:
        return None
    essence = content_type.split(";", 1)[0].strip().lower()
    return essence or None
