# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Outgoing request bodies: JSON items and raw binary payloads."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import zstandard

from typedhttp.codec import encode_json
from typedhttp.constants import HeaderField, MimeType
from typedhttp.errors import UnsuitableRequest

from ._compression import CompressionRules, UploadCompression

__all__ = [
    "prepare_data_upload",
    "prepare_upload",
]

_logger = logging.getLogger("typedhttp.networking")


def prepare_upload(
    item: Any,
    request: httpx.Request,
    *,
    compression_rules: CompressionRules,
    compression: UploadCompression | None = None,
) -> bytes:
    """Encode *item* as JSON and set the request's content headers.

    ``Content-Type`` is always ``application/json``.  If the request URL is
    eligible under *compression_rules*, the body is compressed and
    ``Content-Encoding`` is set, but only when that makes it strictly
    smaller.  Compression failures fall back to the uncompressed body.

    Args:
        item: Value to encode.
        request: Request whose headers are updated in place.
        compression_rules: URL eligibility table.
        compression: Codec to use; defaults to gzip.

    Returns:
        The body to send.

    Raises:
        UnsuitableRequest: If *item* cannot be JSON-encoded.

    """
    try:
        uncompressed = encode_json(item)
    except (TypeError, ValueError) as exc:
        raise UnsuitableRequest(f"Cannot JSON-encode {type(item).__name__}: {exc}") from exc
    request.headers[HeaderField.CONTENT_TYPE.value] = MimeType.APPLICATION_JSON.value
    if not compression_rules.should_compress(request.url):
        return uncompressed

    codec = compression or UploadCompression()
    try:
        compressed = codec.compress(uncompressed)
    except (OSError, zstandard.ZstdError) as exc:
        _logger.debug("Can't compress upload to %s: %s, sending uncompressed", request.url, exc)
        return uncompressed
    if len(compressed) >= len(uncompressed):
        return uncompressed
    request.headers[HeaderField.CONTENT_ENCODING.value] = codec.encoding.value
    return compressed


def prepare_data_upload(data: bytes, request: httpx.Request) -> bytes:
    """Mark *request* as carrying an opaque ``application/octet-stream`` body."""
    request.headers[HeaderField.CONTENT_TYPE.value] = MimeType.APPLICATION_OCTET_STREAM.value
    return data
