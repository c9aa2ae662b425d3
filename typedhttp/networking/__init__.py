"""Typed HTTP verbs over ``httpx`` with mocking, compression and progress.

Provides the :class:`Networking` facade plus the pieces it is assembled
from: request-body builders, response interpretation strategies, the mock
registry and the upload-compression rule table.

Exchange pipeline
-----------------
1. Derive a private request from the caller's template (never mutated).
2. Build the body (JSON, raw bytes or ``multipart/form-data``); JSON uploads
   are compressed only for URLs matching a :class:`CompressionRules` pattern.
3. If a :class:`Mock` is registered for the exact URL, interpret it and stop.
4. Otherwise send inside the busyness bracket and interpret the response.

Loggers: ``typedhttp.networking`` (one record per exchange) and
``typedhttp.wire.request`` / ``typedhttp.wire.response`` (DEBUG wire dumps).
"""

from typedhttp.networking._body import prepare_data_upload, prepare_upload
from typedhttp.networking._client import Networking, RequestLike
from typedhttp.networking._common import BusynessObserver, NetworkingConfig, default_config
from typedhttp.networking._compression import CompressionRules, UploadCompression
from typedhttp.networking._interpret import (
    DEFAULT_DETAIL_MIME_TYPES,
    HEADERS_ONLY,
    RAW_BYTES,
    STATUS_ONLY,
    DecodeAs,
    Interpretation,
    decode_file,
    decode_response,
    response_status,
)
from typedhttp.networking._mocking import Mock, MockRegistry
from typedhttp.networking._multipart import (
    MultipartPart,
    build_multipart_body,
    make_multipart_boundary,
    multipart_boundary,
    parse_multipart_body,
    prepare_multipart_upload,
)
from typedhttp.networking._progress import Progress, ProgressObserver
from typedhttp.networking._testing import make_asgi_networking

__all__ = [
    "BusynessObserver",
    "CompressionRules",
    "DEFAULT_DETAIL_MIME_TYPES",
    "DecodeAs",
    "HEADERS_ONLY",
    "Interpretation",
    "Mock",
    "MockRegistry",
    "MultipartPart",
    "Networking",
    "NetworkingConfig",
    "Progress",
    "ProgressObserver",
    "RAW_BYTES",
    "RequestLike",
    "STATUS_ONLY",
    "UploadCompression",
    "build_multipart_body",
    "decode_file",
    "decode_response",
    "default_config",
    "make_asgi_networking",
    "make_multipart_boundary",
    "multipart_boundary",
    "parse_multipart_body",
    "prepare_data_upload",
    "prepare_multipart_upload",
    "prepare_upload",
    "response_status",
]
