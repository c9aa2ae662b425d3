# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Typed HTTP convenience layer built on httpx and pydantic."""

import logging

from typedhttp.constants import (
    ContentEncoding,
    HeaderField,
    Headers,
    Method,
    MimeType,
    RTSPMethod,
    WebDAVMethod,
)
from typedhttp.errors import (
    DecodingError,
    NetworkingError,
    UnexpectedMimeType,
    UnexpectedResponse,
    Unsuccessful,
    UnsuccessfulWithDetails,
    UnsuitableRequest,
)
from typedhttp.favicon import FaviconError, FaviconFetcher, FaviconInfo
from typedhttp.headers import Header
from typedhttp.networking import (
    HEADERS_ONLY,
    RAW_BYTES,
    STATUS_ONLY,
    BusynessObserver,
    CompressionRules,
    DecodeAs,
    Interpretation,
    Mock,
    MockRegistry,
    MultipartPart,
    Networking,
    NetworkingConfig,
    Progress,
    ProgressObserver,
    UploadCompression,
    default_config,
    make_asgi_networking,
)
from typedhttp.status import ResponseType, Status, classify, is_success

__all__ = [
    # Facade
    "Networking",
    "NetworkingConfig",
    "default_config",
    "make_asgi_networking",
    # Interpretation
    "DecodeAs",
    "HEADERS_ONLY",
    "Interpretation",
    "RAW_BYTES",
    "STATUS_ONLY",
    # Status
    "ResponseType",
    "Status",
    "classify",
    "is_success",
    # Vocabulary
    "ContentEncoding",
    "Header",
    "HeaderField",
    "Headers",
    "Method",
    "MimeType",
    "RTSPMethod",
    "WebDAVMethod",
    # Bodies
    "MultipartPart",
    # Registries
    "CompressionRules",
    "Mock",
    "MockRegistry",
    "UploadCompression",
    # Hooks
    "BusynessObserver",
    "Progress",
    "ProgressObserver",
    # Errors
    "DecodingError",
    "NetworkingError",
    "UnexpectedMimeType",
    "UnexpectedResponse",
    "Unsuccessful",
    "UnsuccessfulWithDetails",
    "UnsuitableRequest",
    # Favicons
    "FaviconError",
    "FaviconFetcher",
    "FaviconInfo",
]

# Attach NullHandler to the package logger so library users don't get
# "No handler found" warnings.
logging.getLogger("typedhttp").addHandler(logging.NullHandler())
