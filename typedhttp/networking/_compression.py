# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Upload compression: eligibility rules and codecs.

A request body is only ever compressed when its destination URL matches one
of the patterns registered in a :class:`CompressionRules` table.  Matching is
whole-string (``re.fullmatch``) against the absolute URL.
"""

from __future__ import annotations

import gzip
import re
import threading
from dataclasses import dataclass
from typing import Literal

import httpx
import zstandard

from typedhttp.constants import ContentEncoding

__all__ = [
    "CompressionRules",
    "UploadCompression",
]


@dataclass(frozen=True)
class UploadCompression:
    """Codec settings for compressed uploads.

    Attributes:
        algorithm: ``"gzip"`` (default) or ``"zstd"``.
        level: Compression level; ``None`` picks the codec default
            (9 for gzip, 3 for zstd).

    Raises:
        ValueError: If *level* is outside the codec's range.

    """

    algorithm: Literal["gzip", "zstd"] = "gzip"
    level: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.algorithm not in ("gzip", "zstd"):
            raise ValueError(f"Unsupported compression algorithm: {self.algorithm!r}")
        if self.level is None:
            return
        if self.algorithm == "gzip" and not 0 <= self.level <= 9:
            raise ValueError(f"gzip level must be 0-9, got {self.level}")
        if self.algorithm == "zstd" and not 1 <= self.level <= 22:
            raise ValueError(f"zstd level must be 1-22, got {self.level}")

    @property
    def encoding(self) -> ContentEncoding:
        """The ``Content-Encoding`` token produced by this codec."""
        return ContentEncoding.GZIP if self.algorithm == "gzip" else ContentEncoding.ZSTD

    def compress(self, data: bytes) -> bytes:
        """Compress *data* with the configured codec.

        Raises:
            OSError: On gzip failures.
            zstandard.ZstdError: On zstd failures.

        """
        if self.algorithm == "gzip":
            return gzip.compress(data, compresslevel=9 if self.level is None else self.level)
        return zstandard.ZstdCompressor(level=3 if self.level is None else self.level).compress(data)


class CompressionRules:
    """Thread-safe table of URL patterns eligible for compressed uploads.

    Rules are keyed so callers can remove exactly the rule they added.
    Registering under an existing key replaces that rule.
    """

    __slots__ = ("_lock", "_rules")

    def __init__(self) -> None:
        """Create an empty rule table."""
        self._lock = threading.Lock()
        self._rules: dict[str, re.Pattern[str]] = {}

    def enable(self, pattern: str | re.Pattern[str], key: str) -> None:
        """Register *pattern* under *key*.

        Raises:
            re.error: If *pattern* is a string that does not compile.

        """
        compiled = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
        with self._lock:
            self._rules[key] = compiled

    def disable(self, key: str) -> None:
        """Remove the rule registered under *key*; unknown keys are ignored."""
        with self._lock:
            self._rules.pop(key, None)

    def clear(self) -> None:
        """Remove every rule."""
        with self._lock:
            self._rules.clear()

    def should_compress(self, url: httpx.URL | str | None) -> bool:
        """Return whether *url* fully matches any registered pattern."""
        if url is None:
            return False
        text = str(url)
        if not text:
            return False
        with self._lock:
            patterns = list(self._rules.values())
        return any(pattern.fullmatch(text) is not None for pattern in patterns)

    def __contains__(self, key: object) -> bool:
        """Return whether a rule is registered under *key*."""
        with self._lock:
            return key in self._rules

    def __len__(self) -> int:
        """Return the number of registered rules."""
        with self._lock:
            return len(self._rules)
