# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Canned responses substituted for real network calls.

A :class:`MockRegistry` maps exact URLs to a :class:`Mock`.  When the
:class:`~typedhttp.networking.Networking` facade finds a mock for a request it
skips the transport entirely and interprets the mock's response exactly as
it would a real one.
"""

from __future__ import annotations

import threading
from typing import NamedTuple

import httpx

from typedhttp.constants import HeaderField, MimeType

__all__ = [
    "Mock",
    "MockRegistry",
]


class Mock(NamedTuple):
    """A canned response body together with its synthetic response."""

    data: bytes
    response: httpx.Response


def _url_key(url: httpx.URL | str) -> str:
    return str(httpx.URL(url))


class MockRegistry:
    """Thread-safe table of mocks keyed by exact URL.

    No pattern matching and no query-string normalization is applied: a
    request matches only if its URL string is identical to the registered
    one.  The last registration for a URL wins.
    """

    __slots__ = ("_lock", "_mocks")

    def __init__(self) -> None:
        """Create an empty registry."""
        self._lock = threading.Lock()
        self._mocks: dict[str, Mock] = {}

    def register(
        self,
        data: bytes,
        status: int,
        mime_type: MimeType | str,
        url: httpx.URL | str,
    ) -> None:
        """Register *data* as the response for *url*.

        The synthetic response carries ``Content-Type`` and
        ``Content-Length`` headers derived from the arguments.

        Args:
            data: Response body.
            status: HTTP status code.
            mime_type: Value for the ``Content-Type`` header.
            url: Exact URL to intercept.

        """
        key = _url_key(url)
        headers = {
            HeaderField.CONTENT_TYPE.value: str(mime_type),
            HeaderField.CONTENT_LENGTH.value: str(len(data)),
        }
        response = httpx.Response(
            int(status),
            headers=headers,
            content=data,
            request=httpx.Request("GET", key),
        )
        with self._lock:
            self._mocks[key] = Mock(data, response)

    def unregister(self, url: httpx.URL | str) -> None:
        """Remove the mock for *url*; unknown URLs are ignored."""
        key = _url_key(url)
        with self._lock:
            self._mocks.pop(key, None)

    def clear(self) -> None:
        """Remove every mock."""
        with self._lock:
            self._mocks.clear()

    def lookup(self, request: httpx.Request | httpx.URL | str | None) -> Mock | None:
        """Return the mock registered for *request*'s URL, if any."""
        if request is None:
            return None
        url = request.url if isinstance(request, httpx.Request) else request
        key = _url_key(url)
        with self._lock:
            return self._mocks.get(key)

    def __len__(self) -> int:
        """Return the number of registered mocks."""
        with self._lock:
            return len(self._mocks)
