# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""One-shot coroutines in the style of ``httpx.get``.

Each call opens a short-lived :class:`~typedhttp.networking.Networking`
bound to :func:`~typedhttp.networking.default_config` (or the *config*
passed in), performs one exchange and closes its client.  Prefer a
long-lived ``Networking`` when issuing many requests.

Example::

    import asyncio
    from typedhttp import api

    user = asyncio.run(api.get("https://example.com/user/1", User))
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import Any, TypeVar

import httpx

from typedhttp.networking import (
    STATUS_ONLY,
    MultipartPart,
    Networking,
    NetworkingConfig,
    ProgressObserver,
    RequestLike,
)
from typedhttp.status import Status

__all__ = [
    "delete",
    "download",
    "get",
    "head",
    "patch",
    "post",
    "post_data",
    "post_multipart",
    "put",
]

T = TypeVar("T")


async def get(request: RequestLike, target: type[T] | Any, *, config: NetworkingConfig | None = None) -> T:
    """GET *request* and decode the response into *target*."""
    async with Networking(config) as net:
        result: T = await net.get(request, target)
        return result


async def head(request: RequestLike, *, config: NetworkingConfig | None = None) -> httpx.Headers:
    """HEAD *request* and return the response headers."""
    async with Networking(config) as net:
        return await net.head(request)


async def download(
    request: RequestLike,
    destination: str | os.PathLike[str],
    on_progress: ProgressObserver | None = None,
    *,
    config: NetworkingConfig | None = None,
) -> httpx.Headers:
    """GET *request* into *destination* (see :meth:`Networking.download`)."""
    async with Networking(config) as net:
        return await net.download(request, destination, on_progress)


async def post(request: RequestLike, item: Any, *, expect: Any = None, config: NetworkingConfig | None = None) -> Any:
    """POST *item* as JSON (see :meth:`Networking.post` for *expect*)."""
    async with Networking(config) as net:
        return await net.post(request, item, expect=expect)


async def put(request: RequestLike, item: Any, *, expect: Any = None, config: NetworkingConfig | None = None) -> Any:
    """PUT *item* as JSON."""
    async with Networking(config) as net:
        return await net.put(request, item, expect=expect)


async def patch(request: RequestLike, item: Any, *, expect: Any = None, config: NetworkingConfig | None = None) -> Any:
    """PATCH *item* as JSON."""
    async with Networking(config) as net:
        return await net.patch(request, item, expect=expect)


async def delete(request: RequestLike, *, config: NetworkingConfig | None = None) -> Status:
    """DELETE *request* and return the status."""
    async with Networking(config) as net:
        return await net.delete(request)


async def post_data(request: RequestLike, data: bytes, *, config: NetworkingConfig | None = None) -> Status:
    """POST raw bytes as ``application/octet-stream``."""
    async with Networking(config) as net:
        return await net.post_data(request, data)


async def post_multipart(
    request: RequestLike,
    parts: Sequence[MultipartPart],
    *,
    expect: Any = STATUS_ONLY,
    config: NetworkingConfig | None = None,
) -> Any:
    """POST *parts* as ``multipart/form-data``."""
    async with Networking(config) as net:
        return await net.post_multipart(request, parts, expect=expect)
