# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""The :class:`Networking` facade.

Every verb funnels through one exchange: derive a private request from the
caller's, prepare the body, short-circuit on a registered mock, otherwise
send via ``httpx.AsyncClient``, then interpret the response with the
caller-selected strategy.

Logger ``typedhttp.networking`` emits one DEBUG record per exchange with
``method``, ``url``, ``status``, ``size_bytes`` and ``duration_ms`` extras.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
import time
from collections.abc import Sequence
from types import TracebackType
from typing import Any, TypeVar, overload

import httpx

from typedhttp.constants import HeaderField, Method, MimeType
from typedhttp.status import Status

from ._body import prepare_data_upload, prepare_upload
from ._common import NetworkingConfig, default_config
from ._debug import fmt_body, fmt_headers, wire_request_logger, wire_response_logger
from ._interpret import (
    HEADERS_ONLY,
    RAW_BYTES,
    STATUS_ONLY,
    DecodeAs,
    Interpretation,
    decode_file,
    response_status,
)
from ._multipart import MultipartPart, prepare_multipart_upload
from ._progress import ProgressObserver, _ProgressTracker

__all__ = [
    "Networking",
    "RequestLike",
]

T = TypeVar("T")
U = TypeVar("U")

RequestLike = httpx.Request | httpx.URL | str
"""Anything a verb accepts as its target: a request template or a URL."""

_logger = logging.getLogger("typedhttp.networking")

# Headers describing the body of a request; recomputed whenever a body is attached.
_BODY_FRAMING_HEADERS = ("Content-Length", "Transfer-Encoding")


def _content_length(response: httpx.Response) -> int | None:
    raw = response.headers.get(HeaderField.CONTENT_LENGTH.value)
    if raw is None:
        return None
    try:
        length = int(raw)
    except ValueError:
        return None
    return length if length >= 0 else None


class Networking:
    """Typed HTTP verbs on top of an ``httpx.AsyncClient``.

    The facade holds no per-call state; any number of concurrent calls may
    share one instance.  The caller's ``httpx.Request`` is used as a template
    (method, URL, headers, extensions) and is never mutated; any body it
    carries is ignored in favour of the verb's payload.

    Use as an async context manager or call :meth:`aclose`.  A client passed
    in via *client* is left open unless *close_client* is true.

    Args:
        config: Registries and settings; defaults to :func:`default_config`.
        client: Transport to use instead of a self-created one.
        close_client: Whether :meth:`aclose` closes the transport; defaults
            to true only for a self-created client.

    """

    __slots__ = ("_client", "_config", "_owns_client")

    def __init__(
        self,
        config: NetworkingConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        close_client: bool | None = None,
    ) -> None:
        """Bind the facade to *config* and a transport."""
        self._config = config if config is not None else default_config()
        self._owns_client = client is None if close_client is None else close_client
        if client is None:
            client = httpx.AsyncClient(
                timeout=self._config.timeout,
                follow_redirects=self._config.follow_redirects,
                headers=dict(self._config.default_headers),
            )
        self._client = client

    @property
    def config(self) -> NetworkingConfig:
        """The configuration this facade was built with."""
        return self._config

    async def aclose(self) -> None:
        """Close the transport if this facade created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Networking:
        """Enter the async context manager."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the async context manager, closing an owned transport."""
        await self.aclose()

    # -- Generic exchange ----------------------------------------------------

    async def send(
        self,
        request: RequestLike,
        interpretation: Interpretation[T],
        *,
        method: Method | str | None = None,
        content: bytes | None = None,
    ) -> T:
        """Perform one exchange and interpret the response.

        This is the operation every verb is built on.  *content* is sent
        as-is; set any content headers on *request* yourself.

        Args:
            request: Request template or URL.
            interpretation: How to turn the response into a result, e.g.
                ``DecodeAs(User)``, ``STATUS_ONLY`` or ``HEADERS_ONLY``.
            method: Overrides the template's method.
            content: Request body.

        Returns:
            Whatever *interpretation* produces.

        """
        draft = self._draft(request, method)
        return await self._exchange(draft, content, interpretation)

    # -- Body-less verbs -----------------------------------------------------

    async def get(self, request: RequestLike, target: type[T] | Any) -> T:
        """Issue a GET and decode the response into *target*."""
        return await self._exchange(self._draft(request, Method.GET), None, DecodeAs(target))

    async def get_raw(self, request: RequestLike) -> bytes:
        """Issue a GET and return the body bytes regardless of MIME type."""
        return await self._exchange(self._draft(request, Method.GET), None, RAW_BYTES)

    async def head(self, request: RequestLike) -> httpx.Headers:
        """Issue a HEAD and return the response headers."""
        return await self._exchange(self._draft(request, Method.HEAD), None, HEADERS_ONLY)

    async def delete(self, request: RequestLike) -> Status:
        """Issue a DELETE and return the status."""
        return await self._exchange(self._draft(request, Method.DELETE), None, STATUS_ONLY)

    # -- JSON uploads --------------------------------------------------------

    @overload
    async def post(self, request: RequestLike, item: T, *, expect: None = None) -> T: ...
    @overload
    async def post(self, request: RequestLike, item: Any, *, expect: Interpretation[U]) -> U: ...
    @overload
    async def post(self, request: RequestLike, item: Any, *, expect: type[U]) -> U: ...

    async def post(self, request: RequestLike, item: Any, *, expect: Any = None) -> Any:
        """Issue a POST with *item* as JSON.

        Args:
            request: Request template or URL.
            item: Payload, encoded as JSON (compressed when eligible).
            expect: ``None`` decodes the response as ``type(item)``; a type
                decodes into that type; an interpretation such as
                ``STATUS_ONLY`` is used as-is.

        """
        return await self._upload(Method.POST, request, item, expect)

    @overload
    async def put(self, request: RequestLike, item: T, *, expect: None = None) -> T: ...
    @overload
    async def put(self, request: RequestLike, item: Any, *, expect: Interpretation[U]) -> U: ...
    @overload
    async def put(self, request: RequestLike, item: Any, *, expect: type[U]) -> U: ...

    async def put(self, request: RequestLike, item: Any, *, expect: Any = None) -> Any:
        """Issue a PUT with *item* as JSON (see :meth:`post`)."""
        return await self._upload(Method.PUT, request, item, expect)

    @overload
    async def patch(self, request: RequestLike, item: T, *, expect: None = None) -> T: ...
    @overload
    async def patch(self, request: RequestLike, item: Any, *, expect: Interpretation[U]) -> U: ...
    @overload
    async def patch(self, request: RequestLike, item: Any, *, expect: type[U]) -> U: ...

    async def patch(self, request: RequestLike, item: Any, *, expect: Any = None) -> Any:
        """Issue a PATCH with *item* as JSON (see :meth:`post`)."""
        return await self._upload(Method.PATCH, request, item, expect)

    # -- Binary and multipart uploads ----------------------------------------

    async def post_data(self, request: RequestLike, data: bytes) -> Status:
        """POST raw bytes as ``application/octet-stream``; never compressed."""
        draft = self._draft(request, Method.POST)
        body = prepare_data_upload(data, draft)
        return await self._exchange(draft, body, STATUS_ONLY)

    @overload
    async def post_multipart(self, request: RequestLike, parts: Sequence[MultipartPart]) -> Status: ...
    @overload
    async def post_multipart(
        self, request: RequestLike, parts: Sequence[MultipartPart], *, expect: Interpretation[U]
    ) -> U: ...
    @overload
    async def post_multipart(self, request: RequestLike, parts: Sequence[MultipartPart], *, expect: type[U]) -> U: ...

    async def post_multipart(
        self,
        request: RequestLike,
        parts: Sequence[MultipartPart],
        *,
        expect: Any = STATUS_ONLY,
    ) -> Any:
        """POST *parts* as ``multipart/form-data``.

        A boundary already present in the template's ``Content-Type`` is
        reused.

        Raises:
            UnsuitableRequest: If *parts* is empty.

        """
        draft = self._draft(request, Method.POST)
        body = prepare_multipart_upload(parts, draft)
        return await self._exchange(draft, body, _as_interpretation(expect))

    async def post_json_with_attachment(
        self,
        request: RequestLike,
        value: Any,
        attachment: bytes,
        *,
        json_field_name: str = "json",
        attachment_field_name: str = "file",
        attachment_filename: str = "file.bin",
        attachment_mime_type: MimeType | str = MimeType.APPLICATION_OCTET_STREAM,
    ) -> Status:
        """POST a JSON part followed by one binary attachment part."""
        parts = [
            MultipartPart.json(value, name=json_field_name),
            MultipartPart(attachment_field_name, attachment, attachment_filename, attachment_mime_type),
        ]
        return await self.post_multipart(request, parts)

    # -- Downloads -----------------------------------------------------------

    async def download(
        self,
        request: RequestLike,
        destination: str | os.PathLike[str],
        on_progress: ProgressObserver | None = None,
    ) -> httpx.Headers:
        """GET into a file, replacing any existing file at *destination*.

        The body is streamed to a temporary file in the destination
        directory, which is moved into place once the transfer completes; a
        failed or cancelled transfer leaves *destination* untouched.

        Chunk writes and the final move are plain blocking file operations
        performed on the event loop.  For very large files on slow storage,
        run the download in a dedicated loop or thread.

        Args:
            request: Request template or URL.
            destination: Target file path.
            on_progress: Called on this task, between chunks, with
                non-decreasing progress; the last call reports completion.

        Returns:
            The response headers.

        Raises:
            Unsuccessful: If the status is not 2xx (nothing is written).
            OSError: If the destination directory is missing or the file
                cannot be moved into place.

        """
        draft = self._draft(request, Method.GET)
        mock = self._config.mocks.lookup(draft)
        if mock is not None:
            self._log_mock(draft, mock.response)
            response_status(mock.response)
            tracker = _ProgressTracker(on_progress, len(mock.data))
            tmp = _write_temp_file(mock.data, destination)
            tracker.update(len(mock.data))
            headers = _move_into_place(tmp, destination, mock.response)
            tracker.finish(len(mock.data))
            return headers

        outgoing = self._finalize(draft, None)
        t0 = time.monotonic()
        with self._config.busy():
            response = await self._client.send(outgoing, stream=True)
            try:
                self._log_response(outgoing, response, None, t0)
                response_status(response)
                tracker = _ProgressTracker(on_progress, _content_length(response))
                fd, tmp = _mkstemp_beside(destination)
                try:
                    with os.fdopen(fd, "wb") as fh:
                        async for chunk in response.aiter_bytes():
                            fh.write(chunk)
                            tracker.update(response.num_bytes_downloaded)
                except BaseException:
                    with contextlib.suppress(FileNotFoundError):
                        os.remove(tmp)
                    raise
                headers = _move_into_place(tmp, destination, response)
                tracker.finish(response.num_bytes_downloaded)
            finally:
                await response.aclose()
        return headers

    # -- Internals -----------------------------------------------------------

    async def _upload(self, method: Method, request: RequestLike, item: Any, expect: Any) -> Any:
        draft = self._draft(request, method)
        body = prepare_upload(
            item,
            draft,
            compression_rules=self._config.compression_rules,
            compression=self._config.compression,
        )
        interpretation = DecodeAs(type(item)) if expect is None else _as_interpretation(expect)
        return await self._exchange(draft, body, interpretation)

    def _draft(self, request: RequestLike, method: Method | str | None) -> httpx.Request:
        """Derive a body-less private request from the caller's template."""
        if isinstance(request, httpx.Request):
            headers = httpx.Headers(request.headers)
            for name in _BODY_FRAMING_HEADERS:
                headers.pop(name, None)
            return self._client.build_request(
                str(method or request.method),
                request.url,
                headers=headers,
                extensions=dict(request.extensions),
            )
        return self._client.build_request(str(method or Method.GET), request)

    def _finalize(self, draft: httpx.Request, body: bytes | None) -> httpx.Request:
        """Attach *body* to *draft*, recomputing the framing headers."""
        if body is None:
            return draft
        headers = httpx.Headers(draft.headers)
        for name in _BODY_FRAMING_HEADERS:
            headers.pop(name, None)
        return self._client.build_request(
            draft.method,
            draft.url,
            headers=headers,
            content=body,
            extensions=dict(draft.extensions),
        )

    async def _exchange(
        self,
        draft: httpx.Request,
        body: bytes | None,
        interpretation: Interpretation[T],
    ) -> T:
        detail_mime_types = self._config.detail_mime_types
        mock = self._config.mocks.lookup(draft)
        if mock is not None:
            self._log_mock(draft, mock.response)
            return interpretation.interpret(mock.data, mock.response, detail_mime_types=detail_mime_types)

        outgoing = self._finalize(draft, body)
        if wire_request_logger.isEnabledFor(logging.DEBUG):
            wire_request_logger.debug(
                "%s %s headers=%s body=%s",
                outgoing.method,
                outgoing.url,
                fmt_headers(outgoing.headers.items()),
                fmt_body(body or b""),
            )
        t0 = time.monotonic()
        with self._config.busy():
            response = await self._client.send(outgoing)
        self._log_response(outgoing, response, response.content, t0)
        return interpretation.interpret(response.content, response, detail_mime_types=detail_mime_types)

    def _log_response(self, request: httpx.Request, response: httpx.Response, body: bytes | None, t0: float) -> None:
        duration_ms = (time.monotonic() - t0) * 1000
        _logger.debug(
            "%s %s -> %d (%.1fms)",
            request.method,
            request.url,
            response.status_code,
            duration_ms,
            extra={
                "method": request.method,
                "url": str(request.url),
                "status": response.status_code,
                "size_bytes": len(body) if body is not None else _content_length(response),
                "duration_ms": round(duration_ms, 2),
            },
        )
        if wire_response_logger.isEnabledFor(logging.DEBUG):
            wire_response_logger.debug(
                "%d %s headers=%s body=%s",
                response.status_code,
                request.url,
                fmt_headers(response.headers.items()),
                fmt_body(body) if body is not None else "<streamed>",
            )

    def _log_mock(self, request: httpx.Request, response: httpx.Response) -> None:
        _logger.debug(
            "%s %s -> %d (mocked)",
            request.method,
            request.url,
            response.status_code,
            extra={"method": request.method, "url": str(request.url), "status": response.status_code, "mocked": True},
        )


def _as_interpretation(expect: Any) -> Interpretation[Any]:
    """Wrap a bare type in :class:`DecodeAs`; pass strategies through."""
    if callable(getattr(expect, "interpret", None)) and not isinstance(expect, type):
        result: Interpretation[Any] = expect
        return result
    return DecodeAs(expect)


def _mkstemp_beside(destination: str | os.PathLike[str]) -> tuple[int, str]:
    """Open a fresh temp file in *destination*'s directory."""
    parent = os.path.dirname(os.path.abspath(os.fspath(destination)))
    return tempfile.mkstemp(prefix=".typedhttp-", suffix=".download", dir=parent)


def _write_temp_file(data: bytes, destination: str | os.PathLike[str]) -> str:
    fd, tmp = _mkstemp_beside(destination)
    with os.fdopen(fd, "wb") as fh:
        fh.write(data)
    return tmp


def _move_into_place(tmp: str, destination: str | os.PathLike[str], response: httpx.Response) -> httpx.Headers:
    try:
        return decode_file(tmp, destination, response)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.remove(tmp)
        raise
