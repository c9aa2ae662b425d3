"""End-to-end tests against an in-process Falcon ASGI application."""

from __future__ import annotations

import asyncio
import dataclasses
import gzip
from pathlib import Path
from typing import Any

import falcon
import falcon.asgi
import pytest

from typedhttp.constants import MimeType
from typedhttp.errors import UnsuccessfulWithDetails
from typedhttp.networking import (
    STATUS_ONLY,
    MultipartPart,
    Networking,
    NetworkingConfig,
    make_asgi_networking,
)

_BLOB = bytes(range(256)) * 64


@dataclasses.dataclass
class User:
    """Resource representation served by the test app."""

    id: int
    name: str


class _UserResource:
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: int) -> None:
        if user_id == 0:
            raise falcon.HTTPNotFound(description="no such user")
        resp.media = {"id": user_id, "name": "ada"}

    async def on_put(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: int) -> None:
        raw = await req.stream.read()
        if req.get_header("Content-Encoding") == "gzip":
            raw = gzip.decompress(raw)
        resp.content_type = falcon.MEDIA_JSON
        resp.data = raw

    async def on_delete(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: int) -> None:
        resp.status = falcon.HTTP_204


class _UploadResource:
    """Parses multipart uploads with Falcon's own form handler."""

    def __init__(self) -> None:
        self.received: list[tuple[str, str | None, bytes]] = []

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        form = await req.get_media()
        async for part in form:
            self.received.append((part.name, part.filename, await part.get_data()))
        resp.status = falcon.HTTP_201


class _BlobResource:
    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        resp.content_type = MimeType.APPLICATION_OCTET_STREAM.value
        resp.data = _BLOB

    async def on_head(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        resp.content_type = MimeType.APPLICATION_OCTET_STREAM.value
        resp.set_header("X-Blob-Size", str(len(_BLOB)))


def _app() -> tuple[falcon.asgi.App, _UploadResource]:
    app = falcon.asgi.App()
    upload = _UploadResource()
    app.add_route("/users/{user_id:int}", _UserResource())
    app.add_route("/upload", upload)
    app.add_route("/blob", _BlobResource())
    return app, upload


def _run(networking: Networking, coro_fn: Any) -> Any:
    async def main() -> Any:
        async with networking:
            return await coro_fn(networking)

    return asyncio.run(main())


class TestFalconApp:
    """Tests driving every verb against a real ASGI server implementation."""

    def test_get_typed(self) -> None:
        """Falcon's JSON media decodes into the dataclass."""
        app, _ = _app()
        assert _run(make_asgi_networking(app), lambda n: n.get("/users/7", User)) == User(7, "ada")

    def test_falcon_error_body_becomes_details(self) -> None:
        """Falcon's JSON error representation surfaces as details."""
        app, _ = _app()
        config = NetworkingConfig(default_headers={"Accept": "application/json"})
        with pytest.raises(UnsuccessfulWithDetails) as info:
            _run(make_asgi_networking(app, config=config), lambda n: n.get("/users/0", User))
        assert info.value.status == 404
        assert info.value.details["description"] == "no such user"

    def test_put_compressed_round_trip(self) -> None:
        """A gzip upload is inflated by the server and echoed back."""
        config = NetworkingConfig()
        config.compression_rules.enable(r"http://testserver/users/\d+", "users")
        app, _ = _app()
        user = User(3, "x" * 2000)
        assert _run(make_asgi_networking(app, config=config), lambda n: n.put("/users/3", user)) == user

    def test_delete(self) -> None:
        """DELETE returns 204."""
        app, _ = _app()
        assert _run(make_asgi_networking(app), lambda n: n.delete("/users/3")) == 204

    def test_multipart_parsed_by_falcon(self) -> None:
        """Falcon's multipart parser accepts the generated body."""
        app, upload = _app()
        parts = [
            MultipartPart.json({"title": "t"}),
            MultipartPart("file", b"\x00\x01\x02", "a.bin", MimeType.APPLICATION_OCTET_STREAM),
        ]
        status = _run(make_asgi_networking(app), lambda n: n.post_multipart("/upload", parts, expect=STATUS_ONLY))
        assert status == 201
        assert upload.received == [("json", None, b'{"title":"t"}'), ("file", "a.bin", b"\x00\x01\x02")]

    def test_download(self, tmp_path: Path) -> None:
        """Binary content downloads byte-for-byte."""
        app, _ = _app()
        dest = tmp_path / "blob.bin"
        fractions: list[float] = []
        _run(make_asgi_networking(app), lambda n: n.download("/blob", dest, lambda p: fractions.append(p.fraction)))
        assert dest.read_bytes() == _BLOB
        assert fractions[-1] == 1.0

    def test_get_bytes_target(self) -> None:
        """octet-stream decodes into a bytes target."""
        app, _ = _app()
        assert _run(make_asgi_networking(app), lambda n: n.get("/blob", bytes)) == _BLOB

    def test_head(self) -> None:
        """HEAD returns the resource's headers."""
        app, _ = _app()
        headers = _run(make_asgi_networking(app), lambda n: n.head("/blob"))
        assert headers["x-blob-size"] == str(len(_BLOB))
