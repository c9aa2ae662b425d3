"""Tests for the one-shot module-level API."""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Iterator
from pathlib import Path

import pytest

from typedhttp import api
from typedhttp.constants import MimeType
from typedhttp.errors import Unsuccessful
from typedhttp.networking import STATUS_ONLY, MultipartPart, NetworkingConfig, default_config

_URL = "https://one-shot.example.com/thing"


@dataclasses.dataclass
class Thing:
    """Decode target."""

    id: int


@pytest.fixture
def mocked_default() -> Iterator[NetworkingConfig]:
    """Register a mock on the process-wide default config and remove it afterwards."""
    config = default_config()
    config.mocks.register(b'{"id": 99}', 200, MimeType.APPLICATION_JSON, _URL)
    try:
        yield config
    finally:
        config.mocks.unregister(_URL)


class TestOneShot:
    """Tests for the api coroutines (all mocked, no network)."""

    def test_default_config_is_shared(self) -> None:
        """default_config returns the same instance every time."""
        assert default_config() is default_config()

    def test_get_uses_default_config(self, mocked_default: NetworkingConfig) -> None:
        """Without a config argument the default registries apply."""
        assert asyncio.run(api.get(_URL, Thing)) == Thing(99)

    def test_explicit_config(self) -> None:
        """An explicit config replaces the default."""
        config = NetworkingConfig()
        config.mocks.register(b"", 500, MimeType.TEXT_PLAIN, _URL)
        with pytest.raises(Unsuccessful):
            asyncio.run(api.get(_URL, Thing, config=config))

    def test_uploads_and_delete(self) -> None:
        """Upload verbs and delete work through the one-shot helpers."""
        config = NetworkingConfig()
        config.mocks.register(b'{"id": 1}', 201, MimeType.APPLICATION_JSON, _URL)

        async def main() -> list[object]:
            return [
                await api.post(_URL, Thing(1), config=config),
                await api.put(_URL, Thing(1), expect=STATUS_ONLY, config=config),
                await api.patch(_URL, {"id": 5}, expect=Thing, config=config),
                await api.post_data(_URL, b"\x00", config=config),
                await api.post_multipart(_URL, [MultipartPart("a", b"1")], config=config),
                await api.delete(_URL, config=config),
            ]

        assert asyncio.run(main()) == [Thing(1), 201, Thing(1), 201, 201, 201]

    def test_head_and_download(self, tmp_path: Path) -> None:
        """head and download honour mocks too."""
        config = NetworkingConfig()
        config.mocks.register(b"abc", 200, MimeType.APPLICATION_OCTET_STREAM, _URL)
        dest = tmp_path / "thing.bin"

        async def main() -> tuple[str, str]:
            headers = await api.head(_URL, config=config)
            downloaded = await api.download(_URL, dest, config=config)
            return headers["Content-Length"], downloaded["Content-Type"]

        assert asyncio.run(main()) == ("3", "application/octet-stream")
        assert dest.read_bytes() == b"abc"
