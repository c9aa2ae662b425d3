"""Tests for upload compression rules and the JSON/binary body builders."""

from __future__ import annotations

import dataclasses
import gzip
import json
import re
import threading
from typing import Any

import httpx
import pytest
import zstandard

from typedhttp.errors import UnsuitableRequest
from typedhttp.networking import CompressionRules, UploadCompression, prepare_data_upload, prepare_upload

_URL = "https://api.example.com/v1/items"


@dataclasses.dataclass
class Item:
    """Payload used across upload tests."""

    name: str
    tags: list[str]


def _big_item() -> Item:
    """An item whose JSON compresses well."""
    return Item(name="widget", tags=["repetitive-tag"] * 200)


def _request(url: str = _URL) -> httpx.Request:
    return httpx.Request("POST", url)


# ---------------------------------------------------------------------------
# CompressionRules
# ---------------------------------------------------------------------------


class TestCompressionRules:
    """Tests for the whitelist of compressible URLs."""

    def test_empty_table_never_compresses(self) -> None:
        """Without rules nothing is eligible."""
        assert not CompressionRules().should_compress(_URL)

    def test_pattern_must_match_whole_url(self) -> None:
        """Matching is anchored at both ends."""
        rules = CompressionRules()
        rules.enable(r"https://api\.example\.com/.*", "api")
        assert rules.should_compress(_URL)
        assert rules.should_compress(httpx.URL(_URL))
        assert not rules.should_compress("http://evil.test/?u=https://api.example.com/x")

    def test_prefix_only_pattern_does_not_match(self) -> None:
        """A pattern covering only a prefix of the URL is not enough."""
        rules = CompressionRules()
        rules.enable("https://api.example.com", "api")
        assert not rules.should_compress(_URL)

    def test_none_and_empty_urls(self) -> None:
        """Missing URLs are never eligible, even with a catch-all rule."""
        rules = CompressionRules()
        rules.enable(".*", "all")
        assert not rules.should_compress(None)
        assert not rules.should_compress("")

    def test_disable_removes_only_that_key(self) -> None:
        """Rules are removed by key; unknown keys are ignored."""
        rules = CompressionRules()
        rules.enable(r".*/v1/.*", "v1")
        rules.enable(r".*/v2/.*", "v2")
        rules.disable("v1")
        rules.disable("never-added")
        assert "v1" not in rules
        assert "v2" in rules
        assert len(rules) == 1
        assert not rules.should_compress(_URL)

    def test_enable_same_key_replaces(self) -> None:
        """Re-enabling a key swaps its pattern."""
        rules = CompressionRules()
        rules.enable(r"https://other\.test/.*", "k")
        rules.enable(re.compile(r"https://api\.example\.com/.*"), "k")
        assert len(rules) == 1
        assert rules.should_compress(_URL)

    def test_clear(self) -> None:
        """clear empties the table."""
        rules = CompressionRules()
        rules.enable(".*", "all")
        rules.clear()
        assert len(rules) == 0

    def test_invalid_pattern_raises(self) -> None:
        """A string pattern that does not compile raises re.error."""
        with pytest.raises(re.error):
            CompressionRules().enable("(unclosed", "bad")

    def test_concurrent_mutation(self) -> None:
        """Concurrent enable/disable/query never corrupts the table."""
        rules = CompressionRules()
        errors: list[BaseException] = []

        def worker(n: int) -> None:
            try:
                for i in range(200):
                    key = f"{n}-{i}"
                    rules.enable(r".*", key)
                    rules.should_compress(_URL)
                    rules.disable(key)
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []
        assert len(rules) == 0


# ---------------------------------------------------------------------------
# UploadCompression
# ---------------------------------------------------------------------------


class TestUploadCompression:
    """Tests for codec settings."""

    def test_gzip_roundtrip(self) -> None:
        """Default codec is gzip and produces gzip data."""
        codec = UploadCompression()
        assert codec.encoding == "gzip"
        assert gzip.decompress(codec.compress(b"abc" * 100)) == b"abc" * 100

    def test_zstd_roundtrip(self) -> None:
        """zstd codec produces zstd frames."""
        codec = UploadCompression("zstd", level=5)
        assert codec.encoding == "zstd"
        assert zstandard.ZstdDecompressor().decompress(codec.compress(b"abc" * 100)) == b"abc" * 100

    @pytest.mark.parametrize(
        ("algorithm", "level"),
        [("gzip", 10), ("gzip", -1), ("zstd", 0), ("zstd", 23), ("brotli", None)],
    )
    def test_invalid_settings(self, algorithm: Any, level: int | None) -> None:
        """Out-of-range levels and unknown algorithms are rejected."""
        with pytest.raises(ValueError):
            UploadCompression(algorithm, level)


# ---------------------------------------------------------------------------
# prepare_upload
# ---------------------------------------------------------------------------


class TestPrepareUpload:
    """Tests for JSON body preparation."""

    def test_ineligible_url_sends_plain_json(self) -> None:
        """Without a matching rule the body is uncompressed JSON."""
        request = _request()
        body = prepare_upload(_big_item(), request, compression_rules=CompressionRules())
        assert json.loads(body)["name"] == "widget"
        assert request.headers["Content-Type"] == "application/json"
        assert "Content-Encoding" not in request.headers

    def test_eligible_url_gzips(self) -> None:
        """A matching rule gzips the body and sets Content-Encoding."""
        rules = CompressionRules()
        rules.enable(r"https://api\.example\.com/.*", "api")
        request = _request()
        body = prepare_upload(_big_item(), request, compression_rules=rules)
        assert request.headers["Content-Encoding"] == "gzip"
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(gzip.decompress(body)) == dataclasses.asdict(_big_item())

    def test_eligible_url_zstd(self) -> None:
        """The configured codec decides the encoding."""
        rules = CompressionRules()
        rules.enable(".*", "all")
        request = _request()
        body = prepare_upload(_big_item(), request, compression_rules=rules, compression=UploadCompression("zstd"))
        assert request.headers["Content-Encoding"] == "zstd"
        assert json.loads(zstandard.ZstdDecompressor().decompress(body))["tags"][0] == "repetitive-tag"

    def test_not_compressed_when_not_smaller(self) -> None:
        """Tiny payloads that would grow under gzip are sent plain."""
        rules = CompressionRules()
        rules.enable(".*", "all")
        request = _request()
        body = prepare_upload({"a": 1}, request, compression_rules=rules)
        assert body == b'{"a":1}'
        assert "Content-Encoding" not in request.headers

    def test_compression_failure_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A failing codec degrades to the uncompressed body."""

        def boom(self: UploadCompression, data: bytes) -> bytes:
            raise OSError("codec exploded")

        monkeypatch.setattr(UploadCompression, "compress", boom)
        rules = CompressionRules()
        rules.enable(".*", "all")
        request = _request()
        body = prepare_upload(_big_item(), request, compression_rules=rules)
        assert json.loads(body)["name"] == "widget"
        assert "Content-Encoding" not in request.headers

    def test_unencodable_item(self) -> None:
        """Values the JSON codec rejects raise UnsuitableRequest."""
        request = _request()
        with pytest.raises(UnsuitableRequest, match="Cannot JSON-encode"):
            prepare_upload(object(), request, compression_rules=CompressionRules())


class TestPrepareDataUpload:
    """Tests for raw binary body preparation."""

    def test_octet_stream(self) -> None:
        """Binary uploads are tagged octet-stream and passed through unchanged."""
        request = _request()
        payload = bytes(range(256))
        assert prepare_data_upload(payload, request) is payload
        assert request.headers["Content-Type"] == "application/octet-stream"
        assert "Content-Encoding" not in request.headers
