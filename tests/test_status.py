"""Tests for status classification in typedhttp.status."""

from __future__ import annotations

from http import HTTPStatus

import pytest

from typedhttp.status import ResponseType, Status, classify, is_success

# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


class TestClassify:
    """Tests for bucketing codes by their hundreds digit."""

    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            (100, ResponseType.INFORMATIONAL),
            (199, ResponseType.INFORMATIONAL),
            (200, ResponseType.SUCCESS),
            (204, ResponseType.SUCCESS),
            (299, ResponseType.SUCCESS),
            (301, ResponseType.REDIRECTION),
            (404, ResponseType.CLIENT_ERROR),
            (418, ResponseType.CLIENT_ERROR),
            (500, ResponseType.SERVER_ERROR),
            (599, ResponseType.SERVER_ERROR),
        ],
    )
    def test_buckets(self, code: int, expected: ResponseType) -> None:
        """Each code lands in the bucket of its hundreds digit."""
        assert classify(code) is expected

    @pytest.mark.parametrize("code", [-1, 0, 99, 600, 999])
    def test_out_of_range_is_unknown(self, code: int) -> None:
        """Codes outside 100..599 are UNKNOWN rather than an error."""
        assert classify(code) is ResponseType.UNKNOWN
        assert not is_success(code)

    def test_only_2xx_is_success(self) -> None:
        """is_success is true exactly for the 2xx range."""
        assert [c for c in range(0, 700) if is_success(c)] == list(range(200, 300))


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


class TestStatus:
    """Tests for the Status int subclass."""

    def test_compares_with_named_constants(self) -> None:
        """Status compares equal to ints and HTTPStatus members."""
        assert Status(201) == HTTPStatus.CREATED
        assert Status(201) == 201
        assert Status(404) != HTTPStatus.OK

    def test_properties(self) -> None:
        """Derived properties reflect the classification."""
        status = Status(404)
        assert status.response_type is ResponseType.CLIENT_ERROR
        assert not status.is_success
        assert status.named is HTTPStatus.NOT_FOUND
        assert status.phrase == "Not Found"

    def test_unregistered_code(self) -> None:
        """Codes without an HTTPStatus member still work."""
        status = Status(299)
        assert status.is_success
        assert status.named is None
        assert status.phrase == ""
        assert str(status) == "299"

    def test_unknown_code_is_representable(self) -> None:
        """Out-of-range codes construct fine and classify as UNKNOWN."""
        status = Status(999)
        assert status.response_type is ResponseType.UNKNOWN
        assert not status.is_success

    def test_repr_and_str(self) -> None:
        """repr shows the constructor; str shows code and phrase."""
        assert repr(Status(404)) == "Status(404)"
        assert str(Status(404)) == "404 Not Found"

    def test_hashable_as_int(self) -> None:
        """Status hashes like its int value."""
        assert {Status(200): "ok"}[200] == "ok"
