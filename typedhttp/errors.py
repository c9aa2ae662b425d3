# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Error taxonomy for the networking layer.

Every failure detected by typedhttp itself is raised as exactly one
:class:`NetworkingError` subclass:

- :class:`UnsuitableRequest`: the outgoing request cannot be built.
- :class:`UnexpectedResponse`: the transport produced something that is not
  an HTTP response.
- :class:`UnexpectedMimeType`: the response MIME type cannot be decoded into
  the requested target.
- :class:`Unsuccessful`: non-2xx status without usable details.
- :class:`UnsuccessfulWithDetails`: non-2xx status with a JSON object body.
- :class:`DecodingError`: a JSON body failed to decode into the target.

Transport errors (``httpx.HTTPError``) and filesystem errors are not part of
the taxonomy and propagate unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from typedhttp.status import Status

__all__ = [
    "DecodingError",
    "NetworkingError",
    "UnexpectedMimeType",
    "UnexpectedResponse",
    "UnsuccessfulWithDetails",
    "UnsuitableRequest",
    "Unsuccessful",
]


class NetworkingError(Exception):
    """Base class for all errors raised by typedhttp."""


class UnsuitableRequest(NetworkingError):
    """The outgoing request is malformed or cannot carry the given payload."""

    def __init__(self, reason: str) -> None:
        """Initialize with a human-readable reason."""
        self.reason = reason
        super().__init__(f"Unsuitable request: {reason}")


class UnexpectedResponse(NetworkingError):
    """The transport returned something other than a well-formed HTTP response."""

    def __init__(self, reason: str) -> None:
        """Initialize with a human-readable reason."""
        self.reason = reason
        super().__init__(f"Unexpected response: {reason}")


class UnexpectedMimeType(NetworkingError):
    """The response MIME type is not decodable into the requested target."""

    def __init__(self, mime_type: str) -> None:
        """Initialize with the raw MIME type string from the response."""
        self.mime_type = mime_type
        super().__init__(f"Unexpected MIME type: {mime_type}")


class Unsuccessful(NetworkingError):
    """The server answered with a non-2xx status."""

    def __init__(self, status: int) -> None:
        """Initialize with the response status."""
        self.status = Status(status)
        super().__init__(f"Unsuccessful: HTTP {self.status}")


class UnsuccessfulWithDetails(Unsuccessful):
    """Non-2xx status whose body parsed as a JSON object.

    Attributes:
        status: The response status.
        details: The parsed error body.

    """

    def __init__(self, status: int, details: Mapping[str, Any]) -> None:
        """Initialize with the response status and the parsed details object."""
        super().__init__(status)
        self.details: dict[str, Any] = dict(details)
        self.args = (f"Unsuccessful: HTTP {self.status} {self.details!r}",)


class DecodingError(NetworkingError):
    """A JSON response body could not be decoded into the requested type.

    The underlying exception is available as :attr:`cause` and is also
    chained as ``__cause__``.
    """

    def __init__(self, cause: BaseException) -> None:
        """Initialize with the decoder's exception."""
        self.cause = cause
        super().__init__(f"Decoding error: {cause}")
