# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""HTTP status classification.

``Status`` is an immutable ``int`` subclass, so it compares equal to plain
integers and to :class:`http.HTTPStatus` members (which serve as the named
constants)::

    >>> Status(201) == HTTPStatus.CREATED
    True
    >>> Status(404).response_type
    <ResponseType.CLIENT_ERROR: 4>

Codes outside ``100..599`` are representable but classify as
``ResponseType.UNKNOWN``.
"""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus

__all__ = [
    "ResponseType",
    "Status",
    "classify",
    "is_success",
]


class ResponseType(Enum):
    """Class of an HTTP status code, derived from its hundreds digit."""

    UNKNOWN = 0
    INFORMATIONAL = 1
    SUCCESS = 2
    REDIRECTION = 3
    CLIENT_ERROR = 4
    SERVER_ERROR = 5


def classify(code: int) -> ResponseType:
    """Bucket *code* by ``code // 100``; anything outside 100..599 is ``UNKNOWN``."""
    if 100 <= code <= 599:
        return ResponseType(code // 100)
    return ResponseType.UNKNOWN


def is_success(code: int) -> bool:
    """Return whether *code* is a 2xx status."""
    return classify(code) is ResponseType.SUCCESS


class Status(int):
    """An HTTP status code with its derived classification."""

    __slots__ = ()

    @property
    def response_type(self) -> ResponseType:
        """Classification of this status."""
        return classify(self)

    @property
    def is_success(self) -> bool:
        """Whether this is a 2xx status."""
        return self.response_type is ResponseType.SUCCESS

    @property
    def named(self) -> HTTPStatus | None:
        """The matching ``HTTPStatus`` constant, or ``None`` for unregistered codes."""
        try:
            return HTTPStatus(int(self))
        except ValueError:
            return None

    @property
    def phrase(self) -> str:
        """Standard reason phrase, or an empty string."""
        named = self.named
        return named.phrase if named is not None else ""

    def __repr__(self) -> str:
        """Return ``Status(404)``."""
        return f"Status({int(self)})"

    def __str__(self) -> str:
        """Return ``404 Not Found`` (or just the code when unregistered)."""
        return f"{int(self)} {self.phrase}".rstrip()
