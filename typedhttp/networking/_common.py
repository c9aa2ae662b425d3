# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Configuration and shared hooks for the networking facade.

The mock table and the compression rules are ordinary objects owned by a
:class:`NetworkingConfig`.  Build one at the composition root and hand it to
every :class:`~typedhttp.networking.Networking` that should share them;
tests build their own and never leak state into each other.
"""

from __future__ import annotations

import contextlib
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Final, Protocol, runtime_checkable

from typedhttp.constants import MimeType

from ._compression import CompressionRules, UploadCompression
from ._interpret import DEFAULT_DETAIL_MIME_TYPES
from ._mocking import MockRegistry

__all__ = [
    "BusynessObserver",
    "NetworkingConfig",
    "default_config",
]


@runtime_checkable
class BusynessObserver(Protocol):
    """Hook notified around every network operation (e.g. for activity spinners).

    ``enter_busy`` and ``leave_busy`` are each called exactly once per
    operation, including operations that fail or are cancelled.
    Implementations must be thread-safe if one observer is shared between
    event loops.
    """

    def enter_busy(self) -> None:
        """A network operation started."""
        ...

    def leave_busy(self) -> None:
        """A network operation finished."""
        ...


@dataclass(frozen=True)
class NetworkingConfig:
    """Settings and shared registries for :class:`~typedhttp.networking.Networking`.

    Attributes:
        mocks: Canned responses consulted before any transport call.
        compression_rules: URL patterns eligible for compressed uploads.
        compression: Codec used for eligible uploads.
        busyness_observer: Optional activity hook.
        detail_mime_types: MIME types whose error bodies are parsed into
            :class:`~typedhttp.errors.UnsuccessfulWithDetails`.
        timeout: Transport timeout in seconds for clients the facade
            creates itself; ``None`` disables timeouts.
        follow_redirects: Whether self-created clients follow redirects.
        default_headers: Headers sent with every request from self-created
            clients.

    Raises:
        ValueError: If *timeout* is negative.

    """

    mocks: MockRegistry = field(default_factory=MockRegistry)
    compression_rules: CompressionRules = field(default_factory=CompressionRules)
    compression: UploadCompression = field(default_factory=UploadCompression)
    busyness_observer: BusynessObserver | None = None
    detail_mime_types: frozenset[MimeType] = DEFAULT_DETAIL_MIME_TYPES
    timeout: float | None = 30.0
    follow_redirects: bool = True
    default_headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.timeout is not None and self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")

    @contextlib.contextmanager
    def busy(self) -> Iterator[None]:
        """Bracket a network operation with the busyness observer, if any."""
        observer = self.busyness_observer
        if observer is None:
            yield
            return
        observer.enter_busy()
        try:
            yield
        finally:
            observer.leave_busy()


_default_lock: Final = threading.Lock()
_default: NetworkingConfig | None = None


def default_config() -> NetworkingConfig:
    """Return the process-wide default configuration, creating it on first use.

    Used by the one-shot functions in :mod:`typedhttp.api`.
    """
    global _default
    with _default_lock:
        if _default is None:
            _default = NetworkingConfig()
        return _default
