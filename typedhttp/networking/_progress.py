# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Download progress reporting.

Observers are plain callables receiving a :class:`Progress`.  They are
invoked on the event-loop task that performs the download, synchronously
between received chunks, so they must not block.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

__all__ = [
    "Progress",
    "ProgressObserver",
]


@dataclass(frozen=True)
class Progress:
    """Snapshot of a download's progress.

    Attributes:
        completed: Bytes received so far (as transferred on the wire).
        total: Expected byte count, or ``None`` when the server did not
            announce one.

    """

    completed: int
    total: int | None

    @property
    def fraction(self) -> float:
        """Completed fraction in ``[0.0, 1.0]``; ``0.0`` while the total is unknown."""
        if not self.total:
            return 1.0 if self.total == 0 else 0.0
        return min(1.0, self.completed / self.total)

    @property
    def finished(self) -> bool:
        """Whether every expected byte has arrived."""
        return self.total is not None and self.completed >= self.total


ProgressObserver = Callable[[Progress], None]
"""Callback type for download progress notifications."""


class _ProgressTracker:
    """Feeds an observer monotonically non-decreasing progress snapshots."""

    __slots__ = ("_last", "_observer", "_total")

    def __init__(self, observer: ProgressObserver | None, total: int | None) -> None:
        self._observer = observer
        self._total = total
        self._last: Progress | None = None

    def update(self, completed: int) -> None:
        """Report *completed* bytes, skipping regressions and repeats."""
        if self._observer is None:
            return
        progress = Progress(completed, self._total)
        last = self._last
        if last is not None and (progress.completed <= last.completed or progress.fraction < last.fraction):
            return
        self._last = progress
        self._observer(progress)

    def finish(self, completed: int) -> None:
        """Report full completion unless the last snapshot already did."""
        if self._observer is None:
            return
        last = self._last
        if last is not None and last.finished and last.completed == completed:
            return
        final = Progress(completed, completed)
        self._last = final
        self._observer(final)
