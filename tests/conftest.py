"""Shared test fixtures for typedhttp tests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import pytest

from typedhttp.networking import Networking, NetworkingConfig

Handler = Callable[[httpx.Request], httpx.Response]
"""Signature of an ``httpx.MockTransport`` handler."""


@dataclass
class RecordingObserver:
    """Busyness observer that logs enter/leave calls in order."""

    events: list[str] = field(default_factory=list)

    @property
    def entered(self) -> int:
        """Number of ``enter_busy`` calls."""
        return self.events.count("enter")

    @property
    def left(self) -> int:
        """Number of ``leave_busy`` calls."""
        return self.events.count("leave")

    def enter_busy(self) -> None:
        """Record an enter."""
        self.events.append("enter")

    def leave_busy(self) -> None:
        """Record a leave."""
        self.events.append("leave")


@dataclass
class RecordingTransport:
    """Wraps a handler and keeps every request it saw."""

    handler: Handler
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        """Record *request* and delegate to the handler."""
        self.requests.append(request)
        return self.handler(request)


NetworkingFactory = Callable[..., tuple[Networking, RecordingTransport]]
"""Type alias for the ``make_networking`` fixture return type."""


@pytest.fixture
def config() -> NetworkingConfig:
    """Fresh configuration with empty registries."""
    return NetworkingConfig()


@pytest.fixture
def observer() -> RecordingObserver:
    """A busyness observer recording its calls."""
    return RecordingObserver()


@pytest.fixture
def make_networking(config: NetworkingConfig) -> NetworkingFactory:
    """Factory building a ``Networking`` backed by ``httpx.MockTransport``.

    The factory returns ``(networking, transport)``; ``transport.requests``
    lists every request that reached the fake server.  Pass *config* to
    override the fixture configuration.
    """

    def factory(
        handler: Handler,
        *,
        config: NetworkingConfig = config,
    ) -> tuple[Networking, RecordingTransport]:
        transport = RecordingTransport(handler)
        client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
        return Networking(config, client=client, close_client=True), transport

    return factory
