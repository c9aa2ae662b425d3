# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""In-process test harness for the networking facade.

``make_asgi_networking`` wires a :class:`~typedhttp.networking.Networking`
to an ASGI application (e.g. ``falcon.asgi.App``) through
``httpx.ASGITransport``; no real HTTP server or socket is needed.
"""

from __future__ import annotations

from typing import Any

import httpx

from ._client import Networking
from ._common import NetworkingConfig

__all__ = [
    "make_asgi_networking",
]


def make_asgi_networking(
    app: Any,
    *,
    base_url: str = "http://testserver",
    config: NetworkingConfig | None = None,
) -> Networking:
    """Create a :class:`Networking` whose transport calls *app* directly.

    Args:
        app: An ASGI application.
        base_url: Base URL that relative request paths are resolved against.
        config: Registries and settings; a fresh :class:`NetworkingConfig`
            when omitted so tests never share mocks or compression rules.

    Returns:
        A facade that owns (and closes) its ASGI-backed client.

    """
    config = config if config is not None else NetworkingConfig()
    client = httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url=base_url,
        timeout=config.timeout,
        follow_redirects=config.follow_redirects,
        headers=dict(config.default_headers),
    )
    return Networking(config, client=client, close_client=True)
