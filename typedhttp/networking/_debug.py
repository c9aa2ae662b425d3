"""Debug logging infrastructure for wire-level diagnostics.

Provides logger instances under the ``typedhttp.wire.*`` hierarchy and
formatting helpers for requests and responses.  Enabling
``logging.getLogger("typedhttp.wire").setLevel(logging.DEBUG)`` shows every
exchange that goes over the wire.

All formatting helpers return ``str`` and never log directly.
They are designed to be called inside ``isEnabledFor`` guards so
there is zero overhead when debug logging is disabled.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

# ---------------------------------------------------------------------------
# Logger hierarchy: typedhttp.wire.*
# ---------------------------------------------------------------------------

wire_request_logger = logging.getLogger("typedhttp.wire.request")
"""Outgoing requests (method, URL, headers, body size)."""

wire_response_logger = logging.getLogger("typedhttp.wire.response")
"""Incoming responses (status, headers, body preview)."""

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

_MAX_VALUE_LEN = 80
"""Maximum length for individual header values and body previews."""

_REDACTED_HEADERS = frozenset({"authorization", "proxy-authorization", "cookie", "set-cookie"})


def fmt_headers(headers: Iterable[tuple[str, str]]) -> str:
    """Format header pairs compactly, redacting credentials.

    Returns:
        ``"{Content-Type='application/json', Authorization=<redacted>}"``

    """
    parts: list[str] = []
    for key, value in headers:
        if key.lower() in _REDACTED_HEADERS:
            parts.append(f"{key}=<redacted>")
            continue
        if len(value) > _MAX_VALUE_LEN:
            value = value[:_MAX_VALUE_LEN] + "..."
        parts.append(f"{key}={value!r}")
    return "{" + ", ".join(parts) + "}"


def fmt_body(data: bytes) -> str:
    """Format a body as its size plus a short decoded preview.

    Returns:
        ``"17 bytes: '{\\"id\\": 1}'"`` or ``"0 bytes"``.

    """
    if not data:
        return "0 bytes"
    preview = data[:_MAX_VALUE_LEN].decode(errors="replace")
    suffix = "..." if len(data) > _MAX_VALUE_LEN else ""
    return f"{len(data)} bytes: {preview!r}{suffix}"
