# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Favicon discovery for a host.

:class:`FaviconFetcher` fetches a site's root page, scans its ``<link>``
tags for an icon and falls back to ``/favicon.ico``.  ``rel`` values are
tried in this order: ``icon``, ``shortcut icon``, ``apple-touch-icon``,
``apple-touch-icon-precomposed``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import urlsplit

import httpx

from typedhttp.errors import NetworkingError, Unsuccessful
from typedhttp.networking import Networking

__all__ = [
    "FaviconError",
    "FaviconFetcher",
    "FaviconInfo",
    "base_url_for",
    "extract_attribute",
    "parse_favicon",
]

_logger = logging.getLogger("typedhttp.favicon")

_DEFAULT_PORTS = {"http": 80, "https": 443}
_HTTPS_PORTS = frozenset({443, 8443, 9443})

_IPV6_RE = re.compile(r"[0-9a-fA-F:]+")
_INVALID_HOST_RE = re.compile(r"[\s/?#@\\]")

_LINK_PATTERNS = tuple(
    re.compile(rf"""<link[^>]*rel\s*=\s*["']{rel}["'][^>]*>""", re.IGNORECASE | re.DOTALL)
    for rel in (r"icon", r"shortcut\s+icon", r"apple-touch-icon", r"apple-touch-icon-precomposed")
)


class FaviconError(NetworkingError):
    """The host is invalid or its root page cannot be read."""


@dataclass(frozen=True)
class FaviconInfo:
    """Location and metadata of a site's icon.

    Attributes:
        url: Absolute icon URL.
        type: The link's ``type`` attribute, if present.
        sizes: The link's ``sizes`` attribute, if present.

    """

    url: str
    type: str | None = None
    sizes: str | None = None


# ---------------------------------------------------------------------------
# Base URL normalization
# ---------------------------------------------------------------------------


def _bracket(host: str) -> str:
    return f"[{host}]" if ":" in host and not host.startswith("[") else host


def _render(scheme: str, host: str, port: int | None, original: str) -> str:
    if not host or _INVALID_HOST_RE.search(host):
        raise FaviconError(f"Invalid host: {original!r}")
    netloc = _bracket(host)
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{netloc}:{port}"
    url = f"{scheme}://{netloc}"
    try:
        httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise FaviconError(f"Invalid host: {original!r}") from exc
    return url


def _split_host_port(text: str, original: str) -> tuple[str, int | None]:
    """Split ``host[:port]``, recognising bare and bracketed IPv6 literals."""
    try:
        if text.startswith("["):
            parts = urlsplit(f"//{text}")
            return parts.hostname or "", parts.port
        if text.count(":") >= 2 and _IPV6_RE.fullmatch(text):
            return text, None
        host, sep, port_text = text.rpartition(":")
        if sep and port_text.isdigit():
            port = int(port_text)
            if not 0 < port < 65536:
                raise ValueError(f"Port out of range 0-65535: {port}")
            return host, port
    except ValueError as exc:
        raise FaviconError(f"Invalid host: {original!r}") from exc
    return text, None


def base_url_for(host: str, port: int = 80) -> str:
    """Normalize *host* and *port* into a base URL without a trailing slash.

    - A scheme in *host* is kept; its explicit port wins over *port*, and a
      *port* of 80 means "the scheme default".
    - Otherwise the scheme is ``https`` for ports 443, 8443 and 9443 and
      ``http`` for everything else; a port given in *host* wins over *port*.
    - Default ports are omitted and bare IPv6 literals are bracketed.

    Raises:
        FaviconError: If *host* cannot form a valid URL.

    """
    trimmed = host.strip()
    if "://" in trimmed:
        try:
            existing = urlsplit(trimmed)
            existing_port = existing.port
        except ValueError as exc:
            raise FaviconError(f"Invalid host: {host!r}") from exc
        scheme = existing.scheme.lower()
        if not scheme or not existing.hostname:
            raise FaviconError(f"Invalid host: {host!r}")
        if existing_port is not None:
            effective = existing_port
        elif port != 80:
            effective = port
        else:
            effective = None
        return _render(scheme, existing.hostname, effective, host)

    sanitized, host_port = _split_host_port(trimmed, host)
    effective = host_port if host_port is not None else port
    scheme = "https" if effective in _HTTPS_PORTS else "http"
    return _render(scheme, sanitized, effective, host)


# ---------------------------------------------------------------------------
# HTML scanning
# ---------------------------------------------------------------------------


def extract_attribute(attribute: str, tag: str) -> str | None:
    """Return the quoted value of *attribute* in *tag* (case-insensitive)."""
    match = re.search(rf"""\b{re.escape(attribute)}\s*=\s*["']([^"']*)["']""", tag, re.IGNORECASE)
    return match.group(1) if match else None


def parse_favicon(html: str, base_url: str) -> FaviconInfo | None:
    """Return the highest-priority icon link in *html*, resolved against *base_url*."""
    for pattern in _LINK_PATTERNS:
        match = pattern.search(html)
        if match is None:
            continue
        tag = match.group(0)
        href = extract_attribute("href", tag)
        if href is None:
            continue
        url = httpx.URL(f"{base_url}/").join(href)
        return FaviconInfo(str(url), extract_attribute("type", tag), extract_attribute("sizes", tag))
    return None


class FaviconFetcher:
    """Locates the icon of a web site using a :class:`Networking` facade."""

    __slots__ = ("_networking",)

    def __init__(self, networking: Networking) -> None:
        """Use *networking* for all page fetches."""
        self._networking = networking

    async def find_favicon_url(self, host: str, port: int = 80) -> FaviconInfo:
        """Find the icon URL for *host*.

        An unsuccessful root page is treated like a page without icon links.

        Args:
            host: Host name, ``host:port``, IPv6 literal or URL with scheme.
            port: Port used when *host* does not carry one.

        Returns:
            The icon location; ``<base>/favicon.ico`` when the page names none.

        Raises:
            FaviconError: If *host* is invalid or the page is not UTF-8.

        """
        base_url = base_url_for(host, port)
        try:
            data = await self._networking.get_raw(f"{base_url}/")
        except Unsuccessful as exc:
            _logger.debug("Root page of %s unavailable (%s), using /favicon.ico", base_url, exc.status)
            data = b""
        try:
            html = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FaviconError(f"Could not decode HTML from {base_url} as UTF-8") from exc

        info = parse_favicon(html, base_url)
        if info is not None:
            return info
        return FaviconInfo(f"{base_url}/favicon.ico")
