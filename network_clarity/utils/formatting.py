"""Display formatting helpers for request lists and detail views."""

from __future__ import annotations

import math
from types import MappingProxyType
from urllib import parse

_SIZE_UNITS = ("B", "KB", "MB", "GB")

_REQUEST_TYPE_NAMES = MappingProxyType({
    "main_frame": "Document",
    "sub_frame": "Frame",
    "stylesheet": "Stylesheet",
    "script": "Script",
    "image": "Image",
    "font": "Font",
    "object": "Object",
    "xmlhttprequest": "API Call",
    "ping": "Ping",
    "csp_report": "CSP Report",
    "media": "Media",
    "websocket": "WebSocket",
    "other": "Other",
})


def format_bytes(size: int) -> str:
    """Format a byte count as a short human-readable string (``1.5 KB``)."""
    if size <= 0:
        return "0 B"
    exponent = 0
    scaled = float(size)
    while scaled >= 1024 and exponent < len(_SIZE_UNITS) - 1:
        scaled /= 1024
        exponent += 1
    return f"{round(scaled, 1):g} {_SIZE_UNITS[exponent]}"


def format_duration(ms: float) -> str:
    """Format a duration in milliseconds (``250 ms``, ``1.50 s``)."""
    if ms < 1000:
        return f"{math.floor(ms + 0.5)} ms"
    return f"{ms / 1000:.2f} s"


def truncate_url(url: str, max_length: int = 60) -> str:
    """Shorten a URL for display, keeping host plus the start and end of the path.

    Args:
        url: The full request URL.
        max_length: Target maximum length.

    Returns:
        The URL unchanged when short enough, otherwise
        ``host/path-start...path-end``.  Strings that do not
        parse as absolute URLs are cut with a trailing ellipsis.
    """
    if len(url) <= max_length:
        return url

    try:
        parsed = parse.urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        hostname = None

    if not hostname:
        return f"{url[: max_length - 3]}..."

    path = parsed.path + (f"?{parsed.query}" if parsed.query else "")
    if len(path) > max_length - 20:
        half = (max_length - 23) // 2
        return f"{hostname}{path[:half]}...{path[len(path) - half:]}"
    return f"{hostname}{path}"


def get_request_type_name(resource_type: str) -> str:
    """Return the display name for a resource type, or the type itself."""
    return _REQUEST_TYPE_NAMES.get(resource_type, resource_type)
