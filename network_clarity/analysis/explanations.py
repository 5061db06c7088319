"""
Plain-language explanations for status codes, resource types and headers.

Lookup tables aimed at non-technical readers.  Every lookup has a
fallback, so the UI always has something to show.
"""

from __future__ import annotations

from types import MappingProxyType

from network_clarity.models import explanations


def _status(summary: str, detail: str, *, error: bool = False, warning: bool = False) -> explanations.StatusExplanation:
    return explanations.StatusExplanation(summary=summary, detail=detail, is_error=error, is_warning=warning)


# ============================================================================
# HTTP status codes
# ============================================================================

_REDIRECT_DETAIL = "This page is temporarily at a different URL. Your browser automatically followed the redirect."
_MOVED_DETAIL = "This page has permanently moved to a new URL. Your browser automatically followed the redirect."

HTTP_STATUS_EXPLANATIONS: MappingProxyType[int, explanations.StatusExplanation] = MappingProxyType({
    # 1xx Informational
    100: _status("Continue", "The server received the request headers and the client should proceed to send the request body."),
    101: _status("Switching Protocols", "The server is switching to a different protocol as requested by the client."),
    # 2xx Success
    200: _status("Success", "The request was successful. The data you see on the page came from this request."),
    201: _status("Created", "The request was successful and a new resource was created (e.g., a new account or post)."),
    202: _status("Accepted", "The request was accepted but is still being processed in the background."),
    204: _status("No Content", "The request was successful but there's no data to return (common for delete operations)."),
    206: _status("Partial Content", "Only part of the resource was returned (used for streaming videos or large file downloads)."),
    # 3xx Redirection
    301: _status("Moved Permanently", _MOVED_DETAIL, warning=True),
    302: _status("Temporary Redirect", _REDIRECT_DETAIL, warning=True),
    303: _status("See Other", "The server is redirecting you to a different page (often after form submission).", warning=True),
    304: _status("Not Modified", "The resource hasn't changed since last visit. Your browser used a cached version (faster loading!)."),
    307: _status("Temporary Redirect", _REDIRECT_DETAIL, warning=True),
    308: _status("Permanent Redirect", _MOVED_DETAIL, warning=True),
    # 4xx Client errors
    400: _status("Bad Request", "The server couldn't understand the request. This usually indicates a bug in the website.", error=True),
    401: _status("Unauthorized", "You need to log in to access this resource. Your credentials may have expired.", error=True),
    403: _status("Forbidden", "You don't have permission to access this resource, even if you're logged in.", error=True),
    404: _status("Not Found", "The requested page or file doesn't exist. It may have been moved or deleted.", error=True),
    405: _status("Method Not Allowed", "The server doesn't support this type of request for this resource.", error=True),
    408: _status("Request Timeout", "The request took too long and the server gave up waiting.", error=True),
    409: _status("Conflict", "The request conflicts with the current state (e.g., trying to create a duplicate).", error=True),
    410: _status("Gone", "This resource has been permanently deleted and won't be back.", error=True),
    413: _status("Payload Too Large", "The file or data you're trying to upload is too large for the server to accept.", error=True),
    414: _status("URL Too Long", "The URL is too long for the server to process.", error=True),
    415: _status("Unsupported Media Type", "The server doesn't support the file format you're trying to upload.", error=True),
    422: _status("Validation Error", "The server understood the request but the data provided was invalid.", error=True),
    429: _status("Too Many Requests", "You've made too many requests too quickly. Wait a moment and try again.", error=True),
    451: _status("Unavailable For Legal Reasons", "This content is blocked due to legal restrictions (e.g., copyright or censorship).", error=True),
    # 5xx Server errors
    500: _status("Server Error", "Something went wrong on the server. This is not your fault - the website has a problem.", error=True),
    501: _status("Not Implemented", "The server doesn't support this feature yet.", error=True),
    502: _status("Bad Gateway", "The server received an invalid response from another server it depends on.", error=True),
    503: _status("Service Unavailable", "The server is temporarily overloaded or down for maintenance. Try again later.", error=True),
    504: _status("Gateway Timeout", "The server took too long to respond. The website might be experiencing high traffic.", error=True),
})

# Short reason phrases stored on records as ``status_text``.
STATUS_TEXTS: MappingProxyType[int, str] = MappingProxyType({
    200: "OK",
    201: "Created",
    204: "No Content",
    301: "Moved Permanently",
    302: "Found",
    304: "Not Modified",
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
})


def get_status_explanation(status: int) -> explanations.StatusExplanation:
    """Explain *status*, deriving error/warning flags for unlisted codes."""
    known = HTTP_STATUS_EXPLANATIONS.get(status)
    if known is not None:
        return known
    return _status(
        f"Status {status}",
        "Unknown status code.",
        error=status >= 400,
        warning=300 <= status < 400,
    )


def get_status_text(status: int) -> str:
    """Reason phrase for *status*, or ``""`` when not listed."""
    return STATUS_TEXTS.get(status, "")


# ============================================================================
# Resource types
# ============================================================================

_API_CALL = "Data fetched in the background (like loading new posts without refreshing)."

REQUEST_TYPE_EXPLANATIONS: MappingProxyType[str, explanations.TypeExplanation] = MappingProxyType({
    "document": explanations.TypeExplanation(name="Web Page", description="The main HTML page you're viewing."),
    "main_frame": explanations.TypeExplanation(name="Web Page", description="The main HTML page you're viewing."),
    "sub_frame": explanations.TypeExplanation(name="Embedded Page", description="A page embedded inside this one (ads, videos, widgets)."),
    "stylesheet": explanations.TypeExplanation(
        name="Styles", description="CSS files that control how the page looks (colors, layout, fonts)."
    ),
    "script": explanations.TypeExplanation(
        name="Script", description="JavaScript code that makes the page interactive (buttons, forms, animations)."
    ),
    "image": explanations.TypeExplanation(name="Image", description="Pictures and graphics displayed on the page."),
    "font": explanations.TypeExplanation(name="Font", description="Custom fonts used to display text on the page."),
    "xhr": explanations.TypeExplanation(name="API Call", description=_API_CALL),
    "xmlhttprequest": explanations.TypeExplanation(name="API Call", description=_API_CALL),
    "fetch": explanations.TypeExplanation(name="API Call", description="Data fetched in the background using modern browser APIs."),
    "media": explanations.TypeExplanation(name="Media", description="Audio or video content like music players or embedded videos."),
    "websocket": explanations.TypeExplanation(
        name="Live Connection", description="Real-time data connection (used for chat, live updates, gaming)."
    ),
    "manifest": explanations.TypeExplanation(name="App Manifest", description="Configuration file for progressive web apps (PWA)."),
    "ping": explanations.TypeExplanation(name="Analytics Ping", description="Small request to track page visits or clicks."),
    "beacon": explanations.TypeExplanation(name="Analytics Beacon", description="Background request to send analytics data."),
    "prefetch": explanations.TypeExplanation(
        name="Prefetch", description="Resource loaded ahead of time to speed up future page loads."
    ),
    "other": explanations.TypeExplanation(name="Other", description="Miscellaneous resource type."),
})


def get_type_explanation(resource_type: str) -> explanations.TypeExplanation:
    """Explain a resource type, falling back to ``other``."""
    return REQUEST_TYPE_EXPLANATIONS.get(resource_type.lower(), REQUEST_TYPE_EXPLANATIONS["other"])


# ============================================================================
# Headers
# ============================================================================


def _header(name: str, description: str, category: explanations.HeaderCategory) -> explanations.HeaderExplanation:
    return explanations.HeaderExplanation(name=name, description=description, category=category)


COMMON_HEADERS: MappingProxyType[str, explanations.HeaderExplanation] = MappingProxyType({
    # Request headers
    "accept": _header("Accept", "Tells the server what type of content the browser can handle.", "content"),
    "accept-encoding": _header(
        "Accept-Encoding",
        "Tells the server what compression methods the browser supports (helps reduce data usage).",
        "content",
    ),
    "accept-language": _header("Accept-Language", "Tells the server your preferred languages for content.", "content"),
    "authorization": _header(
        "Authorization", "Contains your login credentials or access token to prove who you are.", "auth"
    ),
    "cookie": _header(
        "Cookie",
        "Small pieces of data the website previously stored in your browser (for login state, preferences, tracking).",
        "tracking",
    ),
    "user-agent": _header("User Agent", "Identifies your browser and device to the server.", "other"),
    "referer": _header(
        "Referer", "The page you came from. Websites use this for analytics and preventing hotlinking.", "tracking"
    ),
    "origin": _header("Origin", "The website making this request. Used for security checks.", "security"),
    # Response headers
    "content-type": _header("Content-Type", "The format of the data being sent (HTML, JSON, image, etc.).", "content"),
    "content-length": _header("Content-Length", "The size of the response data in bytes.", "content"),
    "content-encoding": _header(
        "Content-Encoding", "How the data is compressed (gzip, br). Reduces download size.", "content"
    ),
    "cache-control": _header(
        "Cache-Control", "Instructions for how long your browser should keep a copy of this resource.", "caching"
    ),
    "expires": _header("Expires", "When this cached content becomes outdated.", "caching"),
    "etag": _header("ETag", "A version identifier for the resource. Helps browser know when to re-download.", "caching"),
    "last-modified": _header("Last-Modified", "When this resource was last changed on the server.", "caching"),
    "set-cookie": _header(
        "Set-Cookie", "The server is storing data in your browser (for login, preferences, or tracking).", "tracking"
    ),
    "access-control-allow-origin": _header(
        "CORS Allow Origin", "Which websites are allowed to access this resource. A security feature.", "security"
    ),
    "strict-transport-security": _header(
        "HSTS", "Forces your browser to always use secure HTTPS connections to this site.", "security"
    ),
    "content-security-policy": _header(
        "Content Security Policy",
        "Security rules that limit what resources the page can load (prevents attacks).",
        "security",
    ),
    "x-frame-options": _header(
        "Frame Options",
        "Controls whether this page can be embedded in other websites (prevents clickjacking).",
        "security",
    ),
    "x-content-type-options": _header(
        "Content Type Options", "Prevents browsers from guessing the content type (security feature).", "security"
    ),
    "x-xss-protection": _header(
        "XSS Protection", "Browser-level protection against cross-site scripting attacks.", "security"
    ),
    "location": _header("Location", "The URL to redirect to (used with 3xx status codes).", "other"),
    "server": _header("Server", "The software running on the web server.", "other"),
})

HEADER_CATEGORY_LABELS: MappingProxyType[str, str] = MappingProxyType({
    "security": "Security",
    "caching": "Caching",
    "content": "Content",
    "auth": "Authentication",
    "tracking": "Tracking/Cookies",
    "other": "Other",
})


def get_header_explanation(header_name: str) -> explanations.HeaderExplanation:
    """Explain a header by name (case-insensitive).

    Unlisted headers get a generic explanation in the ``other``
    category, keeping the caller's spelling of the name.
    """
    known = COMMON_HEADERS.get(header_name.lower())
    if known is not None:
        return known
    return _header(header_name, "A header not covered by the built-in descriptions.", "other")
