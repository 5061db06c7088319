"""
Cookie parsing and risk classification.

Explains common cookies in plain English.  A cookie name is looked up
in ``KNOWN_COOKIES`` (exact, then substring), then matched against
keyword families, and finally reported as unknown.  Set-Cookie
attributes (Secure, HttpOnly, SameSite) are surfaced for display and
never change the risk tier.
"""

from __future__ import annotations

import collections
from types import MappingProxyType

from network_clarity.models import cookies

# ============================================================================
# Known cookies
# ============================================================================


def _explain(name: str, category: cookies.CookieCategory, description: str, risk: cookies.CookieRisk) -> cookies.CookieExplanation:
    return cookies.CookieExplanation(name=name, category=category, description=description, risk=risk)


# Insertion order matters: substring lookup returns the first key found.
KNOWN_COOKIES: MappingProxyType[str, cookies.CookieExplanation] = MappingProxyType({
    # Session & authentication
    "sessionid": _explain("Session ID", "essential", "Keeps you logged in as you browse. Essential for the website to work.", "low"),
    "session": _explain("Session", "essential", "Maintains your session while browsing. Needed for the site to function.", "low"),
    "auth": _explain("Authentication", "essential", "Proves you're logged in. Essential for accessing your account.", "low"),
    "token": _explain("Auth Token", "essential", "Security token for authentication. Keeps your session secure.", "low"),
    "csrf": _explain("CSRF Protection", "essential", "Security feature to prevent malicious form submissions.", "low"),
    "xsrf": _explain("XSRF Token", "essential", "Security token to prevent cross-site request forgery attacks.", "low"),
    # Preferences
    "locale": _explain("Language", "functional", "Remembers your language preference.", "low"),
    "lang": _explain("Language", "functional", "Stores your language setting.", "low"),
    "theme": _explain("Theme", "functional", "Remembers light/dark mode preference.", "low"),
    "timezone": _explain("Timezone", "functional", "Stores your timezone for displaying times correctly.", "low"),
    "consent": _explain("Cookie Consent", "functional", "Remembers your cookie consent choice.", "low"),
    # Google Analytics
    "_ga": _explain("Google Analytics", "analytics", "Tracks your visits across pages. Used to analyze website traffic.", "medium"),
    "_gid": _explain("Google Analytics (Daily)", "analytics", "Google Analytics cookie that tracks you for 24 hours.", "medium"),
    "_gat": _explain("Google Analytics (Throttle)", "analytics", "Used to throttle request rate to Google Analytics.", "medium"),
    "__utma": _explain("Google Analytics (Legacy)", "analytics", "Older Google Analytics cookie for tracking visitors.", "medium"),
    "__utmb": _explain("Google Analytics (Session)", "analytics", "Tracks how long you spend on the site.", "medium"),
    "__utmc": _explain("Google Analytics (Session)", "analytics", "Legacy session tracking cookie.", "medium"),
    "__utmz": _explain("Google Analytics (Source)", "analytics", "Tracks how you arrived at the site (search, link, etc).", "medium"),
    # Facebook
    "_fbp": _explain("Facebook Pixel", "advertising", "Facebook tracking to show you targeted ads on Facebook.", "high"),
    "fr": _explain("Facebook Advertising", "advertising", "Facebook ad delivery and measurement.", "high"),
    "_fbc": _explain("Facebook Click ID", "advertising", "Tracks when you click a Facebook ad.", "high"),
    # Google Ads
    "ide": _explain("Google DoubleClick", "advertising", "Used by Google to show personalized ads across websites.", "high"),
    "__gads": _explain("Google Ads", "advertising", "Google advertising cookie for ad serving.", "high"),
    "dsid": _explain("Google DoubleClick", "advertising", "Links your activity on other sites with Google ads.", "high"),
    "_gcl_au": _explain("Google Conversion", "advertising", "Tracks conversions for Google Ads campaigns.", "high"),
    # Other trackers
    "_tt_": _explain("TikTok Pixel", "tracking", "TikTok tracking for ad targeting.", "high"),
    "_pinterest_": _explain("Pinterest", "tracking", "Pinterest tracking for ads and analytics.", "high"),
    "_li_": _explain("LinkedIn", "tracking", "LinkedIn tracking for ads and insights.", "high"),
    "hubspot": _explain("HubSpot", "analytics", "Marketing analytics and tracking.", "medium"),
    "intercom": _explain("Intercom", "functional", "Customer support chat widget.", "low"),
    "amplitude": _explain("Amplitude", "analytics", "Product analytics tracking.", "medium"),
    "mixpanel": _explain("Mixpanel", "analytics", "Product analytics and user tracking.", "medium"),
    "segment": _explain("Segment", "analytics", "Data routing to multiple analytics services.", "medium"),
})

CATEGORY_INFO: MappingProxyType[str, cookies.CategoryInfo] = MappingProxyType({
    "essential": cookies.CategoryInfo(label="Essential", description="Required for the website to function. Cannot be blocked."),
    "functional": cookies.CategoryInfo(label="Functional", description="Remembers your preferences like language or theme."),
    "analytics": cookies.CategoryInfo(label="Analytics", description="Tracks how you use the website. Often shared with third parties."),
    "advertising": cookies.CategoryInfo(label="Advertising", description="Used to show you targeted ads across the internet."),
    "tracking": cookies.CategoryInfo(label="Tracking", description="Tracks your activity across multiple websites."),
    "unknown": cookies.CategoryInfo(label="Unknown", description="Purpose not recognized."),
})

# Keyword families checked after the table, in order.
_HEURISTICS: tuple[tuple[tuple[str, ...], cookies.CookieExplanation], ...] = (
    (("session", "sess"), _explain("Session Cookie", "essential", "Maintains your browsing session.", "low")),
    (("auth", "login", "user"), _explain("Authentication", "essential", "Related to user authentication.", "low")),
    (("analytics", "stat", "track"), _explain("Analytics/Tracking", "analytics", "Used for analytics or user tracking.", "medium")),
    (("ad", "campaign", "promo"), _explain("Advertising", "advertising", "Likely used for advertising purposes.", "high")),
)


# ============================================================================
# Classification
# ============================================================================


def get_cookie_explanation(cookie_name: str) -> cookies.CookieExplanation:
    """Explain a cookie by name.

    Lookup order: exact table match, first table key contained in
    the name, keyword family, unknown.  All comparisons are
    case-insensitive.
    """
    lower_name = cookie_name.lower()

    exact = KNOWN_COOKIES.get(lower_name)
    if exact is not None:
        return exact

    for pattern, explanation in KNOWN_COOKIES.items():
        if pattern in lower_name:
            return explanation

    for keywords, explanation in _HEURISTICS:
        if any(keyword in lower_name for keyword in keywords):
            return explanation

    return _explain(cookie_name, "unknown", "Unknown purpose. May be functional or tracking.", "medium")


# ============================================================================
# Header parsing
# ============================================================================


def parse_cookie_header(cookie_header: str | None) -> list[cookies.ParsedCookie]:
    """Parse a ``Cookie`` request header into name/value pairs."""
    if not cookie_header:
        return []

    parsed: list[cookies.ParsedCookie] = []
    for pair in cookie_header.split(";"):
        name, _, value = pair.strip().partition("=")
        name = name.strip()
        if name:
            parsed.append(cookies.ParsedCookie(name=name, value=value.strip()))
    return parsed


def parse_set_cookie_header(set_cookie_header: str | None) -> cookies.ParsedSetCookie | None:
    """Parse one ``Set-Cookie`` header value.

    The first segment is ``name=value``; every later segment is an
    attribute stored under its lower-cased key.  Flag attributes
    without a value (``Secure``, ``HttpOnly``) are stored as
    ``"true"``.
    """
    if not set_cookie_header:
        return None

    name_value, *attrs = set_cookie_header.split(";")
    name, _, value = name_value.partition("=")

    attributes: dict[str, str] = {}
    for attr in attrs:
        key, sep, attr_value = attr.strip().partition("=")
        if not key:
            continue
        attributes[key.strip().lower()] = attr_value.strip() if sep and attr_value.strip() else "true"

    return cookies.ParsedSetCookie(name=name.strip(), value=value.strip(), attributes=attributes)


# ============================================================================
# Per-request report
# ============================================================================


def analyze_cookies(
    cookie_header: str | None,
    set_cookie_headers: list[str] | None = None,
) -> cookies.CookieReport:
    """Explain every cookie sent and set by one request.

    Args:
        cookie_header: The ``Cookie`` request header value, if any.
        set_cookie_headers: Every ``Set-Cookie`` response header value.

    Returns:
        A :class:`CookieReport`.  Category and risk counts cover the
        cookies that were sent.
    """
    sent = [
        cookies.ExplainedCookie(name=c.name, value=c.value, explanation=get_cookie_explanation(c.name))
        for c in parse_cookie_header(cookie_header)
    ]

    received: list[cookies.ExplainedSetCookie] = []
    for header in set_cookie_headers or []:
        parsed = parse_set_cookie_header(header)
        if parsed is None or not parsed.name:
            continue
        received.append(
            cookies.ExplainedSetCookie(
                name=parsed.name,
                value=parsed.value,
                explanation=get_cookie_explanation(parsed.name),
                attributes=parsed.attributes,
                secure=parsed.secure,
                http_only=parsed.http_only,
                same_site=parsed.same_site,
            )
        )

    category_counts = collections.Counter(c.explanation.category for c in sent)
    risk_counts = {"low": 0, "medium": 0, "high": 0}
    for c in sent:
        risk_counts[c.explanation.risk] += 1

    return cookies.CookieReport(
        sent=sent,
        received=received,
        category_counts=dict(category_counts),
        risk_counts=risk_counts,
    )
