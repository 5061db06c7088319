"""
Personal data (PII) detection for request and response content.

Scans URLs and bodies for email addresses, phone numbers, payment
card numbers, US Social Security numbers, IPv4 addresses, and names
or street addresses sent under a recognisable field name.  Card,
SSN and phone candidates must pass a validator before they are
reported; names and addresses are only matched right after a known
field token, so free text is never flagged.
"""

from __future__ import annotations

import re
from types import MappingProxyType

from network_clarity.models import pii
from network_clarity.utils import logger

log = logger.create_logger("PII")

# ============================================================================
# Patterns
# ============================================================================

# Scanned in this order; dedup keeps the first category that claims a value.
PII_PATTERNS: tuple[tuple[pii.PIIType, re.Pattern[str]], ...] = (
    ("email", re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")),
    ("phone", re.compile(r"(?:\+?1[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}")),
    (
        "credit_card",
        re.compile(r"\b(?:4[0-9]{12}(?:[0-9]{3})?|5[1-5][0-9]{14}|3[47][0-9]{13}|6(?:011|5[0-9]{2})[0-9]{12})\b"),
    ),
    ("ssn", re.compile(r"\b\d{3}[-\s]?\d{2}[-\s]?\d{4}\b")),
    (
        "ip_address",
        re.compile(r"\b(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\b"),
    ),
    (
        "name",
        re.compile(
            r"""(?:["']?(?:first_?name|last_?name|full_?name|user_?name|display_?name)["']?\s*[:=]\s*["']?)"""
            r"([a-zA-Z]{2,}(?:\s+[a-zA-Z]{2,})?)",
            re.IGNORECASE,
        ),
    ),
    (
        "address",
        re.compile(
            r"""(?:["']?(?:address|street|city|zip_?code|postal_?code)["']?\s*[:=]\s*["']?)([^"'\n,]{5,})""",
            re.IGNORECASE,
        ),
    ),
)

# Categories whose reported value is the captured group after the field token.
_FIELD_SCOPED: frozenset[str] = frozenset({"name", "address"})

# Field names that commonly precede personal data, in lookup order.
PII_FIELD_NAMES: tuple[str, ...] = (
    "email", "mail", "e-mail",
    "phone", "telephone", "mobile", "cell",
    "name", "firstname", "first_name", "lastname", "last_name", "fullname", "full_name",
    "address", "street", "city", "zip", "postal",
    "ssn", "social",
    "card", "credit", "cvv", "ccv",
    "password", "passwd", "pwd",
    "dob", "birthday", "birth_date",
    "user", "username", "login",
)

_FIELD_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(rf"""["']?({re.escape(field)}[a-z_]*)["']?\s*[:=]""", re.IGNORECASE)
    for field in PII_FIELD_NAMES
)

CONTEXT_LOOKBACK = 50

PII_TYPE_NAMES = MappingProxyType({
    "email": "Email Address",
    "phone": "Phone Number",
    "credit_card": "Credit Card",
    "ssn": "Social Security #",
    "ip_address": "IP Address",
    "name": "Personal Name",
    "address": "Physical Address",
})

PII_RISK_WEIGHTS = MappingProxyType({
    "credit_card": 10,
    "ssn": 10,
    "email": 5,
    "phone": 5,
    "address": 4,
    "name": 2,
    "ip_address": 1,
})


# ============================================================================
# Validators
# ============================================================================


def is_valid_credit_card(value: str) -> bool:
    """Check length (13-19 digits) and the Luhn checksum."""
    digits = re.sub(r"\D", "", value)
    if not 13 <= len(digits) <= 19:
        return False

    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def is_valid_ssn(value: str) -> bool:
    """Reject SSN candidates that are malformed or in a never-issued range."""
    digits = re.sub(r"[-\s]", "", value)
    if len(digits) != 9 or not digits.isdigit():
        return False
    if len(set(digits)) == 1:
        return False
    return not digits.startswith(("000", "666", "9"))


def is_valid_phone(value: str) -> bool:
    """Accept phone candidates with 10 or 11 digits."""
    digits = re.sub(r"\D", "", value)
    return 10 <= len(digits) <= 11


_VALIDATORS = MappingProxyType({
    "credit_card": is_valid_credit_card,
    "ssn": is_valid_ssn,
    "phone": is_valid_phone,
})


# ============================================================================
# Masking and context
# ============================================================================


def _mask_digits_except_last(value: str, keep: int = 4) -> str:
    """Replace every digit but the last *keep* with ``*``, keeping separators."""
    remaining = sum(c.isdigit() for c in value)
    out: list[str] = []
    for char in value:
        if char.isdigit():
            out.append(char if remaining <= keep else "*")
            remaining -= 1
        else:
            out.append(char)
    return "".join(out)


def mask_value(value: str, pii_type: pii.PIIType) -> str:
    """Mask a matched value for display according to its type."""
    match pii_type:
        case "email":
            local, _, domain = value.partition("@")
            return f"{local[:2]}***@{domain}"
        case "phone":
            return _mask_digits_except_last(value)
        case "credit_card":
            return "**** **** **** " + re.sub(r"\D", "", value)[-4:]
        case "ssn":
            return "***-**-" + re.sub(r"\D", "", value)[-4:]
        case "ip_address":
            return value
        case _:
            if len(value) > 4:
                return f"{value[:2]}***{value[-2:]}"
            return "***"


def find_context(content: str, match_index: int) -> str:
    """Return the nearest known field name before *match_index*, or ``""``."""
    lookback = content[max(0, match_index - CONTEXT_LOOKBACK):match_index]
    for pattern in _FIELD_PATTERNS:
        found = pattern.search(lookback)
        if found:
            return found.group(1)
    return ""


def get_pii_type_name(pii_type: str) -> str:
    """Human-readable label for a PII type."""
    return PII_TYPE_NAMES.get(pii_type, "Personal Data")


# ============================================================================
# Detection
# ============================================================================


def detect_pii(
    content: str,
    location: pii.PIILocation,
) -> list[pii.PIIMatch]:
    """Find personal data in one text blob.

    Repeated values within the blob are reported once; each call
    starts with an empty set of reported values.

    Args:
        content: URL or body text to scan.
        location: Where the text came from.

    Returns:
        Matches in category order, then position order.
    """
    if not content:
        return []

    seen: set[str] = set()
    matches: list[pii.PIIMatch] = []
    for pii_type, pattern in PII_PATTERNS:
        for found in pattern.finditer(content):
            if pii_type in _FIELD_SCOPED:
                value = (found.group(1) or found.group(0)).strip()
                context_index = found.start(1)
            else:
                value = found.group(0)
                context_index = found.start()

            key = value.lower()
            if not value or key in seen:
                continue

            validator = _VALIDATORS.get(pii_type)
            if validator is not None and not validator(value):
                continue

            seen.add(key)
            matches.append(
                pii.PIIMatch(
                    type=pii_type,
                    value=mask_value(value, pii_type),
                    original_value=value,
                    context=find_context(content, context_index),
                    location=location,
                )
            )
    return matches


def risk_level_for(matches: list[pii.PIIMatch]) -> pii.PIIRiskLevel:
    """Threshold the summed severity weights of *matches*."""
    total = sum(PII_RISK_WEIGHTS.get(m.type, 1) for m in matches)
    if total > 15:
        return "high"
    if total > 8:
        return "medium"
    if total > 0:
        return "low"
    return "none"


def analyze_pii(
    request_body: str | None,
    response_body: str | None,
    url: str,
) -> pii.PIIDetectionResult:
    """Scan a request's URL, request body and response body for personal data.

    Args:
        request_body: Raw request body, if any.
        response_body: Raw response body, if any.
        url: The request URL.

    Returns:
        A :class:`PIIDetectionResult` with every match, the aggregate
        risk level and a one-line summary.
    """
    matches = detect_pii(url, "url")
    if request_body:
        matches.extend(detect_pii(request_body, "request"))
    if response_body:
        matches.extend(detect_pii(response_body, "response"))

    if matches:
        type_names = list(dict.fromkeys(get_pii_type_name(m.type) for m in matches))
        summary = f"Found: {', '.join(type_names)}"
    else:
        summary = "No personal data detected"

    risk_level = risk_level_for(matches)
    if matches:
        log.debug("Personal data detected", {"matches": len(matches), "riskLevel": risk_level})

    return pii.PIIDetectionResult(
        has_pii=bool(matches),
        matches=matches,
        risk_level=risk_level,
        summary=summary,
    )
