"""
URL and domain utility functions for request classification.

Registrable-domain extraction here is a deliberate simplification of
the public suffix algorithm: a hostname collapses to its last two
labels, or to its last three when the last two form one of the
two-part suffixes in ``_TWO_PART_TLDS``.  Domains under unlisted
multi-part suffixes (``example.ac.uk``, ``city.kawasaki.jp``) are
mis-split.  Extending the list changes classification outcomes, so it
is kept short and fixed.
"""

from __future__ import annotations

import re
from urllib import parse

from network_clarity.analysis import tracker_list
from network_clarity.models import tracking

_TWO_PART_TLDS = frozenset(["co.uk", "com.au", "co.nz", "co.jp", "com.br", "co.in"])


def extract_domain(url: str) -> str:
    """Extract the hostname from a URL string.

    Fails closed: returns ``""`` when the URL cannot be parsed or has
    no host.  Callers must treat an empty domain as unknown, never as
    "same domain".
    """
    try:
        parsed = parse.urlparse(url)
        return parsed.hostname or ""
    except ValueError:
        return ""


def get_base_domain(domain: str) -> str:
    """Extract the registrable base domain from a full hostname.

    Handles the listed multi-part TLDs (e.g. ``co.uk``,
    ``com.au``) and strips a leading ``www.`` prefix.

    Args:
        domain: A hostname like ``"www.example.co.uk"``.

    Returns:
        The base domain, e.g. ``"example.co.uk"``.
    """
    clean = re.sub(r"^www\.", "", domain.lower())
    parts = clean.split(".")
    if len(parts) >= 2:
        last_two = ".".join(parts[-2:])
        if last_two in _TWO_PART_TLDS and len(parts) >= 3:
            return ".".join(parts[-3:])
        return last_two
    return clean


def is_third_party(request_url: str, page_url: str) -> bool:
    """Determine if a request URL is third-party relative to the page URL.

    Unknown domains on either side are never reported as third-party.
    """
    request_domain = extract_domain(request_url)
    page_domain = extract_domain(page_url)
    if not request_domain or not page_domain:
        return False
    return get_base_domain(request_domain) != get_base_domain(page_domain)


def classify_request(request_url: str, page_url: str) -> tracking.RequestClassification:
    """Classify a request by domain, party and known-tracker status."""
    domain = extract_domain(request_url)
    return tracking.RequestClassification(
        domain=domain,
        is_third_party=is_third_party(request_url, page_url),
        is_tracker=bool(domain) and tracker_list.is_tracker_domain(domain),
    )
