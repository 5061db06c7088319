"""
Known tracking domains for request classification.

A curated subset of EasyPrivacy focused on the most common
advertising, analytics, session-recording and data-broker hosts
(https://easylist.to/easylist/easyprivacy.txt).  A hostname counts as
a tracker when it, or any parent domain of it, is listed, so one entry
covers every subdomain.
"""

from __future__ import annotations

import re

# ============================================================================
# Tracker Domains
# ============================================================================

TRACKER_DOMAINS: frozenset[str] = frozenset([
    # Google Analytics & Ads
    "google-analytics.com",
    "googleadservices.com",
    "googlesyndication.com",
    "googletagmanager.com",
    "googletagservices.com",
    "doubleclick.net",
    "analytics.google.com",
    # Facebook
    "facebook.com",
    "facebook.net",
    "fbcdn.net",
    # Twitter/X
    "ads-twitter.com",
    "analytics.twitter.com",
    "t.co",
    # Microsoft/Bing
    "bat.bing.com",
    "c.bing.com",
    "clarity.ms",
    # Amazon
    "amazon-adsystem.com",
    "assoc-amazon.com",
    # Adobe
    "demdex.net",
    "omtrdc.net",
    "2o7.net",
    # Ad exchanges and networks
    "adnxs.com",
    "adsrvr.org",
    "criteo.com",
    "criteo.net",
    "outbrain.com",
    "taboola.com",
    "pubmatic.com",
    "rubiconproject.com",
    "openx.net",
    "casalemedia.com",
    "advertising.com",
    "bidswitch.net",
    "indexww.com",
    # Analytics providers
    "hotjar.com",
    "mouseflow.com",
    "fullstory.com",
    "crazyegg.com",
    "optimizely.com",
    "mixpanel.com",
    "segment.io",
    "segment.com",
    "amplitude.com",
    "heap.io",
    "heapanalytics.com",
    "newrelic.com",
    "nr-data.net",
    # Social widgets
    "addthis.com",
    "sharethis.com",
    "addtoany.com",
    "disqus.com",
    "disquscdn.com",
    # Data brokers & DMPs
    "bluekai.com",
    "exelator.com",
    "liveramp.com",
    "acxiom.com",
    "tapad.com",
    "rlcdn.com",
    "liadm.com",
    "pippio.com",
    # Retargeting
    "perfectaudience.com",
    "adroll.com",
    "steelhousemedia.com",
    # Mobile attribution
    "adjust.com",
    "appsflyer.com",
    "branch.io",
    "kochava.com",
    "singular.net",
    # Session recording
    "logrocket.com",
    "smartlook.com",
    "inspectlet.com",
    # A/B testing
    "abtasty.com",
    "vwo.com",
    "omniconvert.com",
    # Customer data platforms
    "rudderstack.com",
    "mparticle.com",
    "lytics.io",
    # Audience measurement and verification
    "quantserve.com",
    "scorecardresearch.com",
    "imrworldwide.com",
    "chartbeat.com",
    "parsely.com",
    "comscore.com",
    "moatads.com",
    "doubleverify.com",
    "adsafeprotected.com",
])


# ============================================================================
# Matching
# ============================================================================


def _normalize(hostname: str) -> str:
    """Lower-case, drop a trailing dot and a leading ``www.``."""
    return re.sub(r"^www\.", "", hostname.strip().lower().rstrip("."))


def matching_tracker_domain(hostname: str) -> str | None:
    """Return the listed domain that *hostname* falls under, if any.

    Checks the exact hostname first, then each parent domain from
    the most specific down to the last two labels, stopping at the
    first hit.  A bare TLD is never looked up.
    """
    domain = _normalize(hostname)
    if not domain:
        return None
    if domain in TRACKER_DOMAINS:
        return domain

    parts = domain.split(".")
    for i in range(1, len(parts) - 1):
        parent = ".".join(parts[i:])
        if parent in TRACKER_DOMAINS:
            return parent
    return None


def is_tracker_domain(hostname: str) -> bool:
    """Check whether *hostname* is a known tracker or a subdomain of one."""
    return matching_tracker_domain(hostname) is not None
