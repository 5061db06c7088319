"""Privacy score calculator.

Turns a tab's aggregate request statistics into a 0–100 score and
an A–F grade.  The score starts at 100 and three penalty groups are
subtracted:

- **Trackers** (up to 50): 8 points per tracker request, capped at
  40, plus 10 more when trackers are over 10% of all requests.
- **Third-party ratio** (up to 30): tiered on the share of requests
  that leave the page's registrable domain.
- **Domain count** (up to 20): tiered on how many distinct servers
  were contacted.
"""

from __future__ import annotations

import math
from types import MappingProxyType

from network_clarity.models import score, tracking
from network_clarity.utils import logger

log = logger.create_logger("PrivacyScore")


# ── Thresholds ──────────────────────────────────────────────

_TRACKER_POINTS_EACH = 8
_TRACKER_POINTS_CAP = 40
_TRACKER_RATIO_THRESHOLD = 0.1
_TRACKER_RATIO_PENALTY = 10

# (ratio strictly above, penalty, issue template), checked in order.
_THIRD_PARTY_TIERS: tuple[tuple[float, int, str], ...] = (
    (0.7, 30, "High third-party ratio: {percent}% of requests go to external servers"),
    (0.5, 20, "Moderate third-party usage: {percent}% of requests are external"),
    (0.3, 10, "Some third-party requests: {percent}% external"),
)

# (count strictly above, penalty, issue template or None), checked in order.
_DOMAIN_TIERS: tuple[tuple[int, int, str | None], ...] = (
    (30, 20, "Contacts {count} different servers - very high"),
    (20, 15, "Contacts {count} different servers - high"),
    (10, 8, "Contacts {count} different servers"),
    (5, 3, None),
)

_GRADE_FLOORS: tuple[tuple[int, score.PrivacyGrade], ...] = (
    (90, "A"),
    (75, "B"),
    (60, "C"),
    (40, "D"),
)

GRADE_SUMMARIES: MappingProxyType[str, str] = MappingProxyType({
    "A": "Excellent privacy! Minimal tracking and external requests.",
    "B": "Good privacy. Some third-party services but limited tracking.",
    "C": "Moderate privacy concerns. Consider using a content blocker.",
    "D": "Poor privacy. Significant tracking and data sharing detected.",
    "F": "Very poor privacy. Heavy tracking and surveillance detected.",
})

POSITIVE_NOTE = "This site has good privacy practices"


# ── Helpers ─────────────────────────────────────────────────


def _percent(ratio: float) -> int:
    """Ratio to a whole percentage, halves rounding up."""
    return math.floor(ratio * 100 + 0.5)


def score_to_grade(value: int) -> score.PrivacyGrade:
    """Map a 0–100 score to its letter grade."""
    for floor, grade in _GRADE_FLOORS:
        if value >= floor:
            return grade
    return "F"


def generate_summary(grade: score.PrivacyGrade) -> str:
    """One-sentence verdict for a grade."""
    return GRADE_SUMMARIES.get(grade, "Unable to determine privacy score.")


def _tracker_penalty(stats: tracking.TabStats) -> tuple[int, str | None]:
    count = stats.tracker_count
    if count <= 0:
        return 0, None

    penalty = min(count * _TRACKER_POINTS_EACH, _TRACKER_POINTS_CAP)
    if stats.total_requests > 0 and count / stats.total_requests > _TRACKER_RATIO_THRESHOLD:
        penalty += _TRACKER_RATIO_PENALTY

    shown = ", ".join(stats.tracker_domains[:3])
    more = "..." if len(stats.tracker_domains) > 3 else ""
    plural = "s" if count > 1 else ""
    return penalty, f"{count} tracker{plural} detected ({shown}{more})"


def _third_party_penalty(stats: tracking.TabStats) -> tuple[int, str | None]:
    if stats.total_requests <= 0:
        return 0, None

    ratio = stats.third_party_count / stats.total_requests
    for threshold, penalty, template in _THIRD_PARTY_TIERS:
        if ratio > threshold:
            return penalty, template.format(percent=_percent(ratio))
    return 0, None


def _domain_penalty(stats: tracking.TabStats) -> tuple[int, str | None]:
    count = len(stats.unique_domains)
    for threshold, penalty, template in _DOMAIN_TIERS:
        if count > threshold:
            return penalty, template.format(count=count) if template else None
    return 0, None


# ── Public API ──────────────────────────────────────────────


def calculate_privacy_score(stats: tracking.TabStats) -> score.PrivacyScoreResult:
    """Score a browsing context from its aggregate statistics.

    Args:
        stats: Derived statistics of a tab session.

    Returns:
        A :class:`PrivacyScoreResult`.  Issues are ordered tracker,
        third-party, domain count; a positive note is added only when
        the score is at least 80 and nothing else was flagged.
    """
    tracker_penalty, tracker_issue = _tracker_penalty(stats)
    third_party_penalty, third_party_issue = _third_party_penalty(stats)
    domain_penalty, domain_issue = _domain_penalty(stats)

    issues = [i for i in (tracker_issue, third_party_issue, domain_issue) if i]

    value = max(0, min(100, 100 - tracker_penalty - third_party_penalty - domain_penalty))
    grade = score_to_grade(value)

    if value >= 80 and not issues:
        issues.append(POSITIVE_NOTE)

    log.debug(
        "Privacy score calculated",
        {
            "score": value,
            "grade": grade,
            "trackers": tracker_penalty,
            "thirdParty": third_party_penalty,
            "domains": domain_penalty,
        },
    )

    return score.PrivacyScoreResult(
        score=value,
        grade=grade,
        breakdown=score.PenaltyBreakdown(
            tracker_penalty=tracker_penalty,
            third_party_penalty=third_party_penalty,
            domain_penalty=domain_penalty,
        ),
        summary=generate_summary(grade),
        issues=issues,
    )
