"""Per-tab session registry.

Owns every tab's request records for the tab's lifetime.  Two
feeds write into it: the interception feed (lifecycle events with
headers but no bodies) and the inspection panel (finished HAR
entries, kept in a separate ``inspected`` collection).

Lifecycle of a session:

- **create** on the first event for a tab,
- **reset** on navigation or an explicit clear (records dropped,
  generation bumped),
- **destroy** when the tab closes.

Per-request states move ``Initiated`` -> ``HeadersRecorded`` ->
``Completed`` / ``HeadersEnriched``; the last two may arrive in
either order.  Events for unknown ids or tabs are no-ops, and
events without a browsing context (negative tab ids) are ignored.

Asynchronous continuations (page-URL lookups, body fetches) must
call :meth:`SessionRegistry.is_live` before writing so a result
that arrives after a reset never leaks into the new session.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Awaitable, Callable, Iterable

from network_clarity.analysis import explanations
from network_clarity.models import tracking
from network_clarity.utils import errors, logger, url

log = logger.create_logger("Sessions")

PageUrlLookup = Callable[[int], Awaitable[str | None]]


# ── Session state ───────────────────────────────────────────────


def derive_stats(records: Iterable[tracking.NetworkRequestRecord]) -> tracking.TabStats:
    """Aggregate statistics for a set of records.

    Domain lists keep first-seen order and skip empty (unknown)
    domains.  A request that is not third-party counts as
    first-party, trackers included.
    """
    total = first_party = third_party = trackers = 0
    domains: dict[str, None] = {}
    tracker_domains: dict[str, None] = {}

    for record in records:
        total += 1
        if record.domain:
            domains.setdefault(record.domain)
        if record.is_tracker:
            trackers += 1
            if record.domain:
                tracker_domains.setdefault(record.domain)
        if record.is_third_party:
            third_party += 1
        else:
            first_party += 1

    return tracking.TabStats(
        total_requests=total,
        first_party_count=first_party,
        third_party_count=third_party,
        tracker_count=trackers,
        tracker_domains=list(tracker_domains),
        unique_domains=list(domains),
    )


@dataclasses.dataclass
class TabSession:
    """Everything known about one tab's current page.

    ``records`` holds interception-feed records in arrival order,
    keyed by request id.  ``inspected`` holds panel-feed records.
    ``generation`` increases on every reset.
    """

    tab_id: int
    page_url: str = ""
    page_domain: str = ""
    generation: int = 0
    records: dict[str, tracking.NetworkRequestRecord] = dataclasses.field(default_factory=dict)
    inspected: dict[str, tracking.NetworkRequestRecord] = dataclasses.field(default_factory=dict)

    @property
    def stats(self) -> tracking.TabStats:
        """Statistics over ``records``, recomputed on every read."""
        return derive_stats(self.records.values())

    def reset(self, page_url: str | None = None) -> None:
        """Drop all interception records, optionally moving to a new page."""
        if page_url is not None:
            self.page_url = page_url
            self.page_domain = url.extract_domain(page_url)
        self.records = {}
        self.generation += 1

    def snapshot(self) -> tracking.TabData:
        """Copy of the session for a caller outside the registry."""
        return tracking.TabData(
            requests=[r.model_copy(deep=True) for r in self.records.values()],
            stats=self.stats,
            page_url=self.page_url,
            page_domain=self.page_domain,
        )


# ── Registry ────────────────────────────────────────────────────


class SessionRegistry:
    """Registry of live tab sessions."""

    def __init__(self) -> None:
        self._sessions: dict[int, TabSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, tab_id: object) -> bool:
        return tab_id in self._sessions

    @property
    def tab_ids(self) -> list[int]:
        return list(self._sessions)

    def get(self, tab_id: int) -> TabSession | None:
        """Return the live session of *tab_id*, if any."""
        return self._sessions.get(tab_id)

    def ensure(self, tab_id: int) -> TabSession:
        """Return the session of *tab_id*, creating an empty one."""
        session = self._sessions.get(tab_id)
        if session is None:
            session = TabSession(tab_id=tab_id)
            self._sessions[tab_id] = session
            log.debug("Session created", {"tabId": tab_id})
        return session

    def is_live(
        self,
        session: TabSession,
        generation: int,
        record_id: str | None = None,
        record: tracking.NetworkRequestRecord | None = None,
    ) -> bool:
        """Check that a captured session (and record) is still current.

        True only when *session* is still the registered session for
        its tab, has not been reset since *generation* was read, and,
        when given, *record* is still stored under *record_id* in
        either collection.
        """
        if self._sessions.get(session.tab_id) is not session:
            return False
        if session.generation != generation:
            return False
        if record is None or record_id is None:
            return True
        return session.records.get(record_id) is record or session.inspected.get(record_id) is record

    # ── Interception feed ───────────────────────────────────────

    def begin(
        self,
        request_id: str,
        request_url: str,
        method: str,
        resource_type: str,
        tab_id: int,
        timestamp: float,
    ) -> tracking.NetworkRequestRecord | None:
        """Record a newly initiated request.

        A repeated ``begin`` for an id that already exists is a
        redirect hop: the record's URL and classification are
        updated in place and no second record is created.

        Returns:
            The live record, or ``None`` when the event has no
            browsing context.
        """
        if tab_id < 0:
            return None

        session = self.ensure(tab_id)
        classification = url.classify_request(request_url, session.page_url)

        existing = session.records.get(request_id)
        if existing is not None:
            existing.url = request_url
            existing.apply_classification(classification)
            log.debug("Redirect hop", {"tabId": tab_id, "requestId": request_id, "domain": classification.domain})
            return existing

        record = tracking.NetworkRequestRecord(
            id=request_id,
            url=request_url,
            method=method,
            type=resource_type,
            timing=tracking.RequestTiming(start_time=timestamp),
        )
        record.apply_classification(classification)
        session.records[request_id] = record
        return record

    def _find(self, tab_id: int, request_id: str, event: str) -> tracking.NetworkRequestRecord | None:
        if tab_id < 0:
            return None
        session = self._sessions.get(tab_id)
        record = session.records.get(request_id) if session else None
        if record is None:
            log.debug("Dropped event without a matching request", {"event": event, "tabId": tab_id, "requestId": request_id})
        return record

    def record_request_headers(self, request_id: str, tab_id: int, headers: list[tracking.Header]) -> bool:
        """Attach request headers to a known request."""
        record = self._find(tab_id, request_id, "request_headers")
        if record is None:
            return False
        record.request_headers = list(headers)
        return True

    def record_response_headers(self, request_id: str, tab_id: int, headers: list[tracking.Header]) -> bool:
        """Attach response headers, picking up MIME type and size."""
        record = self._find(tab_id, request_id, "response_headers")
        if record is None:
            return False

        record.response_headers = list(headers)
        for header in headers:
            name = header.name.lower()
            if name == "content-type":
                record.mime_type = header.value
            elif name == "content-length":
                size = _parse_content_length(header.value)
                if size is not None:
                    record.size = size
        return True

    def complete(self, request_id: str, tab_id: int, status_code: int, timestamp: float) -> bool:
        """Mark a request finished with its status and end time."""
        record = self._find(tab_id, request_id, "completed")
        if record is None:
            return False

        if status_code:
            record.status = status_code
            record.status_text = explanations.get_status_text(status_code)
        record.timing.end_time = timestamp
        record.timing.duration = timestamp - record.timing.start_time
        return True

    def tab_navigated(self, tab_id: int, page_url: str) -> TabSession | None:
        """Start a fresh session for a new page in *tab_id*."""
        if tab_id < 0:
            return None
        session = self.ensure(tab_id)
        dropped = len(session.records)
        session.reset(page_url)
        log.debug("Tab navigated", {"tabId": tab_id, "domain": session.page_domain, "dropped": dropped})
        return session

    def tab_closed(self, tab_id: int) -> bool:
        """Destroy the session of a closed tab."""
        removed = self._sessions.pop(tab_id, None)
        if removed is not None:
            log.debug("Session destroyed", {"tabId": tab_id})
        return removed is not None

    # ── UI queries ──────────────────────────────────────────────

    def get_tab_data(self, tab_id: int) -> tracking.TabData | None:
        """Snapshot of a tab, or ``None`` when it has no session."""
        session = self._sessions.get(tab_id)
        return session.snapshot() if session else None

    def clear_tab(self, tab_id: int) -> TabSession:
        """Drop a tab's records, keeping its page URL."""
        session = self.ensure(tab_id)
        session.reset()
        return session

    # ── Async classification ────────────────────────────────────

    async def refresh_classification(self, tab_id: int, request_id: str, lookup: PageUrlLookup) -> bool:
        """Re-classify a request once the tab's page URL is known.

        The record keeps the classification it got at ``begin`` while
        the lookup is pending.  Readers in that window may see a
        first-party record that later flips to third-party.

        Returns:
            ``True`` when the record was updated.
        """
        session = self._sessions.get(tab_id)
        record = session.records.get(request_id) if session else None
        if session is None or record is None:
            return False
        generation = session.generation

        try:
            page_url = await lookup(tab_id)
        except Exception as error:
            log.warn("Page URL lookup failed", {"tabId": tab_id, "error": errors.get_error_message(error)})
            return False

        if not page_url:
            return False
        if not self.is_live(session, generation, request_id, record):
            log.debug("Discarded stale classification", {"tabId": tab_id, "requestId": request_id})
            return False

        record.apply_classification(url.classify_request(record.url, page_url))
        return True

    # ── Panel feed ──────────────────────────────────────────────

    def add_inspected(self, tab_id: int, record: tracking.NetworkRequestRecord) -> TabSession:
        """Store a fully-formed panel record."""
        session = self.ensure(tab_id)
        session.inspected[record.id] = record
        return session

    def replace_inspected(self, tab_id: int, records: Iterable[tracking.NetworkRequestRecord]) -> TabSession:
        """Replace every panel record of a tab."""
        session = self.ensure(tab_id)
        session.inspected = {r.id: r for r in records}
        return session

    def clear_inspected(self, tab_id: int) -> None:
        """Drop the panel records of a tab."""
        session = self._sessions.get(tab_id)
        if session is not None:
            session.inspected = {}


def _parse_content_length(value: str) -> int | None:
    try:
        return int(value.strip())
    except ValueError:
        return None
