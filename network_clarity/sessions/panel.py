"""Inspection panel feed.

The panel sees finished requests as HAR entries with a lazy
"fetch body" capability, and only while it is open.  Each entry
becomes one fully-formed record in the tab session's ``inspected``
collection, classified with the same rules as the interception
feed.

JSON and XHR bodies are prefetched into a cache so that response
search does not have to fetch them again; every other body is
fetched on demand.
"""

from __future__ import annotations

import asyncio
import random
import string
import time
from collections.abc import Awaitable, Callable, Iterable, Sequence

from network_clarity.analysis import cookies, explanations, pii_detector
from network_clarity.models import messages, tracking
from network_clarity.sessions import registry
from network_clarity.utils import errors, logger, url

log = logger.create_logger("Panel")

ContentFetcher = Callable[[], Awaitable[str | None]]

_PREFETCH_TYPES = frozenset({"xhr", "xmlhttprequest", "fetch"})
_ID_ALPHABET = string.ascii_lowercase + string.digits


def _new_record_id() -> str:
    """``<epoch ms>-<7 base36 chars>``, unique enough within one panel."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=7))
    return f"{int(time.time() * 1000)}-{suffix}"


def record_from_entry(
    entry: tracking.HarEntry,
    record_id: str,
    page_url: str,
) -> tracking.NetworkRequestRecord:
    """Build a complete record from a finished HAR entry."""
    start = entry.started_date_time.timestamp() * 1000
    request_body, _ = entry.request_body_text()
    status = entry.response.status

    record = tracking.NetworkRequestRecord(
        id=record_id,
        url=entry.request.url,
        method=entry.request.method,
        type=entry.resource_type,
        status=status,
        status_text=entry.response.status_text or explanations.get_status_text(status),
        timing=tracking.RequestTiming(start_time=start, end_time=start + entry.time, duration=entry.time),
        request_headers=list(entry.request.headers),
        response_headers=list(entry.response.headers),
        request_body=request_body,
        size=entry.response.content.size,
        mime_type=entry.response.content.mime_type or None,
    )
    record.apply_classification(url.classify_request(entry.request.url, page_url))
    return record


def should_prefetch(record: tracking.NetworkRequestRecord) -> bool:
    """Whether a record's body is worth caching for search."""
    return record.type in _PREFETCH_TYPES or "json" in (record.mime_type or "").lower()


class PanelFeed:
    """Panel-side path into a tab's session.

    Args:
        sessions: Registry holding the tab session.
        tab_id: The inspected tab.
        page_url_lookup: Optional coroutine resolving the tab's
            current page URL.  Falls back to the session's page URL.
        prefetch_bodies: Cache JSON/XHR bodies as they finish.
    """

    def __init__(
        self,
        sessions: registry.SessionRegistry,
        tab_id: int,
        page_url_lookup: registry.PageUrlLookup | None = None,
        *,
        prefetch_bodies: bool = True,
    ) -> None:
        self.sessions = sessions
        self.tab_id = tab_id
        self.page_url_lookup = page_url_lookup
        self.prefetch_bodies = prefetch_bodies

        self.search_term = ""
        self.search_results: set[str] = set()

        self._entries: dict[str, tracking.HarEntry] = {}
        self._fetchers: dict[str, ContentFetcher] = {}
        self._body_cache: dict[str, str] = {}
        # Bumped by on_navigated/load_existing; guards continuations
        # that have no record to check yet.
        self._epoch = 0

    # ── State ───────────────────────────────────────────────────

    @property
    def session(self) -> registry.TabSession:
        return self.sessions.ensure(self.tab_id)

    @property
    def records(self) -> list[tracking.NetworkRequestRecord]:
        return list(self.session.inspected.values())

    @property
    def cached_ids(self) -> set[str]:
        return set(self._body_cache)

    async def _resolve_page_url(self) -> str:
        fallback = self.session.page_url
        if self.page_url_lookup is None:
            return fallback
        try:
            return await self.page_url_lookup(self.tab_id) or fallback
        except Exception as error:
            log.warn("Page URL lookup failed", {"tabId": self.tab_id, "error": errors.get_error_message(error)})
            return fallback

    def _forget(self) -> None:
        self._entries.clear()
        self._fetchers.clear()
        self._body_cache.clear()
        self.search_term = ""
        self.search_results = set()
        self._epoch += 1

    # ── Feed events ─────────────────────────────────────────────

    async def on_request_finished(
        self,
        entry: tracking.HarEntry,
        fetch_content: ContentFetcher | None = None,
    ) -> tracking.NetworkRequestRecord | None:
        """Add a finished request seen by the panel.

        Returns:
            The new record, or ``None`` when the panel navigated or
            the tab closed while the page URL was being resolved.
        """
        session = self.session
        generation = session.generation
        epoch = self._epoch

        page_url = await self._resolve_page_url()
        if epoch != self._epoch or not self.sessions.is_live(session, generation):
            log.debug("Dropped finished request after reset", {"tabId": self.tab_id, "url": entry.request.url})
            return None

        record = record_from_entry(entry, _new_record_id(), page_url)
        self.sessions.add_inspected(self.tab_id, record)
        self._entries[record.id] = entry
        if fetch_content is not None:
            self._fetchers[record.id] = fetch_content

        if self.prefetch_bodies and fetch_content is not None and should_prefetch(record):
            await self.fetch_response_body(record.id)
        return record

    def on_navigated(self) -> None:
        """Forget every panel record, cached body and search result."""
        self._forget()
        self.sessions.clear_inspected(self.tab_id)
        log.debug("Panel navigated", {"tabId": self.tab_id})

    async def load_existing(
        self,
        entries: Iterable[tracking.HarEntry],
        fetch_contents: Sequence[ContentFetcher | None] | None = None,
    ) -> list[tracking.NetworkRequestRecord]:
        """Replace the panel records with the requests finished so far.

        Args:
            entries: HAR entries in the order the panel reported them.
            fetch_contents: Optional body fetchers, index-aligned with
                *entries*.
        """
        self._forget()
        epoch = self._epoch
        page_url = await self._resolve_page_url()
        if epoch != self._epoch:
            return []

        records: list[tracking.NetworkRequestRecord] = []
        for index, entry in enumerate(entries):
            record = record_from_entry(entry, f"existing-{index}", page_url)
            records.append(record)
            self._entries[record.id] = entry
            fetcher = fetch_contents[index] if fetch_contents and index < len(fetch_contents) else None
            if fetcher is not None:
                self._fetchers[record.id] = fetcher

        self.sessions.replace_inspected(self.tab_id, records)
        log.info("Loaded existing requests", {"tabId": self.tab_id, "count": len(records)})
        return records

    # ── Bodies and search ───────────────────────────────────────

    async def fetch_response_body(self, record_id: str) -> str | None:
        """Return a record's response body, fetching it at most once.

        Fetch failures are logged and reported as ``None``.  A body
        that arrives after the record was discarded is not cached.
        """
        cached = self._body_cache.get(record_id)
        if cached is not None:
            return cached

        fetcher = self._fetchers.get(record_id)
        session = self.session
        record = session.inspected.get(record_id)
        if fetcher is None or record is None:
            return None
        generation = session.generation

        try:
            content = await fetcher()
        except Exception as error:
            log.warn("Response body fetch failed", {"requestId": record_id, "error": errors.get_error_message(error)})
            return None

        if not content:
            return None
        if not self.sessions.is_live(session, generation, record_id, record):
            log.debug("Discarded body for a dropped request", {"requestId": record_id})
            return None

        self._body_cache[record_id] = content
        return content

    async def search_responses(self, term: str) -> set[str]:
        """Ids of panel records whose response body contains *term*.

        Case-insensitive.  Cached bodies are searched first, then
        every uncached body is fetched concurrently.  A blank term
        clears the results.
        """
        self.search_term = term
        if not term.strip():
            self.search_results = set()
            return set()

        needle = term.lower()
        epoch = self._epoch
        matches = {rid for rid, content in self._body_cache.items() if needle in content.lower()}

        uncached = [r.id for r in self.records if r.id not in self._body_cache and r.id in self._fetchers]
        bodies = await asyncio.gather(*(self.fetch_response_body(rid) for rid in uncached))
        matches.update(rid for rid, body in zip(uncached, bodies, strict=True) if body and needle in body.lower())

        if epoch != self._epoch:
            return set()
        self.search_results = matches
        return matches

    def filter_requests(self, text: str = "", resource_type: str = "all") -> list[tracking.NetworkRequestRecord]:
        """Panel records whose URL or domain contains *text* and whose type matches."""
        needle = text.lower()
        return [
            r
            for r in self.records
            if (not needle or needle in r.url.lower() or needle in r.domain.lower())
            and (resource_type == "all" or r.type == resource_type)
        ]

    # ── Selection ───────────────────────────────────────────────

    async def inspect_request(self, record_id: str) -> messages.RequestInspection | None:
        """Run personal-data detection and cookie analysis on one request.

        Panel records are inspected with their HAR request body and
        lazily fetched response body.  Interception records carry no
        bodies, so only their URL and headers are analysed.
        """
        session = self.session
        record = session.inspected.get(record_id) or session.records.get(record_id)
        if record is None:
            return None

        entry = self._entries.get(record_id)
        if entry is not None:
            request_body, request_mime = entry.request_body_text()
        else:
            request_body, request_mime = record.request_body, None
        response_body = await self.fetch_response_body(record_id)

        cookie_header = next(iter(record.find_header("cookie")), None)
        set_cookies = record.find_header("set-cookie", response=True)

        return messages.RequestInspection(
            record=record.model_copy(deep=True),
            request_body=request_body,
            request_body_mime_type=request_mime,
            response_body=response_body,
            pii=pii_detector.analyze_pii(request_body, response_body, record.url),
            cookies=cookies.analyze_cookies(cookie_header, set_cookies),
        )
