"""Shared fixtures for the test suite."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import pytest

from network_clarity.models import tracking
from network_clarity.sessions import dispatcher, registry

PAGE_URL = "https://www.example.com/articles/1"

# ── Record factories ────────────────────────────────────────────


@pytest.fixture()
def make_record() -> Callable[..., tracking.NetworkRequestRecord]:
    """Factory for request records with sensible defaults."""

    def _make(
        record_id: str = "1",
        url: str = "https://example.com/api/data",
        *,
        domain: str | None = None,
        is_third_party: bool = False,
        is_tracker: bool = False,
        **overrides: object,
    ) -> tracking.NetworkRequestRecord:
        return tracking.NetworkRequestRecord(
            id=record_id,
            url=url,
            domain=domain if domain is not None else url.split("/")[2],
            is_third_party=is_third_party,
            is_tracker=is_tracker,
            timing=tracking.RequestTiming(start_time=1_000.0),
            **overrides,
        )

    return _make


@pytest.fixture()
def first_party_record(make_record: Callable[..., tracking.NetworkRequestRecord]) -> tracking.NetworkRequestRecord:
    """A first-party API request."""
    return make_record("fp", "https://example.com/api/data")


@pytest.fixture()
def tracker_record(make_record: Callable[..., tracking.NetworkRequestRecord]) -> tracking.NetworkRequestRecord:
    """A third-party Google Analytics beacon."""
    return make_record(
        "ga",
        "https://www.google-analytics.com/collect",
        is_third_party=True,
        is_tracker=True,
        type="ping",
    )


# ── Panel fixtures ──────────────────────────────────────────────


@pytest.fixture()
def make_har_entry() -> Callable[..., tracking.HarEntry]:
    """Factory for finished HAR entries as the panel reports them."""

    def _make(
        url: str = "https://example.com/api/user",
        *,
        method: str = "GET",
        resource_type: str = "xhr",
        status: int = 200,
        mime_type: str = "application/json",
        request_headers: list[tuple[str, str]] | None = None,
        response_headers: list[tuple[str, str]] | None = None,
        post_text: str | None = None,
        post_params: list[tuple[str, str]] | None = None,
    ) -> tracking.HarEntry:
        post_data = None
        if post_text is not None or post_params:
            post_data = tracking.HarPostData(
                mime_type="application/json" if post_text is not None else "",
                text=post_text,
                params=[tracking.HarPostParam(name=n, value=v) for n, v in post_params or []],
            )
        return tracking.HarEntry(
            started_date_time=datetime(2026, 1, 1, tzinfo=UTC),
            time=42.0,
            request=tracking.HarRequest(
                url=url,
                method=method,
                headers=[tracking.Header(name=n, value=v) for n, v in request_headers or []],
                post_data=post_data,
            ),
            response=tracking.HarResponse(
                status=status,
                status_text="OK" if status == 200 else "",
                headers=[tracking.Header(name=n, value=v) for n, v in response_headers or []],
                content=tracking.HarContent(size=128, mime_type=mime_type),
            ),
            resource_type=resource_type,
        )

    return _make


# ── Session fixtures ────────────────────────────────────────────


@pytest.fixture()
def sessions() -> registry.SessionRegistry:
    """An empty session registry."""
    return registry.SessionRegistry()


@pytest.fixture()
def navigated_sessions(sessions: registry.SessionRegistry) -> registry.SessionRegistry:
    """A registry with tab 1 on ``PAGE_URL``."""
    sessions.tab_navigated(1, PAGE_URL)
    return sessions


@pytest.fixture()
def command_dispatcher(sessions: registry.SessionRegistry) -> dispatcher.Dispatcher:
    """A dispatcher without a page-URL lookup."""
    return dispatcher.Dispatcher(sessions)


@pytest.fixture()
def sample_stats() -> tracking.TabStats:
    """Statistics of a tracker-heavy page (scores 28, grade F)."""
    return tracking.TabStats(
        total_requests=20,
        first_party_count=5,
        third_party_count=15,
        tracker_count=3,
        tracker_domains=["doubleclick.net", "google-analytics.com", "facebook.net"],
        unique_domains=[f"host{i}.example" for i in range(12)],
    )
