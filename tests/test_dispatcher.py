"""Tests for network_clarity.sessions.dispatcher — command routing."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pydantic
import pytest

from network_clarity.models import messages
from network_clarity.sessions import dispatcher, registry

PAGE_URL = "https://www.example.com/articles/1"
TRACKER_URL = "https://www.google-analytics.com/collect"


def _begin_payload(request_id: str = "r1", request_url: str = TRACKER_URL, tab_id: int = 1) -> dict[str, object]:
    return {
        "type": "begin",
        "requestId": request_id,
        "url": request_url,
        "method": "GET",
        "resourceType": "ping",
        "tabId": tab_id,
        "timestamp": 1_000.0,
    }


class TestFeedEvents:
    """Tests for interception feed commands."""

    async def test_request_lifecycle(self, command_dispatcher: dispatcher.Dispatcher) -> None:
        await command_dispatcher.dispatch_raw({"type": "tab_navigated", "tabId": 1, "url": PAGE_URL})
        await command_dispatcher.dispatch_raw(_begin_payload())
        await command_dispatcher.dispatch_raw(
            {"type": "request_headers", "requestId": "r1", "tabId": 1, "headers": [{"name": "Cookie", "value": "_ga=1"}]}
        )
        await command_dispatcher.dispatch_raw(
            {
                "type": "response_headers",
                "requestId": "r1",
                "tabId": 1,
                "headers": [{"name": "Content-Type", "value": "image/gif"}],
            }
        )
        response = await command_dispatcher.dispatch_raw(
            {"type": "completed", "requestId": "r1", "tabId": 1, "statusCode": 204, "timestamp": 1_030.0}
        )
        assert response.success is True

        data = command_dispatcher.sessions.get_tab_data(1)
        assert data is not None
        record = data.requests[0]
        assert record.is_tracker is True
        assert record.is_third_party is True
        assert record.type == "ping"
        assert record.mime_type == "image/gif"
        assert record.status == 204
        assert record.timing.duration == 30.0

    async def test_orphan_events_succeed_silently(self, command_dispatcher: dispatcher.Dispatcher) -> None:
        response = await command_dispatcher.dispatch_raw(
            {"type": "completed", "requestId": "ghost", "tabId": 4, "statusCode": 200, "timestamp": 1.0}
        )
        assert response.success is True
        assert len(command_dispatcher.sessions) == 0

    async def test_negative_tab_ignored(self, command_dispatcher: dispatcher.Dispatcher) -> None:
        response = await command_dispatcher.dispatch_raw(_begin_payload(tab_id=-1))
        assert response.success is True
        assert len(command_dispatcher.sessions) == 0

    async def test_tab_closed(self, command_dispatcher: dispatcher.Dispatcher) -> None:
        await command_dispatcher.dispatch_raw(_begin_payload())
        await command_dispatcher.dispatch(messages.TabClosed(tab_id=1))
        assert 1 not in command_dispatcher.sessions

    async def test_invalid_payload(self, command_dispatcher: dispatcher.Dispatcher) -> None:
        with pytest.raises(pydantic.ValidationError):
            await command_dispatcher.dispatch_raw({"type": "begin", "tabId": 1})


class TestUiQueries:
    """Tests for get_tab_data and clear_tab."""

    async def test_get_tab_data(self, command_dispatcher: dispatcher.Dispatcher) -> None:
        await command_dispatcher.dispatch_raw({"type": "tab_navigated", "tabId": 1, "url": PAGE_URL})
        await command_dispatcher.dispatch_raw(_begin_payload())

        response = await command_dispatcher.dispatch_raw({"type": "get_tab_data", "tabId": 1})

        assert response.success is True
        assert response.data is not None
        assert response.data.stats.tracker_count == 1
        dumped = response.model_dump(by_alias=True)
        assert dumped["data"]["pageUrl"] == PAGE_URL
        assert dumped["data"]["stats"]["trackerDomains"] == ["www.google-analytics.com"]

    async def test_get_tab_data_unknown_tab(self, command_dispatcher: dispatcher.Dispatcher) -> None:
        response = await command_dispatcher.dispatch(messages.GetTabData(tab_id=99))
        assert response.success is True
        assert response.data is None

    @pytest.mark.parametrize("command", [messages.GetTabData(), messages.ClearTab()])
    async def test_missing_tab_id(self, command_dispatcher: dispatcher.Dispatcher, command: messages.Command) -> None:
        response = await command_dispatcher.dispatch(command)
        assert response.success is False
        assert response.error == dispatcher.NO_TAB_ID_ERROR

    async def test_clear_tab_keeps_page(self, command_dispatcher: dispatcher.Dispatcher) -> None:
        await command_dispatcher.dispatch_raw({"type": "tab_navigated", "tabId": 1, "url": PAGE_URL})
        await command_dispatcher.dispatch_raw(_begin_payload())

        response = await command_dispatcher.dispatch(messages.ClearTab(tab_id=1))

        assert response.success is True
        data = command_dispatcher.sessions.get_tab_data(1)
        assert data is not None
        assert data.requests == []
        assert data.page_url == PAGE_URL


class TestPageUrlLookup:
    """Tests for re-classification through a page-URL lookup."""

    async def test_begin_refreshes_classification(self, sessions: registry.SessionRegistry) -> None:
        lookup = AsyncMock(return_value=PAGE_URL)
        command_dispatcher = dispatcher.Dispatcher(sessions, lookup)

        await command_dispatcher.dispatch_raw(_begin_payload())

        lookup.assert_awaited_once_with(1)
        record = sessions.get(1).records["r1"]  # type: ignore[union-attr]
        assert record.is_third_party is True

    async def test_lookup_not_called_without_context(self, sessions: registry.SessionRegistry) -> None:
        lookup = AsyncMock(return_value=PAGE_URL)
        await dispatcher.Dispatcher(sessions, lookup).dispatch_raw(_begin_payload(tab_id=-1))
        lookup.assert_not_awaited()

    async def test_stale_lookup_discarded(self, sessions: registry.SessionRegistry) -> None:
        async def lookup(tab_id: int) -> str:
            sessions.tab_navigated(tab_id, "https://elsewhere.example.net/")
            return PAGE_URL

        response = await dispatcher.Dispatcher(sessions, lookup).dispatch_raw(_begin_payload())

        assert response.success is True
        data = sessions.get_tab_data(1)
        assert data is not None
        assert data.requests == []
        assert data.page_url == "https://elsewhere.example.net/"
