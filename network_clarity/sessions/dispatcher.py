"""Command dispatch onto the session registry.

Both the host's interception feed and the UI talk to the engine by
sending :data:`~network_clarity.models.messages.Command` variants.
Feed events always succeed (unknown correlations are silent no-ops);
UI queries without a tab id fail with an explicit error.
"""

from __future__ import annotations

from typing import Any, assert_never

from network_clarity.models import messages
from network_clarity.sessions import registry
from network_clarity.utils import logger

log = logger.create_logger("Dispatcher")

NO_TAB_ID_ERROR = "No tabId provided"


class Dispatcher:
    """Routes commands to a :class:`~registry.SessionRegistry`.

    Args:
        sessions: The registry to mutate and query.
        page_url_lookup: Optional coroutine returning the current
            page URL of a tab.  When set, every new request is
            re-classified once it resolves.
    """

    def __init__(
        self,
        sessions: registry.SessionRegistry,
        page_url_lookup: registry.PageUrlLookup | None = None,
    ) -> None:
        self.sessions = sessions
        self.page_url_lookup = page_url_lookup

    async def dispatch_raw(self, payload: dict[str, Any]) -> messages.MessageResponse:
        """Validate a JSON payload into a command and dispatch it."""
        return await self.dispatch(messages.COMMAND_ADAPTER.validate_python(payload))

    async def dispatch(self, command: messages.Command) -> messages.MessageResponse:
        """Apply one command and return the response for its sender."""
        match command:
            case messages.BeginRequest():
                record = self.sessions.begin(
                    command.request_id,
                    command.url,
                    command.method,
                    command.resource_type,
                    command.tab_id,
                    command.timestamp,
                )
                if record is not None and self.page_url_lookup is not None:
                    await self.sessions.refresh_classification(command.tab_id, command.request_id, self.page_url_lookup)
                return messages.MessageResponse(success=True)

            case messages.RecordRequestHeaders():
                self.sessions.record_request_headers(command.request_id, command.tab_id, command.headers)
                return messages.MessageResponse(success=True)

            case messages.RecordResponseHeaders():
                self.sessions.record_response_headers(command.request_id, command.tab_id, command.headers)
                return messages.MessageResponse(success=True)

            case messages.CompleteRequest():
                self.sessions.complete(command.request_id, command.tab_id, command.status_code, command.timestamp)
                return messages.MessageResponse(success=True)

            case messages.TabNavigated():
                self.sessions.tab_navigated(command.tab_id, command.url)
                return messages.MessageResponse(success=True)

            case messages.TabClosed():
                self.sessions.tab_closed(command.tab_id)
                return messages.MessageResponse(success=True)

            case messages.GetTabData():
                if command.tab_id is None:
                    log.warn("Tab data requested without a tab id")
                    return messages.MessageResponse(success=False, error=NO_TAB_ID_ERROR)
                return messages.MessageResponse(success=True, data=self.sessions.get_tab_data(command.tab_id))

            case messages.ClearTab():
                if command.tab_id is None:
                    log.warn("Clear requested without a tab id")
                    return messages.MessageResponse(success=False, error=NO_TAB_ID_ERROR)
                self.sessions.clear_tab(command.tab_id)
                return messages.MessageResponse(success=True)

            case _:
                assert_never(command)
