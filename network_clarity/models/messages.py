"""Command variants accepted by the session dispatcher, and its responses.

Every operation the host or the UI can ask of the engine is one
variant of the ``Command`` discriminated union, keyed on ``type``.
"""

from __future__ import annotations

from typing import Annotated, Literal

import pydantic

from network_clarity.models import cookies as cookie_models
from network_clarity.models import pii as pii_models
from network_clarity.models import tracking
from network_clarity.utils import serialization


class _Command(pydantic.BaseModel):
    model_config = serialization.CAMEL_CASE_CONFIG


# ── Interception feed events ────────────────────────────────────


class BeginRequest(_Command):
    """A request was initiated in a tab."""

    type: Literal["begin"] = "begin"
    request_id: str
    url: str
    method: str = "GET"
    resource_type: str = "other"
    tab_id: int
    timestamp: float


class RecordRequestHeaders(_Command):
    """Request headers were sent."""

    type: Literal["request_headers"] = "request_headers"
    request_id: str
    tab_id: int
    headers: list[tracking.Header] = pydantic.Field(default_factory=list)


class RecordResponseHeaders(_Command):
    """Response headers were received."""

    type: Literal["response_headers"] = "response_headers"
    request_id: str
    tab_id: int
    headers: list[tracking.Header] = pydantic.Field(default_factory=list)


class CompleteRequest(_Command):
    """A request finished with a status code."""

    type: Literal["completed"] = "completed"
    request_id: str
    tab_id: int
    status_code: int = 0
    timestamp: float


class TabNavigated(_Command):
    """A tab started loading a new page."""

    type: Literal["tab_navigated"] = "tab_navigated"
    tab_id: int
    url: str


class TabClosed(_Command):
    """A tab was closed."""

    type: Literal["tab_closed"] = "tab_closed"
    tab_id: int


# ── UI queries ──────────────────────────────────────────────────


class GetTabData(_Command):
    """Ask for the aggregated session of a tab."""

    type: Literal["get_tab_data"] = "get_tab_data"
    tab_id: int | None = None


class ClearTab(_Command):
    """Discard the records of a tab without navigating."""

    type: Literal["clear_tab"] = "clear_tab"
    tab_id: int | None = None


Command = Annotated[
    BeginRequest
    | RecordRequestHeaders
    | RecordResponseHeaders
    | CompleteRequest
    | TabNavigated
    | TabClosed
    | GetTabData
    | ClearTab,
    pydantic.Field(discriminator="type"),
]

COMMAND_ADAPTER: pydantic.TypeAdapter[Command] = pydantic.TypeAdapter(Command)


class MessageResponse(pydantic.BaseModel):
    """Reply to a dispatched command.

    ``data`` is only populated for ``get_tab_data`` and is ``None``
    when the tab has no session.
    """

    model_config = serialization.CAMEL_CASE_CONFIG

    success: bool
    data: tracking.TabData | None = None
    error: str | None = None


# ── Analyzer requests ───────────────────────────────────────────


class PIIAnalysisRequest(pydantic.BaseModel):
    """Content of one request to scan for personal data."""

    model_config = serialization.CAMEL_CASE_CONFIG

    url: str = ""
    request_body: str | None = None
    response_body: str | None = None


class CookieAnalysisRequest(pydantic.BaseModel):
    """Cookie headers of one request."""

    model_config = serialization.CAMEL_CASE_CONFIG

    cookie_header: str | None = None
    set_cookie_headers: list[str] = pydantic.Field(default_factory=list)


class RequestInspection(pydantic.BaseModel):
    """Detail view of a selected request: bodies, personal data and cookies."""

    model_config = serialization.CAMEL_CASE_CONFIG

    record: tracking.NetworkRequestRecord
    request_body: str | None = None
    request_body_mime_type: str | None = None
    response_body: str | None = None
    pii: pii_models.PIIDetectionResult
    cookies: cookie_models.CookieReport
