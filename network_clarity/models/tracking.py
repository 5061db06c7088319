"""Pydantic models for observed requests, per-tab statistics and HAR-style panel entries."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, get_args

import pydantic

from network_clarity.utils import serialization

RequestType = Literal[
    # Interception feed vocabulary
    "main_frame",
    "sub_frame",
    "stylesheet",
    "script",
    "image",
    "font",
    "object",
    "xmlhttprequest",
    "ping",
    "csp_report",
    "media",
    "websocket",
    # Inspection panel vocabulary
    "document",
    "xhr",
    "fetch",
    "manifest",
    "beacon",
    "prefetch",
    "other",
]

REQUEST_TYPES: frozenset[str] = frozenset(get_args(RequestType))


def normalize_resource_type(value: object) -> str:
    """Map any incoming resource type onto ``RequestType``, defaulting to ``other``."""
    if isinstance(value, str) and value.lower() in REQUEST_TYPES:
        return value.lower()
    return "other"


class Header(pydantic.BaseModel):
    """A single HTTP header as observed by the host."""

    model_config = serialization.CAMEL_CASE_CONFIG

    name: str
    value: str = ""

    @pydantic.field_validator("value", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value


class RequestTiming(pydantic.BaseModel):
    """Start/end timestamps in milliseconds since the epoch."""

    model_config = serialization.CAMEL_CASE_CONFIG

    start_time: float
    end_time: float | None = None
    duration: float | None = None


class RequestClassification(pydantic.BaseModel):
    """Domain and party/tracker flags for a single request URL."""

    model_config = serialization.CAMEL_CASE_CONFIG

    domain: str
    is_third_party: bool = False
    is_tracker: bool = False


class NetworkRequestRecord(pydantic.BaseModel):
    """Canonical record for one observed request.

    ``status`` stays ``0`` until a completion is seen; known values
    are never overwritten with unknown ones.
    """

    model_config = serialization.CAMEL_CASE_CONFIG

    id: str
    url: str
    method: str = "GET"
    type: RequestType = "other"
    status: int = 0
    status_text: str = ""
    domain: str = ""
    is_third_party: bool = False
    is_tracker: bool = False
    timing: RequestTiming
    request_headers: list[Header] | None = None
    response_headers: list[Header] | None = None
    request_body: str | None = None
    response_body: str | None = None
    size: int | None = None
    mime_type: str | None = None

    @pydantic.field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: object) -> str:
        return normalize_resource_type(value)

    def apply_classification(self, classification: RequestClassification) -> None:
        """Overwrite domain and party/tracker flags in place."""
        self.domain = classification.domain
        self.is_third_party = classification.is_third_party
        self.is_tracker = classification.is_tracker

    def find_header(self, name: str, *, response: bool = False) -> list[str]:
        """Return every value of header *name* (case-insensitive)."""
        headers = self.response_headers if response else self.request_headers
        wanted = name.lower()
        return [h.value for h in headers or [] if h.name.lower() == wanted]


class TabStats(pydantic.BaseModel):
    """Aggregate statistics derived from a tab's request records."""

    model_config = serialization.CAMEL_CASE_CONFIG

    total_requests: int = 0
    first_party_count: int = 0
    third_party_count: int = 0
    tracker_count: int = 0
    tracker_domains: list[str] = pydantic.Field(default_factory=list)
    unique_domains: list[str] = pydantic.Field(default_factory=list)


class TabData(pydantic.BaseModel):
    """Snapshot of one tab session as handed to the UI."""

    model_config = serialization.CAMEL_CASE_CONFIG

    requests: list[NetworkRequestRecord] = pydantic.Field(default_factory=list)
    stats: TabStats = pydantic.Field(default_factory=TabStats)
    page_url: str = ""
    page_domain: str = ""


# ============================================================================
# HAR-style entries from the inspection panel
# ============================================================================


class HarPostParam(pydantic.BaseModel):
    """A single form field of a HAR ``postData`` block."""

    model_config = serialization.CAMEL_CASE_CONFIG

    name: str
    value: str | None = None


class HarPostData(pydantic.BaseModel):
    """Request body as captured in HAR."""

    model_config = serialization.CAMEL_CASE_CONFIG

    mime_type: str = ""
    text: str | None = None
    params: list[HarPostParam] = pydantic.Field(default_factory=list)


class HarRequest(pydantic.BaseModel):
    """Request half of a HAR entry."""

    model_config = serialization.CAMEL_CASE_CONFIG

    url: str
    method: str = "GET"
    headers: list[Header] = pydantic.Field(default_factory=list)
    post_data: HarPostData | None = None


class HarContent(pydantic.BaseModel):
    """Response body metadata in HAR (the body itself is fetched lazily)."""

    model_config = serialization.CAMEL_CASE_CONFIG

    size: int | None = None
    mime_type: str = ""


class HarResponse(pydantic.BaseModel):
    """Response half of a HAR entry."""

    model_config = serialization.CAMEL_CASE_CONFIG

    status: int = 0
    status_text: str = ""
    headers: list[Header] = pydantic.Field(default_factory=list)
    content: HarContent = pydantic.Field(default_factory=HarContent)


class HarEntry(pydantic.BaseModel):
    """A finished request as reported by the inspection panel."""

    model_config = serialization.CAMEL_CASE_CONFIG

    started_date_time: datetime
    time: float = 0
    request: HarRequest
    response: HarResponse = pydantic.Field(default_factory=HarResponse)
    resource_type: str = pydantic.Field(default="other", alias="_resourceType")

    def request_body_text(self) -> tuple[str | None, str | None]:
        """Return ``(body, mime_type)`` from ``postData``.

        Form posts without raw text are rendered as ``name=value``
        lines.
        """
        post = self.request.post_data
        if post is None:
            return None, None
        if post.text:
            return post.text, post.mime_type or None
        if post.params:
            body = "\n".join(f"{p.name}={p.value or ''}" for p in post.params)
            return body, "application/x-www-form-urlencoded"
        return None, None
