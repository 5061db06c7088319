"""Pydantic models for parsed cookies and their risk explanations."""

from __future__ import annotations

from typing import Literal

import pydantic

from network_clarity.utils import serialization

CookieCategory = Literal["essential", "functional", "analytics", "advertising", "tracking", "unknown"]
CookieRisk = Literal["low", "medium", "high"]


class CookieExplanation(pydantic.BaseModel):
    """Plain-language purpose and risk tier for a cookie name."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True, frozen=True
    )

    name: str
    category: CookieCategory
    description: str
    risk: CookieRisk


class CategoryInfo(pydantic.BaseModel):
    """Display label and description for a cookie category."""

    model_config = pydantic.ConfigDict(frozen=True)

    label: str
    description: str


class ParsedCookie(pydantic.BaseModel):
    """One ``name=value`` pair from a ``Cookie`` request header."""

    model_config = serialization.CAMEL_CASE_CONFIG

    name: str
    value: str = ""


class ParsedSetCookie(ParsedCookie):
    """One ``Set-Cookie`` response header value."""

    attributes: dict[str, str] = pydantic.Field(default_factory=dict)

    @property
    def secure(self) -> bool:
        """Whether the ``Secure`` flag is present."""
        return "secure" in self.attributes

    @property
    def http_only(self) -> bool:
        """Whether the ``HttpOnly`` flag is present."""
        return "httponly" in self.attributes

    @property
    def same_site(self) -> str:
        """The ``SameSite`` value, or ``"none specified"`` when absent."""
        return self.attributes.get("samesite", "none specified")


class ExplainedCookie(pydantic.BaseModel):
    """A cookie sent with a request, with its explanation."""

    model_config = serialization.CAMEL_CASE_CONFIG

    name: str
    value: str
    explanation: CookieExplanation


class ExplainedSetCookie(ExplainedCookie):
    """A cookie set by a response, with display-only attribute flags."""

    attributes: dict[str, str] = pydantic.Field(default_factory=dict)
    secure: bool = False
    http_only: bool = False
    same_site: str = "none specified"


class CookieReport(pydantic.BaseModel):
    """Cookie breakdown for one request/response pair."""

    model_config = serialization.CAMEL_CASE_CONFIG

    sent: list[ExplainedCookie] = pydantic.Field(default_factory=list)
    received: list[ExplainedSetCookie] = pydantic.Field(default_factory=list)
    category_counts: dict[str, int] = pydantic.Field(default_factory=dict)
    risk_counts: dict[str, int] = pydantic.Field(
        default_factory=lambda: {"low": 0, "medium": 0, "high": 0}
    )
