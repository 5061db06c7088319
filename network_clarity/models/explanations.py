"""Pydantic models for plain-language status, type and header explanations."""

from __future__ import annotations

from typing import Literal

import pydantic

from network_clarity.utils import serialization

HeaderCategory = Literal["security", "caching", "content", "auth", "tracking", "other"]


class StatusExplanation(pydantic.BaseModel):
    """What an HTTP status code means for a non-technical reader."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True, frozen=True
    )

    summary: str
    detail: str
    is_error: bool = False
    is_warning: bool = False


class TypeExplanation(pydantic.BaseModel):
    """What a resource type is used for."""

    model_config = pydantic.ConfigDict(frozen=True)

    name: str
    description: str


class HeaderExplanation(pydantic.BaseModel):
    """What a header carries and which concern it belongs to."""

    model_config = pydantic.ConfigDict(frozen=True)

    name: str
    description: str
    category: HeaderCategory
