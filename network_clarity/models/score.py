"""Pydantic models for the per-tab privacy score."""

from __future__ import annotations

from typing import Literal

import pydantic

from network_clarity.utils import serialization

PrivacyGrade = Literal["A", "B", "C", "D", "F"]


class PenaltyBreakdown(pydantic.BaseModel):
    """Points deducted per penalty category."""

    model_config = serialization.CAMEL_CASE_CONFIG

    tracker_penalty: int = 0
    third_party_penalty: int = 0
    domain_penalty: int = 0


class PrivacyScoreResult(pydantic.BaseModel):
    """Score, grade and display issues for a browsing context."""

    model_config = serialization.CAMEL_CASE_CONFIG

    score: int = 100
    grade: PrivacyGrade = "A"
    breakdown: PenaltyBreakdown = pydantic.Field(default_factory=PenaltyBreakdown)
    summary: str = ""
    issues: list[str] = pydantic.Field(default_factory=list)
