"""Pydantic models for personal-data detection results."""

from __future__ import annotations

from typing import Literal

import pydantic

from network_clarity.utils import serialization

PIIType = Literal["email", "phone", "credit_card", "ssn", "ip_address", "name", "address"]
PIILocation = Literal["request", "response", "url"]
PIIRiskLevel = Literal["none", "low", "medium", "high"]


class PIIMatch(pydantic.BaseModel):
    """A single piece of personal data found in transit."""

    model_config = serialization.CAMEL_CASE_CONFIG

    type: PIIType
    value: str
    original_value: str
    context: str = ""
    location: PIILocation


class PIIDetectionResult(pydantic.BaseModel):
    """All matches for one request plus the aggregate risk level."""

    model_config = serialization.CAMEL_CASE_CONFIG

    has_pii: bool = False
    matches: list[PIIMatch] = pydantic.Field(default_factory=list)
    risk_level: PIIRiskLevel = "none"
    summary: str = "No personal data detected"
