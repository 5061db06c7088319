"""Tests for network_clarity.utils.serialization — snake_to_camel conversion."""

from __future__ import annotations

import pydantic
import pytest

from network_clarity.utils.serialization import CAMEL_CASE_CONFIG, snake_to_camel


class TestSnakeToCamel:
    """Tests for snake_to_camel()."""

    @pytest.mark.parametrize(
        ("input_str", "expected"),
        [
            ("my_field_name", "myFieldName"),
            ("single", "single"),
            ("a_b_c", "aBC"),
            ("is_third_party", "isThirdParty"),
            ("total_requests", "totalRequests"),
            ("request_body_mime_type", "requestBodyMimeType"),
            ("http_only", "httpOnly"),
            ("same_site", "sameSite"),
        ],
    )
    def test_conversion(self, input_str: str, expected: str) -> None:
        assert snake_to_camel(input_str) == expected

    def test_empty_string(self) -> None:
        assert snake_to_camel("") == ""


class TestCamelCaseConfig:
    """Tests for the shared model config."""

    class _Model(pydantic.BaseModel):
        model_config = CAMEL_CASE_CONFIG

        page_url: str = ""

    def test_accepts_both_spellings(self) -> None:
        assert self._Model(pageUrl="a").page_url == "a"
        assert self._Model(page_url="b").page_url == "b"

    def test_dumps_camel_case(self) -> None:
        assert self._Model(page_url="x").model_dump(by_alias=True) == {"pageUrl": "x"}
