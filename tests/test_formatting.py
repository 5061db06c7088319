"""Tests for network_clarity.utils.formatting — display helpers."""

from __future__ import annotations

import pytest

from network_clarity.utils import formatting


class TestFormatBytes:
    @pytest.mark.parametrize(
        ("size", "expected"),
        [(0, "0 B"), (-5, "0 B"), (500, "500 B"), (1024, "1 KB"), (1536, "1.5 KB"), (1_048_576, "1 MB")],
    )
    def test_format(self, size: int, expected: str) -> None:
        assert formatting.format_bytes(size) == expected

    def test_caps_at_gigabytes(self) -> None:
        assert formatting.format_bytes(5 * 1024**4) == "5120 GB"


class TestFormatDuration:
    @pytest.mark.parametrize(
        ("ms", "expected"),
        [(0, "0 ms"), (250.4, "250 ms"), (250.5, "251 ms"), (1500, "1.50 s"), (2_500, "2.50 s")],
    )
    def test_format(self, ms: float, expected: str) -> None:
        assert formatting.format_duration(ms) == expected


class TestTruncateUrl:
    def test_short_url_unchanged(self) -> None:
        assert formatting.truncate_url("https://example.com/a") == "https://example.com/a"

    def test_long_path_keeps_both_ends(self) -> None:
        url = "https://example.com/" + "a" * 100
        assert formatting.truncate_url(url) == "example.com/" + "a" * 17 + "..." + "a" * 18

    def test_medium_path_drops_scheme(self) -> None:
        url = "https://static.assets.example-content-delivery.com/js/app.js?v=3"
        assert formatting.truncate_url(url) == "static.assets.example-content-delivery.com/js/app.js?v=3"

    def test_non_url_cut(self) -> None:
        assert formatting.truncate_url("x" * 70) == "x" * 57 + "..."


class TestGetRequestTypeName:
    def test_known(self) -> None:
        assert formatting.get_request_type_name("xmlhttprequest") == "API Call"

    def test_unknown_passthrough(self) -> None:
        assert formatting.get_request_type_name("beacon") == "beacon"
