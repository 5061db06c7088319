"""Tests for network_clarity.utils.url — domain extraction and classification."""

from __future__ import annotations

import pytest

from network_clarity.utils.url import classify_request, extract_domain, get_base_domain, is_third_party

# ── extract_domain ──────────────────────────────────────────────


class TestExtractDomain:
    """Tests for extract_domain()."""

    def test_simple_url(self) -> None:
        assert extract_domain("https://example.com/path") == "example.com"

    def test_url_with_port(self) -> None:
        assert extract_domain("https://example.com:8080/path") == "example.com"

    def test_url_with_subdomain(self) -> None:
        assert extract_domain("https://www.example.com/path") == "www.example.com"

    def test_lowercases_host(self) -> None:
        assert extract_domain("https://WWW.Example.COM/") == "www.example.com"

    def test_invalid_url_returns_empty(self) -> None:
        assert extract_domain("not a url") == ""

    def test_empty_string_returns_empty(self) -> None:
        assert extract_domain("") == ""

    def test_url_without_scheme(self) -> None:
        # urlparse without scheme treats the whole thing as path
        assert extract_domain("example.com") == ""

    def test_malformed_ipv6_returns_empty(self) -> None:
        assert extract_domain("http://[::1/") == ""

    def test_deeply_nested_subdomain(self) -> None:
        assert extract_domain("https://a.b.c.example.com") == "a.b.c.example.com"


# ── get_base_domain ─────────────────────────────────────────────


class TestGetBaseDomain:
    """Tests for get_base_domain()."""

    def test_simple_domain(self) -> None:
        assert get_base_domain("example.com") == "example.com"

    def test_strips_www(self) -> None:
        assert get_base_domain("www.example.com") == "example.com"

    def test_subdomain(self) -> None:
        assert get_base_domain("sub.example.com") == "example.com"

    def test_co_uk_subdomain(self) -> None:
        assert get_base_domain("sub.example.co.uk") == "example.co.uk"

    def test_com_au_tld(self) -> None:
        assert get_base_domain("www.example.com.au") == "example.com.au"

    def test_lowercases(self) -> None:
        assert get_base_domain("WWW.EXAMPLE.COM") == "example.com"

    def test_single_label(self) -> None:
        assert get_base_domain("localhost") == "localhost"

    def test_unlisted_two_part_suffix_is_mis_split(self) -> None:
        assert get_base_domain("www.example.ac.uk") == "ac.uk"

    def test_org_uk_is_not_a_listed_suffix(self) -> None:
        assert get_base_domain("shop.example.org.uk") == "org.uk"

    @pytest.mark.parametrize(
        ("domain", "expected"),
        [
            ("co.uk", "co.uk"),
            ("example.co.uk", "example.co.uk"),
            ("deep.sub.example.co.uk", "example.co.uk"),
            ("shop.example.co.jp", "example.co.jp"),
        ],
    )
    def test_multi_part_tlds(self, domain: str, expected: str) -> None:
        assert get_base_domain(domain) == expected

    @pytest.mark.parametrize(
        "domain",
        ["a.b.c.example.com", "www.news.bbc.co.uk", "cdn.example.com.br", "localhost", "x.y"],
    )
    def test_idempotent(self, domain: str) -> None:
        once = get_base_domain(domain)
        assert get_base_domain(once) == once


# ── is_third_party ──────────────────────────────────────────────


class TestIsThirdParty:
    """Tests for is_third_party()."""

    def test_same_url(self) -> None:
        assert is_third_party("https://example.com/page", "https://example.com/page") is False

    def test_subdomain_same_base(self) -> None:
        assert is_third_party("https://cdn.example.com/script.js", "https://www.example.com/page") is False

    def test_different_domain(self) -> None:
        assert is_third_party("https://tracker.com/pixel", "https://example.com/page") is True

    def test_co_uk_same_base(self) -> None:
        assert is_third_party("https://cdn.bbc.co.uk/script.js", "https://www.bbc.co.uk/") is False

    def test_org_uk_sites_share_a_base(self) -> None:
        assert is_third_party("https://a.org.uk/x.js", "https://b.org.uk/") is False

    def test_unknown_page_is_not_third_party(self) -> None:
        assert is_third_party("https://tracker.com/pixel", "") is False

    def test_unknown_request_is_not_third_party(self) -> None:
        assert is_third_party("data:image/png;base64,AAAA", "https://example.com/") is False

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            ("https://tracker.com/p", "https://example.com/"),
            ("https://cdn.example.com/a.js", "https://www.example.com/"),
            ("https://x.co.uk/", "https://y.co.uk/"),
        ],
    )
    def test_symmetric(self, a: str, b: str) -> None:
        assert is_third_party(a, b) == is_third_party(b, a)


# ── classify_request ────────────────────────────────────────────


class TestClassifyRequest:
    """Tests for classify_request()."""

    def test_third_party_tracker(self) -> None:
        result = classify_request("https://pagead2.googlesyndication.com/ads.js", "https://example.com/")
        assert result.domain == "pagead2.googlesyndication.com"
        assert result.is_third_party is True
        assert result.is_tracker is True

    def test_first_party(self) -> None:
        result = classify_request("https://static.example.com/app.css", "https://www.example.com/")
        assert result.domain == "static.example.com"
        assert result.is_third_party is False
        assert result.is_tracker is False

    def test_unparsable_url_fails_closed(self) -> None:
        result = classify_request("not a url", "https://example.com/")
        assert result.domain == ""
        assert result.is_third_party is False
        assert result.is_tracker is False
