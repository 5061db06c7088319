"""Tests for network_clarity.analysis.pii_detector — personal data detection."""

from __future__ import annotations

import pytest

from network_clarity.analysis import pii_detector

# ── Validators ──────────────────────────────────────────────────


class TestIsValidCreditCard:
    """Tests for is_valid_credit_card()."""

    @pytest.mark.parametrize(
        "number",
        ["4111111111111111", "5500000000000004", "378282246310005", "4111 1111 1111 1111"],
    )
    def test_valid_numbers(self, number: str) -> None:
        assert pii_detector.is_valid_credit_card(number) is True

    def test_luhn_failure(self) -> None:
        assert pii_detector.is_valid_credit_card("4111111111111112") is False

    @pytest.mark.parametrize("number", ["411111111111", "41111111111111111111"])
    def test_length_bounds(self, number: str) -> None:
        assert pii_detector.is_valid_credit_card(number) is False


class TestIsValidSsn:
    """Tests for is_valid_ssn()."""

    @pytest.mark.parametrize("value", ["123456789", "123-45-6789", "123 45 6789"])
    def test_accepts_non_reserved(self, value: str) -> None:
        assert pii_detector.is_valid_ssn(value) is True

    @pytest.mark.parametrize(
        "value",
        ["000123456", "666123456", "912345678", "111111111", "12345678", "1234567890", "12a456789"],
    )
    def test_rejects(self, value: str) -> None:
        assert pii_detector.is_valid_ssn(value) is False


class TestIsValidPhone:
    """Tests for is_valid_phone()."""

    @pytest.mark.parametrize("value", ["555-123-4567", "(555) 123-4567", "+1 555 123 4567"])
    def test_accepts_ten_or_eleven_digits(self, value: str) -> None:
        assert pii_detector.is_valid_phone(value) is True

    @pytest.mark.parametrize("value", ["555-1234", "123456789012"])
    def test_rejects_other_lengths(self, value: str) -> None:
        assert pii_detector.is_valid_phone(value) is False


# ── Masking ─────────────────────────────────────────────────────


class TestMaskValue:
    """Tests for mask_value()."""

    def test_email(self) -> None:
        assert pii_detector.mask_value("jane.doe@example.com", "email") == "ja***@example.com"

    def test_phone_keeps_separators_and_last_four(self) -> None:
        assert pii_detector.mask_value("+1 (555) 123-4567", "phone") == "+* (***) ***-4567"

    def test_credit_card(self) -> None:
        assert pii_detector.mask_value("4111111111111111", "credit_card") == "**** **** **** 1111"

    def test_ssn(self) -> None:
        assert pii_detector.mask_value("123-45-6789", "ssn") == "***-**-6789"

    def test_ip_unmasked(self) -> None:
        assert pii_detector.mask_value("192.168.1.20", "ip_address") == "192.168.1.20"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("Jonathan", "Jo***an"), ("abcde", "ab***de"), ("abcd", "***"), ("Jo", "***")],
    )
    def test_fallback(self, value: str, expected: str) -> None:
        assert pii_detector.mask_value(value, "name") == expected


# ── Context ─────────────────────────────────────────────────────


class TestFindContext:
    """Tests for find_context()."""

    def test_field_before_value(self) -> None:
        content = '{"email":"jane.doe@example.com"}'
        assert pii_detector.find_context(content, content.index("jane")) == "email"

    def test_field_outside_lookback(self) -> None:
        content = "ssn: " + "x" * 60 + "123-45-6789"
        assert pii_detector.find_context(content, content.index("123")) == ""

    def test_no_field(self) -> None:
        assert pii_detector.find_context("plain text 555-123-4567", 11) == ""


# ── Detection ───────────────────────────────────────────────────


class TestDetectPii:
    """Tests for detect_pii()."""

    def test_json_email(self) -> None:
        matches = pii_detector.detect_pii('{"email":"jane.doe@example.com"}', "request")
        assert len(matches) == 1
        match = matches[0]
        assert match.type == "email"
        assert match.value == "ja***@example.com"
        assert match.original_value == "jane.doe@example.com"
        assert match.context == "email"
        assert match.location == "request"

    def test_phone(self) -> None:
        matches = pii_detector.detect_pii("call 555-123-4567 now", "response")
        assert [(m.type, m.value) for m in matches] == [("phone", "***-***-4567")]

    def test_credit_card_validated(self) -> None:
        matches = pii_detector.detect_pii("card=4111111111111111", "request")
        cards = [m for m in matches if m.type == "credit_card"]
        assert len(cards) == 1
        assert cards[0].value == "**** **** **** 1111"
        assert cards[0].context == "card"

    def test_credit_card_failing_luhn_not_reported(self) -> None:
        matches = pii_detector.detect_pii("card=4111111111111112", "request")
        assert not [m for m in matches if m.type == "credit_card"]

    def test_ssn(self) -> None:
        matches = pii_detector.detect_pii("ssn: 123-45-6789", "request")
        assert [(m.type, m.value, m.context) for m in matches] == [("ssn", "***-**-6789", "ssn")]

    @pytest.mark.parametrize("value", ["000-12-3456", "666-12-3456", "912-34-5678"])
    def test_reserved_ssn_not_reported(self, value: str) -> None:
        assert pii_detector.detect_pii(f"ssn: {value}", "request") == []

    def test_ip_address(self) -> None:
        matches = pii_detector.detect_pii("client 192.168.1.20 connected", "response")
        assert [(m.type, m.value) for m in matches] == [("ip_address", "192.168.1.20")]

    def test_name_after_field_token(self) -> None:
        matches = pii_detector.detect_pii("first_name=Jonathan&last_name=Smithson", "request")
        assert [(m.type, m.original_value) for m in matches] == [
            ("name", "Jonathan"),
            ("name", "Smithson"),
        ]
        assert matches[0].value == "Jo***an"

    def test_free_text_name_not_reported(self) -> None:
        assert pii_detector.detect_pii("Hello Jonathan Smithson", "response") == []

    def test_address_after_field_token(self) -> None:
        matches = pii_detector.detect_pii('{"street": "221B Baker Street"}', "request")
        assert len(matches) == 1
        assert matches[0].type == "address"
        assert matches[0].original_value == "221B Baker Street"
        assert matches[0].context == "street"

    def test_duplicate_values_reported_once(self) -> None:
        content = "a@example.com b@example.com A@EXAMPLE.COM"
        matches = pii_detector.detect_pii(content, "response")
        assert [m.original_value for m in matches] == ["a@example.com", "b@example.com"]

    def test_each_call_starts_fresh(self) -> None:
        first = pii_detector.detect_pii("a@example.com", "request")
        second = pii_detector.detect_pii("a@example.com", "response")
        assert [m.location for m in first + second] == ["request", "response"]

    def test_empty_content(self) -> None:
        assert pii_detector.detect_pii("", "request") == []


class TestRiskLevel:
    """Tests for risk_level_for() via analyze_pii()."""

    def test_none(self) -> None:
        assert pii_detector.analyze_pii(None, None, "https://example.com/").risk_level == "none"

    def test_low(self) -> None:
        result = pii_detector.analyze_pii('{"email":"jane.doe@example.com"}', None, "https://example.com/")
        assert result.risk_level == "low"

    def test_medium(self) -> None:
        result = pii_detector.analyze_pii("email=a.b@example.com phone=555-123-4567", None, "https://example.com/")
        assert result.risk_level == "medium"

    def test_high(self) -> None:
        result = pii_detector.analyze_pii("ssn=123-45-6789 card=4111111111111111", None, "https://example.com/")
        assert result.risk_level == "high"


class TestAnalyzePii:
    """Tests for analyze_pii()."""

    def test_no_pii(self) -> None:
        result = pii_detector.analyze_pii('{"ok":true}', "<html></html>", "https://example.com/")
        assert result.has_pii is False
        assert result.matches == []
        assert result.summary == "No personal data detected"

    def test_same_value_reported_per_location(self) -> None:
        result = pii_detector.analyze_pii(
            '{"email":"jane.doe@example.com"}',
            None,
            "https://example.com/signup?email=jane.doe@example.com",
        )
        assert [m.location for m in result.matches] == ["url", "request"]
        assert result.risk_level == "medium"

    def test_locations_and_summary(self) -> None:
        result = pii_detector.analyze_pii(
            "email=a.b@example.com",
            '{"phone":"555-123-4567"}',
            "https://example.com/",
        )
        assert [(m.type, m.location) for m in result.matches] == [("email", "request"), ("phone", "response")]
        assert result.summary == "Found: Email Address, Phone Number"
        assert result.has_pii is True


class TestGetPiiTypeName:
    """Tests for get_pii_type_name()."""

    def test_known(self) -> None:
        assert pii_detector.get_pii_type_name("ssn") == "Social Security #"

    def test_unknown(self) -> None:
        assert pii_detector.get_pii_type_name("passport") == "Personal Data"
