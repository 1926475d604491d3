"""Unit tests for address normalization and key masking."""

import pytest

from place_resolver.lib.resolver.address import is_blank, mask_api_key, normalize_address


class TestNormalizeAddress:
    """Tests for normalize_address."""

    def test_trims_and_lowercases(self) -> None:
        assert normalize_address("  123 Main St, Grafton, WI  ") == "123 main st, grafton, wi"

    def test_case_and_whitespace_variants_collapse(self) -> None:
        variants = ["123 Main St", "123 MAIN ST", "\t123 main st\n", " 123 Main st "]
        assert {normalize_address(v) for v in variants} == {"123 main st"}

    def test_idempotent(self) -> None:
        once = normalize_address("  Lincoln Park, Milwaukee WI ")
        assert normalize_address(once) == once

    def test_interior_whitespace_preserved(self) -> None:
        assert normalize_address("123  Main St") == "123  main st"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_input(self, value: str | None) -> None:
        assert normalize_address(value) == ""


class TestIsBlank:
    """Tests for is_blank."""

    @pytest.mark.parametrize("value", [None, "", " ", "\t\n"])
    def test_blank_values(self, value: str | None) -> None:
        assert is_blank(value) is True

    def test_non_blank(self) -> None:
        assert is_blank(" x ") is False


class TestMaskApiKey:
    """Tests for mask_api_key."""

    def test_masks_middle(self) -> None:
        assert mask_api_key("AIzaSyABCDEFGH1234") == "AIza...1234"

    def test_exactly_eight_characters(self) -> None:
        assert mask_api_key("abcdefgh") == "abcd...efgh"

    @pytest.mark.parametrize("value", [None, "", "short", "1234567"])
    def test_short_or_missing_key(self, value: str | None) -> None:
        assert mask_api_key(value) == "[INVALID_KEY]"
