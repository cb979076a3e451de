"""Tests for infrastructure converters."""

from __future__ import annotations

from sievarr.infrastructure.common.converters import parse_number, try_to_number


class TestTryToNumber:
    def test_none_returns_none(self) -> None:
        assert try_to_number(None) is None

    def test_int_passthrough(self) -> None:
        assert try_to_number(42) == 42

    def test_string_digits(self) -> None:
        assert try_to_number("12") == 12

    def test_negative_with_whitespace(self) -> None:
        assert try_to_number(" -3 ") == -3

    def test_float_string(self) -> None:
        assert try_to_number("4.5") == 4.5

    def test_thousands_separator_is_left_alone(self) -> None:
        assert try_to_number("1,234") == "1,234"

    def test_text_is_left_alone(self) -> None:
        assert try_to_number("/t/1") == "/t/1"

    def test_bool_is_left_alone(self) -> None:
        assert try_to_number(True) is True


class TestParseNumber:
    def test_none_returns_none(self) -> None:
        assert parse_number(None) is None

    def test_string_with_commas(self) -> None:
        assert parse_number("1,234") == 1234

    def test_surrounding_text(self) -> None:
        assert parse_number("Seeders: 56") == 56

    def test_float(self) -> None:
        assert parse_number("3.5k") == 3.5

    def test_empty_string_returns_none(self) -> None:
        assert parse_number("") is None

    def test_non_numeric_string_returns_none(self) -> None:
        assert parse_number("abc") is None
