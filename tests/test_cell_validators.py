"""
tests/test_cell_validators.py

Pytest unit tests for single-cell checks and transformers.
"""

from __future__ import annotations

from datetime import date

import pytest

from app.validators.cell_validators import (
    is_blank,
    is_false_token,
    parse_date,
    all_of,
    to_boolean,
    to_integer,
    to_number,
    to_tags,
    validate_boolean,
    validate_date,
    validate_email,
    validate_enum,
    validate_integer,
    validate_max_length,
    validate_number,
    validate_number_range,
    validate_phone,
    validate_tags,
)


@pytest.mark.parametrize("value", [None, "", "   "])
def test_blank_values_pass_every_check(value: object) -> None:
    for check in (
        validate_email,
        validate_date,
        validate_phone,
        validate_boolean,
        validate_tags,
        validate_number,
        validate_integer,
        validate_number_range(0, 100),
        validate_max_length(3),
        validate_enum(("a", "b")),
    ):
        assert check(value) is None
    assert is_blank(value)


class TestEmail:
    def test_accepts_plain_address(self) -> None:
        assert validate_email("jane.smith@example.com") is None

    @pytest.mark.parametrize("value", ["jane", "jane@", "jane@example", "ja ne@example.com"])
    def test_rejects_malformed_address(self, value: str) -> None:
        assert validate_email(value) == "Invalid email address format"


class TestDate:
    def test_accepts_iso_date(self) -> None:
        assert validate_date("1990-01-31") is None

    def test_rejects_other_formats(self) -> None:
        assert validate_date("31/01/1990") == "Invalid date format. Expected YYYY-MM-DD"

    def test_rejects_impossible_calendar_date(self) -> None:
        assert validate_date("1990-02-30") == "Invalid date"

    def test_parse_date(self) -> None:
        assert parse_date("2022-03-15") == date(2022, 3, 15)
        assert parse_date("") is None
        assert parse_date("not a date") is None


class TestPhone:
    @pytest.mark.parametrize("value", ["+919876543210", "020 7946 0958", "555-0100"])
    def test_accepts_digits_spaces_dashes_and_plus(self, value: str) -> None:
        assert validate_phone(value) is None

    def test_rejects_letters(self) -> None:
        assert validate_phone("call me") == "Invalid phone number format"


class TestBoolean:
    @pytest.mark.parametrize("value", ["true", "FALSE", "Yes", "no", "1", "0"])
    def test_accepts_known_tokens(self, value: str) -> None:
        assert validate_boolean(value) is None

    def test_rejects_unknown_token(self) -> None:
        assert validate_boolean("maybe") is not None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("true", True), ("Yes", True), ("1", True), ("false", False), ("no", False), ("", False)],
    )
    def test_to_boolean(self, value: str, expected: bool) -> None:
        assert to_boolean(value) is expected

    def test_false_token_is_distinct_from_blank(self) -> None:
        assert is_false_token("0")
        assert is_false_token("No")
        assert not is_false_token("")
        assert not is_false_token("true")


class TestEnum:
    def test_membership_is_case_sensitive(self) -> None:
        check = validate_enum(("full_time", "part_time"))
        assert check("full_time") is None
        assert check("Full_Time") == "Invalid value. Expected one of: full_time, part_time"


class TestTags:
    def test_accepts_quoted_list(self) -> None:
        assert validate_tags('"tech, engineering"') is None

    def test_rejects_symbols(self) -> None:
        assert validate_tags("tech;ops") is not None

    def test_to_tags_splits_trims_and_drops_empties(self) -> None:
        assert to_tags('"tech, engineering,, "') == ["tech", "engineering"]
        assert to_tags("") == []


class TestNumber:
    def test_accepts_integer_and_decimal(self) -> None:
        assert validate_number("450") is None
        assert validate_number("85.5") is None

    @pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", "1e400", "-1e400"])
    def test_rejects_non_finite_or_text(self, value: str) -> None:
        assert validate_number(value) == "Invalid number format"

    def test_to_number_keeps_integers_integral(self) -> None:
        assert to_number("450") == 450
        assert isinstance(to_number("450"), int)
        assert to_number("85.5") == pytest.approx(85.5)


class TestInteger:
    @pytest.mark.parametrize("value", ["450", "0", "2.0", "1e3"])
    def test_accepts_whole_numbers(self, value: str) -> None:
        assert validate_integer(value) is None

    def test_rejects_fractional_value(self) -> None:
        assert validate_integer("2.75") == "Invalid whole number. Decimals are not allowed"

    def test_rejects_text_and_overflow_as_number_format(self) -> None:
        assert validate_integer("many") == "Invalid number format"
        assert validate_integer("1e400") == "Invalid number format"

    def test_to_integer(self) -> None:
        assert to_integer("450") == 450
        assert to_integer("2.0") == 2
        assert to_integer("") == 0


class TestNumberRange:
    @pytest.mark.parametrize("value", ["0", "100", "85.5", "0.01"])
    def test_accepts_bounds_inclusive(self, value: str) -> None:
        assert validate_number_range(0, 100)(value) is None

    @pytest.mark.parametrize("value", ["-0.5", "100.01", "1000", "1e300"])
    def test_rejects_out_of_range(self, value: str) -> None:
        assert validate_number_range(0, 100)(value) == "Value must be between 0 and 100"

    def test_format_errors_come_first(self) -> None:
        assert validate_number_range(0, 100)("high") == "Invalid number format"

    def test_integer_range_rejects_fractions(self) -> None:
        check = validate_number_range(0, 10, integer=True)
        assert check("3") is None
        assert check("3.5") == "Invalid whole number. Decimals are not allowed"
        assert check("11") == "Value must be between 0 and 10"


class TestLengthAndComposition:
    def test_max_length_counts_trimmed_value(self) -> None:
        check = validate_max_length(5)
        assert check("  abcde  ") is None
        assert check("abcdef") == "Value is too long. Maximum length is 5 characters"

    def test_all_of_returns_first_message(self) -> None:
        check = all_of(validate_phone, validate_max_length(30))
        assert check("+919876543210") is None
        assert check("call me") == "Invalid phone number format"
        assert check("1" * 40) == "Value is too long. Maximum length is 30 characters"
