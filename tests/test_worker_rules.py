"""
tests/test_worker_rules.py

Worker rule set behaviour through the tabular engine.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from app.domain.tabular import FindingCode, Severity
from app.validators.tabular_validator import TabularValidator
from app.validators.worker_rules import (
    WORKER_CSV_COLUMNS,
    WORKER_REQUIRED_COLUMNS,
    WorkerFindingCode,
    age_on,
    build_worker_rule_set,
    check_consent_contact_methods,
    check_duplicate_identifiers,
    suggest_email_domain,
)

TODAY = date(2026, 10, 17)


def _row(**overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "first_name": "John",
        "last_name": "Doe",
        "primary_phone_number": "+919876543210",
        "is_active": "true",
    }
    row.update(overrides)
    return row


@pytest.fixture()
def rule_set():
    return build_worker_rule_set(today=lambda: TODAY)


@pytest.fixture()
def validate(rule_set):
    validator = TabularValidator()

    def _validate(*rows: dict[str, Any]):
        return validator.validate(list(rows), rule_set)

    return _validate


def _codes(result, row_number: int) -> list[str]:
    return [error.code for error in result.errors_by_row().get(row_number, [])]


def test_catalogue_covers_every_rule_in_order(rule_set) -> None:
    assert rule_set.columns == tuple(column.key for column in WORKER_CSV_COLUMNS)
    assert set(WORKER_REQUIRED_COLUMNS) <= set(rule_set.columns)
    assert rule_set.header_label("first_name") == "First Name (Required)"
    assert rule_set.display_name("first_name") == "First Name"


def test_mixed_file_counts_rows_exclusively(validate) -> None:
    result = validate(
        _row(),
        _row(first_name="Bob", primary_phone_number=""),
        _row(
            first_name="Jane",
            last_name="Smith",
            primary_phone_number="+919876543212",
            is_active="false",
        ),
    )

    assert not result.success
    assert result.summary.total_rows == 3
    assert result.summary.valid_rows == 2
    assert result.summary.error_rows == 1
    assert result.summary.warning_rows == 1
    assert _codes(result, 3) == [FindingCode.REQUIRED_FIELD]
    assert result.errors_by_row()[3][0].column == "primary_phone_number"
    assert _codes(result, 4) == [WorkerFindingCode.MISSING_RELATED_FIELD]
    assert [row["first_name"] for row in result.accepted_rows] == ["John", "Jane"]
    assert result.accepted_rows[1]["is_active"] is False


def test_missing_required_column_aborts(validate) -> None:
    row = _row()
    del row["is_active"]

    result = validate(row)

    assert [error.code for error in result.errors] == [FindingCode.MISSING_COLUMN]
    assert result.errors[0].message == "Required column 'Is Active' is missing from the CSV file"
    assert result.errors[0].suggested_fix == (
        "Add a column named 'Is Active (true/false, Required)' to your CSV file"
    )


def test_short_name_is_a_warning(validate) -> None:
    result = validate(_row(first_name="J"))

    assert result.success
    finding = result.errors[0]
    assert finding.code == WorkerFindingCode.VALUE_TOO_SHORT
    assert finding.severity is Severity.WARNING
    assert finding.message == "First name should be at least 2 characters"


class TestDateOfBirth:
    def test_invalid_date_suggests_format(self, validate) -> None:
        result = validate(_row(date_of_birth="31/01/1990"))

        finding = result.errors[0]
        assert finding.code == WorkerFindingCode.INVALID_DATE
        assert finding.severity is Severity.ERROR
        assert finding.suggested_fix == "Use format YYYY-MM-DD (e.g., 1990-01-31)"

    def test_future_date_is_an_error(self, validate) -> None:
        result = validate(_row(date_of_birth="2027-01-01"))

        assert not result.success
        assert result.errors[0].code == WorkerFindingCode.FUTURE_DATE
        assert result.errors[0].message == "Date of birth cannot be in the future"

    def test_one_day_before_eighteenth_birthday_is_flagged(self, validate) -> None:
        result = validate(_row(date_of_birth="2008-10-18"))

        assert result.success
        assert result.errors[0].code == WorkerFindingCode.AGE_UNUSUAL
        assert "under 18" in result.errors[0].message

    def test_eighteenth_birthday_is_not_flagged(self, validate) -> None:
        result = validate(_row(date_of_birth="2008-10-17"))

        assert result.errors == []
        assert result.accepted_rows[0]["date_of_birth"] == "2008-10-17"

    def test_over_one_hundred_is_flagged(self, validate) -> None:
        result = validate(_row(date_of_birth="1920-01-01"))

        assert result.success
        assert result.errors[0].message == (
            "Worker appears to be over 100 years old. Please verify date of birth."
        )

    def test_age_on_counts_whole_years(self) -> None:
        assert age_on(date(2000, 2, 29), date(2026, 2, 28)) == 25
        assert age_on(date(2000, 2, 29), date(2026, 3, 1)) == 26


class TestEmail:
    def test_typo_in_known_provider_suggests_fix(self, validate) -> None:
        result = validate(_row(email_address="john@gmial.com"))

        assert result.success
        finding = result.errors[0]
        assert finding.code == WorkerFindingCode.POSSIBLE_TYPO
        assert finding.severity is Severity.WARNING
        assert finding.suggested_fix == "john@gmail.com"
        assert result.accepted_rows[0]["email_address"] == "john@gmial.com"

    def test_unrelated_domain_is_accepted(self, validate) -> None:
        result = validate(_row(email_address="john@example.com"))

        assert result.errors == []

    def test_malformed_address_is_an_error(self, validate) -> None:
        result = validate(_row(primary_email_address="john.example.com"))

        finding = result.errors[0]
        assert finding.code == WorkerFindingCode.INVALID_EMAIL
        assert finding.suggested_fix == "Use format name@example.com"

    def test_suggestion_respects_threshold(self) -> None:
        assert suggest_email_domain("gmial.com") == "gmail.com"
        assert suggest_email_domain("gmial.com", threshold=0.95) is None
        assert suggest_email_domain("GMAIL.COM") is None


class TestCrossField:
    def test_active_worker_with_reason_is_flagged(self, validate) -> None:
        result = validate(_row(deactivation_reason="retirement"))

        finding = result.errors[0]
        assert finding.code == WorkerFindingCode.UNEXPECTED_FIELD
        assert finding.suggested_fix == "Remove deactivation reason for active workers"

    def test_inactive_worker_with_reason_is_clean(self, validate) -> None:
        result = validate(_row(is_active="no", deactivation_reason="retirement"))

        assert result.errors == []

    def test_activity_before_hire_date(self, validate) -> None:
        result = validate(
            _row(
                hire_date="2022-03-15",
                last_active_at="2021-01-01",
                last_interaction_date="2023-01-01",
                last_engagement_date="2020-05-05",
            )
        )

        assert result.success
        assert [error.column for error in result.errors] == [
            "last_active_at",
            "last_engagement_date",
        ]
        assert result.errors[0].message == "Last active date cannot be before hire date"

    def test_cross_field_checks_skip_rows_with_errors(self, validate) -> None:
        result = validate(_row(gender="unknown", deactivation_reason="retirement"))

        assert _codes(result, 2) == [FindingCode.VALIDATION_ERROR]

    def test_opted_in_without_phone_is_an_error(self) -> None:
        findings = check_consent_contact_methods(
            {"whatsapp_opt_in_status": "opted_in", "primary_phone_number": ""},
            7,
        )

        assert [finding.severity for finding in findings] == [Severity.ERROR]
        assert findings[0].row_number == 7

    def test_consent_without_any_contact_method_is_a_warning(self) -> None:
        findings = check_consent_contact_methods({"communication_consent": "yes"}, 2)

        assert [finding.code for finding in findings] == [WorkerFindingCode.LOGICAL_INCONSISTENCY]
        assert findings[0].severity is Severity.WARNING

    def test_consent_with_email_only_is_clean(self) -> None:
        findings = check_consent_contact_methods(
            {"communication_consent": "true", "email_address": "a@b.co"},
            2,
        )

        assert findings == []


class TestDuplicateIdentifiers:
    def test_repeated_external_id_is_flagged_on_every_row(self) -> None:
        findings = check_duplicate_identifiers(
            [
                (2, {"external_id": "EMP001"}),
                (3, {"external_id": "emp001"}),
                (4, {"external_id": "EMP002"}),
            ]
        )

        assert [(f.row_number, f.column) for f in findings] == [
            (2, "external_id"),
            (3, "external_id"),
        ]
        assert findings[0].message == "External ID 'emp001' also appears on row(s) 3"

    def test_duplicates_do_not_block_rows(self, validate) -> None:
        result = validate(
            _row(email_address="same@example.com"),
            _row(first_name="Jane", email_address="SAME@example.com"),
        )

        assert result.success
        assert result.summary.valid_rows == 2
        assert result.summary.warning_rows == 2
        assert set(result.code_counts()) == {WorkerFindingCode.DUPLICATE_IDENTIFIER}


def test_values_are_typed_after_acceptance(validate) -> None:
    result = validate(
        _row(
            tags='"tech, engineering"',
            points_balance="450",
            engagement_rate="85.5",
            communication_consent="Yes",
        )
    )

    row = result.accepted_rows[0]
    assert row["tags"] == ["tech", "engineering"]
    assert row["points_balance"] == 450
    assert row["engagement_rate"] == pytest.approx(85.5)
    assert row["communication_consent"] is True
    assert row["is_active"] is True


def test_blank_first_name_is_required(validate) -> None:
    result = validate(_row(first_name=""))

    assert _codes(result, 2) == [FindingCode.REQUIRED_FIELD]
    assert result.errors[0].column == "first_name"


class TestStorageLimits:
    @pytest.mark.parametrize(
        "column", ["engagement_rate", "wellbeing_score", "overall_wellbeing_score"]
    )
    def test_scores_outside_zero_to_one_hundred_are_rejected(self, validate, column) -> None:
        result = validate(
            _row(**{column: "1000"}),
            _row(first_name="Jane", primary_phone_number="+919876543299", **{column: "-1"}),
        )

        assert result.summary.valid_rows == 0
        assert {error.message for error in result.errors} == {"Value must be between 0 and 100"}
        assert {error.code for error in result.errors} == {FindingCode.VALIDATION_ERROR}

    def test_score_bounds_are_inclusive(self, validate) -> None:
        result = validate(_row(engagement_rate="100", wellbeing_score="0"))

        assert result.errors == []
        assert result.accepted_rows[0]["engagement_rate"] == 100

    def test_overflowing_number_is_rejected(self, validate) -> None:
        result = validate(_row(engagement_rate="1e400"))

        assert not result.success
        assert result.errors[0].message == "Invalid number format"

    @pytest.mark.parametrize("column", ["points_balance", "badges_earned_count"])
    def test_counts_must_be_whole_numbers(self, validate, column) -> None:
        result = validate(_row(**{column: "2.75"}))

        assert _codes(result, 2) == [FindingCode.VALIDATION_ERROR]
        assert result.errors[0].message == "Invalid whole number. Decimals are not allowed"
        assert result.accepted_rows == []

    def test_counts_reject_negative_values(self, validate) -> None:
        result = validate(_row(badges_earned_count="-3"))

        assert _codes(result, 2) == [FindingCode.VALIDATION_ERROR]

    def test_whole_number_count_is_typed_as_int(self, validate) -> None:
        result = validate(_row(points_balance="12.0"))

        assert result.accepted_rows[0]["points_balance"] == 12
        assert isinstance(result.accepted_rows[0]["points_balance"], int)

    def test_phone_longer_than_column_is_rejected(self, validate) -> None:
        result = validate(_row(primary_phone_number="+91 " + "9" * 36))

        assert _codes(result, 2) == [FindingCode.VALIDATION_ERROR]
        assert result.errors[0].message == (
            "Value is too long. Maximum length is 30 characters"
        )

    def test_name_longer_than_column_is_rejected(self, validate) -> None:
        result = validate(_row(last_name="D" * 121))

        assert _codes(result, 2) == [FindingCode.VALIDATION_ERROR]
        assert result.errors[0].message == "Last name must be at most 120 characters"

    def test_overlong_email_is_rejected(self, validate) -> None:
        result = validate(_row(email_address="a" * 320 + "@example.com"))

        assert _codes(result, 2) == [FindingCode.VALIDATION_ERROR]

    def test_overlong_tag_is_rejected(self, validate) -> None:
        result = validate(_row(tags="ops," + "x" * 121))

        assert result.errors[0].message == "Each tag must be at most 120 characters"
