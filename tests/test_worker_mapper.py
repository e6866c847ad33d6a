"""
tests/test_worker_mapper.py

Mapping of accepted rows into nested worker records.
"""

from __future__ import annotations

from datetime import date

from app.domain.worker import WorkerRecord
from app.mappers.worker_mapper import WorkerMapper


def _accepted_row(**overrides):
    row = {
        "first_name": "John",
        "last_name": "Doe",
        "primary_phone_number": "+919876543210",
        "is_active": True,
    }
    row.update(overrides)
    return row


def test_minimal_row_gets_defaults(organization_id: str) -> None:
    record = WorkerMapper().to_domain_record(_accepted_row(), organization_id)

    assert isinstance(record, WorkerRecord)
    assert record.organization_id == organization_id
    assert record.label == "John Doe"
    assert record.is_active is True
    assert record.tags == ()
    assert record.contact.whatsapp_opt_in_status == "pending"
    assert record.contact.preferred_language == "en"
    assert record.contact.communication_consent is False
    assert record.employment.employment_status == "active"
    assert record.gamification.points_balance == 0
    assert record.gamification.badges_earned_count == 0
    assert record.engagement.engagement_rate is None


def test_full_row_is_nested_and_typed(organization_id: str) -> None:
    row = _accepted_row(
        external_id="EMP001",
        date_of_birth="1990-05-15",
        gender="male",
        tags=["tech", "engineering"],
        email_address="john.doe@example.com",
        whatsapp_opt_in_status="opted_in",
        preferred_language="hi",
        communication_consent=True,
        location_city="Mumbai",
        job_title="Software Engineer",
        employment_type="full_time",
        hire_date="2022-03-15",
        last_active_at="2026-10-01",
        engagement_rate=85.5,
        wellbeing_score=78,
        points_balance=450,
        badges_earned_count=5,
    )

    record = WorkerMapper().to_domain_record(row, organization_id)

    assert record.external_id == "EMP001"
    assert record.date_of_birth == date(1990, 5, 15)
    assert record.tags == ("tech", "engineering")
    assert record.contact.email_address == "john.doe@example.com"
    assert record.contact.whatsapp_opt_in_status == "opted_in"
    assert record.contact.preferred_language == "hi"
    assert record.contact.communication_consent is True
    assert record.contact.location_city == "Mumbai"
    assert record.employment.hire_date == date(2022, 3, 15)
    assert record.employment.employment_type == "full_time"
    assert record.engagement.last_active_at == date(2026, 10, 1)
    assert record.engagement.engagement_rate == 85.5
    assert record.wellbeing.wellbeing_score == 78.0
    assert record.gamification.points_balance == 450
    assert record.gamification.badges_earned_count == 5


def test_primary_email_backs_up_email_address(organization_id: str) -> None:
    record = WorkerMapper().to_domain_record(
        _accepted_row(email_address=None, primary_email_address="john@example.com"),
        organization_id,
    )

    assert record.email_address == "john@example.com"


def test_identifiers_for_not_found_reporting(organization_id: str) -> None:
    record = WorkerMapper().to_domain_record(
        _accepted_row(external_id="EMP009"),
        organization_id,
    )

    assert record.identifiers() == {
        "external_id": "EMP009",
        "email": None,
        "phone": "+919876543210",
    }


def test_batch_mapping_preserves_order(organization_id: str) -> None:
    records = WorkerMapper().to_domain_records(
        [_accepted_row(first_name="Ann"), _accepted_row(first_name="Bob")],
        organization_id,
    )

    assert [record.first_name for record in records] == ["Ann", "Bob"]


def test_typed_numbers_pass_through_unchanged(organization_id: str) -> None:
    record = WorkerMapper().to_domain_record(
        _accepted_row(engagement_rate=100, overall_wellbeing_score=None, points_balance=None),
        organization_id,
    )

    assert record.engagement.engagement_rate == 100
    assert isinstance(record.engagement.engagement_rate, int)
    assert record.wellbeing.overall_wellbeing_score is None
    assert record.gamification.points_balance == 0
