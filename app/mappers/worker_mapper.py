"""
app/mappers/worker_mapper.py

Maps accepted flat CSV rows into nested worker domain records.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from app.domain.worker import (
    DEFAULT_PREFERRED_LANGUAGE,
    EmploymentStatus,
    OptInStatus,
    WorkerContact,
    WorkerEmployment,
    WorkerEngagement,
    WorkerGamification,
    WorkerRecord,
    WorkerWellbeing,
)
from app.validators.cell_validators import is_blank, parse_date, to_boolean, to_tags


def _text(row: Mapping[str, Any], column: str) -> str | None:
    value = row.get(column)
    if is_blank(value):
        return None
    return str(value).strip()


def _number(row: Mapping[str, Any], column: str) -> int | float | None:
    """Typed rows already hold bounded numbers; anything else maps to ``None``."""
    value = row.get(column)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return None


def _count(row: Mapping[str, Any], column: str) -> int:
    value = row.get(column)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


class WorkerMapper:
    """
    Pure mapping of validated rows to ``WorkerRecord`` values.
    """

    def to_domain_records(
        self,
        accepted_rows: Sequence[Mapping[str, Any]],
        organization_id: str,
    ) -> list[WorkerRecord]:
        return [self.to_domain_record(row, organization_id) for row in accepted_rows]

    def to_domain_record(self, row: Mapping[str, Any], organization_id: str) -> WorkerRecord:
        """
        Build one record; optional enumerations fall back to their defaults.
        """

        contact = WorkerContact(
            primary_phone_number=_text(row, "primary_phone_number") or "",
            secondary_phone_number=_text(row, "secondary_phone_number"),
            email_address=_text(row, "email_address") or _text(row, "primary_email_address"),
            secondary_email_address=_text(row, "secondary_email_address"),
            whatsapp_opt_in_status=(
                _text(row, "whatsapp_opt_in_status") or OptInStatus.PENDING.value
            ),
            preferred_language=_text(row, "preferred_language") or DEFAULT_PREFERRED_LANGUAGE,
            communication_consent=to_boolean(row.get("communication_consent")),
            location_city=_text(row, "location_city"),
            location_state_province=_text(row, "location_state_province"),
            location_country=_text(row, "location_country"),
        )
        employment = WorkerEmployment(
            job_title=_text(row, "job_title"),
            department=_text(row, "department"),
            team=_text(row, "team"),
            employment_status=_text(row, "employment_status") or EmploymentStatus.ACTIVE.value,
            employment_type=_text(row, "employment_type"),
            hire_date=parse_date(row.get("hire_date")),
        )
        engagement = WorkerEngagement(
            last_active_at=parse_date(row.get("last_active_at")),
            last_interaction_date=parse_date(row.get("last_interaction_date")),
            last_engagement_date=parse_date(row.get("last_engagement_date")),
            engagement_rate=_number(row, "engagement_rate"),
        )
        wellbeing = WorkerWellbeing(
            wellbeing_score=_number(row, "wellbeing_score"),
            overall_wellbeing_score=_number(row, "overall_wellbeing_score"),
            last_wellbeing_check_date=parse_date(row.get("last_wellbeing_check_date")),
            last_wellbeing_assessment_date=parse_date(row.get("last_wellbeing_assessment_date")),
        )
        gamification = WorkerGamification(
            points_balance=_count(row, "points_balance"),
            badges_earned_count=_count(row, "badges_earned_count"),
        )

        return WorkerRecord(
            organization_id=organization_id,
            first_name=_text(row, "first_name") or "",
            last_name=_text(row, "last_name") or "",
            middle_name=_text(row, "middle_name"),
            display_name=_text(row, "display_name"),
            external_id=_text(row, "external_id"),
            date_of_birth=parse_date(row.get("date_of_birth")),
            gender=_text(row, "gender"),
            avatar_url=_text(row, "avatar_url"),
            primary_tag=_text(row, "primary_tag"),
            tags=tuple(to_tags(row.get("tags"))),
            is_active=to_boolean(row.get("is_active")),
            deactivation_reason=_text(row, "deactivation_reason"),
            contact=contact,
            employment=employment,
            engagement=engagement,
            wellbeing=wellbeing,
            gamification=gamification,
        )
