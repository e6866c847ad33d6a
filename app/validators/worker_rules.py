"""
app/validators/worker_rules.py

Worker CSV rule set: column catalogue, per-column checks and cross-field
consistency checks, expressed as a ``RuleSet`` for the tabular engine.

Column order here is the template order and the processing order.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from difflib import SequenceMatcher
from typing import Any, Callable, Sequence

from app.domain.tabular import (
    ColumnRule,
    ContextValidator,
    FindingCode,
    RawRow,
    RowValidationError,
    RuleSet,
    Severity,
)
from app.domain.worker import (
    DEACTIVATION_REASONS,
    EMPLOYMENT_STATUSES,
    EMPLOYMENT_TYPES,
    GENDERS,
    OPT_IN_STATUSES,
    OptInStatus,
)
from app.validators.cell_validators import (
    DATE_FORMAT_HINT,
    all_of,
    is_blank,
    is_false_token,
    parse_date,
    to_boolean,
    to_integer,
    to_number,
    to_tags,
    validate_boolean,
    validate_date,
    validate_email,
    validate_enum,
    validate_max_length,
    validate_number_range,
    validate_phone,
    validate_tags,
)

MIN_NAME_LENGTH = 2
MIN_PLAUSIBLE_AGE = 18
MAX_PLAUSIBLE_AGE = 100
DEFAULT_TYPO_THRESHOLD = 0.85

# Storage limits of the worker tables.
NAME_MAX_LENGTH = 120
LONG_TEXT_MAX_LENGTH = 255
PHONE_MAX_LENGTH = 30
EMAIL_MAX_LENGTH = 320
LANGUAGE_MAX_LENGTH = 20
URL_MAX_LENGTH = 1000
TAG_MAX_LENGTH = 120
SCORE_MIN, SCORE_MAX = 0, 100
COUNT_MIN, COUNT_MAX = 0, 2_147_483_647

KNOWN_EMAIL_PROVIDERS: tuple[str, ...] = (
    "gmail.com",
    "googlemail.com",
    "yahoo.com",
    "ymail.com",
    "hotmail.com",
    "outlook.com",
    "live.com",
    "msn.com",
    "icloud.com",
    "me.com",
    "aol.com",
    "mail.com",
    "protonmail.com",
    "proton.me",
    "gmx.com",
    "zoho.com",
    "yandex.com",
    "rediffmail.com",
)


class WorkerFindingCode:
    VALUE_TOO_SHORT = "VALUE_TOO_SHORT"
    INVALID_DATE = "INVALID_DATE"
    FUTURE_DATE = "FUTURE_DATE"
    AGE_UNUSUAL = "AGE_UNUSUAL"
    INVALID_EMAIL = "INVALID_EMAIL"
    POSSIBLE_TYPO = "POSSIBLE_TYPO"
    MISSING_RELATED_FIELD = "MISSING_RELATED_FIELD"
    UNEXPECTED_FIELD = "UNEXPECTED_FIELD"
    DATE_INCONSISTENCY = "DATE_INCONSISTENCY"
    LOGICAL_INCONSISTENCY = "LOGICAL_INCONSISTENCY"
    DUPLICATE_IDENTIFIER = "DUPLICATE_IDENTIFIER"


@dataclass(frozen=True)
class WorkerColumn:
    """
    One worker CSV column: internal key, template header and short name.
    """

    key: str
    label: str
    display_name: str


WORKER_CSV_COLUMNS: tuple[WorkerColumn, ...] = (
    WorkerColumn("first_name", "First Name (Required)", "First Name"),
    WorkerColumn("last_name", "Last Name (Required)", "Last Name"),
    WorkerColumn("middle_name", "Middle Name", "Middle Name"),
    WorkerColumn("display_name", "Display Name", "Display Name"),
    WorkerColumn("external_id", "External ID (Recommended for Updates)", "External ID"),
    WorkerColumn("date_of_birth", "Date of Birth (YYYY-MM-DD)", "Date of Birth"),
    WorkerColumn(
        "gender",
        "Gender (male/female/non_binary/other/prefer_not_say)",
        "Gender",
    ),
    WorkerColumn("avatar_url", "Avatar URL", "Avatar URL"),
    WorkerColumn("primary_tag", "Primary Tag", "Primary Tag"),
    WorkerColumn("tags", "Tags (Comma Separated)", "Tags"),
    WorkerColumn("is_active", "Is Active (true/false, Required)", "Is Active"),
    WorkerColumn(
        "deactivation_reason",
        "Deactivation Reason (Only if isActive=false)",
        "Deactivation Reason",
    ),
    WorkerColumn(
        "primary_phone_number",
        "Primary Phone Number (Required)",
        "Primary Phone Number",
    ),
    WorkerColumn("secondary_phone_number", "Secondary Phone Number", "Secondary Phone Number"),
    WorkerColumn("email_address", "Email Address", "Email Address"),
    WorkerColumn("primary_email_address", "Primary Email Address", "Primary Email Address"),
    WorkerColumn("secondary_email_address", "Secondary Email Address", "Secondary Email Address"),
    WorkerColumn(
        "whatsapp_opt_in_status",
        "WhatsApp Opt-In Status (opted_in/opted_out/pending/failed)",
        "WhatsApp Opt-In Status",
    ),
    WorkerColumn(
        "preferred_language",
        "Preferred Language (e.g. en, hi, fr)",
        "Preferred Language",
    ),
    WorkerColumn(
        "communication_consent",
        "Communication Consent (true/false)",
        "Communication Consent",
    ),
    WorkerColumn("location_city", "City", "City"),
    WorkerColumn("location_state_province", "State/Province", "State/Province"),
    WorkerColumn("location_country", "Country", "Country"),
    WorkerColumn("job_title", "Job Title", "Job Title"),
    WorkerColumn("department", "Department", "Department"),
    WorkerColumn("team", "Team", "Team"),
    WorkerColumn(
        "employment_status",
        "Employment Status (active/inactive/on_leave/terminated)",
        "Employment Status",
    ),
    WorkerColumn(
        "employment_type",
        "Employment Type (full_time/part_time/contractor/temporary)",
        "Employment Type",
    ),
    WorkerColumn("hire_date", "Hire Date (YYYY-MM-DD)", "Hire Date"),
    WorkerColumn("last_active_at", "Last Active At (YYYY-MM-DD)", "Last Active At"),
    WorkerColumn(
        "last_interaction_date",
        "Last Interaction Date (YYYY-MM-DD)",
        "Last Interaction Date",
    ),
    WorkerColumn(
        "last_engagement_date",
        "Last Engagement Date (YYYY-MM-DD)",
        "Last Engagement Date",
    ),
    WorkerColumn("engagement_rate", "Engagement Rate (0-100)", "Engagement Rate"),
    WorkerColumn("wellbeing_score", "Wellbeing Score (0-100)", "Wellbeing Score"),
    WorkerColumn(
        "overall_wellbeing_score",
        "Overall Wellbeing Score (0-100)",
        "Overall Wellbeing Score",
    ),
    WorkerColumn(
        "last_wellbeing_check_date",
        "Last Wellbeing Check Date (YYYY-MM-DD)",
        "Last Wellbeing Check Date",
    ),
    WorkerColumn(
        "last_wellbeing_assessment_date",
        "Last Wellbeing Assessment Date (YYYY-MM-DD)",
        "Last Wellbeing Assessment Date",
    ),
    WorkerColumn("points_balance", "Points Balance", "Points Balance"),
    WorkerColumn("badges_earned_count", "Badges Earned Count", "Badges Earned Count"),
)

WORKER_REQUIRED_COLUMNS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "primary_phone_number",
    "is_active",
)

WORKER_HEADER_DISPLAY_NAMES: dict[str, str] = {
    column.key: column.display_name for column in WORKER_CSV_COLUMNS
}
WORKER_HEADER_LABELS: dict[str, str] = {column.key: column.label for column in WORKER_CSV_COLUMNS}

# Dates that must not precede the hire date.
_POST_HIRE_DATE_COLUMNS: tuple[tuple[str, str], ...] = (
    ("last_active_at", "Last active date"),
    ("last_interaction_date", "Last interaction date"),
    ("last_engagement_date", "Last engagement date"),
)

_IDENTIFIER_COLUMNS: tuple[str, ...] = ("external_id", "email_address", "primary_phone_number")


# ---------------------------------------------------------------------------
# Email typo detection
# ---------------------------------------------------------------------------


def suggest_email_domain(
    domain: str,
    *,
    providers: Sequence[str] = KNOWN_EMAIL_PROVIDERS,
    threshold: float = DEFAULT_TYPO_THRESHOLD,
) -> str | None:
    """
    Return the well-known provider a domain most likely misspells, if any.
    """

    normalized = domain.strip().lower()
    if not normalized or normalized in providers:
        return None

    best_provider: str | None = None
    best_score = 0.0
    for provider in providers:
        score = SequenceMatcher(None, normalized, provider).ratio()
        if score > best_score:
            best_provider, best_score = provider, score

    if best_provider is not None and best_score >= threshold:
        return best_provider
    return None


_email_length_check = validate_max_length(EMAIL_MAX_LENGTH)


def _email_validator(threshold: float) -> ContextValidator:
    def _validate(
        value: Any,
        row: RawRow,
        row_number: int,
        column: str,
    ) -> RowValidationError | None:
        if is_blank(value):
            return None

        address = str(value).strip()
        too_long = _email_length_check(address)
        if too_long:
            return RowValidationError(
                row_number=row_number,
                column=column,
                message=too_long,
                value=value,
                severity=Severity.ERROR,
                code=FindingCode.VALIDATION_ERROR,
            )

        message = validate_email(address)
        if message:
            return RowValidationError(
                row_number=row_number,
                column=column,
                message=message,
                value=value,
                severity=Severity.ERROR,
                code=WorkerFindingCode.INVALID_EMAIL,
                suggested_fix="Use format name@example.com",
            )

        local_part, _, domain = address.rpartition("@")
        suggestion = suggest_email_domain(domain, threshold=threshold)
        if suggestion is None:
            return None
        return RowValidationError(
            row_number=row_number,
            column=column,
            message=f'Possible typo in email domain "{domain}". Did you mean "{suggestion}"?',
            value=value,
            severity=Severity.WARNING,
            code=WorkerFindingCode.POSSIBLE_TYPO,
            suggested_fix=f"{local_part}@{suggestion}",
        )

    return _validate


# ---------------------------------------------------------------------------
# Contextual column validators
# ---------------------------------------------------------------------------


def _name_validator(label: str) -> ContextValidator:
    def _validate(
        value: Any,
        row: RawRow,
        row_number: int,
        column: str,
    ) -> RowValidationError | None:
        if is_blank(value):
            return RowValidationError(
                row_number=row_number,
                column=column,
                message=f"{label} is required",
                value=value,
                severity=Severity.ERROR,
                code=FindingCode.REQUIRED_FIELD,
            )
        if len(str(value).strip()) > NAME_MAX_LENGTH:
            return RowValidationError(
                row_number=row_number,
                column=column,
                message=f"{label} must be at most {NAME_MAX_LENGTH} characters",
                value=value,
                severity=Severity.ERROR,
                code=FindingCode.VALIDATION_ERROR,
            )
        if len(str(value).strip()) < MIN_NAME_LENGTH:
            return RowValidationError(
                row_number=row_number,
                column=column,
                message=f"{label} should be at least {MIN_NAME_LENGTH} characters",
                value=value,
                severity=Severity.WARNING,
                code=WorkerFindingCode.VALUE_TOO_SHORT,
            )
        return None

    return _validate


def _validate_tag_lengths(value: Any) -> str | None:
    if any(len(tag) > TAG_MAX_LENGTH for tag in to_tags(value)):
        return f"Each tag must be at most {TAG_MAX_LENGTH} characters"
    return None


def age_on(born: date, today: date) -> int:
    """Whole years between ``born`` and ``today``."""
    return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


def _date_of_birth_validator(today: Callable[[], date]) -> ContextValidator:
    def _validate(
        value: Any,
        row: RawRow,
        row_number: int,
        column: str,
    ) -> RowValidationError | None:
        if is_blank(value):
            return None

        message = validate_date(value)
        if message:
            return RowValidationError(
                row_number=row_number,
                column=column,
                message=message,
                value=value,
                severity=Severity.ERROR,
                code=WorkerFindingCode.INVALID_DATE,
                suggested_fix=f"Use format {DATE_FORMAT_HINT} (e.g., 1990-01-31)",
            )

        born = parse_date(value)
        reference = today()
        if born > reference:
            return RowValidationError(
                row_number=row_number,
                column=column,
                message="Date of birth cannot be in the future",
                value=value,
                severity=Severity.ERROR,
                code=WorkerFindingCode.FUTURE_DATE,
            )

        age = age_on(born, reference)
        if age > MAX_PLAUSIBLE_AGE:
            return RowValidationError(
                row_number=row_number,
                column=column,
                message=(
                    f"Worker appears to be over {MAX_PLAUSIBLE_AGE} years old. "
                    "Please verify date of birth."
                ),
                value=value,
                severity=Severity.WARNING,
                code=WorkerFindingCode.AGE_UNUSUAL,
            )
        if age < MIN_PLAUSIBLE_AGE:
            return RowValidationError(
                row_number=row_number,
                column=column,
                message=(
                    f"Worker appears to be under {MIN_PLAUSIBLE_AGE} years old. "
                    "Please verify date of birth."
                ),
                value=value,
                severity=Severity.WARNING,
                code=WorkerFindingCode.AGE_UNUSUAL,
            )
        return None

    return _validate


# ---------------------------------------------------------------------------
# Cross-field validators
# ---------------------------------------------------------------------------


def check_active_deactivation_reason(row: RawRow, row_number: int) -> list[RowValidationError]:
    """
    Inactive workers need a deactivation reason; active workers must not have one.
    """

    is_active = row.get("is_active")
    reason = row.get("deactivation_reason")

    if is_false_token(is_active) and is_blank(reason):
        return [
            RowValidationError(
                row_number=row_number,
                column="deactivation_reason",
                message="Deactivation reason is required when worker is not active",
                value=reason,
                severity=Severity.WARNING,
                code=WorkerFindingCode.MISSING_RELATED_FIELD,
            )
        ]
    if not is_blank(is_active) and to_boolean(is_active) and not is_blank(reason):
        return [
            RowValidationError(
                row_number=row_number,
                column="deactivation_reason",
                message="Deactivation reason should be empty when worker is active",
                value=reason,
                severity=Severity.WARNING,
                code=WorkerFindingCode.UNEXPECTED_FIELD,
                suggested_fix="Remove deactivation reason for active workers",
            )
        ]
    return []


def check_dates_after_hire_date(row: RawRow, row_number: int) -> list[RowValidationError]:
    """
    Activity dates earlier than the hire date are flagged.
    """

    hire_date = parse_date(row.get("hire_date"))
    if hire_date is None:
        return []

    findings: list[RowValidationError] = []
    for column, label in _POST_HIRE_DATE_COLUMNS:
        value = row.get(column)
        activity_date = parse_date(value)
        if activity_date is not None and activity_date < hire_date:
            findings.append(
                RowValidationError(
                    row_number=row_number,
                    column=column,
                    message=f"{label} cannot be before hire date",
                    value=value,
                    severity=Severity.WARNING,
                    code=WorkerFindingCode.DATE_INCONSISTENCY,
                )
            )
    return findings


def check_consent_contact_methods(row: RawRow, row_number: int) -> list[RowValidationError]:
    """
    Opted-in channels need their contact field; consent needs some contact method.
    """

    findings: list[RowValidationError] = []
    phone = row.get("primary_phone_number")

    opt_in = row.get("whatsapp_opt_in_status")
    if not is_blank(opt_in) and str(opt_in).strip() == OptInStatus.OPTED_IN and is_blank(phone):
        findings.append(
            RowValidationError(
                row_number=row_number,
                column="primary_phone_number",
                message=(
                    "Primary phone number is required when WhatsApp opt-in status is opted_in"
                ),
                value=phone,
                severity=Severity.ERROR,
                code=WorkerFindingCode.MISSING_RELATED_FIELD,
            )
        )

    has_contact_method = not all(
        is_blank(row.get(column))
        for column in ("primary_phone_number", "email_address", "primary_email_address")
    )
    if to_boolean(row.get("communication_consent")) and not has_contact_method:
        findings.append(
            RowValidationError(
                row_number=row_number,
                column="communication_consent",
                message=(
                    "Communication consent is true but no contact methods (phone/email) "
                    "are provided"
                ),
                value=row.get("communication_consent"),
                severity=Severity.WARNING,
                code=WorkerFindingCode.LOGICAL_INCONSISTENCY,
            )
        )
    return findings


# ---------------------------------------------------------------------------
# Batch validators
# ---------------------------------------------------------------------------


def check_duplicate_identifiers(
    rows: Sequence[tuple[int, RawRow]],
) -> list[RowValidationError]:
    """
    Flag rows whose identifier value repeats another row of the same file.
    """

    findings: list[RowValidationError] = []
    for column in _IDENTIFIER_COLUMNS:
        seen: dict[str, list[int]] = {}
        for row_number, row in rows:
            value = row.get(column)
            if is_blank(value):
                continue
            seen.setdefault(str(value).strip().lower(), []).append(row_number)

        display_name = WORKER_HEADER_DISPLAY_NAMES[column]
        for value, row_numbers in seen.items():
            if len(row_numbers) < 2:
                continue
            for row_number in row_numbers:
                others = ", ".join(str(number) for number in row_numbers if number != row_number)
                findings.append(
                    RowValidationError(
                        row_number=row_number,
                        column=column,
                        message=f"{display_name} '{value}' also appears on row(s) {others}",
                        value=value,
                        severity=Severity.WARNING,
                        code=WorkerFindingCode.DUPLICATE_IDENTIFIER,
                    )
                )
    return findings


# ---------------------------------------------------------------------------
# Rule set factory
# ---------------------------------------------------------------------------


def build_worker_rule_set(
    *,
    today: Callable[[], date] | None = None,
    typo_threshold: float = DEFAULT_TYPO_THRESHOLD,
) -> RuleSet:
    """
    Build the worker CSV rule set.

    ``today`` supplies the reference date for age checks and defaults to
    the system date at validation time.
    """

    clock = today or date.today
    email_check = _email_validator(max(0.0, min(1.0, typo_threshold)))

    name_length = validate_max_length(NAME_MAX_LENGTH)
    text_length = validate_max_length(LONG_TEXT_MAX_LENGTH)
    phone_check = all_of(validate_phone, validate_max_length(PHONE_MAX_LENGTH))
    email_length = validate_max_length(EMAIL_MAX_LENGTH)
    score_check = validate_number_range(SCORE_MIN, SCORE_MAX)
    count_check = validate_number_range(COUNT_MIN, COUNT_MAX, integer=True)

    column_rules: dict[str, ColumnRule] = {
        "first_name": ColumnRule(
            validate_with_context=_name_validator("First name"),
            required=True,
        ),
        "last_name": ColumnRule(
            validate_with_context=_name_validator("Last name"),
            required=True,
        ),
        "middle_name": ColumnRule(validate=name_length),
        "display_name": ColumnRule(validate=text_length),
        "external_id": ColumnRule(validate=name_length),
        "date_of_birth": ColumnRule(
            validate=validate_date,
            validate_with_context=_date_of_birth_validator(clock),
        ),
        "gender": ColumnRule(validate=validate_enum(GENDERS)),
        "avatar_url": ColumnRule(validate=validate_max_length(URL_MAX_LENGTH)),
        "primary_tag": ColumnRule(validate=validate_max_length(TAG_MAX_LENGTH)),
        "tags": ColumnRule(
            validate=all_of(validate_tags, _validate_tag_lengths),
            transform=to_tags,
        ),
        "is_active": ColumnRule(validate=validate_boolean, transform=to_boolean, required=True),
        "deactivation_reason": ColumnRule(validate=validate_enum(DEACTIVATION_REASONS)),
        "primary_phone_number": ColumnRule(validate=phone_check, required=True),
        "secondary_phone_number": ColumnRule(validate=phone_check),
        "email_address": ColumnRule(validate=validate_email, validate_with_context=email_check),
        "primary_email_address": ColumnRule(
            validate=validate_email,
            validate_with_context=email_check,
        ),
        "secondary_email_address": ColumnRule(validate=all_of(validate_email, email_length)),
        "whatsapp_opt_in_status": ColumnRule(validate=validate_enum(OPT_IN_STATUSES)),
        "preferred_language": ColumnRule(validate=validate_max_length(LANGUAGE_MAX_LENGTH)),
        "communication_consent": ColumnRule(validate=validate_boolean, transform=to_boolean),
        "location_city": ColumnRule(validate=name_length),
        "location_state_province": ColumnRule(validate=name_length),
        "location_country": ColumnRule(validate=name_length),
        "job_title": ColumnRule(validate=text_length),
        "department": ColumnRule(validate=text_length),
        "team": ColumnRule(validate=text_length),
        "employment_status": ColumnRule(validate=validate_enum(EMPLOYMENT_STATUSES)),
        "employment_type": ColumnRule(validate=validate_enum(EMPLOYMENT_TYPES)),
        "hire_date": ColumnRule(validate=validate_date),
        "last_active_at": ColumnRule(validate=validate_date),
        "last_interaction_date": ColumnRule(validate=validate_date),
        "last_engagement_date": ColumnRule(validate=validate_date),
        "engagement_rate": ColumnRule(validate=score_check, transform=to_number),
        "wellbeing_score": ColumnRule(validate=score_check, transform=to_number),
        "overall_wellbeing_score": ColumnRule(validate=score_check, transform=to_number),
        "last_wellbeing_check_date": ColumnRule(validate=validate_date),
        "last_wellbeing_assessment_date": ColumnRule(validate=validate_date),
        "points_balance": ColumnRule(validate=count_check, transform=to_integer),
        "badges_earned_count": ColumnRule(validate=count_check, transform=to_integer),
    }

    return RuleSet(
        column_rules=column_rules,
        required_columns=WORKER_REQUIRED_COLUMNS,
        header_display_names=WORKER_HEADER_DISPLAY_NAMES,
        header_labels=WORKER_HEADER_LABELS,
        cross_field_validators=(
            check_active_deactivation_reason,
            check_dates_after_hire_date,
            check_consent_contact_methods,
        ),
        batch_validators=(check_duplicate_identifiers,),
    )
