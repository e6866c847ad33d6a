"""
app/domain/worker.py

Domain models used by the worker CSV import flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    NON_BINARY = "non_binary"
    OTHER = "other"
    PREFER_NOT_SAY = "prefer_not_say"


class OptInStatus(str, Enum):
    OPTED_IN = "opted_in"
    OPTED_OUT = "opted_out"
    PENDING = "pending"
    FAILED = "failed"


class EmploymentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"
    TERMINATED = "terminated"


class EmploymentType(str, Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    CONTRACTOR = "contractor"
    TEMPORARY = "temporary"


class DeactivationReason(str, Enum):
    VOLUNTARY_RESIGNATION = "voluntary_resignation"
    PERFORMANCE_ISSUES = "performance_issues"
    POLICY_VIOLATION = "policy_violation"
    REDUNDANCY = "redundancy"
    RETIREMENT = "retirement"
    END_OF_CONTRACT = "end_of_contract"
    OTHER = "other"


GENDERS: tuple[str, ...] = tuple(item.value for item in Gender)
OPT_IN_STATUSES: tuple[str, ...] = tuple(item.value for item in OptInStatus)
EMPLOYMENT_STATUSES: tuple[str, ...] = tuple(item.value for item in EmploymentStatus)
EMPLOYMENT_TYPES: tuple[str, ...] = tuple(item.value for item in EmploymentType)
DEACTIVATION_REASONS: tuple[str, ...] = tuple(item.value for item in DeactivationReason)

DEFAULT_PREFERRED_LANGUAGE = "en"


@dataclass(frozen=True)
class WorkerContact:
    primary_phone_number: str
    secondary_phone_number: str | None = None
    email_address: str | None = None
    secondary_email_address: str | None = None
    whatsapp_opt_in_status: str = OptInStatus.PENDING.value
    preferred_language: str = DEFAULT_PREFERRED_LANGUAGE
    communication_consent: bool = False
    location_city: str | None = None
    location_state_province: str | None = None
    location_country: str | None = None


@dataclass(frozen=True)
class WorkerEmployment:
    job_title: str | None = None
    department: str | None = None
    team: str | None = None
    employment_status: str = EmploymentStatus.ACTIVE.value
    employment_type: str | None = None
    hire_date: date | None = None


@dataclass(frozen=True)
class WorkerEngagement:
    last_active_at: date | None = None
    last_interaction_date: date | None = None
    last_engagement_date: date | None = None
    engagement_rate: float | None = None


@dataclass(frozen=True)
class WorkerWellbeing:
    wellbeing_score: float | None = None
    overall_wellbeing_score: float | None = None
    last_wellbeing_check_date: date | None = None
    last_wellbeing_assessment_date: date | None = None


@dataclass(frozen=True)
class WorkerGamification:
    points_balance: int = 0
    badges_earned_count: int = 0


@dataclass(frozen=True)
class WorkerRecord:
    """
    Typed worker prepared for persistence, always bound to one organization.
    """

    organization_id: str
    first_name: str
    last_name: str
    contact: WorkerContact
    is_active: bool = True
    middle_name: str | None = None
    display_name: str | None = None
    external_id: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    avatar_url: str | None = None
    primary_tag: str | None = None
    tags: tuple[str, ...] = ()
    deactivation_reason: str | None = None
    employment: WorkerEmployment = field(default_factory=WorkerEmployment)
    engagement: WorkerEngagement = field(default_factory=WorkerEngagement)
    wellbeing: WorkerWellbeing = field(default_factory=WorkerWellbeing)
    gamification: WorkerGamification = field(default_factory=WorkerGamification)

    @property
    def label(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def email_address(self) -> str | None:
        return self.contact.email_address

    @property
    def primary_phone_number(self) -> str:
        return self.contact.primary_phone_number

    def identifiers(self) -> dict[str, Any]:
        return {
            "external_id": self.external_id,
            "email": self.email_address,
            "phone": self.primary_phone_number,
        }


@dataclass(frozen=True)
class ExistingWorker:
    """
    Persisted worker projection used for reconciliation.
    """

    id: str
    organization_id: str
    first_name: str
    last_name: str
    external_id: str | None = None
    email_address: str | None = None
    primary_phone_number: str | None = None


# ---------------------------------------------------------------------------
# Batch operations and outcome
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CreateOperation:
    record: WorkerRecord


@dataclass(frozen=True)
class UpdateOperation:
    worker_id: str
    record: WorkerRecord


@dataclass(frozen=True)
class SuccessEntry:
    id: str
    label: str


@dataclass(frozen=True)
class FailureEntry:
    id: str | None
    label: str
    error_message: str


@dataclass(frozen=True)
class NotFoundEntry:
    label: str
    identifiers: dict[str, Any]


@dataclass(frozen=True)
class BatchOutcome:
    """
    Per-record results accumulated across every batch of one run.
    """

    successful: tuple[SuccessEntry, ...] = ()
    failed: tuple[FailureEntry, ...] = ()
    not_found: tuple[NotFoundEntry, ...] = ()

    def with_not_found(self, entries: tuple[NotFoundEntry, ...]) -> BatchOutcome:
        return BatchOutcome(
            successful=self.successful,
            failed=self.failed,
            not_found=self.not_found + entries,
        )
