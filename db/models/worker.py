"""
db/models/worker.py

Worker model and its one-to-one detail tables.

The identity row lives in ``workers``; contact, employment, engagement,
wellbeing and gamification details each live in their own table keyed by
``worker_id`` so imports can replace one section without touching others.
"""

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin, WorkerDetailMixin

if TYPE_CHECKING:
    from db.models.organization import Organization


class Worker(Base, TimestampMixin):
    """
    One worker of an organization.

    ``external_id`` is the identifier asserted by the organization's own
    systems and the preferred key for update imports.
    """

    __tablename__ = "workers"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )

    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    middle_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    external_id: Mapped[str | None] = mapped_column(
        String(120),
        nullable=True,
        comment="Organization-supplied identifier used to match update imports",
    )

    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(30), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    primary_tag: Mapped[str | None] = mapped_column(String(120), nullable=True)
    tags: Mapped[list[str]] = mapped_column(ARRAY(String(120)), nullable=False, default=list)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    deactivation_reason: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # ── Relationships ──────────────────────────────────────────────────────────

    organization: Mapped["Organization"] = relationship(
        "Organization",
        back_populates="workers",
    )

    contact: Mapped["WorkerContact"] = relationship(
        "WorkerContact",
        back_populates="worker",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    employment: Mapped["WorkerEmployment"] = relationship(
        "WorkerEmployment",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    engagement: Mapped["WorkerEngagement"] = relationship(
        "WorkerEngagement",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    wellbeing: Mapped["WorkerWellbeing"] = relationship(
        "WorkerWellbeing",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    gamification: Mapped["WorkerGamification"] = relationship(
        "WorkerGamification",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # ── Indexes ────────────────────────────────────────────────────────────────

    __table_args__ = (
        Index("ix_workers_organization_external_id", "organization_id", "external_id"),
        Index("ix_workers_organization_is_active", "organization_id", "is_active"),
    )

    def __repr__(self) -> str:
        return (
            f"<Worker id={self.id} organization_id={self.organization_id} "
            f"external_id={self.external_id!r}>"
        )


class WorkerContact(Base, WorkerDetailMixin):
    __tablename__ = "worker_contacts"

    primary_phone_number: Mapped[str] = mapped_column(String(30), nullable=False)
    secondary_phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    email_address: Mapped[str | None] = mapped_column(String(320), nullable=True)
    secondary_email_address: Mapped[str | None] = mapped_column(String(320), nullable=True)
    whatsapp_opt_in_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
    )
    preferred_language: Mapped[str] = mapped_column(String(20), nullable=False, default="en")
    communication_consent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    location_city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    location_state_province: Mapped[str | None] = mapped_column(String(120), nullable=True)
    location_country: Mapped[str | None] = mapped_column(String(120), nullable=True)

    worker: Mapped["Worker"] = relationship("Worker", back_populates="contact")

    __table_args__ = (
        Index("ix_worker_contacts_email_address", "email_address"),
        Index("ix_worker_contacts_primary_phone_number", "primary_phone_number"),
    )


class WorkerEmployment(Base, WorkerDetailMixin):
    __tablename__ = "worker_employments"

    job_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    department: Mapped[str | None] = mapped_column(String(255), nullable=True)
    team: Mapped[str | None] = mapped_column(String(255), nullable=True)
    employment_status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    employment_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)


class WorkerEngagement(Base, WorkerDetailMixin):
    __tablename__ = "worker_engagements"

    last_active_at: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_interaction_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_engagement_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    engagement_rate: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=True)


class WorkerWellbeing(Base, WorkerDetailMixin):
    __tablename__ = "worker_wellbeing"

    wellbeing_score: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=True)
    overall_wellbeing_score: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=True)
    last_wellbeing_check_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_wellbeing_assessment_date: Mapped[date | None] = mapped_column(Date, nullable=True)


class WorkerGamification(Base, WorkerDetailMixin):
    __tablename__ = "worker_gamification"

    points_balance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    badges_earned_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
