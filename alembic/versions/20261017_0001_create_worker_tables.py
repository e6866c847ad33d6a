"""create organizations, workers and worker detail tables

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17 09:30:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261017_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _worker_key() -> list[sa.SchemaItem]:
    return [
        sa.Column("worker_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.ForeignKeyConstraint(["worker_id"], ["workers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("worker_id"),
    ]


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_organizations_is_active", "organizations", ["is_active"], unique=False)

    op.create_table(
        "workers",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("organization_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("first_name", sa.String(length=120), nullable=False),
        sa.Column("last_name", sa.String(length=120), nullable=False),
        sa.Column("middle_name", sa.String(length=120), nullable=True),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("external_id", sa.String(length=120), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(length=30), nullable=True),
        sa.Column("avatar_url", sa.String(length=1000), nullable=True),
        sa.Column("primary_tag", sa.String(length=120), nullable=True),
        sa.Column("tags", postgresql.ARRAY(sa.String(length=120)), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("deactivation_reason", sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_workers_organization_external_id",
        "workers",
        ["organization_id", "external_id"],
        unique=False,
    )
    op.create_index(
        "ix_workers_organization_is_active",
        "workers",
        ["organization_id", "is_active"],
        unique=False,
    )

    op.create_table(
        "worker_contacts",
        sa.Column("primary_phone_number", sa.String(length=30), nullable=False),
        sa.Column("secondary_phone_number", sa.String(length=30), nullable=True),
        sa.Column("email_address", sa.String(length=320), nullable=True),
        sa.Column("secondary_email_address", sa.String(length=320), nullable=True),
        sa.Column("whatsapp_opt_in_status", sa.String(length=20), nullable=False),
        sa.Column("preferred_language", sa.String(length=20), nullable=False),
        sa.Column("communication_consent", sa.Boolean(), nullable=False),
        sa.Column("location_city", sa.String(length=120), nullable=True),
        sa.Column("location_state_province", sa.String(length=120), nullable=True),
        sa.Column("location_country", sa.String(length=120), nullable=True),
        *_timestamps(),
        *_worker_key(),
    )
    op.create_index("ix_worker_contacts_email_address", "worker_contacts", ["email_address"], unique=False)
    op.create_index(
        "ix_worker_contacts_primary_phone_number",
        "worker_contacts",
        ["primary_phone_number"],
        unique=False,
    )

    op.create_table(
        "worker_employments",
        sa.Column("job_title", sa.String(length=255), nullable=True),
        sa.Column("department", sa.String(length=255), nullable=True),
        sa.Column("team", sa.String(length=255), nullable=True),
        sa.Column("employment_status", sa.String(length=20), nullable=False),
        sa.Column("employment_type", sa.String(length=20), nullable=True),
        sa.Column("hire_date", sa.Date(), nullable=True),
        *_timestamps(),
        *_worker_key(),
    )

    op.create_table(
        "worker_engagements",
        sa.Column("last_active_at", sa.Date(), nullable=True),
        sa.Column("last_interaction_date", sa.Date(), nullable=True),
        sa.Column("last_engagement_date", sa.Date(), nullable=True),
        sa.Column("engagement_rate", sa.Numeric(precision=5, scale=2), nullable=True),
        *_timestamps(),
        *_worker_key(),
    )

    op.create_table(
        "worker_wellbeing",
        sa.Column("wellbeing_score", sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column("overall_wellbeing_score", sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column("last_wellbeing_check_date", sa.Date(), nullable=True),
        sa.Column("last_wellbeing_assessment_date", sa.Date(), nullable=True),
        *_timestamps(),
        *_worker_key(),
    )

    op.create_table(
        "worker_gamification",
        sa.Column("points_balance", sa.Integer(), nullable=False),
        sa.Column("badges_earned_count", sa.Integer(), nullable=False),
        *_timestamps(),
        *_worker_key(),
    )


def downgrade() -> None:
    op.drop_table("worker_gamification")
    op.drop_table("worker_wellbeing")
    op.drop_table("worker_engagements")
    op.drop_table("worker_employments")
    op.drop_index("ix_worker_contacts_primary_phone_number", table_name="worker_contacts")
    op.drop_index("ix_worker_contacts_email_address", table_name="worker_contacts")
    op.drop_table("worker_contacts")
    op.drop_index("ix_workers_organization_is_active", table_name="workers")
    op.drop_index("ix_workers_organization_external_id", table_name="workers")
    op.drop_table("workers")
    op.drop_index("ix_organizations_is_active", table_name="organizations")
    op.drop_table("organizations")
