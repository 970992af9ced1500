"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

This migration creates:
1. counties and localities (reference data)
2. users and user_profiles
3. schools
4. school_submissions
5. school_approval_requests

schools.submission_id and school_submissions.created_school_id reference
each other, so the schools -> school_submissions foreign key is added after
both tables exist.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

USER_ROLE = ("admin", "user")
SCHOOL_LEVEL = ("primary", "secondary", "mixed")
SUBMISSION_STATUS = ("pending", "approved", "rejected", "duplicate")
APPROVAL_REQUEST_STATUS = ("pending", "approved", "denied")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create all tables."""
    bind = op.get_bind()

    user_role_enum = postgresql.ENUM(*USER_ROLE, name="user_role", create_type=False)
    school_level_enum = postgresql.ENUM(*SCHOOL_LEVEL, name="school_level", create_type=False)
    submission_status_enum = postgresql.ENUM(
        *SUBMISSION_STATUS, name="submission_status", create_type=False
    )
    approval_request_status_enum = postgresql.ENUM(
        *APPROVAL_REQUEST_STATUS, name="approval_request_status", create_type=False
    )
    for enum_type in (
        user_role_enum,
        school_level_enum,
        submission_status_enum,
        approval_request_status_enum,
    ):
        enum_type.create(bind, checkfirst=True)

    # Reference data
    op.create_table(
        "counties",
        *_timestamps(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("osm_id", sa.String(length=50), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_counties_name"),
    )
    op.create_index(op.f("ix_counties_name"), "counties", ["name"], unique=False)

    op.create_table(
        "localities",
        *_timestamps(),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("county_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("osm_id", sa.String(length=50), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["county_id"], ["counties.id"], ondelete="CASCADE"),
    )
    op.create_index(op.f("ix_localities_name"), "localities", ["name"], unique=False)
    op.create_index(op.f("ix_localities_county_id"), "localities", ["county_id"], unique=False)

    # Users
    op.create_table(
        "users",
        *_timestamps(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("role", user_role_enum, nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    # Schools
    op.create_table(
        "schools",
        *_timestamps(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("county_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("locality_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("level", school_level_enum, nullable=False),
        sa.Column("website", sa.String(length=500), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("submission_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["county_id"], ["counties.id"]),
        sa.ForeignKeyConstraint(["locality_id"], ["localities.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("submission_id", name="uq_schools_submission_id"),
    )
    op.create_index(op.f("ix_schools_name"), "schools", ["name"], unique=False)
    op.create_index(op.f("ix_schools_county_id"), "schools", ["county_id"], unique=False)
    op.create_index(op.f("ix_schools_locality_id"), "schools", ["locality_id"], unique=False)

    op.create_table(
        "user_profiles",
        *_timestamps(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("primary_school_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "additional_schools",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
        ),
        sa.Column("locality_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["primary_school_id"], ["schools.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["locality_id"], ["localities.id"], ondelete="SET NULL"),
    )
    op.create_index(op.f("ix_user_profiles_user_id"), "user_profiles", ["user_id"], unique=True)
    op.create_index(
        op.f("ix_user_profiles_primary_school_id"),
        "user_profiles",
        ["primary_school_id"],
        unique=False,
    )

    # School submissions
    op.create_table(
        "school_submissions",
        *_timestamps(),
        sa.Column("submitted_by", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("school_name", sa.String(length=200), nullable=False),
        sa.Column("address", sa.String(length=500), nullable=False),
        sa.Column("county_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("locality_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("level", school_level_enum, nullable=False),
        sa.Column("website", sa.String(length=500), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("submission_reason", sa.Text(), nullable=False),
        sa.Column("additional_notes", sa.Text(), nullable=True),
        sa.Column(
            "status", submission_status_enum, nullable=False, server_default="pending"
        ),
        sa.Column("reviewed_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("created_school_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("duplicate_school_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("normalized_name", sa.String(length=200), nullable=False),
        sa.Column("location_fingerprint", sa.String(length=100), nullable=False),
        sa.Column("emails_sent", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["submitted_by"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["county_id"], ["counties.id"]),
        sa.ForeignKeyConstraint(["locality_id"], ["localities.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["reviewed_by"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_school_id"], ["schools.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["duplicate_school_id"], ["schools.id"], ondelete="SET NULL"),
    )
    op.create_index(
        "ix_school_submissions_submitted_by", "school_submissions", ["submitted_by"]
    )
    op.create_index("ix_school_submissions_status", "school_submissions", ["status"])
    op.create_index("ix_school_submissions_county_id", "school_submissions", ["county_id"])
    op.create_index(
        "ix_school_submissions_normalized_name_fingerprint",
        "school_submissions",
        ["normalized_name", "location_fingerprint"],
    )

    op.create_foreign_key(
        "fk_schools_submission_id",
        "schools",
        "school_submissions",
        ["submission_id"],
        ["id"],
        ondelete="SET NULL",
    )

    # School approval requests
    op.create_table(
        "school_approval_requests",
        *_timestamps(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("current_schools", sa.JSON(), nullable=False),
        sa.Column("requested_schools", sa.JSON(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column(
            "status",
            approval_request_status_enum,
            nullable=False,
            server_default="pending",
        ),
        sa.Column("reviewed_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("approved_schools", sa.JSON(), nullable=True),
        sa.Column("denial_reason", sa.Text(), nullable=True),
        sa.Column("next_steps", sa.Text(), nullable=True),
        sa.Column("emails_sent", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reviewed_by"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index(
        "ix_school_approval_requests_user_id", "school_approval_requests", ["user_id"]
    )
    op.create_index(
        "ix_school_approval_requests_status", "school_approval_requests", ["status"]
    )


def downgrade() -> None:
    """Drop all tables and enum types."""
    op.drop_table("school_approval_requests")

    op.drop_constraint("fk_schools_submission_id", "schools", type_="foreignkey")
    op.drop_table("school_submissions")
    op.drop_table("user_profiles")
    op.drop_table("schools")
    op.drop_table("users")
    op.drop_table("localities")
    op.drop_table("counties")

    bind = op.get_bind()
    for name, values in (
        ("approval_request_status", APPROVAL_REQUEST_STATUS),
        ("submission_status", SUBMISSION_STATUS),
        ("school_level", SCHOOL_LEVEL),
        ("user_role", USER_ROLE),
    ):
        postgresql.ENUM(*values, name=name).drop(bind, checkfirst=True)
