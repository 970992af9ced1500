"""
School Submission Models

User-proposed schools awaiting admin review. A submission carries the
normalized name and location fingerprint used for duplicate matching.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import ENUM, JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from uniform_exchange.modules.schools.models import SchoolLevel
from uniform_exchange.modules.shared import BaseModel


class SubmissionStatus(str, enum.Enum):
    """Status of a school submission."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DUPLICATE = "duplicate"


class SchoolSubmission(BaseModel):
    """
    School submission.

    Created by a signed-in user, decided once by an admin, never deleted
    through the API.
    """

    __tablename__ = "school_submissions"

    # Submitter
    submitted_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Proposed school
    school_name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    county_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("counties.id"),
        nullable=False,
    )
    locality_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("localities.id", ondelete="SET NULL"),
        nullable=True,
    )
    level: Mapped[SchoolLevel] = mapped_column(
        ENUM(
            SchoolLevel,
            name="school_level",
            create_type=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    submission_reason: Mapped[str] = mapped_column(Text, nullable=False)
    additional_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Status tracking
    status: Mapped[SubmissionStatus] = mapped_column(
        Enum(
            SubmissionStatus,
            name="submission_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=SubmissionStatus.PENDING,
    )
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Outcome references
    created_school_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("schools.id", ondelete="SET NULL"),
        nullable=True,
    )
    duplicate_school_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("schools.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Duplicate matching keys
    normalized_name: Mapped[str] = mapped_column(String(200), nullable=False)
    location_fingerprint: Mapped[str] = mapped_column(String(100), nullable=False)

    # {adminNotification: bool, userConfirmation: bool, sentAt: iso}
    emails_sent: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        Index("ix_school_submissions_submitted_by", "submitted_by"),
        Index("ix_school_submissions_status", "status"),
        Index("ix_school_submissions_county_id", "county_id"),
        Index(
            "ix_school_submissions_normalized_name_fingerprint",
            "normalized_name",
            "location_fingerprint",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<SchoolSubmission(id={self.id}, school_name={self.school_name}, "
            f"status={self.status.value})>"
        )
