"""
School Approval Request Models

A user's request to be associated with schools beyond the ones on their
profile.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Text
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column

from uniform_exchange.modules.shared import BaseModel


class ApprovalRequestStatus(str, enum.Enum):
    """Status of a school approval request."""

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class SchoolApprovalRequest(BaseModel):
    """
    School approval request.

    School id lists are stored as JSON arrays of id strings.
    """

    __tablename__ = "school_approval_requests"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Snapshot of the profile's schools when the request was made
    current_schools: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    requested_schools: Mapped[list] = mapped_column(JSON, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)

    # Status tracking
    status: Mapped[ApprovalRequestStatus] = mapped_column(
        Enum(
            ApprovalRequestStatus,
            name="approval_request_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=ApprovalRequestStatus.PENDING,
    )
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Disposition
    approved_schools: Mapped[list | None] = mapped_column(JSON, nullable=True)
    denial_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    next_steps: Mapped[str | None] = mapped_column(Text, nullable=True)

    # {adminNotification: bool, userConfirmation: bool, sentAt: iso}
    emails_sent: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        Index("ix_school_approval_requests_user_id", "user_id"),
        Index("ix_school_approval_requests_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<SchoolApprovalRequest(id={self.id}, user_id={self.user_id}, "
            f"status={self.status.value})>"
        )
