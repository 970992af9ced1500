"""
School Submission Repository

Database operations for school submissions. Only data access lives here;
duplicate rules and notifications belong to the service layer.

Status changes go through ``update_status`` so the transition table below
is enforced for every writer.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import SchoolSubmission, SubmissionStatus
from .schemas import SchoolSubmissionCreate


async def create(
    db: AsyncSession,
    data: SchoolSubmissionCreate,
    *,
    submitted_by: UUID,
    normalized_name: str,
    location_fingerprint: str,
) -> SchoolSubmission:
    """Create a new pending school submission."""

    new_submission = SchoolSubmission(
        submitted_by=submitted_by,
        school_name=data.school_name,
        address=data.address,
        county_id=data.county_id,
        locality_id=data.locality_id,
        level=data.level,
        website=str(data.website) if data.website else None,
        phone=data.phone,
        email=data.email,
        submission_reason=data.submission_reason,
        additional_notes=data.additional_notes,
        status=SubmissionStatus.PENDING,
        normalized_name=normalized_name,
        location_fingerprint=location_fingerprint,
    )

    db.add(new_submission)
    await db.commit()
    await db.refresh(new_submission)

    return new_submission


async def get_by_id(db: AsyncSession, id: UUID) -> SchoolSubmission | None:
    """Get submission by ID."""
    return await db.get(SchoolSubmission, id)


async def get_pending_by_fingerprint(
    db: AsyncSession, normalized_name: str, location_fingerprint: str
) -> SchoolSubmission | None:
    """Get a pending submission with this exact normalized name and location."""
    result = await db.execute(
        select(SchoolSubmission)
        .where(
            SchoolSubmission.normalized_name == normalized_name,
            SchoolSubmission.location_fingerprint == location_fingerprint,
            SchoolSubmission.status == SubmissionStatus.PENDING,
        )
        .limit(1)
    )
    return result.scalars().first()


async def list_submissions(
    db: AsyncSession,
    *,
    submitted_by: UUID | None = None,
    status: SubmissionStatus | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[SchoolSubmission], int]:
    """
    Get submissions, newest first, with a total count.

    Args:
        db: Database session
        submitted_by: Only this user's submissions (None for all)
        status: Filter by status (optional)
        skip: Number of records to skip
        limit: Maximum records to return

    Returns:
        Tuple of (page of submissions, total count matching filters)
    """
    query = select(SchoolSubmission)

    if submitted_by is not None:
        query = query.where(SchoolSubmission.submitted_by == submitted_by)

    if status is not None:
        query = query.where(SchoolSubmission.status == status)

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(SchoolSubmission.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(query)

    return list(result.scalars().all()), total


# Valid status transitions: a submission is decided exactly once
VALID_STATUS_TRANSITIONS: dict[SubmissionStatus, set[SubmissionStatus]] = {
    SubmissionStatus.PENDING: {
        SubmissionStatus.APPROVED,
        SubmissionStatus.REJECTED,
        SubmissionStatus.DUPLICATE,
    },
    # Terminal states - no transitions allowed
    SubmissionStatus.APPROVED: set(),
    SubmissionStatus.REJECTED: set(),
    SubmissionStatus.DUPLICATE: set(),
}


class InvalidStatusTransitionError(ValueError):
    """Raised when an invalid status transition is attempted."""

    def __init__(
        self,
        current_status: SubmissionStatus,
        new_status: SubmissionStatus,
    ):
        self.current_status = current_status
        self.new_status = new_status
        valid_transitions = VALID_STATUS_TRANSITIONS.get(current_status, set())
        super().__init__(
            f"Invalid status transition: {current_status.value} -> {new_status.value}. "
            f"Valid transitions: {[s.value for s in valid_transitions]}"
        )


def apply_status(
    submission: SchoolSubmission,
    status: SubmissionStatus,
    **kwargs,
) -> SchoolSubmission:
    """
    Stage a status change and extra fields on a loaded submission.

    Nothing is committed, so the caller can combine the change with other
    writes in one transaction.

    Raises:
        InvalidStatusTransitionError: If status transition is not allowed
    """
    current_status = submission.status
    valid_transitions = VALID_STATUS_TRANSITIONS.get(current_status, set())

    if status not in valid_transitions:
        raise InvalidStatusTransitionError(current_status, status)

    submission.status = status

    for key, value in kwargs.items():
        if hasattr(submission, key):
            setattr(submission, key, value)

    return submission


async def update_decision(
    db: AsyncSession,
    submission: SchoolSubmission,
    status: SubmissionStatus,
    reviewed_by: UUID,
    **kwargs,
) -> SchoolSubmission:
    """
    Record an admin decision and commit.

    Any rows the caller added to the session beforehand (such as the school
    created on approval) are committed in the same transaction.

    Args:
        db: Database session
        submission: The pending submission
        status: APPROVED, REJECTED or DUPLICATE
        reviewed_by: UUID of the deciding admin
        **kwargs: Extra fields (admin_notes, rejection_reason, ...)

    Returns:
        Updated SchoolSubmission

    Raises:
        InvalidStatusTransitionError: If the submission is not pending
    """
    apply_status(
        submission,
        status,
        reviewed_by=reviewed_by,
        reviewed_at=datetime.now(UTC),
        **kwargs,
    )

    await db.commit()
    await db.refresh(submission)

    return submission


async def mark_emails_sent(
    db: AsyncSession,
    submission: SchoolSubmission,
    *,
    admin_notification: bool,
    user_confirmation: bool,
    sent_at: datetime | None = None,
) -> SchoolSubmission:
    """Record which intake emails went out."""
    submission.emails_sent = {
        "adminNotification": admin_notification,
        "userConfirmation": user_confirmation,
        "sentAt": (sent_at or datetime.now(UTC)).isoformat(),
    }

    await db.commit()
    await db.refresh(submission)

    return submission
