"""
School Approval Request Repository

Database operations for school approval requests.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import ApprovalRequestStatus, SchoolApprovalRequest


async def create(
    db: AsyncSession,
    *,
    user_id: UUID,
    current_schools: list[str],
    requested_schools: list[str],
    reason: str,
) -> SchoolApprovalRequest:
    """Create a new pending approval request."""

    new_request = SchoolApprovalRequest(
        user_id=user_id,
        current_schools=current_schools,
        requested_schools=requested_schools,
        reason=reason,
        status=ApprovalRequestStatus.PENDING,
    )

    db.add(new_request)
    await db.commit()
    await db.refresh(new_request)

    return new_request


async def get_by_id(db: AsyncSession, id: UUID) -> SchoolApprovalRequest | None:
    """Get approval request by ID."""
    return await db.get(SchoolApprovalRequest, id)


async def get_pending_for_user(db: AsyncSession, user_id: UUID) -> SchoolApprovalRequest | None:
    """Get the user's pending request, if any."""
    result = await db.execute(
        select(SchoolApprovalRequest)
        .where(
            SchoolApprovalRequest.user_id == user_id,
            SchoolApprovalRequest.status == ApprovalRequestStatus.PENDING,
        )
        .limit(1)
    )
    return result.scalars().first()


async def list_requests(
    db: AsyncSession,
    *,
    user_id: UUID | None = None,
    status: ApprovalRequestStatus | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[SchoolApprovalRequest], int]:
    """
    Get approval requests, newest first, with a total count.

    Args:
        db: Database session
        user_id: Only this user's requests (None for all)
        status: Filter by status (optional)
        skip: Number of records to skip
        limit: Maximum records to return

    Returns:
        Tuple of (page of requests, total count matching filters)
    """
    query = select(SchoolApprovalRequest)

    if user_id is not None:
        query = query.where(SchoolApprovalRequest.user_id == user_id)

    if status is not None:
        query = query.where(SchoolApprovalRequest.status == status)

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(SchoolApprovalRequest.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(query)

    return list(result.scalars().all()), total


# Valid status transitions: a request is decided exactly once
VALID_STATUS_TRANSITIONS: dict[ApprovalRequestStatus, set[ApprovalRequestStatus]] = {
    ApprovalRequestStatus.PENDING: {
        ApprovalRequestStatus.APPROVED,
        ApprovalRequestStatus.DENIED,
    },
    ApprovalRequestStatus.APPROVED: set(),
    ApprovalRequestStatus.DENIED: set(),
}


class InvalidStatusTransitionError(ValueError):
    """Raised when an invalid status transition is attempted."""

    def __init__(
        self,
        current_status: ApprovalRequestStatus,
        new_status: ApprovalRequestStatus,
    ):
        self.current_status = current_status
        self.new_status = new_status
        valid_transitions = VALID_STATUS_TRANSITIONS.get(current_status, set())
        super().__init__(
            f"Invalid status transition: {current_status.value} -> {new_status.value}. "
            f"Valid transitions: {[s.value for s in valid_transitions]}"
        )


async def update_decision(
    db: AsyncSession,
    approval_request: SchoolApprovalRequest,
    status: ApprovalRequestStatus,
    reviewed_by: UUID,
    **kwargs,
) -> SchoolApprovalRequest:
    """
    Record an admin decision and commit.

    Profile changes staged by the caller are committed in the same
    transaction.

    Raises:
        InvalidStatusTransitionError: If the request is not pending
    """
    current_status = approval_request.status
    if status not in VALID_STATUS_TRANSITIONS.get(current_status, set()):
        raise InvalidStatusTransitionError(current_status, status)

    approval_request.status = status
    approval_request.reviewed_by = reviewed_by
    approval_request.reviewed_at = datetime.now(UTC)

    for key, value in kwargs.items():
        if hasattr(approval_request, key):
            setattr(approval_request, key, value)

    await db.commit()
    await db.refresh(approval_request)

    return approval_request


async def mark_emails_sent(
    db: AsyncSession,
    approval_request: SchoolApprovalRequest,
    *,
    admin_notification: bool,
    user_confirmation: bool,
    sent_at: datetime | None = None,
) -> SchoolApprovalRequest:
    """Record which intake emails went out."""
    approval_request.emails_sent = {
        "adminNotification": admin_notification,
        "userConfirmation": user_confirmation,
        "sentAt": (sent_at or datetime.now(UTC)).isoformat(),
    }

    await db.commit()
    await db.refresh(approval_request)

    return approval_request
