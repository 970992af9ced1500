"""
School Approval Requests Service Layer

Business logic for users asking to be associated with more schools.

Rules for a new request:
- The user must have a profile
- Only one pending request per user
- Requested schools must be new to the profile and must exist
- Primary plus additional plus requested schools stay within the
  per-user ceiling (settings.max_schools_per_user)

An admin approves a subset of the requested schools (appended to the
profile in the same commit as the status change) or denies the request.
Emails are best-effort, as in the submissions workflow.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from uniform_exchange.core.auth import CurrentUser
from uniform_exchange.core.config import settings
from uniform_exchange.core.email import (
    send_approval_request_admin_alert,
    send_approval_request_approved,
    send_approval_request_confirmation,
    send_approval_request_denied,
)
from uniform_exchange.modules.school_approval_requests import repository
from uniform_exchange.modules.school_approval_requests.models import (
    ApprovalRequestStatus,
    SchoolApprovalRequest,
)
from uniform_exchange.modules.school_approval_requests.schemas import (
    ApprovalAction,
    ApprovalRequestCreate,
    ApprovalRequestUpdate,
)
from uniform_exchange.modules.schools.repository import SchoolRepository
from uniform_exchange.modules.shared.errors import ValidationFailedError, WorkflowError
from uniform_exchange.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class ProfileNotFoundError(WorkflowError):
    """Raised when the user has no marketplace profile."""

    def __init__(self):
        super().__init__(
            message="User profile not found. Please complete your profile first.",
            error_code="PROFILE_NOT_FOUND",
            status_code=404,
        )


class PendingRequestExistsError(WorkflowError):
    """Raised when the user already has a request awaiting review."""

    def __init__(self):
        super().__init__(
            message="You already have a pending school approval request",
            error_code="PENDING_REQUEST_EXISTS",
            status_code=400,
        )


class SchoolLimitExceededError(WorkflowError):
    """Raised when the request would push the user past the school ceiling."""

    def __init__(self, limit: int, current: int, requested: int):
        super().__init__(
            message=(
                f"Total schools cannot exceed {limit} "
                f"(currently {current}, requested {requested})"
            ),
            error_code="SCHOOL_LIMIT_EXCEEDED",
            status_code=400,
        )


class ApprovalRequestNotFoundError(WorkflowError):
    """Raised when an approval request is not found."""

    def __init__(self, request_id: UUID | None = None):
        message = (
            f"Approval request {request_id} not found"
            if request_id
            else "Approval request not found"
        )
        super().__init__(
            message=message,
            error_code="REQUEST_NOT_FOUND",
            status_code=404,
        )


class RequestAlreadyProcessedError(WorkflowError):
    """Raised when an admin acts on a request that is no longer pending."""

    def __init__(self, current_status: ApprovalRequestStatus):
        super().__init__(
            message=f"Request has already been processed (status: {current_status.value})",
            error_code="REQUEST_ALREADY_PROCESSED",
            status_code=400,
        )


async def _school_names(db: AsyncSession, school_ids: list[str]) -> list[str]:
    """Names for ids, in the given order; unknown ids fall back to the id."""
    if not school_ids:
        return []
    schools = await SchoolRepository.get_many(db, [UUID(school_id) for school_id in school_ids])
    names = {str(school.id): school.name for school in schools}
    return [names.get(school_id, school_id) for school_id in school_ids]


# ============================================
# Submitting a request
# ============================================


async def _send_intake_emails(
    db: AsyncSession,
    approval_request: SchoolApprovalRequest,
    user: CurrentUser,
) -> None:
    """Notify the admin inbox and the requester, then record what was sent."""
    admin_sent = False
    user_sent = False

    try:
        current_names = await _school_names(db, approval_request.current_schools)
        requested_names = await _school_names(db, approval_request.requested_schools)
    except Exception as e:
        logger.error(f"Failed to load school names for request {approval_request.id}: {e}")
        current_names = list(approval_request.current_schools)
        requested_names = list(approval_request.requested_schools)

    try:
        admin_sent = await send_approval_request_admin_alert(
            to_email=settings.admin_email,
            user_name=user.display_name,
            user_email=user.email,
            current_schools=current_names,
            requested_schools=requested_names,
            reason=approval_request.reason,
        )
        if not admin_sent:
            logger.error(f"Failed to send admin alert for request {approval_request.id}")
    except Exception as e:
        logger.error(
            f"Exception sending admin alert for request {approval_request.id}: {e}", exc_info=True
        )

    try:
        if user.email:
            user_sent = await send_approval_request_confirmation(
                to_email=user.email,
                user_name=user.display_name,
                requested_schools=requested_names,
            )
        if not user_sent:
            logger.error(f"Failed to send confirmation for request {approval_request.id}")
    except Exception as e:
        logger.error(
            f"Exception sending confirmation for request {approval_request.id}: {e}", exc_info=True
        )

    request_id = approval_request.id
    try:
        await repository.mark_emails_sent(
            db,
            approval_request,
            admin_notification=admin_sent,
            user_confirmation=user_sent,
        )
    except Exception as e:
        logger.error(
            f"Failed to record emails sent for request {request_id}: {e}", exc_info=True
        )
        # A failed commit expires the instance; reload it so the caller can serialize it
        try:
            await db.rollback()
            await db.refresh(approval_request)
        except Exception as reload_error:
            logger.error(f"Failed to reload request {request_id}: {reload_error}")


async def submit_request(
    db: AsyncSession,
    user: CurrentUser,
    data: ApprovalRequestCreate,
) -> SchoolApprovalRequest:
    """
    Ask to be associated with more schools.

    Args:
        db: Database session
        user: The signed-in requester
        data: Validated request body

    Returns:
        The created pending SchoolApprovalRequest

    Raises:
        ProfileNotFoundError: If the user has no profile
        PendingRequestExistsError: If a request is already pending
        ValidationFailedError: If schools are already associated or unknown
        SchoolLimitExceededError: If the ceiling would be exceeded
    """
    logger.info(f"Processing school approval request from user {user.id}")

    profile = await UserRepository.get_profile(db, user.id)
    if not profile:
        logger.warning(f"No profile for user {user.id}")
        raise ProfileNotFoundError()

    pending = await repository.get_pending_for_user(db, user.id)
    if pending:
        logger.warning(f"User {user.id} already has pending request {pending.id}")
        raise PendingRequestExistsError()

    current_schools = profile.school_ids
    requested_schools = [str(school_id) for school_id in data.requested_schools]

    already_associated = [s for s in requested_schools if s in current_schools]
    if already_associated:
        logger.warning(f"User {user.id} requested schools already on profile: {already_associated}")
        raise ValidationFailedError(
            "You are already associated with one or more of the requested schools",
            "SCHOOLS_ALREADY_ASSOCIATED",
        )

    limit = settings.max_schools_per_user
    if len(current_schools) + len(requested_schools) > limit:
        logger.warning(
            f"User {user.id} over school limit: {len(current_schools)} + {len(requested_schools)}"
        )
        raise SchoolLimitExceededError(limit, len(current_schools), len(requested_schools))

    schools = await SchoolRepository.get_many(db, data.requested_schools)
    if len(schools) != len(requested_schools):
        found = {str(school.id) for school in schools}
        missing = [s for s in requested_schools if s not in found]
        logger.warning(f"User {user.id} requested unknown schools: {missing}")
        raise ValidationFailedError(
            "One or more requested schools do not exist", "SCHOOLS_NOT_FOUND"
        )

    approval_request = await repository.create(
        db,
        user_id=user.id,
        current_schools=current_schools,
        requested_schools=requested_schools,
        reason=data.reason,
    )
    logger.info(f"Created approval request {approval_request.id} for user {user.id}")

    await _send_intake_emails(db, approval_request, user)

    return approval_request


# ============================================
# Listing
# ============================================


async def list_requests(
    db: AsyncSession,
    user: CurrentUser,
    *,
    all_users: bool = False,
    status: ApprovalRequestStatus | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[SchoolApprovalRequest], int]:
    """List requests visible to ``user`` (all of them for admins asking)."""
    user_id = None if (all_users and user.is_admin) else user.id

    return await repository.list_requests(
        db,
        user_id=user_id,
        status=status,
        skip=offset,
        limit=limit,
    )


# ============================================
# Admin disposition
# ============================================


def _resolve_approved_schools(
    approval_request: SchoolApprovalRequest,
    approved: list[UUID] | None,
) -> list[str]:
    """
    Validate the approved subset, defaulting to everything requested.

    Raises:
        ValidationFailedError: If the subset is empty or has unrequested ids
    """
    requested = [str(school_id) for school_id in approval_request.requested_schools]

    if approved is None:
        return requested

    approved_ids = [str(school_id) for school_id in approved]
    if not approved_ids:
        raise ValidationFailedError(
            "At least one school must be approved", "APPROVED_SCHOOLS_REQUIRED"
        )

    unrequested = [s for s in approved_ids if s not in requested]
    if unrequested:
        raise ValidationFailedError(
            "Approved schools must be among the requested schools", "INVALID_APPROVED_SCHOOLS"
        )

    return approved_ids


async def _notify_requester(
    db: AsyncSession,
    approval_request: SchoolApprovalRequest,
    action: ApprovalAction,
) -> None:
    """Send the decision email to the requester; failures are logged only."""
    try:
        requester = await UserRepository.get_by_id(db, approval_request.user_id)
        if not requester:
            logger.warning(
                f"Requester {approval_request.user_id} of request {approval_request.id} not found"
            )
            return

        if action == ApprovalAction.APPROVE:
            sent = await send_approval_request_approved(
                to_email=requester.email,
                user_name=requester.display_name,
                approved_schools=await _school_names(db, approval_request.approved_schools or []),
                admin_notes=approval_request.admin_notes,
            )
        else:
            sent = await send_approval_request_denied(
                to_email=requester.email,
                user_name=requester.display_name,
                denial_reason=approval_request.denial_reason,
                next_steps=approval_request.next_steps,
            )

        if sent:
            logger.info(f"Sent {action.value} email for request {approval_request.id}")
        else:
            logger.error(f"Failed to send {action.value} email for request {approval_request.id}")
    except Exception as e:
        logger.error(
            f"Failed to notify requester of request {approval_request.id}: {e}", exc_info=True
        )


async def process_request(
    db: AsyncSession,
    request_id: UUID,
    admin: CurrentUser,
    data: ApprovalRequestUpdate,
) -> SchoolApprovalRequest:
    """
    Approve or deny a pending approval request.

    Args:
        db: Database session
        request_id: UUID of the request
        admin: The deciding admin
        data: Validated action body

    Returns:
        Updated SchoolApprovalRequest

    Raises:
        ApprovalRequestNotFoundError: If the request doesn't exist
        RequestAlreadyProcessedError: If it is not pending
        ValidationFailedError: If approvedSchools is not a valid subset
        ProfileNotFoundError: If the requester's profile is gone
    """
    logger.info(f"Admin {admin.id} processing approval request {request_id}: {data.action.value}")

    approval_request = await repository.get_by_id(db, request_id)

    if not approval_request:
        logger.warning(f"Approval request not found: {request_id}")
        raise ApprovalRequestNotFoundError(request_id)

    if approval_request.status != ApprovalRequestStatus.PENDING:
        logger.warning(
            f"Cannot process request {request_id}: status={approval_request.status.value}"
        )
        raise RequestAlreadyProcessedError(approval_request.status)

    try:
        if data.action == ApprovalAction.APPROVE:
            approved = _resolve_approved_schools(approval_request, data.approved_schools)

            profile = await UserRepository.get_profile(db, approval_request.user_id)
            if not profile:
                logger.warning(f"Profile for user {approval_request.user_id} not found")
                raise ProfileNotFoundError()

            UserRepository.add_additional_schools(profile, approved)

            updated = await repository.update_decision(
                db,
                approval_request,
                ApprovalRequestStatus.APPROVED,
                reviewed_by=admin.id,
                admin_notes=data.admin_notes,
                approved_schools=approved,
            )
        else:
            updated = await repository.update_decision(
                db,
                approval_request,
                ApprovalRequestStatus.DENIED,
                reviewed_by=admin.id,
                admin_notes=data.admin_notes,
                denial_reason=data.denial_reason,
                next_steps=data.next_steps,
            )

    except repository.InvalidStatusTransitionError as e:
        logger.error(f"Status transition error: {e}")
        raise RequestAlreadyProcessedError(approval_request.status) from e

    logger.info(f"Approval request {request_id} is now {updated.status.value}")

    await _notify_requester(db, updated, data.action)

    return updated


ACTION_MESSAGES = {
    ApprovalAction.APPROVE: "School approval request approved",
    ApprovalAction.DENY: "School approval request denied",
}
