"""
School Submissions Service Layer

Business logic for community school submissions.

This module implements:
1. Intake:
   - Validate the county and locality
   - Reject names that overlap an active school at the same location
   - Reject exact repeats of a pending submission
   - Create the submission, then notify the admin inbox and the submitter

2. Admin disposition:
   - approve: create the School and link it back, in one commit
   - reject: record the reason
   - mark_duplicate: point at the existing school
   - Notify the submitter

3. Listing own or all submissions.

Notifications are best-effort: they run after the commit and their
failures are logged, never raised.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from uniform_exchange.core.auth import CurrentUser
from uniform_exchange.core.config import settings
from uniform_exchange.core.email import (
    send_submission_admin_alert,
    send_submission_approved,
    send_submission_confirmation,
    send_submission_duplicate,
    send_submission_rejected,
)
from uniform_exchange.modules.geography.repository import GeographyRepository
from uniform_exchange.modules.school_submissions import repository
from uniform_exchange.modules.school_submissions.helpers import (
    build_location_fingerprint,
    names_overlap,
    normalize_school_name,
)
from uniform_exchange.modules.school_submissions.models import SchoolSubmission, SubmissionStatus
from uniform_exchange.modules.school_submissions.schemas import (
    DuplicateSuggestion,
    SchoolSubmissionCreate,
    SchoolSubmissionUpdate,
    SubmissionAction,
)
from uniform_exchange.modules.schools.models import School
from uniform_exchange.modules.schools.repository import SchoolRepository
from uniform_exchange.modules.shared.errors import ValidationFailedError, WorkflowError
from uniform_exchange.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class DuplicateSchoolError(WorkflowError):
    """Raised when the proposed school looks like one that already exists."""

    def __init__(self, school: School):
        self.school = school
        suggestion = DuplicateSuggestion(
            school_id=school.id,
            school_name=school.name,
            address=school.address,
            message=f'A similar school "{school.name}" already exists. Please select it instead.',
        )
        super().__init__(
            message="A similar school already exists in this location",
            error_code="DUPLICATE_SCHOOL",
            status_code=400,
            details={"suggestion": suggestion.model_dump(mode="json", by_alias=True)},
        )


class DuplicateSubmissionError(WorkflowError):
    """Raised when the same school is already pending review."""

    def __init__(self, school_name: str):
        super().__init__(
            message=(
                f"A submission for '{school_name}' in this location is already pending review"
            ),
            error_code="DUPLICATE_SUBMISSION",
            status_code=400,
        )


class SubmissionNotFoundError(WorkflowError):
    """Raised when a submission is not found."""

    def __init__(self, submission_id: UUID | None = None):
        message = (
            f"Submission {submission_id} not found" if submission_id else "Submission not found"
        )
        super().__init__(
            message=message,
            error_code="SUBMISSION_NOT_FOUND",
            status_code=404,
        )


class SubmissionAlreadyProcessedError(WorkflowError):
    """Raised when an admin acts on a submission that is no longer pending."""

    def __init__(self, current_status: SubmissionStatus):
        super().__init__(
            message=f"Submission has already been processed (status: {current_status.value})",
            error_code="SUBMISSION_ALREADY_PROCESSED",
            status_code=400,
        )


class SchoolNotFoundError(WorkflowError):
    """Raised when a referenced school does not exist."""

    def __init__(self, school_id: UUID):
        super().__init__(
            message=f"School {school_id} not found",
            error_code="SCHOOL_NOT_FOUND",
            status_code=400,
        )


# ============================================
# Intake
# ============================================


async def _validate_location(db: AsyncSession, data: SchoolSubmissionCreate) -> None:
    """
    Check the county exists and the locality, if any, belongs to it.

    Raises:
        ValidationFailedError: If either reference is invalid
    """
    county = await GeographyRepository.get_county(db, data.county_id)
    if not county:
        raise ValidationFailedError("County not found", "INVALID_COUNTY")

    if data.locality_id is not None:
        locality = await GeographyRepository.get_locality(db, data.locality_id)
        if not locality or locality.county_id != data.county_id:
            raise ValidationFailedError(
                "Locality not found in the selected county", "INVALID_LOCALITY"
            )


async def _check_duplicate_school(
    db: AsyncSession,
    normalized_name: str,
    county_id: UUID,
    locality_id: UUID | None,
) -> None:
    """
    Reject names overlapping an active school at the same location.

    Raises:
        DuplicateSchoolError: With a suggestion naming the first match
    """
    schools = await SchoolRepository.list_active_in_location(db, county_id, locality_id)

    for school in schools:
        if names_overlap(normalized_name, normalize_school_name(school.name)):
            logger.warning(
                f"Submission matches existing school {school.id}: "
                f"'{normalized_name}' ~ '{school.name}'"
            )
            raise DuplicateSchoolError(school)


async def _check_duplicate_submission(
    db: AsyncSession,
    school_name: str,
    normalized_name: str,
    location_fingerprint: str,
) -> None:
    """
    Reject an exact repeat of a pending submission.

    Raises:
        DuplicateSubmissionError: If one is already pending
    """
    existing = await repository.get_pending_by_fingerprint(
        db, normalized_name, location_fingerprint
    )

    if existing:
        logger.warning(
            f"Duplicate pending submission: name={normalized_name}, "
            f"location={location_fingerprint}, existing={existing.id}"
        )
        raise DuplicateSubmissionError(school_name)


async def _send_intake_emails(
    db: AsyncSession,
    submission: SchoolSubmission,
    user: CurrentUser,
) -> None:
    """Notify the admin inbox and the submitter, then record what was sent."""
    admin_sent = False
    user_sent = False

    try:
        admin_sent = await send_submission_admin_alert(
            to_email=settings.admin_email,
            submitter_name=user.display_name,
            submitter_email=user.email,
            school_name=submission.school_name,
            address=submission.address,
            level=submission.level.value,
            submission_reason=submission.submission_reason,
            additional_notes=submission.additional_notes,
        )
        if not admin_sent:
            logger.error(f"Failed to send admin alert for submission {submission.id}")
    except Exception as e:
        logger.error(
            f"Exception sending admin alert for submission {submission.id}: {e}", exc_info=True
        )

    try:
        if user.email:
            user_sent = await send_submission_confirmation(
                to_email=user.email,
                user_name=user.display_name,
                school_name=submission.school_name,
            )
        if not user_sent:
            logger.error(f"Failed to send confirmation for submission {submission.id}")
    except Exception as e:
        logger.error(
            f"Exception sending confirmation for submission {submission.id}: {e}", exc_info=True
        )

    submission_id = submission.id
    try:
        await repository.mark_emails_sent(
            db,
            submission,
            admin_notification=admin_sent,
            user_confirmation=user_sent,
        )
    except Exception as e:
        logger.error(
            f"Failed to record emails sent for submission {submission_id}: {e}", exc_info=True
        )
        # A failed commit expires the instance; reload it so the caller can serialize it
        try:
            await db.rollback()
            await db.refresh(submission)
        except Exception as reload_error:
            logger.error(f"Failed to reload submission {submission_id}: {reload_error}")


async def submit_submission(
    db: AsyncSession,
    user: CurrentUser,
    data: SchoolSubmissionCreate,
) -> SchoolSubmission:
    """
    Submit a new school for review.

    Args:
        db: Database session
        user: The signed-in submitter
        data: Validated submission body

    Returns:
        The created pending SchoolSubmission

    Raises:
        ValidationFailedError: If the county or locality is invalid
        DuplicateSchoolError: If an active school with an overlapping name exists
        DuplicateSubmissionError: If the same school is already pending
    """
    logger.info(f"Processing school submission from user {user.id}: {data.school_name}")

    await _validate_location(db, data)

    normalized_name = normalize_school_name(data.school_name)
    location_fingerprint = build_location_fingerprint(data.county_id, data.locality_id)

    await _check_duplicate_school(db, normalized_name, data.county_id, data.locality_id)
    await _check_duplicate_submission(db, data.school_name, normalized_name, location_fingerprint)

    submission = await repository.create(
        db,
        data,
        submitted_by=user.id,
        normalized_name=normalized_name,
        location_fingerprint=location_fingerprint,
    )
    logger.info(f"Created submission {submission.id} for school: {submission.school_name}")

    await _send_intake_emails(db, submission, user)

    return submission


# ============================================
# Listing
# ============================================


async def list_submissions(
    db: AsyncSession,
    user: CurrentUser,
    *,
    all_users: bool = False,
    status: SubmissionStatus | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[SchoolSubmission], int]:
    """
    List submissions visible to ``user``.

    Admins asking for ``all_users`` see everyone's submissions; every other
    caller sees only their own.

    Returns:
        Tuple of (page of submissions, total count)
    """
    submitted_by = None if (all_users and user.is_admin) else user.id

    return await repository.list_submissions(
        db,
        submitted_by=submitted_by,
        status=status,
        skip=offset,
        limit=limit,
    )


# ============================================
# Admin disposition
# ============================================


async def _notify_submitter(
    db: AsyncSession,
    submission: SchoolSubmission,
    action: SubmissionAction,
    duplicate_school: School | None = None,
) -> None:
    """Send the decision email to the submitter; failures are logged only."""
    try:
        submitter = await UserRepository.get_by_id(db, submission.submitted_by)
        if not submitter:
            logger.warning(
                f"Submitter {submission.submitted_by} of submission {submission.id} not found"
            )
            return

        if action == SubmissionAction.APPROVE:
            sent = await send_submission_approved(
                to_email=submitter.email,
                user_name=submitter.display_name,
                school_name=submission.school_name,
                admin_notes=submission.admin_notes,
            )
        elif action == SubmissionAction.REJECT:
            sent = await send_submission_rejected(
                to_email=submitter.email,
                user_name=submitter.display_name,
                school_name=submission.school_name,
                rejection_reason=submission.rejection_reason or "",
            )
        else:
            sent = await send_submission_duplicate(
                to_email=submitter.email,
                user_name=submitter.display_name,
                school_name=submission.school_name,
                existing_school_name=duplicate_school.name if duplicate_school else "",
            )

        if sent:
            logger.info(f"Sent {action.value} email for submission {submission.id}")
        else:
            logger.error(f"Failed to send {action.value} email for submission {submission.id}")
    except Exception as e:
        logger.error(
            f"Failed to notify submitter of submission {submission.id}: {e}", exc_info=True
        )


async def _approve(
    db: AsyncSession,
    submission: SchoolSubmission,
    admin_id: UUID,
    admin_notes: str | None,
) -> SchoolSubmission:
    """Create the school and mark the submission approved in one commit."""
    school = await SchoolRepository.create(
        db,
        name=submission.school_name,
        county_id=submission.county_id,
        level=submission.level,
        address=submission.address,
        locality_id=submission.locality_id,
        website=submission.website,
        phone=submission.phone,
        email=submission.email,
        submission_id=submission.id,
    )
    logger.info(f"Created school {school.id} from submission {submission.id}")

    return await repository.update_decision(
        db,
        submission,
        SubmissionStatus.APPROVED,
        reviewed_by=admin_id,
        admin_notes=admin_notes,
        created_school_id=school.id,
    )


async def process_submission(
    db: AsyncSession,
    submission_id: UUID,
    admin: CurrentUser,
    data: SchoolSubmissionUpdate,
) -> SchoolSubmission:
    """
    Apply an admin decision to a pending submission.

    Args:
        db: Database session
        submission_id: UUID of the submission
        admin: The deciding admin
        data: Validated action body

    Returns:
        Updated SchoolSubmission

    Raises:
        SubmissionNotFoundError: If the submission doesn't exist
        SubmissionAlreadyProcessedError: If it is not pending
        ValidationFailedError: If the action is missing its required field
        SchoolNotFoundError: If duplicateSchoolId references no school
    """
    logger.info(f"Admin {admin.id} processing submission {submission_id}: {data.action.value}")

    submission = await repository.get_by_id(db, submission_id)

    if not submission:
        logger.warning(f"Submission not found: {submission_id}")
        raise SubmissionNotFoundError(submission_id)

    if submission.status != SubmissionStatus.PENDING:
        logger.warning(
            f"Cannot process submission {submission_id}: status={submission.status.value}"
        )
        raise SubmissionAlreadyProcessedError(submission.status)

    duplicate_school: School | None = None

    try:
        if data.action == SubmissionAction.APPROVE:
            updated = await _approve(db, submission, admin.id, data.admin_notes)

        elif data.action == SubmissionAction.REJECT:
            reason = (data.rejection_reason or "").strip()
            if not reason:
                raise ValidationFailedError(
                    "Rejection reason is required", "REJECTION_REASON_REQUIRED"
                )
            updated = await repository.update_decision(
                db,
                submission,
                SubmissionStatus.REJECTED,
                reviewed_by=admin.id,
                admin_notes=data.admin_notes,
                rejection_reason=reason,
            )

        else:
            if data.duplicate_school_id is None:
                raise ValidationFailedError(
                    "Duplicate school ID is required", "DUPLICATE_SCHOOL_ID_REQUIRED"
                )
            duplicate_school = await SchoolRepository.get_by_id(db, data.duplicate_school_id)
            if not duplicate_school:
                raise SchoolNotFoundError(data.duplicate_school_id)
            updated = await repository.update_decision(
                db,
                submission,
                SubmissionStatus.DUPLICATE,
                reviewed_by=admin.id,
                admin_notes=data.admin_notes,
                duplicate_school_id=duplicate_school.id,
            )

    except repository.InvalidStatusTransitionError as e:
        logger.error(f"Status transition error: {e}")
        raise SubmissionAlreadyProcessedError(submission.status) from e

    logger.info(f"Submission {submission_id} is now {updated.status.value}")

    await _notify_submitter(db, updated, data.action, duplicate_school)

    return updated


ACTION_MESSAGES = {
    SubmissionAction.APPROVE: "School submission approved and school created",
    SubmissionAction.REJECT: "School submission rejected",
    SubmissionAction.MARK_DUPLICATE: "School submission marked as duplicate",
}
