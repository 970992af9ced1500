"""
School Submissions Router

API endpoints for proposing new schools and for admins to decide on them.

Endpoints:
- GET /school-submissions - List own submissions (or all, for admins with ?admin=true)
- POST /school-submissions - Submit a new school for review
- PUT /school-submissions?id= - Approve, reject or mark a submission as duplicate

Security:
- All endpoints require a valid bearer token; PUT requires the admin role
- Rate limiting on POST (per user) and PUT (per admin)
- Bodies are validated after auth and rate limiting
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from uniform_exchange.core.auth import CurrentUser, get_current_admin_user, get_current_user
from uniform_exchange.core.database import get_db
from uniform_exchange.core.rate_limit import enforce_rate_limit
from uniform_exchange.modules.school_submissions import service
from uniform_exchange.modules.school_submissions.models import SubmissionStatus
from uniform_exchange.modules.school_submissions.schemas import (
    SchoolSubmissionCreate,
    SchoolSubmissionUpdate,
    SubmissionItem,
    SubmissionListResponse,
    SubmissionResponse,
)
from uniform_exchange.modules.shared.errors import WorkflowError, workflow_error_to_http
from uniform_exchange.modules.shared.http import body_schema, parse_id_param, read_json_body

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_CREATE = (5, 3600)  # 5 submissions per hour per user
RATE_LIMIT_PROCESS = (30, 60)  # 30 decisions per minute per admin


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": "Internal server error", "code": "INTERNAL_ERROR"},
    )


@router.get(
    "",
    response_model=SubmissionListResponse,
    summary="List School Submissions",
    description="""
List school submissions, newest first.

**Query Parameters:**
- `admin`: When true and the caller is an admin, list every user's submissions
- `status`: Filter by status (pending, approved, rejected, duplicate)
- `limit`: Maximum records to return (1-100). Default: 20
- `offset`: Number of records to skip. Default: 0
""",
)
async def list_submissions(
    admin: bool = Query(False, description="List all submissions (admins only)"),
    status_filter: SubmissionStatus | None = Query(None, alias="status"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> SubmissionListResponse:
    """List own submissions, or all of them for admins."""
    try:
        submissions, total = await service.list_submissions(
            db,
            user,
            all_users=admin,
            status=status_filter,
            limit=limit,
            offset=offset,
        )
    except Exception as e:
        logger.exception(f"Error listing submissions: {e}")
        raise _internal_error() from e

    return SubmissionListResponse(
        submissions=[SubmissionItem.model_validate(s) for s in submissions],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit School",
    description="""
Propose a school that is missing from the school selector.

**Duplicate Prevention:**
- A name overlapping an active school in the same county/locality is rejected
  with a `suggestion` naming that school
- Only one pending submission per normalized name and location

Admin and submitter notification emails are best-effort.
""",
    responses={
        400: {"description": "Invalid data, invalid location, or duplicate detected"},
        401: {"description": "Unauthorized - invalid or missing token"},
        429: {"description": "Rate limit exceeded"},
    },
    openapi_extra=body_schema(SchoolSubmissionCreate),
)
async def create_submission(
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> SubmissionResponse:
    """Submit a new school for admin review."""
    await enforce_rate_limit(f"school_submissions:create:{user.id}", *RATE_LIMIT_CREATE)

    data = await read_json_body(request, SchoolSubmissionCreate)

    try:
        submission = await service.submit_submission(db, user, data)
    except WorkflowError as e:
        logger.warning(f"School submission rejected: {e.error_code} - {e.message}")
        raise workflow_error_to_http(e) from e
    except Exception as e:
        logger.exception(f"Error creating school submission: {e}")
        raise _internal_error() from e

    logger.info(f"School submission created: id={submission.id}, school={submission.school_name}")

    return SubmissionResponse(
        submission=SubmissionItem.model_validate(submission),
        message="School submitted for review. We'll email you once it has been reviewed.",
    )


@router.put(
    "",
    response_model=SubmissionResponse,
    summary="Process School Submission",
    description="""
Decide on a pending submission.

**Actions:**
- `approve`: creates the school and links it to the submission
- `reject`: requires `rejectionReason`
- `mark_duplicate`: requires `duplicateSchoolId` of an existing school

Submissions that are no longer pending cannot be processed again.

**Access:** Admin only
""",
    responses={
        400: {"description": "Missing id, invalid data, or submission already processed"},
        401: {"description": "Unauthorized - invalid or missing token"},
        403: {"description": "Forbidden - not an admin"},
        404: {"description": "Submission not found"},
        429: {"description": "Rate limit exceeded"},
    },
    openapi_extra=body_schema(SchoolSubmissionUpdate),
)
async def process_submission(
    request: Request,
    id_param: str | None = Query(None, alias="id", description="Submission ID"),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> SubmissionResponse:
    """Approve, reject or mark a submission as duplicate."""
    await enforce_rate_limit(f"school_submissions:process:{admin.id}", *RATE_LIMIT_PROCESS)

    submission_id = parse_id_param(id_param, "Submission")
    data = await read_json_body(request, SchoolSubmissionUpdate)

    try:
        submission = await service.process_submission(db, submission_id, admin, data)
    except WorkflowError as e:
        logger.warning(f"Cannot process submission {submission_id}: {e.message}")
        raise workflow_error_to_http(e) from e
    except Exception as e:
        logger.exception(f"Error processing submission {submission_id}: {e}")
        raise _internal_error() from e

    logger.info(f"Admin {admin.id} processed submission {submission_id}: {data.action.value}")

    return SubmissionResponse(
        submission=SubmissionItem.model_validate(submission),
        message=service.ACTION_MESSAGES[data.action],
    )
