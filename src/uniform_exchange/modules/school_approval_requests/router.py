"""
School Approval Requests Router

API endpoints for users asking to be associated with more schools and for
admins to decide on those requests.

Endpoints:
- GET /school-approval-requests - List own requests (or all, for admins with ?admin=true)
- POST /school-approval-requests - Request additional schools
- PUT /school-approval-requests?id= - Approve or deny a request
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from uniform_exchange.core.auth import CurrentUser, get_current_admin_user, get_current_user
from uniform_exchange.core.database import get_db
from uniform_exchange.core.rate_limit import enforce_rate_limit
from uniform_exchange.modules.school_approval_requests import service
from uniform_exchange.modules.school_approval_requests.models import ApprovalRequestStatus
from uniform_exchange.modules.school_approval_requests.schemas import (
    ApprovalRequestCreate,
    ApprovalRequestItem,
    ApprovalRequestListResponse,
    ApprovalRequestResponse,
    ApprovalRequestUpdate,
)
from uniform_exchange.modules.shared.errors import WorkflowError, workflow_error_to_http
from uniform_exchange.modules.shared.http import body_schema, parse_id_param, read_json_body

logger = logging.getLogger(__name__)

router = APIRouter()

RATE_LIMIT_CREATE = (5, 3600)  # 5 requests per hour per user
RATE_LIMIT_PROCESS = (30, 60)  # 30 decisions per minute per admin


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": "Internal server error", "code": "INTERNAL_ERROR"},
    )


@router.get(
    "",
    response_model=ApprovalRequestListResponse,
    summary="List School Approval Requests",
)
async def list_requests(
    admin: bool = Query(False, description="List all requests (admins only)"),
    status_filter: ApprovalRequestStatus | None = Query(None, alias="status"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApprovalRequestListResponse:
    """List own approval requests, or all of them for admins, newest first."""
    try:
        requests, total = await service.list_requests(
            db,
            user,
            all_users=admin,
            status=status_filter,
            limit=limit,
            offset=offset,
        )
    except Exception as e:
        logger.exception(f"Error listing approval requests: {e}")
        raise _internal_error() from e

    return ApprovalRequestListResponse(
        requests=[ApprovalRequestItem.model_validate(r) for r in requests],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "",
    response_model=ApprovalRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request Additional Schools",
    description="""
Ask to be associated with schools beyond those on your profile.

**Rules:**
- One pending request at a time
- Between 1 and 10 schools per request, none already on your profile
- No more than 15 schools in total
""",
    responses={
        400: {"description": "Invalid data or business rule violated"},
        401: {"description": "Unauthorized - invalid or missing token"},
        404: {"description": "Profile not found"},
        429: {"description": "Rate limit exceeded"},
    },
    openapi_extra=body_schema(ApprovalRequestCreate),
)
async def create_request(
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApprovalRequestResponse:
    """Create a pending school approval request."""
    await enforce_rate_limit(f"school_approval_requests:create:{user.id}", *RATE_LIMIT_CREATE)

    data = await read_json_body(request, ApprovalRequestCreate)

    try:
        approval_request = await service.submit_request(db, user, data)
    except WorkflowError as e:
        logger.warning(f"Approval request rejected for user {user.id}: {e.message}")
        raise workflow_error_to_http(e) from e
    except Exception as e:
        logger.exception(f"Error creating approval request: {e}")
        raise _internal_error() from e

    return ApprovalRequestResponse(
        request=ApprovalRequestItem.model_validate(approval_request),
        message="Request submitted. An administrator will review it shortly.",
    )


@router.put(
    "",
    response_model=ApprovalRequestResponse,
    summary="Process School Approval Request",
    description="""
Approve or deny a pending request.

`approvedSchools` must be a non-empty subset of the requested schools and
defaults to all of them. Approved schools are added to the requester's
profile.

**Access:** Admin only
""",
    responses={
        400: {"description": "Missing id, invalid data, or request already processed"},
        401: {"description": "Unauthorized - invalid or missing token"},
        403: {"description": "Forbidden - not an admin"},
        404: {"description": "Request not found"},
        429: {"description": "Rate limit exceeded"},
    },
    openapi_extra=body_schema(ApprovalRequestUpdate),
)
async def process_request(
    request: Request,
    id_param: str | None = Query(None, alias="id", description="Approval request ID"),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApprovalRequestResponse:
    """Approve or deny a school approval request."""
    await enforce_rate_limit(f"school_approval_requests:process:{admin.id}", *RATE_LIMIT_PROCESS)

    request_id = parse_id_param(id_param, "Request")
    data = await read_json_body(request, ApprovalRequestUpdate)

    try:
        approval_request = await service.process_request(db, request_id, admin, data)
    except WorkflowError as e:
        logger.warning(f"Cannot process approval request {request_id}: {e.message}")
        raise workflow_error_to_http(e) from e
    except Exception as e:
        logger.exception(f"Error processing approval request {request_id}: {e}")
        raise _internal_error() from e

    logger.info(f"Admin {admin.id} processed approval request {request_id}: {data.action.value}")

    return ApprovalRequestResponse(
        request=ApprovalRequestItem.model_validate(approval_request),
        message=service.ACTION_MESSAGES[data.action],
    )
