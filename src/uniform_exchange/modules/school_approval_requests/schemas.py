"""
School Approval Request Schemas

Pydantic schemas for request validation and response serialization.
"""

import enum
from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from uniform_exchange.core.config import settings
from uniform_exchange.modules.school_approval_requests.models import ApprovalRequestStatus
from uniform_exchange.modules.shared.schemas import CamelModel


def _unique(values: list[UUID]) -> list[UUID]:
    if len(set(values)) != len(values):
        raise ValueError("School IDs must be unique")
    return values


class ApprovalRequestCreate(CamelModel):
    """Request body for POST /school-approval-requests."""

    requested_schools: list[UUID] = Field(
        ..., min_length=1, max_length=settings.max_schools_per_request
    )
    reason: str = Field(..., min_length=10, max_length=1000)

    @field_validator("requested_schools")
    @classmethod
    def schools_must_be_unique(cls, value: list[UUID]) -> list[UUID]:
        return _unique(value)

    @field_validator("reason")
    @classmethod
    def reason_must_have_content(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 10:
            raise ValueError("Reason must be at least 10 characters")
        return value


class ApprovalAction(str, enum.Enum):
    """Admin disposition of an approval request."""

    APPROVE = "approve"
    DENY = "deny"


class ApprovalRequestUpdate(CamelModel):
    """Request body for PUT /school-approval-requests?id=."""

    action: ApprovalAction
    admin_notes: str | None = Field(None, max_length=2000)
    approved_schools: list[UUID] | None = None
    denial_reason: str | None = Field(None, max_length=1000)
    next_steps: str | None = Field(None, max_length=1000)

    @field_validator("approved_schools")
    @classmethod
    def approved_must_be_unique(cls, value: list[UUID] | None) -> list[UUID] | None:
        if value is None:
            return value
        return _unique(value)


class ApprovalRequestItem(CamelModel):
    """An approval request as returned by the API."""

    id: UUID
    user_id: UUID
    current_schools: list[str]
    requested_schools: list[str]
    reason: str
    status: ApprovalRequestStatus
    reviewed_by: UUID | None = None
    reviewed_at: datetime | None = None
    admin_notes: str | None = None
    approved_schools: list[str] | None = None
    denial_reason: str | None = None
    next_steps: str | None = None
    emails_sent: dict | None = None
    created_at: datetime
    updated_at: datetime


class ApprovalRequestResponse(CamelModel):
    """Response for POST and PUT."""

    success: bool = True
    request: ApprovalRequestItem
    message: str


class ApprovalRequestListResponse(CamelModel):
    """Response for GET /school-approval-requests."""

    success: bool = True
    requests: list[ApprovalRequestItem]
    total: int
    limit: int
    offset: int
