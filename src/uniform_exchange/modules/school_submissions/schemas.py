"""
School Submission Schemas

Pydantic schemas for request validation and response serialization.
The wire format is camelCase (see CamelModel).
"""

import enum
from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, HttpUrl, field_validator

from uniform_exchange.modules.school_submissions.helpers import normalize_school_name
from uniform_exchange.modules.school_submissions.models import SubmissionStatus
from uniform_exchange.modules.schools.models import SchoolLevel
from uniform_exchange.modules.shared.schemas import CamelModel


class SchoolSubmissionCreate(CamelModel):
    """Request body for POST /school-submissions."""

    school_name: str = Field(..., min_length=2, max_length=200)
    address: str = Field(..., min_length=5, max_length=500)
    county_id: UUID
    locality_id: UUID | None = None
    level: SchoolLevel
    website: HttpUrl | None = None
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    submission_reason: str = Field(..., min_length=10, max_length=1000)
    additional_notes: str | None = Field(None, max_length=2000)

    @field_validator("website", "email", "phone", "locality_id", mode="before")
    @classmethod
    def empty_string_to_none(cls, value):
        """Forms send "" for untouched optional fields."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("school_name", "address", "submission_reason")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @field_validator("address")
    @classmethod
    def address_must_have_content(cls, value: str) -> str:
        if len(value) < 5:
            raise ValueError("Address must be at least 5 characters")
        return value

    @field_validator("submission_reason")
    @classmethod
    def reason_must_have_content(cls, value: str) -> str:
        if len(value) < 10:
            raise ValueError("Submission reason must be at least 10 characters")
        return value

    @field_validator("school_name")
    @classmethod
    def name_must_have_letters(cls, value: str) -> str:
        if len(value) < 2:
            raise ValueError("School name must be at least 2 characters")
        if not normalize_school_name(value):
            raise ValueError("School name must contain letters or numbers")
        return value


class SubmissionAction(str, enum.Enum):
    """Admin disposition of a submission."""

    APPROVE = "approve"
    REJECT = "reject"
    MARK_DUPLICATE = "mark_duplicate"


class SchoolSubmissionUpdate(CamelModel):
    """
    Request body for PUT /school-submissions?id=.

    Action-specific requirements (rejectionReason for reject,
    duplicateSchoolId for mark_duplicate) are checked by the service once
    the submission is known to be pending.
    """

    action: SubmissionAction
    admin_notes: str | None = Field(None, max_length=2000)
    rejection_reason: str | None = Field(None, max_length=1000)
    duplicate_school_id: UUID | None = None

    @field_validator("duplicate_school_id", mode="before")
    @classmethod
    def empty_string_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SubmissionItem(CamelModel):
    """A submission as returned by the API."""

    id: UUID
    submitted_by: UUID
    school_name: str
    address: str
    county_id: UUID
    locality_id: UUID | None = None
    level: SchoolLevel
    website: str | None = None
    phone: str | None = None
    email: str | None = None
    submission_reason: str
    additional_notes: str | None = None
    status: SubmissionStatus
    reviewed_by: UUID | None = None
    reviewed_at: datetime | None = None
    admin_notes: str | None = None
    rejection_reason: str | None = None
    created_school_id: UUID | None = None
    duplicate_school_id: UUID | None = None
    normalized_name: str
    location_fingerprint: str
    emails_sent: dict | None = None
    created_at: datetime
    updated_at: datetime


class SubmissionResponse(CamelModel):
    """Response for POST and PUT."""

    success: bool = True
    submission: SubmissionItem
    message: str


class SubmissionListResponse(CamelModel):
    """Response for GET /school-submissions."""

    success: bool = True
    submissions: list[SubmissionItem]
    total: int
    limit: int
    offset: int


class DuplicateSuggestion(CamelModel):
    """Existing school offered instead of creating a duplicate."""

    school_id: UUID
    school_name: str
    address: str | None = None
    message: str
