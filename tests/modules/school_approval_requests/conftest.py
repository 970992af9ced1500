"""
Fixtures for school approval request tests.
"""

from datetime import UTC, datetime
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from uniform_exchange.modules.school_approval_requests.models import (
    ApprovalRequestStatus,
    SchoolApprovalRequest,
)
from uniform_exchange.modules.schools.models import School
from uniform_exchange.modules.users.models import User, UserProfile


@pytest.fixture
def primary_school_id():
    return uuid4()


@pytest.fixture
def requested_school_ids():
    return [uuid4(), uuid4()]


@pytest.fixture
def sample_profile(regular_user, primary_school_id):
    """A real profile instance so school_ids behaves as stored."""
    return UserProfile(
        user_id=regular_user.id,
        primary_school_id=primary_school_id,
        additional_schools=[],
    )


@pytest.fixture
def requested_schools(requested_school_ids):
    """School rows for requested_school_ids."""
    schools = []
    for index, school_id in enumerate(requested_school_ids):
        school = MagicMock(spec=School)
        school.id = school_id
        school.name = f"School {index + 1}"
        schools.append(school)
    return schools


@pytest.fixture
def sample_request_model(regular_user, primary_school_id, requested_school_ids):
    """Create a sample pending approval request model."""
    approval_request = MagicMock(spec=SchoolApprovalRequest)
    approval_request.id = uuid4()
    approval_request.user_id = regular_user.id
    approval_request.current_schools = [str(primary_school_id)]
    approval_request.requested_schools = [str(school_id) for school_id in requested_school_ids]
    approval_request.reason = "My younger child moved to a new school."
    approval_request.status = ApprovalRequestStatus.PENDING
    approval_request.reviewed_by = None
    approval_request.reviewed_at = None
    approval_request.admin_notes = None
    approval_request.approved_schools = None
    approval_request.denial_reason = None
    approval_request.next_steps = None
    approval_request.emails_sent = None
    approval_request.created_at = datetime.now(UTC)
    approval_request.updated_at = datetime.now(UTC)
    return approval_request


@pytest.fixture
def requester(regular_user):
    """The stored user row behind regular_user."""
    user = MagicMock(spec=User)
    user.id = regular_user.id
    user.email = regular_user.email
    user.name = regular_user.name
    user.display_name = regular_user.name
    return user
