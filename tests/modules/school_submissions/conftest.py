"""
Fixtures for school submissions tests.
"""

from datetime import UTC, datetime
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from uniform_exchange.modules.school_submissions.helpers import (
    build_location_fingerprint,
    normalize_school_name,
)
from uniform_exchange.modules.school_submissions.models import SchoolSubmission, SubmissionStatus
from uniform_exchange.modules.school_submissions.schemas import SchoolSubmissionCreate
from uniform_exchange.modules.schools.models import School, SchoolLevel
from uniform_exchange.modules.users.models import User


@pytest.fixture
def county_id():
    return uuid4()


@pytest.fixture
def locality_id():
    return uuid4()


@pytest.fixture
def sample_submission_create(county_id, locality_id):
    """Create a sample submission create request."""
    return SchoolSubmissionCreate(
        school_name="St. Mary's National School",
        address="Main Street, Ballybeg",
        county_id=county_id,
        locality_id=locality_id,
        level=SchoolLevel.PRIMARY,
        website="https://stmarys.ie",
        phone="+353 1 234 5678",
        email="office@stmarys.ie",
        submission_reason="My children attend this school and it is missing.",
        additional_notes=None,
    )


@pytest.fixture
def sample_submission_model(regular_user, county_id, locality_id):
    """Create a sample pending submission model."""
    submission = MagicMock(spec=SchoolSubmission)
    submission.id = uuid4()
    submission.submitted_by = regular_user.id
    submission.school_name = "St. Mary's National School"
    submission.address = "Main Street, Ballybeg"
    submission.county_id = county_id
    submission.locality_id = locality_id
    submission.level = SchoolLevel.PRIMARY
    submission.website = "https://stmarys.ie/"
    submission.phone = "+353 1 234 5678"
    submission.email = "office@stmarys.ie"
    submission.submission_reason = "My children attend this school and it is missing."
    submission.additional_notes = None
    submission.status = SubmissionStatus.PENDING
    submission.reviewed_by = None
    submission.reviewed_at = None
    submission.admin_notes = None
    submission.rejection_reason = None
    submission.created_school_id = None
    submission.duplicate_school_id = None
    submission.normalized_name = normalize_school_name(submission.school_name)
    submission.location_fingerprint = build_location_fingerprint(county_id, locality_id)
    submission.emails_sent = None
    submission.created_at = datetime.now(UTC)
    submission.updated_at = datetime.now(UTC)
    return submission


@pytest.fixture
def existing_school(county_id, locality_id):
    """Create an active school at the sample location."""
    school = MagicMock(spec=School)
    school.id = uuid4()
    school.name = "St Marys NS"
    school.address = "Church Road, Ballybeg"
    school.county_id = county_id
    school.locality_id = locality_id
    school.level = SchoolLevel.PRIMARY
    school.is_active = True
    return school


@pytest.fixture
def submitter(regular_user):
    """The stored user row behind regular_user."""
    user = MagicMock(spec=User)
    user.id = regular_user.id
    user.email = regular_user.email
    user.name = regular_user.name
    user.display_name = regular_user.name
    return user
