"""
Unit tests for school submission request schemas.
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from uniform_exchange.modules.school_submissions.schemas import (
    SchoolSubmissionCreate,
    SchoolSubmissionUpdate,
    SubmissionAction,
)


def _payload(**overrides):
    payload = {
        "schoolName": "Scoil Bhríde",
        "address": "Church Road, Ballybeg",
        "countyId": str(uuid4()),
        "level": "primary",
        "submissionReason": "Our local school is missing from the list.",
    }
    payload.update(overrides)
    return payload


class TestSchoolSubmissionCreate:
    """Tests for SchoolSubmissionCreate validation."""

    def test_accepts_camel_case_payload(self):
        data = SchoolSubmissionCreate.model_validate(_payload())
        assert data.school_name == "Scoil Bhríde"
        assert data.locality_id is None
        assert data.website is None

    def test_empty_optional_fields_become_none(self):
        data = SchoolSubmissionCreate.model_validate(
            _payload(website="", email="", phone="  ", localityId="")
        )
        assert data.website is None
        assert data.email is None
        assert data.phone is None
        assert data.locality_id is None

    def test_strips_text_fields(self):
        data = SchoolSubmissionCreate.model_validate(_payload(schoolName="  Scoil Bhríde  "))
        assert data.school_name == "Scoil Bhríde"

    def test_rejects_whitespace_only_address(self):
        with pytest.raises(ValidationError):
            SchoolSubmissionCreate.model_validate(_payload(address="      "))

    def test_rejects_whitespace_only_reason(self):
        with pytest.raises(ValidationError):
            SchoolSubmissionCreate.model_validate(_payload(submissionReason="            "))

    def test_rejects_reason_short_after_stripping(self):
        with pytest.raises(ValidationError):
            SchoolSubmissionCreate.model_validate(_payload(submissionReason="   too short   "))

    def test_rejects_name_without_letters(self):
        with pytest.raises(ValidationError):
            SchoolSubmissionCreate.model_validate(_payload(schoolName="!!!"))

    def test_rejects_short_reason(self):
        with pytest.raises(ValidationError):
            SchoolSubmissionCreate.model_validate(_payload(submissionReason="short"))

    def test_rejects_invalid_email(self):
        with pytest.raises(ValidationError):
            SchoolSubmissionCreate.model_validate(_payload(email="not-an-email"))

    def test_rejects_invalid_website(self):
        with pytest.raises(ValidationError):
            SchoolSubmissionCreate.model_validate(_payload(website="not a url"))

    def test_rejects_unknown_level(self):
        with pytest.raises(ValidationError):
            SchoolSubmissionCreate.model_validate(_payload(level="university"))

    def test_requires_county(self):
        payload = _payload()
        del payload["countyId"]
        with pytest.raises(ValidationError):
            SchoolSubmissionCreate.model_validate(payload)


class TestSchoolSubmissionUpdate:
    """Tests for SchoolSubmissionUpdate validation."""

    def test_reject_without_reason_is_structurally_valid(self):
        """Action-specific requirements are checked by the service."""
        data = SchoolSubmissionUpdate.model_validate({"action": "reject"})
        assert data.action == SubmissionAction.REJECT
        assert data.rejection_reason is None

    def test_empty_duplicate_school_id_becomes_none(self):
        data = SchoolSubmissionUpdate.model_validate(
            {"action": "mark_duplicate", "duplicateSchoolId": ""}
        )
        assert data.duplicate_school_id is None

    def test_rejects_unknown_action(self):
        with pytest.raises(ValidationError):
            SchoolSubmissionUpdate.model_validate({"action": "archive"})
