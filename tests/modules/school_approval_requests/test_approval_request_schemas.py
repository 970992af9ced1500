"""
Unit tests for school approval request schemas.
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from uniform_exchange.core.config import settings
from uniform_exchange.modules.school_approval_requests.schemas import (
    ApprovalAction,
    ApprovalRequestCreate,
    ApprovalRequestUpdate,
)


class TestApprovalRequestCreate:
    """Tests for ApprovalRequestCreate validation."""

    def test_accepts_valid_payload(self):
        school_id = uuid4()
        data = ApprovalRequestCreate.model_validate(
            {"requestedSchools": [str(school_id)], "reason": "  My child changed school.  "}
        )
        assert data.requested_schools == [school_id]
        assert data.reason == "My child changed school."

    def test_requires_at_least_one_school(self):
        with pytest.raises(ValidationError):
            ApprovalRequestCreate.model_validate(
                {"requestedSchools": [], "reason": "My child changed school."}
            )

    def test_rejects_too_many_schools(self):
        schools = [str(uuid4()) for _ in range(settings.max_schools_per_request + 1)]
        with pytest.raises(ValidationError):
            ApprovalRequestCreate.model_validate(
                {"requestedSchools": schools, "reason": "My child changed school."}
            )

    def test_rejects_repeated_schools(self):
        school_id = str(uuid4())
        with pytest.raises(ValidationError):
            ApprovalRequestCreate.model_validate(
                {"requestedSchools": [school_id, school_id], "reason": "My child changed school."}
            )

    def test_rejects_malformed_school_id(self):
        with pytest.raises(ValidationError):
            ApprovalRequestCreate.model_validate(
                {"requestedSchools": ["school-1"], "reason": "My child changed school."}
            )

    def test_rejects_reason_that_is_short_after_stripping(self):
        with pytest.raises(ValidationError):
            ApprovalRequestCreate.model_validate(
                {"requestedSchools": [str(uuid4())], "reason": "   short      "}
            )


class TestApprovalRequestUpdate:
    """Tests for ApprovalRequestUpdate validation."""

    def test_approve_without_subset(self):
        data = ApprovalRequestUpdate.model_validate({"action": "approve"})
        assert data.action == ApprovalAction.APPROVE
        assert data.approved_schools is None

    def test_deny_with_reason_and_next_steps(self):
        data = ApprovalRequestUpdate.model_validate(
            {"action": "deny", "denialReason": "Not verified", "nextSteps": "Contact support"}
        )
        assert data.denial_reason == "Not verified"
        assert data.next_steps == "Contact support"

    def test_rejects_unknown_action(self):
        with pytest.raises(ValidationError):
            ApprovalRequestUpdate.model_validate({"action": "reject"})
