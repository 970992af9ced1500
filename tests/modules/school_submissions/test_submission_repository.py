"""
Unit tests for school submissions repository layer.

These tests focus on the state machine transitions and the staged writes.
"""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from uniform_exchange.modules.school_submissions import repository
from uniform_exchange.modules.school_submissions.models import SchoolSubmission, SubmissionStatus
from uniform_exchange.modules.school_submissions.repository import (
    VALID_STATUS_TRANSITIONS,
    InvalidStatusTransitionError,
    apply_status,
)


class TestStatusTransitions:
    """Tests for status transition state machine."""

    def test_pending_can_be_decided_any_way(self):
        valid = VALID_STATUS_TRANSITIONS[SubmissionStatus.PENDING]
        assert valid == {
            SubmissionStatus.APPROVED,
            SubmissionStatus.REJECTED,
            SubmissionStatus.DUPLICATE,
        }

    def test_terminal_states_have_no_transitions(self):
        """Terminal states should have no valid transitions."""
        assert VALID_STATUS_TRANSITIONS[SubmissionStatus.APPROVED] == set()
        assert VALID_STATUS_TRANSITIONS[SubmissionStatus.REJECTED] == set()
        assert VALID_STATUS_TRANSITIONS[SubmissionStatus.DUPLICATE] == set()

    def test_all_statuses_are_in_transition_map(self):
        for status in SubmissionStatus:
            assert status in VALID_STATUS_TRANSITIONS


class TestInvalidStatusTransitionError:
    """Tests for InvalidStatusTransitionError."""

    def test_error_message_contains_both_statuses(self):
        error = InvalidStatusTransitionError(SubmissionStatus.APPROVED, SubmissionStatus.REJECTED)
        assert "approved" in str(error)
        assert "rejected" in str(error)
        assert error.current_status == SubmissionStatus.APPROVED
        assert error.new_status == SubmissionStatus.REJECTED


class TestApplyStatus:
    """Tests for apply_status."""

    def test_sets_status_and_fields_on_pending_submission(self):
        submission = MagicMock(spec=SchoolSubmission)
        submission.status = SubmissionStatus.PENDING
        submission.rejection_reason = None

        apply_status(submission, SubmissionStatus.REJECTED, rejection_reason="Not a school")

        assert submission.status == SubmissionStatus.REJECTED
        assert submission.rejection_reason == "Not a school"

    def test_refuses_second_decision(self):
        submission = MagicMock(spec=SchoolSubmission)
        submission.status = SubmissionStatus.REJECTED

        with pytest.raises(InvalidStatusTransitionError):
            apply_status(submission, SubmissionStatus.APPROVED)

        assert submission.status == SubmissionStatus.REJECTED


class TestUpdateDecision:
    """Tests for update_decision."""

    @pytest.mark.asyncio
    async def test_records_reviewer_and_commits(self, mock_db, sample_submission_model):
        admin_id = uuid4()

        result = await repository.update_decision(
            mock_db,
            sample_submission_model,
            SubmissionStatus.REJECTED,
            reviewed_by=admin_id,
            rejection_reason="Closed in 2019",
        )

        assert result.status == SubmissionStatus.REJECTED
        assert result.reviewed_by == admin_id
        assert result.reviewed_at is not None
        assert result.rejection_reason == "Closed in 2019"
        mock_db.commit.assert_awaited_once()
        mock_db.refresh.assert_awaited_once_with(sample_submission_model)

    @pytest.mark.asyncio
    async def test_does_not_commit_invalid_transition(self, mock_db, sample_submission_model):
        sample_submission_model.status = SubmissionStatus.APPROVED

        with pytest.raises(InvalidStatusTransitionError):
            await repository.update_decision(
                mock_db,
                sample_submission_model,
                SubmissionStatus.DUPLICATE,
                reviewed_by=uuid4(),
            )

        mock_db.commit.assert_not_called()


class TestMarkEmailsSent:
    """Tests for mark_emails_sent."""

    @pytest.mark.asyncio
    async def test_records_flags_in_camel_case(self, mock_db, sample_submission_model):
        await repository.mark_emails_sent(
            mock_db,
            sample_submission_model,
            admin_notification=True,
            user_confirmation=False,
        )

        emails_sent = sample_submission_model.emails_sent
        assert emails_sent["adminNotification"] is True
        assert emails_sent["userConfirmation"] is False
        assert "sentAt" in emails_sent
        mock_db.commit.assert_awaited_once()


class TestCreate:
    """Tests for create."""

    @pytest.mark.asyncio
    async def test_create_stores_pending_submission(
        self, mock_db, regular_user, sample_submission_create
    ):
        result = await repository.create(
            mock_db,
            sample_submission_create,
            submitted_by=regular_user.id,
            normalized_name="st marys national school",
            location_fingerprint="abc",
        )

        assert result.status == SubmissionStatus.PENDING
        assert result.submitted_by == regular_user.id
        assert result.website == "https://stmarys.ie/"
        assert result.normalized_name == "st marys national school"
        mock_db.add.assert_called_once_with(result)
        mock_db.commit.assert_awaited_once()
