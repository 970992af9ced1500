"""
HTTP tests for the school approval request endpoints.
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

from uniform_exchange.modules.school_approval_requests.models import ApprovalRequestStatus
from uniform_exchange.modules.school_approval_requests.repository import (
    InvalidStatusTransitionError,
)
from uniform_exchange.modules.school_approval_requests.router import RATE_LIMIT_PROCESS
from uniform_exchange.modules.school_approval_requests.service import (
    PendingRequestExistsError,
    RequestAlreadyProcessedError,
)
from uniform_exchange.modules.users.repository import UserRepository

SERVICE = "uniform_exchange.modules.school_approval_requests.service"
URL = "/api/school-approval-requests"


class TestListRequestsEndpoint:
    """GET /school-approval-requests"""

    def test_requires_authentication(self, client):
        assert client.get(URL).status_code == 401

    def test_admin_lists_all(self, client, admin_headers, sample_request_model):
        with patch(f"{SERVICE}.list_requests", new_callable=AsyncMock) as mock_list:
            mock_list.return_value = ([sample_request_model], 1)

            response = client.get(URL, headers=admin_headers, params={"admin": "true"})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["requests"][0]["requestedSchools"] == sample_request_model.requested_schools
        assert mock_list.call_args.kwargs["all_users"] is True


class TestCreateRequestEndpoint:
    """POST /school-approval-requests"""

    def test_requires_authentication(self, client):
        response = client.post(
            URL, json={"requestedSchools": [str(uuid4())], "reason": "My child changed school."}
        )
        assert response.status_code == 401

    def test_invalid_body(self, client, user_headers):
        response = client.post(
            URL, headers=user_headers, json={"requestedSchools": [], "reason": "short"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid data"

    def test_malformed_json(self, client, user_headers):
        response = client.post(
            URL,
            headers={**user_headers, "Content-Type": "application/json"},
            content=b"{not json",
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_JSON"

    def test_created(self, client, user_headers, sample_request_model):
        with patch(f"{SERVICE}.submit_request", new_callable=AsyncMock) as mock_submit:
            mock_submit.return_value = sample_request_model

            response = client.post(
                URL,
                headers=user_headers,
                json={
                    "requestedSchools": sample_request_model.requested_schools,
                    "reason": sample_request_model.reason,
                },
            )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["request"]["status"] == "pending"

    def test_pending_request_exists(self, client, user_headers):
        with patch(f"{SERVICE}.submit_request", new_callable=AsyncMock) as mock_submit:
            mock_submit.side_effect = PendingRequestExistsError()

            response = client.post(
                URL,
                headers=user_headers,
                json={"requestedSchools": [str(uuid4())], "reason": "My child changed school."},
            )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "You already have a pending school approval request"


class TestProcessRequestEndpoint:
    """PUT /school-approval-requests?id="""

    def test_requires_admin(self, client, user_headers):
        response = client.put(
            URL, headers=user_headers, params={"id": str(uuid4())}, json={"action": "deny"}
        )
        assert response.status_code == 403

    def test_missing_id(self, client, admin_headers):
        response = client.put(URL, headers=admin_headers, json={"action": "deny"})

        assert response.status_code == 400
        assert response.json()["error"] == "Request ID is required"

    def test_already_processed(self, client, admin_headers):
        with patch(f"{SERVICE}.process_request", new_callable=AsyncMock) as mock_process:
            mock_process.side_effect = RequestAlreadyProcessedError(ApprovalRequestStatus.DENIED)

            response = client.put(
                URL, headers=admin_headers, params={"id": str(uuid4())}, json={"action": "deny"}
            )

        assert response.status_code == 400
        assert response.json()["code"] == "REQUEST_ALREADY_PROCESSED"

    def test_denied(self, client, admin_headers, sample_request_model):
        sample_request_model.status = ApprovalRequestStatus.DENIED
        sample_request_model.denial_reason = "Not verified"

        with patch(f"{SERVICE}.process_request", new_callable=AsyncMock) as mock_process:
            mock_process.return_value = sample_request_model

            response = client.put(
                URL,
                headers=admin_headers,
                params={"id": str(sample_request_model.id)},
                json={"action": "deny", "denialReason": "Not verified"},
            )

        assert response.status_code == 200
        body = response.json()
        assert body["request"]["status"] == "denied"
        assert body["request"]["denialReason"] == "Not verified"
        assert body["message"] == "School approval request denied"

    def test_rate_limited_before_id_check(self, client, admin_headers):
        limit, _ = RATE_LIMIT_PROCESS
        for _ in range(limit):
            assert client.put(URL, headers=admin_headers, json={}).status_code == 400

        response = client.put(URL, headers=admin_headers, json={})

        assert response.status_code == 429


class TestEmailFailuresOverHttp:
    """Email and bookkeeping failures never change the HTTP outcome."""

    def test_create_succeeds_when_emails_and_record_fail(
        self,
        client,
        mock_db,
        user_headers,
        sample_request_model,
        sample_profile,
        requested_schools,
    ):
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.SchoolRepository") as mock_schools,
            patch(f"{SERVICE}.send_approval_request_admin_alert") as admin_alert,
            patch(f"{SERVICE}.send_approval_request_confirmation") as confirmation,
        ):
            mock_users.get_profile = AsyncMock(return_value=sample_profile)
            mock_repo.get_pending_for_user = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(return_value=sample_request_model)
            mock_repo.mark_emails_sent = AsyncMock(side_effect=RuntimeError("commit failed"))
            mock_schools.get_many = AsyncMock(return_value=requested_schools)
            admin_alert.return_value = False
            confirmation.side_effect = RuntimeError("provider down")

            response = client.post(
                URL,
                headers=user_headers,
                json={
                    "requestedSchools": sample_request_model.requested_schools,
                    "reason": sample_request_model.reason,
                },
            )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["request"]["id"] == str(sample_request_model.id)
        assert body["message"] == "Request submitted. An administrator will review it shortly."
        mock_db.rollback.assert_awaited_once()

    def test_process_succeeds_when_notification_fails(
        self,
        client,
        admin_headers,
        sample_request_model,
        sample_profile,
        requested_schools,
        requester,
    ):
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.SchoolRepository") as mock_schools,
            patch(f"{SERVICE}.send_approval_request_approved") as approved_email,
        ):
            mock_repo.get_by_id = AsyncMock(return_value=sample_request_model)
            mock_repo.InvalidStatusTransitionError = InvalidStatusTransitionError

            async def decide(db, approval_request, status, **kwargs):
                approval_request.status = status
                approval_request.approved_schools = kwargs.get("approved_schools")
                return approval_request

            mock_repo.update_decision = AsyncMock(side_effect=decide)
            mock_users.get_profile = AsyncMock(return_value=sample_profile)
            mock_users.get_by_id = AsyncMock(return_value=requester)
            mock_users.add_additional_schools = UserRepository.add_additional_schools
            mock_schools.get_many = AsyncMock(return_value=requested_schools)
            approved_email.side_effect = RuntimeError("provider down")

            response = client.put(
                URL,
                headers=admin_headers,
                params={"id": str(sample_request_model.id)},
                json={"action": "approve"},
            )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["request"]["status"] == "approved"
        assert body["request"]["approvedSchools"] == sample_request_model.requested_schools
        assert body["message"] == "School approval request approved"
        approved_email.assert_called_once()
