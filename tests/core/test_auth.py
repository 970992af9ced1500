"""
Unit tests for the authentication dependencies.
"""

from uuid import uuid4

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from uniform_exchange.core.auth import CurrentUser, get_current_admin_user, get_current_user
from uniform_exchange.core.security import create_access_token


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentUser:
    """Tests for get_current_user."""

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail["code"] == "AUTHENTICATION_REQUIRED"

    @pytest.mark.asyncio
    async def test_valid_token(self):
        user_id = uuid4()
        token = create_access_token(
            str(user_id),
            additional_claims={"email": "parent@test.com", "role": "user", "name": "Pat"},
        )

        user = await get_current_user(_credentials(token))

        assert user.id == user_id
        assert user.email == "parent@test.com"
        assert user.is_admin is False
        assert user.display_name == "Pat"

    @pytest.mark.asyncio
    async def test_role_defaults_to_user(self):
        token = create_access_token(str(uuid4()), additional_claims={"email": "a@test.com"})

        user = await get_current_user(_credentials(token))

        assert user.role == "user"

    @pytest.mark.asyncio
    async def test_non_access_token(self):
        token = create_access_token(str(uuid4()), additional_claims={"type": "refresh"})

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_credentials(token))

        assert exc_info.value.detail["code"] == "INVALID_TOKEN_TYPE"

    @pytest.mark.asyncio
    async def test_subject_must_be_uuid(self):
        token = create_access_token("user-1")

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_credentials(token))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail["code"] == "INVALID_TOKEN_CLAIMS"


class TestGetCurrentAdminUser:
    """Tests for get_current_admin_user."""

    @pytest.mark.asyncio
    async def test_admin_passes(self, admin_user):
        assert await get_current_admin_user(admin_user) is admin_user

    @pytest.mark.asyncio
    async def test_non_admin_is_forbidden(self, regular_user):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_admin_user(regular_user)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail["error"] == "Admin access required"

    def test_display_name_falls_back_to_email(self):
        user = CurrentUser(id=uuid4(), email="no-name@test.com", role="user")
        assert user.display_name == "no-name@test.com"
