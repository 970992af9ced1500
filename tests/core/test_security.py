"""
Unit tests for token utilities.
"""

from datetime import timedelta
from uuid import uuid4

import jwt

from uniform_exchange.core.config import settings
from uniform_exchange.core.security import create_access_token, decode_token


class TestAccessTokens:
    """Tests for create_access_token and decode_token."""

    def test_round_trip_keeps_claims(self):
        user_id = str(uuid4())
        token = create_access_token(user_id, additional_claims={"role": "admin"})

        payload = decode_token(token)

        assert payload["sub"] == user_id
        assert payload["type"] == "access"
        assert payload["role"] == "admin"

    def test_expired_token_is_rejected(self):
        token = create_access_token(str(uuid4()), expires_delta=timedelta(seconds=-1))
        assert decode_token(token) is None

    def test_wrong_signature_is_rejected(self):
        token = jwt.encode(
            {"sub": str(uuid4()), "type": "access"},
            "some-other-secret",
            algorithm=settings.jwt_algorithm,
        )
        assert decode_token(token) is None

    def test_garbage_is_rejected(self):
        assert decode_token("not-a-jwt") is None
