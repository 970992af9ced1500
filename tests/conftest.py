"""
Shared fixtures.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from uniform_exchange.core.auth import CurrentUser
from uniform_exchange.core.database import get_db
from uniform_exchange.core.rate_limit import reset_memory_store
from uniform_exchange.core.security import create_access_token
from uniform_exchange.main import app


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.flush = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.rollback = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def regular_user():
    """A signed-in user without the admin role."""
    return CurrentUser(id=uuid4(), email="parent@test.com", role="user", name="Pat Parent")


@pytest.fixture
def admin_user():
    """A signed-in admin."""
    return CurrentUser(id=uuid4(), email="admin@test.com", role="admin", name="Ada Admin")


def _token_for(user: CurrentUser) -> str:
    return create_access_token(
        str(user.id),
        additional_claims={"email": user.email, "role": user.role, "name": user.name},
    )


@pytest.fixture
def user_headers(regular_user):
    """Authorization header for regular_user."""
    return {"Authorization": f"Bearer {_token_for(regular_user)}"}


@pytest.fixture
def admin_headers(admin_user):
    """Authorization header for admin_user."""
    return {"Authorization": f"Bearer {_token_for(admin_user)}"}


@pytest.fixture
def client(mock_db):
    """
    Test client with the database dependency replaced by mock_db.

    The lifespan is not run, so Redis stays unset and rate limiting uses
    the in-memory store.
    """
    app.dependency_overrides[get_db] = lambda: mock_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clear_rate_limits():
    """Start every test with empty in-memory rate limit counters."""
    reset_memory_store()
    yield
    reset_memory_store()
