"""
User Repository

Database operations for users and their marketplace profiles.
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from uniform_exchange.modules.users.models import User, UserProfile, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        name: str | None = None,
        role: UserRole = UserRole.USER,
        is_active: bool = True,
    ) -> User:
        """
        Create a new user record.

        Args:
            db: Database session
            email: User's email address (unique)
            name: Display name (optional)
            role: User's role
            is_active: Whether user is active

        Returns:
            Created User instance
        """
        user = User(
            email=email,
            name=name,
            role=role,
            is_active=is_active,
        )

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created user: {user.id} - {user.email} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: UUID) -> User | None:
        """
        Get a user by ID.

        Args:
            db: Database session
            user_id: User UUID

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """
        Get a user by email address.

        Args:
            db: Database session
            email: Email address

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_profile(db: AsyncSession, user_id: UUID) -> UserProfile | None:
        """Get the marketplace profile of a user."""
        result = await db.execute(select(UserProfile).where(UserProfile.user_id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    def add_additional_schools(profile: UserProfile, school_ids: list[str]) -> list[str]:
        """
        Append school ids to a profile's additional schools.

        Ids already on the profile (including the primary school) are skipped.
        The change is staged on the session; the caller commits.

        Returns:
            The new additional_schools list
        """
        existing = set(profile.school_ids)
        additional = [str(school_id) for school_id in (profile.additional_schools or [])]

        for school_id in school_ids:
            if school_id not in existing:
                additional.append(school_id)
                existing.add(school_id)

        # Assign a new list so SQLAlchemy detects the JSON change
        profile.additional_schools = additional
        return additional
