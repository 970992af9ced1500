"""
School Repository

Database operations for school records.
"""

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from uniform_exchange.modules.schools.models import School, SchoolLevel

logger = logging.getLogger(__name__)


class SchoolRepository:
    """Repository for school database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        name: str,
        county_id: UUID,
        level: SchoolLevel,
        address: str | None = None,
        locality_id: UUID | None = None,
        website: str | None = None,
        phone: str | None = None,
        email: str | None = None,
        submission_id: UUID | None = None,
    ) -> School:
        """
        Create a new school record.

        The caller owns the transaction: the row is flushed so its id is
        available, but not committed.

        Args:
            db: Database session
            name: School name
            county_id: County the school is in
            level: Primary, secondary or mixed
            address: Street address (optional)
            locality_id: Locality within the county (optional)
            website: School website (optional)
            phone: School phone number (optional)
            email: School email address (optional)
            submission_id: Submission the school was created from (optional)

        Returns:
            Created School instance
        """
        school = School(
            name=name,
            address=address,
            county_id=county_id,
            locality_id=locality_id,
            level=level,
            website=website,
            phone=phone,
            email=email,
            submission_id=submission_id,
            is_active=True,
        )

        db.add(school)
        await db.flush()
        await db.refresh(school)

        logger.info(f"Created school: {school.id} - {school.name}")
        return school

    @staticmethod
    async def get_by_id(db: AsyncSession, school_id: UUID) -> School | None:
        """
        Get a school by ID.

        Args:
            db: Database session
            school_id: School UUID

        Returns:
            School instance or None if not found
        """
        result = await db.execute(select(School).where(School.id == school_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_many(db: AsyncSession, school_ids: Iterable[UUID]) -> list[School]:
        """Get every school whose id is in ``school_ids``; unknown ids are skipped."""
        ids = list(school_ids)
        if not ids:
            return []
        result = await db.execute(select(School).where(School.id.in_(ids)))
        return list(result.scalars().all())

    @staticmethod
    async def list_active_in_location(
        db: AsyncSession,
        county_id: UUID,
        locality_id: UUID | None = None,
    ) -> list[School]:
        """
        Get active schools that could collide with a new school at this location.

        Always scoped to the county. When a locality is given, only schools in
        that locality or with no locality recorded are returned.
        """
        query = select(School).where(
            School.county_id == county_id,
            School.is_active.is_(True),
        )
        if locality_id is not None:
            query = query.where(
                or_(School.locality_id == locality_id, School.locality_id.is_(None))
            )

        result = await db.execute(query.order_by(School.name))
        return list(result.scalars().all())
