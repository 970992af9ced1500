"""
Geography Repository

Read-only lookups for counties and localities.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from uniform_exchange.modules.geography.models import County, Locality


class GeographyRepository:
    """Repository for county and locality lookups."""

    @staticmethod
    async def get_county(db: AsyncSession, county_id: UUID) -> County | None:
        return await db.get(County, county_id)

    @staticmethod
    async def get_locality(db: AsyncSession, locality_id: UUID) -> Locality | None:
        return await db.get(Locality, locality_id)

    @staticmethod
    async def list_counties(db: AsyncSession) -> list[County]:
        """All counties ordered by name."""
        result = await db.execute(select(County).order_by(County.name))
        return list(result.scalars().all())

    @staticmethod
    async def list_localities(db: AsyncSession, county_id: UUID) -> list[Locality]:
        """Localities of a county ordered by name."""
        result = await db.execute(
            select(Locality).where(Locality.county_id == county_id).order_by(Locality.name)
        )
        return list(result.scalars().all())
