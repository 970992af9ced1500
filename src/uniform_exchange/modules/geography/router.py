"""
Geography Router

Public reference data for the school submission form.

Endpoints:
- GET /counties - List counties
- GET /counties/{county_id}/localities - List localities of a county
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from uniform_exchange.core.database import get_db
from uniform_exchange.modules.geography.repository import GeographyRepository
from uniform_exchange.modules.geography.schemas import (
    CountyItem,
    CountyListResponse,
    LocalityItem,
    LocalityListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=CountyListResponse, summary="List Counties")
async def list_counties(db: AsyncSession = Depends(get_db)) -> CountyListResponse:
    """Return every county, sorted by name."""
    counties = await GeographyRepository.list_counties(db)
    return CountyListResponse(counties=[CountyItem.model_validate(c) for c in counties])


@router.get(
    "/{county_id}/localities",
    response_model=LocalityListResponse,
    summary="List Localities",
    responses={404: {"description": "County not found"}},
)
async def list_localities(
    county_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> LocalityListResponse:
    """Return the localities of one county, sorted by name."""
    county = await GeographyRepository.get_county(db, county_id)
    if not county:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "County not found", "code": "COUNTY_NOT_FOUND"},
        )

    localities = await GeographyRepository.list_localities(db, county_id)
    return LocalityListResponse(
        localities=[LocalityItem.model_validate(locality) for locality in localities]
    )
