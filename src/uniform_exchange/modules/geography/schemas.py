"""Geography schemas."""

from uuid import UUID

from uniform_exchange.modules.shared.schemas import CamelModel


class CountyItem(CamelModel):
    id: UUID
    name: str


class LocalityItem(CamelModel):
    id: UUID
    name: str
    county_id: UUID


class CountyListResponse(CamelModel):
    success: bool = True
    counties: list[CountyItem]


class LocalityListResponse(CamelModel):
    success: bool = True
    localities: list[LocalityItem]
