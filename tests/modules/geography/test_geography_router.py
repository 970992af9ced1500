"""
HTTP tests for the county and locality lookups.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

REPOSITORY = "uniform_exchange.modules.geography.router.GeographyRepository"


def _county(name):
    county = MagicMock()
    county.id = uuid4()
    county.name = name
    return county


class TestGeographyEndpoints:
    """GET /counties and GET /counties/{id}/localities"""

    def test_list_counties_is_public(self, client):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.list_counties = AsyncMock(return_value=[_county("Cork"), _county("Kerry")])

            response = client.get("/api/counties")

        assert response.status_code == 200
        assert [c["name"] for c in response.json()["counties"]] == ["Cork", "Kerry"]

    def test_list_localities(self, client):
        county = _county("Cork")
        locality = MagicMock()
        locality.id = uuid4()
        locality.name = "Ballincollig"
        locality.county_id = county.id

        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_county = AsyncMock(return_value=county)
            mock_repo.list_localities = AsyncMock(return_value=[locality])

            response = client.get(f"/api/counties/{county.id}/localities")

        assert response.status_code == 200
        assert response.json()["localities"][0]["countyId"] == str(county.id)

    def test_unknown_county(self, client):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_county = AsyncMock(return_value=None)

            response = client.get(f"/api/counties/{uuid4()}/localities")

        assert response.status_code == 404
        assert response.json()["code"] == "COUNTY_NOT_FOUND"
