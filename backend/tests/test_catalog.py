"""
Tests for the public catalog and admin city / cab type management.
"""

import pytest
from httpx import AsyncClient

from cabservice.db.session import commit_session, rollback_session
from cabservice.schemas.catalog import CabTypeUpdate, CityCreate
from cabservice.services import catalog_service
from cabservice.services.cache_service import city_search_key


@pytest.mark.asyncio
async def test_city_search_matches_name_or_state(client: AsyncClient, cities):
    by_state = await client.get("/api/v1/cities", params={"search": "maha"})
    by_name = await client.get("/api/v1/cities", params={"search": "JAI"})

    assert [c["name"] for c in by_state.json()["data"]] == ["Mumbai", "Nashik", "Pune"]
    assert [c["name"] for c in by_name.json()["data"]] == ["Jaipur"]
    assert by_state.json()["cached"] is False


@pytest.mark.asyncio
async def test_city_search_hides_inactive(client: AsyncClient, db_session, cities):
    cities["pune"].active = False
    await db_session.commit()

    response = await client.get("/api/v1/cities")
    assert "Pune" not in [c["name"] for c in response.json()["data"]]


@pytest.mark.asyncio
async def test_public_cab_types_exclude_custom(client: AsyncClient, db_session, cab_types):
    cab_types["suv"].active = False
    await db_session.commit()

    response = await client.get("/api/v1/cab-types")
    assert response.status_code == 200
    assert [c["name"] for c in response.json()["data"]] == ["Sedan"]


@pytest.mark.asyncio
async def test_admin_cab_types_include_custom(client: AsyncClient, admin_headers, cab_types):
    response = await client.get("/api/v1/admin/cab-types", headers=admin_headers)
    assert "Custom" in [c["name"] for c in response.json()["data"]]


@pytest.mark.asyncio
async def test_admin_creates_and_updates_city(client: AsyncClient, admin_headers):
    created = await client.post(
        "/api/v1/admin/cities", json={"name": " Goa Airport ", "state": "Goa", "isAirport": True},
        headers=admin_headers,
    )
    assert created.status_code == 201
    city = created.json()
    assert city["name"] == "Goa Airport"
    assert city["isAirport"] is True

    updated = await client.patch(
        f"/api/v1/admin/cities/{city['id']}", json={"active": False}, headers=admin_headers
    )
    assert updated.json()["active"] is False
    assert updated.json()["name"] == "Goa Airport"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"name": "Goa"}, {"name": "   ", "state": "Goa"}, {"state": "Goa"}])
async def test_admin_city_needs_name_and_state(client: AsyncClient, admin_headers, body):
    response = await client.post("/api/v1/admin/cities", json=body, headers=admin_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_admin_city_search_includes_inactive(client: AsyncClient, db_session, admin_headers, cities):
    cities["jaipur"].active = False
    await db_session.commit()

    response = await client.get("/api/v1/admin/cities", params={"search": "rajasthan"}, headers=admin_headers)
    assert [c["name"] for c in response.json()["data"]] == ["Jaipur"]


@pytest.mark.asyncio
async def test_admin_creates_cab_type(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/admin/cab-types",
        json={"name": "Tempo Traveller", "seats": 12, "luggage": 8, "features": ["AC", " ", " Pushback seats "]},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["features"] == ["AC", "Pushback seats"]


@pytest.mark.asyncio
async def test_duplicate_cab_type_name(client: AsyncClient, admin_headers, cab_types):
    created = await client.post(
        "/api/v1/admin/cab-types", json={"name": "Sedan", "seats": 4}, headers=admin_headers
    )
    renamed = await client.patch(
        f"/api/v1/admin/cab-types/{cab_types['suv'].id}", json={"name": "Sedan"}, headers=admin_headers
    )
    assert created.status_code == 400
    assert created.json()["detail"] == "Cab type name already exists"
    assert renamed.status_code == 400


@pytest.mark.asyncio
async def test_update_cab_type(client: AsyncClient, admin_headers, cab_types):
    response = await client.patch(
        f"/api/v1/admin/cab-types/{cab_types['suv'].id}",
        json={"seats": 7, "features": ["AC", "Carrier"]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["seats"] == 7
    assert response.json()["features"] == ["AC", "Carrier"]
    assert response.json()["name"] == "SUV"


def test_city_search_key_normalizes_text():
    assert city_search_key("  Pune ", 50) == city_search_key("pune", 50)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"name": "   "}, {"state": "  "}])
async def test_admin_city_update_rejects_blank(client: AsyncClient, admin_headers, cities, body):
    response = await client.patch(
        f"/api/v1/admin/cities/{cities['pune'].id}", json=body, headers=admin_headers
    )
    assert response.status_code == 422

    unchanged = await client.get("/api/v1/admin/cities", params={"search": "pune"}, headers=admin_headers)
    assert [(c["name"], c["state"]) for c in unchanged.json()["data"]] == [("Pune", "Maharashtra")]


@pytest.mark.asyncio
async def test_admin_cab_type_rename_rejects_blank(client: AsyncClient, admin_headers, cab_types):
    response = await client.patch(
        f"/api/v1/admin/cab-types/{cab_types['suv'].id}", json={"name": "    "}, headers=admin_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_catalog_cache_cleared_only_after_commit(db_session, monkeypatch):
    cleared = []

    async def record_cities():
        cleared.append("cities")

    monkeypatch.setattr(catalog_service, "invalidate_cities", record_cities)

    await catalog_service.create_city(db_session, CityCreate(name="Goa", state="Goa"))
    assert cleared == []

    await commit_session(db_session)
    assert cleared == ["cities"]


@pytest.mark.asyncio
async def test_catalog_cache_kept_on_rollback(db_session, monkeypatch, cab_types):
    cleared = []

    async def record_cab_types():
        cleared.append("cab_types")

    monkeypatch.setattr(catalog_service, "invalidate_cab_types", record_cab_types)

    await catalog_service.update_cab_type(db_session, cab_types["suv"].id, CabTypeUpdate(seats=7))
    await rollback_session(db_session)
    await commit_session(db_session)
    assert cleared == []
