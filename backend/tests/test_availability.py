"""
Tests for route availability and the price comparison list.
"""

from urllib.parse import parse_qs, urlparse

import pytest
from httpx import AsyncClient
from sqlalchemy import update
from sqlalchemy.exc import OperationalError

from cabservice.models import RoutePricing
from cabservice.schemas.pricing import PricingOption
from cabservice.services import availability_service
from cabservice.services.availability_service import recommended_index


def _search(cities, frm="mumbai", to="pune", **extra) -> dict:
    return {"from": cities[frm].id, "to": cities[to].id, **extra}


@pytest.mark.asyncio
async def test_priced_route_is_available(client: AsyncClient, cities, priced_route):
    """Active ONE_WAY prices come back cheapest first, without Custom."""
    response = await client.get("/api/v1/check-route", params=_search(cities))
    assert response.status_code == 200
    data = response.json()

    assert data["available"] is True
    assert data["route"]["distanceKm"] == 150
    assert data["route"]["fromCity"]["name"] == "Mumbai"
    assert data["route"]["toCity"]["name"] == "Pune"
    assert [(p["cabTypeName"], p["price"]) for p in data["pricing"]] == [("Sedan", 1800), ("SUV", 2600)]
    assert data["pricing"][0]["features"] == ["AC", "Music"]


@pytest.mark.asyncio
async def test_trip_type_defaults_to_one_way(client: AsyncClient, cities, priced_route):
    explicit = await client.get("/api/v1/check-route", params=_search(cities, tripType="ONE_WAY"))
    default = await client.get("/api/v1/check-route", params=_search(cities))
    assert explicit.json() == default.json()


@pytest.mark.asyncio
async def test_missing_route_is_unavailable(client: AsyncClient, cities, priced_route):
    """Two valid cities with no route between them."""
    response = await client.get("/api/v1/check-route", params=_search(cities, "nashik", "jaipur"))
    assert response.status_code == 200
    assert response.json() == {"available": False, "route": None, "pricing": []}


@pytest.mark.asyncio
async def test_routes_are_directed(client: AsyncClient, cities, priced_route):
    response = await client.get("/api/v1/check-route", params=_search(cities, "pune", "mumbai"))
    assert response.json()["available"] is False


@pytest.mark.asyncio
async def test_other_trip_type_is_unavailable(client: AsyncClient, cities, priced_route):
    response = await client.get("/api/v1/check-route", params=_search(cities, tripType="ROUND_TRIP"))
    assert response.json()["available"] is False


@pytest.mark.asyncio
async def test_inactive_prices_are_ignored(client: AsyncClient, db_session, cities, priced_route):
    await db_session.execute(update(RoutePricing).values(active=False))
    await db_session.commit()

    response = await client.get("/api/v1/check-route", params=_search(cities))
    assert response.json()["available"] is False


@pytest.mark.asyncio
async def test_inactive_route_is_unavailable(client: AsyncClient, db_session, cities, priced_route):
    priced_route.active = False
    await db_session.commit()

    response = await client.get("/api/v1/check-route", params=_search(cities))
    assert response.json() == {"available": False, "route": None, "pricing": []}


@pytest.mark.asyncio
async def test_database_error_means_unavailable(client: AsyncClient, cities, monkeypatch):
    async def broken(*args, **kwargs):
        raise OperationalError("SELECT city_routes", {}, Exception("connection reset"))

    monkeypatch.setattr(availability_service, "_resolve", broken)

    response = await client.get("/api/v1/check-route", params=_search(cities))
    assert response.status_code == 200
    assert response.json()["available"] is False


@pytest.mark.asyncio
async def test_custom_only_route_is_unavailable(client: AsyncClient, db_session, cities, cab_types, priced_route):
    await db_session.execute(
        update(RoutePricing)
        .where(RoutePricing.cab_type_id != cab_types["custom"].id)
        .values(active=False)
    )
    await db_session.commit()

    response = await client.get("/api/v1/check-route", params=_search(cities))
    assert response.json()["available"] is False


@pytest.mark.asyncio
async def test_equal_prices_sort_by_cab_name(client: AsyncClient, db_session, cities, cab_types, priced_route):
    await db_session.execute(update(RoutePricing).values(price=2000))
    await db_session.commit()

    response = await client.get("/api/v1/check-route", params=_search(cities))
    names = [p["cabTypeName"] for p in response.json()["pricing"]]
    assert names == ["SUV", "Sedan"]


@pytest.mark.asyncio
async def test_missing_city_parameter(client: AsyncClient, cities):
    response = await client.get("/api/v1/check-route", params={"from": cities["mumbai"].id})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_results_lists_options(client: AsyncClient, cities, priced_route):
    response = await client.get(
        "/api/v1/results",
        params=_search(cities, tripType="ONE_WAY", startDate="2026-11-02", startTime="09:30"),
    )
    assert response.status_code == 200
    data = response.json()
    assert [o["price"] for o in data["options"]] == [1800, 2600]
    assert data["recommendedIndex"] == 1

    inquiry_url = urlparse(data["customOption"]["inquiryUrl"])
    query = parse_qs(inquiry_url.query)
    assert inquiry_url.path == "/inquiry"
    assert query["cabType"] == ["Custom"]
    assert query["fromLocation"] == ["Mumbai, Maharashtra"]


@pytest.mark.asyncio
async def test_results_redirects_to_inquiry(client: AsyncClient, cities, priced_route):
    """No instant price: the trip details carry over to the inquiry form."""
    response = await client.get(
        "/api/v1/results",
        params=_search(cities, "nashik", "jaipur", tripType="ROUND_TRIP",
                       startDate="2026-11-02", startTime="09:30",
                       returnDate="2026-11-04", returnTime="18:00"),
    )
    assert response.status_code == 307

    location = urlparse(response.headers["location"])
    query = parse_qs(location.query)
    assert location.path == "/inquiry"
    assert query["tripType"] == ["ROUND_TRIP"]
    assert query["startDate"] == ["2026-11-02"]
    assert query["returnTime"] == ["18:00"]
    assert query["toLocation"] == ["Jaipur, Rajasthan"]


def _options(*prices: int) -> list[PricingOption]:
    return [
        PricingOption(id=i, cab_type_id=i, cab_type_name=f"Cab {i}", seats=4, luggage=2, features=[], price=p)
        for i, p in enumerate(prices, start=1)
    ]


def test_recommended_index():
    assert recommended_index([]) is None
    assert recommended_index(_options(1800)) == 0
    assert recommended_index(_options(1800, 2600)) == 1
    assert recommended_index(_options(1800, 2600, 3400)) == 1
