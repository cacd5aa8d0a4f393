"""
Tests for the fare formula and rule-based quotes.
"""

import pytest
from httpx import AsyncClient

from cabservice.services.pricing_service import billable_distance, compute_fare


def test_fare_formula():
    """base + km * per_km + minutes * per_minute."""
    assert compute_fare(100, 120, base_fare=300, per_km=12, per_minute=1) == 1620


def test_fare_applies_surge_once():
    assert compute_fare(100, 120, base_fare=300, per_km=12, per_minute=1, surge=1.5) == 2430


def test_fare_rounds_half_up():
    assert compute_fare(1, 0, base_fare=0, per_km=2.5, per_minute=0) == 3
    assert compute_fare(0, 0, base_fare=10, per_km=0, per_minute=0, surge=1.25) == 13
    assert compute_fare(0, 0, base_fare=10, per_km=0, per_minute=0, surge=1.24) == 12


def test_fare_is_zero_for_zero_inputs():
    assert compute_fare(0, 0, 0, 0, 0) == 0


def test_fare_never_decreases_with_distance():
    fares = [compute_fare(km, 60, base_fare=250, per_km=11, per_minute=2) for km in (0, 10, 50, 51, 400)]
    assert fares == sorted(fares)


def test_fare_never_decreases_with_surge():
    fares = [compute_fare(80, 90, 200, 10, 1, surge=s) for s in (1.0, 1.1, 1.5, 2.0)]
    assert fares == sorted(fares)


def test_fare_never_decreases_with_duration():
    fares = [compute_fare(120, minutes, base_fare=250, per_km=11, per_minute=2) for minutes in (0, 1, 45, 180, 600)]
    assert fares == sorted(fares)


@pytest.mark.parametrize("value", [float("inf"), float("nan")])
def test_fare_rejects_non_finite_inputs(value):
    with pytest.raises(ValueError):
        compute_fare(value, 10, base_fare=10, per_km=10, per_minute=1)
    with pytest.raises(ValueError):
        compute_fare(10, 10, base_fare=10, per_km=10, per_minute=1, surge=value)


@pytest.mark.parametrize("field", ["distance_km", "duration_min", "base_fare", "per_km", "per_minute", "surge"])
def test_fare_rejects_negative_inputs(field):
    values = dict(distance_km=10, duration_min=10, base_fare=10, per_km=10, per_minute=10, surge=1.0)
    values[field] = -1
    with pytest.raises(ValueError):
        compute_fare(**values)


def test_billable_distance_applies_daily_minimum():
    assert billable_distance(30, min_km_per_day=80, days=2) == 160
    assert billable_distance(200, min_km_per_day=80, days=2) == 200
    assert billable_distance(30, min_km_per_day=None) == 30


@pytest.mark.asyncio
async def test_quote_from_rule(client: AsyncClient, admin_headers, cab_types):
    """A LOCAL rule with a daily minimum bills at least min_km_per_day per day."""
    sedan = cab_types["sedan"]
    rule = await client.post(
        "/api/v1/admin/pricing-rules",
        json={"cabTypeId": sedan.id, "tripType": "LOCAL", "baseFare": 500, "perKm": 12, "minKmPerDay": 80},
        headers=admin_headers,
    )
    assert rule.status_code == 200

    response = await client.get(
        "/api/v1/quote",
        params={"cabTypeId": sedan.id, "tripType": "LOCAL", "distanceKm": 30, "days": 2},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["billableKm"] == 160
    assert data["price"] == 500 + 160 * 12


@pytest.mark.asyncio
async def test_quote_without_rule(client: AsyncClient, cab_types):
    response = await client.get(
        "/api/v1/quote",
        params={"cabTypeId": cab_types["suv"].id, "tripType": "ONE_WAY", "distanceKm": 100},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"distanceKm": "1e30"}, {"durationMin": "1e30"}, {"surge": "inf"}, {"surge": "50"}])
async def test_quote_rejects_out_of_range_inputs(client: AsyncClient, admin_headers, cab_types, params):
    sedan = cab_types["sedan"]
    await client.post(
        "/api/v1/admin/pricing-rules",
        json={"cabTypeId": sedan.id, "tripType": "ONE_WAY", "baseFare": 300, "perKm": 12},
        headers=admin_headers,
    )
    query = {"cabTypeId": sedan.id, "tripType": "ONE_WAY", "distanceKm": 100, **params}
    response = await client.get("/api/v1/quote", params=query)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_pricing_rule_upsert_replaces(client: AsyncClient, admin_headers, cab_types):
    """One rule per (cab type, trip type); posting again overwrites it."""
    body = {"cabTypeId": cab_types["suv"].id, "tripType": "ONE_WAY", "baseFare": 300, "perKm": 14}
    first = await client.post("/api/v1/admin/pricing-rules", json=body, headers=admin_headers)
    second = await client.post(
        "/api/v1/admin/pricing-rules", json={**body, "perKm": 16}, headers=admin_headers
    )
    assert first.json()["id"] == second.json()["id"]

    listing = await client.get("/api/v1/admin/pricing-rules", headers=admin_headers)
    rules = listing.json()["data"]
    assert len(rules) == 1
    assert rules[0]["perKm"] == 16
    assert rules[0]["cabType"]["name"] == "SUV"


@pytest.mark.asyncio
async def test_delete_pricing_rule(client: AsyncClient, admin_headers, cab_types):
    created = await client.post(
        "/api/v1/admin/pricing-rules",
        json={"cabTypeId": cab_types["sedan"].id, "tripType": "AIRPORT", "baseFare": 100, "perKm": 15},
        headers=admin_headers,
    )
    rule_id = created.json()["id"]

    response = await client.delete(f"/api/v1/admin/pricing-rules/{rule_id}", headers=admin_headers)
    assert response.status_code == 200

    missing = await client.delete(f"/api/v1/admin/pricing-rules/{rule_id}", headers=admin_headers)
    assert missing.status_code == 404
