"""
Tests for booking creation and the admin status workflow.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from cabservice.core.security import create_access_token
from cabservice.models import Booking, BookingStatus
from cabservice.models.enums import can_transition, is_archived, statuses_in_bucket


@pytest.mark.asyncio
async def test_guest_booking_without_route(client: AsyncClient, db_session, cab_types, booking_payload):
    """No routeId: a local/custom trip with both city ids null, pending."""
    response = await client.post("/api/v1/create-booking", json=booking_payload(cab_types["sedan"].id))
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    booking_id = data["bookingId"]

    booking = await db_session.get(Booking, booking_id)
    assert booking.from_city_id is None
    assert booking.to_city_id is None
    assert booking.status == BookingStatus.PENDING
    assert booking.customer_name == "Asha Rao"
    assert booking.price_quote == 1800
    assert booking.user_id is None


@pytest.mark.asyncio
async def test_booking_with_route_copies_cities(
    client: AsyncClient, db_session, cities, cab_types, priced_route, booking_payload
):
    response = await client.post(
        "/api/v1/create-booking",
        json=booking_payload(cab_types["sedan"].id, routeId=priced_route.id, email="asha@example.com"),
    )
    assert response.status_code == 201

    booking = await db_session.get(Booking, response.json()["bookingId"])
    assert booking.from_city_id == cities["mumbai"].id
    assert booking.to_city_id == cities["pune"].id
    assert booking.distance_km == 150
    assert booking.duration_min == 180
    assert booking.customer_email == "asha@example.com"


@pytest.mark.asyncio
async def test_booking_with_unknown_route_falls_back(client: AsyncClient, db_session, cab_types, booking_payload):
    response = await client.post(
        "/api/v1/create-booking", json=booking_payload(cab_types["sedan"].id, routeId=99999)
    )
    assert response.status_code == 201

    booking = await db_session.get(Booking, response.json()["bookingId"])
    assert booking.from_city_id is None
    assert booking.to_city_id is None


@pytest.mark.asyncio
async def test_booking_round_trip_sets_return(client: AsyncClient, db_session, cab_types, booking_payload):
    response = await client.post(
        "/api/v1/create-booking",
        json=booking_payload(
            cab_types["suv"].id, tripType="ROUND_TRIP", returnDate="2026-11-04", returnTime="18:00"
        ),
    )
    assert response.status_code == 201

    booking = await db_session.get(Booking, response.json()["bookingId"])
    assert booking.return_at is not None
    assert booking.end_at == booking.return_at
    assert booking.return_at > booking.start_at


@pytest.mark.asyncio
async def test_booking_return_date_needs_time(client: AsyncClient, cab_types, booking_payload):
    response = await client.post(
        "/api/v1/create-booking",
        json=booking_payload(cab_types["suv"].id, returnDate="2026-11-04"),
    )
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["name", "phone", "cabTypeId", "startDate", "price"])
async def test_booking_missing_required_field(client: AsyncClient, cab_types, booking_payload, field):
    payload = booking_payload(cab_types["sedan"].id)
    del payload[field]
    response = await client.post("/api/v1/create-booking", json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["name", "phone"])
async def test_booking_blank_contact_is_rejected(client: AsyncClient, db_session, cab_types, booking_payload, field):
    response = await client.post(
        "/api/v1/create-booking", json=booking_payload(cab_types["sedan"].id, **{field: "      "})
    )
    assert response.status_code == 422
    assert (await db_session.execute(select(Booking))).unique().scalars().all() == []


@pytest.mark.asyncio
async def test_booking_contact_is_trimmed(client: AsyncClient, db_session, cab_types, booking_payload):
    response = await client.post(
        "/api/v1/create-booking",
        json=booking_payload(cab_types["sedan"].id, name="  Asha Rao ", phone=" 9876543210 "),
    )
    booking = await db_session.get(Booking, response.json()["bookingId"])
    assert (booking.customer_name, booking.customer_phone) == ("Asha Rao", "9876543210")


@pytest.mark.asyncio
async def test_booking_unknown_cab_type(client: AsyncClient, db_session, booking_payload):
    response = await client.post("/api/v1/create-booking", json=booking_payload(99999))
    assert response.status_code == 404
    count = (await db_session.execute(select(Booking))).unique().scalars().all()
    assert count == []


@pytest.mark.asyncio
async def test_booking_blank_email_is_accepted(client: AsyncClient, cab_types, booking_payload):
    response = await client.post(
        "/api/v1/create-booking", json=booking_payload(cab_types["sedan"].id, email="  ")
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_signed_in_booking_is_linked(
    client: AsyncClient, auth_headers, test_user, cab_types, booking_payload
):
    created = await client.post(
        "/api/v1/create-booking", json=booking_payload(cab_types["sedan"].id), headers=auth_headers
    )
    assert created.status_code == 201

    mine = await client.get("/api/v1/me/bookings", headers=auth_headers)
    assert [b["id"] for b in mine.json()["data"]] == [created.json()["bookingId"]]
    assert mine.json()["data"][0]["userId"] == test_user.id


@pytest.mark.asyncio
async def test_stale_token_books_as_guest(client: AsyncClient, db_session, cab_types, booking_payload):
    response = await client.post(
        "/api/v1/create-booking",
        json=booking_payload(cab_types["sedan"].id),
        headers={"Authorization": "Bearer expired-or-forged"},
    )
    assert response.status_code == 201

    booking = await db_session.get(Booking, response.json()["bookingId"])
    assert booking.user_id is None


@pytest.mark.asyncio
async def test_expired_token_books_as_guest(client: AsyncClient, db_session, test_user, cab_types, booking_payload):
    token = create_access_token(data={"sub": test_user.email}, expires_minutes=-5)
    response = await client.post(
        "/api/v1/create-booking",
        json=booking_payload(cab_types["sedan"].id),
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 201

    booking = await db_session.get(Booking, response.json()["bookingId"])
    assert booking.user_id is None


# --- Admin workflow --------------------------------------------------------

async def _create(client, cab_type_id, booking_payload, **overrides) -> int:
    response = await client.post("/api/v1/create-booking", json=booking_payload(cab_type_id, **overrides))
    return response.json()["bookingId"]


@pytest.mark.asyncio
async def test_admin_lists_bookings_by_bucket(
    client: AsyncClient, admin_headers, cab_types, priced_route, booking_payload
):
    active_id = await _create(client, cab_types["sedan"].id, booking_payload, routeId=priced_route.id)
    done_id = await _create(client, cab_types["suv"].id, booking_payload)
    await client.patch(f"/api/v1/admin/bookings/{done_id}", json={"status": "cancelled"}, headers=admin_headers)

    active = await client.get("/api/v1/admin/bookings", headers=admin_headers)
    archived = await client.get("/api/v1/admin/bookings", params={"status": "archived"}, headers=admin_headers)

    active_rows = active.json()["data"]
    assert [b["id"] for b in active_rows] == [active_id]
    assert active_rows[0]["fromCity"]["name"] == "Mumbai"
    assert active_rows[0]["cabType"]["name"] == "Sedan"
    assert [b["id"] for b in archived.json()["data"]] == [done_id]


@pytest.mark.asyncio
async def test_admin_bucket_must_be_known(client: AsyncClient, admin_headers):
    response = await client.get("/api/v1/admin/bookings", params={"status": "everything"}, headers=admin_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_admin_confirms_then_completes(client: AsyncClient, admin_headers, cab_types, booking_payload):
    booking_id = await _create(client, cab_types["sedan"].id, booking_payload)

    confirmed = await client.patch(
        f"/api/v1/admin/bookings/{booking_id}", json={"status": "confirmed"}, headers=admin_headers
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["data"]["status"] == "confirmed"

    completed = await client.patch(
        f"/api/v1/admin/bookings/{booking_id}", json={"status": "completed"}, headers=admin_headers
    )
    assert completed.json()["data"]["status"] == "completed"


@pytest.mark.asyncio
@pytest.mark.parametrize("target", ["completed", "in_progress", "rejected", "pending"])
async def test_pending_only_moves_to_confirmed_or_cancelled(
    client: AsyncClient, admin_headers, cab_types, booking_payload, target
):
    booking_id = await _create(client, cab_types["sedan"].id, booking_payload)
    response = await client.patch(
        f"/api/v1/admin/bookings/{booking_id}", json={"status": target}, headers=admin_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_cancelled_booking_is_final(client: AsyncClient, admin_headers, cab_types, booking_payload):
    booking_id = await _create(client, cab_types["sedan"].id, booking_payload)
    await client.patch(f"/api/v1/admin/bookings/{booking_id}", json={"status": "cancelled"}, headers=admin_headers)

    response = await client.patch(
        f"/api/v1/admin/bookings/{booking_id}", json={"status": "confirmed"}, headers=admin_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("final", [BookingStatus.COMPLETED, BookingStatus.REJECTED])
async def test_completed_and_rejected_bookings_are_final(
    client: AsyncClient, db_session, admin_headers, cab_types, booking_payload, final
):
    booking_id = await _create(client, cab_types["sedan"].id, booking_payload)
    booking = await db_session.get(Booking, booking_id)
    booking.status = final
    await db_session.commit()

    for target in BookingStatus:
        if target == final:
            continue
        response = await client.patch(
            f"/api/v1/admin/bookings/{booking_id}", json={"status": target.value}, headers=admin_headers
        )
        assert response.status_code == 400, target


@pytest.mark.asyncio
async def test_status_update_unknown_booking(client: AsyncClient, admin_headers):
    response = await client.patch(
        "/api/v1/admin/bookings/99999", json={"status": "confirmed"}, headers=admin_headers
    )
    assert response.status_code == 404


def test_terminal_statuses_are_archived():
    assert statuses_in_bucket(BookingStatus, archived=True) == [
        BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.REJECTED,
    ]
    assert not is_archived(BookingStatus.IN_PROGRESS)
    assert can_transition(BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED)
    assert not can_transition(BookingStatus.REJECTED, BookingStatus.PENDING)
