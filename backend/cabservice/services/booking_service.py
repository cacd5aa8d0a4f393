"""
Booking writer and the admin status workflow.

CREATE FLOW
===========

  1. Validate the cab type exists (404 otherwise).
  2. If a routeId is given, resolve it to its CityRoute and copy both city ids
     plus a "From, State → To, State" description. An unknown routeId keeps
     the booking going with both city ids null, the same shape as a local
     trip, but is logged separately as `booking_route_unresolved` so bad
     client input is visible.
  3. Combine date + time fields into timestamps; a return leg fills both
     end_at and return_at.
  4. Link the signed-in user, if any.
  5. Insert with status "pending" inside the request transaction.

The admin notification is not sent here. The route handler schedules it as
a background task from the returned BookingNotice, after the response, so a
mail failure can never undo or fail the booking.

STATUS WORKFLOW
===============

  pending     → confirmed | cancelled
  confirmed   → completed | cancelled
  in_progress → completed | cancelled
  completed, cancelled, rejected: terminal
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.core.config import get_settings
from cabservice.core.logging import get_logger
from cabservice.models import Booking, BookingStatus, CabType, CityRoute, User
from cabservice.models.enums import can_transition, statuses_in_bucket
from cabservice.schemas.booking import BookingCreate

logger = get_logger(__name__)
settings = get_settings()

LOCAL_TRIP_DESCRIPTION = "Local / custom trip"


def local_tz() -> timezone:
    return timezone(timedelta(minutes=settings.TIMEZONE_OFFSET_MINUTES))


def combine(day: date, at: time) -> datetime:
    """Date + wall-clock time in the business timezone."""
    return datetime.combine(day, at).replace(tzinfo=local_tz())


@dataclass(frozen=True)
class BookingNotice:
    """Everything the admin email needs, detached from the ORM session."""

    booking_id: int
    customer_name: str
    customer_phone: str
    trip_type: str
    route_description: str
    cab_type_name: str
    start_at: datetime
    price: int


async def create_booking(
    db: AsyncSession,
    data: BookingCreate,
    user: Optional[User] = None,
) -> tuple[Booking, BookingNotice]:
    cab_type = await db.get(CabType, data.cab_type_id)
    if cab_type is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cab type {data.cab_type_id} not found",
        )

    from_city_id = to_city_id = None
    route_description = LOCAL_TRIP_DESCRIPTION
    distance_km, duration_min = data.distance, data.duration

    if data.route_id is not None:
        route = await db.get(CityRoute, data.route_id)
        if route is None:
            logger.warning("booking_route_unresolved", route_id=data.route_id)
        else:
            from_city_id, to_city_id = route.from_city_id, route.to_city_id
            route_description = route.description
            if distance_km is None:
                distance_km = route.distance_km
            if duration_min is None:
                duration_min = route.duration_min

    start_at = combine(data.start_date, data.start_time)
    return_at = combine(data.return_date, data.return_time) if data.return_date else None

    booking = Booking(
        trip_type=data.trip_type,
        start_at=start_at,
        end_at=return_at,
        return_at=return_at,
        cab_type_id=cab_type.id,
        from_city_id=from_city_id,
        to_city_id=to_city_id,
        distance_km=distance_km,
        duration_min=duration_min,
        price_quote=data.price,
        customer_name=data.name.strip(),
        customer_phone=data.phone.strip(),
        customer_email=(data.email or "").lower(),
        pickup_address=data.pickup_address or "",
        drop_address=data.drop_address or "",
        status=BookingStatus.PENDING,
        user_id=user.id if user else None,
    )
    db.add(booking)
    await db.flush()
    await db.refresh(booking)

    logger.info(
        "booking_created",
        booking_id=booking.id,
        trip_type=data.trip_type.value,
        route_id=data.route_id,
        cab_type_id=cab_type.id,
        user_id=booking.user_id,
        price=data.price,
    )

    notice = BookingNotice(
        booking_id=booking.id,
        customer_name=booking.customer_name,
        customer_phone=booking.customer_phone,
        trip_type=data.trip_type.value,
        route_description=route_description,
        cab_type_name=cab_type.name,
        start_at=start_at,
        price=data.price,
    )
    return booking, notice


async def get_booking(db: AsyncSession, booking_id: int) -> Booking:
    booking = await db.get(Booking, booking_id)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Booking {booking_id} not found",
        )
    return booking


async def list_bookings(db: AsyncSession, archived: bool = False) -> list[Booking]:
    """Bookings in the active or archived bucket, newest first."""
    result = await db.execute(
        select(Booking)
        .where(Booking.status.in_(statuses_in_bucket(BookingStatus, archived)))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    return list(result.unique().scalars().all())


async def get_user_bookings(db: AsyncSession, user_id: int) -> list[Booking]:
    result = await db.execute(
        select(Booking)
        .where(Booking.user_id == user_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    return list(result.unique().scalars().all())


async def update_booking_status(
    db: AsyncSession,
    booking_id: int,
    new_status: BookingStatus,
) -> Booking:
    booking = await get_booking(db, booking_id)
    current = BookingStatus(booking.status)

    if not can_transition(current, new_status):
        logger.warning(
            "booking_transition_rejected",
            booking_id=booking_id,
            current=current.value,
            requested=new_status.value,
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot change booking status from {current.value} to {new_status.value}",
        )

    booking.status = new_status
    await db.flush()
    await db.refresh(booking)

    logger.info(
        "booking_status_changed",
        booking_id=booking_id,
        previous=current.value,
        status=new_status.value,
    )
    return booking
