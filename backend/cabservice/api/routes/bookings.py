"""
Customer booking endpoint.
"""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.core.metrics import record_booking_request
from cabservice.core.security import get_optional_user
from cabservice.db.session import get_db
from cabservice.models import User
from cabservice.schemas.booking import BookingCreate, BookingCreatedResponse
from cabservice.services.booking_service import create_booking
from cabservice.services.notification_service import notify_new_booking

router = APIRouter(tags=["Bookings"])


@router.post("/create-booking", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    background_tasks: BackgroundTasks,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a cab at the quoted price. Guests may book; a bearer token links the
    booking to the account. The admin is emailed after the response is sent.
    """
    try:
        booking, notice = await create_booking(db, booking_data, user)
    except Exception:
        record_booking_request("error")
        raise

    record_booking_request("success")
    background_tasks.add_task(notify_new_booking, notice)
    return BookingCreatedResponse(booking_id=booking.id)
