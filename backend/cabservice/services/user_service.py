"""
Customer profiles and the admin user directory.
"""

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.core.logging import get_logger
from cabservice.models import Booking, User
from cabservice.schemas.booking import BookingResponse
from cabservice.schemas.inquiry import InquiryResponse
from cabservice.schemas.user import ProfileUpdate, UserDetailResponse, UserResponse, UserSummary
from cabservice.services.booking_service import get_user_bookings
from cabservice.services.inquiry_service import get_inquiries_for_email

logger = get_logger(__name__)

USER_LIST_LIMIT = 100


async def update_profile(db: AsyncSession, user: User, data: ProfileUpdate) -> User:
    if data.name is not None:
        user.name = data.name.strip()
    if data.phone is not None:
        user.phone = data.phone.strip()
    await db.flush()
    await db.refresh(user)

    logger.info("profile_updated", user_id=user.id)
    return user


async def list_users(db: AsyncSession, search: str = "") -> list[UserSummary]:
    booking_count = func.count(Booking.id).label("booking_count")
    query = (
        select(User, booking_count)
        .outerjoin(Booking, Booking.user_id == User.id)
        .group_by(User.id)
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(USER_LIST_LIMIT)
    )
    if search.strip():
        pattern = f"%{search.strip()}%"
        query = query.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

    rows = (await db.execute(query)).all()
    return [
        UserSummary(**UserResponse.model_validate(user).model_dump(), booking_count=count)
        for user, count in rows
    ]


async def get_user_detail(db: AsyncSession, user_id: int) -> UserDetailResponse:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    bookings = await get_user_bookings(db, user.id)
    inquiries = await get_inquiries_for_email(db, user.email)
    return UserDetailResponse(
        user=UserResponse.model_validate(user),
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        inquiries=[InquiryResponse.model_validate(i) for i in inquiries],
    )
