"""
Signed-in customer endpoints: profile, my bookings, my inquiries.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.core.security import get_current_user
from cabservice.db.session import get_db
from cabservice.models import User
from cabservice.schemas.booking import BookingListResponse
from cabservice.schemas.inquiry import InquiryListResponse
from cabservice.schemas.user import ProfileUpdate, UserResponse
from cabservice.services.booking_service import get_user_bookings
from cabservice.services.inquiry_service import get_inquiries_for_email
from cabservice.services.user_service import update_profile

router = APIRouter(prefix="/me", tags=["Account"])


@router.get("", response_model=UserResponse)
async def read_profile(user: User = Depends(get_current_user)):
    return user


@router.patch("", response_model=UserResponse)
async def edit_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await update_profile(db, user, data)


@router.get("/bookings", response_model=BookingListResponse)
async def my_bookings(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Bookings linked to the signed-in account, newest first."""
    return BookingListResponse(data=await get_user_bookings(db, user.id))


@router.get("/inquiries", response_model=InquiryListResponse)
async def my_inquiries(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Inquiries submitted with the account's email address."""
    return InquiryListResponse(data=await get_inquiries_for_email(db, user.email))
