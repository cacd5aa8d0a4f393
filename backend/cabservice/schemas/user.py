"""
Pydantic schemas for accounts, profiles and the admin user views.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from cabservice.models.enums import UserRole
from cabservice.schemas.booking import BookingResponse
from cabservice.schemas.common import CamelModel
from cabservice.schemas.inquiry import InquiryResponse


class UserCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    phone: Optional[str] = Field(None, min_length=6, max_length=32)


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, min_length=6, max_length=32)


class UserResponse(CamelModel):
    id: int
    name: Optional[str]
    email: str
    phone: Optional[str]
    role: UserRole
    image: Optional[str]
    is_active: bool
    created_at: datetime


class UserSummary(UserResponse):
    booking_count: int = 0


class UserListResponse(CamelModel):
    data: list[UserSummary]


class UserDetailResponse(CamelModel):
    user: UserResponse
    bookings: list[BookingResponse]
    inquiries: list[InquiryResponse]


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
