"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import date, datetime, time
from typing import Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from cabservice.models.enums import BookingStatus, TripType
from cabservice.schemas.common import CamelModel, strip_text


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class BookingCreate(CamelModel):
    route_id: Optional[int] = None
    cab_type_id: int
    trip_type: TripType
    start_date: date
    start_time: time
    return_date: Optional[date] = None
    return_time: Optional[time] = None
    price: int = Field(..., ge=0)
    distance: Optional[int] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=0)
    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=6, max_length=32)
    email: Optional[EmailStr] = None
    pickup_address: Optional[str] = Field(None, max_length=500)
    drop_address: Optional[str] = Field(None, max_length=500)

    @field_validator("name", "phone", mode="before")
    @classmethod
    def strip_contact(cls, value):
        return strip_text(value)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email(cls, value):
        return blank_to_none(value)

    @model_validator(mode="after")
    def return_needs_time(self):
        if (self.return_date is None) != (self.return_time is None):
            raise ValueError("returnDate and returnTime must be given together")
        return self


class BookingCreatedResponse(CamelModel):
    success: bool = True
    booking_id: int
    message: str = "Booking created successfully"


class CityName(CamelModel):
    name: str
    state: str


class CabTypeName(CamelModel):
    name: str


class BookingResponse(CamelModel):
    id: int
    trip_type: TripType
    start_at: datetime
    end_at: Optional[datetime]
    return_at: Optional[datetime]
    cab_type_id: int
    from_city_id: Optional[int]
    to_city_id: Optional[int]
    distance_km: Optional[int]
    duration_min: Optional[int]
    price_quote: int
    customer_name: str
    customer_phone: str
    customer_email: str
    pickup_address: str
    drop_address: str
    status: BookingStatus
    user_id: Optional[int]
    created_at: datetime
    from_city: Optional[CityName] = None
    to_city: Optional[CityName] = None
    cab_type: Optional[CabTypeName] = None


class BookingListResponse(CamelModel):
    data: list[BookingResponse]


class BookingStatusUpdate(CamelModel):
    status: BookingStatus


class BookingStatusResponse(CamelModel):
    success: bool = True
    data: BookingResponse
