"""
Pydantic schemas for inquiry request/response validation.
"""

from datetime import date, datetime, time
from typing import Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from cabservice.models.enums import InquiryStatus, TripType
from cabservice.schemas.booking import blank_to_none
from cabservice.schemas.common import CamelModel, strip_text


class InquiryCreate(CamelModel):
    trip_type: TripType
    from_location: str = Field(..., min_length=1, max_length=255)
    to_location: str = Field(..., min_length=1, max_length=255)
    start_date: date
    start_time: time
    return_date: Optional[date] = None
    return_time: Optional[time] = None
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_phone: str = Field(..., min_length=6, max_length=32)
    customer_email: Optional[EmailStr] = None
    pickup_address: Optional[str] = Field(None, max_length=500)
    drop_address: Optional[str] = Field(None, max_length=500)
    requirements: Optional[str] = Field(None, max_length=5000)

    @field_validator("from_location", "to_location", "customer_name", "customer_phone", mode="before")
    @classmethod
    def strip_required(cls, value):
        return strip_text(value)

    @field_validator("customer_email", mode="before")
    @classmethod
    def blank_email(cls, value):
        return blank_to_none(value)

    @model_validator(mode="after")
    def return_needs_time(self):
        if (self.return_date is None) != (self.return_time is None):
            raise ValueError("returnDate and returnTime must be given together")
        return self


class InquiryCreatedResponse(CamelModel):
    success: bool = True
    inquiry_id: int


class InquiryResponse(CamelModel):
    id: int
    trip_type: TripType
    from_location: str
    to_location: str
    start_date: datetime
    end_date: Optional[datetime]
    customer_name: str
    customer_phone: str
    customer_email: str
    pickup_address: str
    drop_address: str
    requirements: str
    status: InquiryStatus
    created_at: datetime


class InquiryListResponse(CamelModel):
    data: list[InquiryResponse]


class InquiryStatusUpdate(CamelModel):
    status: InquiryStatus


class InquiryStatusResponse(CamelModel):
    success: bool = True
    data: InquiryResponse
