"""
Pydantic schemas for cities and cab types.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from cabservice.schemas.common import CamelModel, strip_text


class CityCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    state: str = Field(..., min_length=1, max_length=120)
    is_airport: bool = False
    active: bool = True

    @field_validator("name", "state")
    @classmethod
    def strip_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class CityUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    state: Optional[str] = Field(None, min_length=1, max_length=120)
    is_airport: Optional[bool] = None
    active: Optional[bool] = None

    @field_validator("name", "state", mode="before")
    @classmethod
    def strip_blank(cls, value):
        return strip_text(value)


class CityResponse(CamelModel):
    id: int
    name: str
    state: str
    is_airport: bool
    active: bool


class CityListResponse(CamelModel):
    data: list[CityResponse]
    cached: bool = False


class CabTypeCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    seats: int = Field(..., gt=0, le=60)
    luggage: int = Field(0, ge=0, le=60)
    active: bool = True
    features: list[str] = Field(default_factory=list)
    image: Optional[str] = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("features")
    @classmethod
    def clean_features(cls, value: list[str]) -> list[str]:
        return [tag.strip() for tag in value if tag and tag.strip()]


class CabTypeUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    seats: Optional[int] = Field(None, gt=0, le=60)
    luggage: Optional[int] = Field(None, ge=0, le=60)
    active: Optional[bool] = None
    features: Optional[list[str]] = None
    image: Optional[str] = Field(None, max_length=500)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return strip_text(value)


class CabTypeResponse(CamelModel):
    id: int
    name: str
    seats: int
    luggage: int
    active: bool
    features: list[str]
    image: Optional[str]
    created_at: Optional[datetime] = None

    @field_validator("features", mode="before")
    @classmethod
    def tolerate_null_features(cls, value):
        return value or []


class CabTypeListResponse(CamelModel):
    data: list[CabTypeResponse]
    cached: bool = False
