"""
Pydantic schemas for route availability, route pricing and pricing rules.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from cabservice.models.enums import TripType
from cabservice.schemas.common import CamelModel


# --- Availability ---------------------------------------------------------

class RouteCity(CamelModel):
    id: int
    name: str
    state: str


class RouteSummary(CamelModel):
    id: int
    distance_km: int
    duration_min: int
    from_city: RouteCity
    to_city: RouteCity


class PricingOption(CamelModel):
    id: int
    cab_type_id: int
    cab_type_name: str
    seats: int
    luggage: int
    features: list[str]
    price: int


class AvailabilityResponse(CamelModel):
    available: bool
    route: Optional[RouteSummary] = None
    pricing: list[PricingOption] = Field(default_factory=list)


class CustomOption(CamelModel):
    label: str = "Custom vehicle"
    description: str = "Need a bigger vehicle or something special? Request a quote."
    inquiry_url: str


class ResultsResponse(CamelModel):
    trip_type: TripType
    route: RouteSummary
    options: list[PricingOption]
    recommended_index: Optional[int]
    custom_option: CustomOption


# --- Admin route pricing ---------------------------------------------------

class RoutePricingUpsert(CamelModel):
    from_city_id: int
    to_city_id: int
    cab_type_id: int
    trip_type: TripType
    price: int = Field(..., ge=0)
    active: bool = True
    distance_km: Optional[int] = Field(None, ge=0)
    duration_min: Optional[int] = Field(None, ge=0)


class RoutePricingUpdate(CamelModel):
    price: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None
    distance_km: Optional[int] = Field(None, ge=0)
    duration_min: Optional[int] = Field(None, ge=0)


class RouteInfo(CamelModel):
    id: int
    distance_km: int
    duration_min: int
    trip_types: list[str]
    from_city: RouteCity
    to_city: RouteCity


class CabTypeBrief(CamelModel):
    id: int
    name: str


class RoutePricingResponse(CamelModel):
    id: int
    route_id: int
    from_city_id: int
    to_city_id: int
    cab_type_id: int
    trip_type: TripType
    price: int
    active: bool
    updated_at: Optional[datetime] = None
    cab_type: Optional[CabTypeBrief] = None
    route: Optional[RouteInfo] = None


class RoutePricingListResponse(CamelModel):
    data: list[RoutePricingResponse]


# --- Pricing rules and rule-based quotes -----------------------------------

class PricingRuleUpsert(CamelModel):
    cab_type_id: int
    trip_type: TripType
    base_fare: int = Field(..., ge=0, le=1_000_000)
    per_km: int = Field(..., ge=0, le=10_000)
    per_minute: int = Field(0, ge=0, le=10_000)
    min_km_per_day: Optional[int] = Field(None, gt=0, le=2_000)


class PricingRuleResponse(CamelModel):
    id: int
    cab_type_id: int
    trip_type: TripType
    base_fare: int
    per_km: int
    per_minute: int
    min_km_per_day: Optional[int]
    cab_type: Optional[CabTypeBrief] = None


class PricingRuleListResponse(CamelModel):
    data: list[PricingRuleResponse]


class QuoteResponse(CamelModel):
    cab_type_id: int
    trip_type: TripType
    billable_km: float
    duration_min: float
    surge: float
    price: int
