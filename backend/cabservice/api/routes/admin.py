"""
Admin console endpoints. Every route requires an admin bearer token.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.core.security import require_admin
from cabservice.db.session import get_db
from cabservice.models import TripType
from cabservice.schemas.admin import DashboardStats
from cabservice.schemas.booking import BookingListResponse, BookingStatusResponse, BookingStatusUpdate
from cabservice.schemas.catalog import (
    CabTypeCreate, CabTypeListResponse, CabTypeResponse, CabTypeUpdate,
    CityCreate, CityListResponse, CityResponse, CityUpdate,
)
from cabservice.schemas.common import SuccessResponse
from cabservice.schemas.inquiry import InquiryListResponse, InquiryStatusResponse, InquiryStatusUpdate
from cabservice.schemas.payment import PaymentSettings, PaymentSettingsResponse
from cabservice.schemas.pricing import (
    PricingRuleListResponse, PricingRuleResponse, PricingRuleUpsert,
    RoutePricingListResponse, RoutePricingResponse, RoutePricingUpdate, RoutePricingUpsert,
)
from cabservice.schemas.user import UserDetailResponse, UserListResponse
from cabservice.services import (
    booking_service, catalog_service, inquiry_service, payment_service,
    pricing_service, route_pricing_service, user_service,
)
from cabservice.services.dashboard_service import get_dashboard_stats

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])

BUCKET_PATTERN = "^(active|archived)$"


@router.get("/stats", response_model=DashboardStats)
async def stats(db: AsyncSession = Depends(get_db)):
    return await get_dashboard_stats(db)


# --- Cities ----------------------------------------------------------------

@router.get("/cities", response_model=CityListResponse)
async def list_cities(search: str = Query("", max_length=100), db: AsyncSession = Depends(get_db)):
    return CityListResponse(data=await catalog_service.list_cities_admin(db, search))


@router.post("/cities", response_model=CityResponse, status_code=status.HTTP_201_CREATED)
async def create_city(data: CityCreate, db: AsyncSession = Depends(get_db)):
    return await catalog_service.create_city(db, data)


@router.patch("/cities/{city_id}", response_model=CityResponse)
async def update_city(city_id: int, data: CityUpdate, db: AsyncSession = Depends(get_db)):
    return await catalog_service.update_city(db, city_id, data)


@router.delete("/cities/{city_id}", response_model=SuccessResponse)
async def delete_city(city_id: int, db: AsyncSession = Depends(get_db)):
    """Hard delete; refused with 400 while routes or bookings reference the city."""
    await catalog_service.delete_city(db, city_id)
    return SuccessResponse(message="City deleted")


# --- Cab types -------------------------------------------------------------

@router.get("/cab-types", response_model=CabTypeListResponse)
async def list_cab_types(db: AsyncSession = Depends(get_db)):
    return CabTypeListResponse(data=await catalog_service.list_cab_types_admin(db))


@router.post("/cab-types", response_model=CabTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_cab_type(data: CabTypeCreate, db: AsyncSession = Depends(get_db)):
    return await catalog_service.create_cab_type(db, data)


@router.patch("/cab-types/{cab_type_id}", response_model=CabTypeResponse)
async def update_cab_type(cab_type_id: int, data: CabTypeUpdate, db: AsyncSession = Depends(get_db)):
    return await catalog_service.update_cab_type(db, cab_type_id, data)


@router.delete("/cab-types/{cab_type_id}", response_model=SuccessResponse)
async def delete_cab_type(cab_type_id: int, db: AsyncSession = Depends(get_db)):
    """Hard delete; refused with 400 while pricing or bookings reference the cab type."""
    await catalog_service.delete_cab_type(db, cab_type_id)
    return SuccessResponse(message="Cab type deleted")


# --- Route pricing ---------------------------------------------------------

@router.get("/route-pricing", response_model=RoutePricingListResponse)
async def list_route_pricing(
    from_city_id: Optional[int] = Query(None, alias="fromCityId"),
    to_city_id: Optional[int] = Query(None, alias="toCityId"),
    cab_type_id: Optional[int] = Query(None, alias="cabTypeId"),
    trip_type: Optional[TripType] = Query(None, alias="tripType"),
    active: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
):
    rows = await route_pricing_service.list_route_pricing(
        db, from_city_id, to_city_id, cab_type_id, trip_type, active
    )
    return RoutePricingListResponse(data=rows)


@router.post("/route-pricing", response_model=RoutePricingResponse)
async def upsert_route_pricing(data: RoutePricingUpsert, db: AsyncSession = Depends(get_db)):
    """
    Set the price for (from, to, cab type, trip type). Creates the city route
    on first use; an existing price for the same key is overwritten.
    """
    return await route_pricing_service.upsert_route_pricing(db, data)


@router.patch("/route-pricing/{pricing_id}", response_model=RoutePricingResponse)
async def update_route_pricing(pricing_id: int, data: RoutePricingUpdate, db: AsyncSession = Depends(get_db)):
    return await route_pricing_service.update_route_pricing(db, pricing_id, data)


@router.delete("/route-pricing/{pricing_id}", response_model=SuccessResponse)
async def delete_route_pricing(pricing_id: int, db: AsyncSession = Depends(get_db)):
    await route_pricing_service.delete_route_pricing(db, pricing_id)
    return SuccessResponse(message="Route price deleted")


# --- Pricing rules ---------------------------------------------------------

@router.get("/pricing-rules", response_model=PricingRuleListResponse)
async def list_pricing_rules(db: AsyncSession = Depends(get_db)):
    return PricingRuleListResponse(data=await pricing_service.list_pricing_rules(db))


@router.post("/pricing-rules", response_model=PricingRuleResponse)
async def upsert_pricing_rule(data: PricingRuleUpsert, db: AsyncSession = Depends(get_db)):
    return await pricing_service.upsert_pricing_rule(db, data)


@router.delete("/pricing-rules/{rule_id}", response_model=SuccessResponse)
async def delete_pricing_rule(rule_id: int, db: AsyncSession = Depends(get_db)):
    await pricing_service.delete_pricing_rule(db, rule_id)
    return SuccessResponse(message="Pricing rule deleted")


# --- Bookings and inquiries ------------------------------------------------

@router.get("/bookings", response_model=BookingListResponse)
async def list_bookings(
    bucket: str = Query("active", alias="status", pattern=BUCKET_PATTERN),
    db: AsyncSession = Depends(get_db),
):
    """Active bookings (pending, confirmed, in progress) or the archive."""
    bookings = await booking_service.list_bookings(db, archived=bucket == "archived")
    return BookingListResponse(data=bookings)


@router.patch("/bookings/{booking_id}", response_model=BookingStatusResponse)
async def update_booking_status(booking_id: int, data: BookingStatusUpdate, db: AsyncSession = Depends(get_db)):
    booking = await booking_service.update_booking_status(db, booking_id, data.status)
    return BookingStatusResponse(data=booking)


@router.get("/inquiries", response_model=InquiryListResponse)
async def list_inquiries(
    bucket: str = Query("active", alias="status", pattern=BUCKET_PATTERN),
    db: AsyncSession = Depends(get_db),
):
    inquiries = await inquiry_service.list_inquiries(db, archived=bucket == "archived")
    return InquiryListResponse(data=inquiries)


@router.patch("/inquiries/{inquiry_id}", response_model=InquiryStatusResponse)
async def update_inquiry_status(inquiry_id: int, data: InquiryStatusUpdate, db: AsyncSession = Depends(get_db)):
    inquiry = await inquiry_service.update_inquiry_status(db, inquiry_id, data.status)
    return InquiryStatusResponse(data=inquiry)


# --- Users -----------------------------------------------------------------

@router.get("/users", response_model=UserListResponse)
async def list_users(search: str = Query("", max_length=100), db: AsyncSession = Depends(get_db)):
    return UserListResponse(data=await user_service.list_users(db, search))


@router.get("/users/{user_id}", response_model=UserDetailResponse)
async def user_detail(user_id: int, db: AsyncSession = Depends(get_db)):
    return await user_service.get_user_detail(db, user_id)


# --- Settings --------------------------------------------------------------

@router.get("/settings/payment", response_model=PaymentSettingsResponse)
async def read_payment_settings(db: AsyncSession = Depends(get_db)):
    return await payment_service.get_payment_settings(db)


@router.put("/settings/payment", response_model=PaymentSettingsResponse)
async def save_payment_settings(data: PaymentSettings, db: AsyncSession = Depends(get_db)):
    return await payment_service.save_payment_settings(db, data)
