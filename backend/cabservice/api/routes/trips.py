"""
Trip search endpoints: route availability, the price comparison list, and
rule-based quotes.
"""

from datetime import date, time
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.db.session import get_db
from cabservice.models import City, TripType
from cabservice.schemas.pricing import AvailabilityResponse, CustomOption, QuoteResponse, ResultsResponse
from cabservice.services.availability_service import check_route_availability, recommended_index
from cabservice.services.pricing_service import quote_from_rule

router = APIRouter(tags=["Trips"])

INQUIRY_PATH = "/inquiry"

# Upper bounds for /quote inputs
MAX_QUOTE_KM = 10_000
MAX_QUOTE_MINUTES = 60 * 24 * 60
MAX_SURGE = 10


@router.get("/check-route", response_model=AvailabilityResponse)
async def check_route(
    from_city_id: int = Query(..., alias="from"),
    to_city_id: int = Query(..., alias="to"),
    trip_type: TripType = Query(TripType.ONE_WAY, alias="tripType"),
    db: AsyncSession = Depends(get_db),
):
    """
    Is there a fixed price for this trip? Returns the priced cab options,
    cheapest first, or `available: false` when the customer should be sent
    to the inquiry form.
    """
    return await check_route_availability(db, from_city_id, to_city_id, trip_type)


async def _inquiry_url(db: AsyncSession, trip: dict, from_city_id: int, to_city_id: int, **extra) -> str:
    params = {k: v for k, v in trip.items() if v is not None}
    for key, city_id in (("fromLocation", from_city_id), ("toLocation", to_city_id)):
        city = await db.get(City, city_id)
        if city is not None:
            params[key] = city.label
    params.update(extra)
    return f"{INQUIRY_PATH}?{urlencode(params)}"


@router.get(
    "/results",
    response_model=ResultsResponse,
    responses={status.HTTP_307_TEMPORARY_REDIRECT: {"description": "No instant price; go to the inquiry form"}},
)
async def results(
    from_city_id: int = Query(..., alias="from"),
    to_city_id: int = Query(..., alias="to"),
    trip_type: TripType = Query(..., alias="tripType"),
    start_date: date = Query(..., alias="startDate"),
    start_time: time = Query(..., alias="startTime"),
    return_date: Optional[date] = Query(None, alias="returnDate"),
    return_time: Optional[time] = Query(None, alias="returnTime"),
    db: AsyncSession = Depends(get_db),
):
    """
    Price comparison list for a search. Redirects to the inquiry form with
    the trip details prefilled when no instant price exists.
    """
    trip = {
        "tripType": trip_type.value,
        "from": from_city_id,
        "to": to_city_id,
        "startDate": start_date.isoformat(),
        "startTime": start_time.strftime("%H:%M"),
        "returnDate": return_date.isoformat() if return_date else None,
        "returnTime": return_time.strftime("%H:%M") if return_time else None,
    }

    availability = await check_route_availability(db, from_city_id, to_city_id, trip_type)
    if not availability.available:
        url = await _inquiry_url(db, trip, from_city_id, to_city_id)
        return RedirectResponse(url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    custom_url = await _inquiry_url(db, trip, from_city_id, to_city_id, cabType="Custom")
    return ResultsResponse(
        trip_type=trip_type,
        route=availability.route,
        options=availability.pricing,
        recommended_index=recommended_index(availability.pricing),
        custom_option=CustomOption(inquiry_url=custom_url),
    )


@router.get("/quote", response_model=QuoteResponse)
async def quote(
    cab_type_id: int = Query(..., alias="cabTypeId"),
    trip_type: TripType = Query(..., alias="tripType"),
    distance_km: float = Query(..., ge=0, le=MAX_QUOTE_KM, alias="distanceKm"),
    duration_min: float = Query(0, ge=0, le=MAX_QUOTE_MINUTES, alias="durationMin"),
    surge: float = Query(1.0, ge=0, le=MAX_SURGE, alias="surge"),
    days: int = Query(1, ge=1, le=60),
    db: AsyncSession = Depends(get_db),
):
    """Estimate from the cab type's pricing rule, for trips without a route price."""
    return await quote_from_rule(db, cab_type_id, trip_type, distance_km, duration_min, surge, days)
