"""
Route availability: can this trip be booked at a fixed price right now?

RESOLUTION RULES
================

  1. Look up the CityRoute for the ordered (from, to) pair.
     No route row → unavailable.
  2. Take its RoutePricing rows for the requested trip type that are active,
     joined to their cab type.
  3. Drop the reserved "Custom" cab type; it is never instantly priced and
     the presentation layer offers it separately as "request a quote".
  4. Nothing left → unavailable. Otherwise available, options sorted by
     price ascending (cab type name breaks ties) so the cheapest is first.

Every "no" answer, including a failed database lookup, collapses into
available=False. The caller then has exactly one branch to take: show
prices, or send the customer to the inquiry form.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.core.logging import get_logger
from cabservice.core.metrics import record_availability
from cabservice.models import CabType, CityRoute, RoutePricing, TripType, CUSTOM_CAB_TYPE_NAME
from cabservice.schemas.pricing import AvailabilityResponse, PricingOption, RouteCity, RouteSummary

logger = get_logger(__name__)

# Index of the option flagged "recommended" once options are sorted by price
RECOMMENDED_POSITION = 1


def summarize_route(route: CityRoute) -> RouteSummary:
    return RouteSummary(
        id=route.id,
        distance_km=route.distance_km,
        duration_min=route.duration_min,
        from_city=RouteCity.model_validate(route.from_city),
        to_city=RouteCity.model_validate(route.to_city),
    )


def to_option(pricing: RoutePricing) -> PricingOption:
    cab = pricing.cab_type
    return PricingOption(
        id=pricing.id,
        cab_type_id=pricing.cab_type_id,
        cab_type_name=cab.name,
        seats=cab.seats,
        luggage=cab.luggage,
        features=list(cab.features or []),
        price=pricing.price,
    )


def recommended_index(options: list[PricingOption]) -> Optional[int]:
    """Presentation hint: the second-cheapest option, or the only one."""
    if not options:
        return None
    return min(RECOMMENDED_POSITION, len(options) - 1)


async def _resolve(
    db: AsyncSession,
    from_city_id: int,
    to_city_id: int,
    trip_type: TripType,
) -> AvailabilityResponse:
    result = await db.execute(
        select(CityRoute).where(
            CityRoute.from_city_id == from_city_id,
            CityRoute.to_city_id == to_city_id,
        )
    )
    route = result.unique().scalar_one_or_none()
    if route is None:
        logger.info("route_not_found", from_city_id=from_city_id, to_city_id=to_city_id)
        return AvailabilityResponse(available=False)
    if not route.active:
        logger.info("route_inactive", route_id=route.id)
        return AvailabilityResponse(available=False)

    result = await db.execute(
        select(RoutePricing)
        .join(CabType, RoutePricing.cab_type_id == CabType.id)
        .where(
            RoutePricing.route_id == route.id,
            RoutePricing.trip_type == trip_type,
            RoutePricing.active.is_(True),
            CabType.name != CUSTOM_CAB_TYPE_NAME,
        )
    )
    rows = list(result.unique().scalars().all())
    if not rows:
        logger.info("route_unpriced", route_id=route.id, trip_type=trip_type.value)
        return AvailabilityResponse(available=False)

    options = sorted(
        (to_option(p) for p in rows),
        key=lambda option: (option.price, option.cab_type_name),
    )
    return AvailabilityResponse(
        available=True,
        route=summarize_route(route),
        pricing=options,
    )


async def check_route_availability(
    db: AsyncSession,
    from_city_id: int,
    to_city_id: int,
    trip_type: TripType = TripType.ONE_WAY,
) -> AvailabilityResponse:
    """Read-only. Never raises for lookup failures; they mean "unavailable"."""
    try:
        availability = await _resolve(db, from_city_id, to_city_id, trip_type)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            "availability_check_failed",
            from_city_id=from_city_id,
            to_city_id=to_city_id,
            trip_type=trip_type.value,
            error=str(e),
        )
        record_availability("error")
        return AvailabilityResponse(available=False)

    record_availability("available" if availability.available else "unavailable")
    logger.info(
        "availability_checked",
        from_city_id=from_city_id,
        to_city_id=to_city_id,
        trip_type=trip_type.value,
        available=availability.available,
        options=len(availability.pricing),
    )
    return availability
