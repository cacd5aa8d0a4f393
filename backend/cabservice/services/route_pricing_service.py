"""
Admin management of route prices.

Setting a price is a composite write: make sure the CityRoute for the
ordered city pair exists (creating it, or refreshing its distance/duration),
then upsert the RoutePricing row keyed by (from, to, cab type, trip type).
Both steps run in the request's transaction, so a failure leaves neither.
The pricing row's city ids are always copied from the route.
"""

from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cabservice.core.logging import get_logger
from cabservice.models import CabType, City, CityRoute, RoutePricing, TripType
from cabservice.models.enums import DEFAULT_ROUTE_TRIP_TYPES
from cabservice.schemas.pricing import RoutePricingUpdate, RoutePricingUpsert

logger = get_logger(__name__)


async def _load(db: AsyncSession, pricing_id: int) -> Optional[RoutePricing]:
    result = await db.execute(
        select(RoutePricing)
        .where(RoutePricing.id == pricing_id)
        .options(selectinload(RoutePricing.route))
        .execution_options(populate_existing=True)
    )
    return result.unique().scalar_one_or_none()


async def get_route_pricing(db: AsyncSession, pricing_id: int) -> RoutePricing:
    pricing = await _load(db, pricing_id)
    if not pricing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Route pricing {pricing_id} not found",
        )
    return pricing


async def list_route_pricing(
    db: AsyncSession,
    from_city_id: Optional[int] = None,
    to_city_id: Optional[int] = None,
    cab_type_id: Optional[int] = None,
    trip_type: Optional[TripType] = None,
    active: Optional[bool] = None,
) -> list[RoutePricing]:
    query = select(RoutePricing).options(selectinload(RoutePricing.route))
    if from_city_id is not None:
        query = query.where(RoutePricing.from_city_id == from_city_id)
    if to_city_id is not None:
        query = query.where(RoutePricing.to_city_id == to_city_id)
    if cab_type_id is not None:
        query = query.where(RoutePricing.cab_type_id == cab_type_id)
    if trip_type is not None:
        query = query.where(RoutePricing.trip_type == trip_type)
    if active is not None:
        query = query.where(RoutePricing.active.is_(active))

    result = await db.execute(query.order_by(RoutePricing.updated_at.desc(), RoutePricing.id.desc()))
    return list(result.unique().scalars().all())


async def ensure_route(
    db: AsyncSession,
    from_city_id: int,
    to_city_id: int,
    distance_km: Optional[int] = None,
    duration_min: Optional[int] = None,
) -> CityRoute:
    """Fetch the route for the pair, creating it if missing; update metrics when given."""
    for city_id in (from_city_id, to_city_id):
        if await db.get(City, city_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"City {city_id} not found",
            )

    result = await db.execute(
        select(CityRoute).where(
            CityRoute.from_city_id == from_city_id,
            CityRoute.to_city_id == to_city_id,
        )
    )
    route = result.unique().scalar_one_or_none()

    if route is None:
        route = CityRoute(
            from_city_id=from_city_id,
            to_city_id=to_city_id,
            distance_km=distance_km or 0,
            duration_min=duration_min or 0,
            trip_types=list(DEFAULT_ROUTE_TRIP_TYPES),
            active=True,
        )
        db.add(route)
        await db.flush()
        logger.info("route_created", route_id=route.id, from_city_id=from_city_id, to_city_id=to_city_id)
        return route

    if distance_km is not None:
        route.distance_km = distance_km
    if duration_min is not None:
        route.duration_min = duration_min
    return route


def _support_trip_type(route: CityRoute, trip_type: TripType) -> None:
    # Reassign rather than mutate so the JSON column is marked dirty
    if trip_type.value not in (route.trip_types or []):
        route.trip_types = [*(route.trip_types or []), trip_type.value]


async def upsert_route_pricing(db: AsyncSession, data: RoutePricingUpsert) -> RoutePricing:
    if data.from_city_id == data.to_city_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A route needs two different cities",
        )
    if await db.get(CabType, data.cab_type_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cab type {data.cab_type_id} not found",
        )

    route = await ensure_route(
        db, data.from_city_id, data.to_city_id, data.distance_km, data.duration_min
    )
    _support_trip_type(route, data.trip_type)

    result = await db.execute(
        select(RoutePricing).where(
            RoutePricing.from_city_id == route.from_city_id,
            RoutePricing.to_city_id == route.to_city_id,
            RoutePricing.cab_type_id == data.cab_type_id,
            RoutePricing.trip_type == data.trip_type,
        )
    )
    pricing = result.unique().scalar_one_or_none()
    created = pricing is None
    if created:
        pricing = RoutePricing(
            route_id=route.id,
            from_city_id=route.from_city_id,
            to_city_id=route.to_city_id,
            cab_type_id=data.cab_type_id,
            trip_type=data.trip_type,
        )
        db.add(pricing)

    pricing.route_id = route.id
    pricing.price = data.price
    pricing.active = data.active
    await db.flush()

    logger.info(
        "route_pricing_upserted",
        pricing_id=pricing.id,
        route_id=route.id,
        cab_type_id=data.cab_type_id,
        trip_type=data.trip_type.value,
        price=data.price,
        created=created,
    )
    return await get_route_pricing(db, pricing.id)


async def update_route_pricing(db: AsyncSession, pricing_id: int, data: RoutePricingUpdate) -> RoutePricing:
    pricing = await get_route_pricing(db, pricing_id)

    if data.price is not None:
        pricing.price = data.price
    if data.active is not None:
        pricing.active = data.active
    if data.distance_km is not None:
        pricing.route.distance_km = data.distance_km
    if data.duration_min is not None:
        pricing.route.duration_min = data.duration_min
    await db.flush()

    logger.info("route_pricing_updated", pricing_id=pricing_id)
    return await get_route_pricing(db, pricing_id)


async def delete_route_pricing(db: AsyncSession, pricing_id: int) -> None:
    pricing = await db.get(RoutePricing, pricing_id)
    if not pricing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Route pricing {pricing_id} not found",
        )
    await db.delete(pricing)
    await db.flush()
    logger.info("route_pricing_deleted", pricing_id=pricing_id)
