"""
Fare formula and the pricing-rule fallback path.

All amounts are whole rupees. The formula is

    fare = round((base_fare + distance_km * per_km + duration_min * per_minute) * surge)

with a single rounding step at the end (half away from zero). Route-specific
prices in RoutePricing always win over this formula; the rule path only
serves quotes for trips that have no admin-set route price.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.core.logging import get_logger
from cabservice.models import CabType, PricingRule, TripType
from cabservice.schemas.pricing import PricingRuleUpsert, QuoteResponse

logger = get_logger(__name__)

DEFAULT_SURGE = 1.0


def compute_fare(
    distance_km: float,
    duration_min: float,
    base_fare: float,
    per_km: float,
    per_minute: float,
    surge: float = DEFAULT_SURGE,
) -> int:
    """
    Compute a fare in whole rupees.

    Pure and deterministic; monotonically non-decreasing in distance,
    duration and surge for non-negative inputs. Negative or non-finite
    inputs are rejected.
    """
    values = {
        "distance_km": distance_km,
        "duration_min": duration_min,
        "base_fare": base_fare,
        "per_km": per_km,
        "per_minute": per_minute,
        "surge": surge,
    }
    for name, value in values.items():
        if not math.isfinite(value):
            raise ValueError(f"{name} must be a finite number, got {value}")
        if value < 0:
            raise ValueError(f"{name} must be non-negative, got {value}")

    subtotal = base_fare + distance_km * per_km + duration_min * per_minute
    surged = Decimal(str(subtotal)) * Decimal(str(surge))
    return int(surged.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def billable_distance(distance_km: float, min_km_per_day: Optional[int], days: int = 1) -> float:
    """Local rentals bill at least min_km_per_day for every day of hire."""
    if not min_km_per_day:
        return distance_km
    return max(distance_km, min_km_per_day * max(days, 1))


async def get_pricing_rule(db: AsyncSession, cab_type_id: int, trip_type: TripType) -> PricingRule:
    result = await db.execute(
        select(PricingRule).where(
            PricingRule.cab_type_id == cab_type_id,
            PricingRule.trip_type == trip_type,
        )
    )
    rule = result.scalar_one_or_none()
    if not rule:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No pricing rule for cab type {cab_type_id} and trip type {trip_type.value}",
        )
    return rule


async def quote_from_rule(
    db: AsyncSession,
    cab_type_id: int,
    trip_type: TripType,
    distance_km: float,
    duration_min: float,
    surge: float = DEFAULT_SURGE,
    days: int = 1,
) -> QuoteResponse:
    rule = await get_pricing_rule(db, cab_type_id, trip_type)
    km = billable_distance(distance_km, rule.min_km_per_day, days)
    try:
        price = compute_fare(
            distance_km=km,
            duration_min=duration_min,
            base_fare=rule.base_fare,
            per_km=rule.per_km,
            per_minute=rule.per_minute,
            surge=surge,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    logger.info(
        "rule_quote_computed",
        cab_type_id=cab_type_id,
        trip_type=trip_type.value,
        billable_km=km,
        price=price,
    )
    return QuoteResponse(
        cab_type_id=cab_type_id,
        trip_type=trip_type,
        billable_km=km,
        duration_min=duration_min,
        surge=surge,
        price=price,
    )


async def list_pricing_rules(db: AsyncSession) -> list[PricingRule]:
    result = await db.execute(
        select(PricingRule)
        .join(CabType, PricingRule.cab_type_id == CabType.id)
        .order_by(CabType.name.asc(), PricingRule.trip_type.asc())
    )
    return list(result.scalars().unique().all())


async def upsert_pricing_rule(db: AsyncSession, data: PricingRuleUpsert) -> PricingRule:
    """Create or replace the rule for (cab type, trip type)."""
    if await db.get(CabType, data.cab_type_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cab type {data.cab_type_id} not found",
        )

    result = await db.execute(
        select(PricingRule).where(
            PricingRule.cab_type_id == data.cab_type_id,
            PricingRule.trip_type == data.trip_type,
        )
    )
    rule = result.scalar_one_or_none()
    created = rule is None
    if created:
        rule = PricingRule(cab_type_id=data.cab_type_id, trip_type=data.trip_type)
        db.add(rule)

    rule.base_fare = data.base_fare
    rule.per_km = data.per_km
    rule.per_minute = data.per_minute
    rule.min_km_per_day = data.min_km_per_day
    await db.flush()
    await db.refresh(rule)

    logger.info(
        "pricing_rule_upserted",
        rule_id=rule.id,
        cab_type_id=rule.cab_type_id,
        trip_type=rule.trip_type.value,
        created=created,
    )
    return rule


async def delete_pricing_rule(db: AsyncSession, rule_id: int) -> None:
    rule = await db.get(PricingRule, rule_id)
    if not rule:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Pricing rule {rule_id} not found",
        )
    await db.delete(rule)
    await db.flush()
    logger.info("pricing_rule_deleted", rule_id=rule_id)
