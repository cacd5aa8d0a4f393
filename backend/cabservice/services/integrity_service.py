"""
Referential-integrity guard for admin deletes.

Cities and cab types are hard-deleted, so before deleting we count every row
that still points at them. The counts are independent scalar subqueries over
disjoint tables, issued as a single SELECT so the database evaluates them
together and we make one round trip. A delete is blocked if any count is
non-zero, and the refusal lists each count so staff know what to clean up.
"""

from dataclasses import asdict, dataclass

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.core.logging import get_logger
from cabservice.core.metrics import record_blocked_delete
from cabservice.db.queries import count_subquery
from cabservice.models import Booking, CityRoute, PricingRule, RoutePricing

logger = get_logger(__name__)


@dataclass(frozen=True)
class CityDependents:
    routes_from: int
    routes_to: int
    bookings_from: int
    bookings_to: int

    @property
    def routes(self) -> int:
        return self.routes_from + self.routes_to

    @property
    def bookings(self) -> int:
        return self.bookings_from + self.bookings_to

    @property
    def blocked(self) -> bool:
        return any((self.routes_from, self.routes_to, self.bookings_from, self.bookings_to))

    def message(self) -> str:
        return f"Cannot delete city: used in {self.routes} routes and {self.bookings} bookings"


@dataclass(frozen=True)
class CabTypeDependents:
    pricing_rules: int
    route_prices: int
    bookings: int

    @property
    def blocked(self) -> bool:
        return any((self.pricing_rules, self.route_prices, self.bookings))

    def message(self) -> str:
        return (
            f"Cannot delete cab type: used in {self.pricing_rules} pricing rules, "
            f"{self.route_prices} route prices, and {self.bookings} bookings"
        )


async def city_dependents(db: AsyncSession, city_id: int) -> CityDependents:
    row = (
        await db.execute(
            select(
                count_subquery(CityRoute, CityRoute.from_city_id == city_id).label("routes_from"),
                count_subquery(CityRoute, CityRoute.to_city_id == city_id).label("routes_to"),
                count_subquery(Booking, Booking.from_city_id == city_id).label("bookings_from"),
                count_subquery(Booking, Booking.to_city_id == city_id).label("bookings_to"),
            )
        )
    ).one()
    return CityDependents(
        routes_from=row.routes_from,
        routes_to=row.routes_to,
        bookings_from=row.bookings_from,
        bookings_to=row.bookings_to,
    )


async def cab_type_dependents(db: AsyncSession, cab_type_id: int) -> CabTypeDependents:
    row = (
        await db.execute(
            select(
                count_subquery(PricingRule, PricingRule.cab_type_id == cab_type_id).label("pricing_rules"),
                count_subquery(RoutePricing, RoutePricing.cab_type_id == cab_type_id).label("route_prices"),
                count_subquery(Booking, Booking.cab_type_id == cab_type_id).label("bookings"),
            )
        )
    ).one()
    return CabTypeDependents(
        pricing_rules=row.pricing_rules,
        route_prices=row.route_prices,
        bookings=row.bookings,
    )


def refuse_if_blocked(entity: str, entity_id: int, dependents) -> None:
    """Raise 400 with the itemized counts when anything still references the row."""
    if not dependents.blocked:
        return
    record_blocked_delete(entity)
    logger.warning("delete_blocked", entity=entity, entity_id=entity_id, dependents=asdict(dependents))
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=dependents.message(),
    )
