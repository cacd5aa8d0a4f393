"""
Headline numbers for the admin dashboard, gathered in one query.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.models import (
    Booking, BookingStatus, CabType, City, Inquiry, InquiryStatus, PricingRule, RoutePricing,
)
from cabservice.db.queries import count_subquery
from cabservice.models.enums import statuses_in_bucket
from cabservice.schemas.admin import DashboardStats


async def get_dashboard_stats(db: AsyncSession) -> DashboardStats:
    row = (
        await db.execute(
            select(
                count_subquery(City).label("cities"),
                count_subquery(CabType).label("cab_types"),
                count_subquery(PricingRule).label("pricing_rules"),
                count_subquery(RoutePricing).label("route_prices"),
                count_subquery(
                    Booking,
                    Booking.status.in_(statuses_in_bucket(BookingStatus, archived=False)),
                ).label("active_bookings"),
                count_subquery(
                    Inquiry,
                    Inquiry.status.in_(statuses_in_bucket(InquiryStatus, archived=False)),
                ).label("open_inquiries"),
            )
        )
    ).one()
    return DashboardStats(**row._mapping)
