"""
Pydantic schemas for the admin dashboard.
"""

from cabservice.schemas.common import CamelModel


class DashboardStats(CamelModel):
    cities: int
    cab_types: int
    pricing_rules: int
    route_prices: int
    active_bookings: int
    open_inquiries: int
