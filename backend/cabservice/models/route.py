"""
Directed city-to-city routes and their admin-set prices.

Key design decisions:
- (from_city_id, to_city_id) is unique: one route per ordered pair
- RoutePricing repeats the route's city ids so the natural key
  (from, to, cab type, trip type) can carry a unique constraint; the ids are
  always copied from the owning route, never taken from the caller
- A route never connects a city to itself
"""

from sqlalchemy import (
    Column, Integer, Boolean, ForeignKey, UniqueConstraint, CheckConstraint, JSON, Index,
)
from sqlalchemy.orm import relationship

from cabservice.db.base import Base, TimestampMixin
from cabservice.models.enums import TripType, DEFAULT_ROUTE_TRIP_TYPES, enum_column


class CityRoute(Base, TimestampMixin):
    __tablename__ = "city_routes"

    id = Column(Integer, primary_key=True, index=True)
    from_city_id = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    to_city_id = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    distance_km = Column(Integer, nullable=False, default=0)
    duration_min = Column(Integer, nullable=False, default=0)
    trip_types = Column(JSON, nullable=False, default=lambda: list(DEFAULT_ROUTE_TRIP_TYPES))
    active = Column(Boolean, default=True, nullable=False)

    # Relationships
    from_city = relationship("City", foreign_keys=[from_city_id], lazy="joined")
    to_city = relationship("City", foreign_keys=[to_city_id], lazy="joined")
    pricing = relationship("RoutePricing", back_populates="route")

    __table_args__ = (
        UniqueConstraint("from_city_id", "to_city_id", name="uq_city_route_pair"),
        CheckConstraint("from_city_id <> to_city_id", name="check_route_distinct_cities"),
        CheckConstraint("distance_km >= 0", name="check_route_distance_non_negative"),
        CheckConstraint("duration_min >= 0", name="check_route_duration_non_negative"),
    )

    @property
    def description(self) -> str:
        return f"{self.from_city.label} → {self.to_city.label}"

    def __repr__(self) -> str:
        return f"<CityRoute(id={self.id}, from={self.from_city_id}, to={self.to_city_id})>"


class RoutePricing(Base, TimestampMixin):
    __tablename__ = "route_pricing"

    id = Column(Integer, primary_key=True, index=True)
    route_id = Column(Integer, ForeignKey("city_routes.id"), nullable=False, index=True)
    from_city_id = Column(Integer, ForeignKey("cities.id"), nullable=False)
    to_city_id = Column(Integer, ForeignKey("cities.id"), nullable=False)
    cab_type_id = Column(Integer, ForeignKey("cab_types.id"), nullable=False, index=True)
    trip_type = Column(enum_column(TripType, "route_pricing_trip_type"), nullable=False)
    price = Column(Integer, nullable=False)  # whole rupees
    active = Column(Boolean, default=True, nullable=False)

    # Relationships
    route = relationship("CityRoute", back_populates="pricing")
    cab_type = relationship("CabType", lazy="joined")

    __table_args__ = (
        UniqueConstraint(
            "from_city_id", "to_city_id", "cab_type_id", "trip_type",
            name="uq_route_pricing_key",
        ),
        CheckConstraint("price >= 0", name="check_route_price_non_negative"),
        # Availability lookup: route + trip type + active
        Index("ix_route_pricing_lookup", "route_id", "trip_type", "active"),
    )

    def __repr__(self) -> str:
        return (
            f"<RoutePricing(id={self.id}, route={self.route_id}, cab={self.cab_type_id}, "
            f"trip={self.trip_type}, price={self.price})>"
        )
