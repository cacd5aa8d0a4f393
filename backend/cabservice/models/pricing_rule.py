"""
Fallback fare formula per cab type and trip type.

Used by the rule-based quote when no route-specific price exists:
fare = (base_fare + km * per_km + minutes * per_minute) * surge, all in rupees.
"""

from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from cabservice.db.base import Base, TimestampMixin
from cabservice.models.enums import TripType, enum_column


class PricingRule(Base, TimestampMixin):
    __tablename__ = "pricing_rules"

    id = Column(Integer, primary_key=True, index=True)
    cab_type_id = Column(Integer, ForeignKey("cab_types.id"), nullable=False, index=True)
    trip_type = Column(enum_column(TripType, "pricing_rule_trip_type"), nullable=False)
    base_fare = Column(Integer, nullable=False, default=0)
    per_km = Column(Integer, nullable=False, default=0)
    per_minute = Column(Integer, nullable=False, default=0)
    min_km_per_day = Column(Integer, nullable=True)  # local rentals

    cab_type = relationship("CabType", lazy="joined")

    __table_args__ = (
        UniqueConstraint("cab_type_id", "trip_type", name="uq_pricing_rule_cab_trip"),
        CheckConstraint(
            "base_fare >= 0 AND per_km >= 0 AND per_minute >= 0",
            name="check_pricing_rule_non_negative",
        ),
    )

    def __repr__(self) -> str:
        return f"<PricingRule(id={self.id}, cab={self.cab_type_id}, trip={self.trip_type})>"
