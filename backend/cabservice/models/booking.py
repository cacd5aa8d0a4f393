"""
Booking model representing a firm, priced trip request.

Key design decisions:
- from_city_id/to_city_id are both set (intercity) or both null (local/custom
  trips); a CHECK constraint enforces the pairing
- Status is a closed enum; transitions are admin-driven only
- price_quote is stored as the customer saw it, in whole rupees
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from cabservice.db.base import Base, TimestampMixin
from cabservice.models.enums import BookingStatus, TripType, enum_column


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    trip_type = Column(enum_column(TripType, "booking_trip_type"), nullable=False)
    start_at = Column(DateTime(timezone=True), nullable=False)
    end_at = Column(DateTime(timezone=True), nullable=True)
    return_at = Column(DateTime(timezone=True), nullable=True)
    cab_type_id = Column(Integer, ForeignKey("cab_types.id"), nullable=False, index=True)
    from_city_id = Column(Integer, ForeignKey("cities.id"), nullable=True, index=True)
    to_city_id = Column(Integer, ForeignKey("cities.id"), nullable=True, index=True)
    distance_km = Column(Integer, nullable=True)
    duration_min = Column(Integer, nullable=True)
    price_quote = Column(Integer, nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(32), nullable=False)
    customer_email = Column(String(255), nullable=False, default="")
    pickup_address = Column(String(500), nullable=False, default="")
    drop_address = Column(String(500), nullable=False, default="")
    status = Column(
        enum_column(BookingStatus, "booking_status"),
        nullable=False,
        default=BookingStatus.PENDING,
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    # Relationships
    user = relationship("User", back_populates="bookings")
    cab_type = relationship("CabType", lazy="joined")
    from_city = relationship("City", foreign_keys=[from_city_id], lazy="joined")
    to_city = relationship("City", foreign_keys=[to_city_id], lazy="joined")

    __table_args__ = (
        CheckConstraint(
            "(from_city_id IS NULL AND to_city_id IS NULL) "
            "OR (from_city_id IS NOT NULL AND to_city_id IS NOT NULL)",
            name="check_booking_cities_paired",
        ),
        CheckConstraint("price_quote >= 0", name="check_booking_price_non_negative"),
        # Admin lists filter by status bucket, newest first
        Index("ix_bookings_status_created", "status", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, trip={self.trip_type}, status={self.status})>"
