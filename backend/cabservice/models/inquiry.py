"""
Inquiry model: a free-form trip request awaiting a manual quote.

Locations are free text, not city references.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Index

from cabservice.db.base import Base, TimestampMixin
from cabservice.models.enums import InquiryStatus, TripType, enum_column


class Inquiry(Base, TimestampMixin):
    __tablename__ = "inquiries"

    id = Column(Integer, primary_key=True, index=True)
    trip_type = Column(enum_column(TripType, "inquiry_trip_type"), nullable=False)
    from_location = Column(String(255), nullable=False)
    to_location = Column(String(255), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=True)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(32), nullable=False)
    customer_email = Column(String(255), nullable=False, default="", index=True)
    pickup_address = Column(String(500), nullable=False, default="")
    drop_address = Column(String(500), nullable=False, default="")
    requirements = Column(Text, nullable=False, default="")
    status = Column(
        enum_column(InquiryStatus, "inquiry_status"),
        nullable=False,
        default=InquiryStatus.PENDING,
    )

    __table_args__ = (
        Index("ix_inquiries_status_created", "status", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Inquiry(id={self.id}, from={self.from_location}, to={self.to_location}, status={self.status})>"
