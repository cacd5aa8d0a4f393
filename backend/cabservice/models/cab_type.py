"""
Cab category model.

The reserved "Custom" category stands for "contact us for a vehicle": it is
never instantly priced and is hidden from customer-facing listings.
"""

from sqlalchemy import Column, Integer, String, Boolean, JSON

from cabservice.db.base import Base, TimestampMixin

CUSTOM_CAB_TYPE_NAME = "Custom"


class CabType(Base, TimestampMixin):
    __tablename__ = "cab_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    seats = Column(Integer, nullable=False)
    luggage = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, default=True, nullable=False)
    features = Column(JSON, nullable=False, default=list)
    image = Column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<CabType(id={self.id}, name={self.name}, seats={self.seats})>"
