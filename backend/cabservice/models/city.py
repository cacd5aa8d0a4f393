"""
City model. Name+state pairs are not unique; seed data repeats some.
"""

from sqlalchemy import Column, Integer, String, Boolean, Index

from cabservice.db.base import Base, TimestampMixin


class City(Base, TimestampMixin):
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    state = Column(String(120), nullable=False)
    is_airport = Column(Boolean, default=False, nullable=False)
    active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        # Catalog search filters on active and orders by name
        Index("ix_cities_active_name", "active", "name"),
    )

    @property
    def label(self) -> str:
        return f"{self.name}, {self.state}"

    def __repr__(self) -> str:
        return f"<City(id={self.id}, name={self.name}, state={self.state})>"
