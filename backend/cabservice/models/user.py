"""
User model with secure password storage.

Customers and staff share the table; `role` separates them. Inquiries are
linked to users by email match rather than a foreign key.
"""

from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import relationship

from cabservice.db.base import Base, TimestampMixin
from cabservice.models.enums import UserRole, enum_column


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    role = Column(enum_column(UserRole, "user_role"), nullable=False, default=UserRole.CUSTOMER)
    image = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    bookings = relationship("Booking", back_populates="user")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
