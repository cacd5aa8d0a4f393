"""
Key-value configuration store managed from the admin console.
"""

from sqlalchemy import Column, Integer, String, JSON

from cabservice.db.base import Base, TimestampMixin

PAYMENT_SETTING_KEY = "payment.razorpay"


class Setting(Base, TimestampMixin):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, nullable=False)
    value_json = Column(JSON, nullable=False, default=dict)

    def __repr__(self) -> str:
        return f"<Setting(key={self.key})>"
