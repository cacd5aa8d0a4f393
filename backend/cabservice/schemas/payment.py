"""
Pydantic schemas for payment-gateway orders and signature checks.

Field names on the verify request match what the gateway's checkout widget
posts back, so they are not camel-cased.
"""

from typing import Optional

from pydantic import BaseModel, Field

from cabservice.schemas.common import CamelModel


class OrderCreate(CamelModel):
    amount: int = Field(..., gt=0, description="Amount in whole rupees")
    receipt: Optional[str] = Field(None, max_length=40)


class OrderResponse(CamelModel):
    order_id: str
    amount: int
    currency: str = "INR"
    key: str


class PaymentVerify(BaseModel):
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)


class PaymentVerifyResponse(CamelModel):
    success: bool


class PaymentSettings(CamelModel):
    key_id: str = Field(..., min_length=1)
    key_secret: str = Field(..., min_length=1)


class PaymentSettingsResponse(CamelModel):
    key_id: str
    key_secret_masked: str
    configured: bool
