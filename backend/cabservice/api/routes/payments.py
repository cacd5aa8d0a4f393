"""
Payment gateway endpoints: order creation and signature verification.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.db.session import get_db
from cabservice.schemas.payment import OrderCreate, OrderResponse, PaymentVerify, PaymentVerifyResponse
from cabservice.services.payment_service import create_order, verify_payment

router = APIRouter(tags=["Payments"])


@router.post("/create-order", response_model=OrderResponse)
async def create_order_endpoint(order_data: OrderCreate, db: AsyncSession = Depends(get_db)):
    """Create a gateway order for the amount (rupees) and return the checkout key."""
    return await create_order(db, order_data.amount, order_data.receipt)


@router.post("/verify-payment", response_model=PaymentVerifyResponse)
async def verify_payment_endpoint(payload: PaymentVerify, db: AsyncSession = Depends(get_db)):
    """Check the checkout widget's HMAC signature for the order/payment pair."""
    success = await verify_payment(
        db,
        payload.razorpay_order_id,
        payload.razorpay_payment_id,
        payload.razorpay_signature,
    )
    return PaymentVerifyResponse(success=success)
