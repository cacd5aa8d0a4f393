"""
Payment gateway passthrough (Razorpay) and the payment settings record.

Credentials come from the `payment.razorpay` Setting row when staff have
saved one in the admin console, otherwise from RAZORPAY_KEY_ID /
RAZORPAY_KEY_SECRET. Amounts cross this boundary in whole rupees and are
converted to paise for the gateway.
"""

import hashlib
import hmac
from dataclasses import dataclass
from typing import Optional

import razorpay
from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from cabservice.core.config import get_settings
from cabservice.core.logging import get_logger
from cabservice.models import Setting, PAYMENT_SETTING_KEY
from cabservice.schemas.payment import OrderResponse, PaymentSettings, PaymentSettingsResponse

logger = get_logger(__name__)

CURRENCY = "INR"
PAISE_PER_RUPEE = 100


@dataclass(frozen=True)
class GatewayCredentials:
    key_id: str
    key_secret: str


async def _payment_setting(db: AsyncSession) -> Optional[Setting]:
    result = await db.execute(select(Setting).where(Setting.key == PAYMENT_SETTING_KEY))
    return result.scalar_one_or_none()


async def get_credentials(db: AsyncSession) -> GatewayCredentials:
    setting = await _payment_setting(db)
    stored = setting.value_json if setting and isinstance(setting.value_json, dict) else {}
    if stored.get("keyId") and stored.get("keySecret"):
        return GatewayCredentials(stored["keyId"], stored["keySecret"])

    settings = get_settings()
    if settings.RAZORPAY_KEY_ID and settings.RAZORPAY_KEY_SECRET:
        return GatewayCredentials(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)

    logger.error("payment_gateway_not_configured")
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Payments are not configured",
    )


def get_gateway_client(credentials: GatewayCredentials) -> razorpay.Client:
    return razorpay.Client(auth=(credentials.key_id, credentials.key_secret))


async def create_order(db: AsyncSession, amount: int, receipt: Optional[str] = None) -> OrderResponse:
    credentials = await get_credentials(db)
    client = get_gateway_client(credentials)
    payload = {"amount": amount * PAISE_PER_RUPEE, "currency": CURRENCY}
    if receipt:
        payload["receipt"] = receipt

    try:
        order = await run_in_threadpool(client.order.create, data=payload)
    except Exception as e:
        logger.error("payment_order_failed", amount=amount, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Payment gateway error",
        ) from e

    logger.info("payment_order_created", order_id=order["id"], amount=amount)
    return OrderResponse(order_id=order["id"], amount=amount, currency=CURRENCY, key=credentials.key_id)


def expected_signature(order_id: str, payment_id: str, secret: str) -> str:
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def signature_matches(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    return hmac.compare_digest(expected_signature(order_id, payment_id, secret), signature)


async def verify_payment(db: AsyncSession, order_id: str, payment_id: str, signature: str) -> bool:
    credentials = await get_credentials(db)
    ok = signature_matches(order_id, payment_id, signature, credentials.key_secret)
    if ok:
        logger.info("payment_verified", order_id=order_id, payment_id=payment_id)
    else:
        logger.warning("payment_signature_mismatch", order_id=order_id, payment_id=payment_id)
    return ok


def _mask(secret: str) -> str:
    if not secret:
        return ""
    return "*" * max(len(secret) - 4, 4) + secret[-4:]


async def get_payment_settings(db: AsyncSession) -> PaymentSettingsResponse:
    setting = await _payment_setting(db)
    stored = setting.value_json if setting and isinstance(setting.value_json, dict) else {}
    key_id = stored.get("keyId", "")
    key_secret = stored.get("keySecret", "")
    return PaymentSettingsResponse(
        key_id=key_id,
        key_secret_masked=_mask(key_secret),
        configured=bool(key_id and key_secret),
    )


async def save_payment_settings(db: AsyncSession, data: PaymentSettings) -> PaymentSettingsResponse:
    setting = await _payment_setting(db)
    value = {"keyId": data.key_id, "keySecret": data.key_secret}
    if setting is None:
        db.add(Setting(key=PAYMENT_SETTING_KEY, value_json=value))
    else:
        setting.value_json = value
    await db.flush()

    logger.info("payment_settings_saved", key_id=data.key_id)
    return await get_payment_settings(db)
