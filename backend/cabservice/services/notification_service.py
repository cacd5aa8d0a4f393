"""
Admin email alerts for new bookings and inquiries, sent with fastapi-mail.

Sending is best-effort: handlers schedule the notify_* coroutines as
background tasks after the response. Missing SMTP credentials skip the send
with a warning; transport errors are logged as `notification_failed` for
manual follow-up and never retried or raised.
"""

import html
from typing import Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from cabservice.core.config import get_settings
from cabservice.core.logging import get_logger
from cabservice.core.metrics import record_notification
from cabservice.services.booking_service import BookingNotice
from cabservice.services.inquiry_service import InquiryNotice

logger = get_logger(__name__)

SUBJECT_PREFIX = "CabService Alert"


def _when(notice) -> str:
    return notice.start_at.strftime("%d %b %Y, %I:%M %p")


def booking_message(notice: BookingNotice) -> tuple[str, str]:
    subject = "New Booking Request"
    body = (
        f"New booking #{notice.booking_id} from {notice.customer_name} ({notice.customer_phone}).\n"
        f"Trip: {notice.trip_type}\n"
        f"Route: {notice.route_description}\n"
        f"Cab: {notice.cab_type_name}\n"
        f"Pickup: {_when(notice)}\n"
        f"Price: ₹{notice.price:,}"
    )
    return subject, body


def inquiry_message(notice: InquiryNotice) -> tuple[str, str]:
    subject = "New Trip Inquiry"
    body = (
        f"New inquiry #{notice.inquiry_id} from {notice.customer_name} ({notice.customer_phone}).\n"
        f"Trip: {notice.trip_type}\n"
        f"From: {notice.from_location}\n"
        f"To: {notice.to_location}\n"
        f"Start: {_when(notice)}"
    )
    if notice.requirements:
        body += f"\nRequirements: {notice.requirements}"
    return subject, body


def mail_config() -> ConnectionConfig:
    settings = get_settings()
    return ConnectionConfig(
        MAIL_USERNAME=settings.SMTP_USER,
        MAIL_PASSWORD=settings.SMTP_PASSWORD,
        MAIL_FROM=settings.SMTP_USER,
        MAIL_FROM_NAME=settings.APP_NAME,
        MAIL_SERVER=settings.SMTP_HOST,
        MAIL_PORT=settings.SMTP_PORT,
        MAIL_STARTTLS=settings.SMTP_USE_TLS,
        MAIL_SSL_TLS=False,
        USE_CREDENTIALS=bool(settings.SMTP_PASSWORD),
        SUPPRESS_SEND=int(settings.MAIL_SUPPRESS_SEND),
        TIMEOUT=settings.SMTP_TIMEOUT,
    )


def get_mailer() -> FastMail:
    return FastMail(mail_config())


def build_message(subject: str, text: str, recipient: str, html_body: Optional[str] = None) -> MessageSchema:
    return MessageSchema(
        subject=f"{SUBJECT_PREFIX}: {subject}",
        recipients=[recipient],
        body=html_body or html.escape(text).replace("\n", "<br>"),
        subtype=MessageType.html,
    )


async def send_admin_notification(subject: str, text: str, html_body: Optional[str] = None) -> bool:
    """Returns True when the mail was handed to the SMTP server."""
    settings = get_settings()
    if not settings.SMTP_USER or not settings.ADMIN_EMAIL:
        logger.warning("notification_skipped", reason="email_not_configured", subject=subject)
        record_notification("skipped")
        return False

    try:
        message = build_message(subject, text, settings.ADMIN_EMAIL, html_body)
        await get_mailer().send_message(message)
    except Exception as e:
        # Config and transport errors alike; the triggering request already succeeded
        logger.error("notification_failed", subject=subject, error=str(e))
        record_notification("failed")
        return False

    logger.info("notification_sent", subject=subject, to=settings.ADMIN_EMAIL)
    record_notification("sent")
    return True


async def notify_new_booking(notice: BookingNotice) -> bool:
    return await send_admin_notification(*booking_message(notice))


async def notify_new_inquiry(notice: InquiryNotice) -> bool:
    return await send_admin_notification(*inquiry_message(notice))
