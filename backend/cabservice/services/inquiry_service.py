"""
Inquiry writer: trip requests with no instant price.

Locations are stored as the customer typed them. Inquiries start pending and
are closed by staff once followed up; closed is terminal.
"""

from dataclasses import dataclass
from datetime import datetime

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.core.logging import get_logger
from cabservice.models import Inquiry, InquiryStatus
from cabservice.models.enums import can_transition, statuses_in_bucket
from cabservice.schemas.inquiry import InquiryCreate
from cabservice.services.booking_service import combine

logger = get_logger(__name__)


@dataclass(frozen=True)
class InquiryNotice:
    inquiry_id: int
    customer_name: str
    customer_phone: str
    trip_type: str
    from_location: str
    to_location: str
    start_at: datetime
    requirements: str


async def create_inquiry(db: AsyncSession, data: InquiryCreate) -> tuple[Inquiry, InquiryNotice]:
    start_at = combine(data.start_date, data.start_time)
    end_at = combine(data.return_date, data.return_time) if data.return_date else None

    inquiry = Inquiry(
        trip_type=data.trip_type,
        from_location=data.from_location.strip(),
        to_location=data.to_location.strip(),
        start_date=start_at,
        end_date=end_at,
        customer_name=data.customer_name.strip(),
        customer_phone=data.customer_phone.strip(),
        customer_email=(data.customer_email or "").lower(),
        pickup_address=data.pickup_address or "",
        drop_address=data.drop_address or "",
        requirements=data.requirements or "",
        status=InquiryStatus.PENDING,
    )
    db.add(inquiry)
    await db.flush()
    await db.refresh(inquiry)

    logger.info("inquiry_created", inquiry_id=inquiry.id, trip_type=data.trip_type.value)

    notice = InquiryNotice(
        inquiry_id=inquiry.id,
        customer_name=inquiry.customer_name,
        customer_phone=inquiry.customer_phone,
        trip_type=data.trip_type.value,
        from_location=inquiry.from_location,
        to_location=inquiry.to_location,
        start_at=start_at,
        requirements=inquiry.requirements,
    )
    return inquiry, notice


async def list_inquiries(db: AsyncSession, archived: bool = False) -> list[Inquiry]:
    result = await db.execute(
        select(Inquiry)
        .where(Inquiry.status.in_(statuses_in_bucket(InquiryStatus, archived)))
        .order_by(Inquiry.created_at.desc(), Inquiry.id.desc())
    )
    return list(result.scalars().all())


async def get_inquiries_for_email(db: AsyncSession, email: str) -> list[Inquiry]:
    """Inquiries are tied to accounts by contact email (stored lower-cased), not by foreign key."""
    result = await db.execute(
        select(Inquiry)
        .where(Inquiry.customer_email == email.lower())
        .order_by(Inquiry.created_at.desc(), Inquiry.id.desc())
    )
    return list(result.scalars().all())


async def update_inquiry_status(db: AsyncSession, inquiry_id: int, new_status: InquiryStatus) -> Inquiry:
    inquiry = await db.get(Inquiry, inquiry_id)
    if not inquiry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Inquiry {inquiry_id} not found",
        )

    current = InquiryStatus(inquiry.status)
    if not can_transition(current, new_status):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot change inquiry status from {current.value} to {new_status.value}",
        )

    inquiry.status = new_status
    await db.flush()
    await db.refresh(inquiry)

    logger.info("inquiry_status_changed", inquiry_id=inquiry_id, status=new_status.value)
    return inquiry
