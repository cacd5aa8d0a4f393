"""
Customer inquiry endpoint, used when no instant price exists.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cabservice.core.metrics import record_inquiry_request
from cabservice.db.session import get_db
from cabservice.schemas.inquiry import InquiryCreate, InquiryCreatedResponse
from cabservice.services.inquiry_service import create_inquiry
from cabservice.services.notification_service import notify_new_inquiry

router = APIRouter(tags=["Inquiries"])


@router.post("/inquiries", response_model=InquiryCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_inquiry_endpoint(
    inquiry_data: InquiryCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    """Submit a trip request for a manual quote."""
    try:
        inquiry, notice = await create_inquiry(db, inquiry_data)
    except Exception:
        record_inquiry_request("error")
        raise

    record_inquiry_request("success")
    background_tasks.add_task(notify_new_inquiry, notice)
    return InquiryCreatedResponse(inquiry_id=inquiry.id)
