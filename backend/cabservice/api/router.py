"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from cabservice.api.routes import account, admin, auth, bookings, catalog, inquiries, payments, trips

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(account.router)
api_router.include_router(catalog.router)
api_router.include_router(trips.router)
api_router.include_router(bookings.router)
api_router.include_router(inquiries.router)
api_router.include_router(payments.router)
api_router.include_router(admin.router)
