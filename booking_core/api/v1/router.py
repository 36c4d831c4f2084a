"""
API v1 router setup
Public booking routes; tenants are addressed by business_id in the path
"""
from fastapi import APIRouter

from booking_core.api.v1.public import availability, bookings

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(
    availability.router,
    prefix="/public",
    tags=["Public"]
)

api_v1_router.include_router(
    bookings.router,
    prefix="/public",
    tags=["Public"]
)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """API information and available endpoints."""
    return {
        "version": "1.0",
        "endpoints": {
            "slots": "/api/v1/public/businesses/{business_id}/availability/slots",
            "check": "/api/v1/public/businesses/{business_id}/availability/check",
            "bookings": "/api/v1/public/businesses/{business_id}/bookings"
        }
    }
