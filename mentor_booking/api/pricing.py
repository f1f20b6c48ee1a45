from fastapi import APIRouter

from mentor_booking.models.pricing import get_all_session_types
from mentor_booking.schemas.mentors import PricingResponse

# Public pricing endpoint
router = APIRouter(prefix="/api/pricing", tags=["Pricing"])


@router.get("", response_model=PricingResponse)
def get_pricing():
    """Price list per session type (no auth)."""
    return PricingResponse(sessionTypes=get_all_session_types())
