from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from mentor_booking.api.errors import to_http_exception
from mentor_booking.models import User
from mentor_booking.schemas.sessions import SessionResponse
from mentor_booking.schemas.smart_booking import (
    AvailableSlotsResponse,
    BookSmartRequest,
    BookSmartResponse,
)
from mentor_booking.services.booking_service import BookingService
from mentor_booking.services.container import (
    get_booking_service,
    get_mentor_assignment_service,
    get_side_effect_runner,
)
from mentor_booking.services.mentor_assignment_service import MentorAssignmentService
from mentor_booking.services.side_effect_runner import SideEffectRunner
from mentor_booking.utils.auth_dependencies import get_current_candidate, get_current_user
from mentor_booking.utils.exceptions import BookingError
from mentor_booking.utils.limiter import limiter
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)

# Auto-assignment booking endpoints
router = APIRouter(prefix="/api/smart-booking", tags=["Smart Booking"])


@router.get("/available-slots", response_model=AvailableSlotsResponse)
def get_available_slots(
    field: Optional[str] = None,
    date: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    assignment_service: MentorAssignmentService = Depends(get_mentor_assignment_service),
):
    """
    Free slots for a field on a date, across all mentors of the field.

    The mentor is not chosen here; that happens at booking time.
    """
    if not field or not date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Field and date are required",
        )
    try:
        slots = assignment_service.list_available_slots(field, date)
        return AvailableSlotsResponse(field=field, date=date, availableSlots=slots, totalSlots=len(slots))
    except BookingError as e:
        raise to_http_exception(e)


@router.post("/book-smart", response_model=BookSmartResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def book_smart(
    request: Request,
    body: BookSmartRequest,
    current_user: User = Depends(get_current_candidate),
    booking_service: BookingService = Depends(get_booking_service),
    side_effects: SideEffectRunner = Depends(get_side_effect_runner),
):
    """
    Book a session and auto-assign the best available mentor.
    Rate limited to 30 requests per minute per IP.
    """
    logger.info(f"[API] Smart booking request from {current_user.id}: {body.field} {body.date} {body.time}")
    try:
        result = booking_service.book_smart(
            current_user.id,
            body.field,
            body.date,
            body.time,
            body.duration,
            body.price,
        )
    except BookingError as e:
        raise to_http_exception(e)

    session = side_effects.run(result)
    return BookSmartResponse(
        message="Session booked successfully! Mentor assigned automatically.",
        session=SessionResponse.from_record(session),
        assignedMentor=result.assigned_mentor_summary(),
    )
