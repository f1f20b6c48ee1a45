from fastapi import APIRouter, Depends

from mentor_booking.api.errors import to_http_exception
from mentor_booking.models import User
from mentor_booking.schemas.mentors import (
    AvailableMentorsResponse,
    MentorLoadResponse,
    MentorScheduleResponse,
    ToggleAvailabilityResponse,
)
from mentor_booking.services.container import get_mentor_assignment_service
from mentor_booking.services.mentor_assignment_service import MentorAssignmentService
from mentor_booking.utils.auth_dependencies import get_current_mentor, get_current_user
from mentor_booking.utils.exceptions import BookingError
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)

# Mentor discovery endpoints
router = APIRouter(prefix="/api/mentor-assignment", tags=["Mentor Assignment"])


@router.get("/available/{field}", response_model=AvailableMentorsResponse)
def get_available_mentors(
    field: str,
    current_user: User = Depends(get_current_user),
    assignment_service: MentorAssignmentService = Depends(get_mentor_assignment_service),
):
    """Mentors for a field with their current load."""
    try:
        mentors = assignment_service.get_available_mentors(field)
    except BookingError as e:
        raise to_http_exception(e)
    return AvailableMentorsResponse(field=field, mentors=mentors)


@router.get("/mentor/{mentor_id}/availability", response_model=MentorScheduleResponse)
def get_mentor_availability(
    mentor_id: str,
    current_user: User = Depends(get_current_user),
    assignment_service: MentorAssignmentService = Depends(get_mentor_assignment_service),
):
    """Free slots of a mentor for the next 30 days."""
    try:
        schedule = assignment_service.get_mentor_schedule(mentor_id)
    except BookingError as e:
        raise to_http_exception(e)
    return MentorScheduleResponse(mentorId=mentor_id, availability=schedule)


@router.get("/mentor/{mentor_id}/load", response_model=MentorLoadResponse)
def get_mentor_load(
    mentor_id: str,
    current_user: User = Depends(get_current_user),
    assignment_service: MentorAssignmentService = Depends(get_mentor_assignment_service),
):
    try:
        load = assignment_service.get_mentor_load(mentor_id)
    except BookingError as e:
        raise to_http_exception(e)
    return MentorLoadResponse(mentorId=mentor_id, currentLoad=load)


@router.post("/mentor/{mentor_id}/toggle-availability", response_model=ToggleAvailabilityResponse)
def toggle_mentor_availability(
    mentor_id: str,
    current_user: User = Depends(get_current_mentor),
    assignment_service: MentorAssignmentService = Depends(get_mentor_assignment_service),
):
    """Mentor switches whether they accept new sessions."""
    try:
        is_active = assignment_service.toggle_mentor_active(mentor_id, current_user.id)
    except BookingError as e:
        raise to_http_exception(e)
    return ToggleAvailabilityResponse(
        isActive=is_active,
        message=f"Mentor is now {'available' if is_active else 'unavailable'}",
    )
