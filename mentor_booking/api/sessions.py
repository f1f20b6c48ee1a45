from fastapi import APIRouter, Depends, status

from mentor_booking.api.errors import to_http_exception
from mentor_booking.models import Feedback, User
from mentor_booking.schemas.sessions import (
    ApproveSessionRequest,
    BookSessionRequest,
    CompleteSessionRequest,
    RescheduleSessionRequest,
    SessionActionResponse,
    SessionResponse,
    UpdateMeetingLinkRequest,
)
from mentor_booking.services.booking_service import BookingService
from mentor_booking.services.container import (
    get_booking_service,
    get_lifecycle_service,
    get_side_effect_runner,
)
from mentor_booking.services.intents import SessionOutcome
from mentor_booking.services.session_lifecycle_service import SessionLifecycleService
from mentor_booking.services.side_effect_runner import SideEffectRunner
from mentor_booking.utils.auth_dependencies import (
    get_current_candidate,
    get_current_mentor,
    get_current_user,
)
from mentor_booking.utils.exceptions import BookingError
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)

# Direct booking and session lifecycle endpoints
router = APIRouter(prefix="/api/sessions", tags=["Sessions"])


def _respond(outcome: SessionOutcome, side_effects: SideEffectRunner, message: str) -> SessionActionResponse:
    session = side_effects.run(outcome)
    return SessionActionResponse(message=message, session=SessionResponse.from_record(session))


@router.post("/book", response_model=SessionActionResponse, status_code=status.HTTP_201_CREATED)
def book_session(
    body: BookSessionRequest,
    current_user: User = Depends(get_current_candidate),
    booking_service: BookingService = Depends(get_booking_service),
    side_effects: SideEffectRunner = Depends(get_side_effect_runner),
):
    """Book a session with a chosen mentor. The mentor has to approve it."""
    logger.info(f"[API] Direct booking request from {current_user.id} with mentor {body.mentorId}")
    try:
        result = booking_service.book_direct(
            current_user.id,
            body.mentorId,
            body.type,
            body.date,
            body.time,
            body.duration,
            body.notes,
        )
    except BookingError as e:
        raise to_http_exception(e)
    return _respond(result, side_effects, "Session booked successfully")


@router.put("/{session_id}/approve", response_model=SessionActionResponse)
def approve_session(
    session_id: str,
    body: ApproveSessionRequest = ApproveSessionRequest(),
    current_user: User = Depends(get_current_mentor),
    lifecycle: SessionLifecycleService = Depends(get_lifecycle_service),
    side_effects: SideEffectRunner = Depends(get_side_effect_runner),
):
    try:
        outcome = lifecycle.approve(session_id, current_user.id, body.date, body.time)
    except BookingError as e:
        raise to_http_exception(e)
    return _respond(outcome, side_effects, "Session approved")


@router.put("/{session_id}/join", response_model=SessionActionResponse)
def join_session(
    session_id: str,
    current_user: User = Depends(get_current_user),
    lifecycle: SessionLifecycleService = Depends(get_lifecycle_service),
    side_effects: SideEffectRunner = Depends(get_side_effect_runner),
):
    try:
        outcome = lifecycle.join(session_id, current_user.id)
    except BookingError as e:
        raise to_http_exception(e)
    return _respond(outcome, side_effects, "Joined session")


@router.put("/{session_id}/complete", response_model=SessionActionResponse)
def complete_session(
    session_id: str,
    body: CompleteSessionRequest,
    current_user: User = Depends(get_current_mentor),
    lifecycle: SessionLifecycleService = Depends(get_lifecycle_service),
    side_effects: SideEffectRunner = Depends(get_side_effect_runner),
):
    feedback = Feedback(
        technical=body.feedback.technical,
        communication=body.feedback.communication,
        problem_solving=body.feedback.problemSolving,
        overall=body.feedback.overall,
        comments=body.feedback.comments,
    )
    try:
        outcome = lifecycle.complete(session_id, current_user.id, feedback)
    except BookingError as e:
        raise to_http_exception(e)
    return _respond(outcome, side_effects, "Session completed")


@router.put("/{session_id}/cancel", response_model=SessionActionResponse)
def cancel_session(
    session_id: str,
    current_user: User = Depends(get_current_mentor),
    lifecycle: SessionLifecycleService = Depends(get_lifecycle_service),
    side_effects: SideEffectRunner = Depends(get_side_effect_runner),
):
    try:
        outcome = lifecycle.cancel(session_id, current_user.id)
    except BookingError as e:
        raise to_http_exception(e)
    return _respond(outcome, side_effects, "Session cancelled")


@router.put("/{session_id}/reschedule", response_model=SessionActionResponse)
def reschedule_session(
    session_id: str,
    body: RescheduleSessionRequest,
    current_user: User = Depends(get_current_user),
    lifecycle: SessionLifecycleService = Depends(get_lifecycle_service),
    side_effects: SideEffectRunner = Depends(get_side_effect_runner),
):
    try:
        outcome = lifecycle.reschedule(session_id, current_user.id, body.newDate, body.newTime)
    except BookingError as e:
        raise to_http_exception(e)
    return _respond(outcome, side_effects, "Session rescheduled")


@router.put("/{session_id}/update-meeting-link", response_model=SessionActionResponse)
def update_meeting_link(
    session_id: str,
    body: UpdateMeetingLinkRequest,
    current_user: User = Depends(get_current_mentor),
    lifecycle: SessionLifecycleService = Depends(get_lifecycle_service),
    side_effects: SideEffectRunner = Depends(get_side_effect_runner),
):
    try:
        outcome = lifecycle.update_meeting_link(session_id, current_user.id, body.meetingLink)
    except BookingError as e:
        raise to_http_exception(e)
    return _respond(outcome, side_effects, "Meeting link updated")
