"""
Booking Service

Creates interview sessions through both booking pathways:
- smart booking, where the system picks the best free mentor for a slot
- direct booking, where the candidate picks the mentor (pending until approved)
"""

import math
from typing import Any, List, Optional, Tuple

from mentor_booking.config import BookingConfig
from mentor_booking.models import (
    BookingStatus,
    Field,
    PaymentStatus,
    SessionRecord,
    SessionStatus,
    User,
)
from mentor_booking.models.pricing import get_session_price
from mentor_booking.repositories import PaymentRepository, SessionRepository, UserRepository
from mentor_booking.services.conflict_service import ConflictDetector
from mentor_booking.services.intents import BookingResult, NotificationIntent, meeting_intent_for
from mentor_booking.services.mentor_assignment_service import MentorAssignmentService
from mentor_booking.utils.datetime_utils import combine_date_time, normalize_time, parse_date
from mentor_booking.utils.exceptions import (
    ConflictError,
    NotFoundError,
    SlotAlreadyClaimed,
    ValidationError,
)
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)

MIN_DURATION = 15
MAX_DURATION = 180
MAX_NOTES_LENGTH = 1000

SLOT_GONE = "This time slot is no longer available"
SLOT_BOOKED = "This time slot is already booked. Please choose another time."


def validate_duration(duration: Any) -> int:
    if isinstance(duration, bool):
        raise ValidationError("Duration must be a number of minutes", "BookingService")
    try:
        minutes = int(duration)
    except (TypeError, ValueError):
        raise ValidationError("Duration must be a number of minutes", "BookingService")
    if minutes != duration and str(minutes) != str(duration).strip():
        raise ValidationError("Duration must be a whole number of minutes", "BookingService")
    if not MIN_DURATION <= minutes <= MAX_DURATION:
        raise ValidationError(
            f"Duration must be between {MIN_DURATION} and {MAX_DURATION} minutes", "BookingService"
        )
    return minutes


def validate_field(field: Any) -> str:
    if not Field.is_valid(field):
        raise ValidationError(
            f"Valid session type is required ({', '.join(Field.values())})", "BookingService"
        )
    return field


class BookingService:
    """Service for booking interview sessions"""

    def __init__(
        self,
        mentor_assignment_service: MentorAssignmentService,
        conflict_detector: ConflictDetector,
        session_repository: SessionRepository,
        user_repository: UserRepository,
        payment_repository: PaymentRepository,
        config: BookingConfig,
    ):
        self.mentor_assignment_service = mentor_assignment_service
        self.conflict_detector = conflict_detector
        self.session_repository = session_repository
        self.user_repository = user_repository
        self.payment_repository = payment_repository
        self.config = config

    def _validate_smart_request(self, field, day, time_of_day, duration, price) -> Tuple[Any, str, int, float]:
        provided = (("field", field), ("date", day), ("time", time_of_day), ("duration", duration), ("price", price))
        missing = [name for name, value in provided if value is None or value == ""]
        if missing:
            raise ValidationError(f"All fields are required (missing: {', '.join(missing)})", "BookingService")

        validate_field(field)
        target = parse_date(day)
        slot = normalize_time(time_of_day)
        minutes = validate_duration(duration)
        try:
            amount = float(price)
        except (TypeError, ValueError):
            raise ValidationError("Price must be a number", "BookingService")
        if not math.isfinite(amount):
            raise ValidationError("Price must be a finite number", "BookingService")
        if amount < 0:
            raise ValidationError("Price cannot be negative", "BookingService")
        return target, slot, minutes, amount

    def _resolve_candidate(self, candidate_id: Optional[str]) -> User:
        candidate = self.user_repository.find_by_id(candidate_id) if candidate_id else None
        if not candidate:
            raise ValidationError("Candidate could not be resolved", "BookingService")
        return candidate

    @staticmethod
    def _booking_notifications(session: SessionRecord, mentor: User, candidate: User) -> List[NotificationIntent]:
        scheduled = session.starts_at.isoformat() if session.starts_at else None
        return [
            NotificationIntent(
                user_id=mentor.id,
                event_type="session_booked",
                payload={
                    "sessionId": session.id,
                    "candidateName": candidate.name,
                    "mentorName": mentor.name,
                    "type": session.field,
                    "scheduledDate": scheduled,
                },
            ),
            NotificationIntent(
                user_id=candidate.id,
                event_type="session_confirmed",
                payload={
                    "sessionId": session.id,
                    "candidateName": candidate.name,
                    "mentorName": mentor.name,
                    "type": session.field,
                    "scheduledDate": scheduled,
                },
                attach_meeting_link=True,
            ),
        ]

    def book_smart(
        self,
        candidate_id: Optional[str],
        field: Optional[str],
        day: Any,
        time_of_day: Optional[str],
        duration: Any,
        price: Any,
    ) -> BookingResult:
        """
        Book a session and let the system assign the best free mentor.

        The mentor is ranked again at write time, so a slot that was listed
        but has since been taken fails with ConflictError. If another booking
        claims the same mentor/slot between ranking and insert, the unique
        slot key rejects the insert and ranking is retried.

        Raises:
            ValidationError: missing/malformed input or unknown candidate
            NotFoundError: no active mentor specializes in the field
            ConflictError: no mentor is free for the slot any more
        """
        target, slot, minutes, amount = self._validate_smart_request(field, day, time_of_day, duration, price)
        candidate = self._resolve_candidate(candidate_id)
        starts_at = combine_date_time(target, slot)

        payment = None
        payment_checked = False
        attempts = self.config.max_booking_attempts
        for attempt in range(1, attempts + 1):
            mentor = self.mentor_assignment_service.find_best_mentor(field, target, slot)
            if mentor is None:
                raise ConflictError(SLOT_GONE, "BookingService")

            if not payment_checked:
                payment = self.payment_repository.find_latest_captured_payment(candidate.id, field)
                payment_checked = True

            record = SessionRecord(
                candidate_id=candidate.id,
                mentor_id=mentor.id,
                field=field,
                status=SessionStatus.SCHEDULED.value,
                booking_status=BookingStatus.CONFIRMED.value,
                starts_at=starts_at,
                duration=minutes,
                price=amount,
                auto_assigned=True,
                is_paid=payment is not None,
                payment_id=payment.payment_id if payment else None,
                order_id=payment.order_id if payment else None,
                payment_status=(PaymentStatus.COMPLETED if payment else PaymentStatus.PENDING).value,
            )
            try:
                session = self.session_repository.create(record)
            except SlotAlreadyClaimed:
                logger.warning(
                    f"[BookingService] Slot {record.slot_key} claimed concurrently "
                    f"(attempt {attempt}/{attempts}); re-ranking"
                )
                continue

            logger.info(
                f"[BookingService] Smart booking {session.id}: candidate={candidate.id} mentor={mentor.id} "
                f"{field} {target} {slot} paid={session.is_paid}"
            )
            return BookingResult(
                session=session,
                mentor=mentor,
                meeting=meeting_intent_for(session, mentor, candidate),
                notifications=self._booking_notifications(session, mentor, candidate),
            )

        raise ConflictError(SLOT_GONE, "BookingService")

    def book_direct(
        self,
        candidate_id: str,
        mentor_id: str,
        field: str,
        day: Any,
        time_of_day: str,
        duration: Any,
        notes: Optional[str] = None,
    ) -> BookingResult:
        """
        Book a session with a mentor the candidate picked.

        The session stays pending until the mentor approves it. The meeting
        room is requested right away; approval only creates one when this
        request produced no link.
        """
        validate_field(field)
        target = parse_date(day)
        slot = normalize_time(time_of_day)
        minutes = validate_duration(duration)
        if notes and len(notes) > MAX_NOTES_LENGTH:
            raise ValidationError(f"Notes cannot exceed {MAX_NOTES_LENGTH} characters", "BookingService")

        candidate = self.user_repository.find_by_id(candidate_id)
        if not candidate:
            raise NotFoundError("Candidate not found", "BookingService")

        mentor = self.user_repository.find_by_id(mentor_id)
        if not mentor or not mentor.is_mentor:
            raise NotFoundError("Mentor not found", "BookingService")

        if self.conflict_detector.is_slot_taken(mentor.id, target, slot):
            raise ConflictError(SLOT_BOOKED, "BookingService")

        record = SessionRecord(
            candidate_id=candidate.id,
            mentor_id=mentor.id,
            field=field,
            status=SessionStatus.PENDING.value,
            booking_status=BookingStatus.ASSIGNED.value,
            starts_at=combine_date_time(target, slot),
            duration=minutes,
            price=get_session_price(field),
            auto_assigned=False,
            notes=notes,
        )
        try:
            session = self.session_repository.create(record)
        except SlotAlreadyClaimed:
            raise ConflictError(SLOT_BOOKED, "BookingService")

        logger.info(
            f"[BookingService] Direct booking {session.id}: candidate={candidate.id} mentor={mentor.id} "
            f"{field} {target} {slot} (pending approval)"
        )
        return BookingResult(
            session=session,
            mentor=mentor,
            meeting=meeting_intent_for(session, mentor, candidate),
            notifications=self._booking_notifications(session, mentor, candidate),
        )
