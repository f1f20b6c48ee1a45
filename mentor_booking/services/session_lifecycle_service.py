"""
Session Lifecycle Service

State transitions of a booked session after creation:

    pending --approve--> scheduled --join--> in-progress --complete--> completed
    scheduled|rescheduled --reschedule--> rescheduled --join--> in-progress
    any non-completed --cancel--> cancelled

Completing or cancelling releases the mentor's slot. Every transition
returns a SessionOutcome whose intents are run by SideEffectRunner.
"""

import re
import secrets
import string
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, List, Optional

from mentor_booking.config import BookingConfig
from mentor_booking.models import BookingStatus, Feedback, SessionRecord, SessionStatus
from mentor_booking.repositories import SessionRepository, UserRepository
from mentor_booking.services.conflict_service import ConflictDetector
from mentor_booking.services.intents import NotificationIntent, SessionOutcome, meeting_intent_for
from mentor_booking.utils.datetime_utils import (
    combine_date_time,
    get_now_ist,
    normalize_time,
    parse_date,
    to_ist,
)
from mentor_booking.utils.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDenied,
    SlotAlreadyClaimed,
    ValidationError,
)
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)

URL_PATTERN = re.compile(r"^https?://\S+$")
SCORE_FIELDS = ("technical", "communication", "problem_solving", "overall")

# A rescheduled session runs like a scheduled one
UPCOMING_STATUSES = (SessionStatus.SCHEDULED.value, SessionStatus.RESCHEDULED.value)


def fallback_meet_link() -> str:
    """A meet.google.com style room code, xxx-xxxx-xxx."""
    letters = string.ascii_lowercase
    parts = ["".join(secrets.choice(letters) for _ in range(n)) for n in (3, 4, 3)]
    return "https://meet.google.com/" + "-".join(parts)


class SessionLifecycleService:
    """Service for approving, running, rescheduling and closing sessions"""

    def __init__(
        self,
        session_repository: SessionRepository,
        user_repository: UserRepository,
        conflict_detector: ConflictDetector,
        config: BookingConfig,
    ):
        self.session_repository = session_repository
        self.user_repository = user_repository
        self.conflict_detector = conflict_detector
        self.config = config

    # ==================== Helpers ====================

    def _load(self, session_id: str) -> SessionRecord:
        session = self.session_repository.get(session_id)
        if not session:
            raise NotFoundError("Session not found", "SessionLifecycle")
        return session

    @staticmethod
    def _require_mentor(session: SessionRecord, mentor_id: str, action: str) -> None:
        if session.mentor_id != mentor_id:
            raise PermissionDenied(f"Not authorized to {action} this session", "SessionLifecycle")

    @staticmethod
    def _require_participant(session: SessionRecord, user_id: str, action: str) -> None:
        if not user_id or not session.involves(user_id):
            raise PermissionDenied(f"Not authorized to {action} this session", "SessionLifecycle")

    def _save(self, session: SessionRecord, conflict_message: str) -> SessionRecord:
        try:
            return self.session_repository.save(session)
        except SlotAlreadyClaimed:
            raise ConflictError(conflict_message, "SessionLifecycle")

    def _check_slot_free(self, session: SessionRecord, day: Any, time_of_day: str, message: str) -> datetime:
        target = parse_date(day)
        slot = normalize_time(time_of_day)
        if self.conflict_detector.is_slot_taken(session.mentor_id, target, slot, exclude_session_id=session.id):
            raise ConflictError(message, "SessionLifecycle")
        return combine_date_time(target, slot)

    @staticmethod
    def _payload(session: SessionRecord, **extra) -> dict:
        payload = {
            "sessionId": session.id,
            "type": session.field,
            "scheduledDate": session.starts_at.isoformat() if session.starts_at else None,
        }
        payload.update(extra)
        return payload

    def _notify(self, user_ids: List[Optional[str]], event_type: str, session: SessionRecord, **extra) -> List[NotificationIntent]:
        return [
            NotificationIntent(user_id=uid, event_type=event_type, payload=self._payload(session, **extra))
            for uid in user_ids
            if uid
        ]

    # ==================== Transitions ====================

    def approve(
        self,
        session_id: str,
        mentor_id: str,
        day: Any = None,
        time_of_day: Optional[str] = None,
    ) -> SessionOutcome:
        """Mentor accepts a pending direct booking, optionally at a different slot."""
        session = self._load(session_id)
        self._require_mentor(session, mentor_id, "approve")
        if session.status != SessionStatus.PENDING.value:
            raise ValidationError("Only pending sessions can be approved", "SessionLifecycle")

        day = day or session.date
        time_of_day = time_of_day or session.time
        if not day or not time_of_day:
            raise ValidationError("Date and time are required", "SessionLifecycle")
        starts_at = self._check_slot_free(session, day, time_of_day, "This time slot conflicts with another session")

        updated = self._save(
            replace(session, status=SessionStatus.SCHEDULED.value, starts_at=starts_at),
            "This time slot conflicts with another session",
        )
        logger.info(f"[SessionLifecycle] Session {session_id} approved for {updated.date} {updated.time}")

        meeting = None
        if not updated.meeting_link:
            mentor = self.user_repository.find_by_id(updated.mentor_id)
            candidate = self.user_repository.find_by_id(updated.candidate_id)
            if mentor and candidate:
                meeting = meeting_intent_for(updated, mentor, candidate)

        notifications = self._notify([updated.candidate_id], "session_approved", updated)
        for intent in notifications:
            intent.attach_meeting_link = True
        return SessionOutcome(session=updated, meeting=meeting, notifications=notifications)

    def join(self, session_id: str, user_id: str, now: Optional[datetime] = None) -> SessionOutcome:
        """Candidate or mentor starts a scheduled session."""
        session = self._load(session_id)
        self._require_participant(session, user_id, "join")
        if session.status not in UPCOMING_STATUSES:
            raise ValidationError("Session is not available to join", "SessionLifecycle")

        now = to_ist(now) if now else get_now_ist()
        window = timedelta(minutes=self.config.join_window_minutes)
        if session.starts_at and now < session.starts_at - window:
            raise ValidationError(
                f"Session can be joined at most {self.config.join_window_minutes} minutes before it starts",
                "SessionLifecycle",
            )

        meeting_link = session.meeting_link
        if not meeting_link:
            meeting_link = fallback_meet_link()
            logger.info(f"[SessionLifecycle] Session {session_id} had no meeting link; generated {meeting_link}")

        updated = self._save(
            replace(session, status=SessionStatus.IN_PROGRESS.value, meeting_link=meeting_link),
            "Session slot is held by another session",
        )
        logger.info(f"[SessionLifecycle] Session {session_id} started by {user_id}")

        others = [uid for uid in (updated.candidate_id, updated.mentor_id) if uid != user_id]
        return SessionOutcome(
            session=updated,
            notifications=self._notify(others, "session_started", updated, meetingLink=meeting_link),
        )

    @staticmethod
    def _validate_feedback(feedback: Feedback) -> None:
        if feedback is None:
            raise ValidationError("Feedback is required to complete a session", "SessionLifecycle")
        for name in SCORE_FIELDS:
            score = getattr(feedback, name)
            if isinstance(score, bool) or not isinstance(score, int) or not 1 <= score <= 10:
                raise ValidationError(f"Feedback {name} must be an integer between 1 and 10", "SessionLifecycle")
        if not feedback.comments or not feedback.comments.strip():
            raise ValidationError("Feedback comments are required", "SessionLifecycle")

    def complete(self, session_id: str, mentor_id: str, feedback: Feedback) -> SessionOutcome:
        """Mentor closes an in-progress session with feedback. Releases the slot."""
        session = self._load(session_id)
        self._require_mentor(session, mentor_id, "complete")
        if session.status != SessionStatus.IN_PROGRESS.value:
            raise ValidationError("Only in-progress sessions can be completed", "SessionLifecycle")
        self._validate_feedback(feedback)

        updated = self._save(
            replace(
                session,
                status=SessionStatus.COMPLETED.value,
                booking_status=BookingStatus.COMPLETED.value,
                feedback=replace(feedback, mentor_id=mentor_id, created_at=get_now_ist()),
            ),
            "Session slot is held by another session",
        )
        self.user_repository.increment_session_counters(updated.candidate_id, completed=True)
        self.user_repository.increment_session_counters(updated.mentor_id)
        logger.info(f"[SessionLifecycle] Session {session_id} completed (overall={feedback.overall})")

        return SessionOutcome(
            session=updated,
            notifications=self._notify([updated.candidate_id], "session_completed", updated),
        )

    def cancel(self, session_id: str, mentor_id: str) -> SessionOutcome:
        """Mentor cancels a session that has not been completed. Releases the slot."""
        session = self._load(session_id)
        self._require_mentor(session, mentor_id, "cancel")
        if session.status == SessionStatus.COMPLETED.value:
            raise ValidationError("Cannot cancel a completed session", "SessionLifecycle")
        if session.status == SessionStatus.CANCELLED.value:
            raise ValidationError("Session is already cancelled", "SessionLifecycle")

        updated = self._save(
            replace(session, status=SessionStatus.CANCELLED.value),
            "Session slot is held by another session",
        )
        logger.info(f"[SessionLifecycle] Session {session_id} cancelled by mentor {mentor_id}")
        return SessionOutcome(
            session=updated,
            notifications=self._notify([updated.candidate_id], "session_cancelled", updated),
        )

    def reschedule(self, session_id: str, user_id: str, new_day: Any, new_time: str) -> SessionOutcome:
        """Move a scheduled session to another free slot of the same mentor."""
        session = self._load(session_id)
        self._require_participant(session, user_id, "reschedule")
        if session.status not in UPCOMING_STATUSES:
            raise ValidationError("Only scheduled sessions can be rescheduled", "SessionLifecycle")
        if not new_day or not new_time:
            raise ValidationError("New date and time are required", "SessionLifecycle")

        message = "The new time slot is already booked. Please choose another time."
        starts_at = self._check_slot_free(session, new_day, new_time, message)
        previous = session.starts_at
        updated = self._save(
            replace(session, status=SessionStatus.RESCHEDULED.value, starts_at=starts_at),
            message,
        )
        logger.info(
            f"[SessionLifecycle] Session {session_id} rescheduled by {user_id}: "
            f"{previous.isoformat() if previous else None} -> {starts_at.isoformat()}"
        )
        return SessionOutcome(
            session=updated,
            notifications=self._notify(
                [updated.candidate_id, updated.mentor_id],
                "session_rescheduled",
                updated,
                previousDate=previous.isoformat() if previous else None,
            ),
        )

    def update_meeting_link(self, session_id: str, mentor_id: str, meeting_link: str) -> SessionOutcome:
        """Mentor replaces the meeting room link."""
        session = self._load(session_id)
        self._require_mentor(session, mentor_id, "update")
        link = (meeting_link or "").strip()
        if not URL_PATTERN.match(link):
            raise ValidationError("Meeting link must be a valid http(s) URL", "SessionLifecycle")

        updated = self._save(replace(session, meeting_link=link), "Session slot is held by another session")
        logger.info(f"[SessionLifecycle] Meeting link updated for session {session_id}")
        return SessionOutcome(
            session=updated,
            notifications=self._notify([updated.candidate_id], "meeting_link_updated", updated, meetingLink=link),
        )
