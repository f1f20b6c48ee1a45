"""
Side-effect intents.

Booking and lifecycle operations do not call the meeting-link provider or
the notification sender themselves. They return what should happen, and
SideEffectRunner carries it out after the session is persisted.
"""

from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, List, Optional

from mentor_booking.models import SessionRecord, User


@dataclass
class MeetingIntent:
    session_id: str
    date: str
    time: str
    duration: int
    field: str
    mentor_name: str
    mentor_email: str
    candidate_name: str
    candidate_email: str


@dataclass
class NotificationIntent:
    user_id: str
    event_type: str
    payload: Dict[str, Any] = dataclass_field(default_factory=dict)
    # Fill payload["meetingLink"] with whatever link the session ends up with
    attach_meeting_link: bool = False


@dataclass
class SessionOutcome:
    session: SessionRecord
    meeting: Optional[MeetingIntent] = None
    notifications: List[NotificationIntent] = dataclass_field(default_factory=list)


@dataclass
class BookingResult(SessionOutcome):
    mentor: Optional[User] = None

    def assigned_mentor_summary(self) -> Optional[Dict[str, Any]]:
        return self.mentor.summary() if self.mentor else None


def meeting_intent_for(session: SessionRecord, mentor: User, candidate: User) -> MeetingIntent:
    return MeetingIntent(
        session_id=session.id,
        date=session.date,
        time=session.time,
        duration=session.duration,
        field=session.field,
        mentor_name=mentor.name,
        mentor_email=mentor.email,
        candidate_name=candidate.name,
        candidate_email=candidate.email,
    )
