"""
Session record.

Every session is handled internally in one normalized shape: a single
mentor reference and a single IST timestamp. The legacy storage shape
(`mentor` vs `assignedMentor`, `scheduledDate` vs `date` + `time`) is
translated in SessionRepository only.
"""

from dataclasses import dataclass, field as dataclass_field
from datetime import datetime
from typing import Any, Dict, Optional

from mentor_booking.models.enums import (
    ACTIVE_STATUSES,
    BookingStatus,
    MeetingPlatform,
    PaymentStatus,
    SessionStatus,
)
from mentor_booking.utils.datetime_utils import format_hhmm, to_ist


def make_slot_key(mentor_id: str, starts_at: datetime) -> str:
    local = to_ist(starts_at)
    return f"{mentor_id}|{local.date().isoformat()}|{format_hhmm(local.hour, local.minute)}"


@dataclass
class Feedback:
    technical: int
    communication: int
    problem_solving: int
    overall: int
    comments: str
    mentor_id: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "technical": self.technical,
            "communication": self.communication,
            "problemSolving": self.problem_solving,
            "overall": self.overall,
            "comments": self.comments,
            "mentor": self.mentor_id,
            "createdAt": self.created_at,
        }


@dataclass
class SessionRecord:
    candidate_id: str
    field: str
    duration: int
    mentor_id: Optional[str] = None
    starts_at: Optional[datetime] = None
    status: str = SessionStatus.SCHEDULED.value
    booking_status: str = BookingStatus.PENDING_ASSIGNMENT.value
    auto_assigned: bool = False
    price: Optional[float] = None
    is_paid: bool = False
    payment_status: str = PaymentStatus.PENDING.value
    payment_id: Optional[str] = None
    order_id: Optional[str] = None
    meeting_link: Optional[str] = None
    google_event_id: Optional[str] = None
    meeting_platform: str = MeetingPlatform.GOOGLE_MEET.value
    meeting_id: Optional[str] = None
    notes: Optional[str] = None
    feedback: Optional[Feedback] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Slot of a stored document that predates slotKey. Saving the session
    # without moving it leaves the key unclaimed.
    legacy_slot_key: Optional[str] = dataclass_field(default=None, compare=False, repr=False)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def date(self) -> Optional[str]:
        return to_ist(self.starts_at).date().isoformat() if self.starts_at else None

    @property
    def time(self) -> Optional[str]:
        if not self.starts_at:
            return None
        local = to_ist(self.starts_at)
        return format_hhmm(local.hour, local.minute)

    @property
    def slot_key(self) -> Optional[str]:
        """Uniqueness key for the mentor/date/time slot; None once the slot is released."""
        if not self.is_active or not self.mentor_id or not self.starts_at:
            return None
        return make_slot_key(self.mentor_id, self.starts_at)

    def occupies(self, hour: int, minute: int) -> bool:
        if not self.starts_at:
            return False
        local = to_ist(self.starts_at)
        return local.hour == hour and local.minute == minute

    def involves(self, user_id: str) -> bool:
        return user_id in (self.candidate_id, self.mentor_id)
