"""
Domain models shared by repositories and services.
"""

from mentor_booking.models.availability import MentorAvailability
from mentor_booking.models.enums import (
    ACTIVE_STATUSES,
    LOAD_STATUSES,
    BookingStatus,
    Field,
    MeetingPlatform,
    PaymentStatus,
    SessionStatus,
    UserRole,
)
from mentor_booking.models.payment import Payment
from mentor_booking.models.session import Feedback, SessionRecord, make_slot_key
from mentor_booking.models.user import User, WorkingHours

__all__ = [
    "ACTIVE_STATUSES",
    "LOAD_STATUSES",
    "BookingStatus",
    "Feedback",
    "Field",
    "MeetingPlatform",
    "MentorAvailability",
    "Payment",
    "PaymentStatus",
    "SessionRecord",
    "SessionStatus",
    "User",
    "UserRole",
    "WorkingHours",
    "make_slot_key",
]
