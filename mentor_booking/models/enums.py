from enum import Enum


class Field(str, Enum):
    """Mentor specialization / session category."""
    DSA = "DSA"
    DATA_SCIENCE = "Data Science"
    ANALYTICS = "Analytics"
    SYSTEM_DESIGN = "System Design"
    BEHAVIORAL = "Behavioral"

    @classmethod
    def values(cls):
        return [f.value for f in cls]

    @classmethod
    def is_valid(cls, value) -> bool:
        return value in cls.values()


class UserRole(str, Enum):
    CANDIDATE = "candidate"
    MENTOR = "mentor"
    ADMIN = "admin"


class SessionStatus(str, Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


class BookingStatus(str, Enum):
    PENDING_ASSIGNMENT = "pending_assignment"
    ASSIGNED = "assigned"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class MeetingPlatform(str, Enum):
    GOOGLE_MEET = "google-meet"
    ZOOM = "zoom"
    TEAMS = "teams"


# Sessions in these states hold their mentor/date/time slot.
ACTIVE_STATUSES = frozenset({
    SessionStatus.PENDING.value,
    SessionStatus.SCHEDULED.value,
    SessionStatus.IN_PROGRESS.value,
    SessionStatus.RESCHEDULED.value,
})

# Mentor load as shown on the mentor-discovery screens.
LOAD_STATUSES = frozenset({
    SessionStatus.SCHEDULED.value,
    SessionStatus.IN_PROGRESS.value,
})

CAPTURED_PAYMENT_STATUS = "captured"
