"""
Exceptions

Error taxonomy for mentor assignment and booking.

ValidationError, NotFoundError, ConflictError and PermissionDenied are the
failures a caller is expected to act on. IntegrationFailure is raised by
external collaborators (meeting links, notifications) and is always handled
locally.
"""

from typing import Optional


class BookingError(Exception):
    """Base error carrying the component that raised it."""

    def __init__(self, message: str, component: str = "Booking"):
        super().__init__(message)
        self.message = message
        self.component = component

    def __str__(self) -> str:
        return self.message


class ValidationError(BookingError):
    """Missing or malformed input. Fix the input, do not retry."""


class NotFoundError(BookingError):
    """A referenced mentor, candidate or session does not exist."""


class ConflictError(BookingError):
    """The requested slot is no longer available. Re-list and pick again."""


class PermissionDenied(BookingError):
    """The caller does not own the session or mentor profile."""


class IntegrationFailure(BookingError):
    """Meeting-link provider or notification sender failed."""


class SlotAlreadyClaimed(ConflictError):
    """Raised by the session store when the unique slot key rejects a write."""

    def __init__(self, slot_key: Optional[str], component: str = "SessionRepository"):
        super().__init__(f"Slot already claimed: {slot_key}", component)
        self.slot_key = slot_key
