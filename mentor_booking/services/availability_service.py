"""
Availability Service

Derives a mentor's working window and slot granularity for a day.
"""

from mentor_booking.config import BookingConfig
from mentor_booking.models import MentorAvailability, User
from mentor_booking.utils.datetime_utils import format_hhmm
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)


class AvailabilityService:
    """Pure function of configuration and the mentor profile; never fails."""

    def __init__(self, config: BookingConfig):
        self.config = config

    def _default(self) -> MentorAvailability:
        return MentorAvailability(
            is_active=True,
            start_time=self.config.default_start_time,
            end_time=self.config.default_end_time,
            slot_duration=self.config.default_slot_duration,
            max_sessions_per_day=self.config.max_sessions_per_day,
        )

    def get_availability(self, mentor: User, day_of_week: str) -> MentorAvailability:
        """
        Availability of `mentor` on `day_of_week` (lowercase weekday name).

        In "constant" mode every mentor gets the default window every day.
        In "working_hours" mode the mentor's stored workingHours are used,
        falling back to the default window when they are not a valid
        start < end pair.
        """
        if self.config.availability_mode != "working_hours":
            return self._default()

        hours = mentor.working_hours
        if not hours.is_valid:
            logger.warning(
                f"[AvailabilityService] Mentor {mentor.id} has invalid workingHours "
                f"{hours.start}-{hours.end}; using default window"
            )
            return self._default()

        return MentorAvailability(
            is_active=True,
            start_time=format_hhmm(hours.start, 0),
            end_time=format_hhmm(hours.end, 0),
            slot_duration=self.config.default_slot_duration,
            max_sessions_per_day=self.config.max_sessions_per_day,
        )
