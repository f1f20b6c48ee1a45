from dataclasses import dataclass


@dataclass(frozen=True)
class MentorAvailability:
    """Working window and slot granularity of a mentor for one day."""
    is_active: bool
    start_time: str
    end_time: str
    slot_duration: int
    max_sessions_per_day: int
