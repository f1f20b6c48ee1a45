"""
Conflict Detector

Answers "does this mentor already have a session in this slot?" across both
booking pathways.
"""

from typing import Iterable, List, Optional, Set

from mentor_booking.models import SessionRecord
from mentor_booking.repositories import SessionRepository
from mentor_booking.utils.datetime_utils import DateLike, hhmm_of, parse_time


def slot_is_occupied(
    sessions: Iterable[SessionRecord],
    time_of_day: str,
    exclude_session_id: Optional[str] = None,
) -> bool:
    hour, minute = parse_time(time_of_day)
    return any(
        s.occupies(hour, minute)
        for s in sessions
        if exclude_session_id is None or s.id != exclude_session_id
    )


class ConflictDetector:
    def __init__(self, session_repository: SessionRepository):
        self.session_repository = session_repository

    def sessions_on(self, mentor_id: str, day: DateLike) -> List[SessionRecord]:
        """Active sessions of a mentor on a day; completed/cancelled never appear."""
        return self.session_repository.find_active_for_mentor_on(mentor_id, day)

    def is_slot_taken(
        self,
        mentor_id: str,
        day: DateLike,
        time_of_day: str,
        exclude_session_id: Optional[str] = None,
    ) -> bool:
        return slot_is_occupied(self.sessions_on(mentor_id, day), time_of_day, exclude_session_id)

    def taken_slots(self, mentor_id: str, day: DateLike) -> Set[str]:
        return {hhmm_of(s.starts_at) for s in self.sessions_on(mentor_id, day)}
