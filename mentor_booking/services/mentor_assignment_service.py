"""
Mentor Assignment Service

Finds mentors for a field, ranks them for a concrete slot and lists the
slots at least one qualifying mentor can still take.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Set

from mentor_booking.models import LOAD_STATUSES, User
from mentor_booking.repositories import SessionRepository, UserRepository
from mentor_booking.services.availability_service import AvailabilityService
from mentor_booking.services.conflict_service import ConflictDetector, slot_is_occupied
from mentor_booking.utils.datetime_utils import (
    DateLike,
    day_of_week,
    get_now_ist,
    normalize_time,
    parse_date,
)
from mentor_booking.utils.exceptions import NotFoundError, PermissionDenied, ValidationError
from mentor_booking.utils.logger import get_logger
from mentor_booking.utils.slots import generate_slots, is_within_window

logger = get_logger(__name__)


@dataclass
class MentorCandidate:
    """A mentor that is free for the requested slot, with its ranking inputs."""
    mentor: User
    current_load: int

    def ranking_key(self):
        # rating desc, load asc, experience desc
        return (-self.mentor.rating, self.current_load, -self.mentor.years_of_experience)


class MentorAssignmentService:
    """Service for selecting mentors and computing their free slots"""

    def __init__(
        self,
        user_repository: UserRepository,
        session_repository: SessionRepository,
        availability_service: AvailabilityService,
        conflict_detector: ConflictDetector,
    ):
        self.user_repository = user_repository
        self.session_repository = session_repository
        self.availability_service = availability_service
        self.conflict_detector = conflict_detector

    def _mentor_pool(self, field: str) -> List[User]:
        if not field:
            raise ValidationError("Field is required", "MentorAssignmentService")
        mentors = [
            m for m in self.user_repository.find_mentors(field=field, active_only=True)
            if m.is_mentor and m.is_active and m.specializes_in(field)
        ]
        if not mentors:
            logger.info(f"[MentorAssignment] No active mentors specialize in {field}")
            raise NotFoundError("No mentors available for this field", "MentorAssignmentService")
        return mentors

    def rank_mentors(self, field: str, day: DateLike, time_of_day: str) -> List[MentorCandidate]:
        """
        Mentors free at `day` `time_of_day`, best first.

        Raises:
            NotFoundError: no active mentor specializes in `field`
        """
        mentors = self._mentor_pool(field)
        target = parse_date(day)
        slot = normalize_time(time_of_day)
        weekday = day_of_week(target)

        candidates: List[MentorCandidate] = []
        for mentor in mentors:
            availability = self.availability_service.get_availability(mentor, weekday)
            if not availability.is_active:
                continue
            if not is_within_window(slot, availability.start_time, availability.end_time):
                continue

            # One lookup serves both the conflict check and the load count
            sessions = self.conflict_detector.sessions_on(mentor.id, target)
            if slot_is_occupied(sessions, slot):
                continue

            candidates.append(MentorCandidate(mentor=mentor, current_load=len(sessions)))

        candidates.sort(key=MentorCandidate.ranking_key)
        return candidates

    def find_best_mentor(self, field: str, day: DateLike, time_of_day: str) -> Optional[User]:
        """Best mentor for the slot, or None when every qualifying mentor is busy."""
        candidates = self.rank_mentors(field, day, time_of_day)
        if not candidates:
            logger.info(f"[MentorAssignment] No free mentor for {field} on {day} at {time_of_day}")
            return None
        best = candidates[0]
        logger.info(
            f"[MentorAssignment] Selected mentor {best.mentor.id} for {field} on {day} at {time_of_day} "
            f"(rating={best.mentor.rating}, load={best.current_load}, of {len(candidates)} free)"
        )
        return best.mentor

    def list_available_slots(self, field: str, day: DateLike) -> List[str]:
        """
        Sorted, de-duplicated HH:MM slots on `day` that at least one active
        mentor of `field` can still take. Which mentor gets the slot is
        decided at booking time.
        """
        mentors = self._mentor_pool(field)
        target = parse_date(day)
        weekday = day_of_week(target)

        available: Set[str] = set()
        for mentor in mentors:
            availability = self.availability_service.get_availability(mentor, weekday)
            if not availability.is_active:
                continue
            taken = self.conflict_detector.taken_slots(mentor.id, target)
            for slot in generate_slots(availability.start_time, availability.end_time, availability.slot_duration):
                if slot not in taken:
                    available.add(slot)

        return sorted(available)

    def get_available_mentors(self, field: str) -> List[Dict[str, Any]]:
        """Mentors for a field with their current load; any active mentor when none specialize."""
        mentors = self.user_repository.find_mentors(field=field, active_only=True)
        if not mentors:
            mentors = self.user_repository.find_mentors(active_only=True)

        return [
            {
                "mentorId": mentor.id,
                "mentorName": mentor.name,
                "mentorEmail": mentor.email,
                "currentLoad": self.get_mentor_load(mentor.id),
                "specialization": sorted(mentor.specializations) or [field],
            }
            for mentor in mentors
        ]

    def get_mentor_load(self, mentor_id: str) -> int:
        """Scheduled and in-progress sessions of a mentor across all dates."""
        return self.session_repository.count_for_mentor(mentor_id, LOAD_STATUSES)

    def get_mentor_schedule(
        self,
        mentor_id: str,
        days: int = 30,
        start_day: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """Free slots per day for the next `days` days, omitting fully booked days."""
        mentor = self.user_repository.find_by_id(mentor_id)
        if not mentor or not mentor.is_mentor:
            raise NotFoundError("Mentor not found", "MentorAssignmentService")

        first_day = start_day or get_now_ist().date()
        schedule = []
        for offset in range(days):
            current = first_day + timedelta(days=offset)
            availability = self.availability_service.get_availability(mentor, day_of_week(current))
            if not availability.is_active:
                continue
            taken = self.conflict_detector.taken_slots(mentor.id, current)
            free = [
                slot
                for slot in generate_slots(availability.start_time, availability.end_time, availability.slot_duration)
                if slot not in taken
            ]
            if free:
                schedule.append({"date": current.isoformat(), "timeSlots": free})
        return schedule

    def toggle_mentor_active(self, mentor_id: str, requester_id: str) -> bool:
        """Flip whether a mentor accepts new sessions. Mentors may only toggle themselves."""
        if mentor_id != requester_id:
            raise PermissionDenied("You can only update your own availability", "MentorAssignmentService")

        mentor = self.user_repository.find_by_id(mentor_id)
        if not mentor or not mentor.is_mentor:
            raise NotFoundError("Mentor not found", "MentorAssignmentService")

        is_active = not mentor.is_active
        self.user_repository.set_active(mentor_id, is_active)
        logger.info(f"[MentorAssignment] Mentor {mentor_id} availability {'enabled' if is_active else 'disabled'}")
        return is_active
