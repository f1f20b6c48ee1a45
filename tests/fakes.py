"""
In-memory stand-ins for the Mongo repositories and external collaborators.

FakeSessionRepository enforces the same active-slot uniqueness as the
`uniq_active_slot` index so race handling can be exercised without MongoDB.
"""

import itertools
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional

from mentor_booking.config import BookingConfig
from mentor_booking.models import (
    ACTIVE_STATUSES,
    Payment,
    SessionRecord,
    SessionStatus,
    User,
    UserRole,
    WorkingHours,
)
from mentor_booking.services.availability_service import AvailabilityService
from mentor_booking.services.booking_service import BookingService
from mentor_booking.services.conflict_service import ConflictDetector
from mentor_booking.services.meeting_service import MeetingDetails
from mentor_booking.services.mentor_assignment_service import MentorAssignmentService
from mentor_booking.services.session_lifecycle_service import SessionLifecycleService
from mentor_booking.utils.datetime_utils import combine_date_time, get_now_ist, parse_date, to_ist
from mentor_booking.utils.exceptions import IntegrationFailure, SlotAlreadyClaimed


def make_mentor(
    mentor_id: str,
    rating: Optional[float] = 4.5,
    experience: Optional[int] = 0,
    specializations=("DSA",),
    is_active: bool = True,
    working_hours: WorkingHours = WorkingHours(),
) -> User:
    return User(
        id=mentor_id,
        name=f"Mentor {mentor_id}",
        email=f"{mentor_id}@mentors.example.com",
        role=UserRole.MENTOR.value,
        specializations=frozenset(specializations),
        is_active=is_active,
        average_rating=rating,
        experience=experience,
        working_hours=working_hours,
    )


def make_candidate(candidate_id: str = "c1") -> User:
    return User(
        id=candidate_id,
        name=f"Candidate {candidate_id}",
        email=f"{candidate_id}@candidates.example.com",
        role=UserRole.CANDIDATE.value,
    )


def make_session(
    mentor_id: str,
    day: str,
    time_of_day: str,
    candidate_id: str = "c-other",
    status: str = SessionStatus.SCHEDULED.value,
    field: str = "DSA",
    auto_assigned: bool = True,
    meeting_link: Optional[str] = None,
) -> SessionRecord:
    return SessionRecord(
        candidate_id=candidate_id,
        mentor_id=mentor_id,
        field=field,
        duration=60,
        starts_at=combine_date_time(day, time_of_day),
        status=status,
        auto_assigned=auto_assigned,
        meeting_link=meeting_link,
    )


class FakeUserRepository:
    def __init__(self, users: List[User]):
        self.users: Dict[str, User] = {u.id: u for u in users}
        self.counter_updates: List[tuple] = []

    def find_mentors(self, field: Optional[str] = None, active_only: bool = True) -> List[User]:
        return [
            u for u in self.users.values()
            if u.role == UserRole.MENTOR.value
            and (not active_only or u.is_active)
            and (not field or field in u.specializations)
        ]

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def set_active(self, user_id: str, is_active: bool) -> bool:
        if user_id not in self.users:
            return False
        self.users[user_id] = replace(self.users[user_id], is_active=is_active)
        return True

    def increment_session_counters(self, user_id: str, completed: bool = False) -> None:
        self.counter_updates.append((user_id, completed))


class FakeSessionRepository:
    def __init__(self):
        self.sessions: Dict[str, SessionRecord] = {}
        self._ids = itertools.count(1)
        self.create_calls = 0
        # Called with the record right before an insert; lets tests inject a competing booking
        self.before_create: Optional[Callable[[SessionRecord], None]] = None

    def _claimed_by_other(self, record: SessionRecord) -> bool:
        key = record.slot_key
        if key is None or key == record.legacy_slot_key:
            return False
        return any(
            s.slot_key == key and s.slot_key != s.legacy_slot_key and s.id != record.id
            for s in self.sessions.values()
        )

    def add(self, record: SessionRecord) -> SessionRecord:
        """Store a pre-existing session as-is."""
        stored = replace(record, id=record.id or f"s{next(self._ids)}")
        self.sessions[stored.id] = stored
        return stored

    def create(self, record: SessionRecord) -> SessionRecord:
        self.create_calls += 1
        if self.before_create:
            self.before_create(record)
        if self._claimed_by_other(record):
            raise SlotAlreadyClaimed(record.slot_key)
        now = get_now_ist()
        created = replace(record, id=f"s{next(self._ids)}", created_at=now, updated_at=now)
        self.sessions[created.id] = created
        return created

    def get(self, session_id: str) -> Optional[SessionRecord]:
        return self.sessions.get(session_id)

    def save(self, record: SessionRecord) -> SessionRecord:
        if self._claimed_by_other(record):
            raise SlotAlreadyClaimed(record.slot_key)
        unmoved = record.slot_key is not None and record.slot_key == record.legacy_slot_key
        saved = replace(record, updated_at=get_now_ist(), legacy_slot_key=record.legacy_slot_key if unmoved else None)
        self.sessions[saved.id] = saved
        return saved

    def set_meeting_details(self, session_id: str, meeting_link: str, event_id: Optional[str] = None):
        session = self.sessions.get(session_id)
        if not session:
            return None
        updated = replace(session, meeting_link=meeting_link, google_event_id=event_id or session.google_event_id)
        self.sessions[session_id] = updated
        return updated

    def find_active_for_mentor_on(self, mentor_id: str, day, statuses=ACTIVE_STATUSES) -> List[SessionRecord]:
        target = parse_date(day)
        return [
            s for s in self.sessions.values()
            if s.mentor_id == mentor_id
            and s.status in statuses
            and s.starts_at
            and to_ist(s.starts_at).date() == target
        ]

    def count_for_mentor(self, mentor_id: str, statuses) -> int:
        return sum(1 for s in self.sessions.values() if s.mentor_id == mentor_id and s.status in statuses)


class FakePaymentRepository:
    def __init__(self, payments: Optional[List[Payment]] = None):
        self.payments = list(payments or [])
        self.lookups = 0

    def find_latest_captured_payment(self, candidate_id: str, field: str) -> Optional[Payment]:
        self.lookups += 1
        matches = [
            p for p in self.payments
            if p.user_id == candidate_id and p.field == field and p.status == "captured"
        ]
        return matches[-1] if matches else None


class FakeMeetingProvider:
    def __init__(self, link: str = "https://meet.google.com/abc-defg-hij", fail: bool = False, delay: float = 0.0):
        self.link = link
        self.fail = fail
        self.delay = delay
        self.intents = []

    def create_meeting(self, intent):
        self.intents.append(intent)
        if self.delay:
            time.sleep(self.delay)
        if self.fail:
            raise IntegrationFailure("calendar unavailable", "GoogleMeet")
        return MeetingDetails(meeting_link=self.link, event_id="evt-1")


class RecordingNotificationSender:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.events = []

    def notify(self, user_id, event_type, payload):
        if self.fail:
            raise RuntimeError("notification backend down")
        self.events.append((user_id, event_type, payload))


@dataclass
class Services:
    users: FakeUserRepository
    sessions: FakeSessionRepository
    payments: FakePaymentRepository
    config: BookingConfig
    availability: AvailabilityService
    conflicts: ConflictDetector
    assignment: MentorAssignmentService
    booking: BookingService
    lifecycle: SessionLifecycleService


def build_services(
    users: List[User],
    payments: Optional[List[Payment]] = None,
    config: Optional[BookingConfig] = None,
) -> Services:
    config = config or BookingConfig()
    user_repo = FakeUserRepository(users)
    session_repo = FakeSessionRepository()
    payment_repo = FakePaymentRepository(payments)
    availability = AvailabilityService(config)
    conflicts = ConflictDetector(session_repo)
    assignment = MentorAssignmentService(user_repo, session_repo, availability, conflicts)
    booking = BookingService(assignment, conflicts, session_repo, user_repo, payment_repo, config)
    lifecycle = SessionLifecycleService(session_repo, user_repo, conflicts, config)
    return Services(
        users=user_repo,
        sessions=session_repo,
        payments=payment_repo,
        config=config,
        availability=availability,
        conflicts=conflicts,
        assignment=assignment,
        booking=booking,
        lifecycle=lifecycle,
    )
