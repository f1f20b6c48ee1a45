"""
Service container.

Wires repositories and services together once per process. Routers reach
services through the get_* dependency functions so tests can replace them
with app.dependency_overrides.
"""

from functools import lru_cache
from typing import Optional

from pymongo.database import Database

from mentor_booking.config import Config, get_config
from mentor_booking.db.mongo import get_database
from mentor_booking.repositories import PaymentRepository, SessionRepository, UserRepository
from mentor_booking.services.auth_service import AuthService
from mentor_booking.services.availability_service import AvailabilityService
from mentor_booking.services.booking_service import BookingService
from mentor_booking.services.conflict_service import ConflictDetector
from mentor_booking.services.meeting_service import GoogleMeetService
from mentor_booking.services.mentor_assignment_service import MentorAssignmentService
from mentor_booking.services.notification_service import LoggingNotificationSender
from mentor_booking.services.session_lifecycle_service import SessionLifecycleService
from mentor_booking.services.side_effect_runner import SideEffectRunner


class ServiceContainer:
    def __init__(self, config: Config, db: Optional[Database] = None):
        self.config = config
        self.db = db if db is not None else get_database(config)

        self.user_repository = UserRepository(self.db)
        self.session_repository = SessionRepository(self.db)
        self.payment_repository = PaymentRepository(self.db)

        self.auth_service = AuthService(config.auth)
        self.availability_service = AvailabilityService(config.booking)
        self.conflict_detector = ConflictDetector(self.session_repository)
        self.mentor_assignment_service = MentorAssignmentService(
            self.user_repository,
            self.session_repository,
            self.availability_service,
            self.conflict_detector,
        )
        self.booking_service = BookingService(
            self.mentor_assignment_service,
            self.conflict_detector,
            self.session_repository,
            self.user_repository,
            self.payment_repository,
            config.booking,
        )
        self.lifecycle_service = SessionLifecycleService(
            self.session_repository,
            self.user_repository,
            self.conflict_detector,
            config.booking,
        )
        self.side_effect_runner = SideEffectRunner(
            GoogleMeetService(config.google_meet),
            LoggingNotificationSender(),
            self.session_repository,
            timeout_seconds=config.booking.side_effect_timeout_seconds,
        )


@lru_cache(maxsize=1)
def get_container() -> ServiceContainer:
    return ServiceContainer(get_config())


def get_auth_service() -> AuthService:
    return get_container().auth_service


def get_user_repository() -> UserRepository:
    return get_container().user_repository


def get_mentor_assignment_service() -> MentorAssignmentService:
    return get_container().mentor_assignment_service


def get_booking_service() -> BookingService:
    return get_container().booking_service


def get_lifecycle_service() -> SessionLifecycleService:
    return get_container().lifecycle_service


def get_side_effect_runner() -> SideEffectRunner:
    return get_container().side_effect_runner
