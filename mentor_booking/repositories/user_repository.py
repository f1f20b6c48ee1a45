"""
User Repository

Candidates and mentors from the `users` collection.
"""

from typing import Any, Dict, List, Optional

from pymongo.database import Database
from pymongo.errors import PyMongoError

from mentor_booking.db.mongo import USERS, to_object_id
from mentor_booking.models import User, UserRole, WorkingHours
from mentor_booking.utils.exceptions import BookingError
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)

# Never load credentials into the booking layer
_PROJECTION = {"password": 0, "googleCalendarCredentials": 0}


def user_from_document(doc: Dict[str, Any]) -> User:
    hours = doc.get("workingHours") or {}
    return User(
        id=str(doc["_id"]),
        name=doc.get("name", ""),
        email=doc.get("email", ""),
        role=doc.get("role", UserRole.CANDIDATE.value),
        specializations=frozenset(doc.get("specializations") or []),
        is_active=doc.get("isActive", True) is not False,
        average_rating=doc.get("averageRating"),
        experience=doc.get("experience"),
        working_hours=WorkingHours(
            start=hours.get("start", 9),
            end=hours.get("end", 17),
        ),
        total_sessions=doc.get("totalSessions", 0),
        completed_sessions=doc.get("completedSessions", 0),
    )


class UserRepository:
    """Mentor/User store"""

    def __init__(self, db: Database):
        self.db = db
        self.col = db[USERS]

    def find_mentors(self, field: Optional[str] = None, active_only: bool = True) -> List[User]:
        """Mentors, optionally restricted to active ones specializing in `field`."""
        query: Dict[str, Any] = {"role": UserRole.MENTOR.value}
        if active_only:
            # isActive defaults to true on the user schema
            query["isActive"] = {"$ne": False}
        if field:
            query["specializations"] = {"$in": [field]}
        try:
            return [user_from_document(doc) for doc in self.col.find(query, _PROJECTION)]
        except PyMongoError as e:
            logger.error(f"Error fetching mentors for field {field}: {e}")
            raise BookingError(f"Failed to fetch mentors: {str(e)}", "UserRepository")

    def find_by_id(self, user_id: str) -> Optional[User]:
        if not user_id:
            return None
        try:
            doc = self.col.find_one({"_id": to_object_id(user_id)}, _PROJECTION)
        except PyMongoError as e:
            logger.error(f"Error fetching user {user_id}: {e}")
            raise BookingError(f"Failed to fetch user: {str(e)}", "UserRepository")
        return user_from_document(doc) if doc else None

    def set_active(self, user_id: str, is_active: bool) -> bool:
        try:
            r = self.col.update_one({"_id": to_object_id(user_id)}, {"$set": {"isActive": is_active}})
            return r.matched_count > 0
        except PyMongoError as e:
            logger.error(f"Error updating isActive for {user_id}: {e}")
            raise BookingError(f"Failed to update mentor availability: {str(e)}", "UserRepository")

    def increment_session_counters(self, user_id: str, completed: bool = False) -> None:
        inc = {"totalSessions": 1}
        if completed:
            inc["completedSessions"] = 1
        try:
            self.col.update_one({"_id": to_object_id(user_id)}, {"$inc": inc})
        except PyMongoError as e:
            # Statistics only; the session transition already happened
            logger.error(f"Error updating session counters for {user_id}: {e}")
