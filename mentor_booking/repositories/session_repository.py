"""
Session Repository

MongoDB persistence for interview sessions.

Stored documents carry the fields of both booking pathways: the direct
pathway writes `mentor` and `date` + `time`, the auto-assignment pathway
writes `assignedMentor` and `scheduledDate`. This module is the only place
that knows about that; everything above it works with SessionRecord.
"""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from mentor_booking.db.mongo import SESSIONS, id_variants, to_object_id
from mentor_booking.models import ACTIVE_STATUSES, Feedback, SessionRecord
from mentor_booking.utils.datetime_utils import (
    DateLike,
    combine_date_time,
    day_bounds,
    get_now_ist,
    parse_date,
    parse_datetime_safe,
    to_ist,
)
from mentor_booking.utils.exceptions import BookingError, SlotAlreadyClaimed, ValidationError
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)


def _from_mongo_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        # Mongo hands back naive UTC unless the client is tz_aware
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return to_ist(value)
    if isinstance(value, str) and value:
        return parse_datetime_safe(value)
    return None


def _ref(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def _feedback_from_document(data: Optional[Dict[str, Any]]) -> Optional[Feedback]:
    if not data or data.get("overall") is None:
        return None
    return Feedback(
        technical=data.get("technical"),
        communication=data.get("communication"),
        problem_solving=data.get("problemSolving"),
        overall=data.get("overall"),
        comments=data.get("comments", ""),
        mentor_id=_ref(data.get("mentor")),
        created_at=_from_mongo_datetime(data.get("createdAt")),
    )


def session_from_document(doc: Dict[str, Any]) -> SessionRecord:
    """Normalize a stored session document into a SessionRecord."""
    mentor_ref = doc.get("assignedMentor") or doc.get("mentor")

    # scheduledDate wins: reschedules only ever rewrote the timestamp
    starts_at = None
    try:
        starts_at = _from_mongo_datetime(doc.get("scheduledDate"))
    except ValueError:
        logger.warning(f"[SessionRepository] Unparseable scheduledDate on session {doc.get('_id')}")
    if starts_at is None and doc.get("date") and doc.get("time"):
        try:
            starts_at = combine_date_time(doc["date"], doc["time"])
        except ValidationError:
            logger.warning(
                f"[SessionRepository] Unparseable date/time on session {doc.get('_id')}: "
                f"{doc.get('date')} {doc.get('time')}"
            )

    record = SessionRecord(
        id=_ref(doc.get("_id")),
        candidate_id=_ref(doc.get("candidate")),
        mentor_id=_ref(mentor_ref),
        field=doc.get("type"),
        duration=doc.get("duration"),
        starts_at=starts_at,
        status=doc.get("status", "scheduled"),
        booking_status=doc.get("bookingStatus", "pending_assignment"),
        auto_assigned=bool(doc.get("autoAssigned", False)),
        price=doc.get("price"),
        is_paid=bool(doc.get("isPaid", False)),
        payment_status=doc.get("paymentStatus", "pending"),
        payment_id=doc.get("paymentId"),
        order_id=doc.get("orderId"),
        meeting_link=doc.get("meetingLink"),
        google_event_id=doc.get("googleEventId"),
        meeting_platform=doc.get("meetingPlatform", "google-meet"),
        meeting_id=doc.get("meetingId"),
        notes=doc.get("notes"),
        feedback=_feedback_from_document(doc.get("feedback")),
        created_at=_from_mongo_datetime(doc.get("createdAt")),
        updated_at=_from_mongo_datetime(doc.get("updatedAt")),
    )
    if record.slot_key and not doc.get("slotKey"):
        record = replace(record, legacy_slot_key=record.slot_key)
    return record


def session_to_document(record: SessionRecord) -> Dict[str, Any]:
    """
    Build the stored shape of a session. None values are left out.

    Auto-assigned sessions reference their mentor through `assignedMentor`,
    direct bookings through `mentor`. Both timestamp representations are
    written so readers of either pathway see the same slot.
    """
    doc: Dict[str, Any] = {
        "candidate": to_object_id(record.candidate_id),
        "type": record.field,
        "status": record.status,
        "bookingStatus": record.booking_status,
        "duration": record.duration,
        "autoAssigned": record.auto_assigned,
        "price": record.price,
        "isPaid": record.is_paid,
        "paymentStatus": record.payment_status,
        "paymentId": record.payment_id,
        "orderId": record.order_id,
        "meetingLink": record.meeting_link,
        "googleEventId": record.google_event_id,
        "meetingPlatform": record.meeting_platform,
        "meetingId": record.meeting_id,
        "notes": record.notes,
        "feedback": record.feedback.to_dict() if record.feedback else None,
    }
    if record.mentor_id:
        mentor_field = "assignedMentor" if record.auto_assigned else "mentor"
        doc[mentor_field] = to_object_id(record.mentor_id)
    if record.starts_at:
        doc["scheduledDate"] = record.starts_at
        doc["date"] = record.date
        doc["time"] = record.time
    doc["slotKey"] = record.slot_key
    return {k: v for k, v in doc.items() if v is not None}


class SessionRepository:
    """Session store backed by the `sessions` collection"""

    def __init__(self, db: Database):
        self.db = db
        self.col = db[SESSIONS]

    @staticmethod
    def _mentor_clause(mentor_id: str) -> Dict[str, Any]:
        refs = id_variants(mentor_id)
        return {"$or": [{"mentor": {"$in": refs}}, {"assignedMentor": {"$in": refs}}]}

    def create(self, record: SessionRecord) -> SessionRecord:
        now = get_now_ist()
        doc = session_to_document(record)
        doc["createdAt"] = now
        doc["updatedAt"] = now
        try:
            result = self.col.insert_one(doc)
        except DuplicateKeyError:
            logger.warning(f"[SessionRepository] Slot already claimed: {record.slot_key}")
            raise SlotAlreadyClaimed(record.slot_key)
        except PyMongoError as e:
            logger.error(f"Error creating session: {e}")
            raise BookingError(f"Failed to create session: {str(e)}", "SessionRepository")

        logger.info(f"[SessionRepository] Session created: id={result.inserted_id} slot={record.slot_key}")
        return replace(record, id=str(result.inserted_id), created_at=now, updated_at=now)

    def get(self, session_id: str) -> Optional[SessionRecord]:
        try:
            doc = self.col.find_one({"_id": to_object_id(session_id)})
        except PyMongoError as e:
            logger.error(f"Error fetching session {session_id}: {e}")
            raise BookingError(f"Failed to fetch session: {str(e)}", "SessionRepository")
        return session_from_document(doc) if doc else None

    def save(self, record: SessionRecord) -> SessionRecord:
        """
        Write back a modified record. Releasing the slot removes its slotKey;
        a legacy document keeps having none until its slot moves.
        """
        if not record.id:
            raise BookingError("Cannot save a session without an id", "SessionRepository")

        now = get_now_ist()
        fields = session_to_document(record)
        fields["updatedAt"] = now
        update: Dict[str, Any] = {"$set": fields}
        legacy_slot_key = None
        if record.slot_key is None:
            update["$unset"] = {"slotKey": ""}
        elif record.slot_key == record.legacy_slot_key:
            del fields["slotKey"]
            legacy_slot_key = record.legacy_slot_key

        try:
            self.col.update_one({"_id": to_object_id(record.id)}, update)
        except DuplicateKeyError:
            logger.warning(f"[SessionRepository] Slot already claimed: {record.slot_key}")
            raise SlotAlreadyClaimed(record.slot_key)
        except PyMongoError as e:
            logger.error(f"Error updating session {record.id}: {e}")
            raise BookingError(f"Failed to update session: {str(e)}", "SessionRepository")
        return replace(record, updated_at=now, legacy_slot_key=legacy_slot_key)

    def set_meeting_details(
        self,
        session_id: str,
        meeting_link: str,
        event_id: Optional[str] = None,
    ) -> Optional[SessionRecord]:
        updates: Dict[str, Any] = {"meetingLink": meeting_link, "updatedAt": get_now_ist()}
        if event_id:
            updates["googleEventId"] = event_id
        try:
            doc = self.col.find_one_and_update(
                {"_id": to_object_id(session_id)},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Error saving meeting details for session {session_id}: {e}")
            raise BookingError(f"Failed to save meeting details: {str(e)}", "SessionRepository")
        return session_from_document(doc) if doc else None

    def find_active_for_mentor_on(
        self,
        mentor_id: str,
        day: DateLike,
        statuses: Iterable[str] = ACTIVE_STATUSES,
    ) -> List[SessionRecord]:
        """
        Sessions of a mentor (either pathway) on a calendar day that still
        hold their slot.
        """
        target = parse_date(day)
        start, end = day_bounds(target)
        query = {
            "$and": [
                self._mentor_clause(mentor_id),
                {"$or": [
                    {"scheduledDate": {"$gte": start, "$lt": end}},
                    {"date": target.isoformat()},
                ]},
            ],
            "status": {"$in": sorted(statuses)},
        }
        try:
            docs = list(self.col.find(query))
        except PyMongoError as e:
            logger.error(f"Error fetching sessions for mentor {mentor_id} on {target}: {e}")
            raise BookingError(f"Failed to fetch mentor sessions: {str(e)}", "SessionRepository")

        records = [session_from_document(doc) for doc in docs]
        # A stale `date` string may disagree with a rescheduled timestamp
        return [r for r in records if r.starts_at and to_ist(r.starts_at).date() == target]

    def count_for_mentor(self, mentor_id: str, statuses: Iterable[str]) -> int:
        query = dict(self._mentor_clause(mentor_id))
        query["status"] = {"$in": sorted(statuses)}
        try:
            return self.col.count_documents(query)
        except PyMongoError as e:
            logger.error(f"Error counting sessions for mentor {mentor_id}: {e}")
            raise BookingError(f"Failed to count mentor sessions: {str(e)}", "SessionRepository")
