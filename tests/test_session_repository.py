from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from mentor_booking.models import SessionRecord
from mentor_booking.repositories.session_repository import (
    SessionRepository,
    session_from_document,
    session_to_document,
)
from mentor_booking.utils.datetime_utils import combine_date_time
from mentor_booking.utils.exceptions import BookingError, SlotAlreadyClaimed

MENTOR = ObjectId()
CANDIDATE = ObjectId()


def repository():
    collection = MagicMock()
    db = MagicMock()
    db.__getitem__.return_value = collection
    return SessionRepository(db), collection


def test_direct_booking_document_is_normalized():
    doc = {
        "_id": ObjectId(),
        "candidate": CANDIDATE,
        "mentor": MENTOR,
        "type": "DSA",
        "date": "2025-09-16",
        "time": "9:00",
        "duration": 60,
        "status": "pending",
    }

    record = session_from_document(doc)

    assert record.mentor_id == str(MENTOR)
    assert record.candidate_id == str(CANDIDATE)
    assert (record.date, record.time) == ("2025-09-16", "09:00")
    assert record.auto_assigned is False


def test_auto_assigned_document_uses_ist_timestamp():
    doc = {
        "_id": ObjectId(),
        "candidate": CANDIDATE,
        "assignedMentor": MENTOR,
        "type": "DSA",
        # 04:30 UTC is 10:00 IST
        "scheduledDate": datetime(2025, 9, 16, 4, 30),
        "duration": 60,
        "status": "scheduled",
        "autoAssigned": True,
    }

    record = session_from_document(doc)

    assert record.mentor_id == str(MENTOR)
    assert (record.date, record.time) == ("2025-09-16", "10:00")


def test_scheduled_date_wins_over_stale_date_and_time():
    doc = {
        "_id": ObjectId(),
        "candidate": CANDIDATE,
        "mentor": MENTOR,
        "scheduledDate": datetime(2025, 9, 17, 5, 30, tzinfo=timezone.utc),
        "date": "2025-09-16",
        "time": "10:00",
        "duration": 60,
    }

    record = session_from_document(doc)

    assert (record.date, record.time) == ("2025-09-17", "11:00")


def test_document_for_auto_assigned_session():
    record = SessionRecord(
        candidate_id=str(CANDIDATE),
        mentor_id=str(MENTOR),
        field="DSA",
        duration=60,
        starts_at=combine_date_time("2025-09-16", "10:00"),
        auto_assigned=True,
    )

    doc = session_to_document(record)

    assert doc["assignedMentor"] == MENTOR
    assert "mentor" not in doc
    assert doc["candidate"] == CANDIDATE
    assert (doc["date"], doc["time"]) == ("2025-09-16", "10:00")
    assert doc["slotKey"] == f"{MENTOR}|2025-09-16|10:00"


def test_document_for_direct_booking_uses_mentor_field():
    record = SessionRecord(
        candidate_id=str(CANDIDATE),
        mentor_id=str(MENTOR),
        field="DSA",
        duration=60,
        starts_at=combine_date_time("2025-09-16", "10:00"),
        status="pending",
    )

    doc = session_to_document(record)

    assert doc["mentor"] == MENTOR
    assert "assignedMentor" not in doc


def test_released_slot_has_no_key():
    record = SessionRecord(
        candidate_id=str(CANDIDATE),
        mentor_id=str(MENTOR),
        field="DSA",
        duration=60,
        starts_at=combine_date_time("2025-09-16", "10:00"),
        status="cancelled",
    )
    assert "slotKey" not in session_to_document(record)


def test_duplicate_slot_key_becomes_slot_already_claimed():
    repo, collection = repository()
    collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key error")
    record = SessionRecord(
        candidate_id=str(CANDIDATE),
        mentor_id=str(MENTOR),
        field="DSA",
        duration=60,
        starts_at=combine_date_time("2025-09-16", "10:00"),
    )

    with pytest.raises(SlotAlreadyClaimed) as exc:
        repo.create(record)
    assert exc.value.slot_key == record.slot_key


def test_create_returns_record_with_id():
    repo, collection = repository()
    inserted = ObjectId()
    collection.insert_one.return_value = MagicMock(inserted_id=inserted)
    record = SessionRecord(candidate_id=str(CANDIDATE), field="DSA", duration=60)

    created = repo.create(record)

    assert created.id == str(inserted)
    assert created.created_at is not None


def test_other_database_errors_are_wrapped():
    repo, collection = repository()
    collection.find_one.side_effect = ServerSelectionTimeoutError("no servers")

    with pytest.raises(BookingError) as exc:
        repo.get(str(ObjectId()))
    assert exc.value.component == "SessionRepository"


def test_saving_a_cancelled_session_unsets_slot_key():
    repo, collection = repository()
    record = SessionRecord(
        id=str(ObjectId()),
        candidate_id=str(CANDIDATE),
        mentor_id=str(MENTOR),
        field="DSA",
        duration=60,
        starts_at=combine_date_time("2025-09-16", "10:00"),
        status="cancelled",
    )

    repo.save(record)

    _, update = collection.update_one.call_args[0]
    assert update["$unset"] == {"slotKey": ""}
    assert update["$set"]["status"] == "cancelled"


def test_mentor_day_query_matches_both_pathways():
    repo, collection = repository()
    collection.find.return_value = [
        {
            "_id": ObjectId(),
            "candidate": CANDIDATE,
            "mentor": MENTOR,
            "date": "2025-09-16",
            "time": "10:00",
            "status": "pending",
        },
        {
            # date string left over from before a reschedule to the next day
            "_id": ObjectId(),
            "candidate": CANDIDATE,
            "assignedMentor": MENTOR,
            "scheduledDate": datetime(2025, 9, 17, 4, 30, tzinfo=timezone.utc),
            "date": "2025-09-16",
            "time": "10:00",
            "status": "rescheduled",
        },
    ]

    sessions = repo.find_active_for_mentor_on(str(MENTOR), "2025-09-16")

    query = collection.find.call_args[0][0]
    mentor_clause, day_clause = query["$and"]
    assert {"mentor": {"$in": [MENTOR, str(MENTOR)]}} in mentor_clause["$or"]
    assert {"assignedMentor": {"$in": [MENTOR, str(MENTOR)]}} in mentor_clause["$or"]
    assert {"date": "2025-09-16"} in day_clause["$or"]
    assert query["status"]["$in"] == ["in-progress", "pending", "rescheduled", "scheduled"]
    assert [s.time for s in sessions] == ["10:00"]


def legacy_document():
    # Written before slotKey existed; a double-booked twin may hold the same slot
    return {
        "_id": ObjectId(),
        "candidate": CANDIDATE,
        "mentor": MENTOR,
        "type": "DSA",
        "date": "2025-09-16",
        "time": "10:00",
        "duration": 60,
        "status": "scheduled",
    }


def test_legacy_session_keeps_slot_unclaimed_when_saved_in_place():
    repo, collection = repository()
    collection.find_one.return_value = legacy_document()
    record = repo.get(str(ObjectId()))

    saved = repo.save(replace(record, status="in-progress", meeting_link="https://meet.google.com/abc-defg-hij"))

    _, update = collection.update_one.call_args[0]
    assert "slotKey" not in update["$set"]
    assert "$unset" not in update
    assert update["$set"]["status"] == "in-progress"
    assert saved.legacy_slot_key == saved.slot_key


def test_moving_a_legacy_session_claims_the_new_slot():
    repo, collection = repository()
    collection.find_one.return_value = legacy_document()
    record = repo.get(str(ObjectId()))

    saved = repo.save(replace(record, starts_at=combine_date_time("2025-09-16", "12:00"), status="rescheduled"))

    _, update = collection.update_one.call_args[0]
    assert update["$set"]["slotKey"] == f"{MENTOR}|2025-09-16|12:00"
    assert saved.legacy_slot_key is None


def test_keyed_session_rewrites_its_slot_key():
    repo, collection = repository()
    doc = legacy_document()
    doc["slotKey"] = f"{MENTOR}|2025-09-16|10:00"
    collection.find_one.return_value = doc
    record = repo.get(str(ObjectId()))

    repo.save(replace(record, status="in-progress"))

    _, update = collection.update_one.call_args[0]
    assert update["$set"]["slotKey"] == doc["slotKey"]
