"""
MongoDB database connection and helpers.
"""

from typing import Any, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from mentor_booking.config import Config
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)

_client: Optional[MongoClient] = None

SESSIONS = "sessions"
USERS = "users"
PAYMENTS = "payments"


def get_database(config: Config) -> Database:
    """Get MongoDB database instance. Uses db name 'interview-booking' unless MONGODB_DB_NAME is set."""
    global _client
    if _client is None:
        _client = MongoClient(
            config.mongo.uri,
            serverSelectionTimeoutMS=5000,
            tz_aware=True,
        )
    db_name = config.mongo.db_name or "interview-booking"
    return _client.get_database(db_name)


def to_object_id(id_val: Any):
    """Convert string id to ObjectId if it's a valid 24-char hex; else return as-is."""
    if id_val is None:
        return None
    if isinstance(id_val, ObjectId):
        return id_val
    s = str(id_val)
    if ObjectId.is_valid(s) and len(s) == 24:
        return ObjectId(s)
    return id_val


def id_variants(id_val: Any) -> list:
    """Both stored shapes of a reference: ObjectId and plain string."""
    if id_val is None:
        return []
    oid = to_object_id(id_val)
    variants = [oid]
    if isinstance(oid, ObjectId):
        variants.append(str(oid))
    return variants


def ensure_indexes(db: Database) -> None:
    """Create the indexes the booking queries and slot uniqueness rely on."""
    sessions = db[SESSIONS]
    sessions.create_index([("candidate", ASCENDING), ("status", ASCENDING)])
    sessions.create_index([("mentor", ASCENDING), ("status", ASCENDING)], sparse=True)
    sessions.create_index([("assignedMentor", ASCENDING), ("status", ASCENDING)], sparse=True)
    sessions.create_index("scheduledDate")
    sessions.create_index([("status", ASCENDING), ("scheduledDate", ASCENDING)])
    sessions.create_index("type")
    # slotKey only exists while a session is active, so this rejects a second
    # active session for the same mentor/date/time regardless of pathway.
    sessions.create_index(
        "slotKey",
        name="uniq_active_slot",
        unique=True,
        partialFilterExpression={"slotKey": {"$exists": True}},
    )

    users = db[USERS]
    users.create_index("email", unique=True)
    users.create_index("role")
    users.create_index([("role", ASCENDING), ("isActive", ASCENDING), ("specializations", ASCENDING)])

    payments = db[PAYMENTS]
    payments.create_index([("userId", ASCENDING), ("status", ASCENDING)])
    payments.create_index([("userId", ASCENDING), ("field", ASCENDING), ("createdAt", DESCENDING)])
    payments.create_index("orderId")

    logger.info(f"[Mongo] Indexes ensured on database {db.name}")
