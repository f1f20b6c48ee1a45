"""
Payment Repository

Read-only view of gateway payments, used to stamp payment state on new sessions.
"""

from typing import Any, Dict, Optional

from pymongo import DESCENDING
from pymongo.database import Database
from pymongo.errors import PyMongoError

from mentor_booking.db.mongo import PAYMENTS
from mentor_booking.models import Payment
from mentor_booking.models.enums import CAPTURED_PAYMENT_STATUS
from mentor_booking.utils.exceptions import BookingError
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)


def payment_from_document(doc: Dict[str, Any]) -> Payment:
    return Payment(
        order_id=doc.get("orderId"),
        payment_id=doc.get("paymentId"),
        status=doc.get("status"),
        user_id=doc.get("userId"),
        field=doc.get("field"),
        amount=doc.get("amount"),
        created_at=doc.get("createdAt"),
    )


class PaymentRepository:
    def __init__(self, db: Database):
        self.db = db
        self.col = db[PAYMENTS]

    def find_latest_captured_payment(self, candidate_id: str, field: str) -> Optional[Payment]:
        """Most recent captured payment of a candidate for a field, if any."""
        try:
            doc = self.col.find_one(
                {"userId": str(candidate_id), "field": field, "status": CAPTURED_PAYMENT_STATUS},
                sort=[("createdAt", DESCENDING)],
            )
        except PyMongoError as e:
            logger.error(f"Error fetching captured payment for {candidate_id}/{field}: {e}")
            raise BookingError(f"Failed to fetch payment: {str(e)}", "PaymentRepository")
        return payment_from_document(doc) if doc else None
