from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Payment:
    """A gateway payment as recorded by the payments flow."""
    order_id: str
    status: str
    user_id: Optional[str] = None
    field: Optional[str] = None
    payment_id: Optional[str] = None
    amount: Optional[float] = None
    created_at: Optional[datetime] = None
