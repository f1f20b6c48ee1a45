"""
Smart booking related Pydantic schemas.

Request fields are optional on purpose: missing values are reported by the
booking service as a 400 with the list of missing fields.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field

from mentor_booking.schemas.sessions import SessionResponse


class AvailableSlotsResponse(BaseModel):
    success: bool = True
    field: str
    date: str
    availableSlots: List[str]
    totalSlots: int


class BookSmartRequest(BaseModel):
    field: Optional[str] = None
    # YYYY-MM-DD; the booking page sends it as scheduledDate
    date: Optional[str] = Field(None, validation_alias=AliasChoices("date", "scheduledDate"))
    time: Optional[str] = None  # HH:MM
    duration: Optional[Union[int, float, str]] = None
    price: Optional[Union[float, str]] = None


class BookSmartResponse(BaseModel):
    success: bool = True
    message: str
    session: SessionResponse
    assignedMentor: Optional[Dict[str, Any]] = None


__all__ = [
    "AvailableSlotsResponse",
    "BookSmartRequest",
    "BookSmartResponse",
]
