"""
Session related Pydantic schemas.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field

from mentor_booking.models import SessionRecord


class SessionResponse(BaseModel):
    id: str
    candidate: str
    mentor: Optional[str] = None
    type: str
    status: str
    bookingStatus: str
    scheduledDate: Optional[datetime] = None
    date: Optional[str] = None
    time: Optional[str] = None
    duration: int
    price: Optional[float] = None
    isPaid: bool = False
    paymentStatus: str
    paymentId: Optional[str] = None
    meetingLink: Optional[str] = None
    meetingPlatform: str
    autoAssigned: bool = False
    notes: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: SessionRecord) -> "SessionResponse":
        return cls(
            id=record.id,
            candidate=record.candidate_id,
            mentor=record.mentor_id,
            type=record.field,
            status=record.status,
            bookingStatus=record.booking_status,
            scheduledDate=record.starts_at,
            date=record.date,
            time=record.time,
            duration=record.duration,
            price=record.price,
            isPaid=record.is_paid,
            paymentStatus=record.payment_status,
            paymentId=record.payment_id,
            meetingLink=record.meeting_link,
            meetingPlatform=record.meeting_platform,
            autoAssigned=record.auto_assigned,
            notes=record.notes,
            createdAt=record.created_at,
            updatedAt=record.updated_at,
        )


class SessionActionResponse(BaseModel):
    success: bool = True
    message: str
    session: SessionResponse


class BookSessionRequest(BaseModel):
    mentorId: str
    type: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    duration: Union[int, float, str] = 60
    notes: Optional[str] = Field(None, max_length=1000)


class ApproveSessionRequest(BaseModel):
    # Defaults to the slot the candidate requested
    date: Optional[str] = None
    time: Optional[str] = None


class FeedbackRequest(BaseModel):
    technical: int
    communication: int
    problemSolving: int
    overall: int
    comments: str


class CompleteSessionRequest(BaseModel):
    feedback: FeedbackRequest


class RescheduleSessionRequest(BaseModel):
    newDate: str
    newTime: str


class UpdateMeetingLinkRequest(BaseModel):
    meetingLink: str


__all__ = [
    "SessionResponse",
    "SessionActionResponse",
    "BookSessionRequest",
    "ApproveSessionRequest",
    "FeedbackRequest",
    "CompleteSessionRequest",
    "RescheduleSessionRequest",
    "UpdateMeetingLinkRequest",
]
