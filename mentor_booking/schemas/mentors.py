"""
Mentor discovery and pricing related Pydantic schemas.
"""

from typing import List

from pydantic import BaseModel


class AvailableMentor(BaseModel):
    mentorId: str
    mentorName: str
    mentorEmail: str
    currentLoad: int
    specialization: List[str]


class AvailableMentorsResponse(BaseModel):
    success: bool = True
    field: str
    mentors: List[AvailableMentor]


class DaySlots(BaseModel):
    date: str
    timeSlots: List[str]


class MentorScheduleResponse(BaseModel):
    success: bool = True
    mentorId: str
    availability: List[DaySlots]


class MentorLoadResponse(BaseModel):
    success: bool = True
    mentorId: str
    currentLoad: int


class ToggleAvailabilityResponse(BaseModel):
    success: bool = True
    isActive: bool
    message: str


class SessionType(BaseModel):
    id: str
    name: str
    price: int
    description: str


class PricingResponse(BaseModel):
    success: bool = True
    sessionTypes: List[SessionType]


__all__ = [
    "AvailableMentor",
    "AvailableMentorsResponse",
    "DaySlots",
    "MentorScheduleResponse",
    "MentorLoadResponse",
    "ToggleAvailabilityResponse",
    "SessionType",
    "PricingResponse",
]
