from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from mentor_booking.models.enums import UserRole

DEFAULT_RATING = 4.5
DEFAULT_WORKING_HOURS = (9, 17)


@dataclass(frozen=True)
class WorkingHours:
    start: int = DEFAULT_WORKING_HOURS[0]
    end: int = DEFAULT_WORKING_HOURS[1]

    @property
    def is_valid(self) -> bool:
        return 0 <= self.start <= 23 and 0 <= self.end <= 23 and self.start < self.end


@dataclass
class User:
    """A candidate, mentor or admin as far as booking is concerned."""
    id: str
    name: str = ""
    email: str = ""
    role: str = UserRole.CANDIDATE.value
    specializations: FrozenSet[str] = field(default_factory=frozenset)
    is_active: bool = True
    average_rating: Optional[float] = None
    experience: Optional[int] = None
    working_hours: WorkingHours = field(default_factory=WorkingHours)
    total_sessions: int = 0
    completed_sessions: int = 0

    @property
    def is_mentor(self) -> bool:
        return self.role == UserRole.MENTOR.value

    @property
    def rating(self) -> float:
        return self.average_rating if self.average_rating is not None else DEFAULT_RATING

    @property
    def years_of_experience(self) -> int:
        return self.experience or 0

    def specializes_in(self, field_name: str) -> bool:
        return field_name in self.specializations

    def summary(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "averageRating": self.rating,
            "experience": self.years_of_experience,
            "specializations": sorted(self.specializations),
        }
