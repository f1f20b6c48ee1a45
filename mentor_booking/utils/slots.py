"""
Slot generation helpers.

Pure functions over HH:MM strings; no booking data involved.
"""

from typing import Iterator

from mentor_booking.utils.datetime_utils import format_hhmm, parse_time
from mentor_booking.utils.exceptions import ValidationError


def to_minutes(time_of_day: str) -> int:
    hour, minute = parse_time(time_of_day)
    return hour * 60 + minute


def generate_slots(start_time: str, end_time: str, duration_minutes: int) -> Iterator[str]:
    """
    Yield slot start times from start_time (inclusive) up to end_time (exclusive).

    A slot is emitted only if it fits entirely before end_time; when the
    duration does not evenly divide the window the remainder is dropped, so
    generate_slots("09:00", "09:45", 60) yields nothing.
    """
    if duration_minutes is None or duration_minutes <= 0:
        raise ValidationError("Slot duration must be a positive number of minutes", "slots")

    current = to_minutes(start_time)
    end = to_minutes(end_time)
    while current + duration_minutes <= end:
        yield format_hhmm(current // 60, current % 60)
        current += duration_minutes


def is_within_window(time_of_day: str, start_time: str, end_time: str) -> bool:
    """start_time <= time_of_day < end_time"""
    minutes = to_minutes(time_of_day)
    return to_minutes(start_time) <= minutes < to_minutes(end_time)
