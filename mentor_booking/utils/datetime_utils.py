import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple, Union

from mentor_booking.utils.exceptions import ValidationError

# Indian Standard Time (IST) offset: UTC +5:30
IST = timezone(timedelta(hours=5, minutes=30))

# Same pattern the booking forms validate against: H:MM or HH:MM, 24-hour clock
TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")

DateLike = Union[str, date]


def get_now_ist() -> datetime:
    """Get current datetime in IST"""
    return datetime.now(IST)


def to_ist(dt: datetime) -> datetime:
    """Convert an aware datetime to IST or localize a naive one"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=IST)
    return dt.astimezone(IST)


def parse_datetime_safe(dt_str: str) -> datetime:
    """
    Parse an ISO datetime string that could be in UTC or IST format.
    Handles:
    - UTC format: '2026-01-28T12:24:00Z' or '2026-01-28T12:24:00+00:00'
    - IST format: '2026-01-28T12:24:00+05:30'
    - Naive format: '2026-01-28T12:24:00' (assumed IST)

    Always returns IST-aware datetime.
    """
    if not dt_str:
        raise ValueError("Empty datetime string")

    dt_str = dt_str.strip()
    if dt_str.endswith("Z"):
        dt_str = dt_str[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(dt_str)
    except ValueError as e:
        raise ValueError(f"Failed to parse datetime '{dt_str}': {e}")
    return to_ist(dt)


def parse_date(value: DateLike) -> date:
    """
    Parse a YYYY-MM-DD calendar date (or pass a date through).
    A full ISO datetime is accepted too and yields its IST date.
    """
    if isinstance(value, datetime):
        return to_ist(value).date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise ValidationError("Date is required (YYYY-MM-DD)", "datetime_utils")
    text = value.strip()
    try:
        if "T" in text:
            return parse_datetime_safe(text).date()
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date '{value}'. Use YYYY-MM-DD", "datetime_utils")


def parse_time(value: str) -> Tuple[int, int]:
    """Parse an HH:MM time-of-day into (hour, minute)."""
    match = TIME_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValidationError(f"Invalid time '{value}'. Use HH:MM (24-hour)", "datetime_utils")
    return int(match.group(1)), int(match.group(2))


def format_hhmm(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def normalize_time(value: str) -> str:
    """'9:00' -> '09:00'"""
    return format_hhmm(*parse_time(value))


def combine_date_time(day: DateLike, time_of_day: str) -> datetime:
    """Combine a calendar date and an HH:MM string into an IST-aware datetime."""
    hour, minute = parse_time(time_of_day)
    return datetime.combine(parse_date(day), time(hour, minute), tzinfo=IST)


def day_bounds(day: DateLike) -> Tuple[datetime, datetime]:
    """Return [start_of_day, start_of_next_day) in IST."""
    start = datetime.combine(parse_date(day), time(0, 0), tzinfo=IST)
    return start, start + timedelta(days=1)


def day_of_week(day: DateLike) -> str:
    """Lowercase full weekday name, e.g. 'monday'."""
    return parse_date(day).strftime("%A").lower()


def hhmm_of(dt: datetime) -> str:
    """Time-of-day of a timestamp in IST as HH:MM."""
    local = to_ist(dt)
    return format_hhmm(local.hour, local.minute)
