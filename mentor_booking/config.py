"""
Configuration Management

Centralized configuration management using environment variables
with proper validation and type safety.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Load environment variables from .env in the project root (resolve to absolute path)
_project_root = Path(__file__).resolve().parent.parent
_env_path = _project_root / ".env"
if _env_path.exists():
    load_dotenv(dotenv_path=str(_env_path))
else:
    # Also load from current working directory so "python backend_server.py" picks up .env
    load_dotenv()


AVAILABILITY_MODES = ("constant", "working_hours")


@dataclass
class MongoConfig:
    """MongoDB configuration"""
    uri: str
    db_name: Optional[str] = None  # Database name; if unset, uses 'interview-booking'


@dataclass
class AuthConfig:
    """JWT verification settings (tokens are issued by the auth service)"""
    jwt_secret: str
    jwt_algorithm: str = "HS256"


@dataclass
class ServerConfig:
    """HTTP server configuration"""
    host: str = "0.0.0.0"
    port: int = 5000
    frontend_url: str = ""


@dataclass
class GoogleMeetConfig:
    """Google Calendar / Meet settings used to create meeting rooms"""
    access_token: Optional[str] = None
    calendar_id: str = "primary"
    time_zone: str = "Asia/Kolkata"
    api_base_url: str = "https://www.googleapis.com/calendar/v3"
    request_timeout: float = 8.0

    @property
    def enabled(self) -> bool:
        return bool(self.access_token)


@dataclass
class BookingConfig:
    """Slot and mentor-assignment settings"""
    # "constant": every mentor works default_start_time..default_end_time every day.
    # "working_hours": honor the mentor's stored workingHours.
    availability_mode: str = "constant"
    default_start_time: str = "09:00"
    default_end_time: str = "18:00"
    default_slot_duration: int = 60
    max_sessions_per_day: int = 8
    # Ranking + insert attempts before giving up with a conflict
    max_booking_attempts: int = 3
    # Upper bound for meeting-link creation and each notification
    side_effect_timeout_seconds: float = 10.0
    # How early a participant may join a scheduled session
    join_window_minutes: int = 30


@dataclass
class Config:
    """Main application configuration"""

    # MongoDB configuration
    mongo: MongoConfig

    # Token verification
    auth: AuthConfig

    # Server configuration
    server: ServerConfig = field(default_factory=ServerConfig)

    # Meeting-link provider
    google_meet: GoogleMeetConfig = field(default_factory=GoogleMeetConfig)

    # Booking rules
    booking: BookingConfig = field(default_factory=BookingConfig)

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Configured Config instance

        Raises:
            ValueError: If required environment variables are missing or invalid
        """
        mongodb_uri = os.getenv("MONGODB_URI")
        if not mongodb_uri:
            raise ValueError("MONGODB_URI environment variable is required")

        jwt_secret = os.getenv("JWT_SECRET_KEY")
        if not jwt_secret or not jwt_secret.strip():
            raise ValueError(
                "JWT_SECRET_KEY must be set in environment. "
                "Use the same secret the auth service signs tokens with."
            )

        availability_mode = os.getenv("AVAILABILITY_MODE", "constant").strip().lower()
        if availability_mode not in AVAILABILITY_MODES:
            raise ValueError(
                f"AVAILABILITY_MODE must be one of {', '.join(AVAILABILITY_MODES)}, got '{availability_mode}'"
            )

        max_attempts = int(os.getenv("BOOKING_MAX_ATTEMPTS", "3"))
        if max_attempts < 1:
            raise ValueError("BOOKING_MAX_ATTEMPTS must be at least 1")

        return cls(
            mongo=MongoConfig(
                uri=mongodb_uri,
                db_name=os.getenv("MONGODB_DB_NAME") or None,
            ),
            auth=AuthConfig(
                jwt_secret=jwt_secret,
                jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            ),
            server=ServerConfig(
                host=os.getenv("SERVER_HOST", "0.0.0.0"),
                port=int(os.getenv("SERVER_PORT", "5000")),
                frontend_url=os.getenv("FRONTEND_URL", ""),
            ),
            google_meet=GoogleMeetConfig(
                access_token=os.getenv("GOOGLE_ACCESS_TOKEN") or None,
                calendar_id=os.getenv("GOOGLE_CALENDAR_ID", "primary"),
                time_zone=os.getenv("GOOGLE_CALENDAR_TIME_ZONE", "Asia/Kolkata"),
                request_timeout=float(os.getenv("GOOGLE_REQUEST_TIMEOUT", "8")),
            ),
            booking=BookingConfig(
                availability_mode=availability_mode,
                default_start_time=os.getenv("DEFAULT_START_TIME", "09:00"),
                default_end_time=os.getenv("DEFAULT_END_TIME", "18:00"),
                default_slot_duration=int(os.getenv("DEFAULT_SLOT_DURATION", "60")),
                max_sessions_per_day=int(os.getenv("MAX_SESSIONS_PER_DAY", "8")),
                max_booking_attempts=max_attempts,
                side_effect_timeout_seconds=float(os.getenv("SIDE_EFFECT_TIMEOUT_SECONDS", "10")),
                join_window_minutes=int(os.getenv("JOIN_WINDOW_MINUTES", "30")),
            ),
        )


def get_config() -> Config:
    """
    Get configuration from environment variables.

    Returns:
        Configuration instance
    """
    return Config.from_env()
