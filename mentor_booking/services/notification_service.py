"""
Notification Service

Records session events for candidates and mentors. Delivery channels
(email, SMS, push) live outside this service; here every event becomes
one structured log line.
"""

from typing import Any, Dict

from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)

EVENT_MESSAGES = {
    "session_booked": "New session booked with {candidateName} for {type} on {scheduledDate}",
    "session_confirmed": "Your {type} session with {mentorName} is confirmed for {scheduledDate}",
    "session_approved": "Your {type} session has been approved for {scheduledDate}",
    "meeting_link_updated": "Meeting link updated for your {type} session",
    "session_started": "Your {type} session has started",
    "session_rescheduled": "Your {type} session was moved to {scheduledDate}",
    "session_completed": "Your {type} session is complete",
    "session_cancelled": "Your {type} session on {scheduledDate} was cancelled",
}


class _Defaults(dict):
    def __missing__(self, key):
        return "?"


class LoggingNotificationSender:
    """Notification sender that logs each event"""

    def notify(self, user_id: str, event_type: str, payload: Dict[str, Any]) -> None:
        template = EVENT_MESSAGES.get(event_type)
        if template is None:
            logger.warning(f"[Notifications] Unknown event type '{event_type}' for user {user_id}")
            return
        message = template.format_map(_Defaults(payload))
        link = payload.get("meetingLink")
        suffix = f" (link: {link})" if link else ""
        logger.info(f"[Notifications] {event_type} -> user={user_id} session={payload.get('sessionId')}: {message}{suffix}")
