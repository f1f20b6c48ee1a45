"""
Google Meet Service

Creates a Google Calendar event with an attached Meet conference for a
session, using the Calendar REST API.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional

import requests

from mentor_booking.config import GoogleMeetConfig
from mentor_booking.services.intents import MeetingIntent
from mentor_booking.utils.datetime_utils import combine_date_time
from mentor_booking.utils.exceptions import IntegrationFailure
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class MeetingDetails:
    meeting_link: str
    event_id: Optional[str] = None


class GoogleMeetService:
    """Meeting-link provider backed by Google Calendar"""

    def __init__(self, config: GoogleMeetConfig):
        self.config = config
        if not config.enabled:
            logger.warning("[GoogleMeet] No access token configured - meeting links will not be created")

    def _event_body(self, intent: MeetingIntent) -> Dict[str, Any]:
        start = combine_date_time(intent.date, intent.time)
        end = start + timedelta(minutes=intent.duration)
        return {
            "summary": f"{intent.field} Mock Interview - {intent.candidate_name}",
            "description": (
                f"{intent.field} mock interview session\n\n"
                f"Candidate: {intent.candidate_name} ({intent.candidate_email})\n"
                f"Mentor: {intent.mentor_name} ({intent.mentor_email})\n"
                f"Duration: {intent.duration} minutes"
            ),
            "start": {"dateTime": start.isoformat(), "timeZone": self.config.time_zone},
            "end": {"dateTime": end.isoformat(), "timeZone": self.config.time_zone},
            "attendees": [
                {"email": intent.mentor_email, "displayName": intent.mentor_name},
                {"email": intent.candidate_email, "displayName": intent.candidate_name},
            ],
            "conferenceData": {
                "createRequest": {
                    "requestId": f"session-{intent.session_id}",
                    "conferenceSolutionKey": {"type": "hangoutsMeet"},
                }
            },
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": "email", "minutes": 24 * 60},
                    {"method": "popup", "minutes": 30},
                    {"method": "popup", "minutes": 5},
                ],
            },
        }

    @staticmethod
    def _meet_link(event: Dict[str, Any]) -> Optional[str]:
        if event.get("hangoutLink"):
            return event["hangoutLink"]
        for entry in (event.get("conferenceData") or {}).get("entryPoints", []):
            if entry.get("entryPointType") == "video" and entry.get("uri"):
                return entry["uri"]
        return None

    def create_meeting(self, intent: MeetingIntent) -> MeetingDetails:
        """
        Insert the calendar event and return its Meet link.

        Raises:
            IntegrationFailure: provider not configured, HTTP failure, or no link returned
        """
        if not self.config.enabled:
            raise IntegrationFailure("Google Meet is not configured", "GoogleMeet")

        url = f"{self.config.api_base_url}/calendars/{self.config.calendar_id}/events"
        try:
            response = requests.post(
                url,
                params={"conferenceDataVersion": 1, "sendUpdates": "all"},
                headers={"Authorization": f"Bearer {self.config.access_token}"},
                json=self._event_body(intent),
                timeout=self.config.request_timeout,
            )
            response.raise_for_status()
            event = response.json()
        except requests.RequestException as e:
            logger.error(f"[GoogleMeet] Calendar event creation failed for session {intent.session_id}: {e}")
            raise IntegrationFailure(f"Failed to create calendar event: {str(e)}", "GoogleMeet")
        except ValueError as e:
            raise IntegrationFailure(f"Invalid calendar API response: {str(e)}", "GoogleMeet")

        link = self._meet_link(event)
        if not link:
            raise IntegrationFailure("Calendar event was created without a Meet link", "GoogleMeet")

        logger.info(f"[GoogleMeet] Meeting created for session {intent.session_id}: {link}")
        return MeetingDetails(meeting_link=link, event_id=event.get("id"))
