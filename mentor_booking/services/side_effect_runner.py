"""
Side Effect Runner

Carries out the meeting and notification intents of a persisted session.
Every step is bounded by a timeout and failures are logged, never raised:
the session has already been committed when this runs.
"""

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import replace
from typing import Optional

from mentor_booking.repositories import SessionRepository
from mentor_booking.services.intents import SessionOutcome
from mentor_booking.utils.exceptions import BookingError
from mentor_booking.utils.logger import get_logger

logger = get_logger(__name__)


class SideEffectRunner:
    def __init__(
        self,
        meeting_provider,
        notification_sender,
        session_repository: SessionRepository,
        timeout_seconds: float = 10.0,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.meeting_provider = meeting_provider
        self.notification_sender = notification_sender
        self.session_repository = session_repository
        self.timeout_seconds = timeout_seconds
        self.executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix="side-effects")

    def _call(self, label: str, fn, *args):
        future = self.executor.submit(fn, *args)
        try:
            return future.result(timeout=self.timeout_seconds)
        except FutureTimeout:
            logger.warning(f"[SideEffects] {label} timed out after {self.timeout_seconds}s")
            if not future.cancel():
                # A running call cannot be interrupted; whatever it returns is dropped
                logger.warning(f"[SideEffects] {label} is still running; its result will be discarded")
        except BookingError as e:
            logger.warning(f"[SideEffects] {label} failed: [{e.component}] {e.message}")
        except Exception as e:
            logger.error(f"[SideEffects] {label} failed unexpectedly: {str(e)}", exc_info=True)
        return None

    def run(self, outcome: SessionOutcome):
        """Run the intents of `outcome` and return the session as it ended up."""
        session = outcome.session

        if outcome.meeting is not None and not session.meeting_link:
            details = self._call(f"Meeting creation for session {session.id}", self.meeting_provider.create_meeting, outcome.meeting)
            if details is not None:
                try:
                    stored = self.session_repository.set_meeting_details(session.id, details.meeting_link, details.event_id)
                except BookingError as e:
                    logger.warning(f"[SideEffects] Could not store meeting link for session {session.id}: {e.message}")
                    stored = None
                session = stored or replace(
                    session, meeting_link=details.meeting_link, google_event_id=details.event_id
                )
            else:
                logger.info(f"[SideEffects] Session {session.id} kept without a meeting link")

        for intent in outcome.notifications:
            payload = dict(intent.payload)
            if intent.attach_meeting_link:
                payload["meetingLink"] = session.meeting_link
            self._call(
                f"Notification {intent.event_type} to {intent.user_id}",
                self.notification_sender.notify,
                intent.user_id,
                intent.event_type,
                payload,
            )

        return session
