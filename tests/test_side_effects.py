from mentor_booking.services.side_effect_runner import SideEffectRunner

from tests.fakes import (
    FakeMeetingProvider,
    RecordingNotificationSender,
    build_services,
    make_candidate,
    make_mentor,
)

DAY = "2025-09-16"


def book(services):
    return services.booking.book_smart("c1", "DSA", DAY, "10:00", 60, 999)


def runner_for(services, provider, sender, timeout=2.0):
    return SideEffectRunner(provider, sender, services.sessions, timeout_seconds=timeout)


def test_meeting_link_is_stored_and_sent_to_candidate():
    services = build_services([make_candidate("c1"), make_mentor("m1")])
    provider = FakeMeetingProvider()
    sender = RecordingNotificationSender()
    result = book(services)

    session = runner_for(services, provider, sender).run(result)

    assert session.meeting_link == "https://meet.google.com/abc-defg-hij"
    assert services.sessions.get(session.id).meeting_link == session.meeting_link
    assert services.sessions.get(session.id).google_event_id == "evt-1"
    confirmed = [payload for uid, event, payload in sender.events if event == "session_confirmed"]
    assert confirmed[0]["meetingLink"] == session.meeting_link


def test_meeting_provider_failure_keeps_booking():
    services = build_services([make_candidate("c1"), make_mentor("m1")])
    sender = RecordingNotificationSender()
    result = book(services)

    session = runner_for(services, FakeMeetingProvider(fail=True), sender).run(result)

    assert session.meeting_link is None
    assert services.sessions.get(result.session.id).status == "scheduled"
    assert {event for _, event, _ in sender.events} == {"session_booked", "session_confirmed"}
    confirmed = [payload for uid, event, payload in sender.events if event == "session_confirmed"]
    assert confirmed[0]["meetingLink"] is None


def test_slow_meeting_provider_is_abandoned(caplog):
    services = build_services([make_candidate("c1"), make_mentor("m1")])
    result = book(services)

    with caplog.at_level("WARNING"):
        session = runner_for(services, FakeMeetingProvider(delay=0.5), RecordingNotificationSender(), timeout=0.05).run(result)

    assert session.meeting_link is None
    assert "still running; its result will be discarded" in caplog.text


def test_notification_failure_is_swallowed():
    services = build_services([make_candidate("c1"), make_mentor("m1")])
    result = book(services)

    session = runner_for(services, FakeMeetingProvider(), RecordingNotificationSender(fail=True)).run(result)

    assert session.meeting_link is not None


def test_existing_link_is_not_recreated():
    services = build_services([make_candidate("c1"), make_mentor("m1")])
    result = book(services)
    result.session = services.sessions.set_meeting_details(result.session.id, "https://meet.google.com/xyz-abcd-efg")
    provider = FakeMeetingProvider()

    session = runner_for(services, provider, RecordingNotificationSender()).run(result)

    assert provider.intents == []
    assert session.meeting_link == "https://meet.google.com/xyz-abcd-efg"
