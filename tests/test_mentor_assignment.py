from datetime import date

import pytest

from mentor_booking.config import BookingConfig
from mentor_booking.models import SessionStatus, WorkingHours
from mentor_booking.utils.exceptions import NotFoundError, PermissionDenied, ValidationError

from tests.fakes import build_services, make_candidate, make_mentor, make_session

DAY = "2025-09-16"


def test_busy_higher_rated_mentor_is_skipped():
    services = build_services([make_mentor("m1", rating=4.8), make_mentor("m2", rating=4.9)])
    services.sessions.add(make_session("m2", DAY, "10:00"))

    best = services.assignment.find_best_mentor("DSA", DAY, "10:00")

    assert best.id == "m1"


def test_highest_rating_wins_when_all_free():
    services = build_services([make_mentor("m1", rating=4.8), make_mentor("m2", rating=4.9)])
    assert services.assignment.find_best_mentor("DSA", DAY, "10:00").id == "m2"


def test_equal_rating_prefers_lower_load_then_experience():
    services = build_services([
        make_mentor("busy", rating=4.7, experience=10),
        make_mentor("idle", rating=4.7, experience=1),
        make_mentor("senior", rating=4.7, experience=5),
    ])
    services.sessions.add(make_session("busy", DAY, "09:00"))

    ranked = services.assignment.rank_mentors("DSA", DAY, "11:00")

    assert [c.mentor.id for c in ranked] == ["senior", "idle", "busy"]
    assert [c.current_load for c in ranked] == [0, 0, 1]


def test_rating_outranks_load_across_rating_levels():
    services = build_services([
        make_mentor("A", rating=4.9),
        make_mentor("B", rating=4.9),
        make_mentor("C", rating=4.8),
    ])
    services.sessions.add(make_session("A", DAY, "09:00"))
    services.sessions.add(make_session("A", DAY, "11:00"))
    services.sessions.add(make_session("B", DAY, "09:00"))

    ranked = services.assignment.rank_mentors("DSA", DAY, "10:00")

    assert [(c.mentor.id, c.current_load) for c in ranked] == [("B", 1), ("A", 2), ("C", 0)]
    assert services.assignment.find_best_mentor("DSA", DAY, "10:00").id == "B"


def test_ranking_is_deterministic():
    mentors = [make_mentor(f"m{i}", rating=4.5, experience=3) for i in range(5)]
    services = build_services(mentors)

    first = [c.mentor.id for c in services.assignment.rank_mentors("DSA", DAY, "10:00")]
    second = [c.mentor.id for c in services.assignment.rank_mentors("DSA", DAY, "10:00")]

    assert first == second


def test_missing_rating_counts_as_four_and_a_half():
    services = build_services([make_mentor("unrated", rating=None), make_mentor("rated", rating=4.4)])
    assert services.assignment.find_best_mentor("DSA", DAY, "10:00").id == "unrated"


def test_mentors_of_other_fields_are_never_chosen():
    services = build_services([
        make_mentor("analyst", rating=5.0, specializations=("Analytics",)),
        make_mentor("algo", rating=4.0, specializations=("DSA",)),
    ])

    assert services.assignment.find_best_mentor("DSA", DAY, "10:00").id == "algo"
    services.sessions.add(make_session("algo", DAY, "10:00"))
    assert services.assignment.find_best_mentor("DSA", DAY, "10:00") is None


def test_empty_pool_raises_not_found():
    services = build_services([make_mentor("analyst", specializations=("Analytics",))])
    with pytest.raises(NotFoundError, match="No mentors available for this field"):
        services.assignment.find_best_mentor("DSA", DAY, "10:00")
    with pytest.raises(NotFoundError):
        services.assignment.list_available_slots("DSA", DAY)


def test_inactive_mentor_is_not_in_pool():
    services = build_services([make_mentor("m1", is_active=False)])
    with pytest.raises(NotFoundError):
        services.assignment.find_best_mentor("DSA", DAY, "10:00")


def test_missing_field_is_a_validation_error():
    services = build_services([make_mentor("m1")])
    with pytest.raises(ValidationError):
        services.assignment.list_available_slots("", DAY)


def test_slot_outside_window_has_no_mentor():
    services = build_services([make_mentor("m1")])
    assert services.assignment.find_best_mentor("DSA", DAY, "18:00") is None
    assert services.assignment.find_best_mentor("DSA", DAY, "08:00") is None


def test_cancelled_and_completed_sessions_do_not_block():
    services = build_services([make_mentor("m1")])
    services.sessions.add(make_session("m1", DAY, "10:00", status=SessionStatus.CANCELLED.value))
    services.sessions.add(make_session("m1", DAY, "11:00", status=SessionStatus.COMPLETED.value))

    assert services.assignment.find_best_mentor("DSA", DAY, "10:00").id == "m1"
    assert services.assignment.find_best_mentor("DSA", DAY, "11:00").id == "m1"


@pytest.mark.parametrize("status", ["pending", "scheduled", "in-progress", "rescheduled"])
def test_every_active_status_blocks_the_slot(status):
    services = build_services([make_mentor("m1")])
    services.sessions.add(make_session("m1", DAY, "10:00", status=status))
    assert services.conflicts.is_slot_taken("m1", DAY, "10:00")


def test_direct_and_auto_bookings_block_alike():
    services = build_services([make_mentor("m1")])
    services.sessions.add(make_session("m1", DAY, "10:00", auto_assigned=False, status="pending"))
    services.sessions.add(make_session("m1", DAY, "11:00", auto_assigned=True))

    assert services.conflicts.taken_slots("m1", DAY) == {"10:00", "11:00"}
    assert not services.conflicts.is_slot_taken("m1", "2025-09-17", "10:00")


def test_available_slots_are_union_across_mentors():
    services = build_services([make_mentor("m1"), make_mentor("m2")])
    services.sessions.add(make_session("m1", DAY, "10:00"))
    services.sessions.add(make_session("m1", DAY, "11:00"))
    services.sessions.add(make_session("m2", DAY, "11:00"))

    slots = services.assignment.list_available_slots("DSA", DAY)

    assert "10:00" in slots
    assert "11:00" not in slots
    assert slots == sorted(set(slots))
    assert len(slots) == 8


def test_available_slots_follow_working_hours_when_configured():
    services = build_services(
        [
            make_mentor("early", working_hours=WorkingHours(start=9, end=11)),
            make_mentor("late", working_hours=WorkingHours(start=10, end=13)),
        ],
        config=BookingConfig(availability_mode="working_hours"),
    )

    assert services.assignment.list_available_slots("DSA", DAY) == ["09:00", "10:00", "11:00", "12:00"]


def test_available_mentors_fall_back_to_any_active_mentor():
    services = build_services([make_mentor("m1", specializations=("Analytics",))])
    services.sessions.add(make_session("m1", DAY, "10:00"))

    mentors = services.assignment.get_available_mentors("Behavioral")

    assert [m["mentorId"] for m in mentors] == ["m1"]
    assert mentors[0]["currentLoad"] == 1
    assert mentors[0]["specialization"] == ["Analytics"]


def test_mentor_load_counts_scheduled_and_in_progress_only():
    services = build_services([make_mentor("m1")])
    services.sessions.add(make_session("m1", DAY, "09:00", status="scheduled"))
    services.sessions.add(make_session("m1", DAY, "10:00", status="in-progress"))
    services.sessions.add(make_session("m1", DAY, "11:00", status="pending"))
    services.sessions.add(make_session("m1", DAY, "12:00", status="completed"))

    assert services.assignment.get_mentor_load("m1") == 2


def test_mentor_schedule_lists_free_slots_per_day():
    services = build_services([make_mentor("m1")])
    services.sessions.add(make_session("m1", DAY, "09:00"))

    schedule = services.assignment.get_mentor_schedule("m1", days=2, start_day=date(2025, 9, 16))

    assert [d["date"] for d in schedule] == ["2025-09-16", "2025-09-17"]
    assert "09:00" not in schedule[0]["timeSlots"]
    assert len(schedule[0]["timeSlots"]) == 8
    assert len(schedule[1]["timeSlots"]) == 9


def test_fully_booked_days_are_omitted_from_schedule():
    services = build_services([make_mentor("m1")])
    for hour in range(9, 18):
        services.sessions.add(make_session("m1", DAY, f"{hour:02d}:00"))

    schedule = services.assignment.get_mentor_schedule("m1", days=1, start_day=date(2025, 9, 16))

    assert schedule == []


def test_schedule_for_unknown_mentor():
    services = build_services([make_candidate("c1")])
    with pytest.raises(NotFoundError):
        services.assignment.get_mentor_schedule("c1", days=1)


def test_toggle_only_for_self():
    services = build_services([make_mentor("m1"), make_mentor("m2")])

    with pytest.raises(PermissionDenied):
        services.assignment.toggle_mentor_active("m1", "m2")

    assert services.assignment.toggle_mentor_active("m1", "m1") is False
    assert services.users.find_by_id("m1").is_active is False
    assert services.assignment.toggle_mentor_active("m1", "m1") is True
