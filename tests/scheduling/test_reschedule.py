"""Tests for drag-and-drop rescheduling."""

from datetime import UTC, date, datetime

from surgery_agenda.scheduling.reschedule import apply_drop, reschedule


def test_drop_keeps_clock_time(make_surgery):
    surgery = make_surgery(scheduled_at="2024-03-10T14:30:00Z")

    assert reschedule(surgery, date(2024, 3, 15)) == datetime(2024, 3, 15, 14, 30, tzinfo=UTC)


def test_drop_keeps_local_clock_time(make_surgery):
    # 22:30 on the 10th in Sao Paulo; dropped on the 15th stays 22:30 local
    surgery = make_surgery(scheduled_at="2024-03-11T01:30:00Z")

    moved = reschedule(surgery, date(2024, 3, 15), "America/Sao_Paulo")

    assert moved == datetime(2024, 3, 16, 1, 30, tzinfo=UTC)


def test_drop_preserves_seconds(make_surgery):
    surgery = make_surgery(scheduled_at="2024-03-10T14:30:45.250000Z")
    moved = reschedule(surgery, date(2024, 4, 1))
    assert (moved.hour, moved.minute, moved.second, moved.microsecond) == (14, 30, 45, 250000)


def test_reschedule_is_idempotent(make_surgery):
    surgery = make_surgery(scheduled_at="2024-03-10T14:30:00Z")
    once = apply_drop([surgery], "s1", date(2024, 3, 15))
    twice = apply_drop([once], "s1", date(2024, 3, 15))
    assert once == twice


def test_unscheduled_surgery_is_ignored(make_surgery):
    surgery = make_surgery(scheduled_at=None, status="Requested")
    assert reschedule(surgery, date(2024, 3, 15)) is None
    assert apply_drop([surgery], "s1", date(2024, 3, 15)) is None


def test_unknown_id_is_ignored(make_surgery):
    assert apply_drop([make_surgery()], "missing", date(2024, 3, 15)) is None


def test_apply_drop_changes_only_the_timestamp(make_surgery):
    surgery = make_surgery(participant_ids=["d2"], fees={"d1": 900, "d2": 100}, notes="bring implants")

    moved = apply_drop([surgery], "s1", date(2024, 3, 20))

    assert moved.scheduled_at == datetime(2024, 3, 20, 14, 30, tzinfo=UTC)
    assert moved.model_dump(exclude={"scheduled_at"}) == surgery.model_dump(exclude={"scheduled_at"})
