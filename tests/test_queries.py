import sys
from datetime import date, datetime, time, timedelta, timezone
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from care.queries import past_appointments, recent_symptoms, upcoming_appointments
from care.schema import Appointment, SymptomEntry

TODAY = date(2024, 6, 10)
NOW = datetime(2024, 6, 10, 18, 0, tzinfo=timezone.utc)


def _appt(appt_id, day, completed=False, at=time(9, 0)):
    return Appointment(
        id=appt_id,
        owner_id="u1",
        title=appt_id,
        scheduled_date=TODAY + timedelta(days=day),
        scheduled_time=at,
        completed=completed,
    )


def _entry(entry_id, days_ago):
    return SymptomEntry(id=entry_id, owner_id="u1", mood="okay", logged_at=NOW - timedelta(days=days_ago))


def test_upcoming_excludes_completed_and_sorts_by_date():
    appts = [_appt("day3", 3), _appt("day1", 1, completed=True), _appt("day2", 2)]
    assert [a.id for a in upcoming_appointments(appts, today=TODAY)] == ["day2", "day3"]


def test_upcoming_includes_today_and_orders_same_day_by_time():
    appts = [
        _appt("late", 0, at=time(16, 0)),
        _appt("early", 0, at=time(8, 15)),
        _appt("yesterday", -1),
    ]
    assert [a.id for a in upcoming_appointments(appts, today=TODAY)] == ["early", "late"]


def test_past_appointments_newest_first():
    appts = [_appt("old", -10), _appt("recent", -1), _appt("done", 2, completed=True), _appt("next", 1)]
    assert [a.id for a in past_appointments(appts, today=TODAY)] == ["done", "recent", "old"]


def test_recent_symptoms_window_and_order():
    entries = [_entry("eight", 8), _entry("zero", 0), _entry("six", 6)]
    assert [e.id for e in recent_symptoms(entries, days=7, now=NOW)] == ["zero", "six"]


def test_recent_symptoms_ties_broken_by_id():
    entries = [_entry("b", 1), _entry("a", 1), _entry("c", 1)]
    assert [e.id for e in recent_symptoms(entries, now=NOW)] == ["a", "b", "c"]


def test_queries_do_not_mutate_input():
    entries = [_entry("eight", 8), _entry("zero", 0)]
    recent_symptoms(entries, now=NOW)
    assert [e.id for e in entries] == ["eight", "zero"]
