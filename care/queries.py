from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional

from care.schema import Appointment, SymptomEntry


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return now if now.tzinfo else now.replace(tzinfo=timezone.utc)


def recent_symptoms(
    entries: Iterable[SymptomEntry],
    days: float = 7,
    now: Optional[datetime] = None,
) -> List[SymptomEntry]:
    """Entries logged within the last ``days`` days, newest first (ties by id)."""
    cutoff = _now(now) - timedelta(days=days)
    selected = [e for e in entries if e.logged_at >= cutoff]
    selected.sort(key=lambda e: e.id)
    selected.sort(key=lambda e: e.logged_at, reverse=True)
    return selected


def upcoming_appointments(
    appointments: Iterable[Appointment],
    today: Optional[date] = None,
) -> List[Appointment]:
    """Open appointments from ``today`` on, soonest first."""
    today = today or date.today()
    selected = [a for a in appointments if a.scheduled_date >= today and not a.completed]
    selected.sort(key=lambda a: (a.scheduled_date, a.scheduled_time.replace(tzinfo=None), a.id))
    return selected


def past_appointments(
    appointments: Iterable[Appointment],
    today: Optional[date] = None,
) -> List[Appointment]:
    """Appointments before ``today`` or already completed, most recent first."""
    today = today or date.today()
    selected = [a for a in appointments if a.scheduled_date < today or a.completed]
    selected.sort(key=lambda a: a.id)
    selected.sort(key=lambda a: a.scheduled_at, reverse=True)
    return selected
