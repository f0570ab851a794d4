"""
Wire row <-> in-memory model translation, one pair of functions per entity.

Rows are the plain dictionaries :mod:`db.repository` returns and accepts.
"""
from __future__ import annotations

from collections import OrderedDict
from datetime import date, datetime, time
from typing import Any, Dict, Iterable, List, Optional

from care.schema import (
    Appointment,
    AppointmentCategory,
    AppointmentUpdate,
    EmergencyContact,
    MaternalStage,
    Mood,
    Profile,
    RiskLevel,
    SymptomEntry,
    _to_utc,
)

Row = Dict[str, Any]

SYMPTOMS_TABLE = "symptoms_log"
APPOINTMENTS_TABLE = "appointments"
CONTACTS_TABLE = "emergency_contacts"
PROFILES_TABLE = "users_profile"

# rows written before categories were stored
LEGACY_APPOINTMENT_CATEGORY = AppointmentCategory.checkup
DEFAULT_APPOINTMENT_TITLE = "Appointment"


# ---------- symptoms -------------------------------------------------

def symptom_entry_to_rows(entry: SymptomEntry) -> List[Row]:
    """One ``symptoms_log`` row per tag; notes ride on the first row.

    A check-in without tags still gets one row (empty ``symptom_type``) so the
    mood survives.
    """
    tags = entry.symptom_tags or [""]
    logged_at = _to_utc(entry.logged_at)
    rows = []
    for index, tag in enumerate(tags):
        row = {
            "user_id": entry.owner_id,
            "symptom_type": tag,
            "severity": entry.mood.score,
            "notes": entry.notes if index == 0 else None,
            "logged_date": logged_at.date(),
            "logged_at": logged_at,
        }
        if index == 0:
            row["id"] = entry.id
        rows.append(row)
    return rows


def _row_logged_at(row: Row) -> datetime:
    value = row.get("logged_at") or row.get("created_at")
    if value is None:
        value = datetime.combine(row["logged_date"], time(12, 0))
    return _to_utc(value)


def _row_logged_date(row: Row) -> date:
    value = row.get("logged_date")
    if value is None:
        return _row_logged_at(row).date()
    if isinstance(value, str):
        return date.fromisoformat(value)
    return value


def rows_to_symptom_entries(rows: Iterable[Row]) -> List[SymptomEntry]:
    """Collapse rows sharing a ``logged_date`` into one entry per day.

    Within a day rows are taken oldest first: tags are unioned in that order,
    the first non-empty note is kept, the id is the earliest row's and the
    timestamp and mood are the latest row's.
    """
    by_day: "OrderedDict[date, List[Row]]" = OrderedDict()
    for row in sorted(rows, key=lambda r: (_row_logged_at(r), str(r.get("id")))):
        by_day.setdefault(_row_logged_date(row), []).append(row)

    entries = []
    for day_rows in by_day.values():
        first, last = day_rows[0], day_rows[-1]
        note = next((r.get("notes") for r in day_rows if r.get("notes")), None)
        entries.append(
            SymptomEntry(
                id=str(first["id"]),
                owner_id=first["user_id"],
                logged_at=_row_logged_at(last),
                symptom_tags=[r.get("symptom_type") or "" for r in day_rows],
                notes=note,
                mood=Mood.from_score(last.get("severity")),
            )
        )
    return entries


# ---------- appointments ---------------------------------------------

def _status(completed: bool) -> str:
    return "completed" if completed else "upcoming"


def _combine(d: date, t: time) -> datetime:
    return datetime.combine(d, t.replace(tzinfo=None))


def appointment_to_row(appt: Appointment) -> Row:
    return {
        "id": appt.id,
        "user_id": appt.owner_id,
        "doctor_name": appt.title,
        "hospital": "",
        "appointment_date": _combine(appt.scheduled_date, appt.scheduled_time),
        "category": appt.category.value,
        "notes": appt.notes,
        "status": _status(appt.completed),
    }


def _category(value: Optional[str]) -> AppointmentCategory:
    if not value:
        return LEGACY_APPOINTMENT_CATEGORY
    try:
        return AppointmentCategory(value)
    except ValueError:
        return AppointmentCategory.other


def row_to_appointment(row: Row) -> Appointment:
    when = row["appointment_date"]
    if isinstance(when, str):
        when = datetime.fromisoformat(when)
    return Appointment(
        id=str(row["id"]),
        owner_id=row["user_id"],
        title=row.get("doctor_name") or DEFAULT_APPOINTMENT_TITLE,
        scheduled_date=when.date(),
        scheduled_time=when.time(),
        category=_category(row.get("category")),
        notes=row.get("notes") or None,
        completed=row.get("status") == "completed",
    )


def appointment_update_to_row(update: AppointmentUpdate, existing: Appointment) -> Row:
    """Column changes for ``update``; date/time edits are merged with ``existing``."""
    changes = update.changes()
    values: Row = {}
    if "title" in changes:
        values["doctor_name"] = changes["title"]
    if "notes" in changes:
        values["notes"] = changes["notes"]
    if "category" in changes and changes["category"] is not None:
        values["category"] = AppointmentCategory(changes["category"]).value
    if "completed" in changes and changes["completed"] is not None:
        values["status"] = _status(changes["completed"])
    if changes.get("scheduled_date") is not None or changes.get("scheduled_time") is not None:
        values["appointment_date"] = _combine(
            changes.get("scheduled_date") or existing.scheduled_date,
            changes.get("scheduled_time") or existing.scheduled_time,
        )
    return values


# ---------- emergency contacts ---------------------------------------

def contact_to_row(contact: EmergencyContact) -> Row:
    return {
        "id": contact.id,
        "user_id": contact.owner_id,
        "contact_name": contact.contact_name,
        "contact_number": contact.contact_number,
        "relation": contact.relation,
    }


def row_to_contact(row: Row) -> EmergencyContact:
    return EmergencyContact(
        id=str(row["id"]),
        owner_id=row["user_id"],
        contact_name=row["contact_name"],
        contact_number=row["contact_number"],
        relation=row.get("relation") or None,
    )


# ---------- profiles -------------------------------------------------

def profile_to_row(profile: Profile) -> Row:
    return {
        "id": profile.id,
        "name": profile.display_name,
        "age": profile.age,
        "pregnancy_week": profile.gestational_week,
        "risk_level": profile.risk_level.value,
        "maternal_stage": None if profile.maternal_stage is MaternalStage.unset else profile.maternal_stage.value,
    }


def _stage(value: Optional[str], week: Optional[int]) -> MaternalStage:
    if value:
        try:
            return MaternalStage(value)
        except ValueError:
            return MaternalStage.unset
    # older rows only carry the week
    if week and week > 0:
        return MaternalStage.pregnancy
    return MaternalStage.unset


def row_to_profile(row: Row, email: Optional[str] = None) -> Profile:
    week = row.get("pregnancy_week")
    stage = _stage(row.get("maternal_stage"), week)
    if stage is not MaternalStage.pregnancy or week is None or not 1 <= week <= 42:
        week = None
    try:
        risk = RiskLevel(row.get("risk_level") or "low")
    except ValueError:
        risk = RiskLevel.low
    age = row.get("age")
    return Profile(
        id=str(row["id"]),
        display_name=row.get("name") or "",
        email=email,
        maternal_stage=stage,
        gestational_week=week,
        risk_level=risk,
        age=age if age is None or age >= 0 else None,
    )
