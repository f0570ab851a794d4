"""
Form checks run before anything reaches the store.

Each validator returns the model to hand to :class:`care.store.HealthRecordStore`
or raises :class:`care.errors.ValidationError` carrying the title/description
pair shown to the user.
"""
from __future__ import annotations

from datetime import date, datetime, time
from typing import Iterable, Optional

from dateutil.parser import ParserError
from pydantic import ValidationError as PydanticValidationError

from care.errors import ValidationError
from care.schema import (
    Appointment,
    AppointmentCategory,
    EmergencyContact,
    Mood,
    SymptomEntry,
    parse_datetime_text,
)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_check_in(
    mood: Optional[str],
    symptoms: Iterable[str] = (),
    notes: Optional[str] = None,
    owner_id: str = "",
    logged_at: datetime | str | None = None,
) -> SymptomEntry:
    if _blank(mood):
        raise ValidationError("How are you feeling?", "Please select your mood first 💖", field="mood")
    try:
        mood_value = Mood(mood)
    except ValueError as exc:
        raise ValidationError("How are you feeling?", f"We don't recognise the mood {mood!r}.", field="mood") from exc

    data = {"owner_id": owner_id, "mood": mood_value, "symptom_tags": list(symptoms or []), "notes": notes}
    if logged_at is not None:
        data["logged_at"] = logged_at
    try:
        return SymptomEntry(**data)
    except (PydanticValidationError, ParserError) as exc:
        raise ValidationError("Please check your check-in", str(exc), field="logged_at") from exc


def _parse_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    return parse_datetime_text(value).date()


def _parse_time(value: time | str) -> time:
    if isinstance(value, time):
        return value
    return parse_datetime_text(value).time()


def validate_appointment(
    title: Optional[str],
    scheduled_date: date | str | None,
    scheduled_time: time | str | None,
    category: str | AppointmentCategory = AppointmentCategory.checkup,
    notes: Optional[str] = None,
    owner_id: str = "",
) -> Appointment:
    if _blank(title) or _blank(scheduled_date) or _blank(scheduled_time):
        raise ValidationError(
            "Please fill in all fields",
            "We need the details to schedule your appointment 💖",
        )
    try:
        return Appointment(
            owner_id=owner_id,
            title=title.strip(),
            scheduled_date=_parse_date(scheduled_date),
            scheduled_time=_parse_time(scheduled_time),
            category=AppointmentCategory(category or AppointmentCategory.checkup),
            notes=None if _blank(notes) else notes.strip(),
            completed=False,
        )
    except (PydanticValidationError, ParserError, ValueError) as exc:
        raise ValidationError("Please check the appointment details", str(exc)) from exc


def validate_emergency_contact(
    contact_name: Optional[str],
    contact_number: Optional[str],
    relation: Optional[str] = None,
    owner_id: str = "",
) -> EmergencyContact:
    if _blank(contact_name) or _blank(contact_number):
        raise ValidationError("Please fill in all fields", "A contact needs a name and a number 💖")
    return EmergencyContact(
        owner_id=owner_id,
        contact_name=contact_name.strip(),
        contact_number=contact_number.strip(),
        relation=None if _blank(relation) else relation.strip(),
    )


def validate_sign_up(email: Optional[str], password: Optional[str], display_name: Optional[str]) -> None:
    if _blank(display_name):
        raise ValidationError(
            "Please enter your name", "We'd love to know what to call you 💖", field="display_name"
        )
    if _blank(email) or _blank(password):
        raise ValidationError("Please fill in all fields", "Email and password are required.")


def validate_sign_in(email: Optional[str], password: Optional[str]) -> None:
    if _blank(email) or _blank(password):
        raise ValidationError("Please fill in all fields", "Email and password are required.")
