import sys
from datetime import date, time
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from care import forms
from care.errors import ValidationError
from care.schema import AppointmentCategory, Mood


@pytest.mark.parametrize("mood", [None, "", "   "])
def test_check_in_needs_a_mood(mood):
    with pytest.raises(ValidationError) as exc:
        forms.validate_check_in(mood, ["nausea"])
    assert exc.value.title == "How are you feeling?"
    assert exc.value.description == "Please select your mood first 💖"
    assert exc.value.field == "mood"


def test_check_in_builds_entry():
    entry = forms.validate_check_in("Happy", ["Back Pain", "back_pain", "nausea"], notes="  ", owner_id="u1")
    assert entry.mood is Mood.good
    assert entry.symptom_tags == ["back_pain", "nausea"]
    assert entry.notes is None
    assert entry.owner_id == "u1"


def test_check_in_unknown_mood():
    with pytest.raises(ValidationError):
        forms.validate_check_in("ecstatic-ish")


@pytest.mark.parametrize(
    "title, day, at",
    [("", "2024-07-01", "09:00"), ("Scan", None, "09:00"), ("Scan", "2024-07-01", " ")],
)
def test_appointment_needs_all_fields(title, day, at):
    with pytest.raises(ValidationError) as exc:
        forms.validate_appointment(title, day, at)
    assert exc.value.title == "Please fill in all fields"


def test_appointment_parses_strings():
    appt = forms.validate_appointment(" Scan ", "2024-07-01", "2:30 PM", category="ultrasound", notes="")
    assert appt.title == "Scan"
    assert appt.scheduled_date == date(2024, 7, 1)
    assert appt.scheduled_time == time(14, 30)
    assert appt.category is AppointmentCategory.ultrasound
    assert appt.notes is None
    assert appt.completed is False


def test_appointment_bad_values():
    with pytest.raises(ValidationError):
        forms.validate_appointment("Scan", "not a date", "09:00")
    with pytest.raises(ValidationError):
        forms.validate_appointment("Scan", "2024-07-01", "09:00", category="surgery")


HUGE_NUMBER = "99999999999999999999"


@pytest.mark.parametrize("day, at", [(HUGE_NUMBER, "09:00"), ("2024-07-01", HUGE_NUMBER)])
def test_appointment_out_of_range_values(day, at):
    with pytest.raises(ValidationError):
        forms.validate_appointment("Scan", day, at)


def test_check_in_out_of_range_time():
    with pytest.raises(ValidationError) as exc:
        forms.validate_check_in("okay", logged_at=HUGE_NUMBER)
    assert exc.value.field == "logged_at"


def test_emergency_contact():
    with pytest.raises(ValidationError):
        forms.validate_emergency_contact("Sam", "")
    contact = forms.validate_emergency_contact(" Sam ", " 555-0100 ", relation=" ")
    assert (contact.contact_name, contact.contact_number, contact.relation) == ("Sam", "555-0100", None)


def test_sign_up_and_sign_in_forms():
    with pytest.raises(ValidationError) as exc:
        forms.validate_sign_up("ana@example.com", "secret123", "")
    assert exc.value.title == "Please enter your name"
    with pytest.raises(ValidationError):
        forms.validate_sign_up("", "secret123", "Ana")
    with pytest.raises(ValidationError):
        forms.validate_sign_in("ana@example.com", None)
    forms.validate_sign_up("ana@example.com", "secret123", "Ana")
    forms.validate_sign_in("ana@example.com", "secret123")
