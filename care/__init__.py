"""Rule engine, health record store and auth for the MATRI companion."""

from .alerts import classify_safety_alert, classify_tags  # noqa: F401
from .content import select_educational_content, stage_label  # noqa: F401
from .queries import past_appointments, recent_symptoms, upcoming_appointments  # noqa: F401
from .store import HealthRecordStore  # noqa: F401
from .auth import AuthService  # noqa: F401

__all__ = [
    "classify_safety_alert",
    "classify_tags",
    "select_educational_content",
    "stage_label",
    "recent_symptoms",
    "upcoming_appointments",
    "past_appointments",
    "HealthRecordStore",
    "AuthService",
]
