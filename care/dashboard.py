from __future__ import annotations

import random
from typing import Any, Dict, Optional

from care.content import stage_label
from care.store import HealthRecordStore

QUOTES = (
    "You are stronger than you know 💪",
    "Every day is a new beginning 🌅",
    "Trust in your journey 🌸",
    "You are doing an amazing job 💖",
    "Embrace this beautiful chapter ✨",
    "Your body is incredible 🌺",
    "Take it one day at a time 🦋",
)


def greeting(hour: int) -> str:
    if hour < 12:
        return "Good morning"
    if hour < 17:
        return "Good afternoon"
    return "Good evening"


def build_dashboard(store: HealthRecordStore, rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Home-screen summary built only from the store's current snapshot.

    The greeting and the checked-in flag follow the context clock's hour and
    calendar day, which is UTC unless the clock carries another zone.
    """
    ctx = store.context
    profile = ctx.profile
    upcoming = store.upcoming_appointments()
    rng = rng or random.Random()
    now = ctx.now()
    today = now.date()
    return {
        "greeting": greeting(now.hour),
        "display_name": profile.display_name if profile else "",
        "stage_label": stage_label(profile),
        "quote": rng.choice(QUOTES),
        "alert": store.safety_alert(),
        "checked_in_today": any(
            e.logged_at.astimezone(now.tzinfo).date() == today for e in store.symptom_entries
        ),
        "check_in_count": len(store.symptom_entries),
        "appointment_count": len(store.appointments),
        "next_appointment": upcoming[0] if upcoming else None,
        "upcoming_appointments": upcoming[:2],
        "content": store.educational_content()[:2],
    }
