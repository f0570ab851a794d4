from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import List, Optional, Tuple
from uuid import uuid4
from zoneinfo import ZoneInfo

from dateutil.parser import parse
from pydantic import BaseModel, Field, field_validator, model_validator

__all__ = [
    "Mood",
    "SymptomTag",
    "MaternalStage",
    "RiskLevel",
    "ContentStage",
    "ContentCategory",
    "AppointmentCategory",
    "AlertSeverity",
    "SymptomEntry",
    "Appointment",
    "AppointmentUpdate",
    "EmergencyContact",
    "Profile",
    "EducationalItem",
    "SafetyAlertResult",
    "AuthSession",
    "normalize_tag",
    "natural_language_to_datetime",
    "parse_datetime_text",
]


class Mood(str, Enum):
    """How the user feels at check-in, ordered from lowest to highest wellbeing."""

    difficult = "difficult"
    low = "low"
    okay = "okay"
    good = "good"
    great = "great"

    @classmethod
    def _missing_(cls, value: object) -> "Mood":
        if not isinstance(value, str):
            raise ValueError(f"Unknown mood: {value}")
        val = value.strip().lower()
        synonyms = {
            "awful": "difficult",
            "terrible": "difficult",
            "hard": "difficult",
            "bad": "low",
            "down": "low",
            "sad": "low",
            "fine": "okay",
            "ok": "okay",
            "meh": "okay",
            "well": "good",
            "happy": "good",
            "amazing": "great",
            "excellent": "great",
        }
        if val in synonyms:
            return cls(synonyms[val])
        for member in cls:
            if member.value == val:
                return member
        return super()._missing_(val)

    @property
    def score(self) -> int:
        """Wire severity score: difficult=1 ... great=5."""
        return _MOOD_ORDER.index(self) + 1

    @classmethod
    def from_score(cls, score: int | None) -> "Mood":
        if score is None or not 1 <= score <= len(_MOOD_ORDER):
            return cls.okay
        return _MOOD_ORDER[score - 1]


_MOOD_ORDER = list(Mood)


def normalize_tag(text: str) -> str:
    """``"Severe Headache "`` -> ``"severe_headache"``."""
    return re.sub(r"[\s\-]+", "_", text.strip().lower())


class SymptomTag(str, Enum):
    """Closed check-in taxonomy. ``unknown`` stands in for anything else."""

    # physical
    fatigue = "fatigue"
    nausea = "nausea"
    headache = "headache"
    back_pain = "back_pain"
    cramping = "cramping"
    swelling = "swelling"
    breast_tenderness = "breast_tenderness"
    # digestive
    food_cravings = "food_cravings"
    food_aversion = "food_aversion"
    heartburn = "heartburn"
    constipation = "constipation"
    bloating = "bloating"
    # emotional
    mood_swings = "mood_swings"
    anxiety = "anxiety"
    irritability = "irritability"
    crying_spells = "crying_spells"
    # sleep
    insomnia = "insomnia"
    vivid_dreams = "vivid_dreams"
    frequent_urination = "frequent_urination"
    # concerning
    severe_headache = "severe_headache"
    vision_changes = "vision_changes"
    severe_abdominal_pain = "severe_abdominal_pain"
    heavy_bleeding = "heavy_bleeding"
    no_fetal_movement = "no_fetal_movement"
    persistent_vomiting = "persistent_vomiting"
    high_fever = "high_fever"
    chest_pain = "chest_pain"

    unknown = "unknown"

    @classmethod
    def parse(cls, value: "str | SymptomTag") -> "SymptomTag":
        """Map raw text onto the taxonomy; never raises."""
        if isinstance(value, SymptomTag):
            return value
        if not isinstance(value, str):
            return cls.unknown
        try:
            return cls(normalize_tag(value))
        except ValueError:
            return cls.unknown


class MaternalStage(str, Enum):
    pre_pregnancy = "pre-pregnancy"
    pregnancy = "pregnancy"
    postpartum = "postpartum"
    unset = "unset"

    @classmethod
    def _missing_(cls, value: object) -> "MaternalStage":
        if value is None or value == "":
            return cls.unset
        if isinstance(value, str):
            val = value.strip().lower().replace("_", "-")
            for member in cls:
                if member.value == val:
                    return member
        return super()._missing_(value)


class RiskLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class ContentStage(str, Enum):
    pre_pregnancy = "pre-pregnancy"
    pregnancy = "pregnancy"
    postpartum = "postpartum"
    all = "all"


class ContentCategory(str, Enum):
    nutrition = "nutrition"
    exercise = "exercise"
    mental_health = "mental-health"
    baby_development = "baby-development"
    self_care = "self-care"


class AppointmentCategory(str, Enum):
    checkup = "checkup"
    ultrasound = "ultrasound"
    blood_test = "blood-test"
    consultation = "consultation"
    other = "other"


class AlertSeverity(str, Enum):
    none = "none"
    moderate = "moderate"
    severe = "severe"


_DEF_TZ = ZoneInfo("UTC")


def _to_utc(dt: datetime) -> datetime:
    """Ensure a datetime is timezone-aware and converted to UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_DEF_TZ)
    return dt.astimezone(_DEF_TZ)


def _utcnow() -> datetime:
    return datetime.now(_DEF_TZ)


def parse_datetime_text(text: str) -> datetime:
    """dateutil ``parse``, with out-of-range values reported as ``ValueError``."""
    try:
        return parse(text)
    except OverflowError as exc:
        raise ValueError(f"Date out of range: {text!r}") from exc


def natural_language_to_datetime(text: str, user_tz: str | None = "UTC") -> datetime:
    """Convert simple check-in phrases ("this morning", "last night") to a UTC datetime."""
    tz: ZoneInfo
    try:
        tz = ZoneInfo(user_tz or "UTC")
    except Exception:
        tz = _DEF_TZ

    match = re.search(r"\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}", text)
    if match:
        dt = parse_datetime_text(match.group(0))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=tz)
    else:
        t = text.strip().lower()
        now = datetime.now(tz)
        today = now.date()
        if "this morning" in t:
            dt = datetime.combine(today, time(8, 0), tzinfo=tz)
        elif "this afternoon" in t:
            dt = datetime.combine(today, time(15, 0), tzinfo=tz)
        elif "tonight" in t or "this evening" in t:
            dt = datetime.combine(today, time(20, 0), tzinfo=tz)
        elif "last night" in t:
            dt = datetime.combine(today - timedelta(days=1), time(22, 0), tzinfo=tz)
        elif "yesterday" in t:
            dt = datetime.combine(today - timedelta(days=1), time(12, 0), tzinfo=tz)
        elif "now" in t or "today" in t:
            dt = now
        else:
            dt = parse_datetime_text(t)
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=tz)
    return dt.astimezone(_DEF_TZ)


def _parse_when(v: datetime | str) -> datetime:
    if isinstance(v, str):
        return natural_language_to_datetime(v)
    return _to_utc(v)


class SymptomEntry(BaseModel):
    """One check-in: mood plus any symptom tags, for a single logged day."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    owner_id: str
    logged_at: datetime = Field(default_factory=_utcnow)
    symptom_tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    mood: Mood

    @field_validator("logged_at", mode="before")
    def _parse_logged_at(cls, v: datetime | str) -> datetime:
        return _parse_when(v)

    @field_validator("symptom_tags", mode="before")
    def _parse_tags(cls, v: str | List[str] | None) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        seen: List[str] = []
        for item in v:
            tag = normalize_tag(str(item.value if isinstance(item, SymptomTag) else item))
            if tag and tag not in seen:
                seen.append(tag)
        return seen

    @field_validator("notes", mode="before")
    def _blank_notes(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @property
    def tags(self) -> List[SymptomTag]:
        return [SymptomTag.parse(t) for t in self.symptom_tags]


class Appointment(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    owner_id: str
    title: str
    scheduled_date: date
    scheduled_time: time
    category: AppointmentCategory = AppointmentCategory.checkup
    notes: Optional[str] = None
    completed: bool = False

    @field_validator("scheduled_time", mode="before")
    def _parse_time(cls, v: time | str) -> time:
        if isinstance(v, str):
            return parse_datetime_text(v).time()
        return v

    @property
    def scheduled_at(self) -> datetime:
        """Date and time combined into one sortable (wall-clock) instant."""
        return datetime.combine(self.scheduled_date, self.scheduled_time.replace(tzinfo=None))


class AppointmentUpdate(BaseModel):
    """Partial appointment edit; only the fields that are set are applied."""

    title: Optional[str] = None
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[time] = None
    category: Optional[AppointmentCategory] = None
    notes: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator("scheduled_time", mode="before")
    def _parse_time(cls, v: time | str | None) -> time | None:
        if isinstance(v, str):
            return parse_datetime_text(v).time()
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class EmergencyContact(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    owner_id: str
    contact_name: str
    contact_number: str
    relation: Optional[str] = None


class Profile(BaseModel):
    id: str
    display_name: str = ""
    email: Optional[str] = None
    maternal_stage: MaternalStage = MaternalStage.unset
    gestational_week: Optional[int] = Field(default=None, ge=1, le=42)
    risk_level: RiskLevel = RiskLevel.low
    age: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _week_only_in_pregnancy(self) -> "Profile":
        if self.gestational_week is not None and self.maternal_stage is not MaternalStage.pregnancy:
            raise ValueError("gestational_week is only meaningful when maternal_stage is pregnancy")
        return self


class EducationalItem(BaseModel):
    id: str
    title: str
    description: str
    applicable_stage: ContentStage
    week_range: Optional[Tuple[int, int]] = None
    category: ContentCategory
    icon: str

    @model_validator(mode="after")
    def _check_week_range(self) -> "EducationalItem":
        if self.week_range is None:
            return self
        if self.applicable_stage is not ContentStage.pregnancy:
            raise ValueError("week_range only applies to pregnancy content")
        low, high = self.week_range
        if low > high:
            raise ValueError("week_range low must be <= high")
        return self


class AuthSession(BaseModel):
    token: str
    user_id: str
    email: str
    created_at: datetime = Field(default_factory=_utcnow)


class SafetyAlertResult(BaseModel):
    triggered: bool = False
    severity: AlertSeverity = AlertSeverity.none
    message: str = ""
    matched_tags: List[str] = Field(default_factory=list)
