# server/main.py
from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

import dateparser
from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from care import errors, forms
from care.auth import AuthService
from care.catalog import CATALOG_VERSION
from care.dashboard import build_dashboard
from care.resources import EMERGENCY_RESOURCES, WARNING_SIGNS
from care.schema import (
    AppointmentCategory,
    AppointmentUpdate,
    AuthSession,
    MaternalStage,
    RiskLevel,
)
from care.store import HealthRecordStore
from care.taxonomy import SYMPTOM_GROUPS, label_for

logger = logging.getLogger(__name__)

app = FastAPI(title="MATRI Companion API", version="0.1.0")


# --- CORS (configurable) ---
def _parse_cors_origins(env_val: str | None):
    """
    Parse comma-separated origins. If env is None or '*', return ['*'] (dev).
    Otherwise, return a cleaned list like ['https://app.example.com', 'https://example.com'].
    """
    if not env_val or env_val.strip() == "*":
        return ["*"]
    parts = [p.strip() for p in env_val.split(",")]
    return [p for p in parts if p] or ["*"]


_CORS_ORIGINS = _parse_cors_origins(os.getenv("CORS_ORIGINS"))

app.add_middleware(
    CORSMiddleware,
    allow_origins=_CORS_ORIGINS,
    allow_credentials=False,  # bearer tokens, no cookies
    allow_methods=["*"],
    allow_headers=["*"],
)

if _CORS_ORIGINS == ["*"]:
    logger.warning("CORS is permissive ('*'). This is fine for dev but restrict in production via CORS_ORIGINS.")
else:
    logger.info("CORS allowed origins: %s", _CORS_ORIGINS)


auth_service = AuthService()
security = HTTPBearer(auto_error=False)


def _clock() -> datetime:
    return datetime.now(timezone.utc)


# --- Error mapping ---
@app.exception_handler(errors.ValidationError)
async def _validation_error(request: Request, exc: errors.ValidationError):
    return JSONResponse(
        status_code=422,
        content={"title": exc.title, "description": exc.description, "field": exc.field},
    )


@app.exception_handler(errors.AuthError)
async def _auth_error(request: Request, exc: errors.AuthError):
    return JSONResponse(status_code=401, content={"detail": exc.message})


@app.exception_handler(errors.RecordNotFound)
async def _not_found(request: Request, exc: errors.RecordNotFound):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(errors.RemoteWriteError)
async def _remote_write_error(request: Request, exc: errors.RemoteWriteError):
    return JSONResponse(status_code=502, content={"detail": exc.message})


# --- Dependencies ---
def current_session(creds: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> AuthSession:
    """Resolve the bearer token to a session or answer 401."""
    if creds is None or creds.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    session = auth_service.resolve(creds.credentials)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return session


async def current_store(session: AuthSession = Depends(current_session)) -> HealthRecordStore:
    store = HealthRecordStore(auth_service.context(session, clock=_clock))
    await store.load()
    return store


# --- Helpers ---
def _ensure_aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def _parse_since(value: Optional[str]) -> Optional[datetime]:
    """Parse ``since`` ("2024-06-01", "3 days ago" ...) into an aware datetime."""
    if not value:
        return None
    dt = dateparser.parse(value, settings={"TIMEZONE": "UTC", "RETURN_AS_TIMEZONE_AWARE": True})
    if not dt:
        raise HTTPException(status_code=400, detail="Invalid 'since' parameter")
    return _ensure_aware(dt)


# --- Request bodies ---
class SignUpRequest(BaseModel):
    email: str
    password: str
    display_name: str


class SignInRequest(BaseModel):
    email: str
    password: str


class ProfilePatch(BaseModel):
    display_name: Optional[str] = None
    age: Optional[int] = None
    maternal_stage: Optional[MaternalStage] = None
    gestational_week: Optional[int] = None
    risk_level: Optional[RiskLevel] = None


class CheckInRequest(BaseModel):
    mood: Optional[str] = None
    symptoms: List[str] = []
    notes: Optional[str] = None
    logged_at: Optional[str] = None


class AppointmentRequest(BaseModel):
    title: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    category: AppointmentCategory = AppointmentCategory.checkup
    notes: Optional[str] = None


class AppointmentPatch(BaseModel):
    title: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    category: Optional[AppointmentCategory] = None
    notes: Optional[str] = None
    completed: Optional[bool] = None


class ContactRequest(BaseModel):
    contact_name: Optional[str] = None
    contact_number: Optional[str] = None
    relation: Optional[str] = None


def _session_payload(session: AuthSession) -> dict:
    return {
        "token": session.token,
        "user_id": session.user_id,
        "email": session.email,
        "profile": auth_service.fetch_profile(session),
    }


# --- Routes ---
@app.get("/health")
def health():
    return {"ok": True}


@app.post("/auth/signup")
def api_sign_up(payload: SignUpRequest):
    forms.validate_sign_up(payload.email, payload.password, payload.display_name)
    try:
        session = auth_service.sign_up(payload.email, payload.password, payload.display_name)
    except errors.AuthError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc
    return _session_payload(session)


@app.post("/auth/signin")
def api_sign_in(payload: SignInRequest):
    forms.validate_sign_in(payload.email, payload.password)
    return _session_payload(auth_service.sign_in(payload.email, payload.password))


@app.post("/auth/signout", status_code=204)
def api_sign_out(session: AuthSession = Depends(current_session)):
    auth_service.sign_out(session.token)
    return Response(status_code=204)


@app.get("/profile")
def api_profile(session: AuthSession = Depends(current_session)):
    profile = auth_service.fetch_profile(session)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@app.patch("/profile")
def api_update_profile(payload: ProfilePatch, session: AuthSession = Depends(current_session)):
    return auth_service.update_profile(session, **payload.model_dump(exclude_unset=True))


@app.get("/symptoms")
def api_symptoms(
    days: float = Query(default=7, gt=0, le=365),
    since: Optional[str] = Query(default=None, description="Return check-ins since this date"),
    store: HealthRecordStore = Depends(current_store),
):
    """Recent check-ins, newest first."""
    since_dt = _parse_since(since)
    if since_dt is not None:
        days = max((store.context.now() - since_dt).total_seconds() / 86400, 0)
    return {"entries": store.recent_symptoms(days=days), "load_error": _load_error(store)}


@app.post("/symptoms", status_code=201)
async def api_check_in(payload: CheckInRequest, store: HealthRecordStore = Depends(current_store)):
    """Log a check-in and report whether it raises a safety alert."""
    entry = forms.validate_check_in(
        payload.mood,
        payload.symptoms,
        payload.notes,
        owner_id=store.context.owner_id,
        logged_at=payload.logged_at or store.context.now(),
    )
    stored = await store.add_symptom_entry(entry)
    return {"entry": stored, "alert": store.safety_alert()}


@app.get("/symptoms/taxonomy")
def api_taxonomy():
    return {
        group: [{"id": tag.value, "label": label_for(tag)} for tag in tags]
        for group, tags in SYMPTOM_GROUPS.items()
    }


@app.get("/appointments")
def api_appointments(store: HealthRecordStore = Depends(current_store)):
    return {"appointments": store.appointments, "load_error": _load_error(store)}


@app.get("/appointments/upcoming")
def api_upcoming(store: HealthRecordStore = Depends(current_store)):
    return {"appointments": store.upcoming_appointments()}


@app.get("/appointments/past")
def api_past(store: HealthRecordStore = Depends(current_store)):
    return {"appointments": store.past_appointments()}


@app.post("/appointments", status_code=201)
async def api_add_appointment(payload: AppointmentRequest, store: HealthRecordStore = Depends(current_store)):
    appointment = forms.validate_appointment(
        payload.title,
        payload.date,
        payload.time,
        payload.category,
        payload.notes,
        owner_id=store.context.owner_id,
    )
    return await store.add_appointment(appointment)


@app.patch("/appointments/{appointment_id}")
async def api_update_appointment(
    appointment_id: str,
    payload: AppointmentPatch,
    store: HealthRecordStore = Depends(current_store),
):
    changes = payload.model_dump(exclude_unset=True)
    for wire, field in (("date", "scheduled_date"), ("time", "scheduled_time")):
        if wire in changes:
            changes[field] = changes.pop(wire)
    try:
        update = AppointmentUpdate(**changes)
    except (PydanticValidationError, ValueError) as exc:
        raise errors.ValidationError("Please check the appointment details", str(exc)) from exc
    return await store.update_appointment(appointment_id, update)


@app.delete("/appointments/{appointment_id}", status_code=204)
async def api_delete_appointment(appointment_id: str, store: HealthRecordStore = Depends(current_store)):
    await store.delete_appointment(appointment_id)
    return Response(status_code=204)


@app.get("/contacts")
def api_contacts(store: HealthRecordStore = Depends(current_store)):
    return {"contacts": store.emergency_contacts, "load_error": _load_error(store)}


@app.post("/contacts", status_code=201)
async def api_add_contact(payload: ContactRequest, store: HealthRecordStore = Depends(current_store)):
    contact = forms.validate_emergency_contact(
        payload.contact_name,
        payload.contact_number,
        payload.relation,
        owner_id=store.context.owner_id,
    )
    return await store.add_emergency_contact(contact)


@app.delete("/contacts/{contact_id}", status_code=204)
async def api_delete_contact(contact_id: str, store: HealthRecordStore = Depends(current_store)):
    await store.delete_emergency_contact(contact_id)
    return Response(status_code=204)


@app.get("/alerts")
def api_alerts(store: HealthRecordStore = Depends(current_store)):
    return store.safety_alert()


@app.get("/content")
def api_content(store: HealthRecordStore = Depends(current_store)):
    return {"catalog_version": CATALOG_VERSION, "items": store.educational_content()}


@app.get("/resources")
def api_resources():
    return {"hotlines": list(EMERGENCY_RESOURCES), "warning_signs": list(WARNING_SIGNS)}


@app.get("/dashboard")
def api_dashboard(store: HealthRecordStore = Depends(current_store)):
    return build_dashboard(store)


def _load_error(store: HealthRecordStore) -> Optional[str]:
    return store.load_error.message if store.load_error else None
