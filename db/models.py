"""
ORM rows for the hosted store's wire schema.

Column names follow the backend tables (``symptoms_log``, ``appointments`` ...);
translation to the in-memory models lives in :mod:`care.mapping`.
"""
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)

from db.engine import Base


def _uuid() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuthAccountORM(Base):
    __tablename__ = "auth_accounts"

    id = Column(String, primary_key=True, default=_uuid)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class AuthSessionORM(Base):
    __tablename__ = "auth_sessions"

    token = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("auth_accounts.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class UserProfileORM(Base):
    __tablename__ = "users_profile"

    id = Column(String, primary_key=True)
    name = Column(String)
    age = Column(Integer)
    pregnancy_week = Column(Integer)
    risk_level = Column(String, default="low")
    maternal_stage = Column(String)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class SymptomLogORM(Base):
    __tablename__ = "symptoms_log"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("users_profile.id"), nullable=False, index=True)
    symptom_type = Column(String, nullable=False)
    severity = Column(Integer)
    notes = Column(Text)
    logged_date = Column(Date, index=True)
    logged_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class AppointmentORM(Base):
    __tablename__ = "appointments"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("users_profile.id"), nullable=False, index=True)
    doctor_name = Column(String)
    hospital = Column(String)
    # wall-clock instant, stored without tz so date and time read back unchanged
    appointment_date = Column(DateTime, nullable=False)
    category = Column(String)
    notes = Column(Text)
    status = Column(String, default="upcoming")
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class EmergencyContactORM(Base):
    __tablename__ = "emergency_contacts"

    id = Column(String, primary_key=True, default=_uuid)
    user_id = Column(String, ForeignKey("users_profile.id"), nullable=False, index=True)
    contact_name = Column(String, nullable=False)
    contact_number = Column(String, nullable=False)
    relation = Column(String)


TABLES = {
    model.__tablename__: model
    for model in (
        AuthAccountORM,
        AuthSessionORM,
        UserProfileORM,
        SymptomLogORM,
        AppointmentORM,
        EmergencyContactORM,
    )
}
