"""
Per-user snapshot of check-ins, appointments and emergency contacts.

Every mutation awaits the remote write first and only then touches the
snapshot, so a failed or timed-out write leaves local state exactly as it was.
Reads are pure projections of the snapshot through the rule engine and never
hit the remote store.
"""
from __future__ import annotations

import asyncio
import logging
import os
from typing import Callable, List, Optional

from care import mapping
from care.alerts import classify_safety_alert
from care.content import select_educational_content
from care.context import CareContext
from care.errors import AuthError, RecordNotFound, RemoteReadError, RemoteWriteError
from care.queries import past_appointments, recent_symptoms, upcoming_appointments
from care.schema import (
    Appointment,
    AppointmentUpdate,
    EducationalItem,
    EmergencyContact,
    SafetyAlertResult,
    SymptomEntry,
)
from db import repository
from db.repository import RecordMissing, RemoteStoreError

logger = logging.getLogger(__name__)


def _default_timeout() -> float:
    try:
        return float(os.getenv("MATRI_REMOTE_TIMEOUT", "10"))
    except ValueError:
        return 10.0


class HealthRecordStore:
    def __init__(self, context: CareContext, remote=repository, timeout: float | None = None):
        self.context = context
        self._remote = remote
        self.timeout = timeout if timeout is not None else _default_timeout()
        self._symptom_rows: List[dict] = []
        self._appointments: List[Appointment] = []
        self._contacts: List[EmergencyContact] = []
        self.load_error: Optional[RemoteReadError] = None
        self.is_loading = False

    # ---------- remote plumbing ------------------------------------

    async def _call(self, fn: Callable, *args):
        return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=self.timeout)

    async def _write(self, action: str, fn: Callable, *args):
        try:
            return await self._call(fn, *args)
        except RecordMissing as exc:
            raise RecordNotFound(f"That record no longer exists ({action}).") from exc
        except asyncio.TimeoutError as exc:
            logger.error("Remote %s timed out after %ss", action, self.timeout)
            raise RemoteWriteError("The server took too long to respond. Please try again.") from exc
        except RemoteStoreError as exc:
            logger.error("Error on remote %s: %s", action, exc)
            raise RemoteWriteError("We couldn't save that. Please try again.") from exc

    def _owner(self) -> str:
        owner = self.context.owner_id
        if owner is None:
            raise AuthError("Please sign in first")
        return owner

    # ---------- loading --------------------------------------------

    async def load(self) -> None:
        """Fetch everything the signed-in user owns into the snapshot.

        Without a session the snapshot is simply emptied. A failed fetch is
        logged, leaves an empty snapshot and is recorded on ``load_error``;
        nothing retries it.
        """
        self._symptom_rows, self._appointments, self._contacts = [], [], []
        self.load_error = None
        owner = self.context.owner_id
        if owner is None:
            return

        self.is_loading = True
        try:
            symptom_rows = await self._call(self._remote.list_by_owner, mapping.SYMPTOMS_TABLE, owner)
            appointment_rows = await self._call(self._remote.list_by_owner, mapping.APPOINTMENTS_TABLE, owner)
            contact_rows = await self._call(self._remote.list_by_owner, mapping.CONTACTS_TABLE, owner)
        except (RemoteStoreError, asyncio.TimeoutError) as exc:
            logger.error("Error fetching user data: %s", exc)
            self.load_error = RemoteReadError("We couldn't load your records right now.")
            return
        finally:
            self.is_loading = False

        self._symptom_rows = list(symptom_rows)
        self._appointments = [mapping.row_to_appointment(r) for r in appointment_rows]
        self._contacts = [mapping.row_to_contact(r) for r in contact_rows]
        logger.info(
            "Loaded %d check-in rows, %d appointments, %d contacts for %s",
            len(self._symptom_rows),
            len(self._appointments),
            len(self._contacts),
            owner,
        )

    # ---------- snapshot -------------------------------------------

    @property
    def symptom_entries(self) -> List[SymptomEntry]:
        return mapping.rows_to_symptom_entries(self._symptom_rows)

    @property
    def appointments(self) -> List[Appointment]:
        return sorted(self._appointments, key=lambda a: (a.scheduled_at, a.id))

    @property
    def emergency_contacts(self) -> List[EmergencyContact]:
        return list(self._contacts)

    # ---------- mutations ------------------------------------------

    async def add_symptom_entry(self, entry: SymptomEntry) -> SymptomEntry:
        """Persist a check-in (all of its rows in one write) and return the day's entry."""
        owner = self._owner()
        entry = entry.model_copy(update={"owner_id": owner})
        rows = await self._write(
            "check-in", self._remote.insert_many, mapping.SYMPTOMS_TABLE, mapping.symptom_entry_to_rows(entry)
        )
        self._symptom_rows.extend(rows)
        day = entry.logged_at.date()
        for stored in self.symptom_entries:
            if stored.logged_at.date() == day:
                return stored
        return entry

    async def add_appointment(self, appointment: Appointment) -> Appointment:
        owner = self._owner()
        appointment = appointment.model_copy(update={"owner_id": owner})
        row = await self._write(
            "appointment insert", self._remote.insert, mapping.APPOINTMENTS_TABLE, mapping.appointment_to_row(appointment)
        )
        stored = mapping.row_to_appointment(row)
        self._appointments.append(stored)
        return stored

    async def update_appointment(self, appointment_id: str, update: AppointmentUpdate) -> Appointment:
        self._owner()
        existing = self._find_appointment(appointment_id)
        values = mapping.appointment_update_to_row(update, existing)
        if values:
            row = await self._write(
                "appointment update", self._remote.update_by_id, mapping.APPOINTMENTS_TABLE, appointment_id, values
            )
            updated = mapping.row_to_appointment(row)
        else:
            updated = existing
        self._appointments = [updated if a.id == appointment_id else a for a in self._appointments]
        return updated

    async def delete_appointment(self, appointment_id: str) -> None:
        self._owner()
        self._find_appointment(appointment_id)
        await self._write("appointment delete", self._remote.delete_by_id, mapping.APPOINTMENTS_TABLE, appointment_id)
        self._appointments = [a for a in self._appointments if a.id != appointment_id]

    async def add_emergency_contact(self, contact: EmergencyContact) -> EmergencyContact:
        owner = self._owner()
        contact = contact.model_copy(update={"owner_id": owner})
        row = await self._write(
            "contact insert", self._remote.insert, mapping.CONTACTS_TABLE, mapping.contact_to_row(contact)
        )
        stored = mapping.row_to_contact(row)
        self._contacts.append(stored)
        return stored

    async def delete_emergency_contact(self, contact_id: str) -> None:
        self._owner()
        if not any(c.id == contact_id for c in self._contacts):
            raise RecordNotFound("That contact no longer exists.")
        await self._write("contact delete", self._remote.delete_by_id, mapping.CONTACTS_TABLE, contact_id)
        self._contacts = [c for c in self._contacts if c.id != contact_id]

    def _find_appointment(self, appointment_id: str) -> Appointment:
        for appt in self._appointments:
            if appt.id == appointment_id:
                return appt
        raise RecordNotFound("That appointment no longer exists.")

    # ---------- rule-engine reads ----------------------------------

    def recent_symptoms(self, days: float = 7) -> List[SymptomEntry]:
        return recent_symptoms(self.symptom_entries, days=days, now=self.context.now())

    def upcoming_appointments(self) -> List[Appointment]:
        return upcoming_appointments(self._appointments, today=self.context.today())

    def past_appointments(self) -> List[Appointment]:
        return past_appointments(self._appointments, today=self.context.today())

    def safety_alert(self) -> SafetyAlertResult:
        return classify_safety_alert(self.symptom_entries, now=self.context.now())

    def educational_content(self) -> List[EducationalItem]:
        return select_educational_content(self.context.profile)
