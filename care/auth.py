"""
Auth/session collaborator: accounts, bearer sessions and the user's profile.

Accounts and sessions live in the same store as the health records
(``auth_accounts`` / ``auth_sessions``); the profile row in ``users_profile``
shares the account id.
"""
from __future__ import annotations

import hashlib
import logging
import secrets
from typing import Any, Callable, List, Optional

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from care import mapping
from care.context import CareContext
from care.errors import AuthError, RemoteWriteError, ValidationError
from care.schema import AuthSession, MaternalStage, Profile
from db import repository
from db.repository import DuplicateRecord, RemoteStoreError

logger = logging.getLogger(__name__)

ACCOUNTS_TABLE = "auth_accounts"
SESSIONS_TABLE = "auth_sessions"

MIN_PASSWORD_LENGTH = 6
_EMAIL = TypeAdapter(EmailStr)
_PBKDF2_ROUNDS = 120_000

DUPLICATE_EMAIL_MESSAGE = "An account with this email already exists"
INVALID_CREDENTIALS_MESSAGE = "Invalid login credentials"
GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again later."

SessionListener = Callable[[Optional[AuthSession]], None]

PROFILE_FIELDS = {"display_name", "age", "gestational_week", "risk_level", "maternal_stage"}


def hash_password(password: str, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), _PBKDF2_ROUNDS)
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    salt, _, _digest = stored.partition("$")
    return secrets.compare_digest(hash_password(password, salt), stored)


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class AuthService:
    def __init__(self, remote=repository):
        self._remote = remote
        self._session: Optional[AuthSession] = None
        self._listeners: List[SessionListener] = []

    # ---------- session observers ----------------------------------

    @property
    def current_session(self) -> Optional[AuthSession]:
        return self._session

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_session(self, session: Optional[AuthSession]) -> None:
        self._session = session
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception:
                logger.exception("Session listener failed")

    # ---------- sign up / in / out ---------------------------------

    def sign_up(self, email: str, password: str, display_name: str) -> AuthSession:
        try:
            email = _normalize_email(_EMAIL.validate_python(_normalize_email(email)))
        except PydanticValidationError as exc:
            raise AuthError("Unable to validate email address: invalid format") from exc
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password should be at least {MIN_PASSWORD_LENGTH} characters")

        try:
            if self._remote.find_one(ACCOUNTS_TABLE, email=email):
                raise AuthError(DUPLICATE_EMAIL_MESSAGE)
            account = self._remote.insert(
                ACCOUNTS_TABLE, {"email": email, "password_hash": hash_password(password)}
            )
            self._remote.insert(
                mapping.PROFILES_TABLE,
                {"id": account["id"], "name": display_name.strip(), "risk_level": "low"},
            )
        except DuplicateRecord as exc:
            raise AuthError(DUPLICATE_EMAIL_MESSAGE) from exc
        except RemoteStoreError as exc:
            logger.error("Sign-up failed for %s: %s", email, exc)
            raise AuthError(GENERIC_FAILURE_MESSAGE) from exc

        logger.info("Created account %s", account["id"])
        return self._open_session(account)

    def sign_in(self, email: str, password: str) -> AuthSession:
        email = _normalize_email(email)
        try:
            account = self._remote.find_one(ACCOUNTS_TABLE, email=email)
        except RemoteStoreError as exc:
            logger.error("Sign-in lookup failed: %s", exc)
            raise AuthError(GENERIC_FAILURE_MESSAGE) from exc
        if account is None or not verify_password(password or "", account["password_hash"]):
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)
        return self._open_session(account)

    def _open_session(self, account: dict) -> AuthSession:
        token = secrets.token_urlsafe(32)
        try:
            row = self._remote.insert(SESSIONS_TABLE, {"token": token, "user_id": account["id"]})
        except RemoteStoreError as exc:
            logger.error("Could not open session for %s: %s", account["id"], exc)
            raise AuthError(GENERIC_FAILURE_MESSAGE) from exc
        session = AuthSession(
            token=token,
            user_id=account["id"],
            email=account["email"],
            created_at=row["created_at"],
        )
        self._set_session(session)
        return session

    def sign_out(self, token: str | None = None) -> None:
        """End ``token``'s session (the current one by default)."""
        token = token or (self._session.token if self._session else None)
        if token is None:
            return
        try:
            self._remote.delete_by_id(SESSIONS_TABLE, token)
        except RemoteStoreError as exc:
            # the local session ends regardless
            logger.warning("Could not revoke session remotely: %s", exc)
        if self._session and self._session.token == token:
            self._set_session(None)

    def resolve(self, token: str) -> Optional[AuthSession]:
        """Look up the session behind a bearer ``token``."""
        if not token:
            return None
        row = self._remote.get_by_id(SESSIONS_TABLE, token)
        if row is None:
            return None
        account = self._remote.get_by_id(ACCOUNTS_TABLE, row["user_id"])
        if account is None:
            return None
        return AuthSession(
            token=token,
            user_id=account["id"],
            email=account["email"],
            created_at=row["created_at"],
        )

    # ---------- profile --------------------------------------------

    def fetch_profile(self, session: Optional[AuthSession]) -> Optional[Profile]:
        if session is None:
            return None
        try:
            row = self._remote.get_by_id(mapping.PROFILES_TABLE, session.user_id)
        except RemoteStoreError as exc:
            logger.error("Error fetching user profile: %s", exc)
            return None
        if row is None:
            return None
        return mapping.row_to_profile(row, email=session.email)

    def update_profile(self, session: Optional[AuthSession], **fields: Any) -> Profile:
        """Apply profile edits (name, age, stage, week, risk) and persist them.

        Moving to a stage other than pregnancy clears the gestational week
        unless a week is given explicitly.
        """
        if session is None:
            raise AuthError("Please sign in first")
        unknown = set(fields) - PROFILE_FIELDS
        if unknown:
            raise ValidationError("Unknown profile fields", ", ".join(sorted(unknown)))

        try:
            row = self._remote.get_by_id(mapping.PROFILES_TABLE, session.user_id)
        except RemoteStoreError as exc:
            logger.error("Error fetching profile before update: %s", exc)
            raise RemoteWriteError("Could not save your profile. Please try again.") from exc
        if row is None:
            current = Profile(id=session.user_id, email=session.email)
        else:
            current = mapping.row_to_profile(row, email=session.email)
        merged = current.model_dump()
        merged.update(fields)
        try:
            if (
                "maternal_stage" in fields
                and "gestational_week" not in fields
                and MaternalStage(fields["maternal_stage"]) is not MaternalStage.pregnancy
            ):
                merged["gestational_week"] = None
            updated = Profile(**merged)
        except (PydanticValidationError, ValueError) as exc:
            raise ValidationError("Please check your profile details", str(exc)) from exc

        values = mapping.profile_to_row(updated)
        values.pop("id")
        try:
            if row is None:
                self._remote.insert(mapping.PROFILES_TABLE, {"id": session.user_id, **values})
            else:
                self._remote.update_by_id(mapping.PROFILES_TABLE, session.user_id, values)
        except RemoteStoreError as exc:
            logger.error("Error updating profile: %s", exc)
            raise RemoteWriteError("Could not save your profile. Please try again.") from exc
        return updated

    def context(self, session: Optional[AuthSession] = None, clock=None) -> CareContext:
        """Build a :class:`CareContext` for ``session`` (the current one by default)."""
        session = session or self._session
        ctx = CareContext(session=session, profile=self.fetch_profile(session))
        if clock is not None:
            ctx.clock = clock
        return ctx
