from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Optional

from care.schema import AuthSession, Profile


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CareContext:
    """Who is signed in and what time it is, handed to every store and rule call."""

    session: Optional[AuthSession] = None
    profile: Optional[Profile] = None
    clock: Callable[[], datetime] = field(default=_utcnow)

    @property
    def signed_in(self) -> bool:
        return self.session is not None

    @property
    def owner_id(self) -> Optional[str]:
        return self.session.user_id if self.session else None

    def now(self) -> datetime:
        now = self.clock()
        return now if now.tzinfo else now.replace(tzinfo=timezone.utc)

    def today(self) -> date:
        return self.now().date()
